"""Tests for random code generation."""

from __future__ import annotations

import string

from ufkit.core.text import CODE_ALPHABET, generate_code


class TestAlphabet:
    def test_confusable_characters_excluded(self):
        for char in "0O1l":
            assert char not in CODE_ALPHABET

    def test_size(self):
        assert len(CODE_ALPHABET) == 62 - 4


class TestGenerateCode:
    def test_length(self):
        for length in (0, 1, 6, 32):
            assert len(generate_code(length)) == length

    def test_characters_from_alphabet(self):
        for _ in range(200):
            assert set(generate_code(12)) <= set(CODE_ALPHABET)

    def test_never_three_letters_in_a_row(self):
        for _ in range(500):
            code = generate_code(20)
            run = 0
            for char in code:
                run = 0 if char in string.digits else run + 1
                assert run <= 2, code
