"""Human-friendly random codes.

Codes are built from ``0-9``, ``A-Z`` and ``a-z`` without the characters
that are easy to confuse when read aloud or typed (``0``, ``O``, ``1``,
``l``).  Any run of two letters is followed by a digit, at the start of a
code as well as after an earlier digit, so no three consecutive characters
are all letters and codes cannot spell words.
"""

from __future__ import annotations

import secrets
import string

CODE_ALPHABET = "".join(
    c for c in string.digits + string.ascii_uppercase + string.ascii_lowercase
    if c not in "0O1l"
)

_DIGITS = "".join(c for c in string.digits if c in CODE_ALPHABET)


def generate_code(length: int) -> str:
    """Return a random code of *length* characters from :data:`CODE_ALPHABET`."""
    result = []
    letters_in_row = 0
    for _ in range(length):
        if letters_in_row >= 2:
            char = secrets.choice(_DIGITS)
        else:
            char = secrets.choice(CODE_ALPHABET)
        if char in _DIGITS:
            letters_in_row = 0
        else:
            letters_in_row += 1
        result.append(char)
    return "".join(result)


__all__ = ["CODE_ALPHABET", "generate_code"]
