"""Tests for UFSettings."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from ufkit.core.settings import UFSettings


class TestDefaults:
    def test_defaults(self, settings):
        assert settings.service_name == "ufkit"
        assert settings.log_level == "INFO"
        assert settings.log_json is None
        assert settings.database_path == ":memory:"
        assert settings.unique_code_length == 6
        assert settings.unique_code_max_attempts == 1000


class TestEnvironment:
    def test_env_prefix(self, monkeypatch):
        monkeypatch.setenv("UFKIT_LOG_LEVEL", "debug")
        monkeypatch.setenv("UFKIT_DATABASE_PATH", "/tmp/app.db")
        monkeypatch.setenv("UFKIT_UNIQUE_CODE_MAX_ATTEMPTS", "25")
        settings = UFSettings(_env_file=None)
        assert settings.log_level == "DEBUG"
        assert settings.database_path == "/tmp/app.db"
        assert settings.unique_code_max_attempts == 25

    def test_kwargs_override_env(self, monkeypatch):
        monkeypatch.setenv("UFKIT_SERVICE_NAME", "from-env")
        assert UFSettings(_env_file=None, service_name="explicit").service_name == "explicit"


class TestValidation:
    def test_invalid_log_level(self):
        with pytest.raises(ValidationError):
            UFSettings(_env_file=None, log_level="LOUD")

    def test_attempts_must_be_positive(self):
        with pytest.raises(ValidationError):
            UFSettings(_env_file=None, unique_code_max_attempts=0)

    def test_attempts_none_is_unbounded(self):
        assert UFSettings(_env_file=None, unique_code_max_attempts=None).unique_code_max_attempts is None

    def test_code_length_at_least_one(self):
        with pytest.raises(ValidationError):
            UFSettings(_env_file=None, unique_code_length=0)
