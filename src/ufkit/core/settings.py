"""Settings for ufkit.

``UFSettings`` collects the handful of knobs the library reads: logging
level and format, the default SQLite path, and the retry cap used by
:meth:`ufkit.core.database.Database.get_unique_code`.

Values come from keyword arguments, ``UFKIT_*`` environment variables or a
``.env`` file, in that order of precedence.

Examples:
    >>> from ufkit.core.settings import UFSettings
    >>> settings = UFSettings(unique_code_max_attempts=50)
    >>> settings.unique_code_max_attempts
    50

    Environment::

        UFKIT_LOG_LEVEL=DEBUG
        UFKIT_DATABASE_PATH=/var/lib/app/app.db
        UFKIT_UNIQUE_CODE_MAX_ATTEMPTS=200
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class UFSettings(BaseSettings):
    """Common settings for ufkit consumers.

    Fields
    ──────
    service_name             : ``service.name`` field in structured logs
    log_level                : Structlog log level
    log_json                 : JSON logs; ``None`` auto-detects (JSON if not a tty)
    database_path            : SQLite path for ``SQLiteDatabase.from_settings``
    unique_code_length       : Default length for generated unique codes
    unique_code_max_attempts : Cap for ``get_unique_code``; ``None`` is unbounded
    """

    model_config = SettingsConfigDict(
        env_prefix="UFKIT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Observability ────────────────────────────────────────────
    service_name: str = "ufkit"
    log_level: str = "INFO"
    log_json: bool | None = None

    # ── Database ─────────────────────────────────────────────────
    database_path: str = ":memory:"
    unique_code_length: int = Field(default=6, ge=1)
    unique_code_max_attempts: int | None = Field(
        default=1000,
        description="Maximum codes tried by get_unique_code; None retries forever",
    )

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        value = value.upper()
        if value not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"invalid log level: {value}")
        return value

    @field_validator("unique_code_max_attempts")
    @classmethod
    def _positive_attempts(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("unique_code_max_attempts must be >= 1 or None")
        return value


__all__ = ["UFSettings"]
