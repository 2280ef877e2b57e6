"""
Structured logging for ufkit.

Every module obtains its logger through :func:`get_logger` and logs dotted
event names with keyword fields::

    logger = get_logger(__name__)
    logger.debug("queue.action_started", index=2, concurrency=4)

Applications call :func:`configure_logging` once at startup (or
:func:`configure_logging_from_settings` with a :class:`UFSettings`).
Without configuration, structlog's defaults apply.

Architecture:
    ::

        configure_logging(level=None, json_format=None, service=None, *, settings=None)
            │
            ▼
        structlog processor chain:
          1. TimeStamper (iso)
          2. merge_contextvars
          3. add_log_level / add_logger_name
          4. StackInfoRenderer / set_exc_info
          5. service metadata
          6. ECS renames (JSON only)
          7. JSONRenderer  |  ConsoleRenderer

Examples:
    >>> from ufkit.core.logging import configure_logging, get_logger
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> get_logger(__name__).info("database.connected", path=":memory:")
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from ufkit.core.settings import UFSettings


_SERVICE_NAME = "ufkit"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Add service-level metadata to all logs."""
    event_dict.setdefault("service.name", _SERVICE_NAME)
    return event_dict


def _elasticsearch_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Rename fields to their ECS equivalents."""
    if "timestamp" in event_dict:
        event_dict["@timestamp"] = event_dict.pop("timestamp")
    if "level" in event_dict:
        event_dict["log.level"] = event_dict.pop("level")
    return event_dict


def _build_processors(json_format: bool) -> list[Processor]:
    processors: list[Processor] = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]
    if json_format:
        processors += [_elasticsearch_compatible, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(
    level: str | None = None,
    json_format: bool | None = None,
    service: str | None = None,
    *,
    settings: UFSettings | None = None,
) -> None:
    """Configure structured logging for the application.

    Explicit arguments win over *settings*; anything left unset falls back
    to the ``log_level``, ``log_json`` and ``service_name`` fields of
    *settings* (or their defaults when no settings are given).

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_format: True for JSON, False for console, None for auto (JSON if not tty)
        service: Service name to include in logs
        settings: Source of the defaults above
    """
    global _SERVICE_NAME

    level = (level or (settings.log_level if settings else "INFO")).upper()
    if json_format is None and settings is not None:
        json_format = settings.log_json
    if json_format is None:
        json_format = not sys.stdout.isatty()
    _SERVICE_NAME = service or (settings.service_name if settings else "ufkit")

    numeric_level = getattr(logging, level)
    structlog.configure(
        processors=_build_processors(json_format),
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=numeric_level)


def configure_logging_from_settings(settings: UFSettings) -> None:
    """Shorthand for ``configure_logging(settings=settings)``."""
    configure_logging(settings=settings)


def get_logger(name: str | None = None) -> Any:
    """Get a structured logger (usually ``get_logger(__name__)``)."""
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Bind context to include in all subsequent logs."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Remove specific keys from logging context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all bound context."""
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Context manager for scoped logging context.

    Example:
        with LogContext(queue="import", run_id="abc123"):
            logger.info("queue.started")
        # Context cleared here
    """

    def __init__(self, **kwargs: Any):
        self._context = kwargs

    def __enter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    def __exit__(self, *args) -> None:
        unbind_context(*self._context.keys())

    async def __aenter__(self) -> LogContext:
        bind_context(**self._context)
        return self

    async def __aexit__(self, *args) -> None:
        unbind_context(*self._context.keys())


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
