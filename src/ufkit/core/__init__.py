"""ufkit.core -- data access and application plumbing.

Architecture::

    Layer 1 -- Errors, logging, settings
        errors.py       UFError hierarchy (category + context + cause)
        logging.py      structlog configuration, context binding
        settings.py     UFSettings (pydantic-settings, UFKIT_* env vars)

    Layer 2 -- SQL
        sql.py          named parameters (:name), binding, literal rendering
        dialect.py      placeholder styles per backend
        text.py         random short codes
        protocols.py    DatabaseProtocol, CancellationToken, Queueable

    Layer 3 -- Database
        database.py     Database base class (typed queries, object CRUD)
        adapters/       concrete backends (SQLite)

    Layer 4 -- Composition
        services.py     ServiceContainer (named providers, DI)

Backends are imported from ``ufkit.core.adapters`` so that importing the
core never opens a connection or loads a driver.
"""

from ufkit.core.database import Database
from ufkit.core.dialect import Dialect, get_dialect, register_dialect
from ufkit.core.errors import (
    ActionFailedError,
    ActionStateError,
    ConfigError,
    DatabaseConnectionError,
    DatabaseError,
    ErrorCategory,
    ErrorContext,
    ExecutionError,
    MissingParameterError,
    NotFoundError,
    QueryError,
    ServiceNotFoundError,
    UFError,
    UniqueCodeExhaustedError,
    UnknownDialectError,
    categorize_error,
)
from ufkit.core.logging import (
    LogContext,
    bind_context,
    clear_context,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from ufkit.core.protocols import CancellationToken, DatabaseProtocol, Queueable
from ufkit.core.services import ServiceContainer
from ufkit.core.settings import UFSettings
from ufkit.core.sql import MISSING, bind_parameters, process_sql_parameters
from ufkit.core.text import CODE_ALPHABET, generate_code

__all__ = [
    # database
    "Database",
    "DatabaseProtocol",
    "Dialect",
    "get_dialect",
    "register_dialect",
    # sql
    "MISSING",
    "bind_parameters",
    "process_sql_parameters",
    "CODE_ALPHABET",
    "generate_code",
    # execution contracts
    "CancellationToken",
    "Queueable",
    # services
    "ServiceContainer",
    # errors
    "ActionFailedError",
    "ActionStateError",
    "ConfigError",
    "DatabaseConnectionError",
    "DatabaseError",
    "ErrorCategory",
    "ErrorContext",
    "ExecutionError",
    "MissingParameterError",
    "NotFoundError",
    "QueryError",
    "ServiceNotFoundError",
    "UFError",
    "UniqueCodeExhaustedError",
    "UnknownDialectError",
    "categorize_error",
    # logging / settings
    "LogContext",
    "bind_context",
    "clear_context",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "UFSettings",
]
