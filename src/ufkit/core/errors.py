"""
Structured error types for ufkit.

Provides a small hierarchy of typed errors that carry a category, a
structured context (SQL text, parameters, service names) and an optional
chained cause, so that failures can be logged with enough detail to be
diagnosed without re-running the query or action.

Manifesto:
    - **Typed hierarchy:** One branch per concern (database, config, execution)
    - **Rich context:** Errors carry the SQL and parameters that produced them
    - **Error chaining:** The original exception is preserved as ``cause``
    - **Cancellation is not an error:** Cancelled runs return ``False``

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────────┐
        │                          UFError                                 │
        │              (category, context, cause)                         │
        ├─────────────────────────────────────────────────────────────────┤
        │                                                                  │
        │  DatabaseError         ConfigError           ExecutionError     │
        │  (DATABASE)            (CONFIG)              (EXECUTION)        │
        │       │                    │                      │             │
        │  QueryError            ServiceNotFoundError  ActionFailedError  │
        │   └ MissingParameter   UnknownDialectError   ActionStateError   │
        │  NotFoundError                                                   │
        │  UniqueCodeExhausted                                             │
        │  DatabaseConnectionError                                         │
        └─────────────────────────────────────────────────────────────────┘

Examples:
    >>> error = NotFoundError("no row for query", sql="select 1", params={"a": 1})
    >>> error.context.sql
    'select 1'
    >>> error.to_dict()["category"]
    'DATABASE'

Guardrails:
    ❌ DON'T: Wrap errors raised by a database backend
    ✅ DO: Let backend errors propagate unchanged

    ❌ DON'T: Raise for a cancelled queue run
    ✅ DO: Return ``False`` from ``run``
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    DATABASE = "DATABASE"         # Query, binding, lookup failures
    CONFIG = "CONFIG"             # Unknown services, dialects, settings
    EXECUTION = "EXECUTION"       # Queued action failures
    VALIDATION = "VALIDATION"     # Row/field coercion failures
    INTERNAL = "INTERNAL"         # Bugs, unexpected state
    UNKNOWN = "UNKNOWN"           # Uncategorized errors


@dataclass
class ErrorContext:
    """
    Structured metadata attached to an error.

    Only fields that are set end up in :meth:`to_dict`, which keeps log
    lines short for errors that have nothing to do with SQL.

    Attributes:
        sql: SQL text that was being executed
        params: Named parameter values used with ``sql``
        service: Name of the service being resolved
        action: Description of the queued action involved
        metadata: Additional key-value pairs
    """

    sql: str | None = None
    params: Mapping[str, Any] | None = None
    service: str | None = None
    action: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result: dict[str, Any] = {}
        for key in ["sql", "service", "action"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.params is not None:
            result["params"] = dict(self.params)
        if self.metadata:
            result.update(self.metadata)
        return result


class UFError(Exception):
    """
    Base exception for all ufkit errors.

    Subclasses set ``default_category`` so callers rarely have to pass a
    category explicitly.

    Args:
        message: Human readable description
        category: Overrides ``default_category``
        context: Structured metadata, see :class:`ErrorContext`
        cause: Underlying exception, also stored as ``__cause__``
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> UFError:
        """Add context fields and return self for chaining.

        Unknown keys are stored in ``context.metadata``.
        """
        for key, value in kwargs.items():
            if key != "metadata" and hasattr(self.context, key):
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize for structured logging."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
        }
        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# Database errors
# =============================================================================


class DatabaseError(UFError):
    """Base for errors raised by the database access layer itself."""

    default_category = ErrorCategory.DATABASE


class QueryError(DatabaseError):
    """SQL text or its parameters could not be prepared."""


class MissingParameterError(QueryError):
    """A named parameter in the SQL text has no value in the mapping."""

    def __init__(self, name: str, sql: str, params: Mapping[str, Any] | None = None):
        self.name = name
        super().__init__(
            f"No value for named parameter :{name}",
            context=ErrorContext(sql=sql, params=params or {}),
        )


class NotFoundError(DatabaseError):
    """A query expected to produce a value or row produced nothing.

    Raised by the ``*_or_fail_as`` family; the optional variants return
    ``None`` instead.
    """

    def __init__(
        self,
        message: str,
        *,
        sql: str,
        params: Mapping[str, Any] | None = None,
    ):
        self.sql = sql
        self.params = dict(params or {})
        super().__init__(message, context=ErrorContext(sql=sql, params=self.params))


class UniqueCodeExhaustedError(DatabaseError):
    """No unused code was found within the allowed number of attempts."""

    def __init__(self, table: str, column: str, attempts: int):
        self.table = table
        self.column = column
        self.attempts = attempts
        super().__init__(
            f"No unique code for {table}.{column} after {attempts} attempts"
        )


class DatabaseConnectionError(DatabaseError):
    """Could not open a connection to the database."""


# =============================================================================
# Configuration errors
# =============================================================================


class ConfigError(UFError):
    """Invalid or missing configuration."""

    default_category = ErrorCategory.CONFIG


class ServiceNotFoundError(ConfigError):
    """A service was requested that was never registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Can not find service: {name}", context=ErrorContext(service=name)
        )


class UnknownDialectError(ConfigError):
    """No SQL dialect is registered under the requested name."""

    def __init__(self, name: str, supported: Sequence[str] = ()):
        self.name = name
        message = f"Unknown dialect '{name}'"
        if supported:
            message += f". Supported: {sorted(supported)}"
        super().__init__(message)


# =============================================================================
# Execution errors
# =============================================================================


class ExecutionError(UFError):
    """Base for errors raised while running queued actions."""

    default_category = ErrorCategory.EXECUTION


class ActionFailedError(ExecutionError):
    """One or more queued actions raised an exception.

    ``errors`` holds every exception collected during the run, in the
    order the actions finished; ``cause`` is the first of them.
    """

    def __init__(self, errors: Sequence[BaseException]):
        self.errors = list(errors)
        details = ", ".join(f"{type(e).__name__}: {e}" for e in self.errors)
        super().__init__(
            f"One or more actions raised an error: {details}",
            cause=self.errors[0] if self.errors else None,
        )


class ActionStateError(ExecutionError):
    """An action was used in a state that does not allow it."""


def categorize_error(error: BaseException) -> ErrorCategory:
    """Best-effort category for any exception."""
    if isinstance(error, UFError):
        return error.category
    if isinstance(error, (ValueError, TypeError)):
        return ErrorCategory.VALIDATION
    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "UFError",
    "DatabaseError",
    "QueryError",
    "MissingParameterError",
    "NotFoundError",
    "UniqueCodeExhaustedError",
    "DatabaseConnectionError",
    "ConfigError",
    "ServiceNotFoundError",
    "UnknownDialectError",
    "ExecutionError",
    "ActionFailedError",
    "ActionStateError",
    "categorize_error",
]
