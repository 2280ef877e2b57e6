"""
Canonical protocol definitions for ufkit.

Every structural contract used across the package lives here, so that
callers can depend on shape rather than on a concrete class:

    protocols.py
    ├── DatabaseProtocol     — typed query operations (see core.database)
    ├── CancellationToken    — read-only cooperative cancellation flag
    └── Queueable            — unit of asynchronous work with progress

Any object matching a protocol works; ``isinstance`` checks are enabled
through ``@runtime_checkable``.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


# ---------------------------------------------------------------------------
# Database
# ---------------------------------------------------------------------------


@runtime_checkable
class DatabaseProtocol(Protocol):
    """
    Typed query operations over SQL with ``:name`` parameters.

    ``ufkit.core.database.Database`` implements the derived operations once
    in terms of a few primitives; backends only supply those primitives.

    Two families exist so call sites can choose optional or mandatory
    semantics: ``row_as`` returns ``None`` when nothing matched while
    ``row_or_fail_as`` raises :class:`~ufkit.core.errors.NotFoundError`.
    """

    async def field_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        default: Any = None,
        field_type: type[T] | None = None,
    ) -> Any:
        """Single value of the first row, or *default*."""
        ...

    async def field_or_fail_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        field_type: type[T] | None = None,
    ) -> Any:
        """Single value of the first row; raises when there is none."""
        ...

    async def row_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> Any:
        """First row converted to *row_type*, or ``None``."""
        ...

    async def row_or_fail_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> Any:
        """First row converted to *row_type*; raises when there is none."""
        ...

    async def rows_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> list[Any]:
        """All rows converted to *row_type*."""
        ...

    async def insert(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute an insert; returns the generated id (0 when none)."""
        ...

    async def insert_object(
        self,
        table: str,
        data: Any,
        primary_key: str = "id",
        ignore_fields: Sequence[str] = (),
    ) -> Any:
        """Insert *data* as a row; returns it with the generated id."""
        ...

    async def update(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute an update; returns the number of affected rows."""
        ...

    async def update_object(
        self,
        table: str,
        primary_value: Any,
        data: Any,
        primary_key: str = "id",
        ignore_fields: Sequence[str] = (),
    ) -> None:
        """Update the row identified by *primary_value* from *data*."""
        ...

    async def delete(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute a delete; returns the number of affected rows."""
        ...

    async def transaction(
        self, callback: Callable[[DatabaseProtocol], Awaitable[None]]
    ) -> None:
        """Run *callback* inside a transaction."""
        ...

    async def get_unique_code(self, table: str, column: str, length: int) -> str:
        """A generated code not yet present in ``table.column``."""
        ...


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


@runtime_checkable
class CancellationToken(Protocol):
    """Read-only view on a cooperative cancellation flag.

    ``is_cancellation_requested`` only ever changes from ``False`` to
    ``True``.  ``register`` runs *callback* once when cancellation is
    requested (immediately if it already was) and returns a callable that
    removes the registration.

    Consumers only rely on ``is_cancellation_requested``; tokens without
    ``register`` are polled.
    """

    @property
    def is_cancellation_requested(self) -> bool:
        ...

    def register(self, callback: Callable[[], None]) -> Callable[[], None]:
        ...


@runtime_checkable
class Queueable(Protocol):
    """A unit of asynchronous work.

    ``run`` returns ``True`` when the work completed and ``False`` when it
    failed or was cancelled.  ``progress`` is in ``[0.0, 1.0]``.
    """

    async def run(self, token: CancellationToken) -> bool:
        ...

    @property
    def progress(self) -> float:
        ...


__all__ = [
    "DatabaseProtocol",
    "CancellationToken",
    "Queueable",
]
