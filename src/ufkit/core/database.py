"""Backend-agnostic base class for SQL data access.

:class:`Database` implements the typed operations of
:class:`~ufkit.core.protocols.DatabaseProtocol` once, in terms of a few
primitives a backend supplies.  SQL passed to any method may use
``:name`` placeholders; binding them is the backend's job (usually via
:meth:`Database.process_sql_parameters` or
:func:`ufkit.core.sql.bind_parameters`).

Architecture::

    ┌────────────────────────────────────────────────────────────────────┐
    │                          Database[RowT]                            │
    │                                                                    │
    │  derived (implemented here)        primitives (backend supplies)   │
    │  ───────────────────────────       ─────────────────────────────   │
    │  field_as / field_or_fail_as  ──►  _field(sql, params, default)    │
    │  row_as / row_or_fail_as      ──►  _row(sql, params)               │
    │  rows_as                      ──►  _rows(sql, params)              │
    │  insert_object                ──►  insert(sql, params) -> id       │
    │  update_object / delete       ──►  update(sql, params) -> count    │
    │  get_unique_code              ──►  field_as                        │
    │                                    transaction(callback)           │
    └────────────────────────────────────────────────────────────────────┘

Usage:
    >>> class MyDatabase(Database[dict]):
    ...     async def _field(self, sql, params=None, default=None): ...
    ...     # _row, _rows, insert, update, transaction
    >>> user = await db.row_or_fail_as(
    ...     "select * from users where id = :id", {"id": 5}, row_type=User
    ... )
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable, Mapping, Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, TypeAdapter

from ufkit.core.errors import NotFoundError, UniqueCodeExhaustedError
from ufkit.core.logging import get_logger
from ufkit.core.settings import UFSettings
from ufkit.core.sql import MISSING, Substitute, process_sql_parameters
from ufkit.core.text import generate_code

logger = get_logger(__name__)

RowT = TypeVar("RowT")
T = TypeVar("T")

_FROM_SETTINGS: Any = object()


def _as_mapping(data: Any) -> dict[str, Any]:
    """Field values of a mapping, dataclass instance or pydantic model."""
    if isinstance(data, BaseModel):
        return data.model_dump()
    if dataclasses.is_dataclass(data) and not isinstance(data, type):
        return {f.name: getattr(data, f.name) for f in dataclasses.fields(data)}
    if isinstance(data, Mapping):
        return dict(data)
    raise TypeError(f"Cannot map {type(data).__name__} to columns")


def _with_value(data: Any, key: str, value: Any) -> Any:
    """Copy of *data* with *key* set to *value*.

    The copy keeps the kind of *data* when that kind has a *key* field;
    otherwise it is a plain dict of the field values plus *key*.
    """
    if isinstance(data, BaseModel):
        if key in type(data).model_fields:
            return data.model_copy(update={key: value})
    elif dataclasses.is_dataclass(data) and not isinstance(data, type):
        if any(f.name == key for f in dataclasses.fields(data)):
            return dataclasses.replace(data, **{key: value})
    return {**_as_mapping(data), key: value}


class Database(ABC, Generic[RowT]):
    """
    Base class for database implementations.

    Subclasses implement ``_field``, ``_row``, ``_rows``, ``insert``,
    ``update`` and ``transaction``; every other operation is derived.
    ``RowT`` is the row type the backend produces (``dict`` for
    :class:`~ufkit.core.adapters.sqlite.SQLiteDatabase`).

    Parameters:
        settings: Supplies defaults such as ``unique_code_max_attempts``.
    """

    def __init__(self, *, settings: UFSettings | None = None) -> None:
        self.settings = settings or UFSettings()

    # -- Primitives --------------------------------------------------------

    @abstractmethod
    async def _field(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        default: Any = None,
    ) -> Any:
        """First column of the first row, or *default* when there is no row."""
        ...

    @abstractmethod
    async def _row(self, sql: str, params: Mapping[str, Any] | None = None) -> RowT | None:
        """First row, or ``None`` when there is no row."""
        ...

    @abstractmethod
    async def _rows(self, sql: str, params: Mapping[str, Any] | None = None) -> list[RowT]:
        """All rows."""
        ...

    @abstractmethod
    async def insert(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute an insert and return the generated id (0 when none)."""
        ...

    @abstractmethod
    async def update(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute an update and return the number of affected rows."""
        ...

    @abstractmethod
    async def transaction(
        self, callback: Callable[[Database[RowT]], Awaitable[None]]
    ) -> None:
        """Await *callback* inside a transaction.

        The callback receives the database to use, which may be a different
        instance than the one ``transaction`` was called on.  Whatever the
        callback raises propagates after rollback.
        """
        ...

    # -- Conversion --------------------------------------------------------

    def convert_row(self, row: RowT, row_type: type[T] | None = None) -> Any:
        """Convert a backend row to *row_type*.

        Without a type the row is returned as is. Otherwise pydantic
        validates it, which covers models, dataclasses, TypedDicts and
        plain ``dict``.
        """
        if row_type is None:
            return row
        return TypeAdapter(row_type).validate_python(row)

    def _convert_value(self, value: Any, field_type: type[T] | None) -> Any:
        if field_type is None or value is None:
            return value
        return TypeAdapter(field_type).validate_python(value)

    def process_sql_parameters(
        self,
        sql: str,
        params: Mapping[str, Any] | None,
        substitute: Substitute,
    ) -> str:
        """See :func:`ufkit.core.sql.process_sql_parameters`."""
        return process_sql_parameters(sql, params, substitute)

    # -- Fields ------------------------------------------------------------

    async def field_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        default: Any = None,
        field_type: type[T] | None = None,
    ) -> Any:
        """Single value of the first row, or *default* when there is no row."""
        value = await self._field(sql, params, default)
        return self._convert_value(value, field_type)

    async def field_or_fail_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        field_type: type[T] | None = None,
    ) -> Any:
        """Single value of the first row.

        A row whose value is SQL ``NULL`` returns ``None``; only a query
        without rows fails.

        Raises:
            NotFoundError: The query produced no row.
        """
        value = await self._field(sql, params, MISSING)
        if value is MISSING:
            raise NotFoundError("no field for query", sql=sql, params=params)
        return self._convert_value(value, field_type)

    # -- Rows --------------------------------------------------------------

    async def row_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> Any:
        """First row converted with :meth:`convert_row`, or ``None``."""
        row = await self._row(sql, params)
        return None if row is None else self.convert_row(row, row_type)

    async def row_or_fail_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> Any:
        """First row converted with :meth:`convert_row`.

        Raises:
            NotFoundError: The query produced no row.
        """
        row = await self.row_as(sql, params, row_type)
        if row is None:
            raise NotFoundError(f"no row for query {sql}", sql=sql, params=params)
        return row

    async def rows_as(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        row_type: type[T] | None = None,
    ) -> list[Any]:
        """All rows converted with :meth:`convert_row`."""
        rows = await self._rows(sql, params)
        return [self.convert_row(row, row_type) for row in rows]

    # -- Objects -----------------------------------------------------------

    async def insert_object(
        self,
        table: str,
        data: Any,
        primary_key: str = "id",
        ignore_fields: Sequence[str] = (),
    ) -> Any:
        """Insert *data* into *table*, one column per field.

        *data* may be a mapping, a dataclass instance or a pydantic model.
        The primary key field and *ignore_fields* are skipped.  When the
        insert produced an id greater than 0, a copy of *data* with the id
        under *primary_key* is returned; otherwise *data* itself.  The copy is
        a plain dict when the dataclass or model has no *primary_key* field.
        *data* is never modified.
        """
        values = _as_mapping(data)
        columns = [
            key for key in values if key != primary_key and key not in ignore_fields
        ]
        sql = (
            f"insert into {table} ({','.join(columns)}) "
            f"values ({','.join(':' + column for column in columns)})"
        )
        new_id = await self.insert(sql, {column: values[column] for column in columns})
        logger.debug("database.insert_object", table=table, columns=len(columns), id=new_id)
        if new_id > 0:
            return _with_value(data, primary_key, new_id)
        return data

    async def update_object(
        self,
        table: str,
        primary_value: Any,
        data: Any,
        primary_key: str = "id",
        ignore_fields: Sequence[str] = (),
    ) -> None:
        """Update the row of *table* whose *primary_key* is *primary_value*.

        Every field of *data* except the primary key and *ignore_fields*
        becomes a ``set`` assignment.  With no such fields no statement is
        issued.
        """
        values = _as_mapping(data)
        columns = [
            key for key in values if key != primary_key and key not in ignore_fields
        ]
        if not columns:
            logger.debug("database.update_object_skipped", table=table)
            return
        assignments = ",".join(f"{column}=:{column}" for column in columns)
        sql = f"update {table} set {assignments} where {primary_key} = :{primary_key}"
        params = {column: values[column] for column in columns}
        params[primary_key] = primary_value
        await self.update(sql, params)

    async def delete(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        """Execute a delete; handled by :meth:`update`."""
        return await self.update(sql, params)

    # -- Codes -------------------------------------------------------------

    async def get_unique_code(
        self,
        table: str,
        column: str,
        length: int,
        max_attempts: int | None = _FROM_SETTINGS,
    ) -> str:
        """Generate codes until one does not occur in ``table.column``.

        Args:
            table: Table holding the codes.
            column: Column holding the codes.
            length: Number of characters, see :func:`ufkit.core.text.generate_code`.
            max_attempts: Codes to try before giving up; ``None`` tries
                forever. Defaults to ``settings.unique_code_max_attempts``.

        Raises:
            UniqueCodeExhaustedError: Every attempted code was taken.
        """
        if max_attempts is _FROM_SETTINGS:
            max_attempts = self.settings.unique_code_max_attempts
        sql = f"select count(*) from {table} where {column} = :code"
        attempts = 0
        while max_attempts is None or attempts < max_attempts:
            attempts += 1
            code = generate_code(length)
            if await self.field_as(sql, {"code": code}, 0) == 0:
                return code
            logger.debug("database.unique_code_taken", table=table, column=column, attempt=attempts)
        raise UniqueCodeExhaustedError(table, column, attempts)


__all__ = [
    "Database",
    "RowT",
]
