"""SQLite implementation of :class:`~ufkit.core.database.Database`."""

from __future__ import annotations

import sqlite3
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from ufkit.core.database import Database
from ufkit.core.dialect import SQLiteDialect
from ufkit.core.errors import DatabaseConnectionError
from ufkit.core.logging import get_logger
from ufkit.core.settings import UFSettings
from ufkit.core.sql import bind_parameters

logger = get_logger(__name__)

Row = dict[str, Any]


class SQLiteDatabase(Database[Row]):
    """
    SQLite database using the built-in sqlite3 module.

    Named parameters are rewritten to ``?`` placeholders, one per
    occurrence.  Rows are returned as ``dict``.  Statements run on the
    calling thread, so the async methods never actually suspend; the class
    is meant for tests, tooling and single-process applications.

    Writes outside :meth:`transaction` are committed immediately.
    """

    def __init__(
        self,
        path: str = ":memory:",
        *,
        timeout: float = 5.0,
        settings: UFSettings | None = None,
    ):
        super().__init__(settings=settings)
        self.path = path
        self.dialect = SQLiteDialect()
        self._timeout = timeout
        self._conn: sqlite3.Connection | None = None
        self._in_transaction = False

    @classmethod
    def from_settings(cls, settings: UFSettings) -> SQLiteDatabase:
        """Database at ``settings.database_path``."""
        return cls(settings.database_path, settings=settings)

    # -- Lifecycle ---------------------------------------------------------

    def connect(self) -> None:
        """Open the connection (called lazily by every query)."""
        uri = self.path.startswith("file:")
        try:
            self._conn = sqlite3.connect(self.path, timeout=self._timeout, uri=uri)
        except sqlite3.Error as e:
            raise DatabaseConnectionError(
                f"Failed to connect to SQLite: {e}", cause=e
            ) from e
        self._conn.row_factory = sqlite3.Row
        self._conn.execute("PRAGMA foreign_keys = ON")
        logger.debug("sqlite.connected", path=self.path)

    def close(self) -> None:
        """Close the connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
            logger.debug("sqlite.closed", path=self.path)

    @property
    def is_connected(self) -> bool:
        return self._conn is not None

    def _connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self.connect()
        assert self._conn is not None
        return self._conn

    def __enter__(self) -> SQLiteDatabase:
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    async def __aenter__(self) -> SQLiteDatabase:
        self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    # -- Execution ---------------------------------------------------------

    def _execute(self, sql: str, params: Mapping[str, Any] | None) -> sqlite3.Cursor:
        bound_sql, values = bind_parameters(sql, params, self.dialect)
        return self._connection().execute(bound_sql, values)

    def _commit(self) -> None:
        if not self._in_transaction:
            self._connection().commit()

    async def execute_script(self, sql: str) -> None:
        """Run several ``;``-separated statements (schema setup)."""
        self._connection().executescript(sql)

    async def _field(
        self,
        sql: str,
        params: Mapping[str, Any] | None = None,
        default: Any = None,
    ) -> Any:
        row = self._execute(sql, params).fetchone()
        return default if row is None else row[0]

    async def _row(self, sql: str, params: Mapping[str, Any] | None = None) -> Row | None:
        row = self._execute(sql, params).fetchone()
        return None if row is None else dict(row)

    async def _rows(self, sql: str, params: Mapping[str, Any] | None = None) -> list[Row]:
        return [dict(row) for row in self._execute(sql, params).fetchall()]

    async def insert(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        cursor = self._execute(sql, params)
        self._commit()
        return cursor.lastrowid or 0

    async def update(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        cursor = self._execute(sql, params)
        self._commit()
        return max(cursor.rowcount, 0)

    async def transaction(
        self, callback: Callable[[Database[Row]], Awaitable[None]]
    ) -> None:
        """Commit when *callback* returns; roll back and re-raise otherwise.

        A transaction started inside another one joins it.
        """
        if self._in_transaction:
            await callback(self)
            return
        conn = self._connection()
        self._in_transaction = True
        try:
            await callback(self)
        except BaseException:
            conn.rollback()
            logger.debug("sqlite.rollback", path=self.path)
            raise
        else:
            conn.commit()
        finally:
            self._in_transaction = False


__all__ = ["SQLiteDatabase"]
