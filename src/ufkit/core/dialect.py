"""SQL dialect abstraction for named-parameter binding.

Named parameters (``:name``) are a convenience for callers; drivers expect
their own positional style.  A ``Dialect`` says which token replaces each
occurrence, so :func:`ufkit.core.sql.bind_parameters` can turn one template
into driver-ready SQL for any backend.

Architecture::

    select * from t where a = :x and b = :x and c = :y
                              │
                              ▼
    ┌──────────┐ ┌──────────────┐ ┌──────────────┐ ┌────────┐ ┌──────────┐
    │ SQLite   │ │ PostgreSQL   │ │ asyncpg      │ │ MySQL  │ │  Oracle  │
    │ ?, ?, ?  │ │ %s, %s, %s   │ │ $1, $2, $3   │ │ %s,%s  │ │ :1, :2   │
    │ datetime │ │ NOW()        │ │ NOW()        │ │ NOW()  │ │SYSTIMEST │
    └──────────┘ └──────────────┘ └──────────────┘ └────────┘ └──────────┘

Examples:
    >>> from ufkit.core.dialect import get_dialect
    >>> d = get_dialect("oracle")
    >>> d.placeholders(3)
    ':1, :2, :3'
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ufkit.core.errors import UnknownDialectError


@runtime_checkable
class Dialect(Protocol):
    """SQL dialect contract.

    Every method returns a SQL fragment valid for the target database.
    """

    @property
    def name(self) -> str:
        """Human-readable dialect name (e.g. ``'sqlite'``)."""
        ...

    def placeholder(self, index: int) -> str:
        """Single positional placeholder (0-based index).

        ``index`` is ignored by dialects that use anonymous placeholders
        (SQLite ``?``, MySQL ``%s``) but required by numbered styles
        (asyncpg ``$1``, Oracle ``:1``).
        """
        ...

    def placeholders(self, count: int) -> str:
        """Comma-separated placeholder list."""
        ...

    def now(self) -> str:
        """SQL expression for the current timestamp."""
        ...

    def auto_increment(self) -> str:
        """DDL fragment for an auto-incrementing integer primary key."""
        ...


# =========================================================================
# Concrete Dialect Implementations
# =========================================================================


class SQLiteDialect:
    """SQLite dialect — ``?`` placeholders, ``datetime('now')``."""

    @property
    def name(self) -> str:
        return "sqlite"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "?"

    def placeholders(self, count: int) -> str:
        return ", ".join("?" for _ in range(count))

    def now(self) -> str:
        return "datetime('now')"

    def auto_increment(self) -> str:
        return "INTEGER PRIMARY KEY AUTOINCREMENT"


class PostgreSQLDialect:
    """PostgreSQL dialect — ``%s`` placeholders (psycopg), ``NOW()``."""

    @property
    def name(self) -> str:
        return "postgresql"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "%s"

    def placeholders(self, count: int) -> str:
        return ", ".join("%s" for _ in range(count))

    def now(self) -> str:
        return "NOW()"

    def auto_increment(self) -> str:
        return "SERIAL PRIMARY KEY"


class AsyncpgDialect(PostgreSQLDialect):
    """PostgreSQL through asyncpg — ``$1, $2`` numbered placeholders."""

    @property
    def name(self) -> str:
        return "asyncpg"

    def placeholder(self, index: int) -> str:
        return f"${index + 1}"

    def placeholders(self, count: int) -> str:
        return ", ".join(f"${i + 1}" for i in range(count))


class MySQLDialect:
    """MySQL dialect — ``%s`` placeholders, ``NOW()``."""

    @property
    def name(self) -> str:
        return "mysql"

    def placeholder(self, index: int) -> str:  # noqa: ARG002
        return "%s"

    def placeholders(self, count: int) -> str:
        return ", ".join("%s" for _ in range(count))

    def now(self) -> str:
        return "NOW()"

    def auto_increment(self) -> str:
        return "INTEGER PRIMARY KEY AUTO_INCREMENT"


class OracleDialect:
    """Oracle dialect — ``:1, :2`` numbered placeholders, ``SYSTIMESTAMP``."""

    @property
    def name(self) -> str:
        return "oracle"

    def placeholder(self, index: int) -> str:
        return f":{index + 1}"

    def placeholders(self, count: int) -> str:
        return ", ".join(f":{i + 1}" for i in range(count))

    def now(self) -> str:
        return "SYSTIMESTAMP"

    def auto_increment(self) -> str:
        return "NUMBER GENERATED ALWAYS AS IDENTITY PRIMARY KEY"


_DIALECTS: dict[str, Dialect] = {
    "sqlite": SQLiteDialect(),
    "postgresql": PostgreSQLDialect(),
    "postgres": PostgreSQLDialect(),
    "asyncpg": AsyncpgDialect(),
    "mysql": MySQLDialect(),
    "oracle": OracleDialect(),
}


def get_dialect(name: str) -> Dialect:
    """Return the dialect registered under *name* (case-insensitive).

    Raises:
        UnknownDialectError: If ``name`` is not recognised.
    """
    key = name.lower()
    if key not in _DIALECTS:
        raise UnknownDialectError(name, supported=sorted(set(_DIALECTS) - {"postgres"}))
    return _DIALECTS[key]


def register_dialect(name: str, dialect: Dialect) -> None:
    """Register a custom dialect implementation (e.g. a test double)."""
    _DIALECTS[name.lower()] = dialect


__all__ = [
    "Dialect",
    "SQLiteDialect",
    "PostgreSQLDialect",
    "AsyncpgDialect",
    "MySQLDialect",
    "OracleDialect",
    "get_dialect",
    "register_dialect",
]
