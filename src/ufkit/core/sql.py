"""Named-parameter processing for SQL templates.

SQL text may reference values by name using ``:name`` placeholders, where
``name`` is a run of letters, digits and underscores.  Processing is purely
lexical: the template is scanned left to right and every match is replaced
by whatever a substitution callback returns.  There is no SQL parsing, so a
colon followed by a non-identifier character is left untouched, and
repeated names are substituted independently at each occurrence.

Example::

    >>> process_sql_parameters(
    ...     "select * from t where a = :x and b = :x and c = :y",
    ...     {"x": 1, "y": 2},
    ...     lambda name, value: "?",
    ... )
    'select * from t where a = ? and b = ? and c = ?'

Two ready-made substitutions are provided: :func:`bind_parameters` rewrites
to a driver's positional style and collects the values, and
:func:`inline_parameters` renders escaped literals (for diagnostics).
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Final, TypeAlias

from ufkit.core.dialect import Dialect
from ufkit.core.errors import MissingParameterError

ParamValue: TypeAlias = (
    str | int | float | bool | None | Decimal | date | datetime | time | bytes
)
Params: TypeAlias = Mapping[str, ParamValue]

NAMED_PARAMETER: Final = re.compile(r":[A-Za-z0-9_]+")


class _Missing:
    """Marker for a name that does not occur in the parameter mapping."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Final = _Missing()

Substitute = Callable[[str, Any], str]


def process_sql_parameters(
    sql: str,
    params: Mapping[str, Any] | None,
    substitute: Substitute,
) -> str:
    """Replace every ``:name`` in *sql* with ``substitute(name, value)``.

    Args:
        sql: SQL template.
        params: Values by name. A name that is not in the mapping is passed
            to *substitute* as :data:`MISSING`.
        substitute: Called once per occurrence, in left-to-right order.

    Returns:
        The rewritten SQL text.
    """
    params = params or {}
    parts: list[str] = []
    start = 0
    for match in NAMED_PARAMETER.finditer(sql):
        name = match.group()[1:]
        parts.append(sql[start:match.start()])
        parts.append(substitute(name, params.get(name, MISSING)))
        start = match.end()
    parts.append(sql[start:])
    return "".join(parts)


def parameter_names(sql: str) -> list[str]:
    """Names referenced by *sql*, in occurrence order (duplicates kept)."""
    return [match.group()[1:] for match in NAMED_PARAMETER.finditer(sql)]


def bind_parameters(
    sql: str,
    params: Mapping[str, Any] | None,
    dialect: Dialect,
) -> tuple[str, tuple[Any, ...]]:
    """Rewrite *sql* to *dialect*'s positional placeholders.

    Each occurrence gets its own placeholder and its own slot in the
    returned value tuple, so ``:x`` used twice binds the value twice.

    Raises:
        MissingParameterError: A referenced name has no value.
    """
    values: list[Any] = []

    def _positional(name: str, value: Any) -> str:
        if value is MISSING:
            raise MissingParameterError(name, sql, params)
        placeholder = dialect.placeholder(len(values))
        values.append(value)
        return placeholder

    return process_sql_parameters(sql, params, _positional), tuple(values)


def render_literal(value: Any) -> str:
    """Render *value* as an escaped SQL literal."""
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, (datetime, date, time)):
        return f"'{value.isoformat()}'"
    if isinstance(value, (bytes, bytearray, memoryview)):
        return f"X'{bytes(value).hex()}'"
    text = str(value).replace("'", "''")
    return f"'{text}'"


def inline_parameters(sql: str, params: Mapping[str, Any] | None) -> str:
    """Substitute escaped literals for every ``:name`` in *sql*.

    Meant for logs and error messages; always prefer
    :func:`bind_parameters` when executing.

    Raises:
        MissingParameterError: A referenced name has no value.
    """

    def _literal(name: str, value: Any) -> str:
        if value is MISSING:
            raise MissingParameterError(name, sql, params)
        return render_literal(value)

    return process_sql_parameters(sql, params, _literal)


__all__ = [
    "MISSING",
    "NAMED_PARAMETER",
    "ParamValue",
    "Params",
    "Substitute",
    "bind_parameters",
    "inline_parameters",
    "parameter_names",
    "process_sql_parameters",
    "render_literal",
]
