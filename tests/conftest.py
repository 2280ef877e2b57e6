"""
Shared pytest fixtures for ufkit tests.

This module provides:
- In-memory SQLite databases with a small ``users`` schema
- Settings instances isolated from the process environment
- Marker registration (``unit`` / ``integration``)

Usage:
    Fixtures are auto-discovered by pytest; request them by argument name.

    async def test_something(sqlite_db):
        await sqlite_db.insert("insert into users (name) values (:name)", {"name": "a"})
"""

from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio

from ufkit.core.adapters.sqlite import SQLiteDatabase
from ufkit.core.settings import UFSettings

USERS_SCHEMA = """
create table users (
    id integer primary key autoincrement,
    name text not null,
    email text,
    code text
);
"""


# =============================================================================
# Markers
# =============================================================================


def pytest_collection_modifyitems(config: pytest.Config, items: list[pytest.Item]) -> None:
    """Mark database-backed tests as integration, the rest as unit."""
    for item in items:
        if "sqlite" in item.path.name:
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch) -> UFSettings:
    """Settings built from defaults only."""
    for key in list(os.environ):
        if key.startswith("UFKIT_"):
            monkeypatch.delenv(key)
    return UFSettings(_env_file=None)


@pytest_asyncio.fixture
async def sqlite_db(settings: UFSettings) -> AsyncIterator[SQLiteDatabase]:
    """In-memory SQLite database with the ``users`` table."""
    db = SQLiteDatabase(":memory:", settings=settings)
    await db.execute_script(USERS_SCHEMA)
    yield db
    db.close()
