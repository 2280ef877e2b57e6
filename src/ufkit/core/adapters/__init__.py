"""Concrete database backends."""

from ufkit.core.adapters.sqlite import SQLiteDatabase

__all__ = ["SQLiteDatabase"]
