"""Database layer for rojmel application."""

from rojmel.database.base import Database
from rojmel.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
