"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from rojmel.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "ROJMEL_DB_PATH"


def default_database_path() -> str:
    """Return ``~/.rojmel/rojmel.db``, creating the directory if needed."""
    db_dir = Path.home() / ".rojmel"
    db_dir.mkdir(exist_ok=True)
    return str(db_dir / "rojmel.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks
            ROJMEL_DB_PATH environment variable, then defaults to
            ~/.rojmel/rojmel.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    database_path = database_path or os.environ.get(DB_PATH_ENV) or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")
