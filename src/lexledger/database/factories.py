"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from lexledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEXLEDGER_DB_PATH
            environment variable, then defaults to ~/.lexledger/lexledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("LEXLEDGER_DB_PATH")

    if database_path is None:
        # Default to ~/.lexledger/lexledger.db
        home = Path.home()
        db_dir = home / ".lexledger"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "lexledger.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(database_url: Optional[str] = None, database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database instance from a URL, falling back to SQLite.

    Args:
        database_url: Any SQLAlchemy URL. If None, checks LEXLEDGER_DATABASE_URL.
        database_path: SQLite file used when no URL is configured.

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_url is None:
        database_url = os.environ.get("LEXLEDGER_DATABASE_URL")
    if database_url:
        return SQLAlchemyDatabase(database_url)
    return create_sqlite_database(database_path=database_path)
