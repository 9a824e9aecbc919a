"""Database layer for lexledger application."""

from lexledger.database.base import Database
from lexledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
