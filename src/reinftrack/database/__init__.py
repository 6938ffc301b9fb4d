"""Database layer for reinftrack application."""

from reinftrack.database.base import Database
from reinftrack.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
