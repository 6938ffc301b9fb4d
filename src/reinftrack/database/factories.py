"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from reinftrack.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks REINFTRACK_DB_PATH
            environment variable, then defaults to ~/.reinftrack/reinftrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("REINFTRACK_DB_PATH")

    if database_path is None:
        # Default to ~/.reinftrack/reinftrack.db
        home = Path.home()
        db_dir = home / ".reinftrack"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "reinftrack.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(database_url: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database from a SQLAlchemy URL.

    Falls back to the REINFTRACK_DATABASE_URL environment variable, then to
    the SQLite file chosen by create_sqlite_database.
    """
    if database_url is None:
        database_url = os.environ.get("REINFTRACK_DATABASE_URL")
    if database_url is None:
        return create_sqlite_database()
    return SQLAlchemyDatabase(database_url)
