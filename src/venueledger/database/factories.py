"""Database factory functions for creating database instances."""

import os
from typing import Optional

from venueledger.config import Settings, default_database_path
from venueledger.database.sqlalchemy_db import SQLAlchemyDatabase


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks VENUELEDGER_DB_PATH
            environment variable, then defaults to ~/.venueledger/venueledger.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get("VENUELEDGER_DB_PATH")

    if database_path is None:
        database_path = default_database_path()

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)


def create_database(settings: Settings) -> SQLAlchemyDatabase:
    """Create a database from settings (explicit URL wins over SQLite path)."""
    if settings.database_url:
        return SQLAlchemyDatabase(settings.database_url)
    return create_sqlite_database(settings.database_path)
