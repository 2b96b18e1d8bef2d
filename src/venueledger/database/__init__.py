"""Database layer for venueledger."""

from venueledger.database.base import Database
from venueledger.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
