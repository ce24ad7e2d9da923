"""Database layer for commtrack application."""

from commtrack.database.base import Database
from commtrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
