"""Database factory functions for creating database instances."""

from pathlib import Path
from typing import Optional

from commtrack.config import Settings
from commtrack.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = ".commtrack"
DEFAULT_DB_NAME = "commtrack.db"
IN_MEMORY = ":memory:"


def default_database_path() -> Path:
    """Return ~/.commtrack/commtrack.db, creating the directory if needed."""
    db_dir = Path.home() / DEFAULT_DB_DIR
    db_dir.mkdir(exist_ok=True)
    return db_dir / DEFAULT_DB_NAME


def create_sqlite_database(
    database_path: Optional[str] = None,
    settings: Optional[Settings] = None,
) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file, or ":memory:". If None,
            uses COMMTRACK_DB_PATH from settings, then ~/.commtrack/commtrack.db
        settings: Settings to read the path from (default: environment)

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = (settings or Settings.from_env()).db_path

    if database_path == IN_MEMORY:
        return SQLAlchemyDatabase("sqlite://")

    path = Path(database_path).expanduser() if database_path else default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
