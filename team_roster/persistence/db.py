"""
Database connection and initialization.
"""
from __future__ import annotations

import sqlite3
from pathlib import Path

from team_roster.config import settings

from .schema import all_schema_sql


def _project_root() -> Path:
    return Path(__file__).resolve().parent.parent.parent


# Default DB path (settings.database_path, relative paths under the project root)
def _default_db_path() -> Path:
    configured = Path(settings.database_path)
    if configured.is_absolute():
        return configured
    return _project_root() / configured


_db_path: Path | None = None


def set_db_path(path: str | Path | None) -> None:
    """Set the database path. Call before first get_connection if not using default. None restores the default."""
    global _db_path
    _db_path = Path(path) if path is not None else None


def get_db_path() -> Path:
    """Return the current database path."""
    if _db_path is not None:
        return _db_path
    return _default_db_path()


def get_connection(db_path: str | Path | None = None, shared: bool = False) -> sqlite3.Connection:
    """
    Return a new SQLite connection.
    Use as context manager or ensure close() is called.
    shared=True allows use from other threads; callers must serialize access themselves.
    """
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path), check_same_thread=not shared)
    conn.row_factory = sqlite3.Row
    return conn


def init_db(db_path: str | Path | None = None) -> None:
    """Create or ensure all tables exist."""
    path = Path(db_path) if db_path else get_db_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(all_schema_sql())
        conn.commit()
    finally:
        conn.close()
