"""
Database connection management and initialization.

Supports both SQLite (local dev) and PostgreSQL (production) via DATABASE_URL.
"""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Generator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Connection, Engine

from treestudio.config import get_settings


# Global engine instance
_engine: Engine | None = None
_DB_PATH: Path | None = None


def get_database_url() -> str:
    """Get database URL from settings or default to SQLite.

    Handles the postgres:// URL form by converting to postgresql://.
    """
    database_url = get_settings().database_url

    if database_url:
        if database_url.startswith("postgres://"):
            database_url = database_url.replace("postgres://", "postgresql://", 1)
        return database_url

    return f"sqlite:///{get_db_path()}"


def get_db_path() -> Path:
    """Get the SQLite database file path (used when no database URL is set)."""
    global _DB_PATH
    if _DB_PATH is None:
        data_dir = Path(get_settings().data_dir)
        data_dir.mkdir(parents=True, exist_ok=True)
        _DB_PATH = data_dir / "tree_studio.db"
    return _DB_PATH


def set_db_path(path: Path | str) -> None:
    """Set a custom database path (useful for testing)."""
    global _DB_PATH
    _DB_PATH = Path(path)
    reset_engine()


def get_engine() -> Engine:
    """Get SQLAlchemy engine for database operations."""
    global _engine
    if _engine is None:
        database_url = get_database_url()

        connect_args = {}
        if database_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False

        _engine = create_engine(database_url, echo=False, connect_args=connect_args)
    return _engine


def reset_engine() -> None:
    """Dispose of and drop the cached engine."""
    global _engine
    if _engine is not None:
        _engine.dispose()
    _engine = None


@contextmanager
def get_db() -> Generator[Connection, None, None]:
    """Get a database connection inside a transaction.

    Usage:
        with get_db() as conn:
            row = conn.execute(text("SELECT value FROM kv_store")).fetchone()
    """
    engine = get_engine()
    with engine.begin() as conn:
        yield conn


def init_db() -> None:
    """Create the key-value table if it doesn't exist. Safe to call multiple times."""
    with get_db() as conn:
        conn.execute(text(_SCHEMA))


# =============================================================================
# Database Schema
# =============================================================================

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kv_store (
    key VARCHAR(255) PRIMARY KEY,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL
)
"""
