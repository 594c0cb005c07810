"""Tree persistence backed by a key-value table."""

from .database import (
    get_database_url,
    get_db,
    get_db_path,
    get_engine,
    init_db,
    reset_engine,
    set_db_path,
)
from .tree_repo import TreeRepository

__all__ = [
    "get_database_url",
    "get_db",
    "get_db_path",
    "get_engine",
    "init_db",
    "reset_engine",
    "set_db_path",
    "TreeRepository",
]
