"""
Tree repository for database operations.

Keeps the working tree as a single JSON document under a fixed storage key.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy import text

from treestudio.config import get_settings
from treestudio.storage.database import get_db
from treestudio.tree import TreeLoader, TreeNode

logger = logging.getLogger(__name__)


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class TreeRepository:
    """Repository for tree persistence operations."""

    def __init__(self, key: str | None = None, loader: TreeLoader | None = None):
        self.key = key or get_settings().storage_key
        self.loader = loader or TreeLoader()

    def save(self, tree: TreeNode) -> None:
        """Store ``tree``, replacing any previous value under the key."""
        value = self.loader.dumps(tree)
        updated_at = now_iso()

        with get_db() as conn:
            result = conn.execute(
                text("UPDATE kv_store SET value = :value, updated_at = :updated_at WHERE key = :key"),
                {"key": self.key, "value": value, "updated_at": updated_at},
            )
            if result.rowcount == 0:
                conn.execute(
                    text("INSERT INTO kv_store (key, value, updated_at) VALUES (:key, :value, :updated_at)"),
                    {"key": self.key, "value": value, "updated_at": updated_at},
                )

        logger.debug("Saved tree under key %r", self.key)

    def load(self) -> tuple[TreeNode, int] | None:
        """Load the stored tree.

        Returns:
            Tuple of (tree, next free id), or None if nothing is stored
        """
        with get_db() as conn:
            row = conn.execute(
                text("SELECT value FROM kv_store WHERE key = :key"),
                {"key": self.key},
            ).fetchone()

        if row is None:
            return None
        return self.loader.loads(row[0])

    def exists(self) -> bool:
        with get_db() as conn:
            row = conn.execute(
                text("SELECT 1 FROM kv_store WHERE key = :key"),
                {"key": self.key},
            ).fetchone()
        return row is not None

    def clear(self) -> bool:
        """Delete the stored tree. Returns True if something was deleted."""
        with get_db() as conn:
            result = conn.execute(
                text("DELETE FROM kv_store WHERE key = :key"),
                {"key": self.key},
            )
        return result.rowcount > 0
