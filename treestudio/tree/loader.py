"""JSON/YAML tree import and JSON export."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import TypeAdapter, ValidationError

from treestudio.config import get_settings
from .identity import ensure_ids
from .schema import TreeNode, count_nodes

logger = logging.getLogger(__name__)

_tree_adapter: TypeAdapter[TreeNode] = TypeAdapter(TreeNode)

_SUFFIX_FORMATS = {
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
}


class TreeValidationError(ValueError):
    """Raised when imported data cannot be turned into a tree."""


def tree_depth(data: Any) -> int:
    """Depth of a raw tree record; a lone root has depth 1."""
    deepest = 0
    stack = [(data, 1)]
    while stack:
        record, depth = stack.pop()
        deepest = max(deepest, depth)
        if isinstance(record, dict) and isinstance(record.get("options"), list):
            stack.extend((child, depth + 1) for child in record["options"])
    return deepest


def parse_tree(data: Any, max_depth: int | None = None) -> TreeNode:
    """Validate a nested mapping into a typed tree.

    Raises:
        TreeValidationError: If the data is not a mapping, is deeper than
            ``max_depth``, or does not validate.
    """
    if not isinstance(data, dict):
        raise TreeValidationError(
            f"Tree root must be an object, got {type(data).__name__}"
        )

    if max_depth is None:
        max_depth = get_settings().max_tree_depth
    depth = tree_depth(data)
    if depth > max_depth:
        raise TreeValidationError(
            f"Tree depth {depth} exceeds the maximum of {max_depth}"
        )

    try:
        return _tree_adapter.validate_python(data)
    except ValidationError as e:
        raise TreeValidationError(f"Invalid tree: {e}") from e


def dump_tree(tree: TreeNode) -> dict[str, Any]:
    """Convert a tree back to its JSON-compatible shape."""
    return tree.model_dump(by_alias=True)


class TreeLoader:
    """Imports and exports decision trees."""

    def __init__(self, max_depth: int | None = None):
        self.max_depth = max_depth

    def load(self, data: Any) -> tuple[TreeNode, int]:
        """Import already-decoded data and backfill missing ids.

        Returns:
            Tuple of (tree, next free id)
        """
        tree, next_id = ensure_ids(parse_tree(data, self.max_depth))
        logger.debug("Imported tree with %d nodes, next id %d", count_nodes(tree), next_id)
        return tree, next_id

    def loads(self, content: str, format: str = "json") -> tuple[TreeNode, int]:
        """Import a tree from JSON or YAML text."""
        try:
            if format == "json":
                data = json.loads(content)
            elif format == "yaml":
                data = yaml.safe_load(content)
            else:
                raise TreeValidationError(f"Unsupported tree format: {format}")
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise TreeValidationError(f"Could not decode {format} tree: {e}") from e

        return self.load(data)

    def load_file(self, path: str | Path) -> tuple[TreeNode, int]:
        """Import a tree from a ``.json``, ``.yaml`` or ``.yml`` file."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Tree file not found: {path}")

        format = _SUFFIX_FORMATS.get(path.suffix.lower())
        if format is None:
            raise TreeValidationError(f"Unsupported tree file type: {path.suffix}")

        with open(path, "r", encoding="utf-8") as f:
            return self.loads(f.read(), format=format)

    def dumps(self, tree: TreeNode) -> str:
        """Export a tree as indented JSON."""
        return json.dumps(dump_tree(tree), indent=2, ensure_ascii=False)

    def save_file(self, tree: TreeNode, path: str | Path) -> Path:
        """Write a tree to ``path`` as JSON."""
        path = Path(path)
        path.write_text(self.dumps(tree), encoding="utf-8")
        return path
