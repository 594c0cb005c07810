"""Editing operations on a decision tree.

These mirror the actions of the tree editor: start a new tree, add an option
or a link under a decision, edit node fields and delete options. Operations
mutate the tree they are given and mint ids from an explicit ``IdAllocator``.
"""

from __future__ import annotations

import logging
from typing import Any

from treestudio.config import get_settings
from .identity import IdAllocator
from .schema import (
    DecisionNode,
    InternalLinkNode,
    TerminalNode,
    TreeNode,
    walk,
)

logger = logging.getLogger(__name__)

_NODE_CLASSES: dict[str, type[DecisionNode] | type[TerminalNode] | type[InternalLinkNode]] = {
    "decision": DecisionNode,
    "terminal": TerminalNode,
    "internal_link": InternalLinkNode,
}

# Fields an editor may change, per node kind
EDITABLE_FIELDS: dict[str, set[str]] = {
    "decision": {"title", "image", "question"},
    "terminal": {"title", "image", "link"},
    "internal_link": {"title", "target_id"},
}


class NodeNotFoundError(KeyError):
    """Raised when a node id does not exist in the tree."""


class TreeEditError(ValueError):
    """Raised when an edit does not apply to the target node."""


def new_tree(allocator: IdAllocator) -> DecisionNode:
    """Create an empty tree: a blank decision root."""
    return DecisionNode(
        id=allocator.next_id(), title="", image="", question="", options=[]
    )


def _locate(tree: TreeNode, node_id: int) -> tuple[TreeNode, int]:
    """First node with ``node_id`` in depth-first order, with its depth (root is 1)."""
    stack = [(tree, 1)]
    while stack:
        node, depth = stack.pop()
        if node.id == node_id:
            return node, depth
        if isinstance(node, DecisionNode):
            stack.extend((child, depth + 1) for child in reversed(node.options))
    raise NodeNotFoundError(node_id)


def find_node(tree: TreeNode, node_id: int) -> TreeNode:
    """Find the first node with ``node_id`` in depth-first order."""
    node, _ = _locate(tree, node_id)
    return node


def find_parent(tree: TreeNode, node_id: int) -> DecisionNode | None:
    """Find the decision holding ``node_id`` among its options.

    Returns None for the root.
    """
    for node in walk(tree):
        if isinstance(node, DecisionNode):
            if any(child.id == node_id for child in node.options):
                return node
    if tree.id == node_id:
        return None
    raise NodeNotFoundError(node_id)


def _decision(tree: TreeNode, node_id: int) -> tuple[DecisionNode, int]:
    node, depth = _locate(tree, node_id)
    if not isinstance(node, DecisionNode):
        raise TreeEditError(f"Node {node_id} is a {node.kind} node and cannot hold options")
    return node, depth


def _check_fields(kind: str, fields: dict[str, Any]) -> None:
    unknown = set(fields) - EDITABLE_FIELDS[kind]
    if unknown:
        raise TreeEditError(
            f"Cannot set {', '.join(sorted(unknown))} on a {kind} node"
        )


def add_option(
    tree: TreeNode,
    parent_id: int,
    kind: str,
    allocator: IdAllocator,
    max_depth: int | None = None,
    **fields: Any,
) -> TreeNode:
    """Append a new child of the given kind under a decision.

    Args:
        tree: Root of the tree to edit
        parent_id: Id of the decision receiving the child
        kind: "decision", "terminal" or "internal_link"
        allocator: Source of the new node's id
        max_depth: Deepest level the new child may sit at; defaults to the
            ``max_tree_depth`` setting so the tree can still be imported
        **fields: Initial field values (e.g. title, link, target_id)

    Returns:
        The newly created node
    """
    if kind not in _NODE_CLASSES:
        raise TreeEditError(f"Unknown node kind: {kind}")
    _check_fields(kind, fields)

    parent, depth = _decision(tree, parent_id)
    if max_depth is None:
        max_depth = get_settings().max_tree_depth
    if depth + 1 > max_depth:
        raise TreeEditError(
            f"Node {parent_id} is at depth {depth}; a child would exceed "
            f"the maximum tree depth of {max_depth}"
        )

    if kind == "decision":
        fields.setdefault("options", [])

    child = _NODE_CLASSES[kind](id=allocator.next_id(), **fields)
    parent.options.append(child)

    logger.debug("Added %s node %d under %d", kind, child.id, parent_id)
    return child


def update_node(tree: TreeNode, node_id: int, **fields: Any) -> TreeNode:
    """Set editable fields on a node and return it."""
    node = find_node(tree, node_id)
    _check_fields(node.kind, fields)

    # Revalidate so text normalization applies to edits as well
    data = node.model_dump(exclude={"options"})
    data.update(fields)
    updated = type(node).model_validate(data)
    for name in fields:
        setattr(node, name, getattr(updated, name))
    return node


def delete_option(tree: TreeNode, parent_id: int, index: int) -> TreeNode:
    """Detach and return the option at ``index`` of a decision.

    The removed subtree is discarded together with any ids it held.
    """
    parent, _ = _decision(tree, parent_id)
    if not 0 <= index < len(parent.options):
        raise TreeEditError(
            f"Option index {index} out of range for node {parent_id}"
        )
    removed = parent.options.pop(index)
    logger.debug("Deleted option %d (node %s) from %d", index, removed.id, parent_id)
    return removed
