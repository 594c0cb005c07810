"""Node identity management.

Every node carries a positive integer id that internal links use to reference
it. Ids are assigned lazily, in depth-first order, and never change once set.
"""

from __future__ import annotations

from dataclasses import dataclass

from .schema import NodeKind, TreeNode, valid_id, walk


FIRST_ID = 1


@dataclass
class IdAllocator:
    """Source of fresh node ids.

    ``counter`` is always strictly greater than every id in the tree it was
    seeded from.
    """

    counter: int = FIRST_ID

    def next_id(self) -> int:
        """Return the current counter value and advance it."""
        value = self.counter
        self.counter += 1
        return value

    def observe(self, node_id: int) -> None:
        """Bump the counter past an id that is already in use."""
        self.counter = max(self.counter, node_id + 1)


@dataclass(frozen=True)
class NodeRef:
    """Flat description of a node, used to offer internal-link targets."""

    id: int
    title: str
    kind: NodeKind


def ensure_ids(tree: TreeNode, start: int = FIRST_ID) -> tuple[TreeNode, int]:
    """Give every node of ``tree`` a valid id.

    Nodes with a valid id keep it and push the counter past it; nodes without
    one get the current counter value. Colliding explicit ids are left as they
    are.

    Args:
        tree: Root node. Not modified.
        start: Initial counter value.

    Returns:
        Tuple of (copy of the tree with ids populated, next free id)
    """
    result = tree.model_copy(deep=True)
    allocator = IdAllocator(start)

    for node in walk(result):
        node_id = valid_id(node.id)
        if node_id is None:
            node.id = allocator.next_id()
        else:
            allocator.observe(node_id)

    return result, allocator.counter


def allocator_for(tree: TreeNode) -> IdAllocator:
    """Build an allocator seeded past every id in ``tree``."""
    allocator = IdAllocator()
    for node in walk(tree):
        node_id = valid_id(node.id)
        if node_id is not None:
            allocator.observe(node_id)
    return allocator


def collect_nodes(tree: TreeNode) -> list[NodeRef]:
    """Flatten the tree into target references, root first."""
    refs = []
    for node in walk(tree):
        node_id = valid_id(node.id)
        if node_id is None:
            continue
        refs.append(NodeRef(id=node_id, title=node.title, kind=node.kind))
    return refs
