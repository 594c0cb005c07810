"""Decision tree model, identity management, import/export and editing."""

from .schema import (
    INTERNAL_LINK_TYPE,
    DecisionNode,
    TerminalNode,
    InternalLinkNode,
    TreeNode,
    NodeKind,
    infer_kind,
    valid_id,
    walk,
    count_nodes,
)
from .identity import (
    FIRST_ID,
    IdAllocator,
    NodeRef,
    ensure_ids,
    allocator_for,
    collect_nodes,
)
from .loader import (
    TreeLoader,
    TreeValidationError,
    parse_tree,
    dump_tree,
    tree_depth,
)
from .editor import (
    EDITABLE_FIELDS,
    NodeNotFoundError,
    TreeEditError,
    new_tree,
    find_node,
    find_parent,
    add_option,
    update_node,
    delete_option,
)

__all__ = [
    # Models
    "INTERNAL_LINK_TYPE",
    "DecisionNode",
    "TerminalNode",
    "InternalLinkNode",
    "TreeNode",
    "NodeKind",
    "infer_kind",
    "valid_id",
    "walk",
    "count_nodes",
    # Identity
    "FIRST_ID",
    "IdAllocator",
    "NodeRef",
    "ensure_ids",
    "allocator_for",
    "collect_nodes",
    # Import / export
    "TreeLoader",
    "TreeValidationError",
    "parse_tree",
    "dump_tree",
    "tree_depth",
    # Editing
    "EDITABLE_FIELDS",
    "NodeNotFoundError",
    "TreeEditError",
    "new_tree",
    "find_node",
    "find_parent",
    "add_option",
    "update_node",
    "delete_option",
]
