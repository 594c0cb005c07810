"""Mermaid flowchart compilation.

Elements get synthetic ids (``node0``, ``node1``, ...) in visitation order.
Internal links are resolved in a second phase, once every node id has been
mapped to its element, so a link may point at a node visited after it.
"""

from __future__ import annotations

import logging

from treestudio.config import get_settings
from treestudio.tree import (
    DecisionNode,
    InternalLinkNode,
    TerminalNode,
    TreeNode,
    ensure_ids,
    valid_id,
)
from .graph import DiagramGraph, ElementKind, UnresolvedLink

logger = logging.getLogger(__name__)


class MermaidAdapter:
    """Converts a decision tree to a Mermaid-ready graph."""

    def __init__(self) -> None:
        self._node_counter = 0
        self._elements: dict[int, str] = {}
        self._pending_links: list[tuple[str, InternalLinkNode]] = []

    def _reset(self) -> None:
        self._node_counter = 0
        self._elements = {}
        self._pending_links = []

    def _add(
        self,
        graph: DiagramGraph,
        kind: ElementKind,
        label: str,
        node_id: int | None = None,
    ) -> str:
        element_id = f"node{self._node_counter}"
        self._node_counter += 1
        return graph.add_node(element_id, kind, label, node_id)

    def convert(self, tree: TreeNode) -> DiagramGraph:
        """Convert a tree to a DiagramGraph.

        Missing ids are backfilled on a copy first; the caller's tree is not
        modified.
        """
        self._reset()
        tree, _ = ensure_ids(tree)
        graph = DiagramGraph()

        self._build(tree, graph, parent_element=None)
        self._resolve_links(graph)

        return graph

    def _build(
        self,
        node: TreeNode,
        graph: DiagramGraph,
        parent_element: str | None,
    ) -> None:
        """Emit ``node`` and its subtree below ``parent_element``."""
        if isinstance(node, DecisionNode):
            kind = "option"
        elif isinstance(node, TerminalNode):
            kind = "terminal"
        else:
            kind = "internal_link"

        element_id = self._add(graph, kind, node.title, node.id)
        graph.add_edge(parent_element, element_id)

        node_id = valid_id(node.id)
        # First occurrence wins when hand-edited ids collide
        if node_id is not None and node_id not in self._elements:
            self._elements[node_id] = element_id

        if isinstance(node, DecisionNode):
            anchor = element_id
            if node.has_question:
                anchor = self._add(graph, "question", node.question)
                graph.add_edge(element_id, anchor)
            for child in node.options:
                self._build(child, graph, anchor)
        elif isinstance(node, InternalLinkNode):
            self._pending_links.append((element_id, node))

    def _resolve_links(self, graph: DiagramGraph) -> None:
        """Add dashed edges from internal links to their targets."""
        for element_id, link in self._pending_links:
            target_element = None
            target = link.resolved_target()
            if target is not None:
                target_element = self._elements.get(target)

            if target_element is None:
                logger.warning(
                    "Internal link %s points at unknown node %r; edge omitted",
                    link.id,
                    link.target_id,
                )
                graph.unresolved_links.append(
                    UnresolvedLink(element_id, link.id, link.target_id)
                )
                continue

            graph.add_edge(element_id, target_element, dashed=True)


def tree_to_mermaid_graph(tree: TreeNode) -> DiagramGraph:
    """Convenience function to convert a tree to a Mermaid graph."""
    return MermaidAdapter().convert(tree)


def render_mermaid(tree: TreeNode, direction: str | None = None) -> str:
    """Render a tree as Mermaid flowchart text."""
    if direction is None:
        direction = get_settings().mermaid_direction
    return tree_to_mermaid_graph(tree).to_mermaid(direction)
