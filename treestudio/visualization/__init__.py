"""Diagram compilation for decision trees (Mermaid and Graphviz DOT)."""

from .graph import (
    ELEMENT_STYLES,
    MERMAID_DIRECTIONS,
    DiagramEdge,
    DiagramGraph,
    DiagramNode,
    ElementStyle,
    UnresolvedLink,
)
from .labels import DOT_PLACEHOLDER, dot_label, mermaid_text
from .mermaid import MermaidAdapter, render_mermaid, tree_to_mermaid_graph
from .graphviz import GraphvizAdapter, render_dot, tree_to_dot_graph

__all__ = [
    # Graph representation
    "ELEMENT_STYLES",
    "MERMAID_DIRECTIONS",
    "DiagramEdge",
    "DiagramGraph",
    "DiagramNode",
    "ElementStyle",
    "UnresolvedLink",
    # Labels
    "DOT_PLACEHOLDER",
    "dot_label",
    "mermaid_text",
    # Mermaid
    "MermaidAdapter",
    "render_mermaid",
    "tree_to_mermaid_graph",
    # Graphviz
    "GraphvizAdapter",
    "render_dot",
    "tree_to_dot_graph",
]
