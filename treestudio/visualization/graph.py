"""
Diagram graph - flat node/edge representation of a compiled tree.

Both emitters first linearize the tree into a ``DiagramGraph`` and then render
it as text: Mermaid flowchart syntax or Graphviz DOT.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from .labels import dot_label, mermaid_text


ElementKind = Literal["option", "question", "terminal", "internal_link"]

MERMAID_DIRECTIONS = ("TB", "TD", "BT", "RL", "LR")


# =============================================================================
# Styles
# =============================================================================


@dataclass(frozen=True)
class ElementStyle:
    """Shape and colors for one element kind."""

    class_name: str
    fill: str
    stroke: str
    dot_shape: str = "box"
    dot_style: str = "filled"


ELEMENT_STYLES: dict[str, ElementStyle] = {
    "terminal": ElementStyle("terminal", fill="#bbdefb", stroke="#1565c0", dot_shape="ellipse"),
    "option": ElementStyle("option", fill="#ffe0b2", stroke="#ef6c00", dot_shape="box", dot_style="rounded,filled"),
    "question": ElementStyle("question", fill="#e1bee7", stroke="#7b1fa2", dot_shape="diamond"),
    "internal_link": ElementStyle("internalLink", fill="#c8e6c9", stroke="#2e7d32", dot_shape="hexagon"),
}

# Mermaid shape delimiters per kind
_MERMAID_SHAPES: dict[str, tuple[str, str]] = {
    "terminal": ("((", "))"),
    "option": ("[", "]"),
    "question": ("{", "}"),
    "internal_link": ("{{", "}}"),
}


# =============================================================================
# Data Classes for Graph Representation
# =============================================================================


@dataclass
class DiagramNode:
    """An element declared in the diagram."""

    element_id: str
    kind: ElementKind
    label: str
    node_id: int | None = None


@dataclass
class DiagramEdge:
    """A connection between two elements."""

    source_id: str
    target_id: str
    dashed: bool = False


@dataclass(frozen=True)
class UnresolvedLink:
    """An internal link whose target was not found in the tree."""

    element_id: str
    node_id: int | None
    target_id: str | int | None


@dataclass
class DiagramGraph:
    """Complete flat representation of a compiled tree."""

    nodes: list[DiagramNode] = field(default_factory=list)
    edges: list[DiagramEdge] = field(default_factory=list)
    unresolved_links: list[UnresolvedLink] = field(default_factory=list)

    def add_node(
        self, element_id: str, kind: ElementKind, label: str, node_id: int | None = None
    ) -> str:
        self.nodes.append(DiagramNode(element_id, kind, label, node_id))
        return element_id

    def add_edge(self, source_id: str | None, target_id: str, dashed: bool = False) -> None:
        """Connect two elements; a missing source (the root) adds nothing."""
        if source_id is None:
            return
        self.edges.append(DiagramEdge(source_id, target_id, dashed))

    def kinds_in_use(self) -> list[str]:
        """Element kinds present in the graph, in style-table order."""
        present = {node.kind for node in self.nodes}
        return [kind for kind in ELEMENT_STYLES if kind in present]

    def to_mermaid(self, direction: str = "TD") -> str:
        """Generate Mermaid flowchart text."""
        if direction not in MERMAID_DIRECTIONS:
            raise ValueError(
                f"Unsupported Mermaid direction {direction!r}; "
                f"expected one of {', '.join(MERMAID_DIRECTIONS)}"
            )

        lines = [f"flowchart {direction}"]

        for node in self.nodes:
            open_, close = _MERMAID_SHAPES[node.kind]
            lines.append(f'    {node.element_id}{open_}"{mermaid_text(node.label)}"{close}')

        lines.append("")
        for edge in self.edges:
            arrow = "-.->" if edge.dashed else "-->"
            lines.append(f"    {edge.source_id} {arrow} {edge.target_id}")

        lines.append("")
        for style in ELEMENT_STYLES.values():
            lines.append(f"    classDef {style.class_name} fill:{style.fill},stroke:{style.stroke}")

        for kind in self.kinds_in_use():
            members = ",".join(n.element_id for n in self.nodes if n.kind == kind)
            lines.append(f"    class {members} {ELEMENT_STYLES[kind].class_name}")

        return "\n".join(lines)

    def to_dot(self, font: str = "Arial", max_label_length: int = 30) -> str:
        """Generate Graphviz DOT text."""
        lines = [
            "digraph DecisionTree {",
            "    rankdir=TB;",
            f'    node [fontname="{font}"];',
            f'    edge [fontname="{font}"];',
            "",
        ]

        for node in self.nodes:
            style = ELEMENT_STYLES[node.kind]
            lines.append(
                f'    {node.element_id} ['
                f'label="{dot_label(node.label, max_label_length)}", '
                f'shape={style.dot_shape}, '
                f'style="{style.dot_style}", '
                f'fillcolor="{style.fill}", '
                f'color="{style.stroke}"'
                f'];'
            )

        lines.append("")
        for edge in self.edges:
            suffix = " [style=dashed]" if edge.dashed else ""
            lines.append(f"    {edge.source_id} -> {edge.target_id}{suffix};")

        lines.append("}")
        return "\n".join(lines)
