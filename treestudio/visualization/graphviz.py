"""Graphviz DOT compilation.

Every node renders as an option box carrying its title. A decision with a
question chains a question diamond after its box; its children hang off the
diamond, or directly off the box when the question is blank. A terminal ends
in an ellipse labeled with its link. Element ids follow the child-index path
from the root (``root``, ``root_q``, ``root_0``, ``root_0_t``, ...), which keeps
them unique across the whole diagram.

Internal links are not drawn as cross edges in this format; they stop at
their option box.
"""

from __future__ import annotations

from treestudio.config import get_settings
from treestudio.tree import DecisionNode, TerminalNode, TreeNode
from .graph import DiagramGraph

ROOT_PATH = "root"


class GraphvizAdapter:
    """Converts a decision tree to a DOT-ready graph."""

    def convert(self, tree: TreeNode) -> DiagramGraph:
        graph = DiagramGraph()
        graph.add_node(ROOT_PATH, "option", tree.title, tree.id)
        self._build(tree, graph, ROOT_PATH)
        return graph

    def _build(self, node: TreeNode, graph: DiagramGraph, path: str) -> None:
        """Emit what follows the option box already drawn for ``node`` at ``path``."""
        if isinstance(node, DecisionNode):
            anchor = path
            if node.has_question:
                anchor = graph.add_node(f"{path}_q", "question", node.question, node.id)
                graph.add_edge(path, anchor)

            for index, child in enumerate(node.options):
                child_path = f"{path}_{index}"
                graph.add_node(child_path, "option", child.title, child.id)
                graph.add_edge(anchor, child_path)
                self._build(child, graph, child_path)

        elif isinstance(node, TerminalNode):
            label = node.link if node.link.strip() else node.title
            element_id = graph.add_node(f"{path}_t", "terminal", label, node.id)
            graph.add_edge(path, element_id)


def tree_to_dot_graph(tree: TreeNode) -> DiagramGraph:
    """Convenience function to convert a tree to a DOT graph."""
    return GraphvizAdapter().convert(tree)


def render_dot(tree: TreeNode, font: str | None = None, max_label_length: int | None = None) -> str:
    """Render a tree as Graphviz DOT text."""
    settings = get_settings()
    if font is None:
        font = settings.graphviz_font
    if max_label_length is None:
        max_label_length = settings.label_max_length
    return tree_to_dot_graph(tree).to_dot(font=font, max_label_length=max_label_length)
