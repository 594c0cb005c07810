"""Routes for compiling trees to diagram text."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Query

from treestudio.config import get_settings
from treestudio.tree import TreeLoader, TreeNode, TreeValidationError
from treestudio.visualization import (
    DiagramGraph,
    tree_to_dot_graph,
    tree_to_mermaid_graph,
)
from .models import DiagramResponse, UnresolvedLinkInfo
from .routes_tree import load_stored_tree

router = APIRouter(prefix="/diagram", tags=["Diagram"])


def _parse_body(payload: Any) -> TreeNode:
    try:
        tree, _ = TreeLoader().load(payload)
    except TreeValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return tree


def _response(format: str, graph: DiagramGraph, text: str) -> DiagramResponse:
    return DiagramResponse(
        format=format,
        text=text,
        element_count=len(graph.nodes),
        edge_count=len(graph.edges),
        unresolved_links=[
            UnresolvedLinkInfo(
                element_id=link.element_id,
                node_id=link.node_id,
                target_id=link.target_id,
            )
            for link in graph.unresolved_links
        ],
    )


def compile_mermaid(tree: TreeNode, direction: str | None) -> DiagramResponse:
    graph = tree_to_mermaid_graph(tree)
    try:
        if direction is None:
            direction = get_settings().mermaid_direction
        text = graph.to_mermaid(direction)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return _response("mermaid", graph, text)


def compile_graphviz(tree: TreeNode) -> DiagramResponse:
    settings = get_settings()
    graph = tree_to_dot_graph(tree)
    text = graph.to_dot(font=settings.graphviz_font, max_label_length=settings.label_max_length)
    return _response("graphviz", graph, text)


@router.get("/mermaid", response_model=DiagramResponse)
async def stored_mermaid(
    direction: str | None = Query(None, description="Flowchart direction (TD, LR, ...)"),
) -> DiagramResponse:
    """Compile the stored tree to Mermaid."""
    tree, _ = load_stored_tree()
    return compile_mermaid(tree, direction)


@router.post("/mermaid", response_model=DiagramResponse)
async def mermaid_from_body(
    payload: Any = Body(...),
    direction: str | None = Query(None, description="Flowchart direction (TD, LR, ...)"),
) -> DiagramResponse:
    """Compile a tree sent in the request body to Mermaid without storing it."""
    return compile_mermaid(_parse_body(payload), direction)


@router.get("/graphviz", response_model=DiagramResponse)
async def stored_graphviz() -> DiagramResponse:
    """Compile the stored tree to Graphviz DOT."""
    tree, _ = load_stored_tree()
    return compile_graphviz(tree)


@router.post("/graphviz", response_model=DiagramResponse)
async def graphviz_from_body(payload: Any = Body(...)) -> DiagramResponse:
    """Compile a tree sent in the request body to Graphviz DOT without storing it."""
    return compile_graphviz(_parse_body(payload))
