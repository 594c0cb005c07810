"""Pydantic models for API requests and responses."""

from typing import Any, Literal

from pydantic import BaseModel, Field


# =============================================================================
# Tree Models
# =============================================================================


class TreeResponse(BaseModel):
    """The stored tree together with the next id the editor will mint."""

    tree: dict[str, Any]
    next_id: int
    node_count: int


class NodeTarget(BaseModel):
    """A node that an internal link can point at."""

    id: int
    title: str
    kind: str


class TargetsResponse(BaseModel):
    """Selectable internal-link targets, root first."""

    targets: list[NodeTarget]
    total: int


class AddOptionRequest(BaseModel):
    """Request to append a child under a decision."""

    kind: Literal["decision", "terminal", "internal_link"] = Field(
        "decision", description="Kind of node to add"
    )
    title: str = ""
    image: str | None = None
    question: str | None = None
    link: str | None = None
    target_id: str | int | None = None


class UpdateNodeRequest(BaseModel):
    """Partial update of a node's text fields."""

    title: str | None = None
    image: str | None = None
    question: str | None = None
    link: str | None = None
    target_id: str | int | None = None


class NodeResponse(BaseModel):
    """A single node after an edit."""

    node: dict[str, Any]
    next_id: int


# =============================================================================
# Diagram Models
# =============================================================================


class UnresolvedLinkInfo(BaseModel):
    """An internal link whose target is missing."""

    element_id: str
    node_id: int | None = None
    target_id: str | int | None = None


class DiagramResponse(BaseModel):
    """Compiled diagram text."""

    format: Literal["mermaid", "graphviz"]
    text: str
    element_count: int
    edge_count: int
    unresolved_links: list[UnresolvedLinkInfo] = Field(default_factory=list)
