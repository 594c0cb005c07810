"""Pydantic models for the decision tree.

A tree is built from three node kinds:

- ``DecisionNode``: a branching node with an optional question and an ordered
  list of child options.
- ``TerminalNode``: a leaf carrying an outbound link.
- ``InternalLinkNode``: a leaf that points at another node of the same tree by
  id.

Imported JSON does not carry an explicit kind for decisions and terminals; the
kind is inferred from the shape of each record exactly once, when the record is
validated into one of the models below, and is kept on the model as ``kind``.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, field_validator


INTERNAL_LINK_TYPE = "internal_link"

NodeKind = Literal["decision", "terminal", "internal_link"]


def valid_id(value: Any) -> int | None:
    """Return ``value`` if it is a positive integer id, otherwise ``None``."""
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


# =============================================================================
# Node Models
# =============================================================================


class _BaseNode(BaseModel):
    """Fields shared by every node kind."""

    model_config = ConfigDict(populate_by_name=True)

    id: int | None = Field(None, description="Positive integer, unique within the tree")
    title: str = Field("", description="Display text")

    @field_validator("id", mode="before")
    @classmethod
    def _normalize_id(cls, value: Any) -> int | None:
        # Anything that is not a positive int is treated as missing and backfilled later.
        return valid_id(value)

    @field_validator(
        "title", "image", "question", "link", mode="before", check_fields=False
    )
    @classmethod
    def _normalize_text(cls, value: Any) -> str:
        return _as_text(value)


class DecisionNode(_BaseNode):
    """A branching node: an option that may ask a question before its children."""

    kind: ClassVar[NodeKind] = "decision"
    image: str = Field("", description="Image URL")
    question: str = Field("", alias="question_for_options", description="Question asked before the options")
    options: list[TreeNode] = Field(default_factory=list, description="Ordered child nodes")

    @property
    def has_question(self) -> bool:
        """True when the question is not blank."""
        return bool(self.question.strip())


class TerminalNode(_BaseNode):
    """A leaf node linking out of the tree."""

    kind: ClassVar[NodeKind] = "terminal"
    image: str = Field("", description="Image URL")
    link: str = Field("", description="Category or product link")


class InternalLinkNode(_BaseNode):
    """A leaf node referencing another node of the same tree."""

    kind: ClassVar[NodeKind] = "internal_link"
    type: Literal["internal_link"] = INTERNAL_LINK_TYPE
    target_id: str | int | None = Field(
        None, alias="target_node_id", description="Id of the referenced node"
    )

    def resolved_target(self) -> int | None:
        """The target as an integer id, or ``None`` if it cannot be one."""
        target = self.target_id
        if isinstance(target, str):
            target = target.strip()
            if not target.isdigit():
                return None
            target = int(target)
        return valid_id(target)


def infer_kind(value: Any) -> str | None:
    """Decide the node kind of a raw record or model.

    An explicit ``type: "internal_link"`` tag wins, then the presence of an
    ``options`` field marks a decision; anything else is a terminal. Models
    report the kind of their class.
    """
    if isinstance(value, dict):
        if value.get("type") == INTERNAL_LINK_TYPE:
            return "internal_link"
        if "options" in value:
            return "decision"
        return "terminal"
    return getattr(value, "kind", None)


TreeNode = Annotated[
    Union[
        Annotated[DecisionNode, Tag("decision")],
        Annotated[TerminalNode, Tag("terminal")],
        Annotated[InternalLinkNode, Tag("internal_link")],
    ],
    Discriminator(infer_kind),
]

DecisionNode.model_rebuild()


# =============================================================================
# Traversal
# =============================================================================


def walk(node: TreeNode) -> Iterator[TreeNode]:
    """Yield nodes depth-first, parent before children, children in order."""
    yield node
    if isinstance(node, DecisionNode):
        for child in node.options:
            yield from walk(child)


def count_nodes(node: TreeNode) -> int:
    return sum(1 for _ in walk(node))
