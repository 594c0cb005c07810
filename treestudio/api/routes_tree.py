"""Routes for building, importing and exporting the working tree."""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, Response

from treestudio.storage import TreeRepository
from treestudio.tree import (
    IdAllocator,
    NodeNotFoundError,
    TreeEditError,
    TreeLoader,
    TreeNode,
    TreeValidationError,
    add_option,
    collect_nodes,
    count_nodes,
    delete_option,
    dump_tree,
    new_tree,
    update_node,
)
from .models import (
    AddOptionRequest,
    NodeResponse,
    NodeTarget,
    TargetsResponse,
    TreeResponse,
    UpdateNodeRequest,
)

router = APIRouter(prefix="/tree", tags=["Tree"])

# Global instance
_repository: TreeRepository | None = None


def get_repository() -> TreeRepository:
    """Get or create the tree repository instance."""
    global _repository
    if _repository is None:
        _repository = TreeRepository()
    return _repository


def load_stored_tree() -> tuple[TreeNode, int]:
    """Load the stored tree or fail with 404 (nothing stored) or 409 (unreadable)."""
    try:
        stored = get_repository().load()
    except TreeValidationError as e:
        raise HTTPException(
            status_code=409,
            detail=f"Stored tree cannot be loaded: {e}. Import a new tree or delete it.",
        )
    if stored is None:
        raise HTTPException(status_code=404, detail="No tree loaded. Create or import one.")
    return stored


def _tree_response(tree: TreeNode, next_id: int) -> TreeResponse:
    return TreeResponse(
        tree=dump_tree(tree),
        next_id=next_id,
        node_count=count_nodes(tree),
    )


@router.get("", response_model=TreeResponse)
async def get_tree() -> TreeResponse:
    """Get the stored tree."""
    tree, next_id = load_stored_tree()
    return _tree_response(tree, next_id)


@router.post("/new", response_model=TreeResponse, status_code=201)
async def create_tree() -> TreeResponse:
    """Replace the stored tree with an empty one."""
    allocator = IdAllocator()
    tree = new_tree(allocator)
    get_repository().save(tree)
    return _tree_response(tree, allocator.counter)


@router.put("", response_model=TreeResponse)
async def import_tree(payload: Any = Body(...)) -> TreeResponse:
    """Import a tree from a JSON body, backfilling missing ids."""
    try:
        tree, next_id = TreeLoader().load(payload)
    except TreeValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    get_repository().save(tree)
    return _tree_response(tree, next_id)


@router.get("/export")
async def export_tree() -> Response:
    """Download the stored tree as ``tree.json``."""
    tree, _ = load_stored_tree()
    return Response(
        content=TreeLoader().dumps(tree),
        media_type="application/json",
        headers={"Content-Disposition": 'attachment; filename="tree.json"'},
    )


@router.delete("")
async def delete_tree() -> dict:
    """Remove the stored tree."""
    return {"deleted": get_repository().clear()}


@router.get("/targets", response_model=TargetsResponse)
async def list_targets() -> TargetsResponse:
    """List nodes that an internal link can point at."""
    tree, _ = load_stored_tree()
    targets = [
        NodeTarget(id=ref.id, title=ref.title, kind=ref.kind)
        for ref in collect_nodes(tree)
    ]
    return TargetsResponse(targets=targets, total=len(targets))


@router.post("/nodes/{parent_id}/options", response_model=NodeResponse, status_code=201)
async def add_node(parent_id: int, request: AddOptionRequest) -> NodeResponse:
    """Append a decision, terminal or internal link under a decision."""
    tree, next_id = load_stored_tree()
    allocator = IdAllocator(next_id)
    fields = request.model_dump(exclude={"kind"}, exclude_none=True)

    try:
        child = add_option(tree, parent_id, request.kind, allocator, **fields)
    except NodeNotFoundError:
        raise HTTPException(status_code=404, detail=f"Node not found: {parent_id}")
    except TreeEditError as e:
        raise HTTPException(status_code=422, detail=str(e))

    get_repository().save(tree)
    return NodeResponse(node=dump_tree(child), next_id=allocator.counter)


@router.patch("/nodes/{node_id}", response_model=NodeResponse)
async def edit_node(node_id: int, request: UpdateNodeRequest) -> NodeResponse:
    """Update text fields of a node."""
    fields = request.model_dump(exclude_none=True)
    if not fields:
        raise HTTPException(status_code=422, detail="No fields to update")

    tree, next_id = load_stored_tree()
    try:
        node = update_node(tree, node_id, **fields)
    except NodeNotFoundError:
        raise HTTPException(status_code=404, detail=f"Node not found: {node_id}")
    except TreeEditError as e:
        raise HTTPException(status_code=422, detail=str(e))

    get_repository().save(tree)
    return NodeResponse(node=dump_tree(node), next_id=next_id)


@router.delete("/nodes/{parent_id}/options/{index}", response_model=NodeResponse)
async def remove_node(parent_id: int, index: int) -> NodeResponse:
    """Delete the option at ``index`` (and its subtree) from a decision."""
    tree, next_id = load_stored_tree()
    try:
        removed = delete_option(tree, parent_id, index)
    except NodeNotFoundError:
        raise HTTPException(status_code=404, detail=f"Node not found: {parent_id}")
    except TreeEditError as e:
        raise HTTPException(status_code=422, detail=str(e))

    get_repository().save(tree)
    return NodeResponse(node=dump_tree(removed), next_id=next_id)
