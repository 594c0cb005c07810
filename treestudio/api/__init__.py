"""HTTP API for the tree editor and diagram compiler."""

from .routes_tree import router as tree_router
from .routes_diagram import router as diagram_router

__all__ = ["tree_router", "diagram_router"]
