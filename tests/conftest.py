"""Pytest fixtures for test suite."""

import pytest
from pathlib import Path
from typing import Any

from treestudio.storage import init_db, reset_engine, set_db_path
from treestudio.tree import TreeNode, parse_tree


# =============================================================================
# Tree Fixtures
# =============================================================================


@pytest.fixture
def shop_tree_data() -> dict[str, Any]:
    """A small product-finder tree with every node kind."""
    return {
        "id": 1,
        "title": "Shop",
        "image": "",
        "question_for_options": "What are you looking for?",
        "options": [
            {
                "id": 2,
                "title": "Shoes",
                "image": "",
                "question_for_options": "",
                "options": [
                    {"id": 4, "title": "Running", "image": "", "link": "/c/running"},
                    {
                        "id": 5,
                        "title": "Back to start",
                        "type": "internal_link",
                        "target_node_id": "1",
                    },
                ],
            },
            {"id": 3, "title": "Gift card", "image": "", "link": "/p/gift"},
        ],
    }


@pytest.fixture
def shop_tree(shop_tree_data: dict[str, Any]) -> TreeNode:
    """The product-finder tree, parsed."""
    return parse_tree(shop_tree_data)


@pytest.fixture
def unnumbered_tree_data() -> dict[str, Any]:
    """A tree imported without any ids."""
    return {
        "title": "Root",
        "question_for_options": "Pick one",
        "options": [
            {
                "title": "A",
                "options": [{"title": "A1", "link": "/a1"}],
            },
            {"title": "B", "link": "/b"},
        ],
    }


@pytest.fixture
def link_tree_data() -> dict[str, Any]:
    """A root with one option and one internal link pointing at it."""
    return {
        "id": 1,
        "options": [
            {"id": 2, "title": "A", "options": []},
            {"id": 3, "title": "B", "type": "internal_link", "target_node_id": "2"},
        ],
    }


# =============================================================================
# Storage Fixtures
# =============================================================================


@pytest.fixture
def temp_database(tmp_path: Path):
    """Use a temporary SQLite database for the test."""
    db_path = tmp_path / "tree_studio_test.db"
    set_db_path(db_path)
    init_db()
    yield db_path
    reset_engine()
