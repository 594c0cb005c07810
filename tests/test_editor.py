"""Tests for tree editing operations."""

import pytest

from treestudio.config import get_settings
from treestudio.tree import (
    DecisionNode,
    IdAllocator,
    InternalLinkNode,
    NodeNotFoundError,
    TerminalNode,
    TreeEditError,
    add_option,
    allocator_for,
    collect_nodes,
    delete_option,
    find_node,
    find_parent,
    new_tree,
    update_node,
)
from treestudio.visualization import render_mermaid


@pytest.fixture
def allocator(shop_tree) -> IdAllocator:
    return allocator_for(shop_tree)


class TestNewTree:
    """Test starting a blank tree."""

    def test_blank_decision_root(self):
        allocator = IdAllocator()
        tree = new_tree(allocator)

        assert isinstance(tree, DecisionNode)
        assert tree.id == 1
        assert tree.title == ""
        assert tree.question == ""
        assert tree.options == []
        assert allocator.counter == 2


class TestAddOption:
    """Test appending children."""

    def test_add_decision(self, shop_tree, allocator):
        child = add_option(shop_tree, 2, "decision", allocator, title="Boots", question="Size?")

        assert isinstance(child, DecisionNode)
        assert child.id == 6
        assert child.question == "Size?"
        assert find_node(shop_tree, 2).options[-1] is child

    def test_add_terminal(self, shop_tree, allocator):
        child = add_option(shop_tree, 1, "terminal", allocator, title="Sale", link="/sale")

        assert isinstance(child, TerminalNode)
        assert child.link == "/sale"
        assert allocator.counter == 7

    def test_add_internal_link(self, shop_tree, allocator):
        child = add_option(shop_tree, 1, "internal_link", allocator, title="Shoes again", target_id=2)

        assert isinstance(child, InternalLinkNode)
        assert "node6 -.-> node2" in render_mermaid(shop_tree, direction="TD")

    def test_ids_keep_increasing(self, shop_tree, allocator):
        first = add_option(shop_tree, 1, "terminal", allocator)
        second = add_option(shop_tree, 1, "terminal", allocator)
        assert (first.id, second.id) == (6, 7)

    def test_new_nodes_become_targets(self, shop_tree, allocator):
        add_option(shop_tree, 1, "decision", allocator, title="Bags")
        assert collect_nodes(shop_tree)[-1].title == "Bags"

    def test_parent_must_be_a_decision(self, shop_tree, allocator):
        with pytest.raises(TreeEditError, match="cannot hold options"):
            add_option(shop_tree, 3, "terminal", allocator)

    def test_unknown_parent(self, shop_tree, allocator):
        with pytest.raises(NodeNotFoundError):
            add_option(shop_tree, 42, "terminal", allocator)

    def test_unknown_kind(self, shop_tree, allocator):
        with pytest.raises(TreeEditError, match="Unknown node kind"):
            add_option(shop_tree, 1, "widget", allocator)

    def test_field_must_fit_kind(self, shop_tree, allocator):
        with pytest.raises(TreeEditError, match="link"):
            add_option(shop_tree, 1, "decision", allocator, link="/nope")

    def test_depth_limit(self, shop_tree, allocator):
        add_option(shop_tree, 1, "terminal", allocator, max_depth=2)

        with pytest.raises(TreeEditError, match="maximum tree depth of 2"):
            add_option(shop_tree, 2, "terminal", allocator, max_depth=2)
        assert len(find_node(shop_tree, 2).options) == 2

    def test_depth_limit_defaults_to_setting(self, shop_tree, allocator, monkeypatch):
        monkeypatch.setattr(get_settings(), "max_tree_depth", 2)
        with pytest.raises(TreeEditError):
            add_option(shop_tree, 2, "decision", allocator)

    def test_decision_at_limit_takes_no_children(self, shop_tree, allocator):
        # "Deep" lands at depth 3
        add_option(shop_tree, 2, "decision", allocator, max_depth=3, title="Deep")
        with pytest.raises(TreeEditError):
            add_option(shop_tree, 6, "terminal", allocator, max_depth=3)


class TestUpdateNode:
    """Test editing node fields."""

    def test_update_question(self, shop_tree):
        node = update_node(shop_tree, 2, question="Which sport?")

        assert node.question == "Which sport?"
        assert len(node.options) == 2

    def test_update_normalizes_text(self, shop_tree):
        node = update_node(shop_tree, 3, title=None, link="/new")
        assert node.title == ""
        assert node.link == "/new"

    def test_update_link_target(self, shop_tree):
        node = update_node(shop_tree, 5, target_id="3")
        assert node.resolved_target() == 3

    def test_update_rejects_foreign_fields(self, shop_tree):
        with pytest.raises(TreeEditError):
            update_node(shop_tree, 3, question="?")

    def test_update_unknown_node(self, shop_tree):
        with pytest.raises(NodeNotFoundError):
            update_node(shop_tree, 99, title="x")


class TestDeleteOption:
    """Test detaching children."""

    def test_delete_subtree(self, shop_tree):
        removed = delete_option(shop_tree, 1, 0)

        assert removed.id == 2
        assert [ref.id for ref in collect_nodes(shop_tree)] == [1, 3]

    def test_index_out_of_range(self, shop_tree):
        with pytest.raises(TreeEditError, match="out of range"):
            delete_option(shop_tree, 1, 5)

    def test_negative_index(self, shop_tree):
        with pytest.raises(TreeEditError):
            delete_option(shop_tree, 1, -1)


class TestFind:
    """Test node lookup."""

    def test_find_parent(self, shop_tree):
        assert find_parent(shop_tree, 4).id == 2
        assert find_parent(shop_tree, 1) is None

    def test_find_parent_unknown(self, shop_tree):
        with pytest.raises(NodeNotFoundError):
            find_parent(shop_tree, 77)
