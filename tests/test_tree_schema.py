"""Tests for the tree models and kind inference."""

import pytest

from treestudio.tree import (
    DecisionNode,
    InternalLinkNode,
    TerminalNode,
    count_nodes,
    dump_tree,
    infer_kind,
    parse_tree,
    walk,
)


class TestKindInference:
    """Node kinds are decided from the record shape."""

    def test_options_mark_a_decision(self):
        node = parse_tree({"title": "Root", "options": []})
        assert isinstance(node, DecisionNode)
        assert node.kind == "decision"

    def test_link_marks_a_terminal(self):
        node = parse_tree({"title": "Leaf", "link": ""})
        assert isinstance(node, TerminalNode)

    def test_record_without_options_or_link_is_a_terminal(self):
        node = parse_tree({"title": "Bare"})
        assert isinstance(node, TerminalNode)
        assert node.link == ""

    def test_internal_link_tag_wins_over_options(self):
        node = parse_tree({"type": "internal_link", "target_node_id": 3, "options": []})
        assert isinstance(node, InternalLinkNode)

    def test_children_are_typed(self, shop_tree):
        kinds = [node.kind for node in walk(shop_tree)]
        assert kinds == ["decision", "decision", "terminal", "internal_link", "terminal"]

    def test_infer_kind_on_models(self):
        assert infer_kind(TerminalNode(title="x")) == "terminal"
        assert infer_kind({"options": [1]}) == "decision"


class TestNormalization:
    """Malformed fields are tolerated."""

    def test_missing_text_defaults_to_empty(self):
        node = parse_tree({"options": []})
        assert node.title == ""
        assert node.question == ""
        assert node.image == ""

    def test_null_text_becomes_empty(self):
        node = parse_tree({"title": None, "link": None})
        assert node.title == ""
        assert node.link == ""

    def test_non_string_title_is_stringified(self):
        node = parse_tree({"title": 42, "options": []})
        assert node.title == "42"

    @pytest.mark.parametrize("raw_id", ["7", 0, -2, True, 1.5, None])
    def test_invalid_ids_are_treated_as_missing(self, raw_id):
        node = parse_tree({"id": raw_id, "options": []})
        assert node.id is None

    def test_valid_id_is_kept(self):
        assert parse_tree({"id": 12, "options": []}).id == 12

    def test_question_whitespace_is_not_a_question(self):
        node = parse_tree({"question_for_options": "   \n", "options": []})
        assert node.has_question is False

    def test_question_by_field_name(self):
        node = DecisionNode(question="Which size?")
        assert node.has_question is True


class TestInternalLinkTarget:
    """Internal link targets accept strings or integers."""

    @pytest.mark.parametrize(
        "target,expected",
        [("2", 2), (" 5 ", 5), (7, 7), ("abc", None), ("", None), (None, None), ("0", None)],
    )
    def test_resolved_target(self, target, expected):
        node = InternalLinkNode(target_id=target)
        assert node.resolved_target() == expected


class TestExportShape:
    """Exported records keep the imported JSON shape."""

    def test_dump_matches_input(self, shop_tree_data, shop_tree):
        assert dump_tree(shop_tree) == shop_tree_data

    def test_dump_omits_kind(self, shop_tree):
        for record in [dump_tree(shop_tree), *dump_tree(shop_tree)["options"]]:
            assert "kind" not in record

    def test_internal_link_keeps_type_tag(self):
        node = InternalLinkNode(id=9, title="Again", target_id="1")
        assert dump_tree(node) == {
            "id": 9,
            "title": "Again",
            "type": "internal_link",
            "target_node_id": "1",
        }

    def test_count_nodes(self, shop_tree):
        assert count_nodes(shop_tree) == 5
