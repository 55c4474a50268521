"""Tests for identifier sanitization."""

import pytest

from graphcad.graph import Node, NodeCategory, sanitize_graph_name, sanitize_identifier


def _node(node_id: str, identifier: str, category: NodeCategory = NodeCategory.ACTION) -> Node:
    return Node(id=node_id, category=category, label=identifier, code_identifier=identifier)


class TestBaseIdentifier:
    def test_strips_punctuation_and_joins_words(self):
        assert sanitize_identifier("My Step!!", []) == "My_Step"

    def test_trims_and_collapses_whitespace(self):
        assert sanitize_identifier("  fetch \t  data\n", []) == "fetch_data"

    def test_case_preserved(self):
        assert sanitize_identifier("CamelCase", []) == "CamelCase"

    def test_non_ascii_letters_dropped(self):
        assert sanitize_identifier("café au lait", []) == "caf_au_lait"

    def test_empty_result_falls_back_to_node(self):
        assert sanitize_identifier("!!!", []) == "node"
        assert sanitize_identifier("   ", []) == "node"

    def test_underscores_kept(self):
        assert sanitize_identifier("_private_step", []) == "_private_step"


class TestUniqueness:
    def test_collision_appends_counter(self):
        existing = [_node("n1", "My_Step")]
        assert sanitize_identifier("My Step!!", existing) == "My_Step_1"

    def test_counter_increments_past_taken_suffixes(self):
        existing = [_node("n1", "agent"), _node("n2", "agent_1"), _node("n3", "agent_2")]
        assert sanitize_identifier("agent", existing) == "agent_3"

    def test_excluded_node_does_not_collide_with_itself(self):
        existing = [_node("n1", "agent"), _node("n2", "tool")]
        assert sanitize_identifier("agent", existing, exclude_node_id="n1") == "agent"

    def test_excluded_node_still_collides_with_others(self):
        existing = [_node("n1", "agent"), _node("n2", "tool")]
        assert sanitize_identifier("tool", existing, exclude_node_id="n1") == "tool_1"

    def test_case_sensitive_comparison(self):
        existing = [_node("n1", "Agent")]
        assert sanitize_identifier("agent", existing) == "agent"

    def test_start_label_on_regular_node_is_deduplicated(self):
        existing = [_node("s", "start", NodeCategory.START)]
        assert sanitize_identifier("start", existing) == "start_1"

    @pytest.mark.parametrize("label", ["start", "end"])
    def test_terminal_names_reserved_before_terminal_exists(self, label):
        assert sanitize_identifier(label, []) == f"{label}_1"

    def test_terminal_names_reserved_on_rename(self):
        existing = [_node("n1", "worker")]
        assert sanitize_identifier("end", existing, exclude_node_id="n1") == "end_1"

    def test_terminal_name_match_is_case_sensitive(self):
        assert sanitize_identifier("End", []) == "End"


class TestFixedIdentifiers:
    @pytest.mark.parametrize(
        ("category", "expected"),
        [(NodeCategory.START, "start"), (NodeCategory.END, "end")],
    )
    def test_terminal_categories_bypass_uniqueness(self, category, expected):
        existing = [_node("x", expected)]
        assert sanitize_identifier("whatever label", existing, category=category) == expected


class TestIdempotence:
    def test_sanitizing_twice_is_stable(self):
        existing = [_node("n1", "alpha"), _node("n2", "beta")]
        once = sanitize_identifier("Gamma Ray!", existing)
        assert sanitize_identifier(once, existing) == once


class TestGraphName:
    def test_strips_unsafe_characters(self):
        assert sanitize_graph_name("my-graph v2") == "mygraphv2"

    def test_keeps_safe_name(self):
        assert sanitize_graph_name("workflow_1") == "workflow_1"

    def test_empty_falls_back_to_default(self):
        assert sanitize_graph_name("!!") == "my_graph"
