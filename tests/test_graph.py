"""Tests for the Graph snapshot model and diagnostics."""

import pytest

from graphcad import Edge, Graph, Node, NodeCategory, NodeRole, Point, find_issues


def make_node(node_id, category="action", identifier=None):
    return Node(node_id, NodeCategory(category), identifier or node_id, identifier or node_id)


class TestNodeCategory:
    @pytest.mark.parametrize(
        ("category", "role"),
        [
            (NodeCategory.START, NodeRole.TERMINAL),
            (NodeCategory.END, NodeRole.TERMINAL),
            (NodeCategory.ACTION, NodeRole.EXECUTABLE),
            (NodeCategory.TOOL, NodeRole.EXECUTABLE),
            (NodeCategory.CONDITIONAL_BRANCH, NodeRole.DISPATCH),
            (NodeCategory.ANNOTATION, NodeRole.ANNOTATION),
        ],
    )
    def test_roles(self, category, role):
        assert category.role is role

    def test_catalog_defaults(self):
        assert NodeCategory.ACTION.default_label == "Agent"
        assert NodeCategory.ACTION.default_implementation == "agent_function"
        assert NodeCategory.ANNOTATION.default_implementation is None

    def test_lookup_by_value(self):
        assert NodeCategory("conditional_branch") is NodeCategory.CONDITIONAL_BRANCH


class TestNode:
    def test_implementation_placeholder(self):
        node = Node("n1", NodeCategory.ACTION, "Worker", "worker")
        assert node.implementation == "worker_func"

    def test_implementation_ref_wins(self):
        node = Node("n1", NodeCategory.ACTION, "Worker", "worker", implementation_ref="run_worker")
        assert node.implementation == "run_worker"

    def test_name_in_code_falls_back_to_id(self):
        assert Node("n1", NodeCategory.ACTION, "x", "").name_in_code == "n1"


class TestGraphSnapshot:
    def test_initial_graph(self):
        g = Graph.initial()
        assert len(g.nodes) == 1
        assert g.start_node.code_identifier == "start"
        assert g.start_node.position == Point(100, 100)
        assert g.edges == ()
        assert g.graph_name == "my_graph"

    def test_edits_return_new_snapshots(self):
        g = Graph.initial()
        g2 = g.with_node(make_node("a"))
        assert len(g.nodes) == 1
        assert len(g2.nodes) == 2

    def test_replace_node_keeps_order(self):
        g = Graph(nodes=(make_node("a"), make_node("b"), make_node("c")))
        g2 = g.replace_node(Node("b", NodeCategory.TOOL, "B", "B"))
        assert [n.id for n in g2.nodes] == ["a", "b", "c"]
        assert g2.node("b").category is NodeCategory.TOOL

    def test_without_nodes_drops_touching_edges(self):
        g = Graph(
            nodes=(make_node("a"), make_node("b"), make_node("c")),
            edges=(Edge("ab", "a", "b"), Edge("bc", "b", "c"), Edge("ca", "c", "a")),
        )
        g2 = g.without_nodes(["b"])
        assert [e.id for e in g2.edges] == ["ca"]

    def test_lookups(self):
        g = Graph(nodes=(make_node("a", identifier="alpha"),), edges=(Edge("e1", "a", "a"),))
        assert g.node_by_identifier("alpha").id == "a"
        assert g.find_node("missing") is None
        assert g.edge("e1").is_self_loop
        with pytest.raises(KeyError):
            g.node("missing")
        with pytest.raises(KeyError):
            g.edge("missing")

    def test_to_nx_graph_skips_dangling_edges(self):
        g = Graph(
            nodes=(make_node("a"), make_node("b")),
            edges=(Edge("ab", "a", "b"), Edge("ax", "a", "x")),
        )
        nx_graph = g.to_nx_graph()
        assert set(nx_graph.nodes) == {"a", "b"}
        assert nx_graph.number_of_edges() == 1
        assert nx_graph.nodes["a"]["role"] == "executable"


class TestFindIssues:
    def _kinds(self, graph):
        return [issue.kind for issue in find_issues(graph)]

    def test_clean_graph(self):
        start = make_node("s", "start", "start")
        a = make_node("a")
        g = Graph(nodes=(start, a), edges=(Edge("sa", "s", "a"),))
        assert find_issues(g) == []

    def test_dangling_edge(self):
        start = make_node("s", "start", "start")
        g = Graph(nodes=(start,), edges=(Edge("sx", "s", "x"),))
        assert "dangling_edge" in self._kinds(g)

    def test_unresolved_and_ambiguous_dispatch(self):
        start = make_node("s", "start", "start")
        c1 = make_node("c1", "conditional_branch")
        c2 = make_node("c2", "conditional_branch")
        a, b = make_node("a"), make_node("b")
        g = Graph(
            nodes=(start, c1, c2, a, b),
            edges=(Edge("sa", "s", "a"), Edge("ab", "a", "b"), Edge("a_c2", "a", "c2"), Edge("b_c2", "b", "c2")),
        )
        issues = find_issues(g)
        by_kind = {i.kind: i.subject for i in issues}
        assert by_kind["unresolved_dispatch"] == "c1"
        assert by_kind["ambiguous_dispatch"] == "c2"

    def test_missing_start(self):
        assert self._kinds(Graph(nodes=(make_node("a"),))) == ["missing_start"]

    def test_unconnected_start(self):
        assert self._kinds(Graph.initial()) == ["no_entry_edge"]

    def test_unreachable_node_but_not_annotation(self):
        start = make_node("s", "start", "start")
        g = Graph(
            nodes=(start, make_node("a"), make_node("lonely"), make_node("note", "annotation")),
            edges=(Edge("sa", "s", "a"),),
        )
        issues = find_issues(g)
        assert [(i.kind, i.subject) for i in issues] == [("unreachable", "lonely")]

    def test_duplicate_identifier(self):
        start = make_node("s", "start", "start")
        g = Graph(
            nodes=(start, make_node("a", identifier="x"), make_node("b", identifier="x")),
            edges=(Edge("sa", "s", "a"), Edge("ab", "a", "b")),
        )
        assert self._kinds(g) == ["duplicate_identifier"]
