"""Tests for edge curve geometry."""

import pytest

from graphcad import Edge, Graph, Node, NodeCategory, Point
from graphcad.viz.geometry import (
    EdgePath,
    MoveTo,
    NodeGeometry,
    QuadTo,
    SmoothQuadTo,
    curve_path,
    default_control_point,
    edge_anchors,
    edge_path,
    resolve_control_point,
)

# (source, target, control) triples covering straight, bent, steep and
# far-dragged control points
CURVE_CASES = [
    (Point(0, 0), Point(100, 0), Point(50, 0)),
    (Point(0, 0), Point(100, 0), Point(50, 40)),
    (Point(10, 20), Point(-30, 250), Point(200, -80)),
    (Point(3.5, 7.25), Point(3.5, 90.0), Point(-12.0, 45.5)),
    (Point(0, 0), Point(1, 1), Point(1000, -1000)),
]


def _approx_point(p, rel=1e-6, abs_=1e-6):
    return (pytest.approx(p.x, rel=rel, abs=abs_), pytest.approx(p.y, rel=rel, abs=abs_))


class TestCurvePath:
    def test_straight_edge_svg(self):
        path = curve_path(Point(0, 0), Point(100, 0), Point(50, 0))
        assert path.to_svg() == "M 0,0 Q 25,0 50,0 T 100,0"

    def test_bent_edge_handle_pulled_back_along_chord(self):
        path = curve_path(Point(0, 0), Point(100, 0), Point(50, 40))
        assert path.segments == (MoveTo(Point(0, 0)), QuadTo(Point(25, 40), Point(50, 40)), SmoothQuadTo(Point(100, 0)))
        assert str(path) == "M 0,0 Q 25,40 50,40 T 100,0"

    def test_fractional_coordinates_formatted_in_full(self):
        path = curve_path(Point(0, 0), Point(10, 0), Point(5, 1))
        assert path.to_svg() == "M 0,0 Q 2.5,1 5,1 T 10,0"

    @pytest.mark.parametrize(("source", "target", "control"), CURVE_CASES)
    def test_passes_through_endpoints_and_control(self, source, target, control):
        first, second = curve_path(source, target, control).curves()
        assert first.point_at(0) == source
        assert first.point_at(1) == control
        assert second.point_at(0) == control
        assert _approx_point(second.point_at(1)) == (target.x, target.y)

    @pytest.mark.parametrize(("source", "target", "control"), CURVE_CASES)
    def test_tangent_continuous_at_control_point(self, source, target, control):
        first, second = curve_path(source, target, control).curves()
        incoming = first.derivative_at(1)
        outgoing = second.derivative_at(0)
        assert _approx_point(incoming) == (outgoing.x, outgoing.y)

    @pytest.mark.parametrize(("source", "target", "control"), CURVE_CASES)
    def test_tangent_continuity_by_sampling(self, source, target, control):
        first, second = curve_path(source, target, control).curves()
        h = 1e-7
        before = (first.point_at(1) - first.point_at(1 - h)) / h
        after = (second.point_at(h) - second.point_at(0)) / h
        assert _approx_point(before, rel=1e-3, abs_=1e-3) == (after.x, after.y)


class TestSelfLoop:
    def test_fully_collapsed_loop_is_a_point(self):
        p = Point(10, 20)
        path = curve_path(p, p, p)
        assert path.to_svg() == "M 10,20"
        assert path.is_point
        assert path.curves() == []

    def test_loop_bulges_perpendicular_to_spoke(self):
        origin = Point(0, 0)
        path = curve_path(origin, origin, Point(0, 100))
        assert path.to_svg() == "M 0,0 Q -50,100 0,100 T 0,0"
        assert not path.is_point

    def test_loop_is_closed_and_smooth(self):
        origin = Point(5, 5)
        first, second = curve_path(origin, origin, Point(65, 85)).curves()
        assert second.end == origin
        assert _approx_point(first.derivative_at(1)) == (second.derivative_at(0).x, second.derivative_at(0).y)


class TestEdgePath:
    def test_curves_requires_leading_move(self):
        with pytest.raises(ValueError, match="start with a move"):
            EdgePath((QuadTo(Point(0, 0), Point(1, 1)),)).curves()

    def test_smooth_after_move_uses_current_point_as_handle(self):
        curves = EdgePath((MoveTo(Point(0, 0)), SmoothQuadTo(Point(10, 0)))).curves()
        assert curves[0].control == Point(0, 0)


class TestAnchors:
    def _graph(self):
        a = Node("a", NodeCategory.ACTION, "a", "a", position=Point(100, 100))
        b = Node("b", NodeCategory.TOOL, "b", "b", position=Point(100, 300))
        return Graph(
            nodes=(a, b),
            edges=(Edge("ab", "a", "b"), Edge("aa", "a", "a"), Edge("ax", "a", "x")),
        )

    def test_node_handles(self):
        geo = NodeGeometry("a", 100, 100)
        assert geo.center_bottom == Point(190, 140)
        assert geo.center_top == Point(190, 100)

    def test_edge_runs_from_bottom_to_top(self):
        g = self._graph()
        assert edge_anchors(g, g.edge("ab")) == (Point(190, 140), Point(190, 300))

    def test_self_loop_anchors_coincide(self):
        g = self._graph()
        source, target = edge_anchors(g, g.edge("aa"))
        assert source == target

    def test_dangling_edge_has_no_path(self):
        g = self._graph()
        assert edge_anchors(g, g.edge("ax")) is None
        assert edge_path(g, g.edge("ax")) is None

    def test_default_control_point_is_midpoint(self):
        assert default_control_point(Point(0, 0), Point(10, 20)) == Point(5, 10)

    def test_auto_control_point_follows_endpoints(self):
        edge = Edge("e", "a", "b", control_point=Point(999, 999))
        assert resolve_control_point(edge, Point(0, 0), Point(0, 100)) == Point(0, 50)

    def test_pinned_control_point_stays(self):
        edge = Edge("e", "a", "b", control_point=Point(999, 999), control_point_user_positioned=True)
        assert resolve_control_point(edge, Point(0, 0), Point(0, 100)) == Point(999, 999)

    def test_edge_path_uses_layout(self):
        g = self._graph()
        path = edge_path(g, g.edge("ab"))
        assert path.to_svg() == "M 190,140 Q 190,180 190,220 T 190,300"
