"""Edge curve geometry.

Each edge is drawn as two quadratic Bezier segments joined at the edge's
control point: ``M source Q handle control T target``. The second segment
is an SVG "smooth" quadratic, whose handle is the first handle reflected
through the control point, so the tangent is continuous there however far
the user drags it.

A self-loop has coinciding endpoints. It is drawn as a teardrop through the
control point, or as a single point when the control point sits on the
endpoint too.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

from graphcad.viz.coordinates import Point, midpoint

if TYPE_CHECKING:
    from graphcad.graph.core import Edge, Graph, Node

# Fraction of the source-target distance used to pull the first handle back
# from the control point. Larger values give rounder curves.
CURVATURE_STRENGTH = 0.25

# Self-loop bulge, as a fraction of the source-to-control distance.
LOOP_FACTOR = 0.5

DEFAULT_NODE_WIDTH = 180.0
DEFAULT_NODE_HEIGHT = 40.0


# =============================================================================
# Node anchors
# =============================================================================


@dataclass(frozen=True)
class NodeGeometry:
    """Node bounding box in graph space.

    Outgoing edges leave from the center of the bottom side and incoming
    edges arrive at the center of the top side.
    """

    id: str
    x: float  # Left edge
    y: float  # Top edge
    width: float = DEFAULT_NODE_WIDTH
    height: float = DEFAULT_NODE_HEIGHT

    @classmethod
    def of(cls, node: Node, width: float = DEFAULT_NODE_WIDTH, height: float = DEFAULT_NODE_HEIGHT) -> NodeGeometry:
        return cls(node.id, node.position.x, node.position.y, width, height)

    @property
    def center_x(self) -> float:
        return self.x + self.width / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def center_bottom(self) -> Point:
        """Source handle - where outgoing edges start."""
        return Point(self.center_x, self.bottom)

    @property
    def center_top(self) -> Point:
        """Target handle - where incoming edges end."""
        return Point(self.center_x, self.y)


def edge_anchors(graph: Graph, edge: Edge) -> tuple[Point, Point] | None:
    """Return (source point, target point) for an edge, or None if dangling.

    A self-loop starts and ends on the source handle.
    """
    source = graph.find_node(edge.source)
    target = graph.find_node(edge.target)
    if source is None or target is None:
        return None
    start = NodeGeometry.of(source).center_bottom
    if edge.is_self_loop:
        return start, start
    return start, NodeGeometry.of(target).center_top


def default_control_point(source: Point, target: Point) -> Point:
    """Control point for an edge the user has not dragged: the midpoint."""
    return midpoint(source, target)


def resolve_control_point(edge: Edge, source: Point, target: Point) -> Point:
    """Control point to draw with.

    User-positioned control points stay put; all others follow the endpoints.
    """
    if edge.control_point_user_positioned and edge.control_point is not None:
        return edge.control_point
    return default_control_point(source, target)


# =============================================================================
# Path segments
# =============================================================================


def _fmt(value: float) -> str:
    """Format a coordinate: integers without a decimal point, floats in full."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _fmt_point(point: Point) -> str:
    return f"{_fmt(point.x)},{_fmt(point.y)}"


@dataclass(frozen=True)
class MoveTo:
    point: Point

    def to_svg(self) -> str:
        return f"M {_fmt_point(self.point)}"


@dataclass(frozen=True)
class QuadTo:
    control: Point
    end: Point

    def to_svg(self) -> str:
        return f"Q {_fmt_point(self.control)} {_fmt_point(self.end)}"


@dataclass(frozen=True)
class SmoothQuadTo:
    """Quadratic whose handle is the previous handle reflected through the current point."""

    end: Point

    def to_svg(self) -> str:
        return f"T {_fmt_point(self.end)}"


Segment = Union[MoveTo, QuadTo, SmoothQuadTo]


@dataclass(frozen=True)
class QuadraticBezier:
    """A resolved quadratic Bezier curve with explicit handle."""

    start: Point
    control: Point
    end: Point

    def point_at(self, t: float) -> Point:
        """B(t) = (1-t)^2 P0 + 2(1-t)t P1 + t^2 P2."""
        u = 1 - t
        return self.start * (u * u) + self.control * (2 * u * t) + self.end * (t * t)

    def derivative_at(self, t: float) -> Point:
        """B'(t) = 2(1-t)(P1-P0) + 2t(P2-P1)."""
        return (self.control - self.start) * (2 * (1 - t)) + (self.end - self.control) * (2 * t)


@dataclass(frozen=True)
class EdgePath:
    """Renderable path description for one edge.

    Example:
        >>> path = curve_path(Point(0, 0), Point(100, 0), Point(50, 0))
        >>> path.to_svg()
        'M 0,0 Q 25,0 50,0 T 100,0'
    """

    segments: tuple[Segment, ...]

    def to_svg(self) -> str:
        return " ".join(segment.to_svg() for segment in self.segments)

    def __str__(self) -> str:
        return self.to_svg()

    @property
    def is_point(self) -> bool:
        """True when the path is a bare move with no curve."""
        return all(isinstance(s, MoveTo) for s in self.segments)

    def curves(self) -> list[QuadraticBezier]:
        """Resolve the segments into explicit quadratic curves.

        Smooth segments get the reflected handle, or the current point when
        the previous segment was not a quadratic (the SVG rule).
        """
        curves: list[QuadraticBezier] = []
        current: Point | None = None
        last_control: Point | None = None
        for segment in self.segments:
            if isinstance(segment, MoveTo):
                current, last_control = segment.point, None
                continue
            if current is None:
                raise ValueError("Path must start with a move")
            if isinstance(segment, QuadTo):
                control = segment.control
            else:
                control = current * 2 - last_control if last_control is not None else current
            curves.append(QuadraticBezier(current, control, segment.end))
            current, last_control = segment.end, control
        return curves


# =============================================================================
# Public API
# =============================================================================


def _self_loop_path(source: Point, target: Point, control: Point) -> EdgePath:
    spoke = control - source
    distance = spoke.length()
    if distance == 0:
        return EdgePath((MoveTo(source),))

    direction = spoke / distance
    perpendicular = Point(-direction.y, direction.x)
    handle = control + perpendicular * (distance * LOOP_FACTOR)
    return EdgePath((MoveTo(source), QuadTo(handle, control), SmoothQuadTo(target)))


def curve_path(source: Point, target: Point, control: Point) -> EdgePath:
    """Compute the curve for an edge passing through ``control``.

    Args:
        source: Start point in graph space
        target: End point in graph space
        control: Point the curve passes through

    Returns:
        EdgePath of ``M source Q handle control T target``, or a bare move
        for a fully collapsed self-loop
    """
    chord = target - source
    distance = chord.length()
    if distance == 0:
        return _self_loop_path(source, target, control)

    direction = chord / distance
    handle = control - direction * (distance * CURVATURE_STRENGTH)
    return EdgePath((MoveTo(source), QuadTo(handle, control), SmoothQuadTo(target)))


def edge_path(graph: Graph, edge: Edge) -> EdgePath | None:
    """Curve for an edge as currently laid out, or None if it is dangling."""
    anchors = edge_anchors(graph, edge)
    if anchors is None:
        return None
    source, target = anchors
    return curve_path(source, target, resolve_control_point(edge, source, target))
