"""Canvas geometry for graphcad: coordinates, edge curves and control-point drags."""

from graphcad.viz.coordinates import Point, Viewport, midpoint
from graphcad.viz.drag import (
    DragController,
    Dragging,
    Idle,
    PointerDown,
    PointerEventSource,
    PointerMove,
    PointerUp,
    ScriptedEventSource,
)
from graphcad.viz.geometry import (
    CURVATURE_STRENGTH,
    EdgePath,
    NodeGeometry,
    QuadraticBezier,
    curve_path,
    default_control_point,
    edge_anchors,
    edge_path,
    resolve_control_point,
)

__all__ = [
    "CURVATURE_STRENGTH",
    "DragController",
    "Dragging",
    "EdgePath",
    "Idle",
    "NodeGeometry",
    "Point",
    "PointerDown",
    "PointerEventSource",
    "PointerMove",
    "PointerUp",
    "QuadraticBezier",
    "ScriptedEventSource",
    "Viewport",
    "curve_path",
    "default_control_point",
    "edge_anchors",
    "edge_path",
    "midpoint",
    "resolve_control_point",
]
