"""Coordinate spaces for the editor canvas.

Two spaces matter here: *screen* space (pointer pixels reported by the host)
and *graph* space (where node positions and edge control points live). The
host's viewport pans and zooms between them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Point:
    """Immutable 2D point.

    Supports coordinate-wise addition/subtraction and scaling by a number,
    which is all the curve math needs.

    Example:
        >>> Point(1, 2) + Point(3, 4)
        Point(x=4, y=6)
        >>> (Point(4, 6) - Point(1, 2)) / 2
        Point(x=1.5, y=2.0)
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __mul__(self, factor: float) -> Point:
        return Point(self.x * factor, self.y * factor)

    __rmul__ = __mul__

    def __truediv__(self, divisor: float) -> Point:
        return Point(self.x / divisor, self.y / divisor)

    def length(self) -> float:
        """Euclidean norm, treating the point as a vector from the origin."""
        return math.hypot(self.x, self.y)

    def to_dict(self) -> dict[str, float]:
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Point:
        """Build a Point from a ``{"x": ..., "y": ...}`` mapping."""
        return cls(float(data["x"]), float(data["y"]))


def midpoint(a: Point, b: Point) -> Point:
    """Point halfway between a and b."""
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


@dataclass(frozen=True)
class Viewport:
    """Pan/zoom transform reported by the host canvas.

    A graph-space point p appears on screen at ``p * zoom + (x, y)``.

    Attributes:
        x: Horizontal pan offset in screen pixels
        y: Vertical pan offset in screen pixels
        zoom: Scale factor (screen pixels per graph unit), must be positive

    Example:
        >>> vp = Viewport(10, 20, zoom=2.0)
        >>> vp.graph_to_screen(Point(5, 5))
        Point(x=20.0, y=30.0)
        >>> vp.screen_to_graph(Point(20, 30))
        Point(x=5.0, y=5.0)
    """

    x: float = 0.0
    y: float = 0.0
    zoom: float = 1.0

    def __post_init__(self) -> None:
        if not self.zoom > 0:
            raise ValueError(f"Viewport zoom must be positive, got {self.zoom!r}")

    def screen_to_graph(self, point: Point) -> Point:
        """Convert a screen-space point into graph space."""
        return Point((point.x - self.x) / self.zoom, (point.y - self.y) / self.zoom)

    def graph_to_screen(self, point: Point) -> Point:
        """Convert a graph-space point into screen space."""
        return Point(point.x * self.zoom + self.x, point.y * self.zoom + self.y)

    def screen_delta_to_graph(self, delta: Point) -> Point:
        """Convert a screen-space displacement into a graph-space one.

        Pan does not affect displacements, only zoom does.
        """
        return delta / self.zoom
