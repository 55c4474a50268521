"""Serialization of editor state.

The persisted record is plain JSON::

    {"nodes": [...], "edges": [...], "entry_point": "a", "graph_name": "my_graph"}
"""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from graphcad.exceptions import StateFormatError
from graphcad.graph.core import Edge, Graph, Node, NodeCategory
from graphcad.graph.identifiers import sanitize_graph_name
from graphcad.viz.coordinates import Point


class Serializer(ABC):
    """Base class for graph state serialization."""

    @abstractmethod
    def serialize(self, graph: Graph) -> bytes:
        """Convert a graph snapshot to bytes for storage."""
        ...

    @abstractmethod
    def deserialize(self, data: bytes) -> Graph:
        """Convert stored bytes back into a graph snapshot.

        Raises:
            StateFormatError: If the data is not a valid state record
        """
        ...


def node_to_dict(node: Node) -> dict[str, Any]:
    return {
        "id": node.id,
        "category": node.category.value,
        "label": node.label,
        "code_identifier": node.code_identifier,
        "implementation_ref": node.implementation_ref,
        "position": node.position.to_dict(),
    }


def edge_to_dict(edge: Edge) -> dict[str, Any]:
    return {
        "id": edge.id,
        "source": edge.source,
        "target": edge.target,
        "control_point": edge.control_point.to_dict() if edge.control_point is not None else None,
        "control_point_user_positioned": edge.control_point_user_positioned,
    }


def graph_to_dict(graph: Graph) -> dict[str, Any]:
    return {
        "nodes": [node_to_dict(n) for n in graph.nodes],
        "edges": [edge_to_dict(e) for e in graph.edges],
        "entry_point": graph.entry_point,
        "graph_name": graph.graph_name,
    }


def node_from_dict(data: dict[str, Any]) -> Node:
    position = data.get("position")
    return Node(
        id=str(data["id"]),
        category=NodeCategory(data["category"]),
        label=str(data["label"]),
        code_identifier=str(data["code_identifier"]),
        implementation_ref=data.get("implementation_ref"),
        position=Point.from_dict(position) if position is not None else Point(0, 0),
    )


def edge_from_dict(data: dict[str, Any]) -> Edge:
    control_point = data.get("control_point")
    return Edge(
        id=str(data["id"]),
        source=str(data["source"]),
        target=str(data["target"]),
        control_point=Point.from_dict(control_point) if control_point is not None else None,
        control_point_user_positioned=bool(data.get("control_point_user_positioned", False)),
    )


def graph_from_dict(data: dict[str, Any]) -> Graph:
    """Rebuild a Graph from its dict form.

    The graph name is sanitized again on the way in; state files can be
    edited by hand.

    Raises:
        StateFormatError: On missing keys or values of the wrong shape
    """
    if not isinstance(data, dict):
        raise StateFormatError(f"State must be a JSON object, got {type(data).__name__}")
    try:
        return Graph(
            nodes=tuple(node_from_dict(n) for n in data.get("nodes") or ()),
            edges=tuple(edge_from_dict(e) for e in data.get("edges") or ()),
            entry_point=data.get("entry_point"),
            graph_name=sanitize_graph_name(str(data.get("graph_name") or "")),
        )
    except (KeyError, TypeError, ValueError, AttributeError) as exc:
        raise StateFormatError(f"Malformed graph state: {exc!r}") from exc


class JsonGraphSerializer(Serializer):
    """JSON serializer (default). Human-readable and diffable.

    Args:
        indent: Indentation passed to ``json.dumps``; None for compact output
    """

    def __init__(self, *, indent: int | None = 2):
        self._indent = indent

    def serialize(self, graph: Graph) -> bytes:
        return json.dumps(graph_to_dict(graph), indent=self._indent).encode("utf-8")

    def deserialize(self, data: bytes) -> Graph:
        try:
            raw = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise StateFormatError(f"State is not valid JSON: {exc}") from exc
        return graph_from_dict(raw)
