"""Exceptions raised by the graphcad editing core."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphcad.graph.core import NodeCategory


class EditRejectedError(Exception):
    """An edit was refused and the graph was left unchanged.

    The message is meant to be shown to the user as-is.

    Attributes:
        message: Human-readable notice
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateTerminalNodeError(EditRejectedError):
    """A second start or end node was placed.

    Attributes:
        category: The terminal category that already exists
    """

    def __init__(self, category: NodeCategory, message: str | None = None) -> None:
        self.category = category
        super().__init__(message or f"{category.default_label} node already exists.")


class EmptyLabelError(EditRejectedError):
    """A rename was committed with an empty (or whitespace-only) label."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__("Node name (Label) cannot be empty.")


class RenameNotAllowedError(EditRejectedError):
    """Start and end nodes keep their fixed labels and identifiers."""

    def __init__(self, node_id: str, category: NodeCategory) -> None:
        self.node_id = node_id
        self.category = category
        super().__init__(f"{category.default_label} node cannot be renamed.")


class UnknownNodeError(EditRejectedError):
    """An edit referenced a node that is not in the graph."""

    def __init__(self, node_id: str) -> None:
        self.node_id = node_id
        super().__init__(f"Node not found: {node_id!r}")


class UnknownEdgeError(EditRejectedError):
    """An edit referenced an edge that is not in the graph."""

    def __init__(self, edge_id: str) -> None:
        self.edge_id = edge_id
        super().__init__(f"Edge not found: {edge_id!r}")


class DragStateError(Exception):
    """A control-point drag was started while another one is still active.

    Only one drag session may exist at a time.
    """

    pass


class StateFormatError(Exception):
    """Persisted editor state could not be parsed into a Graph."""

    pass


class InvalidConnectionError(EditRejectedError):
    """A connection was drawn from END or into START."""

    pass
