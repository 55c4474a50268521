"""graphcad - visually built workflow graphs, compiled to LangGraph code."""

from graphcad.codegen import GeneratedCode, compile_code, compile_graph
from graphcad.events import (
    BaseEvent,
    Event,
    EventDispatcher,
    EventProcessor,
    GraphChangedEvent,
    GraphResetEvent,
    TypedEventProcessor,
)
from graphcad.exceptions import (
    DragStateError,
    DuplicateTerminalNodeError,
    EditRejectedError,
    EmptyLabelError,
    InvalidConnectionError,
    RenameNotAllowedError,
    StateFormatError,
    UnknownEdgeError,
    UnknownNodeError,
)
from graphcad.graph import (
    Edge,
    Graph,
    GraphIssue,
    Node,
    NodeCategory,
    NodeRole,
    find_issues,
    sanitize_graph_name,
    sanitize_identifier,
)
from graphcad.persistence import FileStateStore, InMemoryStateStore, JsonGraphSerializer
from graphcad.session import EditorSession
from graphcad.viz import DragController, EdgePath, Point, Viewport, curve_path, edge_path

__all__ = [
    # Model
    "Edge",
    "Graph",
    "Node",
    "NodeCategory",
    "NodeRole",
    # Identifiers
    "sanitize_identifier",
    "sanitize_graph_name",
    # Code generation
    "GeneratedCode",
    "compile_code",
    "compile_graph",
    "GraphIssue",
    "find_issues",
    # Geometry
    "Point",
    "Viewport",
    "EdgePath",
    "curve_path",
    "edge_path",
    "DragController",
    # Session
    "EditorSession",
    "FileStateStore",
    "InMemoryStateStore",
    "JsonGraphSerializer",
    # Errors
    "EditRejectedError",
    "DuplicateTerminalNodeError",
    "EmptyLabelError",
    "RenameNotAllowedError",
    "InvalidConnectionError",
    "UnknownNodeError",
    "UnknownEdgeError",
    "DragStateError",
    "StateFormatError",
    # Events
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "TypedEventProcessor",
    "GraphChangedEvent",
    "GraphResetEvent",
]
