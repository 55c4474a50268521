"""Graph package - snapshot model, identifiers and diagnostics."""

from graphcad.graph.core import (
    DEFAULT_GRAPH_NAME,
    Edge,
    Graph,
    Node,
    NodeCategory,
    NodeRole,
)
from graphcad.graph.identifiers import sanitize_graph_name, sanitize_identifier
from graphcad.graph.issues import GraphIssue, find_issues

__all__ = [
    "DEFAULT_GRAPH_NAME",
    "Edge",
    "Graph",
    "GraphIssue",
    "Node",
    "NodeCategory",
    "NodeRole",
    "find_issues",
    "sanitize_graph_name",
    "sanitize_identifier",
]
