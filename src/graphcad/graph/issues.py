"""Read-only diagnostics for a graph snapshot.

The code generator silently omits anything it cannot resolve. These checks
surface those omissions so the user (or the CLI ``inspect`` command) can
see why a node or edge is missing from the generated code.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass

import networkx as nx

from graphcad.graph.core import Graph, NodeRole


@dataclass(frozen=True)
class GraphIssue:
    """A single problem found in a graph.

    Attributes:
        kind: Machine-readable issue category
        subject: Id of the offending node or edge (or "" for graph-wide issues)
        message: Human-readable description
    """

    kind: str
    subject: str
    message: str


def find_issues(graph: Graph) -> list[GraphIssue]:
    """Run every diagnostic and return the issues found, in a stable order."""
    issues: list[GraphIssue] = []
    issues.extend(_dangling_edges(graph))
    issues.extend(_dispatch_upstreams(graph))
    issues.extend(_entry_issues(graph))
    issues.extend(_unreachable_nodes(graph))
    issues.extend(_duplicate_identifiers(graph))
    return issues


def _dangling_edges(graph: Graph) -> list[GraphIssue]:
    ids = {n.id for n in graph.nodes}
    issues = []
    for edge in graph.edges:
        missing = [end for end in (edge.source, edge.target) if end not in ids]
        if missing:
            issues.append(
                GraphIssue(
                    "dangling_edge",
                    edge.id,
                    f"Edge '{edge.id}' references missing node(s): {', '.join(missing)}",
                )
            )
    return issues


def _dispatch_upstreams(graph: Graph) -> list[GraphIssue]:
    issues = []
    for node in graph.nodes:
        if node.role is not NodeRole.DISPATCH:
            continue
        upstream = [e for e in graph.edges if e.target == node.id]
        if not upstream:
            issues.append(
                GraphIssue(
                    "unresolved_dispatch",
                    node.id,
                    f"Conditional node '{node.code_identifier}' has no incoming edge; "
                    f"its branches are not emitted",
                )
            )
        elif len(upstream) > 1:
            issues.append(
                GraphIssue(
                    "ambiguous_dispatch",
                    node.id,
                    f"Conditional node '{node.code_identifier}' has {len(upstream)} incoming edges; "
                    f"only '{upstream[0].source}' is used as the branch source",
                )
            )
    return issues


def _entry_issues(graph: Graph) -> list[GraphIssue]:
    start = graph.start_node
    if start is None:
        return [GraphIssue("missing_start", "", "Graph has no START node; no entry point is emitted")]
    if not any(e.source == start.id for e in graph.edges):
        return [GraphIssue("no_entry_edge", start.id, "START is not connected; no entry point is emitted")]
    return []


def _unreachable_nodes(graph: Graph) -> list[GraphIssue]:
    start = graph.start_node
    if start is None:
        return []
    nx_graph = graph.to_nx_graph()
    reachable = nx.descendants(nx_graph, start.id) | {start.id}
    return [
        GraphIssue("unreachable", n.id, f"Node '{n.code_identifier}' is not reachable from START")
        for n in graph.nodes
        if n.id not in reachable and n.role is not NodeRole.ANNOTATION
    ]


def _duplicate_identifiers(graph: Graph) -> list[GraphIssue]:
    counts = Counter(n.code_identifier for n in graph.nodes)
    return [
        GraphIssue("duplicate_identifier", "", f"Identifier '{ident}' is used by {count} nodes")
        for ident, count in counts.items()
        if count > 1
    ]
