"""Code generator: lowers an editor Graph into LangGraph construction code.

The lowering is fixed and deterministic. Given the same nodes and edges in
the same order, the output is byte-identical.

Usage:
    code = compile_graph(graph)
    print(code)               # raw Python source
    code.source               # same, as a str
    "add_edge" in code        # substring checks delegate to the source

Malformed intermediate states are expected while the user is still editing,
so edges pointing at missing nodes and dispatch nodes without an upstream
node are left out of the output instead of raising.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from graphcad.graph.core import Graph, NodeCategory, NodeRole

if TYPE_CHECKING:
    from collections.abc import Sequence

    from graphcad.graph.core import Edge, Node

logger = logging.getLogger(__name__)

INDENT = "    "

HEADER_TEMPLATE = (
    "from typing import TypedDict\n"
    "\n"
    "from langgraph.graph import StateGraph\n"
    "\n"
    "\n"
    "class AgentState(TypedDict, total=False):\n"
    "    pass\n"
    "\n"
    "\n"
    "{graph} = StateGraph(AgentState)"
)

DISPATCHER_PREFIX = "conditional_function_"


# =============================================================================
# GeneratedCode (display-friendly result)
# =============================================================================


class GeneratedCode:
    """Generated Python source for a graph.

    Prints as the raw source and renders as Python in notebooks.

    Example:
        >>> code = compile_graph(Graph.initial())
        >>> print(code)           # raw source
        >>> code.lines[-1]
        'my_graph = StateGraph(AgentState)'
    """

    def __init__(self, source: str) -> None:
        self.source = source

    def __str__(self) -> str:
        return self.source

    def __repr__(self) -> str:
        return f"GeneratedCode({len(self.lines)} lines)"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, GeneratedCode):
            return self.source == other.source
        if isinstance(other, str):
            return self.source == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.source)

    def __contains__(self, item: str) -> bool:
        return item in self.source

    @property
    def lines(self) -> list[str]:
        return self.source.split("\n")

    def _repr_mimebundle_(self, **kwargs: Any) -> dict[str, str]:
        return {
            "text/x-python": self.source,
            "text/plain": self.source,
        }


# =============================================================================
# Dispatch grouping
# =============================================================================


@dataclass
class DispatchGroup:
    """Targets reached through one conditional-branch node.

    Attributes:
        dispatch_node_id: Id of the conditional-branch node
        upstream: Code identifier of the node feeding the dispatcher
        targets: target identifier -> target identifier, insertion ordered
    """

    dispatch_node_id: str
    upstream: str
    targets: dict[str, str] = field(default_factory=dict)


def _resolve_upstream(dispatch_node_id: str, edges: Sequence[Edge], by_id: dict[str, Node]) -> Node | None:
    """Find the node one level above a dispatcher.

    The first edge (in collection order) that ends at the dispatcher wins.
    """
    upstream_edge = next((e for e in edges if e.target == dispatch_node_id), None)
    if upstream_edge is None:
        return None
    return by_id.get(upstream_edge.source)


def group_dispatch_edges(
    dispatch_edges: Sequence[Edge],
    all_edges: Sequence[Edge],
    by_id: dict[str, Node],
) -> list[DispatchGroup]:
    """Collapse the outgoing edges of each dispatcher into one group.

    Groups come back in the order their dispatcher is first encountered.
    Duplicate targets collapse into a single mapping entry.
    """
    groups: dict[str, DispatchGroup] = {}
    for edge in dispatch_edges:
        dispatcher = by_id.get(edge.source)
        target = by_id.get(edge.target)
        upstream = _resolve_upstream(edge.source, all_edges, by_id)
        if dispatcher is None or target is None or upstream is None:
            logger.debug("Skipping conditional edge %s: unresolved endpoint or upstream", edge.id)
            continue

        group = groups.get(dispatcher.id)
        if group is None:
            group = groups[dispatcher.id] = DispatchGroup(dispatcher.id, upstream.name_in_code)
        group.targets[target.name_in_code] = target.name_in_code
    return list(groups.values())


# =============================================================================
# Line builders
# =============================================================================


def _format_node(graph_name: str, node: Node) -> str:
    # unset implementations become string literals
    implementation = node.implementation if node.implementation_ref else f'"{node.implementation}"'
    return f'{graph_name}.add_node("{node.name_in_code}", {implementation})'


def _format_entry_point(graph_name: str, identifier: str) -> str:
    return f'{graph_name}.set_entry_point("{identifier}")'


def _format_edge(graph_name: str, source: str, target: str) -> str:
    return f'{graph_name}.add_edge("{source}", "{target}")'


def _format_dispatch(graph_name: str, group: DispatchGroup, index: int) -> list[str]:
    lines = [
        "",
        f"{graph_name}.add_conditional_edges(",
        f'{INDENT}"{group.upstream}",',
        f"{INDENT}{DISPATCHER_PREFIX}{index},",
        f"{INDENT}{{",
    ]
    lines.extend(f'{INDENT * 2}"{key}": "{value}",' for key, value in group.targets.items())
    lines.extend([f"{INDENT}}},", ")"])
    return lines


# =============================================================================
# Public API
# =============================================================================


def find_entry_target(nodes: Sequence[Node], edges: Sequence[Edge]) -> Node | None:
    """Return the node the START node points at, if both exist."""
    start = next((n for n in nodes if n.category is NodeCategory.START), None)
    if start is None:
        return None
    start_edge = next((e for e in edges if e.source == start.id), None)
    if start_edge is None:
        return None
    return next((n for n in nodes if n.id == start_edge.target), None)


def compile_code(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    entry_point: str | None,
    graph_name: str,
) -> str:
    """Generate LangGraph construction code for a node/edge collection.

    Steps, in order:

    1. Header declaring the ``graph_name`` StateGraph.
    2. ``add_node`` for every executable node, in collection order.
    3. ``set_entry_point`` naming the target of the START node's edge.
    4. Conditional-branch edges grouped per dispatcher into
       ``add_conditional_edges`` blocks keyed by the upstream node.
    5. ``add_edge`` for every remaining edge, in collection order.

    Args:
        nodes: Nodes in iteration order
        edges: Edges in iteration order
        entry_point: Entry point recorded on the graph. The emitted entry
            point is always derived from the START node's outgoing edge;
            this value is accepted for interface symmetry with persisted
            state.
        graph_name: Variable name for the generated StateGraph

    Returns:
        Generated source text
    """
    by_id = {n.id: n for n in nodes}
    lines = HEADER_TEMPLATE.format(graph=graph_name).split("\n")

    # --- Node registrations ---
    for node in nodes:
        if node.role is NodeRole.EXECUTABLE:
            lines.append(_format_node(graph_name, node))

    # --- Entry point ---
    entry_target = find_entry_target(nodes, edges)
    if entry_target is not None:
        lines.append(_format_entry_point(graph_name, entry_target.name_in_code))
    elif entry_point:
        logger.debug("Recorded entry point %r has no START edge; not emitted", entry_point)

    # --- Edge classification ---
    def role_of(node_id: str) -> NodeRole | None:
        node = by_id.get(node_id)
        return node.role if node is not None else None

    def is_start(node_id: str) -> bool:
        node = by_id.get(node_id)
        return node is not None and node.category is NodeCategory.START

    remaining = [
        e
        for e in edges
        if role_of(e.source) is not NodeRole.ANNOTATION
        and role_of(e.target) is not NodeRole.ANNOTATION
        and not is_start(e.source)
    ]

    dispatch_edges = [e for e in remaining if role_of(e.source) is NodeRole.DISPATCH]
    for index, group in enumerate(group_dispatch_edges(dispatch_edges, edges, by_id), start=1):
        lines.extend(_format_dispatch(graph_name, group, index))

    # --- Plain transitions ---
    for edge in remaining:
        source, target = by_id.get(edge.source), by_id.get(edge.target)
        if source is None or target is None:
            logger.debug("Skipping dangling edge %s (%s -> %s)", edge.id, edge.source, edge.target)
            continue
        if NodeRole.DISPATCH in (source.role, target.role):
            continue
        lines.append(_format_edge(graph_name, source.name_in_code, target.name_in_code))

    return "\n".join(lines)


def compile_graph(graph: Graph) -> GeneratedCode:
    """Generate LangGraph construction code for a Graph snapshot.

    Example:
        >>> print(compile_graph(graph))
        from typing import TypedDict
        ...
        my_graph = StateGraph(AgentState)
        my_graph.add_node("a", agent_function)
        my_graph.set_entry_point("a")
        my_graph.add_edge("a", "end")
    """
    return GeneratedCode(compile_code(graph.nodes, graph.edges, graph.entry_point, graph.graph_name))
