"""Graph snapshot model for graphcad.

A ``Graph`` is an immutable value: every edit produces a new snapshot, and
the editing session swaps the whole snapshot in one assignment. Nodes and
edges are kept in tuples so iteration order is the insertion order, which
the code generator relies on for deterministic output.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING

import networkx as nx

from graphcad.viz.coordinates import Point

if TYPE_CHECKING:
    from collections.abc import Iterable

DEFAULT_GRAPH_NAME = "my_graph"


class NodeRole(Enum):
    """What a node does in generated code.

    Values:
        EXECUTABLE: Registered as a graph node (actions and tools).
        DISPATCH: Routes to several targets; compiled into a conditional
            edge mapping and never registered itself.
        TERMINAL: The fixed start/end markers.
        ANNOTATION: Free text on the canvas; invisible to the compiler.
    """

    EXECUTABLE = "executable"
    DISPATCH = "dispatch"
    TERMINAL = "terminal"
    ANNOTATION = "annotation"


class NodeCategory(str, Enum):
    """Palette entries a user can drop onto the canvas."""

    START = "start"
    END = "end"
    ACTION = "action"
    TOOL = "tool"
    CONDITIONAL_BRANCH = "conditional_branch"
    ANNOTATION = "annotation"

    @property
    def role(self) -> NodeRole:
        return _CATEGORY_ROLES[self]

    @property
    def default_label(self) -> str:
        return _CATALOG[self][0]

    @property
    def default_implementation(self) -> str | None:
        return _CATALOG[self][1]

    @property
    def is_terminal(self) -> bool:
        return self.role is NodeRole.TERMINAL


_CATEGORY_ROLES: dict[NodeCategory, NodeRole] = {
    NodeCategory.START: NodeRole.TERMINAL,
    NodeCategory.END: NodeRole.TERMINAL,
    NodeCategory.ACTION: NodeRole.EXECUTABLE,
    NodeCategory.TOOL: NodeRole.EXECUTABLE,
    NodeCategory.CONDITIONAL_BRANCH: NodeRole.DISPATCH,
    NodeCategory.ANNOTATION: NodeRole.ANNOTATION,
}

# (default label, default implementation reference)
_CATALOG: dict[NodeCategory, tuple[str, str | None]] = {
    NodeCategory.START: ("START", "start_function"),
    NodeCategory.END: ("END", "end_function"),
    NodeCategory.ACTION: ("Agent", "agent_function"),
    NodeCategory.TOOL: ("Tool", "tool_function"),
    NodeCategory.CONDITIONAL_BRANCH: ("Conditional Edge", "condition_function"),
    NodeCategory.ANNOTATION: ("Text", None),
}


@dataclass(frozen=True)
class Node:
    """A processing step on the canvas.

    Attributes:
        id: Opaque handle, stable for the node's lifetime
        category: Palette category
        label: Free-text display label
        code_identifier: Code-safe name, unique across the graph
        implementation_ref: Name of the backing callable, if any
        position: Top-left corner of the node box in graph space
    """

    id: str
    category: NodeCategory
    label: str
    code_identifier: str
    implementation_ref: str | None = None
    position: Point = field(default_factory=lambda: Point(0, 0))

    @property
    def role(self) -> NodeRole:
        return self.category.role

    @property
    def name_in_code(self) -> str:
        """Identifier used in generated code, falling back to the node id."""
        return self.code_identifier or self.id

    @property
    def implementation(self) -> str:
        """Implementation reference, or the ``{identifier}_func`` placeholder."""
        return self.implementation_ref or f"{self.name_in_code}_func"


@dataclass(frozen=True)
class Edge:
    """A directed transition between two nodes.

    Attributes:
        id: Opaque handle
        source: Source node id
        target: Target node id
        control_point: Graph-space point the curve passes through, or None
            until geometry has been computed once
        control_point_user_positioned: True once the user has dragged the
            control point; auto-recentering stops from then on
    """

    id: str
    source: str
    target: str
    control_point: Point | None = None
    control_point_user_positioned: bool = False

    @property
    def is_self_loop(self) -> bool:
        return self.source == self.target

    def touches(self, node_ids: Iterable[str]) -> bool:
        ids = set(node_ids)
        return self.source in ids or self.target in ids


@dataclass(frozen=True)
class Graph:
    """Immutable snapshot of the whole editor state.

    Attributes:
        nodes: Nodes in insertion order
        edges: Edges in insertion order
        entry_point: Code identifier of the node reached from START, if any
        graph_name: Variable name of the generated graph object

    Example:
        >>> g = Graph.initial()
        >>> [n.code_identifier for n in g.nodes]
        ['start']
        >>> g.with_graph_name("flow").graph_name
        'flow'
    """

    nodes: tuple[Node, ...] = ()
    edges: tuple[Edge, ...] = ()
    entry_point: str | None = None
    graph_name: str = DEFAULT_GRAPH_NAME

    @classmethod
    def initial(cls) -> Graph:
        """The graph a fresh session starts with: a lone START node."""
        start = Node(
            id="start-1",
            category=NodeCategory.START,
            label=NodeCategory.START.default_label,
            code_identifier="start",
            implementation_ref=NodeCategory.START.default_implementation,
            position=Point(100, 100),
        )
        return cls(nodes=(start,))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def find_node(self, node_id: str) -> Node | None:
        return next((n for n in self.nodes if n.id == node_id), None)

    def node(self, node_id: str) -> Node:
        """Return the node with this id.

        Raises:
            KeyError: If no such node exists
        """
        found = self.find_node(node_id)
        if found is None:
            raise KeyError(node_id)
        return found

    def node_by_identifier(self, code_identifier: str) -> Node | None:
        return next((n for n in self.nodes if n.code_identifier == code_identifier), None)

    def find_edge(self, edge_id: str) -> Edge | None:
        return next((e for e in self.edges if e.id == edge_id), None)

    def edge(self, edge_id: str) -> Edge:
        """Return the edge with this id.

        Raises:
            KeyError: If no such edge exists
        """
        found = self.find_edge(edge_id)
        if found is None:
            raise KeyError(edge_id)
        return found

    def first_of_category(self, category: NodeCategory) -> Node | None:
        return next((n for n in self.nodes if n.category is category), None)

    @property
    def start_node(self) -> Node | None:
        return self.first_of_category(NodeCategory.START)

    @property
    def end_node(self) -> Node | None:
        return self.first_of_category(NodeCategory.END)

    def edges_between(self, source: str, target: str) -> list[Edge]:
        return [e for e in self.edges if e.source == source and e.target == target]

    # ------------------------------------------------------------------
    # Copy-on-write edits
    # ------------------------------------------------------------------

    def with_node(self, node: Node) -> Graph:
        return replace(self, nodes=(*self.nodes, node))

    def replace_node(self, node: Node) -> Graph:
        """Swap in a new version of an existing node, keeping its position in order."""
        return replace(self, nodes=tuple(node if n.id == node.id else n for n in self.nodes))

    def without_nodes(self, node_ids: Iterable[str]) -> Graph:
        """Drop nodes and every edge touching them."""
        ids = set(node_ids)
        return replace(
            self,
            nodes=tuple(n for n in self.nodes if n.id not in ids),
            edges=tuple(e for e in self.edges if not e.touches(ids)),
        )

    def with_edge(self, edge: Edge) -> Graph:
        return replace(self, edges=(*self.edges, edge))

    def replace_edge(self, edge: Edge) -> Graph:
        return replace(self, edges=tuple(edge if e.id == edge.id else e for e in self.edges))

    def without_edges(self, edge_ids: Iterable[str]) -> Graph:
        ids = set(edge_ids)
        return replace(self, edges=tuple(e for e in self.edges if e.id not in ids))

    def with_graph_name(self, graph_name: str) -> Graph:
        return replace(self, graph_name=graph_name)

    def with_entry_point(self, entry_point: str | None) -> Graph:
        return replace(self, entry_point=entry_point)

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def to_nx_graph(self) -> nx.MultiDiGraph:
        """Build a NetworkX view of the graph for analysis.

        Nodes are keyed by id. Edges whose endpoints are missing are left
        out, since NetworkX would otherwise invent bare nodes for them.
        """
        g = nx.MultiDiGraph(graph_name=self.graph_name)
        for n in self.nodes:
            g.add_node(
                n.id,
                category=n.category.value,
                role=n.role.value,
                label=n.label,
                code_identifier=n.code_identifier,
            )
        for e in self.edges:
            if e.source in g and e.target in g:
                g.add_edge(e.source, e.target, key=e.id)
        return g
