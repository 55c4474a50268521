"""Editing session: the single owner and mutator of the Graph.

Every edit builds a new Graph snapshot, then, before returning:

1. re-derives the entry point from the START node's edge,
2. regenerates the code,
3. writes the snapshot to the state store (if any),
4. emits a ``GraphChangedEvent`` to registered processors.

Rejected edits raise an ``EditRejectedError`` subclass and leave the graph
untouched, since nothing is swapped in until the new snapshot is complete.

Example:
    >>> session = EditorSession()
    >>> agent = session.add_node("action", Point(100, 200), label="agent")
    >>> _ = session.connect(session.graph.start_node.id, agent.id)
    >>> 'set_entry_point("agent")' in session.code
    True
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Iterable
from typing import TYPE_CHECKING

from graphcad.codegen import GeneratedCode, compile_graph, find_entry_target
from graphcad.events.dispatcher import EventDispatcher
from graphcad.events.types import GraphChangedEvent, GraphResetEvent
from graphcad.exceptions import (
    DuplicateTerminalNodeError,
    EmptyLabelError,
    InvalidConnectionError,
    RenameNotAllowedError,
    UnknownEdgeError,
    UnknownNodeError,
)
from graphcad.graph.core import Edge, Graph, Node, NodeCategory
from graphcad.graph.identifiers import sanitize_graph_name, sanitize_identifier
from graphcad.viz.coordinates import Point, Viewport
from graphcad.viz.drag import DragController
from graphcad.viz.geometry import curve_path, default_control_point, edge_anchors, resolve_control_point

if TYPE_CHECKING:
    from graphcad.events.processor import EventProcessor
    from graphcad.persistence.store import StateStore
    from graphcad.viz.drag import PointerEventSource

logger = logging.getLogger(__name__)


def sync_entry_point(graph: Graph) -> Graph:
    """Point ``entry_point`` at whatever the START node currently leads to."""
    target = find_entry_target(graph.nodes, graph.edges)
    entry = target.name_in_code if target is not None else None
    if entry == graph.entry_point:
        return graph
    return graph.with_entry_point(entry)


def recenter_control_points(graph: Graph, node_ids: Iterable[str] | None = None) -> Graph:
    """Move auto-placed control points back to the midpoint of their edge.

    Only edges touching ``node_ids`` are considered (all edges when None).
    User-positioned control points are left alone.
    """
    ids = set(node_ids) if node_ids is not None else None
    for edge in graph.edges:
        if edge.control_point_user_positioned:
            continue
        if ids is not None and not edge.touches(ids):
            continue
        anchors = edge_anchors(graph, edge)
        if anchors is None:
            continue
        control = default_control_point(*anchors)
        if control != edge.control_point:
            graph = graph.replace_edge(Edge(edge.id, edge.source, edge.target, control, False))
    return graph


class EditorSession:
    """Owns the Graph for one editing session.

    Args:
        graph: Starting snapshot. When None, the store is asked for one,
            falling back to ``Graph.initial()``.
        store: Where snapshots are saved after every edit
        processors: Event processors notified after every edit
        pointer_source: Event source the drag controller listens on while a
            control point is being dragged
        strict_events: Propagate processor exceptions instead of logging them
    """

    def __init__(
        self,
        graph: Graph | None = None,
        *,
        store: StateStore | None = None,
        processors: list[EventProcessor] | None = None,
        pointer_source: PointerEventSource | None = None,
        strict_events: bool = False,
    ) -> None:
        if graph is None:
            graph = store.load() if store is not None else Graph.initial()
        self._store = store
        self._dispatcher = EventDispatcher(processors, strict=strict_events)
        self._graph = sync_entry_point(graph)
        self._code = compile_graph(self._graph)
        self.viewport = Viewport()
        self.drag = DragController(
            get_zoom=lambda: self.viewport.zoom,
            on_commit=self.commit_control_point,
            event_source=pointer_source,
        )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def graph(self) -> Graph:
        return self._graph

    @property
    def code(self) -> GeneratedCode:
        return self._code

    def node_labels(self) -> dict[str, tuple[str, str]]:
        """node id -> (display label, code identifier), for the host canvas."""
        return {n.id: (n.label, n.code_identifier) for n in self._graph.nodes}

    def control_point(self, edge_id: str) -> Point:
        """Control point of an edge as currently drawn (live while dragging)."""
        edge = self._require_edge(edge_id)
        state = self.drag.state
        if self.drag.is_dragging and state.edge_id == edge_id:
            return state.live
        anchors = edge_anchors(self._graph, edge)
        if anchors is None:
            return edge.control_point or Point(0, 0)
        return resolve_control_point(edge, *anchors)

    def edge_paths(self) -> dict[str, str]:
        """edge id -> SVG path string for every drawable edge.

        The edge being dragged is drawn through its live preview point.
        Dangling edges are skipped.
        """
        paths: dict[str, str] = {}
        for edge in self._graph.edges:
            anchors = edge_anchors(self._graph, edge)
            if anchors is None:
                continue
            paths[edge.id] = curve_path(*anchors, self.control_point(edge.id)).to_svg()
        return paths

    # ------------------------------------------------------------------
    # Node edits
    # ------------------------------------------------------------------

    def add_node(
        self,
        category: NodeCategory | str,
        position: Point | None = None,
        label: str | None = None,
    ) -> Node:
        """Drop a new node onto the canvas.

        Raises:
            DuplicateTerminalNodeError: If a start/end node already exists
            EmptyLabelError: If an explicit label is blank
        """
        category = NodeCategory(category)
        graph = self._graph
        if category.is_terminal and graph.first_of_category(category) is not None:
            raise DuplicateTerminalNodeError(category)

        node_id = f"{category.value}-{uuid.uuid4().hex[:8]}"
        if category.is_terminal or label is None:
            label = category.default_label
        else:
            label = label.strip()
            if not label:
                raise EmptyLabelError(node_id)

        node = Node(
            id=node_id,
            category=category,
            label=label,
            code_identifier=sanitize_identifier(label, graph.nodes, category=category),
            implementation_ref=category.default_implementation,
            position=position or Point(0, 0),
        )
        self._commit(graph.with_node(node), "add_node", node.id)
        return node

    def rename_node(self, node_id: str, label: str) -> Node:
        """Change a node's label and re-derive its identifier.

        Raises:
            UnknownNodeError: If the node does not exist
            RenameNotAllowedError: For start/end nodes
            EmptyLabelError: If the label is blank
        """
        node = self._require_node(node_id)
        if node.category.is_terminal:
            raise RenameNotAllowedError(node_id, node.category)
        label = label.strip()
        if not label:
            raise EmptyLabelError(node_id)

        identifier = sanitize_identifier(label, self._graph.nodes, exclude_node_id=node_id)
        renamed = Node(node.id, node.category, label, identifier, node.implementation_ref, node.position)
        self._commit(self._graph.replace_node(renamed), "rename_node", node_id)
        return renamed

    def move_node(self, node_id: str, position: Point) -> Node:
        """Reposition a node; auto-placed control points follow it."""
        node = self._require_node(node_id)
        moved = Node(node.id, node.category, node.label, node.code_identifier, node.implementation_ref, position)
        graph = recenter_control_points(self._graph.replace_node(moved), [node_id])
        self._commit(graph, "move_node", node_id)
        return moved

    def remove_nodes(self, node_ids: Iterable[str]) -> None:
        """Delete nodes together with every edge touching them."""
        ids = list(node_ids)
        for node_id in ids:
            self._require_node(node_id)
        self._commit(self._graph.without_nodes(ids), "remove_nodes", ",".join(ids))

    # ------------------------------------------------------------------
    # Edge edits
    # ------------------------------------------------------------------

    def connect(self, source: str, target: str) -> Edge:
        """Draw an edge from ``source`` to ``target``.

        Connecting the same pair twice returns the existing edge unchanged.
        A new self-loop starts with its control point on the node's handle,
        so it draws as a single point until the control point is dragged.

        Raises:
            UnknownNodeError: If either node does not exist
            InvalidConnectionError: For edges leaving END or entering START
        """
        source_node = self._require_node(source)
        target_node = self._require_node(target)
        if source_node.category is NodeCategory.END:
            raise InvalidConnectionError("END node has no outgoing connections.")
        if target_node.category is NodeCategory.START:
            raise InvalidConnectionError("START node has no incoming connections.")

        existing = self._graph.edges_between(source, target)
        if existing:
            return existing[0]

        edge = Edge(id=f"edge-{source}-{target}", source=source, target=target)
        graph = recenter_control_points(self._graph.with_edge(edge), [source, target])
        self._commit(graph, "connect", edge.id)
        return graph.edge(edge.id)

    def remove_edges(self, edge_ids: Iterable[str]) -> None:
        ids = list(edge_ids)
        for edge_id in ids:
            self._require_edge(edge_id)
        self._commit(self._graph.without_edges(ids), "remove_edges", ",".join(ids))

    def commit_control_point(self, edge_id: str, point: Point) -> Edge:
        """Pin an edge's control point where the user dropped it."""
        edge = self._require_edge(edge_id)
        pinned = Edge(edge.id, edge.source, edge.target, point, True)
        self._commit(self._graph.replace_edge(pinned), "commit_control_point", edge_id)
        return pinned

    def begin_drag(self, edge_id: str, screen: Point) -> DragController:
        """Start dragging an edge's control point from a pointer position.

        Returns the session's drag controller; feed it moves and a release
        (directly or through the pointer source).
        """
        self.drag.begin(edge_id, screen, self.control_point(edge_id))
        return self.drag

    # ------------------------------------------------------------------
    # Graph-level edits
    # ------------------------------------------------------------------

    def set_graph_name(self, raw: str) -> str:
        """Set the graph variable name; unsafe characters are stripped."""
        name = sanitize_graph_name(raw)
        self._commit(self._graph.with_graph_name(name), "set_graph_name")
        return name

    def reset(self) -> None:
        """Throw away the graph and start over from the initial one."""
        self._graph = Graph.initial()
        self._code = compile_graph(self._graph)
        if self._store is not None:
            self._store.save(self._graph)
        self._dispatcher.emit(GraphResetEvent(self._graph, self._code.source))

    def close(self) -> None:
        self._dispatcher.shutdown()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _require_node(self, node_id: str) -> Node:
        node = self._graph.find_node(node_id)
        if node is None:
            raise UnknownNodeError(node_id)
        return node

    def _require_edge(self, edge_id: str) -> Edge:
        edge = self._graph.find_edge(edge_id)
        if edge is None:
            raise UnknownEdgeError(edge_id)
        return edge

    def _commit(self, graph: Graph, action: str, subject: str | None = None) -> None:
        graph = sync_entry_point(graph)
        code = compile_graph(graph)
        self._graph, self._code = graph, code
        if self._store is not None:
            self._store.save(graph)
        logger.debug("Committed %s (%s)", action, subject)
        self._dispatcher.emit(GraphChangedEvent(graph, code.source, action=action, subject=subject))
