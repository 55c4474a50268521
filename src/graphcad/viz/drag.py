"""Control-point drag controller.

A small state machine that turns pointer events into control-point updates:

    Idle --PointerDown--> Dragging --PointerMove*--> Dragging --PointerUp--> Idle

Moves only update a live preview. The edge itself is changed once, when the
pointer is released, through the ``on_commit`` callback. Pointer listeners
live exactly as long as the drag: they are subscribed on press and always
unsubscribed on release.

Example:
    >>> commits = []
    >>> ctrl = DragController(get_zoom=lambda: 2.0, on_commit=lambda e, p: commits.append((e, p)))
    >>> ctrl.begin("edge-1", screen=Point(0, 0), control=Point(50, 50))
    >>> ctrl.move(Point(20, -10))
    Point(x=60.0, y=45.0)
    >>> ctrl.release()
    Point(x=60.0, y=45.0)
    >>> commits
    [('edge-1', Point(x=60.0, y=45.0))]
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, replace
from typing import Protocol, Union

from graphcad.exceptions import DragStateError
from graphcad.viz.coordinates import Point

logger = logging.getLogger(__name__)


# =============================================================================
# Pointer events
# =============================================================================


@dataclass(frozen=True)
class PointerDown:
    """Pointer pressed on an edge's control-point handle."""

    edge_id: str
    screen: Point


@dataclass(frozen=True)
class PointerMove:
    screen: Point


@dataclass(frozen=True)
class PointerUp:
    screen: Point


PointerEvent = Union[PointerDown, PointerMove, PointerUp]
PointerListener = Callable[[PointerEvent], None]


class PointerEventSource(Protocol):
    """Where the controller listens for move/up events during a drag."""

    def subscribe(self, listener: PointerListener) -> None: ...

    def unsubscribe(self, listener: PointerListener) -> None: ...


class ScriptedEventSource:
    """Event source that replays a fixed list of events.

    Events are delivered in order to whoever is subscribed at the time they
    are played. Useful for tests and for driving a drag from the CLI.
    """

    def __init__(self, events: list[PointerEvent] | None = None) -> None:
        self.events: list[PointerEvent] = list(events or [])
        self._listeners: list[PointerListener] = []

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def subscribe(self, listener: PointerListener) -> None:
        self._listeners.append(listener)

    def unsubscribe(self, listener: PointerListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def push(self, event: PointerEvent) -> None:
        """Deliver one event to the current listeners."""
        for listener in list(self._listeners):
            listener(event)

    def play(self) -> None:
        """Deliver every queued event, then clear the queue."""
        events, self.events = self.events, []
        for event in events:
            self.push(event)


# =============================================================================
# States
# =============================================================================


@dataclass(frozen=True)
class Idle:
    pass


@dataclass(frozen=True)
class Dragging:
    """An active drag session.

    Attributes:
        edge_id: Edge whose control point is being dragged
        origin_screen: Pointer position when the drag started
        origin_control: Control point (graph space) when the drag started
        live: Current preview position of the control point
    """

    edge_id: str
    origin_screen: Point
    origin_control: Point
    live: Point


DragState = Union[Idle, Dragging]
IDLE = Idle()


# =============================================================================
# Controller
# =============================================================================


class DragController:
    """Drives one control-point drag at a time.

    Args:
        get_zoom: Returns the current viewport zoom; read on every move so a
            zoom change mid-drag is honored
        on_commit: Called with (edge_id, point) when the pointer is released
        event_source: Optional source to subscribe to for the duration of
            each drag
    """

    def __init__(
        self,
        get_zoom: Callable[[], float],
        on_commit: Callable[[str, Point], None],
        event_source: PointerEventSource | None = None,
    ) -> None:
        self._get_zoom = get_zoom
        self._on_commit = on_commit
        self._source = event_source
        self._state: DragState = IDLE

    @property
    def state(self) -> DragState:
        return self._state

    @property
    def is_dragging(self) -> bool:
        return isinstance(self._state, Dragging)

    @property
    def live_point(self) -> Point | None:
        """Preview position of the dragged control point, or None when idle."""
        return self._state.live if isinstance(self._state, Dragging) else None

    def begin(self, edge_id: str, screen: Point, control: Point) -> None:
        """Start dragging ``edge_id``'s control point from ``control``.

        Raises:
            DragStateError: If another drag is still active
        """
        if isinstance(self._state, Dragging):
            raise DragStateError(
                f"Cannot start dragging '{edge_id}': edge '{self._state.edge_id}' is already being dragged"
            )
        self._state = Dragging(edge_id, screen, control, live=control)
        if self._source is not None:
            self._source.subscribe(self.handle)
        logger.debug("Drag started on %s at %s", edge_id, control)

    def move(self, screen: Point) -> Point | None:
        """Update the preview from a pointer position. Ignored while idle."""
        state = self._state
        if not isinstance(state, Dragging):
            return None
        zoom = self._get_zoom()
        if not zoom > 0:
            raise ValueError(f"Viewport zoom must be positive, got {zoom!r}")
        delta = (screen - state.origin_screen) / zoom
        self._state = replace(state, live=state.origin_control + delta)
        return self._state.live

    def release(self) -> Point | None:
        """Commit the preview and return to idle.

        Listeners are removed and the state reset even if the commit
        callback raises. Returns the committed point, or None when idle.
        """
        state = self._state
        if not isinstance(state, Dragging):
            return None
        try:
            self._on_commit(state.edge_id, state.live)
        finally:
            self._state = IDLE
            if self._source is not None:
                self._source.unsubscribe(self.handle)
        logger.debug("Drag on %s committed at %s", state.edge_id, state.live)
        return state.live

    def handle(self, event: PointerEvent) -> None:
        """Route a pointer event.

        A ``PointerDown`` has no control point attached, so starting a drag
        goes through ``begin``; here it is only rejected if a drag is active.
        """
        if isinstance(event, PointerMove):
            self.move(event.screen)
        elif isinstance(event, PointerUp):
            self.release()
        elif isinstance(event, PointerDown) and isinstance(self._state, Dragging):
            raise DragStateError(f"Pointer down on '{event.edge_id}' during an active drag")
