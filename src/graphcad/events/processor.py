"""Event processor base classes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from graphcad.events.types import Event, GraphChangedEvent, GraphResetEvent


# Mapping from event class name to handler method name.
_EVENT_METHOD_MAP: dict[str, str] = {
    "GraphChangedEvent": "on_graph_changed",
    "GraphResetEvent": "on_graph_reset",
}


class EventProcessor:
    """Base class for event consumers.

    Subclass and override ``on_event`` to receive all events,
    or use ``TypedEventProcessor`` for per-type dispatch.
    """

    def on_event(self, event: Event) -> None:
        """Called for every event. Override in subclasses."""

    def shutdown(self) -> None:
        """Called once when the session closes. Override to flush buffers."""


class TypedEventProcessor(EventProcessor):
    """Dispatches ``on_event`` to typed handler methods automatically.

    Unhandled event types are silently ignored.
    """

    def on_event(self, event: Event) -> None:
        method_name = _EVENT_METHOD_MAP.get(type(event).__name__)
        if method_name is not None:
            method = getattr(self, method_name, None)
            if method is not None:
                method(event)

    def on_graph_changed(self, event: GraphChangedEvent) -> None: ...
    def on_graph_reset(self, event: GraphResetEvent) -> None: ...
