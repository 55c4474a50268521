"""Event system for observing an editing session."""

from graphcad.events.dispatcher import EventDispatcher
from graphcad.events.processor import EventProcessor, TypedEventProcessor
from graphcad.events.types import BaseEvent, Event, GraphChangedEvent, GraphResetEvent

__all__ = [
    "BaseEvent",
    "Event",
    "EventDispatcher",
    "EventProcessor",
    "GraphChangedEvent",
    "GraphResetEvent",
    "TypedEventProcessor",
]
