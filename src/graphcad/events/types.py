"""Event types emitted by the editing session."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from graphcad.graph.core import Graph


def _now() -> float:
    """Current timestamp."""
    return time.time()


@dataclass(frozen=True)
class BaseEvent:
    """Base class for all session events.

    Attributes:
        graph: Snapshot after the change
        code: Generated code for that snapshot
        timestamp: Unix timestamp when the event was created
    """

    graph: Graph
    code: str
    timestamp: float = field(default_factory=_now)


@dataclass(frozen=True)
class GraphChangedEvent(BaseEvent):
    """Emitted after every committed edit.

    Attributes:
        action: Name of the session operation (e.g. "add_node", "connect")
        subject: Id of the node or edge the edit was about, if any
    """

    action: str = ""
    subject: str | None = None


@dataclass(frozen=True)
class GraphResetEvent(BaseEvent):
    """Emitted when the session is reset to the initial graph."""


Event = Union[GraphChangedEvent, GraphResetEvent]
