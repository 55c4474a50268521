"""Persistence for editor state."""

from graphcad.persistence.serializers import (
    JsonGraphSerializer,
    Serializer,
    graph_from_dict,
    graph_to_dict,
)
from graphcad.persistence.store import FileStateStore, InMemoryStateStore, StateStore

__all__ = [
    "FileStateStore",
    "InMemoryStateStore",
    "JsonGraphSerializer",
    "Serializer",
    "StateStore",
    "graph_from_dict",
    "graph_to_dict",
]
