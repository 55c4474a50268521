"""State stores: where the editing session writes the graph after each edit.

Loading never fails. Unreadable or malformed state falls back to the
initial graph so a corrupt file cannot stop a session from starting.
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from graphcad.exceptions import StateFormatError
from graphcad.graph.core import Graph
from graphcad.persistence.serializers import JsonGraphSerializer, Serializer

logger = logging.getLogger(__name__)


class StateStore(Protocol):
    """Protocol for state stores.

    Implementations must provide load() and save().
    """

    def load(self) -> Graph:
        """Return the stored graph, or the initial graph if none is usable."""
        ...

    def save(self, graph: Graph) -> None:
        """Persist a graph snapshot, replacing what was stored."""
        ...


class InMemoryStateStore:
    """Keeps the serialized state in memory.

    Stores bytes rather than the Graph object so it exercises the same
    serialization path as the file store.
    """

    def __init__(self, data: bytes | None = None, serializer: Serializer | None = None) -> None:
        self.data = data
        self._serializer = serializer or JsonGraphSerializer()

    def load(self) -> Graph:
        if self.data is None:
            return Graph.initial()
        try:
            return self._serializer.deserialize(self.data)
        except StateFormatError as exc:
            logger.warning("Failed to parse stored graph state, starting fresh: %s", exc)
            return Graph.initial()

    def save(self, graph: Graph) -> None:
        self.data = self._serializer.serialize(graph)

    def clear(self) -> None:
        self.data = None


class FileStateStore:
    """Stores the graph as a JSON file.

    Args:
        path: State file location
        serializer: Serializer to use (default: JsonGraphSerializer)

    Example:
        >>> store = FileStateStore("graphcad.json")
        >>> graph = store.load()      # initial graph if the file is missing
        >>> store.save(graph)
    """

    def __init__(self, path: str | os.PathLike[str], serializer: Serializer | None = None) -> None:
        self.path = Path(path)
        self._serializer = serializer or JsonGraphSerializer()

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Graph:
        if not self.path.exists():
            return Graph.initial()
        try:
            return self._serializer.deserialize(self.path.read_bytes())
        except (OSError, StateFormatError) as exc:
            logger.warning("Failed to load graph state from %s, starting fresh: %s", self.path, exc)
            return Graph.initial()

    def save(self, graph: Graph) -> None:
        """Write atomically: a crash mid-write leaves the old file intact."""
        data = self._serializer.serialize(graph)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(data)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.unlink(tmp)
            raise

    def clear(self) -> None:
        """Remove the state file if present."""
        self.path.unlink(missing_ok=True)
