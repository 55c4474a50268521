"""Shared helpers for commands that edit the state file."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Annotated

import typer

from graphcad.cli._config import load_config
from graphcad.exceptions import DragStateError, EditRejectedError
from graphcad.graph.core import Graph, Node
from graphcad.persistence.store import FileStateStore
from graphcad.session import EditorSession
from graphcad.viz.drag import PointerEventSource

StateOption = Annotated[
    str | None,
    typer.Option("--state", "-s", help="State file (default: [tool.graphcad] state or graphcad.json)"),
]


def state_store(state: str | None) -> FileStateStore:
    """State store for --state, falling back to the configured default."""
    return FileStateStore(state or load_config().state)


def open_session(state: str | None, pointer_source: PointerEventSource | None = None) -> EditorSession:
    """Open an editing session backed by the state file."""
    return EditorSession(store=state_store(state), pointer_source=pointer_source)


def resolve_node(graph: Graph, ref: str) -> Node:
    """Find a node by id, then by code identifier."""
    node = graph.find_node(ref) or graph.node_by_identifier(ref)
    if node is None:
        print(f"Error: No node with id or identifier '{ref}'")
        raise typer.Exit(1)
    return node


@contextmanager
def user_notice() -> Iterator[None]:
    """Turn rejected edits into a printed notice and exit code 1."""
    try:
        yield
    except (EditRejectedError, DragStateError) as exc:
        print(f"Error: {exc}")
        raise typer.Exit(1) from exc
