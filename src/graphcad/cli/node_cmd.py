"""Node CLI commands: add, rename, rm, move."""

from __future__ import annotations

from typing import Annotated

import typer

from graphcad.cli._state import StateOption, open_session, resolve_node, user_notice
from graphcad.graph.core import NodeCategory
from graphcad.viz.coordinates import Point

app = typer.Typer(help="Add, rename, move and remove nodes.")


@app.command("add")
def node_add(
    category: Annotated[NodeCategory, typer.Argument(help="Node category", case_sensitive=False)],
    label: Annotated[str | None, typer.Option("--label", "-l", help="Display label")] = None,
    x: Annotated[float, typer.Option("--x", help="X position")] = 0.0,
    y: Annotated[float, typer.Option("--y", help="Y position")] = 0.0,
    state: StateOption = None,
):
    """Add a node to the graph."""
    session = open_session(state)
    with user_notice():
        node = session.add_node(category, Point(x, y), label=label)
    print(f"Added {node.category.value} node '{node.code_identifier}' ({node.id})")


@app.command("rename")
def node_rename(
    node: Annotated[str, typer.Argument(help="Node id or code identifier")],
    label: Annotated[str, typer.Argument(help="New display label")],
    state: StateOption = None,
):
    """Rename a node; its code identifier is re-derived from the label."""
    session = open_session(state)
    target = resolve_node(session.graph, node)
    with user_notice():
        renamed = session.rename_node(target.id, label)
    print(f"Renamed '{target.code_identifier}' -> '{renamed.code_identifier}' (label: {renamed.label})")


@app.command("rm")
def node_rm(
    nodes: Annotated[list[str], typer.Argument(help="Node ids or code identifiers")],
    state: StateOption = None,
):
    """Remove nodes and the edges attached to them."""
    session = open_session(state)
    targets = [resolve_node(session.graph, ref) for ref in nodes]
    with user_notice():
        session.remove_nodes([t.id for t in targets])
    print(f"Removed {len(targets)} node(s): {', '.join(t.code_identifier for t in targets)}")


@app.command("move")
def node_move(
    node: Annotated[str, typer.Argument(help="Node id or code identifier")],
    x: Annotated[float, typer.Argument(help="New X position")],
    y: Annotated[float, typer.Argument(help="New Y position")],
    state: StateOption = None,
):
    """Move a node; edges with auto-placed control points follow."""
    session = open_session(state)
    target = resolve_node(session.graph, node)
    with user_notice():
        session.move_node(target.id, Point(x, y))
    print(f"Moved '{target.code_identifier}' to ({x:g}, {y:g})")
