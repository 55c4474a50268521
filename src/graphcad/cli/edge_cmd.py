"""Edge CLI commands: add, rm, path, drag."""

from __future__ import annotations

from typing import Annotated

import typer

from graphcad.cli._format import format_point, print_json
from graphcad.cli._state import StateOption, open_session, resolve_node, user_notice
from graphcad.viz.coordinates import Point, Viewport
from graphcad.viz.drag import PointerMove, PointerUp, ScriptedEventSource

app = typer.Typer(help="Connect nodes and shape edge curves.")


@app.command("add")
def edge_add(
    source: Annotated[str, typer.Argument(help="Source node id or code identifier")],
    target: Annotated[str, typer.Argument(help="Target node id or code identifier")],
    state: StateOption = None,
):
    """Connect two nodes."""
    session = open_session(state)
    src = resolve_node(session.graph, source)
    tgt = resolve_node(session.graph, target)
    with user_notice():
        edge = session.connect(src.id, tgt.id)
    print(f"Connected '{src.code_identifier}' -> '{tgt.code_identifier}' ({edge.id})")


@app.command("rm")
def edge_rm(
    edges: Annotated[list[str], typer.Argument(help="Edge ids")],
    state: StateOption = None,
):
    """Remove edges."""
    session = open_session(state)
    with user_notice():
        session.remove_edges(edges)
    print(f"Removed {len(edges)} edge(s)")


@app.command("path")
def edge_path_cmd(
    edge: Annotated[str | None, typer.Argument(help="Edge id (default: all edges)")] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    state: StateOption = None,
):
    """Print the SVG path of one or all edges."""
    session = open_session(state)
    paths = session.edge_paths()
    if edge is not None:
        if edge not in paths:
            print(f"Error: No drawable edge '{edge}'")
            raise typer.Exit(1)
        paths = {edge: paths[edge]}

    if as_json:
        print_json("edge.path", paths)
        return
    for edge_id, path in paths.items():
        print(f"{edge_id}\t{path}")


@app.command("drag")
def edge_drag(
    edge: Annotated[str, typer.Argument(help="Edge id")],
    dx: Annotated[float, typer.Argument(help="Horizontal pointer movement in screen pixels")],
    dy: Annotated[float, typer.Argument(help="Vertical pointer movement in screen pixels")],
    zoom: Annotated[float, typer.Option("--zoom", help="Viewport zoom during the drag")] = 1.0,
    steps: Annotated[int, typer.Option("--steps", min=1, help="Pointer move events to emit")] = 1,
    state: StateOption = None,
):
    """Drag an edge's control point by (DX, DY) screen pixels and pin it there."""
    if zoom <= 0:
        print("Error: --zoom must be positive")
        raise typer.Exit(1)

    source = ScriptedEventSource()
    session = open_session(state, pointer_source=source)
    session.viewport = Viewport(zoom=zoom)

    with user_notice():
        before = session.control_point(edge)
        session.begin_drag(edge, Point(0, 0))
        for i in range(1, steps + 1):
            source.events.append(PointerMove(Point(dx * i / steps, dy * i / steps)))
        source.events.append(PointerUp(Point(dx, dy)))
        source.play()

    after = session.control_point(edge)
    print(f"Control point of {edge}: {format_point(before.x, before.y)} -> {format_point(after.x, after.y)}")
