"""Top-level graph commands: new, show, inspect, rename, reset."""

from __future__ import annotations

from typing import Annotated

import typer

from graphcad.cli._config import load_config
from graphcad.cli._format import format_point, print_json, print_lines, print_table, truncate
from graphcad.cli._state import StateOption, open_session, state_store, user_notice
from graphcad.codegen import compile_graph
from graphcad.graph.core import Graph
from graphcad.graph.issues import find_issues
from graphcad.persistence.serializers import graph_to_dict
from graphcad.session import EditorSession


def graph_new(
    state: StateOption = None,
    name: Annotated[str | None, typer.Option("--name", help="Graph variable name")] = None,
    force: Annotated[bool, typer.Option("--force", help="Overwrite an existing state file")] = False,
):
    """Create a new state file holding a lone START node."""
    store = state_store(state)
    if store.exists() and not force:
        print(f"Error: {store.path} already exists (use --force to overwrite)")
        raise typer.Exit(1)

    session = EditorSession(Graph.initial(), store=store)
    graph_name = session.set_graph_name(name or load_config().graph_name)
    print(f"Created {store.path} with graph '{graph_name}'")


def graph_show(
    state: StateOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    plain: Annotated[bool, typer.Option("--plain", help="Print raw code without highlighting")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """Print the generated code for the current graph."""
    graph = state_store(state).load()
    code = compile_graph(graph)

    if as_json:
        print_json("show", {"graph_name": graph.graph_name, "code": code.source}, output)
        return

    if plain:
        print(code)
        return

    from rich.console import Console

    from graphcad.events.rich_view import render_code

    Console().print(render_code(code.source, title=graph.graph_name))


def graph_inspect(
    state: StateOption = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output as JSON")] = False,
    output: Annotated[str | None, typer.Option("--output", help="Write JSON to file")] = None,
):
    """Show nodes, edges and diagnostics."""
    session = open_session(state)
    graph = session.graph
    issues = find_issues(graph)
    paths = session.edge_paths()

    if as_json:
        data = graph_to_dict(graph)
        data["paths"] = paths
        data["issues"] = [{"kind": i.kind, "subject": i.subject, "message": i.message} for i in issues]
        print_json("inspect", data, output)
        return

    print(f"\nGraph: {graph.graph_name} | {len(graph.nodes)} nodes | {len(graph.edges)} edges")
    print(f"  Entry point: {graph.entry_point or '—'}\n")

    node_rows = [
        [n.id, n.category.value, truncate(n.label, 30), n.code_identifier, format_point(n.position.x, n.position.y)]
        for n in graph.nodes
    ]
    print_lines(print_table(["Id", "Category", "Label", "Identifier", "Position"], node_rows))

    if graph.edges:
        print()
        edge_rows = []
        for e in graph.edges:
            control = session.control_point(e.id)
            edge_rows.append(
                [
                    e.id,
                    e.source,
                    e.target,
                    format_point(control.x, control.y),
                    "pinned" if e.control_point_user_positioned else "auto",
                ]
            )
        print_lines(print_table(["Edge", "Source", "Target", "Control", "Placement"], edge_rows))

    if issues:
        print(f"\n  Issues ({len(issues)}):")
        for issue in issues:
            print(f"    - [{issue.kind}] {issue.message}")


def graph_rename(
    name: Annotated[str, typer.Argument(help="New graph variable name")],
    state: StateOption = None,
):
    """Rename the graph variable; characters outside [A-Za-z0-9_] are dropped."""
    session = open_session(state)
    with user_notice():
        new_name = session.set_graph_name(name)
    print(f"Graph renamed to '{new_name}'")


def graph_reset(
    state: StateOption = None,
    yes: Annotated[bool, typer.Option("--yes", "-y", help="Skip confirmation")] = False,
):
    """Reset the graph to a lone START node."""
    if not yes:
        typer.confirm("Discard the current graph?", abort=True)
    session = open_session(state)
    session.reset()
    print("Graph reset.")


def register_commands(app: typer.Typer) -> None:
    """Register the top-level graph commands on the main app."""
    app.command("new")(graph_new)
    app.command("show")(graph_show)
    app.command("inspect")(graph_inspect)
    app.command("rename")(graph_rename)
    app.command("reset")(graph_reset)
