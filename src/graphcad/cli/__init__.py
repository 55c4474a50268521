"""graphcad CLI: edit a graph state file and print the generated code.

Entry point for the `graphcad` command. Requires ``pip install graphcad[cli]``.

Commands:
    new             Create a state file with a lone START node
    show            Print the generated LangGraph code
    inspect         Show nodes, edges, control points and diagnostics
    rename          Rename the graph variable
    reset           Reset the graph to its initial state
    node add        Add a node (start, end, action, tool, conditional_branch, annotation)
    node rename     Rename a node and re-derive its identifier
    node rm         Remove nodes and their edges
    node move       Move a node
    edge add        Connect two nodes
    edge rm         Remove edges
    edge path       Print SVG paths for edges
    edge drag       Drag an edge's control point
"""

from __future__ import annotations


def _require_typer():
    """Check that typer is available."""
    try:
        import typer  # noqa: F401
    except ImportError:
        import sys

        print("Error: typer is required for the CLI. Install with: pip install graphcad[cli]", file=sys.stderr)
        raise SystemExit(1) from None


def create_app():
    """Create the Typer app with all subcommands."""
    _require_typer()

    import typer

    from graphcad.cli.edge_cmd import app as edge_app
    from graphcad.cli.graph_cmd import register_commands
    from graphcad.cli.node_cmd import app as node_app

    app = typer.Typer(
        name="graphcad",
        help="Build workflow graphs and generate LangGraph code.",
        no_args_is_help=True,
    )
    app.add_typer(node_app, name="node")
    app.add_typer(edge_app, name="edge")
    register_commands(app)

    return app


def main():
    """CLI entry point."""
    app = create_app()
    app()
