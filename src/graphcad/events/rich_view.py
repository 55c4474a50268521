"""Rich-based live view of the generated code."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from graphcad.events.processor import TypedEventProcessor

if TYPE_CHECKING:
    from graphcad.events.types import GraphChangedEvent, GraphResetEvent


def _require_rich() -> None:
    """Raise a clear error if rich is not installed."""
    try:
        import rich  # noqa: F401
    except ImportError:
        raise ImportError(
            "The 'rich' package is required for RichCodeView. Install it with: pip install rich"
        ) from None


def render_code(code: str, *, title: str | None = None, theme: str = "monokai") -> Any:
    """Build a rich renderable showing Python source in a panel."""
    _require_rich()
    from rich.panel import Panel
    from rich.syntax import Syntax

    syntax = Syntax(code, "python", theme=theme, line_numbers=True, word_wrap=False)
    return Panel(syntax, title=title, expand=False)


class RichCodeView(TypedEventProcessor):
    """Prints the regenerated code after every edit.

    Args:
        console: Rich console to print to (default: a new stdout console)
        theme: Pygments theme name for syntax highlighting
    """

    def __init__(self, console: Any = None, *, theme: str = "monokai") -> None:
        _require_rich()
        from rich.console import Console

        self._console = console or Console()
        self._theme = theme

    def on_graph_changed(self, event: GraphChangedEvent) -> None:
        title = f"{event.graph.graph_name} · {event.action}"
        self._console.print(render_code(event.code, title=title, theme=self._theme))

    def on_graph_reset(self, event: GraphResetEvent) -> None:
        self._console.print(render_code(event.code, title=f"{event.graph.graph_name} · reset", theme=self._theme))
