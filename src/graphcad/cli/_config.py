"""Project-level configuration from pyproject.toml.

Reads the [tool.graphcad] section for the default state file and the name
new graphs start with.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from pathlib import Path

from graphcad.graph.core import DEFAULT_GRAPH_NAME

DEFAULT_STATE_FILE = "graphcad.json"


@dataclass(frozen=True)
class GraphcadConfig:
    """Configuration from [tool.graphcad] in pyproject.toml."""

    state: str = DEFAULT_STATE_FILE
    graph_name: str = DEFAULT_GRAPH_NAME


def find_pyproject(start: Path | None = None) -> Path | None:
    """Walk up from start directory to find pyproject.toml."""
    current = (start or Path.cwd()).resolve()
    for directory in (current, *current.parents):
        candidate = directory / "pyproject.toml"
        if candidate.is_file():
            return candidate
    return None


def load_config(start: Path | None = None) -> GraphcadConfig:
    """Load [tool.graphcad] from the nearest pyproject.toml.

    Returns default config if no pyproject.toml or no [tool.graphcad] section.
    A relative ``state`` path is resolved against the pyproject.toml directory.
    """
    path = find_pyproject(start)
    if path is None:
        return GraphcadConfig()

    if sys.version_info >= (3, 11):
        import tomllib
    else:
        try:
            import tomli as tomllib
        except ImportError:
            return GraphcadConfig()

    with open(path, "rb") as f:
        data = tomllib.load(f)

    section = data.get("tool", {}).get("graphcad", {})
    if not section:
        return GraphcadConfig()

    state = section.get("state", DEFAULT_STATE_FILE)
    if not Path(state).is_absolute():
        state = str(path.parent / state)

    return GraphcadConfig(
        state=state,
        graph_name=section.get("graph_name", DEFAULT_GRAPH_NAME),
    )
