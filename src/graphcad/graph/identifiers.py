"""Identifier sanitization.

Turns free-text node labels into code-safe identifiers and keeps them unique
across the graph. This is the only place identifiers are minted, so every
label-affecting edit must go through ``sanitize_identifier``.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

from graphcad.graph.core import DEFAULT_GRAPH_NAME, NodeCategory

if TYPE_CHECKING:
    from collections.abc import Iterable

    from graphcad.graph.core import Node

_WHITESPACE_RE = re.compile(r"\s+")
_UNSAFE_RE = re.compile(r"[^a-zA-Z0-9_]")
_NON_ALNUM_RE = re.compile(r"[^a-zA-Z0-9]")

_FALLBACK_LENGTH = 10
_FALLBACK_IDENTIFIER = "node"

_FIXED_IDENTIFIERS = {
    NodeCategory.START: "start",
    NodeCategory.END: "end",
}
_RESERVED_IDENTIFIERS = frozenset(_FIXED_IDENTIFIERS.values())


def _base_identifier(label: str) -> str:
    identifier = _WHITESPACE_RE.sub("_", label.strip())
    identifier = _UNSAFE_RE.sub("", identifier)
    if not identifier:
        fallback = _NON_ALNUM_RE.sub("", label)[:_FALLBACK_LENGTH]
        identifier = fallback or _FALLBACK_IDENTIFIER
    return identifier


def sanitize_identifier(
    label: str,
    existing_nodes: Iterable[Node],
    exclude_node_id: str | None = None,
    *,
    category: NodeCategory | None = None,
) -> str:
    """Derive a unique code identifier from a display label.

    Whitespace runs become a single underscore and anything outside
    ``[A-Za-z0-9_]`` is dropped. On collision with another node's
    identifier, ``_1``, ``_2``, ... is appended until the name is free.

    Args:
        label: Free-text label
        existing_nodes: Nodes whose identifiers are already taken
        exclude_node_id: Node being renamed; its current identifier does
            not count as a collision
        category: Start and end nodes get the fixed ``start``/``end``
            identifiers and skip the uniqueness check. Every other node
            treats those two names as taken, even before a start or end
            node exists, so a terminal added later never collides.

    Returns:
        The identifier to assign

    Examples:
        >>> sanitize_identifier("My Step!!", [])
        'My_Step'
        >>> sanitize_identifier("???", [])
        'node'
    """
    if category in _FIXED_IDENTIFIERS:
        return _FIXED_IDENTIFIERS[category]

    identifier = _base_identifier(label)
    taken = set(_RESERVED_IDENTIFIERS)
    taken.update(
        n.code_identifier
        for n in existing_nodes
        if exclude_node_id is None or n.id != exclude_node_id
    )

    candidate = identifier
    counter = 1
    while candidate in taken:
        candidate = f"{identifier}_{counter}"
        counter += 1
    return candidate


def sanitize_graph_name(raw: str) -> str:
    """Strip a graph name down to ``[A-Za-z0-9_]``.

    An empty result falls back to the default graph name.

    Examples:
        >>> sanitize_graph_name("my-graph v2")
        'mygraphv2'
    """
    return _UNSAFE_RE.sub("", raw) or DEFAULT_GRAPH_NAME
