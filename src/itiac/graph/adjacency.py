"""Adjacency construction for the dependency graph.

Turns a flat list of dependency edges into successor/predecessor maps,
optionally restricted to an allowed subset of component ids.
"""

from collections.abc import Iterable, Set
from typing import Protocol


class Edge(Protocol):
    """Anything exposing directed edge endpoints."""

    source_id: str
    target_id: str


Adjacency = dict[str, list[str]]


def build_forward_adjacency(
    edges: Iterable[Edge],
    allowed_ids: Set[str] | None = None,
) -> Adjacency:
    """Build source -> [targets] adjacency.

    Successors keep edge order and are not deduplicated: parallel edges
    appear twice. Edges with an endpoint outside ``allowed_ids`` are
    skipped when an allow-set is given.

    Args:
        edges: Dependency edges.
        allowed_ids: Optional set of visible component ids.

    Returns:
        Mapping of node id to its ordered direct successors.
    """
    adjacency: Adjacency = {}
    for edge in edges:
        if allowed_ids is not None and (
            edge.source_id not in allowed_ids or edge.target_id not in allowed_ids
        ):
            continue
        adjacency.setdefault(edge.source_id, []).append(edge.target_id)
    return adjacency


def build_reverse_adjacency(
    edges: Iterable[Edge],
    allowed_ids: Set[str] | None = None,
) -> Adjacency:
    """Build target -> [sources] adjacency with the same filtering rules."""
    reverse: Adjacency = {}
    for edge in edges:
        if allowed_ids is not None and (
            edge.source_id not in allowed_ids or edge.target_id not in allowed_ids
        ):
            continue
        reverse.setdefault(edge.target_id, []).append(edge.source_id)
    return reverse
