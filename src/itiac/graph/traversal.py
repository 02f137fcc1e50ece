"""Downstream traversal of the dependency graph.

Breadth-first propagation from offline roots along forward adjacency.
Every node is visited at most once, so traversal terminates on cyclic
graphs and the queue never holds more entries than there are nodes.
"""

from collections import deque
from collections.abc import Iterable, Sequence, Set
from dataclasses import dataclass, field

from itiac.common.logging import get_logger
from itiac.common.metrics import GRAPH_TRAVERSAL_NODES
from itiac.graph.adjacency import Adjacency, build_forward_adjacency
from itiac.models.component import Component, ComponentStatus
from itiac.models.dependency import Dependency

logger = get_logger(__name__)


@dataclass
class TraversalNode:
    """A node reached by a single-source traversal."""

    component_id: str
    depth: int
    path: list[str]  # start ... component_id


@dataclass
class TraversalResult:
    """Result of a single-source downstream traversal."""

    root_id: str
    nodes: list[TraversalNode] = field(default_factory=list)

    @property
    def max_depth(self) -> int:
        return max((n.depth for n in self.nodes), default=0)

    @property
    def node_ids(self) -> list[str]:
        return [n.component_id for n in self.nodes]

    def at_depth(self, depth: int) -> list[TraversalNode]:
        return [n for n in self.nodes if n.depth == depth]


def traverse_downstream(
    roots: Iterable[str],
    adjacency: Adjacency,
    stop_ids: Set[str] | None = None,
) -> set[str]:
    """Multi-source breadth-first propagation.

    Args:
        roots: Node ids where propagation starts. Never part of the result.
        adjacency: Forward adjacency.
        stop_ids: Nodes that are neither reported nor expanded.

    Returns:
        All nodes reachable from any root, excluding roots and stop-set members.
    """
    stop = stop_ids or frozenset()
    visited: set[str] = set()
    queue: deque[str] = deque()
    for root in roots:
        if root not in visited:
            visited.add(root)
            queue.append(root)

    impacted: set[str] = set()
    while queue:
        current = queue.popleft()
        for successor in adjacency.get(current, ()):
            if successor in visited:
                continue
            visited.add(successor)
            if successor in stop:
                continue
            impacted.add(successor)
            queue.append(successor)

    return impacted


def get_downstream(
    adjacency: Adjacency,
    start: str,
    max_depth: int | None = None,
) -> TraversalResult:
    """Single-source traversal recording hop depth and shortest path.

    Args:
        adjacency: Forward adjacency.
        start: Node to start from (excluded from the result).
        max_depth: Optional hop limit.

    Returns:
        Reached nodes in discovery order.
    """
    result = TraversalResult(root_id=start)
    paths: dict[str, list[str]] = {start: [start]}
    queue: deque[tuple[str, int]] = deque([(start, 0)])

    while queue:
        current, depth = queue.popleft()
        if max_depth is not None and depth >= max_depth:
            continue
        for successor in adjacency.get(current, ()):
            if successor in paths:
                continue
            path = paths[current] + [successor]
            paths[successor] = path
            result.nodes.append(TraversalNode(
                component_id=successor,
                depth=depth + 1,
                path=path,
            ))
            queue.append((successor, depth + 1))

    return result


def offline_root_ids(
    components: Sequence[Component],
    visible_ids: Set[str] | None = None,
) -> list[str]:
    """Ids of offline components in snapshot order, limited to visible ids."""
    return [
        c.id for c in components
        if c.status == ComponentStatus.OFFLINE
        and (visible_ids is None or c.id in visible_ids)
    ]


def compute_downstream_impact(
    components: Sequence[Component],
    dependencies: Sequence[Dependency],
    visible_ids: Set[str] | None = None,
) -> set[str]:
    """Components impacted by every currently offline component.

    Args:
        components: Component snapshot.
        dependencies: Dependency snapshot.
        visible_ids: Optional allow-set restricting roots and edges.

    Returns:
        Downstream-impacted node ids. Offline roots are never included.
    """
    roots = offline_root_ids(components, visible_ids)
    if not roots:
        return set()

    adjacency = build_forward_adjacency(dependencies, visible_ids)
    impacted = traverse_downstream(roots, adjacency, stop_ids=set(roots))

    GRAPH_TRAVERSAL_NODES.labels(operation="downstream_impact").observe(len(impacted))
    logger.debug(
        "Computed downstream impact",
        roots=roots,
        impacted=impacted,
    )
    return impacted
