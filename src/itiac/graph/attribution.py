"""Root-cause attribution for downstream impact.

For every impacted node, finds the nearest offline root that explains
the impact. Each root gets its own breadth-first pass, in the order the
roots are given; a later root only takes over a node when it reaches it
in strictly fewer hops, so equal distances stay with the earlier root.
"""

from collections import deque
from collections.abc import Sequence, Set
from dataclasses import dataclass

from itiac.common.logging import get_logger
from itiac.common.metrics import GRAPH_TRAVERSAL_NODES
from itiac.graph.adjacency import Adjacency, build_forward_adjacency
from itiac.graph.traversal import offline_root_ids
from itiac.models.component import Component
from itiac.models.dependency import Dependency

logger = get_logger(__name__)


@dataclass(frozen=True)
class ImpactCause:
    """Nearest offline root for an impacted node."""

    root_id: str
    distance: int  # hops from root, always >= 1
    via_id: str  # immediate predecessor on the shortest path


def attribute_roots(
    roots: Sequence[str],
    adjacency: Adjacency,
) -> dict[str, ImpactCause]:
    """Attribute every node downstream of ``roots`` to its nearest root.

    Roots are causes: they are never attributed and traversal does not
    pass through them, so the key set matches
    :func:`itiac.graph.traversal.traverse_downstream` with the roots as
    stop-set.

    Args:
        roots: Offline roots in processing order (ties favor earlier roots).
        adjacency: Forward adjacency.

    Returns:
        Mapping of impacted node id to its cause.
    """
    root_set = set(roots)
    causes: dict[str, ImpactCause] = {}
    # Nodes reached by already processed roots
    settled: set[str] = set()

    for root in roots:
        if root in settled:
            continue
        seen: set[str] = {root}
        queue: deque[tuple[str, int]] = deque([(root, 0)])

        while queue:
            current, depth = queue.popleft()
            for successor in adjacency.get(current, ()):
                if successor in seen or successor in root_set:
                    continue
                seen.add(successor)
                distance = depth + 1

                existing = causes.get(successor)
                if existing is None or distance < existing.distance:
                    causes[successor] = ImpactCause(
                        root_id=root,
                        distance=distance,
                        via_id=current,
                    )
                elif successor in settled:
                    # An earlier root already covers this subtree at <= distance
                    continue
                queue.append((successor, distance))

        settled.update(seen)

    return causes


def attribute_causes(
    components: Sequence[Component],
    dependencies: Sequence[Dependency],
    visible_ids: Set[str] | None = None,
) -> dict[str, ImpactCause]:
    """Nearest offline root and hop distance for every impacted component.

    Roots are the offline components in snapshot order.

    Args:
        components: Component snapshot.
        dependencies: Dependency snapshot.
        visible_ids: Optional allow-set restricting roots and edges.

    Returns:
        Mapping of impacted component id to its cause.
    """
    roots = offline_root_ids(components, visible_ids)
    if not roots:
        return {}

    adjacency = build_forward_adjacency(dependencies, visible_ids)
    causes = attribute_roots(roots, adjacency)

    GRAPH_TRAVERSAL_NODES.labels(operation="attribution").observe(len(causes))
    logger.debug("Attributed impact causes", roots=list(roots), impacted=list(causes))
    return causes
