"""Dependency validation helpers.

Used by collaborators before persisting a new edge: rejects self-loops,
duplicates and edges that would close a cycle. The impact traversal
itself tolerates all of these.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field

from itiac.common.exceptions import (
    CircularDependencyError,
    DuplicateDependencyError,
    SelfDependencyError,
)
from itiac.common.logging import get_logger
from itiac.graph.adjacency import Adjacency, build_forward_adjacency
from itiac.models.component import ComponentType
from itiac.models.dependency import Dependency, DependencyType

logger = get_logger(__name__)

SELF_DEPENDENCY_MESSAGE = SelfDependencyError.message
DUPLICATE_MESSAGE = DuplicateDependencyError.message
CIRCULAR_MESSAGE = CircularDependencyError.message

# Plausible targets per (source type, dependency type)
TYPE_RULES: dict[ComponentType, dict[DependencyType, set[ComponentType]]] = {
    ComponentType.LOAD_BALANCER: {
        DependencyType.FEEDS: {ComponentType.SERVER, ComponentType.APPLICATION},
        DependencyType.REQUIRES: {ComponentType.NETWORK},
        DependencyType.USES: {ComponentType.NETWORK},
    },
    ComponentType.API: {
        DependencyType.REQUIRES: {ComponentType.DATABASE, ComponentType.SERVICE},
        DependencyType.USES: {ComponentType.DATABASE, ComponentType.SERVICE, ComponentType.NETWORK},
    },
    ComponentType.APPLICATION: {
        DependencyType.REQUIRES: {ComponentType.API, ComponentType.DATABASE},
        DependencyType.USES: {ComponentType.API, ComponentType.SERVICE, ComponentType.NETWORK},
    },
    ComponentType.DATABASE: {
        DependencyType.REQUIRES: {ComponentType.SERVER, ComponentType.NETWORK},
        DependencyType.MONITORS: {ComponentType.SERVER},
    },
}


@dataclass
class DependencyValidation:
    """Outcome of validating a candidate dependency."""

    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


def _reaches(adjacency: Adjacency, start: str, goal: str) -> bool:
    stack = [start]
    seen = {start}
    while stack:
        current = stack.pop()
        if current == goal:
            return True
        for nxt in adjacency.get(current, ()):
            if nxt not in seen:
                seen.add(nxt)
                stack.append(nxt)
    return False


def would_create_cycle(candidate: Dependency, existing: Sequence[Dependency]) -> bool:
    """Check whether adding ``candidate`` closes a directed cycle."""
    adjacency = build_forward_adjacency(
        [d for d in existing if d.id != candidate.id] + [candidate]
    )
    return _reaches(adjacency, candidate.target_id, candidate.source_id)


def validate_dependency(
    candidate: Dependency,
    existing: Sequence[Dependency],
) -> DependencyValidation:
    """Validate a new or updated dependency against the existing edges.

    Args:
        candidate: Dependency to add or update.
        existing: Current dependencies. An entry with the candidate's id
            is treated as the version being replaced.

    Returns:
        Collected errors.
    """
    result = DependencyValidation()

    if candidate.source_id == candidate.target_id:
        result.errors.append(SELF_DEPENDENCY_MESSAGE)

    if any(
        d.source_id == candidate.source_id
        and d.target_id == candidate.target_id
        and d.id != candidate.id
        for d in existing
    ):
        result.errors.append(DUPLICATE_MESSAGE)

    if would_create_cycle(candidate, existing):
        result.errors.append(CIRCULAR_MESSAGE)

    return result


def ensure_valid_dependency(candidate: Dependency, existing: Sequence[Dependency]) -> None:
    """Raise a typed error for the first problem found with ``candidate``.

    Raises:
        SelfDependencyError: Source and target are the same component.
        DuplicateDependencyError: Same source/target pair already exists.
        CircularDependencyError: Edge would close a cycle.
    """
    details = {
        "dependency_id": candidate.id,
        "source_id": candidate.source_id,
        "target_id": candidate.target_id,
    }
    validation = validate_dependency(candidate, existing)
    if SELF_DEPENDENCY_MESSAGE in validation.errors:
        raise SelfDependencyError(details=details)
    if DUPLICATE_MESSAGE in validation.errors:
        raise DuplicateDependencyError(details=details)
    if CIRCULAR_MESSAGE in validation.errors:
        raise CircularDependencyError(details=details)


def check_type_plausibility(
    source_type: ComponentType,
    target_type: ComponentType,
    dependency_type: DependencyType,
) -> list[str]:
    """Warnings for dependencies that rarely make sense between two types."""
    allowed = TYPE_RULES.get(source_type, {}).get(dependency_type)
    if allowed is not None and target_type not in allowed:
        return [f"{source_type.value} typically doesn't {dependency_type.value} {target_type.value}"]
    return []


def detect_all_cycles(dependencies: Sequence[Dependency]) -> list[list[str]]:
    """Find directed cycles reachable by depth-first search.

    Each cycle is reported as a closed path, first node repeated at the
    end. Nodes are explored in first-appearance order.

    Returns:
        Cycles found.
    """
    adjacency = build_forward_adjacency(dependencies)
    nodes: dict[str, None] = {}
    for dep in dependencies:
        nodes.setdefault(dep.source_id)
        nodes.setdefault(dep.target_id)

    cycles: list[list[str]] = []
    visited: set[str] = set()

    for start in nodes:
        if start in visited:
            continue
        # Iterative DFS keeping the current path and recursion stack
        on_stack: set[str] = {start}
        path: list[str] = [start]
        iterators = [iter(adjacency.get(start, ()))]
        visited.add(start)

        while iterators:
            nxt = next(iterators[-1], None)
            if nxt is None:
                iterators.pop()
                on_stack.discard(path.pop())
                continue
            if nxt in on_stack:
                cycles.append(path[path.index(nxt):] + [nxt])
            elif nxt not in visited:
                visited.add(nxt)
                on_stack.add(nxt)
                path.append(nxt)
                iterators.append(iter(adjacency.get(nxt, ())))

    if cycles:
        logger.info("Dependency cycles detected", count=len(cycles))
    return cycles
