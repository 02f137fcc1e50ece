"""Single Point of Failure (SPOF) detection.

Identifies components that fan out to several others while having at
most one incoming dependency of their own: nothing backs them up, yet
much sits downstream of them.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from itiac.common.logging import get_logger
from itiac.graph.adjacency import build_forward_adjacency, build_reverse_adjacency
from itiac.graph.traversal import get_downstream
from itiac.models.base import Criticality
from itiac.models.dependency import Dependency
from itiac.models.snapshot import Snapshot

logger = get_logger(__name__)

DEFAULT_OUTGOING_THRESHOLD = 3
DEFAULT_ESCALATION_DOWNSTREAM = 5


@dataclass
class SPOFResult:
    """Single Point of Failure detection result."""

    component_id: str
    component_name: str
    outgoing: int
    incoming: int
    severity: str  # "low", "medium", "high", "critical"
    affected_component_ids: list[str]
    description: str

    @property
    def affected_count(self) -> int:
        return len(self.affected_component_ids)


@dataclass
class SPOFAnalysis:
    """Complete SPOF analysis results."""

    total_spofs: int
    critical_spofs: int
    high_spofs: int
    spofs: list[SPOFResult]
    recommendations: list[str]
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def single_points_of_failure(
    dependencies: Sequence[Dependency],
    threshold: int = DEFAULT_OUTGOING_THRESHOLD,
    component_ids: Sequence[str] | None = None,
) -> list[str]:
    """Ids with outgoing >= threshold and incoming <= 1.

    When ``component_ids`` is given only those ids are candidates, in that
    order, so dangling dependency endpoints are never reported. Otherwise
    every dependency endpoint is a candidate, in first-seen order.
    """
    metrics: dict[str, list[int]] = {}  # id -> [incoming, outgoing]
    for dep in dependencies:
        metrics.setdefault(dep.source_id, [0, 0])[1] += 1
        metrics.setdefault(dep.target_id, [0, 0])[0] += 1

    candidates = metrics if component_ids is None else component_ids
    spofs = []
    for cid in candidates:
        incoming, outgoing = metrics.get(cid, (0, 0))
        if outgoing >= threshold and incoming <= 1:
            spofs.append(cid)
    return spofs


class SPOFDetector:
    """Detects single points of failure in a snapshot."""

    def __init__(
        self,
        threshold: int = DEFAULT_OUTGOING_THRESHOLD,
        escalation_downstream: int = DEFAULT_ESCALATION_DOWNSTREAM,
    ) -> None:
        """Initialize detector.

        Args:
            threshold: Minimum outgoing dependencies for a candidate.
            escalation_downstream: Downstream size that raises severity a level.
        """
        self._threshold = threshold
        self._escalation_downstream = escalation_downstream

    def detect_all(self, snapshot: Snapshot) -> SPOFAnalysis:
        """Detect all single points of failure.

        Severity follows the component's own criticality, raised one
        level when enough components sit downstream.
        """
        adjacency = build_forward_adjacency(snapshot.dependencies)
        reverse = build_reverse_adjacency(snapshot.dependencies)

        spofs: list[SPOFResult] = []
        component_ids = [c.id for c in snapshot.components]
        for cid in single_points_of_failure(snapshot.dependencies, self._threshold, component_ids):
            downstream = get_downstream(adjacency, cid).node_ids
            criticality = snapshot.component_by_id[cid].criticality
            severity = self._severity(criticality, len(downstream))
            outgoing = len(adjacency.get(cid, ()))

            spofs.append(SPOFResult(
                component_id=cid,
                component_name=snapshot.name_of(cid),
                outgoing=outgoing,
                incoming=len(reverse.get(cid, ())),
                severity=severity,
                affected_component_ids=downstream,
                description=(
                    f"{snapshot.name_of(cid)} has {outgoing} outgoing dependencies "
                    f"and no redundant upstream; {len(downstream)} components sit downstream"
                ),
            ))

        order = {"critical": 0, "high": 1, "medium": 2, "low": 3}
        spofs.sort(key=lambda s: (order[s.severity], -s.affected_count))

        critical = sum(1 for s in spofs if s.severity == "critical")
        high = sum(1 for s in spofs if s.severity == "high")

        logger.info("SPOF detection complete", total=len(spofs), critical=critical)
        return SPOFAnalysis(
            total_spofs=len(spofs),
            critical_spofs=critical,
            high_spofs=high,
            spofs=spofs,
            recommendations=self._recommendations(spofs),
        )

    def _severity(self, criticality: Criticality, downstream_count: int) -> str:
        levels = ["low", "medium", "high", "critical"]
        idx = levels.index(criticality.value)
        if downstream_count >= self._escalation_downstream:
            idx = min(idx + 1, len(levels) - 1)
        return levels[idx]

    def _recommendations(self, spofs: list[SPOFResult]) -> list[str]:
        recommendations = []
        for spof in spofs:
            if spof.severity in ("critical", "high"):
                recommendations.append(
                    f"Add redundancy for {spof.component_name}: "
                    f"{spof.affected_count} components depend on it"
                )
        if not spofs:
            recommendations.append("No single points of failure detected")
        return recommendations
