"""Outage overview for the current snapshot.

Combines status counts with cascaded downstream impact, and turns the
cause attribution into human-readable alerts.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from itiac.common.logging import get_logger
from itiac.common.metrics import ANALYSIS_RUNS, OFFLINE_ROOTS
from itiac.graph.adjacency import build_forward_adjacency
from itiac.graph.attribution import ImpactCause, attribute_causes
from itiac.graph.traversal import get_downstream
from itiac.models.component import ComponentStatus
from itiac.models.snapshot import Snapshot

logger = get_logger(__name__)


class AlertSeverity(str, Enum):
    """Alert severity levels."""

    CRITICAL = "critical"
    WARNING = "warning"


@dataclass
class ImpactAlert:
    """Alert raised for an offline, degraded or impacted component."""

    id: str
    title: str
    message: str
    severity: AlertSeverity
    component_id: str
    component_name: str
    criticality: str
    impacted_components: list[str] = field(default_factory=list)
    cause_id: str | None = None


@dataclass
class OutageSummary:
    """Status counts with cascaded impact taken into account."""

    total: int
    online: int
    offline: int
    warning: int
    maintenance: int
    impacted: int
    effective_online: int
    effective_offline: int
    network_health: float  # percent of components effectively online
    causes: dict[str, ImpactCause]
    generated_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def summarize_outage(snapshot: Snapshot) -> OutageSummary:
    """Summarize the current outage state of a snapshot."""
    counts = {status: 0 for status in ComponentStatus}
    for component in snapshot.components:
        counts[component.status] += 1

    causes = attribute_causes(snapshot.components, snapshot.dependencies)
    # Dangling dependency targets propagate but are not components to count
    impacted = {cid for cid in causes if cid in snapshot.component_by_id}

    effective_online = sum(
        1 for c in snapshot.components
        if c.status == ComponentStatus.ONLINE and c.id not in impacted
    )
    effective_offline = sum(
        1 for c in snapshot.components
        if c.status == ComponentStatus.OFFLINE or c.id in impacted
    )
    total = len(snapshot.components)
    health = (effective_online / total) * 100 if total else 0.0

    OFFLINE_ROOTS.set(counts[ComponentStatus.OFFLINE])
    ANALYSIS_RUNS.labels(operation="outage_summary").inc()

    return OutageSummary(
        total=total,
        online=counts[ComponentStatus.ONLINE],
        offline=counts[ComponentStatus.OFFLINE],
        warning=counts[ComponentStatus.WARNING],
        maintenance=counts[ComponentStatus.MAINTENANCE],
        impacted=len(impacted),
        effective_online=effective_online,
        effective_offline=effective_offline,
        network_health=round(health, 1),
        causes=causes,
    )


def generate_impact_alerts(snapshot: Snapshot) -> list[ImpactAlert]:
    """Build alerts for offline roots, impacted components and warnings.

    Offline roots get one critical alert each, every impacted component
    gets a critical alert naming its nearest offline cause, and every
    component in warning status gets a warning alert listing what sits
    downstream of it.
    """
    alerts: list[ImpactAlert] = []
    causes = attribute_causes(snapshot.components, snapshot.dependencies)

    impacted_by_root: dict[str, list[str]] = {}
    for impacted_id, cause in causes.items():
        impacted_by_root.setdefault(cause.root_id, []).append(impacted_id)

    for root_id in snapshot.offline_ids:
        root = snapshot.component_by_id[root_id]
        alerts.append(ImpactAlert(
            id=f"offline-{root.id}",
            title=f"{root.name} Offline",
            message=(
                f'The {root.criticality.value} asset "{root.name}" is offline '
                "and may impact dependent services."
            ),
            severity=AlertSeverity.CRITICAL,
            component_id=root.id,
            component_name=root.name,
            criticality=root.criticality.value,
            impacted_components=_known_names(snapshot, impacted_by_root.get(root.id, [])),
        ))

    for impacted_id, cause in causes.items():
        impacted = snapshot.component_by_id.get(impacted_id)
        if impacted is None:
            continue
        alerts.append(ImpactAlert(
            id=f"impacted-by-offline-{cause.root_id}-{impacted.id}",
            title=f"{impacted.name} Impacted",
            message=f"{impacted.name} is impacted by {snapshot.name_of(cause.via_id)} outage",
            severity=AlertSeverity.CRITICAL,
            component_id=impacted.id,
            component_name=impacted.name,
            criticality=impacted.criticality.value,
            cause_id=cause.root_id,
        ))

    adjacency = build_forward_adjacency(snapshot.dependencies)
    for component in snapshot.components:
        if component.status != ComponentStatus.WARNING:
            continue
        downstream = get_downstream(adjacency, component.id)
        alerts.append(ImpactAlert(
            id=f"warning-{component.id}",
            title=f"{component.name} Performance Issue",
            message=(
                f'The {component.criticality.value} asset "{component.name}" '
                "is showing degraded performance."
            ),
            severity=AlertSeverity.WARNING,
            component_id=component.id,
            component_name=component.name,
            criticality=component.criticality.value,
            impacted_components=_known_names(snapshot, downstream.node_ids),
        ))

    logger.debug("Generated impact alerts", alerts=len(alerts))
    return alerts


def _known_names(snapshot: Snapshot, component_ids: list[str]) -> list[str]:
    """Unique names of ids present in the snapshot."""
    names = (
        snapshot.component_by_id[cid].name
        for cid in component_ids
        if cid in snapshot.component_by_id
    )
    return list(dict.fromkeys(names))
