"""Impact analysis for the dependency graph.

Calculates the potential impact of component failures: which
components sit downstream, which workflows lose a step, and how severe
that is for the business.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from itiac.common.exceptions import InvalidScopeError
from itiac.common.logging import get_logger
from itiac.common.metrics import ANALYSIS_DURATION, ANALYSIS_RUNS
from itiac.graph.adjacency import Adjacency, build_forward_adjacency
from itiac.graph.scoring import ImpactScorer, RiskLevel
from itiac.graph.traversal import get_downstream
from itiac.graph.workflows import ImpactedStep, map_workflow_impact
from itiac.models.component import Component, ComponentStatus
from itiac.models.dependency import Dependency
from itiac.models.snapshot import UNKNOWN_NAME, Snapshot
from itiac.models.workflow import BusinessWorkflow

logger = get_logger(__name__)


class ScopeMode(str, Enum):
    """Which components an analysis run covers."""

    COMPONENT = "component"
    ALL_COMPONENTS = "all-components"
    NON_ONLINE = "non-online"


@dataclass(frozen=True)
class AnalysisScope:
    """Selection of components to analyze."""

    mode: ScopeMode
    component_id: str | None = None

    def __post_init__(self) -> None:
        if self.mode == ScopeMode.COMPONENT and not self.component_id:
            raise InvalidScopeError("Component scope requires a component id")

    @classmethod
    def component(cls, component_id: str) -> "AnalysisScope":
        return cls(ScopeMode.COMPONENT, component_id)

    @classmethod
    def all_components(cls) -> "AnalysisScope":
        return cls(ScopeMode.ALL_COMPONENTS)

    @classmethod
    def non_online(cls) -> "AnalysisScope":
        return cls(ScopeMode.NON_ONLINE)


@dataclass
class AnalysisResult:
    """Result of analyzing one component's failure."""

    component_id: str
    component_name: str
    direct_impact_ids: list[str]
    direct_impacts: list[str]  # names
    indirect_impact_ids: list[str]
    indirect_impacts: list[str]  # names
    impacted_component_ids: list[str]
    impacted_components: list[str]  # names
    affected_workflow_ids: list[str]
    affected_workflows: list[str]  # names
    affected_steps: list[ImpactedStep]
    business_impact_score: int
    risk_level: RiskLevel
    max_depth: int = 0
    score_breakdown: dict[str, float] = field(default_factory=dict)
    analyzed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def empty(cls, component_id: str) -> "AnalysisResult":
        """Result for a component missing from the snapshot."""
        return cls(
            component_id=component_id,
            component_name=UNKNOWN_NAME,
            direct_impact_ids=[],
            direct_impacts=[],
            indirect_impact_ids=[],
            indirect_impacts=[],
            impacted_component_ids=[],
            impacted_components=[],
            affected_workflow_ids=[],
            affected_workflows=[],
            affected_steps=[],
            business_impact_score=0,
            risk_level=RiskLevel.LOW,
        )


class ImpactAnalyzer:
    """Analyzes impact of component failures.

    Determines which components would be affected if a given component
    becomes unavailable, following dependency edges from source to
    target.
    """

    def __init__(
        self,
        scorer: ImpactScorer | None = None,
        max_depth: int | None = None,
    ) -> None:
        """Initialize analyzer.

        Args:
            scorer: Impact scorer instance.
            max_depth: Optional hop limit for downstream traversal.
        """
        self._scorer = scorer or ImpactScorer()
        self._max_depth = max_depth

    def analyze(
        self,
        snapshot: Snapshot,
        component_id: str,
        adjacency: Adjacency | None = None,
    ) -> AnalysisResult:
        """Analyze impact of one component failing.

        Args:
            snapshot: Graph snapshot.
            component_id: Component to analyze.
            adjacency: Prebuilt forward adjacency for the snapshot.

        Returns:
            Analysis result. Unknown components yield an empty result.
        """
        component = snapshot.component_by_id.get(component_id)
        if component is None:
            logger.warning("Component not in snapshot", component_id=component_id)
            return AnalysisResult.empty(component_id)

        if adjacency is None:
            adjacency = build_forward_adjacency(snapshot.dependencies)

        downstream = get_downstream(adjacency, component_id, max_depth=self._max_depth)

        direct_ids = [
            nid for nid in dict.fromkeys(adjacency.get(component_id, ()))
            if nid != component_id
        ]
        direct_set = set(direct_ids)
        impacted_ids = downstream.node_ids
        indirect_ids = [nid for nid in impacted_ids if nid not in direct_set]

        workflow_impacts = map_workflow_impact(
            snapshot.workflows,
            impacted_ids=set(impacted_ids),
            offline_ids=[component_id],
            components=snapshot.components,
        )
        affected_steps = [s for wi in workflow_impacts for s in wi.impacted_steps]

        score = self._scorer.score(
            direct_count=len(direct_ids),
            indirect_count=len(indirect_ids),
            workflow_criticalities=[wi.workflow.criticality for wi in workflow_impacts],
            criticality=component.criticality,
            impacted_step_count=len(affected_steps),
        )

        return AnalysisResult(
            component_id=component_id,
            component_name=component.name,
            direct_impact_ids=direct_ids,
            direct_impacts=[snapshot.name_of(i) for i in direct_ids],
            indirect_impact_ids=indirect_ids,
            indirect_impacts=[snapshot.name_of(i) for i in indirect_ids],
            impacted_component_ids=impacted_ids,
            impacted_components=[snapshot.name_of(i) for i in impacted_ids],
            affected_workflow_ids=[wi.workflow.id for wi in workflow_impacts],
            affected_workflows=[wi.workflow.name for wi in workflow_impacts],
            affected_steps=affected_steps,
            business_impact_score=score.score,
            risk_level=score.risk_level,
            max_depth=downstream.max_depth,
            score_breakdown=score.breakdown,
        )

    def analyze_scope(self, snapshot: Snapshot, scope: AnalysisScope) -> list[AnalysisResult]:
        """Analyze every component selected by ``scope``.

        Returns:
            Results ordered by descending business impact score.
        """
        with ANALYSIS_DURATION.labels(operation="analysis_results").time():
            if scope.mode == ScopeMode.COMPONENT:
                component_ids = [scope.component_id]
            elif scope.mode == ScopeMode.ALL_COMPONENTS:
                component_ids = [c.id for c in snapshot.components]
            else:
                component_ids = [
                    c.id for c in snapshot.components
                    if c.status != ComponentStatus.ONLINE
                ]

            adjacency = build_forward_adjacency(snapshot.dependencies)
            results = [self.analyze(snapshot, cid, adjacency) for cid in component_ids]
            results.sort(key=lambda r: r.business_impact_score, reverse=True)

        ANALYSIS_RUNS.labels(operation="analysis_results").inc()
        logger.info(
            "Analysis complete",
            scope=scope.mode.value,
            analyzed=len(results),
            high_risk=sum(
                1 for r in results if r.risk_level in (RiskLevel.HIGH, RiskLevel.CRITICAL)
            ),
        )
        return results


def compute_analysis_results(
    components: Sequence[Component],
    dependencies: Sequence[Dependency],
    workflows: Sequence[BusinessWorkflow],
    scope: AnalysisScope,
    max_depth: int | None = None,
) -> list[AnalysisResult]:
    """Per-component impact analysis over a snapshot.

    Args:
        components: Component snapshot.
        dependencies: Dependency snapshot.
        workflows: Workflow snapshot.
        scope: Single component, all components, or non-online components.
        max_depth: Optional hop limit for downstream traversal.

    Returns:
        Results ordered by descending business impact score.
    """
    snapshot = Snapshot(
        components=list(components),
        dependencies=list(dependencies),
        workflows=list(workflows),
    )
    return ImpactAnalyzer(max_depth=max_depth).analyze_scope(snapshot, scope)
