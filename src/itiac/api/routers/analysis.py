"""Analysis API endpoints - downstream impact, causes, results, workflows, SPOF.

Every endpoint receives the snapshot in the request body and returns
derived data; nothing is stored between requests.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from itiac.api.dependencies import Analyzer, AppSettings, Detector
from itiac.common.metrics import ANALYSIS_RUNS, observe_snapshot
from itiac.graph.attribution import attribute_causes
from itiac.graph.impact import AnalysisScope, ImpactAnalyzer, ScopeMode
from itiac.graph.outage import generate_impact_alerts, summarize_outage
from itiac.graph.spof import SPOFDetector
from itiac.graph.traversal import compute_downstream_impact, offline_root_ids
from itiac.graph.validation import (
    check_type_plausibility,
    detect_all_cycles,
    validate_dependency,
)
from itiac.graph.workflows import map_workflow_impact, reduced_step_view
from itiac.models.snapshot import Snapshot, check_snapshot_size
from itiac.schemas.analysis import (
    AffectedWorkflow,
    AnalysisRequest,
    AnalysisResultSchema,
    AnalysisResultsRequest,
    AnalysisResultsResponse,
    CauseAttributionResult,
    DependencyValidationRequest,
    DependencyValidationResult,
    DownstreamImpactRequest,
    DownstreamImpactResult,
    ImpactAlertSchema,
    ImpactCauseItem,
    ImpactedStepSchema,
    OutageSummaryResponse,
    SPOFAnalysisResult,
    SPOFRequest,
    WorkflowImpactRequest,
    WorkflowImpactResponse,
    WorkflowStepView,
)

router = APIRouter(prefix="/analysis", tags=["analysis"])


def _accept(snapshot: Snapshot, settings: AppSettings) -> Snapshot:
    check_snapshot_size(snapshot, settings.analysis)
    observe_snapshot(len(snapshot.components), len(snapshot.dependencies))
    return snapshot


@router.post("/downstream", response_model=DownstreamImpactResult)
async def downstream_impact(
    request: DownstreamImpactRequest,
    settings: AppSettings,
) -> DownstreamImpactResult:
    """Components impacted downstream of every offline component."""
    snapshot = _accept(request.snapshot, settings)
    visible = set(request.visible_ids) if request.visible_ids is not None else None

    impacted = compute_downstream_impact(snapshot.components, snapshot.dependencies, visible)
    ANALYSIS_RUNS.labels(operation="downstream_impact").inc()

    return DownstreamImpactResult(
        offline_ids=offline_root_ids(snapshot.components, visible),
        impacted_ids=sorted(impacted),
        total_impacted=len(impacted),
        calculated_at=datetime.now(timezone.utc),
    )


@router.post("/causes", response_model=CauseAttributionResult)
async def impact_causes(
    request: DownstreamImpactRequest,
    settings: AppSettings,
) -> CauseAttributionResult:
    """Nearest offline root and hop distance for every impacted component."""
    snapshot = _accept(request.snapshot, settings)
    visible = set(request.visible_ids) if request.visible_ids is not None else None

    causes = attribute_causes(snapshot.components, snapshot.dependencies, visible)
    ANALYSIS_RUNS.labels(operation="attribution").inc()

    items = [
        ImpactCauseItem(
            component_id=cid,
            component_name=snapshot.name_of(cid),
            root_id=cause.root_id,
            root_name=snapshot.name_of(cause.root_id),
            distance=cause.distance,
            via_id=cause.via_id,
        )
        for cid, cause in sorted(causes.items(), key=lambda kv: (kv[1].distance, kv[0]))
    ]
    return CauseAttributionResult(
        causes=items,
        total_impacted=len(items),
        calculated_at=datetime.now(timezone.utc),
    )


@router.post("/results", response_model=AnalysisResultsResponse)
async def analysis_results(
    request: AnalysisResultsRequest,
    settings: AppSettings,
    analyzer: Analyzer,
) -> AnalysisResultsResponse:
    """Per-component impact analysis ordered by business impact score.

    Without an explicit scope, a ``component_id`` selects that component
    and otherwise the configured default scope applies.
    """
    snapshot = _accept(request.snapshot, settings)

    mode = request.scope
    if mode is None:
        mode = "component" if request.component_id else settings.analysis.default_scope
    scope = AnalysisScope(ScopeMode(mode), request.component_id)

    if request.max_depth is not None:
        analyzer = ImpactAnalyzer(max_depth=request.max_depth)

    results = analyzer.analyze_scope(snapshot, scope)
    return AnalysisResultsResponse(
        scope=scope.mode.value,
        total=len(results),
        results=[AnalysisResultSchema.model_validate(r) for r in results],
    )


@router.post("/workflows", response_model=WorkflowImpactResponse)
async def workflow_impact(
    request: WorkflowImpactRequest,
    settings: AppSettings,
) -> WorkflowImpactResponse:
    """Workflows with at least one step on an offline or impacted component."""
    snapshot = _accept(request.snapshot, settings)
    visible = set(request.visible_ids) if request.visible_ids is not None else None

    impacted = compute_downstream_impact(snapshot.components, snapshot.dependencies, visible)
    offline = offline_root_ids(snapshot.components, visible)
    impacts = map_workflow_impact(snapshot.workflows, impacted, offline, snapshot.components)
    ANALYSIS_RUNS.labels(operation="workflow_impact").inc()

    workflows = []
    for impact in impacts:
        impacted_step_ids = impact.impacted_step_ids
        position = {s.id: idx + 1 for idx, s in enumerate(impact.sorted_steps)}
        steps = [
            WorkflowStepView(
                step_id=step.id,
                name=step.name,
                order=step.order,
                position=position[step.id],
                component_ids=step.component_ids,
                component_names=list(dict.fromkeys(
                    snapshot.component_by_id[cid].name
                    for cid in step.component_ids
                    if cid in snapshot.component_by_id
                )),
                is_impacted=step.id in impacted_step_ids,
            )
            for step in reduced_step_view(impact, show_all=request.show_all_steps)
        ]
        workflows.append(AffectedWorkflow(
            workflow_id=impact.workflow.id,
            name=impact.workflow.name,
            business_process=impact.workflow.business_process,
            criticality=impact.workflow.criticality,
            impacted_step_count=impact.impacted_step_count,
            impacted_steps=[ImpactedStepSchema.model_validate(s) for s in impact.impacted_steps],
            steps=steps,
        ))

    return WorkflowImpactResponse(
        workflows=workflows,
        total_affected=len(workflows),
        calculated_at=datetime.now(timezone.utc),
    )


@router.post("/outage", response_model=OutageSummaryResponse)
async def outage_summary(
    request: AnalysisRequest,
    settings: AppSettings,
) -> OutageSummaryResponse:
    """Status counts with cascaded impact, plus impact alerts."""
    snapshot = _accept(request.snapshot, settings)

    summary = summarize_outage(snapshot)
    alerts = generate_impact_alerts(snapshot)

    return OutageSummaryResponse(
        total=summary.total,
        online=summary.online,
        offline=summary.offline,
        warning=summary.warning,
        maintenance=summary.maintenance,
        impacted=summary.impacted,
        effective_online=summary.effective_online,
        effective_offline=summary.effective_offline,
        network_health=summary.network_health,
        alerts=[ImpactAlertSchema.model_validate(a) for a in alerts],
        generated_at=summary.generated_at,
    )


@router.post("/spof", response_model=SPOFAnalysisResult)
async def detect_spofs(
    request: SPOFRequest,
    settings: AppSettings,
    detector: Detector,
) -> SPOFAnalysisResult:
    """Single points of failure in the snapshot."""
    snapshot = _accept(request.snapshot, settings)
    if request.threshold is not None:
        detector = SPOFDetector(
            threshold=request.threshold,
            escalation_downstream=settings.analysis.spof_escalation_downstream,
        )

    analysis = detector.detect_all(snapshot)
    ANALYSIS_RUNS.labels(operation="spof").inc()
    return SPOFAnalysisResult.model_validate(analysis)


@router.post("/dependencies/validate", response_model=DependencyValidationResult)
async def validate_new_dependency(
    request: DependencyValidationRequest,
    settings: AppSettings,
) -> DependencyValidationResult:
    """Check a candidate dependency for self-loops, duplicates and cycles."""
    snapshot = _accept(request.snapshot, settings)
    candidate = request.dependency

    validation = validate_dependency(candidate, snapshot.dependencies)

    source = snapshot.component_by_id.get(candidate.source_id)
    target = snapshot.component_by_id.get(candidate.target_id)
    if source is None or target is None:
        validation.errors.append("Dependency endpoints must reference existing components")
    else:
        validation.warnings.extend(
            check_type_plausibility(source.type, target.type, candidate.type)
        )

    existing = [d for d in snapshot.dependencies if d.id != candidate.id]
    return DependencyValidationResult(
        is_valid=validation.is_valid,
        errors=validation.errors,
        warnings=validation.warnings,
        cycles=detect_all_cycles(existing + [candidate]),
    )
