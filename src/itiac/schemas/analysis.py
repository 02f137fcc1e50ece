"""Pydantic schemas for Analysis API endpoints."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from itiac.graph.outage import AlertSeverity
from itiac.graph.scoring import RiskLevel
from itiac.graph.workflows import StepSeverity
from itiac.models.base import Criticality
from itiac.models.dependency import Dependency
from itiac.models.snapshot import Snapshot


class AnalysisRequest(BaseModel):
    """Base for requests carrying a snapshot."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    snapshot: Snapshot


class DownstreamImpactRequest(AnalysisRequest):
    """Request for the downstream impact of all offline components."""

    visible_ids: list[str] | None = None


class DownstreamImpactResult(BaseModel):
    """Offline roots and the components impacted downstream of them."""

    offline_ids: list[str]
    impacted_ids: list[str]
    total_impacted: int
    calculated_at: datetime


class ImpactCauseItem(BaseModel):
    """Nearest offline root for one impacted component."""

    component_id: str
    component_name: str
    root_id: str
    root_name: str
    distance: int = Field(ge=1)
    via_id: str


class CauseAttributionResult(BaseModel):
    """Cause attribution for every impacted component."""

    causes: list[ImpactCauseItem]
    total_impacted: int
    calculated_at: datetime


class AnalysisResultsRequest(AnalysisRequest):
    """Request for per-component analysis results."""

    scope: Literal["component", "all-components", "non-online"] | None = None
    component_id: str | None = None
    max_depth: int | None = Field(None, ge=1, le=1000)


class ImpactedStepSchema(BaseModel):
    """Workflow step hit by an outage."""

    model_config = ConfigDict(from_attributes=True)

    workflow_id: str
    workflow_name: str
    step_id: str
    step_name: str
    reason_component_ids: list[str]
    severity: StepSeverity


class AnalysisResultSchema(BaseModel):
    """Impact of one component failing."""

    model_config = ConfigDict(from_attributes=True)

    component_id: str
    component_name: str
    direct_impact_ids: list[str]
    direct_impacts: list[str]
    indirect_impact_ids: list[str]
    indirect_impacts: list[str]
    impacted_component_ids: list[str]
    impacted_components: list[str]
    affected_workflow_ids: list[str]
    affected_workflows: list[str]
    affected_steps: list[ImpactedStepSchema]
    business_impact_score: int = Field(ge=0)
    risk_level: RiskLevel
    max_depth: int
    score_breakdown: dict[str, float]
    analyzed_at: datetime


class AnalysisResultsResponse(BaseModel):
    """Per-component results ordered by descending score."""

    scope: str
    total: int
    results: list[AnalysisResultSchema]


class WorkflowImpactRequest(AnalysisRequest):
    """Request for affected workflows."""

    visible_ids: list[str] | None = None
    show_all_steps: bool = False


class WorkflowStepView(BaseModel):
    """Step as displayed in an affected workflow."""

    step_id: str
    name: str
    order: int
    position: int  # 1-based position within the sorted workflow
    component_ids: list[str]
    component_names: list[str]
    is_impacted: bool


class AffectedWorkflow(BaseModel):
    """Workflow with at least one impacted step."""

    workflow_id: str
    name: str
    business_process: str
    criticality: Criticality
    impacted_step_count: int
    impacted_steps: list[ImpactedStepSchema]
    steps: list[WorkflowStepView]


class WorkflowImpactResponse(BaseModel):
    """Affected workflows, most severe first."""

    workflows: list[AffectedWorkflow]
    total_affected: int
    calculated_at: datetime


class ImpactAlertSchema(BaseModel):
    """Alert for an offline, degraded or impacted component."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    severity: AlertSeverity
    component_id: str
    component_name: str
    criticality: str
    impacted_components: list[str]
    cause_id: str | None


class OutageSummaryResponse(BaseModel):
    """Status counts with cascaded impact plus alerts."""

    total: int
    online: int
    offline: int
    warning: int
    maintenance: int
    impacted: int
    effective_online: int
    effective_offline: int
    network_health: float
    alerts: list[ImpactAlertSchema]
    generated_at: datetime


class SPOFCandidate(BaseModel):
    """Single Point of Failure candidate."""

    model_config = ConfigDict(from_attributes=True)

    component_id: str
    component_name: str
    outgoing: int
    incoming: int
    severity: str
    affected_component_ids: list[str]
    affected_count: int
    description: str


class SPOFAnalysisResult(BaseModel):
    """Result of SPOF detection."""

    model_config = ConfigDict(from_attributes=True)

    total_spofs: int
    critical_spofs: int
    high_spofs: int
    spofs: list[SPOFCandidate]
    recommendations: list[str]
    analyzed_at: datetime


class SPOFRequest(AnalysisRequest):
    """Request for SPOF detection."""

    threshold: int | None = Field(None, ge=1, le=100)


class DependencyValidationRequest(AnalysisRequest):
    """Validate a candidate dependency against a snapshot."""

    dependency: Dependency


class DependencyValidationResult(BaseModel):
    """Validation outcome for a candidate dependency."""

    is_valid: bool
    errors: list[str]
    warnings: list[str]
    cycles: list[list[str]]
