"""Mapping component impact onto business workflows.

A step is impacted when any component it references is impacted or is
itself an offline root. A workflow is affected when at least one of its
steps is impacted.
"""

from collections.abc import Iterable, Mapping, Sequence, Set
from dataclasses import dataclass, field
from enum import Enum

from itiac.common.logging import get_logger
from itiac.models.component import Component, ComponentStatus
from itiac.models.workflow import BusinessWorkflow, WorkflowStep

logger = get_logger(__name__)


class StepSeverity(str, Enum):
    """How hard an impacted step is hit."""

    WARNING = "warning"  # an alternative component is still online
    ERROR = "error"


@dataclass
class ImpactedStep:
    """A workflow step referencing impacted or offline components."""

    workflow_id: str
    workflow_name: str
    step_id: str
    step_name: str
    reason_component_ids: list[str]
    severity: StepSeverity


@dataclass
class WorkflowImpact:
    """Impact of an outage on one workflow."""

    workflow: BusinessWorkflow
    sorted_steps: list[WorkflowStep]
    impacted_steps: list[ImpactedStep] = field(default_factory=list)

    @property
    def impacted_step_ids(self) -> set[str]:
        return {s.step_id for s in self.impacted_steps}

    @property
    def impacted_step_count(self) -> int:
        return len(self.impacted_steps)

    @property
    def is_affected(self) -> bool:
        return bool(self.impacted_steps)


def is_step_impacted(step: WorkflowStep, impacted_or_offline: Set[str]) -> bool:
    """Check whether a step references any impacted-or-offline component."""
    return any(cid in impacted_or_offline for cid in step.component_ids)


def _step_severity(
    step: WorkflowStep,
    component_by_id: Mapping[str, Component],
) -> StepSeverity:
    for alternative_id in step.alternative_component_ids:
        alternative = component_by_id.get(alternative_id)
        if alternative is not None and alternative.status == ComponentStatus.ONLINE:
            return StepSeverity.WARNING
    return StepSeverity.ERROR


def evaluate_workflow(
    workflow: BusinessWorkflow,
    impacted_or_offline: Set[str],
    component_by_id: Mapping[str, Component] | None = None,
) -> WorkflowImpact:
    """Evaluate every step of one workflow in ``order`` sequence."""
    component_by_id = component_by_id or {}
    sorted_steps = workflow.sorted_steps
    impact = WorkflowImpact(workflow=workflow, sorted_steps=sorted_steps)

    for step in sorted_steps:
        reasons = [cid for cid in step.component_ids if cid in impacted_or_offline]
        if not reasons:
            continue
        impact.impacted_steps.append(ImpactedStep(
            workflow_id=workflow.id,
            workflow_name=workflow.name,
            step_id=step.id,
            step_name=step.name,
            reason_component_ids=reasons,
            severity=_step_severity(step, component_by_id),
        ))

    return impact


def map_workflow_impact(
    workflows: Iterable[BusinessWorkflow],
    impacted_ids: Set[str],
    offline_ids: Iterable[str] = (),
    components: Sequence[Component] = (),
) -> list[WorkflowImpact]:
    """Find affected workflows, most severe first.

    Args:
        workflows: Workflow snapshot.
        impacted_ids: Downstream-impacted component ids.
        offline_ids: Offline roots; they count as impacted for step membership.
        components: Component snapshot, used to grade step severity from
            alternative components.

    Returns:
        Affected workflows ordered by criticality (critical first), then by
        descending impacted-step count.
    """
    impacted_or_offline = set(impacted_ids) | set(offline_ids)
    component_by_id = {c.id: c for c in components}

    affected = [
        impact
        for impact in (
            evaluate_workflow(wf, impacted_or_offline, component_by_id)
            for wf in workflows
        )
        if impact.is_affected
    ]
    affected.sort(key=lambda i: (i.workflow.criticality.severity_rank, -i.impacted_step_count))

    logger.debug("Mapped workflow impact", affected_workflows=len(affected))
    return affected


def reduced_step_view(impact: WorkflowImpact, show_all: bool = False) -> list[WorkflowStep]:
    """Steps to display for an affected workflow.

    Unless ``show_all`` is set, keeps each impacted step plus its
    immediate predecessor and successor in ``order`` sequence.
    """
    steps = impact.sorted_steps
    if show_all:
        return list(steps)

    impacted_ids = impact.impacted_step_ids
    visible: set[int] = set()
    for idx, step in enumerate(steps):
        if step.id in impacted_ids:
            visible.update(i for i in (idx - 1, idx, idx + 1) if 0 <= i < len(steps))
    return [step for idx, step in enumerate(steps) if idx in visible]


def impacted_only_view(impact: WorkflowImpact) -> list[WorkflowStep]:
    """Only the impacted steps, in ``order`` sequence."""
    impacted_ids = impact.impacted_step_ids
    return [s for s in impact.sorted_steps if s.id in impacted_ids]
