"""Business workflow and workflow step models."""

from datetime import datetime

from pydantic import Field

from itiac.models.base import Criticality, SnapshotModel


class WorkflowStep(SnapshotModel):
    """A single step of a business workflow.

    Older records carry a single ``primary_component_id``; newer ones a
    ``primary_component_ids`` list. Both are honored.
    """

    id: str = Field(..., min_length=1)
    name: str
    description: str | None = None
    order: int
    primary_component_id: str | None = None
    primary_component_ids: list[str] = Field(default_factory=list)
    alternative_component_ids: list[str] = Field(default_factory=list)
    fallback_workflow_id: str | None = None

    @property
    def component_ids(self) -> list[str]:
        """Merged and deduplicated component references, list order first."""
        ids = list(self.primary_component_ids)
        if self.primary_component_id:
            ids.append(self.primary_component_id)
        return list(dict.fromkeys(ids))


class BusinessWorkflow(SnapshotModel):
    """Business workflow composed of ordered steps."""

    id: str = Field(..., min_length=1)
    name: str
    description: str | None = None
    business_process: str = ""
    criticality: Criticality
    owner: str | None = None
    last_updated: datetime | None = None
    steps: list[WorkflowStep] = Field(default_factory=list)

    @property
    def sorted_steps(self) -> list[WorkflowStep]:
        """Steps ordered by their ``order`` field (stable for equal orders)."""
        return sorted(self.steps, key=lambda s: s.order)
