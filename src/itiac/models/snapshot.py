"""Immutable snapshot of the infrastructure graph.

A snapshot is what the storage collaborator hands to the core. It is
validated once at the boundary; the graph algorithms assume well-formed
entities but tolerate dangling dependency endpoints.
"""

from functools import cached_property
from typing import Any

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError

from itiac.common.config import AnalysisSettings, get_settings
from itiac.common.exceptions import GraphTooLargeError, SnapshotValidationError
from itiac.common.logging import get_logger
from itiac.common.metrics import SNAPSHOT_REJECTED
from itiac.models.base import SnapshotModel
from itiac.models.component import Component, ComponentStatus
from itiac.models.dependency import Dependency
from itiac.models.workflow import BusinessWorkflow

logger = get_logger(__name__)

UNKNOWN_NAME = "Unknown"


class Snapshot(SnapshotModel):
    """Consistent read of components, dependencies and workflows."""

    components: list[Component] = Field(default_factory=list)
    dependencies: list[Dependency] = Field(default_factory=list)
    workflows: list[BusinessWorkflow] = Field(default_factory=list)

    @cached_property
    def component_by_id(self) -> dict[str, Component]:
        return {c.id: c for c in self.components}

    @property
    def offline_ids(self) -> list[str]:
        """Offline component ids in snapshot order."""
        return [c.id for c in self.components if c.status == ComponentStatus.OFFLINE]

    def name_of(self, component_id: str) -> str:
        """Component name, or ``Unknown`` for ids missing from the snapshot."""
        component = self.component_by_id.get(component_id)
        return component.name if component else UNKNOWN_NAME


def load_snapshot(
    data: dict[str, Any],
    settings: AnalysisSettings | None = None,
) -> Snapshot:
    """Validate a raw mapping into a Snapshot.

    Args:
        data: Mapping with ``components``, ``dependencies`` and ``workflows``.
        settings: Analysis settings for size limits. Uses global settings if
            not provided.

    Returns:
        Validated snapshot.

    Raises:
        SnapshotValidationError: Required fields are missing or malformed.
        GraphTooLargeError: Snapshot exceeds configured size limits.
    """
    if settings is None:
        settings = get_settings().analysis

    try:
        snapshot = Snapshot.model_validate(data)
    except PydanticValidationError as e:
        SNAPSHOT_REJECTED.labels(reason="invalid").inc()
        errors = [
            {"loc": ".".join(str(p) for p in err["loc"]), "msg": err["msg"]}
            for err in e.errors()
        ]
        logger.warning("Snapshot rejected", error_count=len(errors))
        raise SnapshotValidationError(details={"errors": errors}, cause=e) from e

    check_snapshot_size(snapshot, settings)
    return snapshot


def check_snapshot_size(snapshot: Snapshot, settings: AnalysisSettings) -> None:
    """Reject snapshots beyond the configured node/edge limits.

    Raises:
        GraphTooLargeError: When a limit is exceeded.
    """
    if (
        len(snapshot.components) > settings.max_graph_nodes
        or len(snapshot.dependencies) > settings.max_graph_edges
    ):
        SNAPSHOT_REJECTED.labels(reason="too_large").inc()
        raise GraphTooLargeError(details={
            "components": len(snapshot.components),
            "dependencies": len(snapshot.dependencies),
            "max_graph_nodes": settings.max_graph_nodes,
            "max_graph_edges": settings.max_graph_edges,
        })
