"""Domain models for the impact analysis core.

Snapshots of components, dependencies and workflows are read-only
inputs; every analysis returns new derived values.
"""

from itiac.models.base import Criticality
from itiac.models.component import Component, ComponentStatus, ComponentType
from itiac.models.dependency import Dependency, DependencyType
from itiac.models.snapshot import Snapshot, load_snapshot
from itiac.models.workflow import BusinessWorkflow, WorkflowStep

__all__ = [
    "BusinessWorkflow",
    "Component",
    "ComponentStatus",
    "ComponentType",
    "Criticality",
    "Dependency",
    "DependencyType",
    "Snapshot",
    "WorkflowStep",
    "load_snapshot",
]
