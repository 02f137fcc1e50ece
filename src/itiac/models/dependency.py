"""Dependency model (directed edge in the dependency graph).

An edge is stored as source -> target. Impact propagation follows the
edge as stored: when the source is unavailable, the target is treated
as downstream of it.
"""

from datetime import datetime
from enum import Enum

from pydantic import Field

from itiac.models.base import Criticality, SnapshotModel


class DependencyType(str, Enum):
    """Kind of relationship between two components."""

    REQUIRES = "requires"
    USES = "uses"
    FEEDS = "feeds"
    MONITORS = "monitors"


class Dependency(SnapshotModel):
    """Directed dependency edge between two components."""

    id: str = Field(..., min_length=1)
    source_id: str = Field(..., min_length=1)
    target_id: str = Field(..., min_length=1)
    type: DependencyType = DependencyType.REQUIRES
    criticality: Criticality = Criticality.MEDIUM
    description: str | None = None
    last_updated: datetime | None = None
