"""Base model configuration and shared enumerations."""

from enum import Enum

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SnapshotModel(BaseModel):
    """Base for all snapshot entities.

    Entities are frozen: the core only ever reads a snapshot. Field
    names are snake_case, camelCase keys from the storage layer are
    accepted on input.
    """

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        use_enum_values=False,
    )


class Criticality(str, Enum):
    """Business criticality shared by components, dependencies and workflows."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def severity_rank(self) -> int:
        """Sort key where the most severe level comes first."""
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    Criticality.CRITICAL: 0,
    Criticality.HIGH: 1,
    Criticality.MEDIUM: 2,
    Criticality.LOW: 3,
}
