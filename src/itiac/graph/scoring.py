"""Business impact scoring.

Rule-based, deterministic scoring. The score never decreases when any
input grows with the others held fixed: every term is a non-negative
weight times a count, and the criticality multiplier is non-decreasing
in criticality.

Thresholds (score >= threshold):
    critical  150
    high       90
    medium     45
    low         0
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from enum import Enum

from itiac.models.base import Criticality

# Per-impact weights
DIRECT_IMPACT_WEIGHT = 12
INDIRECT_IMPACT_WEIGHT = 8
BREADTH_WEIGHT = 2  # applied to every impacted component, direct or indirect
IMPACTED_STEP_WEIGHT = 5

WORKFLOW_WEIGHTS: dict[Criticality, int] = {
    Criticality.LOW: 10,
    Criticality.MEDIUM: 15,
    Criticality.HIGH: 20,
    Criticality.CRITICAL: 30,
}

CRITICALITY_MULTIPLIERS: dict[Criticality, float] = {
    Criticality.LOW: 1.0,
    Criticality.MEDIUM: 1.0,
    Criticality.HIGH: 1.5,
    Criticality.CRITICAL: 2.0,
}

# Risk thresholds
CRITICAL_RISK_THRESHOLD = 150
HIGH_RISK_THRESHOLD = 90
MEDIUM_RISK_THRESHOLD = 45


class RiskLevel(str, Enum):
    """Discrete risk level derived from the business impact score."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass
class ImpactScore:
    """Score, risk level and the terms that produced them."""

    score: int
    risk_level: RiskLevel
    breakdown: dict[str, float] = field(default_factory=dict)


def risk_level_for(score: int) -> RiskLevel:
    """Map a business impact score to its risk level."""
    if score >= CRITICAL_RISK_THRESHOLD:
        return RiskLevel.CRITICAL
    if score >= HIGH_RISK_THRESHOLD:
        return RiskLevel.HIGH
    if score >= MEDIUM_RISK_THRESHOLD:
        return RiskLevel.MEDIUM
    return RiskLevel.LOW


class ImpactScorer:
    """Aggregates impact counts into a business impact score."""

    def score(
        self,
        direct_count: int,
        indirect_count: int,
        workflow_criticalities: Iterable[Criticality],
        criticality: Criticality,
        impacted_step_count: int = 0,
    ) -> ImpactScore:
        """Score the impact of one analyzed component.

        Args:
            direct_count: Components one hop downstream.
            indirect_count: Components further downstream.
            workflow_criticalities: Criticality of each affected workflow.
            criticality: Criticality of the analyzed component.
            impacted_step_count: Impacted workflow steps.

        Returns:
            Rounded score with its risk level and per-term breakdown.
        """
        direct = direct_count * DIRECT_IMPACT_WEIGHT
        indirect = indirect_count * INDIRECT_IMPACT_WEIGHT
        breadth = (direct_count + indirect_count) * BREADTH_WEIGHT
        workflows = sum(WORKFLOW_WEIGHTS[c] for c in workflow_criticalities)
        steps = impacted_step_count * IMPACTED_STEP_WEIGHT

        raw = direct + indirect + breadth + workflows + steps
        multiplier = CRITICALITY_MULTIPLIERS[criticality]
        score = round(raw * multiplier)

        return ImpactScore(
            score=score,
            risk_level=risk_level_for(score),
            breakdown={
                "direct": direct,
                "indirect": indirect,
                "breadth": breadth,
                "workflows": workflows,
                "steps": steps,
                "multiplier": multiplier,
            },
        )
