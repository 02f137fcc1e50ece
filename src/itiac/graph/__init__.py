"""Graph algorithms - propagation, attribution, workflow impact, scoring.

All functions are pure: they read a snapshot and return new derived
values without touching shared state.
"""

from itiac.graph.adjacency import build_forward_adjacency, build_reverse_adjacency
from itiac.graph.attribution import ImpactCause, attribute_causes, attribute_roots
from itiac.graph.impact import (
    AnalysisResult,
    AnalysisScope,
    ImpactAnalyzer,
    ScopeMode,
    compute_analysis_results,
)
from itiac.graph.outage import OutageSummary, generate_impact_alerts, summarize_outage
from itiac.graph.scoring import ImpactScore, ImpactScorer, RiskLevel, risk_level_for
from itiac.graph.spof import SPOFAnalysis, SPOFDetector, SPOFResult
from itiac.graph.traversal import (
    TraversalNode,
    TraversalResult,
    compute_downstream_impact,
    get_downstream,
    traverse_downstream,
)
from itiac.graph.workflows import (
    ImpactedStep,
    WorkflowImpact,
    map_workflow_impact,
    reduced_step_view,
)

__all__ = [
    # Adjacency
    "build_forward_adjacency",
    "build_reverse_adjacency",
    # Propagation
    "traverse_downstream",
    "get_downstream",
    "compute_downstream_impact",
    "TraversalNode",
    "TraversalResult",
    # Attribution
    "ImpactCause",
    "attribute_causes",
    "attribute_roots",
    # Workflows
    "ImpactedStep",
    "WorkflowImpact",
    "map_workflow_impact",
    "reduced_step_view",
    # Scoring
    "ImpactScore",
    "ImpactScorer",
    "RiskLevel",
    "risk_level_for",
    # Analysis
    "AnalysisResult",
    "AnalysisScope",
    "ImpactAnalyzer",
    "ScopeMode",
    "compute_analysis_results",
    # Outage
    "OutageSummary",
    "generate_impact_alerts",
    "summarize_outage",
    # SPOF
    "SPOFAnalysis",
    "SPOFDetector",
    "SPOFResult",
]
