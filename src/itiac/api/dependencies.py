"""FastAPI dependency injection for API endpoints."""

from typing import Annotated

from fastapi import Depends

from itiac.common.config import Settings, get_settings
from itiac.graph.impact import ImpactAnalyzer
from itiac.graph.spof import SPOFDetector

# Type alias for settings dependency
AppSettings = Annotated[Settings, Depends(get_settings)]


def get_analyzer(settings: AppSettings) -> ImpactAnalyzer:
    """Get an impact analyzer configured from settings."""
    return ImpactAnalyzer(max_depth=settings.analysis.max_depth)


def get_spof_detector(settings: AppSettings) -> SPOFDetector:
    """Get a SPOF detector configured from settings."""
    return SPOFDetector(
        threshold=settings.analysis.spof_outgoing_threshold,
        escalation_downstream=settings.analysis.spof_escalation_downstream,
    )


Analyzer = Annotated[ImpactAnalyzer, Depends(get_analyzer)]
Detector = Annotated[SPOFDetector, Depends(get_spof_detector)]
