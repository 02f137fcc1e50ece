"""Health reporting for the ITIAC service.

The service keeps no connections, so readiness means "the analysis engine
still produces the right answer". The built-in check runs a tiny cyclic
propagation and attribution and compares against known results. Extra
checks can be registered by embedding applications.
"""

import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

HealthCheck = Callable[[], Awaitable["ComponentHealth"]]

# a -> b -> c, with c -> a closing a cycle back to the root
_PROBE_ADJACENCY = {"a": ["b"], "b": ["c"], "c": ["a"]}
_PROBE_IMPACTED = {"b", "c"}
_PROBE_DISTANCES = {"b": 1, "c": 2}


class HealthStatus(str, Enum):
    """Health check status values."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"

    def worst(self, other: "HealthStatus") -> "HealthStatus":
        order = [HealthStatus.HEALTHY, HealthStatus.DEGRADED, HealthStatus.UNHEALTHY]
        return max(self, other, key=order.index)


@dataclass
class ComponentHealth:
    """Outcome of one check."""

    name: str
    status: HealthStatus
    message: str | None = None
    latency_ms: float | None = None
    details: dict[str, Any] = field(default_factory=dict)


@dataclass
class HealthResponse:
    """Aggregated health of the service."""

    status: HealthStatus
    service: str
    version: str
    components: list[ComponentHealth] = field(default_factory=list)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "timestamp": self.timestamp.isoformat(),
            "service": self.service,
            "version": self.version,
            "components": [
                {
                    "name": c.name,
                    "status": c.status.value,
                    "message": c.message,
                    "latency_ms": c.latency_ms,
                    "details": c.details or None,
                }
                for c in self.components
            ],
        }


async def check_analysis_engine() -> ComponentHealth:
    """Propagate and attribute over a three-node cycle."""
    from itiac.graph.attribution import attribute_roots
    from itiac.graph.traversal import traverse_downstream

    start = time.perf_counter()
    impacted = traverse_downstream(["a"], _PROBE_ADJACENCY, stop_ids={"a"})
    distances = {k: v.distance for k, v in attribute_roots(["a"], _PROBE_ADJACENCY).items()}
    latency = round((time.perf_counter() - start) * 1000, 2)

    if impacted == _PROBE_IMPACTED and distances == _PROBE_DISTANCES:
        return ComponentHealth(
            name="analysis_engine",
            status=HealthStatus.HEALTHY,
            message="Probe analysis matched expected impact",
            latency_ms=latency,
        )
    return ComponentHealth(
        name="analysis_engine",
        status=HealthStatus.UNHEALTHY,
        message="Probe analysis returned an unexpected result",
        latency_ms=latency,
        details={"impacted": sorted(impacted), "distances": distances},
    )


class HealthChecker:
    """Runs the engine probe plus any registered checks."""

    def __init__(self, service_name: str, version: str) -> None:
        self.service_name = service_name
        self.version = version
        self._checks: list[tuple[str, HealthCheck]] = [("analysis_engine", check_analysis_engine)]

    def register_check(self, name: str, check_func: HealthCheck) -> None:
        """Register an async check returning ComponentHealth."""
        self._checks.append((name, check_func))

    async def readiness(self) -> HealthResponse:
        """Run every check; the overall status is the worst individual one."""
        response = HealthResponse(
            status=HealthStatus.HEALTHY,
            service=self.service_name,
            version=self.version,
        )

        for name, check_func in self._checks:
            try:
                result = await check_func()
            except Exception as e:
                result = ComponentHealth(
                    name=name,
                    status=HealthStatus.UNHEALTHY,
                    message=f"Check failed: {e}",
                )
            response.components.append(result)
            response.status = response.status.worst(result.status)

        return response
