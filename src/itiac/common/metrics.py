"""Prometheus metrics for impact analysis.

Metrics fall into three groups: what the service is asked to analyze
(snapshot sizes, rejections), what the graph code produces (impacted set
sizes, offline roots), and how the HTTP layer performs. All are exposed
on ``/admin/metrics``.
"""

from prometheus_client import Counter, Gauge, Histogram, Info

# Operations reported in the "operation" label
OPERATIONS = (
    "downstream_impact",
    "attribution",
    "workflow_impact",
    "analysis_results",
    "outage_summary",
    "spof",
)

_SIZE_BUCKETS = (1, 10, 50, 100, 250, 500, 1000, 2500, 5000, 10000, 50000)

APP_INFO = Info("itiac", "Version and environment of the running service")

# Inputs

SNAPSHOT_COMPONENTS = Histogram(
    "itiac_snapshot_components",
    "Components per accepted snapshot",
    buckets=_SIZE_BUCKETS,
)

SNAPSHOT_DEPENDENCIES = Histogram(
    "itiac_snapshot_dependencies",
    "Dependencies per accepted snapshot",
    buckets=_SIZE_BUCKETS,
)

SNAPSHOT_REJECTED = Counter(
    "itiac_snapshot_rejected_total",
    "Snapshots refused before analysis, by reason (invalid, too_large)",
    ["reason"],
)

# Graph outputs

ANALYSIS_RUNS = Counter(
    "itiac_analysis_runs_total",
    "Completed analysis operations",
    ["operation"],
)

ANALYSIS_DURATION = Histogram(
    "itiac_analysis_duration_seconds",
    "Wall time of one analysis operation",
    ["operation"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

GRAPH_TRAVERSAL_NODES = Histogram(
    "itiac_graph_traversal_nodes",
    "Components reached by one propagation or attribution pass",
    ["operation"],
    buckets=(0,) + _SIZE_BUCKETS[:-1],
)

OFFLINE_ROOTS = Gauge(
    "itiac_offline_roots",
    "Offline components in the last snapshot summarized",
)

# HTTP

API_REQUESTS = Counter(
    "itiac_api_requests_total",
    "HTTP requests served",
    ["method", "endpoint", "status"],
)

API_REQUEST_DURATION = Histogram(
    "itiac_api_request_duration_seconds",
    "HTTP request latency",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0),
)


def observe_snapshot(component_count: int, dependency_count: int) -> None:
    """Record the size of a snapshot that passed the boundary checks."""
    SNAPSHOT_COMPONENTS.observe(component_count)
    SNAPSHOT_DEPENDENCIES.observe(dependency_count)


def set_app_info(version: str, environment: str) -> None:
    APP_INFO.info({"version": version, "environment": environment})


# Export every operation at zero so dashboards see the series before first use
for _operation in OPERATIONS:
    ANALYSIS_RUNS.labels(operation=_operation)
