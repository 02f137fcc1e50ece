"""Pytest configuration and fixtures for ITIAC tests."""

from collections.abc import AsyncGenerator, Callable
from typing import Any

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from itiac.common.config import AnalysisSettings, Settings
from itiac.models import (
    BusinessWorkflow,
    Component,
    Dependency,
    Snapshot,
    WorkflowStep,
)


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Get test settings."""
    return Settings(
        environment="development",
        debug=True,
        analysis={"max_graph_nodes": 500, "max_graph_edges": 2000},
        logging={"format": "console", "level": "DEBUG"},
    )


@pytest.fixture
def analysis_settings(test_settings: Settings) -> AnalysisSettings:
    return test_settings.analysis


@pytest_asyncio.fixture
async def async_client(test_settings: Settings) -> AsyncGenerator[AsyncClient, None]:
    """Create async HTTP client for testing API endpoints."""
    from itiac.api.main import app
    from itiac.common.config import get_settings

    app.dependency_overrides[get_settings] = lambda: test_settings

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    app.dependency_overrides.clear()


# =============================================================================
# Entity factories
# =============================================================================


@pytest.fixture
def make_component() -> Callable[..., Component]:
    """Factory for components with sensible defaults."""

    def _make(
        component_id: str,
        status: str = "online",
        criticality: str = "medium",
        type: str = "server",
        name: str | None = None,
        **extra: Any,
    ) -> Component:
        return Component(
            id=component_id,
            name=name or f"{component_id}-name",
            type=type,
            status=status,
            criticality=criticality,
            **extra,
        )

    return _make


@pytest.fixture
def make_dependency() -> Callable[..., Dependency]:
    """Factory for dependencies; id defaults to ``source->target``."""

    def _make(source_id: str, target_id: str, dependency_id: str | None = None, **extra: Any) -> Dependency:
        return Dependency(
            id=dependency_id or f"{source_id}->{target_id}",
            source_id=source_id,
            target_id=target_id,
            **extra,
        )

    return _make


@pytest.fixture
def make_workflow() -> Callable[..., BusinessWorkflow]:
    """Factory for workflows from ``(step_id, order, component_ids)`` tuples."""

    def _make(
        workflow_id: str,
        steps: list[tuple[str, int, list[str]]],
        criticality: str = "medium",
        name: str | None = None,
    ) -> BusinessWorkflow:
        return BusinessWorkflow(
            id=workflow_id,
            name=name or f"{workflow_id}-name",
            business_process="operations",
            criticality=criticality,
            steps=[
                WorkflowStep(
                    id=step_id,
                    name=f"{step_id}-name",
                    order=order,
                    primary_component_ids=component_ids,
                )
                for step_id, order, component_ids in steps
            ],
        )

    return _make


# =============================================================================
# Sample Data Fixtures
# =============================================================================


@pytest.fixture
def sample_snapshot_data() -> dict[str, Any]:
    """Raw snapshot as exported by the storage layer (camelCase keys)."""
    return {
        "components": [
            {"id": "lb", "name": "Edge LB", "type": "load-balancer", "status": "online", "criticality": "high"},
            {"id": "web", "name": "Web Server", "type": "server", "status": "offline", "criticality": "critical"},
            {"id": "api", "name": "Orders API", "type": "api", "status": "online", "criticality": "high"},
            {"id": "db", "name": "Orders DB", "type": "database", "status": "online", "criticality": "critical"},
            {"id": "cache", "name": "Cache", "type": "service", "status": "warning", "criticality": "low"},
        ],
        "dependencies": [
            {"id": "d1", "sourceId": "lb", "targetId": "web", "type": "feeds", "criticality": "high"},
            {"id": "d2", "sourceId": "web", "targetId": "api", "type": "requires", "criticality": "high"},
            {"id": "d3", "sourceId": "api", "targetId": "db", "type": "requires", "criticality": "critical"},
            {"id": "d4", "sourceId": "cache", "targetId": "api", "type": "uses", "criticality": "low"},
        ],
        "workflows": [
            {
                "id": "wf-orders",
                "name": "Order Processing",
                "businessProcess": "sales",
                "criticality": "critical",
                "steps": [
                    {"id": "s1", "name": "Order Validation", "order": 1, "primaryComponentId": "lb"},
                    {"id": "s2", "name": "Payment Processing", "order": 2, "primaryComponentIds": ["api"]},
                    {"id": "s3", "name": "Order Storage", "order": 3, "primaryComponentId": "db"},
                ],
            },
            {
                "id": "wf-reporting",
                "name": "Reporting",
                "businessProcess": "finance",
                "criticality": "low",
                "steps": [
                    {"id": "r1", "name": "Extract", "order": 1, "primaryComponentId": "cache"},
                ],
            },
        ],
    }


@pytest.fixture
def sample_snapshot(sample_snapshot_data: dict[str, Any]) -> Snapshot:
    return Snapshot.model_validate(sample_snapshot_data)


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
