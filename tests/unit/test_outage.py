"""Unit tests for outage summary and impact alerts."""

import pytest

from itiac.graph.outage import AlertSeverity, generate_impact_alerts, summarize_outage
from itiac.models import Snapshot


@pytest.mark.unit
class TestSummarizeOutage:
    """Test cases for summarize_outage."""

    def test_counts_with_cascade(self, sample_snapshot: Snapshot):
        """Test impacted components count as effectively offline."""
        summary = summarize_outage(sample_snapshot)

        assert summary.total == 5
        assert summary.online == 3
        assert summary.offline == 1
        assert summary.warning == 1
        assert summary.maintenance == 0
        assert summary.impacted == 2
        assert summary.effective_online == 1
        assert summary.effective_offline == 3
        assert summary.network_health == 20.0
        assert set(summary.causes) == {"api", "db"}

    def test_all_online(self, make_component, make_dependency):
        """Test a healthy snapshot reports full health."""
        snapshot = Snapshot(
            components=[make_component("a"), make_component("b")],
            dependencies=[make_dependency("a", "b")],
        )

        summary = summarize_outage(snapshot)

        assert summary.impacted == 0
        assert summary.network_health == 100.0

    def test_dangling_targets_not_counted(self, make_component, make_dependency):
        """Test impacted ids missing from the snapshot are left out of the counts."""
        snapshot = Snapshot(
            components=[make_component("r", status="offline"), make_component("a")],
            dependencies=[make_dependency("r", "a"), make_dependency("r", "ghost")],
        )

        summary = summarize_outage(snapshot)

        assert summary.impacted == 1
        assert summary.effective_offline == 2
        assert summary.impacted == summary.effective_offline - summary.offline

    def test_empty_snapshot(self):
        """Test an empty snapshot does not divide by zero."""
        summary = summarize_outage(Snapshot())

        assert summary.total == 0
        assert summary.network_health == 0.0


@pytest.mark.unit
class TestImpactAlerts:
    """Test cases for generate_impact_alerts."""

    def test_alert_kinds(self, sample_snapshot: Snapshot):
        """Test offline, impacted and warning alerts are produced."""
        alerts = generate_impact_alerts(sample_snapshot)

        assert [a.id for a in alerts] == [
            "offline-web",
            "impacted-by-offline-web-api",
            "impacted-by-offline-web-db",
            "warning-cache",
        ]

    def test_offline_alert_lists_attributed_components(self, sample_snapshot: Snapshot):
        """Test the root alert names the components it explains."""
        alert = generate_impact_alerts(sample_snapshot)[0]

        assert alert.severity == AlertSeverity.CRITICAL
        assert alert.title == "Web Server Offline"
        assert alert.criticality == "critical"
        assert alert.impacted_components == ["Orders API", "Orders DB"]

    def test_impacted_alert_names_predecessor(self, sample_snapshot: Snapshot):
        """Test impacted alerts name the node the outage arrived through."""
        alerts = {a.id: a for a in generate_impact_alerts(sample_snapshot)}

        direct = alerts["impacted-by-offline-web-api"]
        assert direct.message == "Orders API is impacted by Web Server outage"
        assert direct.cause_id == "web"

        indirect = alerts["impacted-by-offline-web-db"]
        assert indirect.message == "Orders DB is impacted by Orders API outage"
        assert indirect.cause_id == "web"

    def test_warning_alert_lists_downstream(self, sample_snapshot: Snapshot):
        """Test degraded components list what sits downstream."""
        alert = generate_impact_alerts(sample_snapshot)[-1]

        assert alert.severity == AlertSeverity.WARNING
        assert alert.component_id == "cache"
        assert alert.impacted_components == ["Orders API", "Orders DB"]

    def test_dangling_impact_has_no_alert(self, make_component, make_dependency):
        """Test impacted ids missing from the snapshot get no alert of their own."""
        snapshot = Snapshot(
            components=[make_component("r", status="offline")],
            dependencies=[make_dependency("r", "ghost")],
        )

        alerts = generate_impact_alerts(snapshot)

        assert [a.id for a in alerts] == ["offline-r"]
        assert alerts[0].impacted_components == []

    def test_no_alerts_when_healthy(self, make_component):
        """Test a healthy snapshot raises nothing."""
        snapshot = Snapshot(components=[make_component("a")])

        assert generate_impact_alerts(snapshot) == []
