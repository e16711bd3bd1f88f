"""Tests for the CLI text formatters — headers, empty states and key figures."""

from __future__ import annotations

from cmms_insights.analytics.alerts import generate_alerts
from cmms_insights.analytics.kpi import (
    FleetKpis,
    compute_kpis,
    fault_distribution,
    mttr_trend,
    technician_performance,
    top_risk_assets,
)
from cmms_insights.predictive.history import HistoricalPatterns, analyze_historical_patterns
from cmms_insights.predictive.technician import department_lookup, recommend_technicians
from cmms_insights.reporting.formatters import (
    format_alerts,
    format_analytics,
    format_history,
    format_recommendations,
    format_risk_table,
)


class TestRiskTable:
    def test_rows(self, sample_assets):
        assets = [a.model_copy(update={"risk_score": s}) for a, s in zip(sample_assets, [52, 4, 80])]
        text = format_risk_table(top_risk_assets(assets))
        assert "=== Asset Risk ===" in text
        lines = [line for line in text.splitlines() if line.strip().startswith("NFC-")]
        assert lines[0].split()[0] == "NFC-2003"
        assert "high" in lines[0]

    def test_empty(self):
        assert "(no assets)" in format_risk_table([])


class TestRecommendations:
    def test_ranked_lines(self, sample_assets, sample_users, sample_locations, sample_work_orders):
        recs = recommend_technicians(
            sample_assets[0], [u for u in sample_users if u.is_technician], sample_work_orders,
            department_of=department_lookup(sample_locations),
        )
        text = format_recommendations(sample_assets[0], recs)
        assert "=== Technicians for Ventilator (NFC-2001) ===" in text
        assert " 1. Mike Ross" in text
        assert "Same Dept" in text

    def test_empty(self, sample_assets):
        assert "(no technicians available)" in format_recommendations(sample_assets[0], [])


class TestHistory:
    def test_summary(self, sample_work_orders, sample_assets, sample_inventory):
        patterns = analyze_historical_patterns(
            "Servo-U", None, sample_work_orders, assets=sample_assets, inventory=sample_inventory,
        )
        text = format_history("Servo-U", patterns)
        assert "=== Repair history: Servo-U ===" in text
        assert "Similar cases:     3" in text
        assert "Avg repair time:   3.0 h" in text
        assert "x3" in text
        assert "Ref WO#7001, Ref WO#7002" in text

    def test_no_matches(self):
        text = format_history("Unknown", HistoricalPatterns())
        assert "Similar cases:     0" in text
        assert "Reference orders:  (none)" in text


class TestAnalytics:
    def test_overview(self, sample_assets, sample_work_orders, sample_inventory, sample_users):
        text = format_analytics(
            compute_kpis(sample_assets, sample_work_orders, sample_inventory),
            mttr_trend(sample_work_orders),
            technician_performance(sample_work_orders, sample_users),
            fault_distribution(sample_work_orders, sample_assets),
        )
        assert "=== Fleet Overview ===" in text
        assert "Total assets:       3" in text
        assert "MTTR:               3.0 h" in text
        assert "Apr 2026" in text
        assert "Abdalla" in text

    def test_empty_sections(self):
        text = format_analytics(FleetKpis(0, 0, 0), [], [], [])
        assert text.count("(no closed orders)") == 2
        assert "(no corrective orders)" in text


class TestAlerts:
    def test_listed(self, sample_assets, sample_inventory, sample_locations, now):
        text = format_alerts(generate_alerts(sample_assets, sample_inventory, sample_locations, now=now))
        assert "=== Active Alerts (2) ===" in text
        assert "[HIGH  ] COMPLIANCE" in text
        assert "Critical low stock: Ventilator Filter" in text

    def test_none(self):
        assert "(none)" in format_alerts([])
