"""
Tests for cmms_insights.predictive.risk.

What we test
------------
1. Each factor in isolation: age, utilization, recent corrective orders,
   recent movements. Non-finite operating hours count as zero.
2. Identifier reconciliation: orders and moves filed under a tag count.
3. Window edges: events before the lookback window or with bad dates are ignored.
4. Clamping: scores never leave [0, 100].
5. Band classification thresholds.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from cmms_insights.models.asset import Asset
from cmms_insights.models.inventory import MovementLog
from cmms_insights.models.work_order import WorkOrder
from cmms_insights.predictive.risk import (
    RISK_MAX,
    assess_risk,
    compute_risk_score,
    risk_band,
)
from cmms_insights.taxonomy.maintenance_taxonomy import WorkOrderType


def _asset(**overrides) -> Asset:
    fields = {
        "asset_id": "NFC-9001",
        "nfc_tag_id": "NFC-9001",
        "rfid_tag_id": "E200001700002329",
        "name": "Ventilator",
        "model": "Servo-U",
        "purchase_date": "2026-01-01",
        "operating_hours": 0,
    }
    fields.update(overrides)
    return Asset(**fields)


def _corrective(wo_id: int, asset_ref: str, created_at: str | None) -> WorkOrder:
    return WorkOrder(
        wo_id=wo_id, asset_id=asset_ref, type=WorkOrderType.CORRECTIVE, created_at=created_at
    )


def _move(log_id: int, asset_ref: str, timestamp: str | None) -> MovementLog:
    return MovementLog(log_id=log_id, asset_id=asset_ref, timestamp=timestamp)


# ── Baseline ──────────────────────────────────────────────────────────────────

class TestBaseline:
    def test_new_unused_asset_scores_zero(self, now):
        assert compute_risk_score(_asset(), [], [], now=now) == 0

    def test_missing_purchase_date_contributes_nothing(self, now):
        comps = assess_risk(_asset(purchase_date=None), [], [], now=now)
        assert comps.age_years == 0
        assert comps.score == 0

    def test_unparseable_purchase_date_contributes_nothing(self, now):
        assert compute_risk_score(_asset(purchase_date="last spring"), [], [], now=now) == 0

    @pytest.mark.parametrize("hours", ["nan", "inf", "-inf", float("nan"), float("inf")])
    def test_non_finite_hours_contribute_nothing(self, hours, now):
        comps = assess_risk(_asset(operating_hours=hours), [], [], now=now)
        assert comps.utilization_points == 0
        assert comps.score == 0


# ── Individual factors ────────────────────────────────────────────────────────

class TestFactors:
    def test_age_is_two_points_per_year(self, now):
        comps = assess_risk(_asset(purchase_date="2016-09-30"), [], [], now=now)
        assert comps.age_years == 10
        assert comps.age_points == 20
        assert comps.score == 20

    def test_utilization_floors_hours_over_500(self, now):
        comps = assess_risk(_asset(operating_hours=1499), [], [], now=now)
        assert comps.utilization_points == 2

    def test_recent_corrective_orders_add_ten_each(self, now):
        orders = [
            _corrective(1, "NFC-9001", "2026-05-01T08:00:00Z"),
            _corrective(2, "NFC-9001", "2026-06-01T08:00:00Z"),
        ]
        comps = assess_risk(_asset(), orders, [], now=now)
        assert comps.recent_failures == 2
        assert comps.score == 20

    def test_non_corrective_orders_ignored(self, now):
        wo = WorkOrder(
            wo_id=1, asset_id="NFC-9001", type=WorkOrderType.PREVENTIVE,
            created_at="2026-06-01T08:00:00Z",
        )
        assert compute_risk_score(_asset(), [wo], [], now=now) == 0

    def test_recent_moves_add_five_each(self, now):
        moves = [_move(i, "NFC-9001", "2026-04-10T10:00:00Z") for i in range(1, 4)]
        comps = assess_risk(_asset(), [], moves, now=now)
        assert comps.recent_moves == 3
        assert comps.mobility_points == 15
        assert comps.score == 15

    def test_other_assets_history_ignored(self, now):
        orders = [_corrective(1, "NFC-1234", "2026-06-01T08:00:00Z")]
        moves = [_move(1, "NFC-1234", "2026-06-01T08:00:00Z")]
        assert compute_risk_score(_asset(), orders, moves, now=now) == 0

    def test_sample_ventilator_components(self, sample_assets, sample_work_orders,
                                          sample_movement_logs, now):
        comps = assess_risk(sample_assets[0], sample_work_orders, sample_movement_logs, now=now)
        assert comps.age_points == 12
        assert comps.utilization_points == 10
        assert comps.recent_failures == 2
        assert comps.recent_moves == 2
        assert comps.score == 52


# ── Identifier reconciliation ─────────────────────────────────────────────────

class TestTagReferences:
    def test_rfid_referenced_order_counts(self, now):
        orders = [_corrective(1, "E200001700002329", "2026-06-01T08:00:00Z")]
        assert assess_risk(_asset(), orders, [], now=now).recent_failures == 1

    def test_nfc_referenced_move_counts(self, now):
        asset = _asset(asset_id="17678", nfc_tag_id="NFC-17678")
        moves = [_move(1, "NFC-17678", "2026-06-01T08:00:00Z")]
        assert assess_risk(asset, [], moves, now=now).recent_moves == 1

    def test_reference_whitespace_is_ignored(self, now):
        orders = [_corrective(1, "  NFC-9001 ", "2026-06-01T08:00:00Z")]
        assert assess_risk(_asset(), orders, [], now=now).recent_failures == 1


# ── Lookback window ───────────────────────────────────────────────────────────

class TestWindow:
    def test_events_before_window_ignored(self, now):
        orders = [_corrective(1, "NFC-9001", "2025-12-01T08:00:00Z")]
        moves = [_move(1, "NFC-9001", "2025-11-01T08:00:00Z")]
        assert compute_risk_score(_asset(), orders, moves, now=now) == 0

    def test_window_start_is_exclusive(self, now):
        # Six calendar months before 2026-06-15T12:00Z.
        orders = [_corrective(1, "NFC-9001", "2025-12-15T12:00:00Z")]
        assert compute_risk_score(_asset(), orders, [], now=now) == 0

    def test_custom_lookback(self, now):
        orders = [_corrective(1, "NFC-9001", "2025-12-01T08:00:00Z")]
        assert compute_risk_score(_asset(), orders, [], now=now, lookback_months=12) == 10

    def test_missing_or_bad_dates_ignored(self, now):
        orders = [
            _corrective(1, "NFC-9001", None),
            _corrective(2, "NFC-9001", "not a date"),
        ]
        moves = [_move(1, "NFC-9001", None)]
        assert compute_risk_score(_asset(), orders, moves, now=now) == 0

    def test_naive_now_treated_as_utc(self):
        naive = datetime(2026, 6, 15, 12, 0, 0)
        orders = [_corrective(1, "NFC-9001", "2026-06-01T08:00:00Z")]
        assert compute_risk_score(_asset(), orders, [], now=naive) == 10


# ── Clamping ──────────────────────────────────────────────────────────────────

class TestClamping:
    def test_fifty_year_old_asset_clamps_to_max(self, now):
        assert compute_risk_score(_asset(purchase_date="1976-01-01"), [], [], now=now) == RISK_MAX

    def test_raw_total_can_exceed_max(self, now):
        comps = assess_risk(_asset(operating_hours=100_000), [], [], now=now)
        assert comps.raw_total == 200
        assert comps.score == 100

    def test_future_purchase_date_clamps_to_zero(self, now):
        comps = assess_risk(_asset(purchase_date="2030-01-01"), [], [], now=now)
        assert comps.raw_total < 0
        assert comps.score == 0

    @pytest.mark.parametrize("hours", [0, 499, 500, 5000, 49_999])
    def test_score_is_monotonic_in_hours(self, hours, now):
        lower = compute_risk_score(_asset(operating_hours=hours), [], [], now=now)
        higher = compute_risk_score(_asset(operating_hours=hours + 500), [], [], now=now)
        assert higher >= lower


# ── Bands ─────────────────────────────────────────────────────────────────────

class TestRiskBand:
    @pytest.mark.parametrize(
        "score, band",
        [(0, "low"), (40, "low"), (41, "medium"), (70, "medium"), (71, "high"), (100, "high")],
    )
    def test_default_thresholds(self, score, band):
        assert risk_band(score) == band

    def test_custom_thresholds(self):
        assert risk_band(55, high=50, medium=20) == "high"
        assert risk_band(25, high=50, medium=20) == "medium"


def test_reference_time_defaults_to_now():
    """Without ``now`` the current clock is used; a fresh asset still scores 0."""
    year = datetime.now(tz=timezone.utc).year
    assert compute_risk_score(_asset(purchase_date=f"{year}-01-01"), [], []) == 0
