"""
Tests for cmms_insights.analytics.alerts.

What we test
------------
1. Overdue calibrations raise high-severity COMPLIANCE alerts with the
   location name; scrapped assets and unreadable dates raise nothing.
2. Recent moves between departments raise high-severity BOUNDARY_CROSSING
   alerts; same-department, unknown-department and out-of-window moves do not.
3. Low stock raises medium-severity STOCK alerts.
4. generate_alerts orders compliance, boundary crossings, then stock, and
   stamps ``now``.
"""

from __future__ import annotations

from datetime import datetime

import pytest

from cmms_insights.analytics.alerts import (
    boundary_alerts,
    calibration_alerts,
    generate_alerts,
    stock_alerts,
)
from cmms_insights.models.asset import Asset
from cmms_insights.models.inventory import MovementLog
from cmms_insights.taxonomy.maintenance_taxonomy import (
    AlertSeverity,
    AlertType,
    AssetStatus,
)


def _asset(next_cal, status=AssetStatus.RUNNING, location_id=102) -> Asset:
    return Asset(asset_id="NFC-1", name="Monitor", model="M1", status=status,
                 location_id=location_id, next_calibration_date=next_cal)


def _move(asset_ref, from_id, to_id, timestamp) -> MovementLog:
    return MovementLog(log_id=1, asset_id=asset_ref, from_location_id=from_id,
                       to_location_id=to_id, timestamp=timestamp)


class TestCalibrationAlerts:
    def test_overdue_raises_compliance(self, sample_locations, now):
        [alert] = calibration_alerts([_asset("2026-06-01")], sample_locations, now=now)
        assert alert.alert_type == AlertType.COMPLIANCE
        assert alert.severity == AlertSeverity.HIGH
        assert alert.message == "Calibration overdue for Monitor (NFC-1) in ICU-4"
        assert alert.asset_id == "NFC-1"
        assert alert.status == "active"

    def test_future_due_date_ignored(self, sample_locations, now):
        assert calibration_alerts([_asset("2026-07-01")], sample_locations, now=now) == []

    def test_scrapped_asset_ignored(self, sample_locations, now):
        asset = _asset("2020-01-01", status=AssetStatus.SCRAPPED)
        assert calibration_alerts([asset], sample_locations, now=now) == []

    def test_missing_or_bad_date_ignored(self, sample_locations, now):
        assets = [_asset(None), _asset("soon")]
        assert calibration_alerts(assets, sample_locations, now=now) == []

    def test_unknown_location_named_unknown(self, sample_locations, now):
        [alert] = calibration_alerts([_asset("2026-01-01", location_id=999)],
                                     sample_locations, now=now)
        assert alert.message.endswith("in Unknown")


class TestBoundaryAlerts:
    def test_cross_department_move_flagged(self, sample_assets, sample_locations, now):
        logs = [_move("NFC-2001", 101, 102, "2026-06-15T08:00:00Z")]
        [alert] = boundary_alerts(logs, sample_assets, sample_locations, now=now)
        assert alert.alert_type == AlertType.BOUNDARY_CROSSING
        assert alert.severity == AlertSeverity.HIGH
        assert alert.asset_id == "NFC-2001"
        assert alert.message == "Ventilator (NFC-2001) crossed from Radiology to Intensive Care"

    def test_tag_reference_resolved(self, sample_assets, sample_locations, now):
        logs = [_move("E2000017000007D1", 102, 119, "2026-06-15T11:00:00Z")]
        [alert] = boundary_alerts(logs, sample_assets, sample_locations, now=now)
        assert alert.asset_id == "NFC-2001"

    def test_same_department_move_ignored(self, sample_assets, sample_locations, now):
        logs = [_move("NFC-2001", 104, 102, "2026-06-15T11:00:00Z")]
        assert boundary_alerts(logs, sample_assets, sample_locations, now=now) == []

    def test_unknown_department_ignored(self, sample_assets, sample_locations, now):
        logs = [_move("NFC-2001", 999, 102, "2026-06-15T11:00:00Z"),
                _move("NFC-2001", None, 102, "2026-06-15T11:00:00Z")]
        assert boundary_alerts(logs, sample_assets, sample_locations, now=now) == []

    @pytest.mark.parametrize(
        "timestamp", ["2026-06-14T12:00:00Z", "2026-06-15T12:00:01Z", None, "yesterday"]
    )
    def test_outside_window_or_undated_ignored(self, sample_assets, sample_locations, now,
                                               timestamp):
        logs = [_move("NFC-2001", 101, 102, timestamp)]
        assert boundary_alerts(logs, sample_assets, sample_locations, now=now) == []

    def test_custom_window(self, sample_assets, sample_locations, now):
        logs = [_move("NFC-2001", 101, 102, "2026-06-13T12:00:00Z")]
        assert boundary_alerts(logs, sample_assets, sample_locations, now=now,
                               window_hours=72)

    def test_unknown_asset_keeps_reference(self, sample_locations, now):
        logs = [_move("NFC-4040", 101, 102, "2026-06-15T11:00:00Z")]
        [alert] = boundary_alerts(logs, [], sample_locations, now=now)
        assert alert.asset_id == "NFC-4040"
        assert alert.message.startswith("Asset (NFC-4040) crossed")


class TestStockAlerts:
    def test_low_stock_part(self, sample_inventory, now):
        [alert] = stock_alerts(sample_inventory, now=now)
        assert alert.alert_type == AlertType.STOCK
        assert alert.severity == AlertSeverity.MEDIUM
        assert alert.part_id == 4
        assert alert.message == "Critical low stock: Ventilator Filter (0 remaining)"

    def test_stocked_parts_raise_nothing(self, sample_inventory, now):
        assert stock_alerts(sample_inventory[1:], now=now) == []


class TestGenerateAlerts:
    def test_sample_hospital(self, sample_assets, sample_inventory, sample_locations, now):
        alerts = generate_alerts(sample_assets, sample_inventory, sample_locations, now=now)
        assert [a.message for a in alerts] == [
            "Calibration overdue for Ventilator (NFC-2001) in ICU-4",
            "Critical low stock: Ventilator Filter (0 remaining)",
        ]

    def test_timestamp_is_now_in_utc(self, sample_assets, sample_inventory, sample_locations, now):
        alerts = generate_alerts(sample_assets, sample_inventory, sample_locations, now=now)
        assert {a.timestamp for a in alerts} == {"2026-06-15T12:00:00Z"}

    def test_naive_now_accepted(self, sample_assets, sample_inventory, sample_locations):
        alerts = generate_alerts(sample_assets, sample_inventory, sample_locations,
                                 now=datetime(2026, 6, 15, 12, 0, 0))
        assert len(alerts) == 2

    def test_nothing_to_report(self, sample_locations, now):
        assert generate_alerts([], [], sample_locations, now=now) == []

    def test_boundary_between_compliance_and_stock(self, sample_assets, sample_inventory,
                                                   sample_locations, now):
        logs = [_move("NFC-2002", 102, 119, "2026-06-15T09:30:00Z")]
        alerts = generate_alerts(sample_assets, sample_inventory, sample_locations, now=now,
                                 movement_logs=logs)
        assert [a.alert_type for a in alerts] == [
            AlertType.COMPLIANCE, AlertType.BOUNDARY_CROSSING, AlertType.STOCK,
        ]

    def test_boundary_window_passed_through(self, sample_assets, sample_inventory,
                                            sample_locations, now):
        logs = [_move("NFC-2002", 102, 119, "2026-06-15T09:30:00Z")]
        alerts = generate_alerts(sample_assets, sample_inventory, sample_locations, now=now,
                                 movement_logs=logs, boundary_window_hours=1)
        assert AlertType.BOUNDARY_CROSSING not in [a.alert_type for a in alerts]
