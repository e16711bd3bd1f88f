"""
Tests for the work-order workflow on ``MaintenanceStore``, run against every store.

What we test
------------
1. Creation: linked incident, created_at stamping, High/Critical priority
   takes the asset Down, duplicate and unknown-asset errors.
2. The happy path Open → … → Closed with approvals recorded.
3. Completion reports store the repair write-up and draw parts from stock;
   an unknown part rejects the whole report.
4. Illegal transitions raise InvalidTransitionError; unknown IDs raise
   RecordNotFoundError.
5. Stock updates and restocking.
"""

from __future__ import annotations

import pytest

from cmms_insights.models.work_order import (
    CompletionReport,
    PartUsage,
    RepairRecord,
    WorkOrder,
)
from cmms_insights.store.base import InvalidTransitionError, RecordNotFoundError
from cmms_insights.taxonomy.maintenance_taxonomy import (
    AssetStatus,
    IncidentStatus,
    Priority,
    WorkOrderStatus,
    WorkOrderType,
)


def _new_order(wo_id=8001, asset_id="NFC-2002", priority=Priority.MEDIUM,
               type_=WorkOrderType.CORRECTIVE) -> WorkOrder:
    return WorkOrder(wo_id=wo_id, asset_id=asset_id, type=type_, priority=priority,
                     description="Flow alarm")


@pytest.fixture
def started(any_store, now):
    """A fresh order on NFC-2002, assigned to tech 4 and in progress."""
    any_store.create_work_order(_new_order(), reported_by_user_id=3, now=now)
    any_store.assign_work_order(8001, 4)
    any_store.start_work_order(8001, now=now)
    return any_store


# ── Creation ──────────────────────────────────────────────────────────────────

class TestCreate:
    def test_creates_linked_incident(self, any_store, now):
        wo = any_store.create_work_order(_new_order(), reported_by_user_id=3, now=now)
        [incident] = any_store.list_incidents()
        assert wo.incident_id == incident.incident_id == 1
        assert incident.status == IncidentStatus.CONVERTED
        assert incident.reported_by_user_id == 3
        assert incident.description == "Flow alarm"
        assert wo.created_at == "2026-06-15T12:00:00Z"
        assert any_store.get_work_order(8001).status == WorkOrderStatus.OPEN

    def test_existing_created_at_kept(self, any_store, now):
        order = _new_order().model_copy(update={"created_at": "2026-06-01T00:00:00Z"})
        assert any_store.create_work_order(order, now=now).created_at == "2026-06-01T00:00:00Z"

    def test_preventive_incident_type(self, any_store, now):
        any_store.create_work_order(_new_order(type_=WorkOrderType.PREVENTIVE), now=now)
        assert any_store.list_incidents()[0].report_type == WorkOrderType.PREVENTIVE

    @pytest.mark.parametrize("priority", [Priority.HIGH, Priority.CRITICAL])
    def test_urgent_priority_takes_asset_down(self, any_store, now, priority):
        any_store.create_work_order(_new_order(priority=priority), now=now)
        assert any_store.get_asset("NFC-2002").status == AssetStatus.DOWN

    def test_medium_priority_leaves_asset_running(self, any_store, now):
        any_store.create_work_order(_new_order(), now=now)
        assert any_store.get_asset("NFC-2002").status == AssetStatus.RUNNING

    def test_tag_reference_accepted(self, any_store, now):
        wo = any_store.create_work_order(
            _new_order(asset_id="E2000017000007D1", priority=Priority.HIGH), now=now
        )
        assert wo.asset_id == "E2000017000007D1"
        assert any_store.get_asset("NFC-2001").status == AssetStatus.DOWN

    def test_unknown_asset(self, any_store, now):
        with pytest.raises(RecordNotFoundError):
            any_store.create_work_order(_new_order(asset_id="NFC-0000"), now=now)
        assert any_store.list_incidents() == []

    def test_duplicate_id(self, any_store, now):
        with pytest.raises(ValueError, match="already exists"):
            any_store.create_work_order(_new_order(wo_id=7001), now=now)


# ── Happy path ────────────────────────────────────────────────────────────────

class TestHappyPath:
    def test_full_lifecycle(self, started, now):
        store = started
        report = CompletionReport(
            failure_cause="Worn sensor", repair_actions="Replaced flow sensor",
            technician_signature="MR", parts_used=[PartUsage(part_id=5, quantity=2)],
        )
        wo = store.submit_completion_report(8001, report, now=now)
        assert wo.status == WorkOrderStatus.AWAITING_APPROVAL
        assert wo.close_time == "2026-06-15T12:00:00Z"
        assert wo.parts_used == [PartUsage(part_id=5, quantity=2)]

        wo = store.submit_manager_approval(8001, 1, "mgr-sig", now=now)
        assert wo.status == WorkOrderStatus.MANAGER_APPROVED
        wo = store.submit_supervisor_approval(8001, 1, "sup-sig", now=now)
        assert wo.status == WorkOrderStatus.AWAITING_FINAL_ACCEPTANCE
        wo = store.submit_nurse_verification(8001, 3, "nurse-sig", rating=5, now=now)

        stored = store.get_work_order(8001)
        assert stored.status == WorkOrderStatus.CLOSED
        assert stored.nurse_rating == 5
        assert stored.approvals.manager.signature == "mgr-sig"
        assert stored.approvals.supervisor.user_id == 1
        assert stored.approvals.nurse.user_id == 3

    def test_repair_write_up_stored(self, started, now):
        report = CompletionReport(
            failure_cause="worn seal", repair_actions="Replaced pump seal",
            technician_signature="tech-4-sig",
        )
        started.submit_completion_report(8001, report, now=now)

        repair = started.get_work_order(8001).repair
        assert repair == RepairRecord(
            failure_cause="worn seal", repair_actions="Replaced pump seal",
            technician_signature="tech-4-sig", timestamp="2026-06-15T12:00:00Z",
        )

    def test_new_order_has_no_repair(self, any_store, now):
        assert any_store.create_work_order(_new_order(), now=now).repair is None

    def test_assign_records_technician(self, any_store, now):
        any_store.create_work_order(_new_order(), now=now)
        wo = any_store.assign_work_order(8001, 2)
        assert wo.status == WorkOrderStatus.ASSIGNED
        assert wo.assigned_to_id == 2

    def test_reassign_allowed(self, any_store, now):
        any_store.create_work_order(_new_order(), now=now)
        any_store.assign_work_order(8001, 2)
        assert any_store.assign_work_order(8001, 4).assigned_to_id == 4

    def test_start_stamps_time(self, started):
        assert started.get_work_order(8001).start_time == "2026-06-15T12:00:00Z"

    def test_completion_draws_stock(self, started, now):
        report = CompletionReport(
            failure_cause="x", repair_actions="y", technician_signature="z",
            parts_used=[PartUsage(part_id=5, quantity=2), PartUsage(part_id=6, quantity=1)],
        )
        started.submit_completion_report(8001, report, now=now)
        assert started.get_part(5).current_stock == 10
        assert started.get_part(6).current_stock == 5

    def test_close_from_any_open_status(self, any_store, now):
        wo = any_store.close_work_order(7004, now=now)
        assert wo.status == WorkOrderStatus.CLOSED
        assert wo.close_time == "2026-06-15T12:00:00Z"


# ── Illegal steps ─────────────────────────────────────────────────────────────

class TestInvalidTransitions:
    def test_complete_before_start(self, any_store, now):
        report = CompletionReport(failure_cause="x", repair_actions="y", technician_signature="z")
        with pytest.raises(InvalidTransitionError):
            any_store.submit_completion_report(7004, report, now=now)

    def test_manager_approval_out_of_order(self, started, now):
        with pytest.raises(InvalidTransitionError):
            started.submit_manager_approval(8001, 1, "sig", now=now)

    def test_nurse_before_supervisor(self, started, now):
        with pytest.raises(InvalidTransitionError):
            started.submit_nurse_verification(8001, 3, "sig", now=now)

    def test_close_closed_order(self, any_store, now):
        with pytest.raises(InvalidTransitionError):
            any_store.close_work_order(7001, now=now)

    def test_assign_in_progress_order(self, any_store):
        with pytest.raises(InvalidTransitionError):
            any_store.assign_work_order(7005, 4)

    def test_failed_step_leaves_order_unchanged(self, any_store, now):
        with pytest.raises(InvalidTransitionError):
            any_store.start_work_order(7001, now=now)
        assert any_store.get_work_order(7001).status == WorkOrderStatus.CLOSED

    def test_invalid_rating(self, started, now):
        with pytest.raises(ValueError, match="rating"):
            started.submit_nurse_verification(8001, 3, "sig", rating=6, now=now)

    def test_unknown_work_order(self, any_store):
        with pytest.raises(RecordNotFoundError):
            any_store.start_work_order(404)

    def test_unknown_user(self, any_store):
        with pytest.raises(RecordNotFoundError):
            any_store.assign_work_order(7004, 999)

    def test_unknown_part_in_report_changes_nothing(self, started, now):
        report = CompletionReport(
            failure_cause="x", repair_actions="y", technician_signature="z",
            parts_used=[PartUsage(part_id=4, quantity=1), PartUsage(part_id=99999, quantity=1)],
        )
        with pytest.raises(RecordNotFoundError, match="99999"):
            started.submit_completion_report(8001, report, now=now)

        wo = started.get_work_order(8001)
        assert wo.status == WorkOrderStatus.IN_PROGRESS
        assert wo.parts_used == []
        assert wo.repair is None
        assert started.get_part(4).current_stock == 0


# ── Inventory ─────────────────────────────────────────────────────────────────

class TestStock:
    def test_update_stock_can_go_negative(self, any_store):
        assert any_store.update_stock(4, 2).current_stock == -2

    def test_restock(self, any_store):
        assert any_store.restock_part(4, 25).current_stock == 25
        assert not any_store.get_part(4).is_low_stock

    def test_restock_requires_positive_quantity(self, any_store):
        with pytest.raises(ValueError):
            any_store.restock_part(4, 0)

    def test_unknown_part(self, any_store):
        with pytest.raises(RecordNotFoundError):
            any_store.update_stock(404, 1)
