"""
``MaintenanceStore``: the data-access interface every consumer receives.

A concrete store implements only the per-collection primitives
(``list_*`` / ``save_*`` with upsert semantics). Every lookup and every
workflow step is written once here, on top of those primitives, so the
in-memory, SQLite and remote-backed stores behave identically.

Work-order workflow (happy path)::

    create   → Open
    assign   → Assigned                    (from Open, Assigned)
    start    → In Progress, start_time     (from Open, Assigned)
    complete → Awaiting Approval, close_time, repair write-up, parts consumed
                                           (from In Progress)
    manager  → Manager Approved            (from Awaiting Approval)
    supervisor → Awaiting Final Acceptance (from Manager Approved)
    nurse    → Closed                      (from Awaiting Final Acceptance)

``close_work_order`` closes any order that is not Closed yet. A step applied
from any other status raises ``InvalidTransitionError``; unknown IDs raise
``RecordNotFoundError``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.user import User
from cmms_insights.models.work_order import (
    ApprovalRecord,
    CompletionReport,
    Incident,
    RepairRecord,
    WorkOrder,
)
from cmms_insights.taxonomy.maintenance_taxonomy import (
    OUT_OF_SERVICE_PRIORITIES,
    AssetStatus,
    IncidentStatus,
    WorkOrderStatus,
    WorkOrderType,
)
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import ensure_utc, iso_utc, utcnow

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown"

_S = WorkOrderStatus
_ALLOWED_FROM: dict[str, frozenset[WorkOrderStatus]] = {
    "assign":     frozenset({_S.OPEN, _S.ASSIGNED}),
    "start":      frozenset({_S.OPEN, _S.ASSIGNED}),
    "complete":   frozenset({_S.IN_PROGRESS}),
    "manager":    frozenset({_S.AWAITING_APPROVAL}),
    "supervisor": frozenset({_S.MANAGER_APPROVED}),
    "nurse":      frozenset({_S.AWAITING_FINAL_ACCEPTANCE}),
    "close":      frozenset(s for s in _S if s != _S.CLOSED),
}


class RecordNotFoundError(LookupError):
    """An operation referenced an asset, work order, part or user that does not exist."""


class InvalidTransitionError(ValueError):
    """A workflow step was applied to a work order in the wrong status."""


@dataclass
class StoreSnapshot:
    """Point-in-time copy of every collection, passed to the predictive core."""

    locations:     list[Location] = field(default_factory=list)
    users:         list[User] = field(default_factory=list)
    assets:        list[Asset] = field(default_factory=list)
    inventory:     list[InventoryPart] = field(default_factory=list)
    work_orders:   list[WorkOrder] = field(default_factory=list)
    movement_logs: list[MovementLog] = field(default_factory=list)
    incidents:     list[Incident] = field(default_factory=list)

    @property
    def technicians(self) -> list[User]:
        return [u for u in self.users if u.is_technician]


class MaintenanceStore(ABC):
    """Abstract store. Subclasses implement the ``list_*`` / ``save_*`` primitives."""

    # ── Primitives ────────────────────────────────────────────────────────────

    @abstractmethod
    def list_assets(self) -> list[Asset]: ...

    @abstractmethod
    def save_asset(self, asset: Asset) -> None: ...

    @abstractmethod
    def list_work_orders(self) -> list[WorkOrder]: ...

    @abstractmethod
    def save_work_order(self, wo: WorkOrder) -> None: ...

    @abstractmethod
    def list_inventory(self) -> list[InventoryPart]: ...

    @abstractmethod
    def save_part(self, part: InventoryPart) -> None: ...

    @abstractmethod
    def list_users(self) -> list[User]: ...

    @abstractmethod
    def save_user(self, user: User) -> None: ...

    @abstractmethod
    def list_locations(self) -> list[Location]: ...

    @abstractmethod
    def save_location(self, location: Location) -> None: ...

    @abstractmethod
    def list_movement_logs(self) -> list[MovementLog]: ...

    @abstractmethod
    def save_movement_log(self, log: MovementLog) -> None: ...

    @abstractmethod
    def list_incidents(self) -> list[Incident]: ...

    @abstractmethod
    def save_incident(self, incident: Incident) -> None: ...

    # ── Reads ─────────────────────────────────────────────────────────────────

    def asset_index(self) -> AssetIndex:
        return AssetIndex(self.list_assets())

    def get_asset(self, ref: str) -> Optional[Asset]:
        """Look up an asset by primary ID or by NFC/RFID tag."""
        return self.asset_index().get(ref)

    def get_work_order(self, wo_id: int) -> Optional[WorkOrder]:
        return next((wo for wo in self.list_work_orders() if wo.wo_id == wo_id), None)

    def get_part(self, part_id: int) -> Optional[InventoryPart]:
        return next((p for p in self.list_inventory() if p.part_id == part_id), None)

    def get_user(self, user_id: int) -> Optional[User]:
        return next((u for u in self.list_users() if u.user_id == user_id), None)

    def get_location_name(self, location_id: Optional[int]) -> str:
        """Display name of a location, ``"Unknown"`` when it does not exist."""
        for loc in self.list_locations():
            if loc.location_id == location_id:
                return loc.name
        return UNKNOWN_LOCATION

    def department_of(self, location_id: Optional[int]) -> Optional[str]:
        if location_id is None:
            return None
        for loc in self.list_locations():
            if loc.location_id == location_id:
                return loc.department
        return None

    def technicians(self) -> list[User]:
        """Users who can be assigned work (Technician or Engineer)."""
        return [u for u in self.list_users() if u.is_technician]

    def technician_work_orders(self, user_id: int) -> list[WorkOrder]:
        return [wo for wo in self.list_work_orders() if wo.assigned_to_id == user_id]

    def snapshot(self) -> StoreSnapshot:
        return StoreSnapshot(
            locations=self.list_locations(),
            users=self.list_users(),
            assets=self.list_assets(),
            inventory=self.list_inventory(),
            work_orders=self.list_work_orders(),
            movement_logs=self.list_movement_logs(),
            incidents=self.list_incidents(),
        )

    # ── Asset writes ──────────────────────────────────────────────────────────

    def add_asset(self, asset: Asset) -> None:
        self.save_asset(asset)

    def add_user(self, user: User) -> None:
        self.save_user(user)

    def update_asset_status(self, ref: str, status: AssetStatus) -> Asset:
        asset = self._require_asset(ref)
        updated = asset.model_copy()
        updated.status = status
        self.save_asset(updated)
        return updated

    def update_asset_risk_score(self, ref: str, score: int) -> Asset:
        """Persist a freshly computed risk score (validated to 0-100)."""
        asset = self._require_asset(ref)
        updated = asset.model_copy()
        updated.risk_score = score
        self.save_asset(updated)
        return updated

    def update_asset_calibration(
        self,
        ref:             str,
        last_calibrated: str,
        next_due:        str,
    ) -> Asset:
        asset = self._require_asset(ref)
        updated = asset.model_copy()
        updated.last_calibration_date = last_calibrated
        updated.next_calibration_date = next_due
        self.save_asset(updated)
        return updated

    def record_movement(
        self,
        ref:            str,
        to_location_id: int,
        user_id:        Optional[int] = None,
        now:            Optional[datetime] = None,
    ) -> MovementLog:
        """Move an asset to ``to_location_id`` and append a movement log."""
        asset = self._require_asset(ref)
        log = MovementLog(
            log_id=max((m.log_id for m in self.list_movement_logs()), default=0) + 1,
            asset_id=asset.asset_id,
            from_location_id=asset.location_id,
            to_location_id=to_location_id,
            timestamp=_stamp(now),
            user_id=user_id,
        )
        updated = asset.model_copy()
        updated.location_id = to_location_id
        self.save_asset(updated)
        self.save_movement_log(log)
        logger.info(
            "Asset %s moved %s -> %s",
            asset.asset_id, log.from_location_id, to_location_id,
        )
        return log

    # ── Work-order workflow ───────────────────────────────────────────────────

    def create_work_order(
        self,
        wo:                  WorkOrder,
        reported_by_user_id: Optional[int] = None,
        now:                 Optional[datetime] = None,
    ) -> WorkOrder:
        """Open a work order together with the incident it was converted from.

        A High or Critical priority takes the asset out of service (Down).

        Raises:
            RecordNotFoundError: If ``wo.asset_id`` matches no asset.
            ValueError: If ``wo.wo_id`` already exists.
        """
        asset = self._require_asset(wo.asset_id)
        if self.get_work_order(wo.wo_id) is not None:
            raise ValueError(f"Work order {wo.wo_id} already exists.")

        stamp = _stamp(now)
        incident = Incident(
            incident_id=max((i.incident_id for i in self.list_incidents()), default=0) + 1,
            timestamp=stamp,
            asset_id=wo.asset_id,
            reported_by_user_id=reported_by_user_id,
            report_type=(
                WorkOrderType.PREVENTIVE
                if wo.type == WorkOrderType.PREVENTIVE
                else WorkOrderType.CORRECTIVE
            ),
            description=wo.description,
            status=IncidentStatus.CONVERTED,
        )
        self.save_incident(incident)

        linked = wo.model_copy(
            update={
                "incident_id": incident.incident_id,
                "created_at": wo.created_at or stamp,
            }
        )
        self.save_work_order(linked)

        if wo.priority in OUT_OF_SERVICE_PRIORITIES:
            self.update_asset_status(asset.asset_id, AssetStatus.DOWN)

        logger.info(
            "Work order %d created for %s (priority=%s)",
            linked.wo_id, asset.asset_id, linked.priority,
        )
        return linked

    def assign_work_order(self, wo_id: int, user_id: int) -> WorkOrder:
        if self.get_user(user_id) is None:
            raise RecordNotFoundError(f"User {user_id} not found.")
        return self._transition(
            wo_id, "assign",
            {"assigned_to_id": user_id, "status": WorkOrderStatus.ASSIGNED},
        )

    def start_work_order(self, wo_id: int, now: Optional[datetime] = None) -> WorkOrder:
        return self._transition(
            wo_id, "start",
            {"status": WorkOrderStatus.IN_PROGRESS, "start_time": _stamp(now)},
        )

    def submit_completion_report(
        self,
        wo_id:  int,
        report: CompletionReport,
        now:    Optional[datetime] = None,
    ) -> WorkOrder:
        """Finish the repair: record the write-up and parts, draw stock, await approval.

        Every part is checked before anything is written, so an unknown part
        leaves both the order and the stock untouched.

        Raises:
            RecordNotFoundError: If the order or any reported part does not exist.
            InvalidTransitionError: If the order is not In Progress.
        """
        for usage in report.parts_used:
            self._require_part(usage.part_id)

        stamp = _stamp(now)
        repair = RepairRecord(
            failure_cause=report.failure_cause,
            repair_actions=report.repair_actions,
            technician_signature=report.technician_signature,
            timestamp=stamp,
        )
        wo = self._transition(
            wo_id, "complete",
            {
                "status": WorkOrderStatus.AWAITING_APPROVAL,
                "close_time": stamp,
                "parts_used": list(report.parts_used),
                "repair": repair,
            },
        )
        for usage in report.parts_used:
            self.update_stock(usage.part_id, usage.quantity)
        return wo

    def submit_manager_approval(
        self,
        wo_id:     int,
        user_id:   int,
        signature: str,
        now:       Optional[datetime] = None,
    ) -> WorkOrder:
        return self._approve(wo_id, "manager", WorkOrderStatus.MANAGER_APPROVED, user_id, signature, now)

    def submit_supervisor_approval(
        self,
        wo_id:     int,
        user_id:   int,
        signature: str,
        now:       Optional[datetime] = None,
    ) -> WorkOrder:
        return self._approve(
            wo_id, "supervisor", WorkOrderStatus.AWAITING_FINAL_ACCEPTANCE, user_id, signature, now
        )

    def submit_nurse_verification(
        self,
        wo_id:     int,
        user_id:   int,
        signature: str,
        rating:    Optional[int] = None,
        now:       Optional[datetime] = None,
    ) -> WorkOrder:
        """Final acceptance by the reporting nurse; closes the order.

        Raises:
            ValueError: If ``rating`` is given and not 1-5.
        """
        extra = {}
        if rating is not None:
            if not 1 <= rating <= 5:
                raise ValueError(f"rating must be 1-5, got {rating}.")
            extra["nurse_rating"] = rating
        return self._approve(
            wo_id, "nurse", WorkOrderStatus.CLOSED, user_id, signature, now, extra=extra
        )

    def close_work_order(self, wo_id: int, now: Optional[datetime] = None) -> WorkOrder:
        return self._transition(
            wo_id, "close",
            {"status": WorkOrderStatus.CLOSED, "close_time": _stamp(now)},
        )

    # ── Inventory ─────────────────────────────────────────────────────────────

    def update_stock(self, part_id: int, quantity_used: int) -> InventoryPart:
        """Draw ``quantity_used`` units from stock (stock may go negative)."""
        part = self._require_part(part_id)
        updated = part.model_copy(update={"current_stock": part.current_stock - quantity_used})
        self.save_part(updated)
        if updated.is_low_stock:
            logger.warning(
                "Part %d (%s) at or below reorder level: %d left",
                part_id, part.part_name, updated.current_stock,
            )
        return updated

    def restock_part(self, part_id: int, quantity_added: int) -> InventoryPart:
        if quantity_added <= 0:
            raise ValueError(f"quantity_added must be > 0, got {quantity_added}.")
        part = self._require_part(part_id)
        updated = part.model_copy(update={"current_stock": part.current_stock + quantity_added})
        self.save_part(updated)
        return updated

    # ── Bulk ──────────────────────────────────────────────────────────────────

    def seed(self, snapshot: StoreSnapshot) -> int:
        """Upsert every record of ``snapshot``; returns the number of records written."""
        batches = [
            (snapshot.locations, self.save_location),
            (snapshot.users, self.save_user),
            (snapshot.assets, self.save_asset),
            (snapshot.inventory, self.save_part),
            (snapshot.incidents, self.save_incident),
            (snapshot.work_orders, self.save_work_order),
            (snapshot.movement_logs, self.save_movement_log),
        ]
        written = 0
        for records, save in batches:
            for record in records:
                save(record)
            written += len(records)
        logger.info("Seeded %d records into %s", written, type(self).__name__)
        return written

    # ── Helpers ───────────────────────────────────────────────────────────────

    def _require_asset(self, ref: str) -> Asset:
        asset = self.get_asset(ref)
        if asset is None:
            raise RecordNotFoundError(f"Asset '{ref}' not found.")
        return asset

    def _require_work_order(self, wo_id: int) -> WorkOrder:
        wo = self.get_work_order(wo_id)
        if wo is None:
            raise RecordNotFoundError(f"Work order {wo_id} not found.")
        return wo

    def _require_part(self, part_id: int) -> InventoryPart:
        part = self.get_part(part_id)
        if part is None:
            raise RecordNotFoundError(f"Part {part_id} not found.")
        return part

    def _transition(self, wo_id: int, step: str, update: dict) -> WorkOrder:
        wo = self._require_work_order(wo_id)
        if wo.status not in _ALLOWED_FROM[step]:
            raise InvalidTransitionError(
                f"Cannot {step} work order {wo_id} from status '{wo.status}'."
            )
        updated = wo.model_copy(update=update)
        self.save_work_order(updated)
        logger.info("Work order %d: %s -> %s", wo_id, wo.status, updated.status)
        return updated

    def _approve(
        self,
        wo_id:     int,
        role:      str,
        status:    WorkOrderStatus,
        user_id:   int,
        signature: str,
        now:       Optional[datetime],
        extra:     Optional[dict] = None,
    ) -> WorkOrder:
        wo = self._require_work_order(wo_id)
        record = ApprovalRecord(user_id=user_id, signature=signature, timestamp=_stamp(now))
        approvals = wo.approvals.model_copy(update={role: record})
        update = {"status": status, "approvals": approvals, **(extra or {})}
        return self._transition(wo_id, role, update)


def _stamp(now: Optional[datetime]) -> str:
    return iso_utc(ensure_utc(now) if now is not None else utcnow())
