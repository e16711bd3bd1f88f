"""
Repositories for ``work_orders`` and ``incidents``.

``parts_used``, ``approvals`` and ``repair`` are nested objects on the model
and JSON text in SQLite; ``is_first_time_fix`` is stored as 0/1/NULL.
"""

from __future__ import annotations

import json
import sqlite3
from typing import Optional

from cmms_insights.db.repositories.base import BaseRepository
from cmms_insights.models.work_order import Incident, WorkOrder

_WORK_ORDER_COLUMNS = list(WorkOrder.model_fields)
_INCIDENT_COLUMNS = list(Incident.model_fields)


class WorkOrderRepository(BaseRepository):
    """Read/write access to ``work_orders``."""

    def upsert_work_order(self, wo: WorkOrder) -> None:
        """Insert ``wo`` or overwrite the row with the same ``wo_id``."""
        row = wo.model_dump(mode="json")
        row["parts_used"] = json.dumps(row["parts_used"])
        row["approvals"] = json.dumps(row["approvals"])
        if row["repair"] is not None:
            row["repair"] = json.dumps(row["repair"])
        if row["is_first_time_fix"] is not None:
            row["is_first_time_fix"] = int(row["is_first_time_fix"])
        self.upsert(
            "work_orders", "wo_id", _WORK_ORDER_COLUMNS,
            [row[col] for col in _WORK_ORDER_COLUMNS],
        )

    def get_all(self) -> list[WorkOrder]:
        rows = self.fetchall("SELECT * FROM work_orders ORDER BY rowid;")
        return [_row_to_work_order(r) for r in rows]

    def get_by_id(self, wo_id: int) -> Optional[WorkOrder]:
        row = self.fetchone("SELECT * FROM work_orders WHERE wo_id = ?;", (wo_id,))
        return _row_to_work_order(row) if row else None

    def get_for_assignee(self, user_id: int) -> list[WorkOrder]:
        rows = self.fetchall(
            "SELECT * FROM work_orders WHERE assigned_to_id = ? ORDER BY rowid;",
            (user_id,),
        )
        return [_row_to_work_order(r) for r in rows]


class IncidentRepository(BaseRepository):
    """Read/write access to ``incidents``."""

    def upsert_incident(self, incident: Incident) -> None:
        row = incident.model_dump(mode="json")
        self.upsert(
            "incidents", "incident_id", _INCIDENT_COLUMNS,
            [row[col] for col in _INCIDENT_COLUMNS],
        )

    def get_all(self) -> list[Incident]:
        rows = self.fetchall("SELECT * FROM incidents ORDER BY rowid;")
        return [Incident.model_validate(dict(r)) for r in rows]

    def max_id(self) -> int:
        """Highest ``incident_id`` stored, or 0 for an empty table."""
        row = self.fetchone("SELECT COALESCE(MAX(incident_id), 0) AS m FROM incidents;")
        return int(row["m"]) if row else 0


# ── Private helpers ────────────────────────────────────────────────────────────

def _row_to_work_order(row: sqlite3.Row) -> WorkOrder:
    data = dict(row)
    data["parts_used"] = json.loads(data["parts_used"]) if data["parts_used"] else []
    data["approvals"] = json.loads(data["approvals"]) if data["approvals"] else None
    data["repair"] = json.loads(data["repair"]) if data["repair"] else None
    if data["is_first_time_fix"] is not None:
        data["is_first_time_fix"] = bool(data["is_first_time_fix"])
    return WorkOrder.model_validate(data)
