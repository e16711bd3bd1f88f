"""
Repositories for ``inventory`` and ``movement_logs``.
"""

from __future__ import annotations

from typing import Optional

from cmms_insights.db.repositories.base import BaseRepository
from cmms_insights.models.inventory import InventoryPart, MovementLog

_PART_COLUMNS = list(InventoryPart.model_fields)
_MOVEMENT_COLUMNS = list(MovementLog.model_fields)


class InventoryRepository(BaseRepository):
    """Read/write access to ``inventory``."""

    def upsert_part(self, part: InventoryPart) -> None:
        row = part.model_dump(mode="json")
        self.upsert(
            "inventory", "part_id", _PART_COLUMNS,
            [row[col] for col in _PART_COLUMNS],
        )

    def get_all(self) -> list[InventoryPart]:
        rows = self.fetchall("SELECT * FROM inventory ORDER BY rowid;")
        return [InventoryPart.model_validate(dict(r)) for r in rows]

    def get_by_id(self, part_id: int) -> Optional[InventoryPart]:
        row = self.fetchone("SELECT * FROM inventory WHERE part_id = ?;", (part_id,))
        return InventoryPart.model_validate(dict(row)) if row else None

    def get_low_stock(self) -> list[InventoryPart]:
        """Parts at or below their reorder level."""
        rows = self.fetchall(
            "SELECT * FROM inventory WHERE current_stock <= min_reorder_level ORDER BY rowid;"
        )
        return [InventoryPart.model_validate(dict(r)) for r in rows]


class MovementLogRepository(BaseRepository):
    """Read/write access to ``movement_logs``."""

    def upsert_log(self, log: MovementLog) -> None:
        row = log.model_dump(mode="json")
        self.upsert(
            "movement_logs", "log_id", _MOVEMENT_COLUMNS,
            [row[col] for col in _MOVEMENT_COLUMNS],
        )

    def get_all(self) -> list[MovementLog]:
        rows = self.fetchall("SELECT * FROM movement_logs ORDER BY rowid;")
        return [MovementLog.model_validate(dict(r)) for r in rows]

    def max_id(self) -> int:
        row = self.fetchone("SELECT COALESCE(MAX(log_id), 0) AS m FROM movement_logs;")
        return int(row["m"]) if row else 0
