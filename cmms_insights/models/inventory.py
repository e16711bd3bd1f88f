"""
Spare-part inventory and asset movement models.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cmms_insights.models.asset import coerce_timestamp_text


class InventoryPart(BaseModel):
    """A stocked spare part.

    Attributes:
        part_id: Part PK.
        part_name: Display name used in reports.
        current_stock: Units on hand (may go negative if over-issued).
        min_reorder_level: Stock at or below this level raises a STOCK alert.
        cost: Unit cost.
    """

    model_config = ConfigDict(frozen=True)

    part_id: int
    part_name: str
    current_stock: int = 0
    min_reorder_level: int = 0
    cost: float = 0.0

    @property
    def is_low_stock(self) -> bool:
        return self.current_stock <= self.min_reorder_level


class MovementLog(BaseModel):
    """One physical relocation of an asset.

    Attributes:
        log_id: Movement log PK.
        asset_id: Asset reference (primary or tag identifier).
        from_location_id: Location the asset left.
        to_location_id: Location the asset arrived at.
        timestamp: Raw timestamp of the move.
        user_id: User who moved the asset, if known.
    """

    model_config = ConfigDict(frozen=True)

    log_id: int
    asset_id: str
    from_location_id: Optional[int] = None
    to_location_id: Optional[int] = None
    timestamp: Optional[str] = None
    user_id: Optional[int] = None

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, v: Any) -> Any:
        return coerce_timestamp_text(v)
