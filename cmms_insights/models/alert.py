"""
System alert model raised by the analytics layer.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cmms_insights.taxonomy.maintenance_taxonomy import AlertSeverity, AlertType

VALID_ALERT_STATUSES = frozenset({"active", "resolved"})


class SystemAlert(BaseModel):
    """A supervisor-facing alert.

    Attributes:
        alert_type: COMPLIANCE, STOCK or BOUNDARY_CROSSING.
        message: Human-readable alert text.
        timestamp: ISO timestamp the alert was generated.
        asset_id: Primary asset identifier the alert concerns, if any.
        part_id: Inventory part the alert concerns, if any.
        severity: low / medium / high.
        status: ``"active"`` or ``"resolved"``.
    """

    model_config = ConfigDict(frozen=True)

    alert_type: AlertType
    message: str
    timestamp: str
    asset_id: Optional[str] = None
    part_id: Optional[int] = None
    severity: AlertSeverity = AlertSeverity.MEDIUM
    status: str = "active"

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in VALID_ALERT_STATUSES:
            raise ValueError(
                f"Unknown alert status '{v}'. Must be one of {sorted(VALID_ALERT_STATUSES)}."
            )
        return v
