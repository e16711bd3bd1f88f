"""
Work-order and incident models.

An ``Incident`` is the trouble ticket a nurse raises; converting it creates a
``WorkOrder`` that a technician executes. ``WorkOrder.asset_id`` may carry
either the asset's primary identifier or one of its tag identifiers.

``start_time`` / ``close_time`` / ``created_at`` are raw strings. A missing or
unparseable timestamp means "unknown", never "zero". Duration analyses skip
such orders instead of counting them as instant repairs.
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cmms_insights.models.asset import coerce_timestamp_text
from cmms_insights.taxonomy.maintenance_taxonomy import (
    IncidentStatus,
    Priority,
    WorkOrderStatus,
    WorkOrderType,
)


class PartUsage(BaseModel):
    """Quantity of one inventory part consumed by a work order."""

    model_config = ConfigDict(frozen=True)

    part_id: int
    quantity: int

    @field_validator("quantity")
    @classmethod
    def validate_quantity(cls, v: int) -> int:
        if v < 0:
            raise ValueError(f"quantity must be >= 0, got {v}.")
        return v


class ApprovalRecord(BaseModel):
    """One sign-off in the three-step approval chain."""

    model_config = ConfigDict(frozen=True)

    user_id: int
    signature: str
    timestamp: str


class RepairRecord(BaseModel):
    """The technician's write-up stored on the order when the repair is finished."""

    model_config = ConfigDict(frozen=True)

    failure_cause: str
    repair_actions: str
    technician_signature: str
    timestamp: str


class WorkOrderApprovals(BaseModel):
    """Manager, supervisor and nurse sign-offs collected so far."""

    model_config = ConfigDict(frozen=True)

    manager: Optional[ApprovalRecord] = None
    supervisor: Optional[ApprovalRecord] = None
    nurse: Optional[ApprovalRecord] = None


class WorkOrder(BaseModel):
    """A maintenance task against one asset.

    Attributes:
        wo_id: Work-order PK.
        incident_id: FK to the originating ``Incident``, if any.
        asset_id: Asset reference (primary or tag identifier).
        type: Corrective / Preventive / Calibration.
        priority: Dispatch urgency.
        assigned_to_id: FK to the assigned technician's ``User.user_id``.
        description: Fault or task description.
        status: Workflow state.
        start_time: Raw timestamp the technician started work.
        close_time: Raw timestamp work finished (meaningful once Closed).
        created_at: Raw creation timestamp.
        parts_used: Parts consumed by the repair.
        nurse_rating: 1-5 satisfaction rating from the reporting nurse.
        is_first_time_fix: ``True`` if resolved without reopening.
        approvals: Sign-offs collected during the approval workflow.
        repair: Completion write-up; ``None`` until the report is submitted.
    """

    model_config = ConfigDict(frozen=True)

    wo_id: int
    incident_id: Optional[int] = None
    asset_id: str
    type: WorkOrderType
    priority: Priority = Priority.MEDIUM
    assigned_to_id: Optional[int] = None
    description: str = ""
    status: WorkOrderStatus = WorkOrderStatus.OPEN
    start_time: Optional[str] = None
    close_time: Optional[str] = None
    created_at: Optional[str] = None
    parts_used: list[PartUsage] = []
    nurse_rating: Optional[int] = None
    is_first_time_fix: Optional[bool] = None
    approvals: WorkOrderApprovals = WorkOrderApprovals()
    repair: Optional[RepairRecord] = None

    @field_validator("start_time", "close_time", "created_at", mode="before")
    @classmethod
    def normalize_timestamps(cls, v: Any) -> Any:
        return coerce_timestamp_text(v)

    @field_validator("parts_used", mode="before")
    @classmethod
    def default_parts(cls, v: Any) -> Any:
        return [] if v is None else v

    @field_validator("approvals", mode="before")
    @classmethod
    def default_approvals(cls, v: Any) -> Any:
        return WorkOrderApprovals() if v is None else v

    @field_validator("nurse_rating")
    @classmethod
    def validate_rating(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and not 1 <= v <= 5:
            raise ValueError(f"nurse_rating must be 1-5, got {v}.")
        return v

    @property
    def is_closed(self) -> bool:
        return self.status == WorkOrderStatus.CLOSED


class Incident(BaseModel):
    """A fault report raised by clinical staff.

    Attributes:
        incident_id: Incident PK.
        timestamp: Raw timestamp the fault was reported.
        asset_id: Asset reference (primary or tag identifier).
        reported_by_user_id: FK to the reporting ``User``.
        report_type: ``"Corrective"`` or ``"Preventive"``.
        description: Free-text fault description.
        status: Pending until converted into a work order.
    """

    model_config = ConfigDict(frozen=True)

    incident_id: int
    timestamp: str
    asset_id: str
    reported_by_user_id: Optional[int] = None
    report_type: WorkOrderType = WorkOrderType.CORRECTIVE
    description: str = ""
    status: IncidentStatus = IncidentStatus.PENDING

    @field_validator("timestamp", mode="before")
    @classmethod
    def normalize_timestamp(cls, v: Any) -> Any:
        return coerce_timestamp_text(v)

    @field_validator("report_type")
    @classmethod
    def validate_report_type(cls, v: WorkOrderType) -> WorkOrderType:
        if v == WorkOrderType.CALIBRATION:
            raise ValueError("Incidents are either Corrective or Preventive.")
        return v


class CompletionReport(BaseModel):
    """What a technician submits when finishing a corrective repair."""

    model_config = ConfigDict(frozen=True)

    failure_cause: str
    repair_actions: str
    technician_signature: str
    parts_used: list[PartUsage] = []
