"""
Maintenance taxonomy for hospital medical equipment.

The enum values are the exact strings stored in the database and exchanged
with the remote store, so they must not be changed once data exists:

  - ``AssetStatus``     — operational state of a device.
  - ``WorkOrderType``   — why the work order exists.
  - ``WorkOrderStatus`` — where the order sits in the approval workflow.
  - ``Priority``        — dispatch urgency.
  - ``UserRole``        — who the user is in the hospital.

Usage example::

    from cmms_insights.taxonomy.maintenance_taxonomy import AssetStatus

    if asset.status == AssetStatus.DOWN:
        ...

This module has NO imports from any other ``cmms_insights`` package.
"""

from enum import StrEnum


class AssetStatus(StrEnum):
    """Operational state of a medical device."""

    RUNNING = "Running"
    DOWN = "Down"
    UNDER_MAINT = "Under Maint."
    SCRAPPED = "Scrapped"


class WorkOrderType(StrEnum):
    """Kind of maintenance task."""

    CORRECTIVE = "Corrective"
    """Unscheduled repair triggered by a reported fault."""

    PREVENTIVE = "Preventive"
    """Scheduled, calendar-driven maintenance."""

    CALIBRATION = "Calibration"
    """Metrology check against the device's calibration schedule."""


class WorkOrderStatus(StrEnum):
    """Workflow state of a work order.

    Happy path::

        Open → Assigned → In Progress → Awaiting Approval → Manager Approved
             → Awaiting Final Acceptance → Closed
    """

    OPEN = "Open"
    ASSIGNED = "Assigned"
    IN_PROGRESS = "In Progress"
    AWAITING_APPROVAL = "Awaiting Approval"
    MANAGER_APPROVED = "Manager Approved"
    AWAITING_FINAL_ACCEPTANCE = "Awaiting Final Acceptance"
    CLOSED = "Closed"


class Priority(StrEnum):
    """Dispatch urgency of a work order."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


class UserRole(StrEnum):
    """Role of a system user."""

    ADMIN = "Admin"
    SUPERVISOR = "Supervisor"
    ENGINEER = "Engineer"
    TECHNICIAN = "Technician"
    NURSE = "Nurse"
    VENDOR = "Vendor"


class IncidentStatus(StrEnum):
    """State of a nurse-reported trouble ticket."""

    PENDING = "Pending"
    CONVERTED = "Converted"
    CLOSED = "Closed"


class AlertType(StrEnum):
    """Category of a system alert."""

    BOUNDARY_CROSSING = "BOUNDARY_CROSSING"
    COMPLIANCE = "COMPLIANCE"
    STOCK = "STOCK"


class AlertSeverity(StrEnum):
    """Urgency of a system alert."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ExpertiseScope(StrEnum):
    """Which closed jobs count as a technician's expertise when ranking."""

    ALL = "all"
    """Every closed job assigned to the technician counts."""

    SAME_MODEL = "same_model"
    """Only closed jobs on assets of the same model as the target asset count."""


# Roles eligible for work-order assignment.
TECHNICIAN_ROLES = frozenset({UserRole.TECHNICIAN, UserRole.ENGINEER})

# Priorities that take the asset out of service when the order is created.
OUT_OF_SERVICE_PRIORITIES = frozenset({Priority.HIGH, Priority.CRITICAL})
