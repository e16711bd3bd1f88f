"""
Location and asset models.

``Location`` is a room/area of the hospital; several locations share a
``department`` (e.g. ICU-1 and ICU-4 are both "Intensive Care").

``Asset`` is a tracked medical device. An asset has one primary identifier
(``asset_id``) and up to two physical tag identifiers (``nfc_tag_id``,
``rfid_tag_id``). Work orders and movement logs may reference either form;
always resolve references through ``cmms_insights.utils.identifiers``.

Date fields are stored as the raw strings received from the store. They are
parsed leniently at the point of use (``utils.time_utils.parse_timestamp``)
so one malformed value never prevents a whole collection from loading.

``Asset`` is the only entity model that is NOT frozen: ``risk_score`` is
overwritten after every risk refresh.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cmms_insights.taxonomy.maintenance_taxonomy import AssetStatus


def coerce_timestamp_text(v: Any) -> Any:
    """Store ``date``/``datetime`` inputs as ISO strings; pass anything else through."""
    if isinstance(v, (date, datetime)):
        return v.isoformat()
    return v


class Location(BaseModel):
    """A room or area inside the hospital.

    Attributes:
        location_id: Location PK.
        name: Short display name, e.g. ``"ICU-4"``.
        department: Department the location belongs to.
        city: Optional site city.
        building: Optional building name.
        room: Optional room code.
    """

    model_config = ConfigDict(frozen=True)

    location_id: int
    name: str
    department: str
    city: Optional[str] = None
    building: Optional[str] = None
    room: Optional[str] = None


class Asset(BaseModel):
    """A medical device under maintenance management.

    Attributes:
        asset_id: Primary identifier.
        nfc_tag_id: NFC tag identifier (often equal to ``asset_id``).
        rfid_tag_id: RFID EPC code, if tagged.
        name: Device type name, e.g. ``"Infusion Pump"``.
        model: Manufacturer model string, e.g. ``"Baxter Sigma"``.
        manufacturer: Optional manufacturer name.
        serial_number: Optional serial number.
        location_id: FK to ``Location.location_id``; ``None`` if unknown.
        status: Operational state.
        purchase_date: Raw purchase date string (``YYYY-MM-DD`` expected).
        warranty_expiration: Raw warranty expiry date string.
        operating_hours: Cumulative operating hours.
        risk_score: 0-100 heuristic failure risk; written by the risk refresh.
        last_calibration_date: Raw date of the last calibration.
        next_calibration_date: Raw date the next calibration is due.
        purchase_cost: Acquisition cost.
        accumulated_maintenance_cost: Parts + labour spent so far.
    """

    model_config = ConfigDict(validate_assignment=True)

    asset_id: str
    nfc_tag_id: Optional[str] = None
    rfid_tag_id: Optional[str] = None
    name: str
    model: str
    manufacturer: Optional[str] = None
    serial_number: Optional[str] = None
    location_id: Optional[int] = None
    status: AssetStatus = AssetStatus.RUNNING
    purchase_date: Optional[str] = None
    warranty_expiration: Optional[str] = None
    operating_hours: float = 0
    risk_score: int = 0
    last_calibration_date: Optional[str] = None
    next_calibration_date: Optional[str] = None
    purchase_cost: Optional[float] = None
    accumulated_maintenance_cost: Optional[float] = None

    @field_validator(
        "purchase_date",
        "warranty_expiration",
        "last_calibration_date",
        "next_calibration_date",
        mode="before",
    )
    @classmethod
    def normalize_dates(cls, v: Any) -> Any:
        return coerce_timestamp_text(v)

    @field_validator("operating_hours", mode="before")
    @classmethod
    def default_operating_hours(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("risk_score")
    @classmethod
    def validate_risk_score(cls, v: int) -> int:
        if not 0 <= v <= 100:
            raise ValueError(f"risk_score must be in [0, 100], got {v}.")
        return v

    @field_validator("asset_id")
    @classmethod
    def validate_asset_id(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("asset_id must be non-empty.")
        return v
