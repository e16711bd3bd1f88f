"""
System alert generation for the supervisor alert panel.

Three rules are evaluated against the current fleet, stock and movements:

  - COMPLIANCE / high: a non-scrapped asset whose ``next_calibration_date``
    is before ``now``.
  - BOUNDARY_CROSSING / high: an asset moved between two different
    departments within the last ``window_hours``. Moves where either
    department is unknown are not flagged.
  - STOCK / medium: a part at or below its reorder level.

Assets with a missing or unparseable calibration date raise nothing.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Iterable, Optional

from cmms_insights.models.alert import SystemAlert
from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.taxonomy.maintenance_taxonomy import (
    AlertSeverity,
    AlertType,
    AssetStatus,
)
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import ensure_utc, iso_utc, parse_timestamp, utcnow

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "Unknown"
DEFAULT_BOUNDARY_WINDOW_HOURS = 24


def calibration_alerts(
    assets:    Iterable[Asset],
    locations: Iterable[Location],
    now:       Optional[datetime] = None,
) -> list[SystemAlert]:
    """COMPLIANCE alerts for overdue calibrations, in asset order."""
    now = ensure_utc(now) if now is not None else utcnow()
    location_names = {loc.location_id: loc.name for loc in locations}
    stamp = iso_utc(now)

    alerts = []
    for asset in assets:
        if asset.status == AssetStatus.SCRAPPED:
            continue
        due = parse_timestamp(asset.next_calibration_date)
        if due is None or due >= now:
            continue
        where = location_names.get(asset.location_id, UNKNOWN_LOCATION)
        alerts.append(
            SystemAlert(
                alert_type=AlertType.COMPLIANCE,
                message=f"Calibration overdue for {asset.name} ({asset.asset_id}) in {where}",
                timestamp=stamp,
                asset_id=asset.asset_id,
                severity=AlertSeverity.HIGH,
            )
        )
    return alerts


def boundary_alerts(
    movement_logs: Iterable[MovementLog],
    assets:        Iterable[Asset],
    locations:     Iterable[Location],
    now:           Optional[datetime] = None,
    window_hours:  int = DEFAULT_BOUNDARY_WINDOW_HOURS,
) -> list[SystemAlert]:
    """BOUNDARY_CROSSING alerts for recent moves between departments, in log order.

    Args:
        movement_logs: Movement history; ``asset_id`` may be a tag identifier.
        assets:        Fleet used to resolve tags and name the asset.
        locations:     Locations with their departments.
        now:           Reference time; defaults to current UTC.
        window_hours:  Only moves in ``(now - window_hours, now]`` are checked.
    """
    now = ensure_utc(now) if now is not None else utcnow()
    window_start = now - timedelta(hours=window_hours)
    departments = {loc.location_id: loc.department for loc in locations}
    index = AssetIndex(assets)
    stamp = iso_utc(now)

    alerts = []
    for log in movement_logs:
        moved_at = parse_timestamp(log.timestamp)
        if moved_at is None or not window_start < moved_at <= now:
            continue
        origin = departments.get(log.from_location_id)
        destination = departments.get(log.to_location_id)
        if origin is None or destination is None or origin == destination:
            continue

        asset = index.get(log.asset_id)
        asset_id = asset.asset_id if asset is not None else log.asset_id
        name = asset.name if asset is not None else "Asset"
        alerts.append(
            SystemAlert(
                alert_type=AlertType.BOUNDARY_CROSSING,
                message=f"{name} ({asset_id}) crossed from {origin} to {destination}",
                timestamp=stamp,
                asset_id=asset_id,
                severity=AlertSeverity.HIGH,
            )
        )
    return alerts


def stock_alerts(
    inventory: Iterable[InventoryPart],
    now:       Optional[datetime] = None,
) -> list[SystemAlert]:
    """STOCK alerts for parts at or below their reorder level."""
    stamp = iso_utc(ensure_utc(now) if now is not None else utcnow())
    return [
        SystemAlert(
            alert_type=AlertType.STOCK,
            message=f"Critical low stock: {part.part_name} ({part.current_stock} remaining)",
            timestamp=stamp,
            part_id=part.part_id,
            severity=AlertSeverity.MEDIUM,
        )
        for part in inventory
        if part.is_low_stock
    ]


def generate_alerts(
    assets:                Iterable[Asset],
    inventory:             Iterable[InventoryPart],
    locations:             Iterable[Location],
    now:                   Optional[datetime] = None,
    movement_logs:         Iterable[MovementLog] = (),
    boundary_window_hours: int = DEFAULT_BOUNDARY_WINDOW_HOURS,
) -> list[SystemAlert]:
    """All active alerts: calibration compliance, then boundary crossings, then stock."""
    now = ensure_utc(now) if now is not None else utcnow()
    assets = list(assets)
    locations = list(locations)
    alerts = (
        calibration_alerts(assets, locations, now=now)
        + boundary_alerts(
            movement_logs, assets, locations, now=now, window_hours=boundary_window_hours
        )
        + stock_alerts(inventory, now=now)
    )
    logger.info("Generated %d alerts", len(alerts))
    return alerts
