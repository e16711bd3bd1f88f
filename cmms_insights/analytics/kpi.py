"""
Supervisor analytics: fleet KPIs, MTTR trend, technician performance, fault
distribution and the risk table.

Every function is a pure read over collections passed in by the caller.
Repair durations come from ``utils.time_utils.duration_hours``; orders with a
missing, unparseable or non-positive duration are skipped, never counted as
zero-hour repairs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional

from cmms_insights.models.asset import Asset
from cmms_insights.models.inventory import InventoryPart
from cmms_insights.models.user import User
from cmms_insights.models.work_order import WorkOrder
from cmms_insights.predictive.risk import risk_band
from cmms_insights.taxonomy.maintenance_taxonomy import AssetStatus, WorkOrderType
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import duration_hours, parse_timestamp

DEFAULT_TREND_MONTHS = 6
DEFAULT_FAULT_LIMIT = 5
DEFAULT_RISK_LIMIT = 10


@dataclass
class FleetKpis:
    """Headline numbers for the supervisor overview."""

    total_assets:     int
    open_work_orders: int
    low_stock_count:  int
    availability:     dict[str, int] = field(default_factory=dict)
    mttr_hours:       float = 0.0


@dataclass
class MttrPoint:
    """Mean repair hours of the orders closed in one calendar month."""

    month:  str   # YYYY-MM
    label:  str   # "Mon YYYY"
    hours:  float
    orders: int


@dataclass
class TechnicianPerformance:
    user_id:          int
    name:             str
    closed_count:     int
    avg_repair_hours: float


@dataclass
class FaultCount:
    asset_name: str
    count:      int


@dataclass
class RiskRow:
    """One line of the supervisor risk table."""

    asset_id:    str
    name:        str
    model:       str
    location_id: Optional[int]
    risk_score:  int
    band:        str
    note:        str


def _mean_hours(hours: list[float]) -> float:
    return round(sum(hours) / len(hours), 1) if hours else 0.0


def compute_kpis(
    assets:      Iterable[Asset],
    work_orders: Iterable[WorkOrder],
    inventory:   Iterable[InventoryPart],
) -> FleetKpis:
    """Compute the overview tiles.

    ``availability`` has one entry per ``AssetStatus`` value (zero included).
    ``mttr_hours`` is the mean valid repair duration over closed orders.
    """
    assets = list(assets)
    work_orders = list(work_orders)

    availability = {status.value: 0 for status in AssetStatus}
    for asset in assets:
        availability[asset.status.value] += 1

    closed_hours = [
        hours
        for hours in (
            duration_hours(wo.start_time, wo.close_time)
            for wo in work_orders
            if wo.is_closed
        )
        if hours is not None
    ]

    return FleetKpis(
        total_assets=len(assets),
        open_work_orders=sum(1 for wo in work_orders if not wo.is_closed),
        low_stock_count=sum(1 for part in inventory if part.is_low_stock),
        availability=availability,
        mttr_hours=_mean_hours(closed_hours),
    )


def mttr_trend(
    work_orders: Iterable[WorkOrder],
    limit:       int = DEFAULT_TREND_MONTHS,
) -> list[MttrPoint]:
    """Mean time to repair per close month.

    Months are keyed by the order's ``close_time``. Returns the most recent
    ``limit`` months that have at least one valid duration, oldest first.
    """
    by_month: dict[str, list[float]] = {}
    labels: dict[str, str] = {}
    for wo in work_orders:
        if not wo.is_closed:
            continue
        hours = duration_hours(wo.start_time, wo.close_time)
        if hours is None:
            continue
        closed_at = parse_timestamp(wo.close_time)
        key = closed_at.strftime("%Y-%m")
        by_month.setdefault(key, []).append(hours)
        labels[key] = closed_at.strftime("%b %Y")

    months = sorted(by_month)[-limit:] if limit > 0 else []
    return [
        MttrPoint(
            month=key,
            label=labels[key],
            hours=_mean_hours(by_month[key]),
            orders=len(by_month[key]),
        )
        for key in months
    ]


def technician_performance(
    work_orders: Iterable[WorkOrder],
    users:       Iterable[User],
) -> list[TechnicianPerformance]:
    """Closed-order count and mean repair hours per assignee.

    Unassigned orders are skipped. Rows follow first appearance in
    ``work_orders``. The display name is the first word of the user's name,
    or ``"Tech <id>"`` when the user is unknown.
    """
    names = {user.user_id: user.name for user in users}
    counts: dict[int, int] = {}
    hours_by_tech: dict[int, list[float]] = {}

    for wo in work_orders:
        if not wo.is_closed or wo.assigned_to_id is None:
            continue
        tech_id = wo.assigned_to_id
        counts[tech_id] = counts.get(tech_id, 0) + 1
        hours_by_tech.setdefault(tech_id, [])
        hours = duration_hours(wo.start_time, wo.close_time)
        if hours is not None:
            hours_by_tech[tech_id].append(hours)

    rows = []
    for tech_id, count in counts.items():
        full_name = names.get(tech_id, "").strip()
        display = full_name.split()[0] if full_name else f"Tech {tech_id}"
        rows.append(
            TechnicianPerformance(
                user_id=tech_id,
                name=display,
                closed_count=count,
                avg_repair_hours=_mean_hours(hours_by_tech[tech_id]),
            )
        )
    return rows


def fault_distribution(
    work_orders: Iterable[WorkOrder],
    assets:      Iterable[Asset],
    limit:       int = DEFAULT_FAULT_LIMIT,
) -> list[FaultCount]:
    """Corrective orders counted per asset name, most frequent first."""
    index = AssetIndex(assets)
    counts: dict[str, int] = {}
    for wo in work_orders:
        if wo.type != WorkOrderType.CORRECTIVE:
            continue
        asset = index.get(wo.asset_id)
        name = asset.name if asset is not None else "Unknown"
        counts[name] = counts.get(name, 0) + 1

    ranked = sorted(counts.items(), key=lambda item: -item[1])
    return [FaultCount(asset_name=name, count=count) for name, count in ranked[:limit]]


def top_risk_assets(
    assets:      Iterable[Asset],
    limit:       int = DEFAULT_RISK_LIMIT,
    high:        int = 70,
    medium:      int = 40,
) -> list[RiskRow]:
    """Highest-risk assets first, with band and a short note."""
    ranked = sorted(assets, key=lambda a: -a.risk_score)[:limit]
    rows = []
    for asset in ranked:
        band = risk_band(asset.risk_score, high=high, medium=medium)
        rows.append(
            RiskRow(
                asset_id=asset.asset_id,
                name=asset.name,
                model=asset.model,
                location_id=asset.location_id,
                risk_score=asset.risk_score,
                band=band,
                note="High Usage / Recent Failures" if band == "high" else "Stable",
            )
        )
    return rows


def low_stock_parts(inventory: Iterable[InventoryPart]) -> list[InventoryPart]:
    """Parts at or below their reorder level, in catalogue order."""
    return [part for part in inventory if part.is_low_stock]
