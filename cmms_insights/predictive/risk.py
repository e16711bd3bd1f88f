"""
Asset risk scoring: a 0-100 heuristic estimate of near-term failure risk.

Score formula (integer points, clamped to 0-100)
-------------------------------------------------
    total = (
        2  * age_years               # current year − purchase year
        + floor(operating_hours / 500)
        + 10 * recent_corrective     # corrective WOs created in lookback window
        + 5  * recent_moves          # movement-log entries in lookback window
    )

The lookback window is the last ``lookback_months`` calendar months before
``now`` (default 6); an event counts only if it is strictly after the window
start. Work orders and movement logs are matched to the asset through the
canonical identifier resolver, so tag-based references count too.

Missing or unparseable dates contribute 0; the calculator never raises on
bad data. The caller owns writing the result back to ``asset.risk_score``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, Optional

from cmms_insights.models.asset import Asset
from cmms_insights.models.inventory import MovementLog
from cmms_insights.models.work_order import WorkOrder
from cmms_insights.taxonomy.maintenance_taxonomy import WorkOrderType
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import (
    ensure_utc,
    months_before,
    parse_timestamp,
    parse_year,
    utcnow,
)

AGE_POINTS_PER_YEAR = 2
HOURS_PER_UTILIZATION_POINT = 500
POINTS_PER_RECENT_FAILURE = 10
POINTS_PER_RECENT_MOVE = 5
DEFAULT_LOOKBACK_MONTHS = 6

RISK_MIN = 0
RISK_MAX = 100


@dataclass
class RiskComponents:
    """All factors of one asset's risk score.

    Attributes:
        asset_id:           Primary identifier of the scored asset.
        age_years:          current year − purchase year (0 if unknown).
        age_points:         2 per year of age.
        utilization_points: 1 per 500 operating hours.
        recent_failures:    Corrective WOs created inside the window.
        failure_points:     10 per recent failure.
        recent_moves:       Movement-log entries inside the window.
        mobility_points:    5 per recent move.
    """

    asset_id:           str
    age_years:          int
    age_points:         int
    utilization_points: int
    recent_failures:    int
    failure_points:     int
    recent_moves:       int
    mobility_points:    int

    @property
    def raw_total(self) -> int:
        """Unclamped sum of all factors."""
        return (
            self.age_points
            + self.utilization_points
            + self.failure_points
            + self.mobility_points
        )

    @property
    def score(self) -> int:
        """Final risk score, rounded and clamped to [0, 100]."""
        return _clamp(_round_half_up(self.raw_total), RISK_MIN, RISK_MAX)


def assess_risk(
    asset:           Asset,
    work_orders:     Iterable[WorkOrder],
    movement_logs:   Iterable[MovementLog],
    now:             Optional[datetime] = None,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
) -> RiskComponents:
    """Compute every risk factor for one asset.

    Args:
        asset:           The asset to score.
        work_orders:     All known work orders (any asset).
        movement_logs:   All known movement logs (any asset).
        now:             Reference time; defaults to current UTC.
        lookback_months: Calendar months counted as "recent".

    Returns:
        ``RiskComponents`` with every factor populated.
    """
    now = ensure_utc(now) if now is not None else utcnow()
    window_start = months_before(now, lookback_months)
    index = AssetIndex([asset])

    # ── Age ───────────────────────────────────────────────────────────────────
    purchase_year = parse_year(asset.purchase_date)
    age_years = now.year - purchase_year if purchase_year is not None else 0

    # ── Utilization ───────────────────────────────────────────────────────────
    hours = asset.operating_hours or 0
    if not math.isfinite(hours):
        hours = 0
    utilization_points = math.floor(hours / HOURS_PER_UTILIZATION_POINT)

    # ── Recent corrective work ────────────────────────────────────────────────
    recent_failures = sum(
        1
        for wo in work_orders
        if wo.type == WorkOrderType.CORRECTIVE
        and index.resolve(wo.asset_id) is not None
        and _is_after(wo.created_at, window_start)
    )

    # ── Mobility stress ───────────────────────────────────────────────────────
    recent_moves = sum(
        1
        for log in movement_logs
        if index.resolve(log.asset_id) is not None
        and _is_after(log.timestamp, window_start)
    )

    return RiskComponents(
        asset_id=asset.asset_id,
        age_years=age_years,
        age_points=age_years * AGE_POINTS_PER_YEAR,
        utilization_points=utilization_points,
        recent_failures=recent_failures,
        failure_points=recent_failures * POINTS_PER_RECENT_FAILURE,
        recent_moves=recent_moves,
        mobility_points=recent_moves * POINTS_PER_RECENT_MOVE,
    )


def compute_risk_score(
    asset:           Asset,
    work_orders:     Iterable[WorkOrder],
    movement_logs:   Iterable[MovementLog],
    now:             Optional[datetime] = None,
    lookback_months: int = DEFAULT_LOOKBACK_MONTHS,
) -> int:
    """Return the asset's risk score in [0, 100].

    See ``assess_risk`` for the arguments; this is ``assess_risk(...).score``.
    """
    return assess_risk(
        asset, work_orders, movement_logs, now=now, lookback_months=lookback_months
    ).score


def risk_band(score: int, high: int = 70, medium: int = 40) -> str:
    """Classify a score as ``"high"`` (> high), ``"medium"`` (> medium) or ``"low"``."""
    if score > high:
        return "high"
    if score > medium:
        return "medium"
    return "low"


# ── Helpers ───────────────────────────────────────────────────────────────────

def _is_after(raw: Optional[str], threshold: datetime) -> bool:
    moment = parse_timestamp(raw)
    return moment is not None and moment > threshold


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _clamp(value: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, value))
