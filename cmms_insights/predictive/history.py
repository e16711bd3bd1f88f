"""
Historical pattern analysis: what past repairs on the same device model
looked like.

Given a model string, gathers every closed corrective work order on an asset
of that model and summarises them for the technician about to start a new
repair: how many similar cases there were, how long they took on average,
which spare parts were consumed most, and which orders to read first.

``current_fault_text`` is accepted for interface stability but does not
narrow the match; similarity is by model only.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from cmms_insights.models.asset import Asset
from cmms_insights.models.inventory import InventoryPart
from cmms_insights.models.work_order import WorkOrder
from cmms_insights.taxonomy.maintenance_taxonomy import WorkOrderStatus, WorkOrderType
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import duration_hours

logger = logging.getLogger(__name__)

DEFAULT_TOP_PARTS = 3
DEFAULT_SOLUTION_REFS = 2


@dataclass
class PartUsageSummary:
    """Total quantity of one part consumed across the matched repairs."""

    part_id:   int
    part_name: str
    count:     int


@dataclass
class HistoricalPatterns:
    """Summary of past closed corrective repairs on one model.

    Attributes:
        similar_cases_count:   Number of matching work orders.
        avg_repair_time_hours: Mean start→close hours over orders with a valid
                               duration, 1 decimal; 0.0 when none is valid.
        top_parts_used:        Most-consumed parts, highest quantity first.
        common_solutions_refs: ``"Ref WO#<id>"`` for the first matches.
    """

    similar_cases_count:   int = 0
    avg_repair_time_hours: float = 0.0
    top_parts_used:        list[PartUsageSummary] = field(default_factory=list)
    common_solutions_refs: list[str] = field(default_factory=list)


def analyze_historical_patterns(
    asset_model:         str,
    current_fault_text:  Optional[str],
    work_orders:         Iterable[WorkOrder],
    *,
    assets:              Iterable[Asset],
    inventory:           Iterable[InventoryPart],
    top_parts_limit:     int = DEFAULT_TOP_PARTS,
    solution_refs_limit: int = DEFAULT_SOLUTION_REFS,
) -> HistoricalPatterns:
    """Summarise closed corrective repairs on assets of ``asset_model``.

    The model comparison is exact after trimming and case-folding. Work-order
    asset references are resolved through ``AssetIndex`` so tag-based
    references match too.

    Args:
        asset_model:         Model string of the asset being repaired.
        current_fault_text:  Fault description of the new repair (unused).
        work_orders:         All known work orders.
        assets:              Asset catalogue used to resolve models.
        inventory:           Parts catalogue used to resolve part names.
        top_parts_limit:     Maximum number of parts returned.
        solution_refs_limit: Maximum number of reference orders returned.

    Returns:
        ``HistoricalPatterns``; all-zero when nothing matches.
    """
    if current_fault_text:
        logger.debug("Fault text ignored for history lookup: %r", current_fault_text)

    target = asset_model.strip().lower()
    index = AssetIndex(assets)
    model_asset_ids = {
        asset_id
        for asset_id, asset in index.assets.items()
        if asset.model.strip().lower() == target
    }

    matches = [
        wo
        for wo in work_orders
        if wo.status == WorkOrderStatus.CLOSED
        and wo.type == WorkOrderType.CORRECTIVE
        and index.resolve(wo.asset_id) in model_asset_ids
    ]
    if not matches:
        return HistoricalPatterns()

    # ── Repair time ───────────────────────────────────────────────────────────
    durations = [
        hours
        for hours in (duration_hours(wo.start_time, wo.close_time) for wo in matches)
        if hours is not None
    ]
    avg_hours = round(sum(durations) / len(durations), 1) if durations else 0.0

    # ── Parts ─────────────────────────────────────────────────────────────────
    part_names = {part.part_id: part.part_name for part in inventory}
    totals: dict[int, int] = {}
    for wo in matches:
        for usage in wo.parts_used:
            totals[usage.part_id] = totals.get(usage.part_id, 0) + usage.quantity

    # dict preserves first-seen order, sorted() keeps it on ties.
    ranked_parts = sorted(totals.items(), key=lambda item: -item[1])
    top_parts = [
        PartUsageSummary(
            part_id=part_id,
            part_name=part_names.get(part_id, f"Part #{part_id}"),
            count=count,
        )
        for part_id, count in ranked_parts[:top_parts_limit]
    ]

    refs = [f"Ref WO#{wo.wo_id}" for wo in matches[:solution_refs_limit]]

    return HistoricalPatterns(
        similar_cases_count=len(matches),
        avg_repair_time_hours=avg_hours,
        top_parts_used=top_parts,
        common_solutions_refs=refs,
    )
