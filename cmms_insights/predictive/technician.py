"""
Technician recommendation: ranks candidate technicians for a work order on
one asset.

Score formula (integer points, additive)
----------------------------------------
    proximity  : +50 "On Site"   technician home location == asset location
                 +30 "Same Dept" otherwise, when both locations map to the
                                 same department
    expertise  : min(2 * closed_jobs, 40), added only when > 10,
                 label "Expert (<closed_jobs> Jobs)"
    workload   : -5 * open_jobs (any status other than Closed),
                 label "Busy" when open_jobs > 3

Which closed jobs count as expertise is controlled by ``ExpertiseScope``:
``ALL`` (default) counts every closed job the technician has done;
``SAME_MODEL`` counts only jobs on assets of the target asset's model.

Results are sorted by score descending. ``sorted`` is stable, so equal
scores keep the caller's candidate order. The ranker only reads its inputs;
committing the chosen assignment is the caller's job
(``MaintenanceStore.assign_work_order``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional

from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.user import User
from cmms_insights.models.work_order import WorkOrder
from cmms_insights.taxonomy.maintenance_taxonomy import ExpertiseScope
from cmms_insights.utils.identifiers import AssetIndex

logger = logging.getLogger(__name__)

DepartmentLookup = Callable[[Optional[int]], Optional[str]]

ON_SITE_POINTS = 50
SAME_DEPT_POINTS = 30
POINTS_PER_CLOSED_JOB = 2
EXPERTISE_CAP = 40
EXPERTISE_MIN_BONUS = 10
POINTS_PER_OPEN_JOB = 5
BUSY_OPEN_JOBS = 3


@dataclass
class TechnicianRecommendation:
    """One ranked candidate.

    Attributes:
        technician:  The candidate user.
        score:       Net proximity + expertise − workload points.
        reasons:     Labels explaining the score, in evaluation order.
        closed_jobs: Closed jobs counted toward expertise.
        open_jobs:   Jobs currently open on the technician's queue.
    """

    technician:  User
    score:       int
    reasons:     list[str] = field(default_factory=list)
    closed_jobs: int = 0
    open_jobs:   int = 0

    @property
    def reason(self) -> str:
        """Reasons joined for display, e.g. ``"On Site, Expert (8 Jobs)"``."""
        return ", ".join(self.reasons)


def department_lookup(locations: Iterable[Location]) -> DepartmentLookup:
    """Build a ``location_id -> department`` function from a location list.

    Unknown or ``None`` location IDs map to ``None``.
    """
    departments = {loc.location_id: loc.department for loc in locations}

    def _lookup(location_id: Optional[int]) -> Optional[str]:
        if location_id is None:
            return None
        return departments.get(location_id)

    return _lookup


def recommend_technicians(
    asset:           Asset,
    technicians:     Iterable[User],
    work_orders:     Iterable[WorkOrder],
    *,
    department_of:   Optional[DepartmentLookup] = None,
    expertise_scope: ExpertiseScope = ExpertiseScope.ALL,
    assets:          Optional[Iterable[Asset]] = None,
) -> list[TechnicianRecommendation]:
    """Rank technicians for a job on ``asset``.

    Args:
        asset:           Asset needing work.
        technicians:     Candidate users, in the caller's preferred order.
        work_orders:     All known work orders (history and current queue).
        department_of:   ``location_id -> department`` lookup. Without it
                         only the "On Site" proximity tier can apply.
        expertise_scope: Which closed jobs count as expertise.
        assets:          Asset catalogue used to resolve the model of past
                         jobs when ``expertise_scope`` is ``SAME_MODEL``.
                         Defaults to ``[asset]``.

    Returns:
        Recommendations sorted by score descending (stable on ties).
        An empty candidate list returns an empty list.
    """
    work_orders = list(work_orders)
    relevant_job = _expertise_filter(asset, expertise_scope, assets)
    asset_department = department_of(asset.location_id) if department_of else None

    ranked: list[TechnicianRecommendation] = []
    for tech in technicians:
        score = 0
        reasons: list[str] = []

        # ── Proximity ─────────────────────────────────────────────────────────
        if tech.location_id is not None and tech.location_id == asset.location_id:
            score += ON_SITE_POINTS
            reasons.append("On Site")
        elif department_of is not None and asset_department is not None:
            if department_of(tech.location_id) == asset_department:
                score += SAME_DEPT_POINTS
                reasons.append("Same Dept")

        # ── Expertise ─────────────────────────────────────────────────────────
        own_jobs = [wo for wo in work_orders if wo.assigned_to_id == tech.user_id]
        closed_jobs = sum(1 for wo in own_jobs if wo.is_closed and relevant_job(wo))
        expertise = min(closed_jobs * POINTS_PER_CLOSED_JOB, EXPERTISE_CAP)
        if expertise > EXPERTISE_MIN_BONUS:
            score += expertise
            reasons.append(f"Expert ({closed_jobs} Jobs)")

        # ── Workload ──────────────────────────────────────────────────────────
        open_jobs = sum(1 for wo in own_jobs if not wo.is_closed)
        score -= open_jobs * POINTS_PER_OPEN_JOB
        if open_jobs > BUSY_OPEN_JOBS:
            reasons.append("Busy")

        ranked.append(
            TechnicianRecommendation(
                technician=tech,
                score=score,
                reasons=reasons,
                closed_jobs=closed_jobs,
                open_jobs=open_jobs,
            )
        )

    ranked.sort(key=lambda rec: -rec.score)
    logger.debug(
        "Ranked %d technicians for asset %s (scope=%s)",
        len(ranked), asset.asset_id, expertise_scope,
    )
    return ranked


def _expertise_filter(
    asset:  Asset,
    scope:  ExpertiseScope,
    assets: Optional[Iterable[Asset]],
) -> Callable[[WorkOrder], bool]:
    """Return a predicate selecting the closed jobs that count as expertise."""
    if scope == ExpertiseScope.ALL:
        return lambda wo: True

    index = AssetIndex(assets if assets is not None else [asset])
    target_model = asset.model.strip().lower()

    def _same_model(wo: WorkOrder) -> bool:
        job_asset = index.get(wo.asset_id)
        return job_asset is not None and job_asset.model.strip().lower() == target_model

    return _same_model
