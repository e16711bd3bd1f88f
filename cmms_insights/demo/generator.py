"""
Deterministic demo data.

``DemoDataGenerator`` builds a complete ``StoreSnapshot``: the reference
records from ``seed_data`` plus generated technicians, devices, spare parts,
work orders and movements spread over the twelve months before ``now``.
The same ``seed`` and ``now`` always give the same snapshot.

Generated devices carry an RFID tag, and some generated work orders and
movements reference the tag instead of the primary ID, as a handheld reader
would.

The two ``simulate_*`` helpers drive the live demo: one flips a random
asset's status, the other picks the asset a simulated tag scan "found".
"""

from __future__ import annotations

import logging
import random
from datetime import datetime, timedelta
from typing import Optional

from cmms_insights.demo import seed_data
from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.user import User
from cmms_insights.models.work_order import Incident, PartUsage, WorkOrder
from cmms_insights.store.base import MaintenanceStore, StoreSnapshot
from cmms_insights.taxonomy.maintenance_taxonomy import (
    AssetStatus,
    Priority,
    UserRole,
    WorkOrderStatus,
    WorkOrderType,
)
from cmms_insights.utils.time_utils import ensure_utc, iso_utc, utcnow

logger = logging.getLogger(__name__)

HISTORY_DAYS = 365
FIRST_GENERATED_ASSET = 2001
FIRST_GENERATED_WO = 6001
FIRST_GENERATED_USER = 101

# Non-closed statuses a generated open order may be in.
_OPEN_STATUSES = [
    WorkOrderStatus.OPEN,
    WorkOrderStatus.ASSIGNED,
    WorkOrderStatus.IN_PROGRESS,
    WorkOrderStatus.AWAITING_APPROVAL,
]


class DemoDataGenerator:
    """Seeded builder for demo snapshots.

    Args:
        seed:                  RNG seed.
        now:                   Anchor for generated dates (default: current UTC).
        generated_assets:      Devices added on top of the reference assets.
        generated_parts:       Spare parts added after the named parts.
        generated_work_orders: Work orders added after the reference orders.
        generated_technicians: Extra technicians (at most five).
    """

    def __init__(
        self,
        seed:                  int = 42,
        now:                   Optional[datetime] = None,
        generated_assets:      int = 20,
        generated_parts:       int = 20,
        generated_work_orders: int = 60,
        generated_technicians: int = 3,
    ) -> None:
        self.seed = seed
        self.now = ensure_utc(now) if now is not None else utcnow()
        self.generated_assets = generated_assets
        self.generated_parts = generated_parts
        self.generated_work_orders = generated_work_orders
        self.generated_technicians = min(
            generated_technicians, len(seed_data.GENERATED_TECHNICIAN_NAMES)
        )

    def build(self) -> StoreSnapshot:
        """Return a fresh snapshot. Calling twice yields equal snapshots."""
        rng = random.Random(self.seed)

        locations = [Location.model_validate(row) for row in seed_data.LOCATIONS]
        users = [User.model_validate(row) for row in seed_data.USERS]
        users += self._technicians(rng, locations)
        assets = [Asset.model_validate(row) for row in seed_data.ASSETS]
        assets += self._assets(rng, assets, locations)
        inventory = [InventoryPart.model_validate(row) for row in seed_data.INVENTORY]
        inventory += self._parts(rng)
        incidents = [Incident.model_validate(row) for row in seed_data.INCIDENTS]
        work_orders = [WorkOrder.model_validate(row) for row in seed_data.WORK_ORDERS]
        work_orders += self._work_orders(rng, assets, users, inventory)
        movement_logs = [MovementLog.model_validate(row) for row in seed_data.MOVEMENT_LOGS]
        movement_logs += self._movements(rng, assets, locations, users, len(movement_logs) + 1)

        snapshot = StoreSnapshot(
            locations=locations,
            users=users,
            assets=assets,
            inventory=inventory,
            work_orders=work_orders,
            movement_logs=movement_logs,
            incidents=incidents,
        )
        logger.info(
            "Demo snapshot (seed=%d): %d assets, %d work orders, %d parts, %d users",
            self.seed, len(assets), len(work_orders), len(inventory), len(users),
        )
        return snapshot

    # ── Generators ────────────────────────────────────────────────────────────

    def _random_moment(self, rng: random.Random) -> datetime:
        return self.now - timedelta(minutes=rng.randint(60, HISTORY_DAYS * 24 * 60))

    def _technicians(self, rng: random.Random, locations: list[Location]) -> list[User]:
        techs = []
        for i, name in enumerate(seed_data.GENERATED_TECHNICIAN_NAMES[: self.generated_technicians]):
            home = rng.choice(locations)
            first = name.split()[0].lower()
            techs.append(
                User(
                    user_id=FIRST_GENERATED_USER + i,
                    name=name,
                    role=UserRole.TECHNICIAN,
                    email=f"{first}@hospital.com",
                    location_id=home.location_id,
                    department="Maintenance",
                )
            )
        return techs

    def _assets(
        self,
        rng:       random.Random,
        reference: list[Asset],
        locations: list[Location],
    ) -> list[Asset]:
        catalogue = sorted({(a.name, a.model) for a in reference if a.status != AssetStatus.SCRAPPED})
        statuses = [AssetStatus.RUNNING] * 7 + [AssetStatus.DOWN, AssetStatus.UNDER_MAINT, AssetStatus.SCRAPPED]
        generated = []
        for i in range(self.generated_assets):
            number = FIRST_GENERATED_ASSET + i
            name, model = rng.choice(catalogue)
            last_cal = self.now - timedelta(days=rng.randint(30, 540))
            generated.append(
                Asset(
                    asset_id=f"NFC-{number}",
                    nfc_tag_id=f"NFC-{number}",
                    rfid_tag_id=f"E2000017{number:08X}",
                    name=name,
                    model=model,
                    location_id=rng.choice(locations).location_id,
                    status=rng.choice(statuses),
                    purchase_date=f"{rng.randint(self.now.year - 12, self.now.year)}-"
                                  f"{rng.randint(1, 12):02d}-{rng.randint(1, 28):02d}",
                    operating_hours=rng.randint(0, 20000),
                    last_calibration_date=last_cal.date().isoformat(),
                    next_calibration_date=(last_cal + timedelta(days=365)).date().isoformat(),
                )
            )
        return generated

    def _parts(self, rng: random.Random) -> list[InventoryPart]:
        first_id = len(seed_data.INVENTORY) + 1
        return [
            InventoryPart(
                part_id=first_id + i,
                part_name=" ".join((
                    rng.choice(seed_data.PART_MODIFIERS),
                    rng.choice(seed_data.PART_TYPES),
                    rng.choice(seed_data.PART_UNITS),
                )),
                current_stock=rng.randint(0, 49),
                min_reorder_level=rng.randint(2, 11),
                cost=float(rng.randint(5, 2004)),
            )
            for i in range(self.generated_parts)
        ]

    def _work_orders(
        self,
        rng:       random.Random,
        assets:    list[Asset],
        users:     list[User],
        inventory: list[InventoryPart],
    ) -> list[WorkOrder]:
        technicians = [u for u in users if u.is_technician]
        in_service = [a for a in assets if a.status != AssetStatus.SCRAPPED]
        types = [WorkOrderType.CORRECTIVE] * 6 + [WorkOrderType.PREVENTIVE] * 3 + [WorkOrderType.CALIBRATION]
        priorities = list(Priority)

        orders = []
        for i in range(self.generated_work_orders):
            asset = rng.choice(in_service)
            ref = asset.rfid_tag_id if asset.rfid_tag_id and rng.random() < 0.3 else asset.asset_id
            created = self._random_moment(rng)
            wo_type = rng.choice(types)
            fields: dict = {
                "wo_id": FIRST_GENERATED_WO + i,
                "asset_id": ref,
                "type": wo_type,
                "priority": rng.choice(priorities),
                "assigned_to_id": rng.choice(technicians).user_id,
                "description": (
                    rng.choice(seed_data.FAULT_DESCRIPTIONS)
                    if wo_type == WorkOrderType.CORRECTIVE
                    else f"{wo_type} check"
                ),
                "created_at": iso_utc(created),
            }

            if rng.random() < 0.7:
                start = created + timedelta(hours=rng.uniform(0.5, 48))
                close = start + timedelta(hours=rng.uniform(0.5, 12))
                fields.update(
                    status=WorkOrderStatus.CLOSED,
                    start_time=iso_utc(start),
                    close_time=iso_utc(close),
                    nurse_rating=rng.randint(3, 5),
                    is_first_time_fix=rng.random() < 0.8,
                )
                if wo_type == WorkOrderType.CORRECTIVE:
                    fields["parts_used"] = [
                        PartUsage(part_id=rng.choice(inventory).part_id, quantity=rng.randint(1, 3))
                        for _ in range(rng.randint(0, 2))
                    ]
            else:
                status = rng.choice(_OPEN_STATUSES)
                fields["status"] = status
                if status not in (WorkOrderStatus.OPEN, WorkOrderStatus.ASSIGNED):
                    fields["start_time"] = iso_utc(created + timedelta(hours=rng.uniform(0.5, 24)))

            orders.append(WorkOrder(**fields))
        return orders

    def _movements(
        self,
        rng:       random.Random,
        assets:    list[Asset],
        locations: list[Location],
        users:     list[User],
        first_id:  int,
    ) -> list[MovementLog]:
        mobile = [a for a in assets if a.status != AssetStatus.SCRAPPED]
        logs = []
        for i in range(len(mobile) // 2):
            asset = rng.choice(mobile)
            ref = asset.rfid_tag_id if asset.rfid_tag_id and rng.random() < 0.5 else asset.asset_id
            logs.append(
                MovementLog(
                    log_id=first_id + i,
                    asset_id=ref,
                    from_location_id=asset.location_id,
                    to_location_id=rng.choice(locations).location_id,
                    timestamp=iso_utc(self._random_moment(rng)),
                    user_id=rng.choice(users).user_id,
                )
            )
        return logs


# ── Live simulation ───────────────────────────────────────────────────────────

def simulate_status_flip(
    store: MaintenanceStore,
    rng:   random.Random,
) -> Optional[tuple[str, AssetStatus]]:
    """Draw a new status for one random in-service asset.

    10% Down, 10% Under Maint., otherwise Running. The store is written only
    when the status actually changes.

    Returns:
        ``(asset_id, new_status)`` when a status changed, else ``None``.
    """
    candidates = [a for a in store.list_assets() if a.status != AssetStatus.SCRAPPED]
    if not candidates:
        return None
    target = rng.choice(candidates)
    r = rng.random()
    if r > 0.90:
        new_status = AssetStatus.DOWN
    elif r > 0.80:
        new_status = AssetStatus.UNDER_MAINT
    else:
        new_status = AssetStatus.RUNNING

    if target.status == new_status:
        return None
    store.update_asset_status(target.asset_id, new_status)
    logger.info("Simulated status flip: %s %s -> %s", target.asset_id, target.status, new_status)
    return target.asset_id, new_status


def simulate_rfid_scan(assets: list[Asset], rng: random.Random) -> Optional[Asset]:
    """Return the asset a simulated tag read picked up, or ``None`` if there are none."""
    if not assets:
        return None
    return rng.choice(assets)
