"""
In-memory ``MaintenanceStore``: dictionaries keyed by primary key.

Used by tests, by the demo commands when no database is configured, and as
the local side of a ``FallbackStore`` in short-lived sessions.
"""

from __future__ import annotations

from typing import Optional

from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.user import User
from cmms_insights.models.work_order import Incident, WorkOrder
from cmms_insights.store.base import MaintenanceStore, StoreSnapshot


class InMemoryStore(MaintenanceStore):
    """Process-local store. Records are listed in insertion order.

    Assets are copied on the way in and out because ``Asset`` is mutable;
    every other entity is frozen.
    """

    def __init__(self, snapshot: Optional[StoreSnapshot] = None) -> None:
        self._assets: dict[str, Asset] = {}
        self._work_orders: dict[int, WorkOrder] = {}
        self._inventory: dict[int, InventoryPart] = {}
        self._users: dict[int, User] = {}
        self._locations: dict[int, Location] = {}
        self._movement_logs: dict[int, MovementLog] = {}
        self._incidents: dict[int, Incident] = {}
        if snapshot is not None:
            self.seed(snapshot)

    def list_assets(self) -> list[Asset]:
        return [a.model_copy() for a in self._assets.values()]

    def save_asset(self, asset: Asset) -> None:
        self._assets[asset.asset_id] = asset.model_copy()

    def list_work_orders(self) -> list[WorkOrder]:
        return list(self._work_orders.values())

    def save_work_order(self, wo: WorkOrder) -> None:
        self._work_orders[wo.wo_id] = wo

    def list_inventory(self) -> list[InventoryPart]:
        return list(self._inventory.values())

    def save_part(self, part: InventoryPart) -> None:
        self._inventory[part.part_id] = part

    def list_users(self) -> list[User]:
        return list(self._users.values())

    def save_user(self, user: User) -> None:
        self._users[user.user_id] = user

    def list_locations(self) -> list[Location]:
        return list(self._locations.values())

    def save_location(self, location: Location) -> None:
        self._locations[location.location_id] = location

    def list_movement_logs(self) -> list[MovementLog]:
        return list(self._movement_logs.values())

    def save_movement_log(self, log: MovementLog) -> None:
        self._movement_logs[log.log_id] = log

    def list_incidents(self) -> list[Incident]:
        return list(self._incidents.values())

    def save_incident(self, incident: Incident) -> None:
        self._incidents[incident.incident_id] = incident
