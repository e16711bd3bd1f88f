"""
SQLite-backed ``MaintenanceStore``.

Wraps the table repositories around a connection owned by the caller; the
store itself never commits or closes. Typical use::

    with get_connection(config.database.db_path) as conn:
        apply_schema(conn)
        store = SqliteStore(conn)
        ...
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from cmms_insights.db.repositories import (
    AssetRepository,
    IncidentRepository,
    InventoryRepository,
    LocationRepository,
    MovementLogRepository,
    UserRepository,
    WorkOrderRepository,
)
from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.user import User
from cmms_insights.models.work_order import Incident, WorkOrder
from cmms_insights.store.base import MaintenanceStore


class SqliteStore(MaintenanceStore):
    """Store over the local SQLite schema (see ``cmms_insights.db.schema``)."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn
        self.assets = AssetRepository(conn)
        self.locations = LocationRepository(conn)
        self.work_orders = WorkOrderRepository(conn)
        self.incidents = IncidentRepository(conn)
        self.inventory = InventoryRepository(conn)
        self.movement_logs = MovementLogRepository(conn)
        self.users = UserRepository(conn)

    def list_assets(self) -> list[Asset]:
        return self.assets.get_all()

    def save_asset(self, asset: Asset) -> None:
        self.assets.upsert_asset(asset)

    def list_work_orders(self) -> list[WorkOrder]:
        return self.work_orders.get_all()

    def save_work_order(self, wo: WorkOrder) -> None:
        self.work_orders.upsert_work_order(wo)

    def list_inventory(self) -> list[InventoryPart]:
        return self.inventory.get_all()

    def save_part(self, part: InventoryPart) -> None:
        self.inventory.upsert_part(part)

    def list_users(self) -> list[User]:
        return self.users.get_all()

    def save_user(self, user: User) -> None:
        self.users.upsert_user(user)

    def list_locations(self) -> list[Location]:
        return self.locations.get_all()

    def save_location(self, location: Location) -> None:
        self.locations.upsert_location(location)

    def list_movement_logs(self) -> list[MovementLog]:
        return self.movement_logs.get_all()

    def save_movement_log(self, log: MovementLog) -> None:
        self.movement_logs.upsert_log(log)

    def list_incidents(self) -> list[Incident]:
        return self.incidents.get_all()

    def save_incident(self, incident: Incident) -> None:
        self.incidents.upsert_incident(incident)

    # Indexed lookups in place of the generic list scans.

    def get_work_order(self, wo_id: int) -> Optional[WorkOrder]:
        return self.work_orders.get_by_id(wo_id)

    def get_part(self, part_id: int) -> Optional[InventoryPart]:
        return self.inventory.get_by_id(part_id)

    def get_user(self, user_id: int) -> Optional[User]:
        return self.users.get_by_id(user_id)

    def technicians(self) -> list[User]:
        return self.users.get_technicians()

    def technician_work_orders(self, user_id: int) -> list[WorkOrder]:
        return self.work_orders.get_for_assignee(user_id)
