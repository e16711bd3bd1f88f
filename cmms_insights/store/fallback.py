"""
``FallbackStore``: remote-first reads, local-first writes.

Reads go to the remote PostgREST tables; any transport error, non-2xx
status or row that fails model validation is logged at WARNING and the
local store answers instead. Writes always land in the local store first
and are then mirrored to the remote best-effort. Remote failures are never
raised to the caller.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

import httpx
from pydantic import BaseModel

from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.user import User
from cmms_insights.models.work_order import Incident, WorkOrder
from cmms_insights.store.base import MaintenanceStore
from cmms_insights.store.remote import TABLE_KEYS, PostgrestClient

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

# httpx.HTTPError covers transport and status failures; ValueError covers
# bad JSON and pydantic.ValidationError.
_REMOTE_ERRORS = (httpx.HTTPError, ValueError)


class FallbackStore(MaintenanceStore):
    """Remote-backed store that degrades silently to ``local``.

    Attributes:
        local:  Store that always answers and always receives writes.
        remote: PostgREST client for the shared database.
    """

    def __init__(self, local: MaintenanceStore, remote: PostgrestClient) -> None:
        self.local = local
        self.remote = remote

    def _read(self, table: str, model: type[M], fallback: Callable[[], list[M]]) -> list[M]:
        try:
            return [model.model_validate(row) for row in self.remote.fetch_rows(table)]
        except _REMOTE_ERRORS as exc:
            logger.warning("Remote read of %s failed; using local state: %s", table, exc)
            return fallback()

    def _write(self, table: str, record: BaseModel, save: Callable) -> None:
        save(record)
        try:
            self.remote.upsert_rows(
                table, [record.model_dump(mode="json")], on_conflict=TABLE_KEYS[table]
            )
        except httpx.HTTPError as exc:
            logger.warning("Remote write to %s failed; kept local only: %s", table, exc)

    def list_assets(self) -> list[Asset]:
        return self._read("assets", Asset, self.local.list_assets)

    def save_asset(self, asset: Asset) -> None:
        self._write("assets", asset, self.local.save_asset)

    def list_work_orders(self) -> list[WorkOrder]:
        return self._read("work_orders", WorkOrder, self.local.list_work_orders)

    def save_work_order(self, wo: WorkOrder) -> None:
        self._write("work_orders", wo, self.local.save_work_order)

    def list_inventory(self) -> list[InventoryPart]:
        return self._read("inventory", InventoryPart, self.local.list_inventory)

    def save_part(self, part: InventoryPart) -> None:
        self._write("inventory", part, self.local.save_part)

    def list_users(self) -> list[User]:
        return self._read("users", User, self.local.list_users)

    def save_user(self, user: User) -> None:
        self._write("users", user, self.local.save_user)

    def list_locations(self) -> list[Location]:
        return self._read("locations", Location, self.local.list_locations)

    def save_location(self, location: Location) -> None:
        self._write("locations", location, self.local.save_location)

    def list_movement_logs(self) -> list[MovementLog]:
        return self._read("movement_logs", MovementLog, self.local.list_movement_logs)

    def save_movement_log(self, log: MovementLog) -> None:
        self._write("movement_logs", log, self.local.save_movement_log)

    def list_incidents(self) -> list[Incident]:
        return self._read("incidents", Incident, self.local.list_incidents)

    def save_incident(self, incident: Incident) -> None:
        self._write("incidents", incident, self.local.save_incident)
