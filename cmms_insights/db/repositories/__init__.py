"""
Table repositories. Each takes an open ``sqlite3.Connection``.
"""

from cmms_insights.db.repositories.asset_repo import AssetRepository, LocationRepository
from cmms_insights.db.repositories.inventory_repo import (
    InventoryRepository,
    MovementLogRepository,
)
from cmms_insights.db.repositories.run_repo import RunMetadataRepository
from cmms_insights.db.repositories.user_repo import UserRepository
from cmms_insights.db.repositories.work_order_repo import (
    IncidentRepository,
    WorkOrderRepository,
)

__all__ = [
    "AssetRepository",
    "IncidentRepository",
    "InventoryRepository",
    "LocationRepository",
    "MovementLogRepository",
    "RunMetadataRepository",
    "UserRepository",
    "WorkOrderRepository",
]
