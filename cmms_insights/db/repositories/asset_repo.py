"""
Repositories for ``locations`` and ``assets``.
"""

from __future__ import annotations

import sqlite3
from typing import Optional

from cmms_insights.db.repositories.base import BaseRepository
from cmms_insights.models.asset import Asset, Location

_LOCATION_COLUMNS = list(Location.model_fields)
_ASSET_COLUMNS = list(Asset.model_fields)


class LocationRepository(BaseRepository):
    """Read/write access to ``locations``."""

    def upsert_location(self, location: Location) -> None:
        row = location.model_dump(mode="json")
        self.upsert(
            "locations", "location_id", _LOCATION_COLUMNS,
            [row[col] for col in _LOCATION_COLUMNS],
        )

    def get_all(self) -> list[Location]:
        rows = self.fetchall("SELECT * FROM locations ORDER BY location_id;")
        return [Location.model_validate(dict(r)) for r in rows]

    def get_by_id(self, location_id: int) -> Optional[Location]:
        row = self.fetchone(
            "SELECT * FROM locations WHERE location_id = ?;", (location_id,)
        )
        return Location.model_validate(dict(row)) if row else None


class AssetRepository(BaseRepository):
    """Read/write access to ``assets``.

    Lookups here are by primary ``asset_id`` only; tag references are
    resolved by the store layer.
    """

    def upsert_asset(self, asset: Asset) -> None:
        """Insert ``asset`` or overwrite the row with the same ``asset_id``."""
        row = asset.model_dump(mode="json")
        self.upsert(
            "assets", "asset_id", _ASSET_COLUMNS,
            [row[col] for col in _ASSET_COLUMNS],
        )

    def get_all(self) -> list[Asset]:
        """All assets in insertion order."""
        rows = self.fetchall("SELECT * FROM assets ORDER BY rowid;")
        return [_row_to_asset(r) for r in rows]

    def get_by_id(self, asset_id: str) -> Optional[Asset]:
        row = self.fetchone("SELECT * FROM assets WHERE asset_id = ?;", (asset_id,))
        return _row_to_asset(row) if row else None

    def get_by_model(self, model: str) -> list[Asset]:
        """Assets whose model matches ``model`` case-insensitively."""
        rows = self.fetchall(
            "SELECT * FROM assets WHERE lower(trim(model)) = lower(trim(?)) ORDER BY rowid;",
            (model,),
        )
        return [_row_to_asset(r) for r in rows]

    def count(self) -> int:
        row = self.fetchone("SELECT COUNT(*) AS n FROM assets;")
        return int(row["n"]) if row else 0


# ── Private helpers ────────────────────────────────────────────────────────────

def _row_to_asset(row: sqlite3.Row) -> Asset:
    return Asset.model_validate(dict(row))
