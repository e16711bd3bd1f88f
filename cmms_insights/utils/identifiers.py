"""
Canonical asset-identifier resolution.

Work orders, incidents and movement logs reference an asset by whatever the
user scanned or typed: the primary ``asset_id``, the NFC tag, or the RFID EPC
code. Every join between those records and ``Asset`` goes through this module
so the reconciliation rule lives in exactly one place:

  1. References are compared after ``str()`` + whitespace strip.
  2. A reference equal to some asset's primary ``asset_id`` resolves to it.
  3. Otherwise a reference equal to a tag identifier resolves to that
     asset's primary ``asset_id``.
  4. Anything else resolves to ``None``.

Primary identifiers win over tags on collision, and the first asset to claim
a tag keeps it.

Usage::

    index = AssetIndex(assets)
    asset_id = index.resolve(work_order.asset_id)   # Optional[str]
"""

from __future__ import annotations

from typing import Any, Iterable, Optional

from cmms_insights.models.asset import Asset


def normalize_ref(ref: Any) -> Optional[str]:
    """Return a comparable form of an asset reference, or ``None`` if blank."""
    if ref is None:
        return None
    text = str(ref).strip()
    return text or None


class AssetIndex:
    """Lookup from any asset reference to its primary identifier and model.

    Attributes:
        assets: Primary ``asset_id`` → ``Asset``.
    """

    def __init__(self, assets: Iterable[Asset]) -> None:
        self.assets: dict[str, Asset] = {}
        self._tags: dict[str, str] = {}

        assets = list(assets)
        for asset in assets:
            key = normalize_ref(asset.asset_id)
            if key is not None and key not in self.assets:
                self.assets[key] = asset

        for asset in assets:
            primary = normalize_ref(asset.asset_id)
            for tag in (asset.nfc_tag_id, asset.rfid_tag_id):
                key = normalize_ref(tag)
                if key is None or key in self.assets or key in self._tags:
                    continue
                self._tags[key] = primary

    def resolve(self, ref: Any) -> Optional[str]:
        """Resolve a reference to a primary ``asset_id`` (``None`` if unknown)."""
        key = normalize_ref(ref)
        if key is None:
            return None
        if key in self.assets:
            return key
        return self._tags.get(key)

    def get(self, ref: Any) -> Optional[Asset]:
        """Return the ``Asset`` a reference points at, or ``None``."""
        asset_id = self.resolve(ref)
        return self.assets.get(asset_id) if asset_id is not None else None

    def __len__(self) -> int:
        return len(self.assets)

