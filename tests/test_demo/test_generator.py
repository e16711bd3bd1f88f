"""
Tests for cmms_insights.demo.

What we test
------------
1. Determinism: same seed and anchor → identical snapshot; another seed differs.
2. Shape: reference rows are kept, generated counts match the arguments,
   primary keys are unique.
3. Referential sanity: every generated order and move resolves to a known
   asset, some through the RFID tag; generated dates lie in the year before now.
4. Live simulation helpers.
"""

from __future__ import annotations

import random
from datetime import timedelta

import pytest

from cmms_insights.demo import seed_data
from cmms_insights.demo.generator import (
    DemoDataGenerator,
    simulate_rfid_scan,
    simulate_status_flip,
)
from cmms_insights.store.memory import InMemoryStore
from cmms_insights.taxonomy.maintenance_taxonomy import AssetStatus
from cmms_insights.utils.identifiers import AssetIndex
from cmms_insights.utils.time_utils import parse_timestamp


@pytest.fixture
def snapshot(now):
    return DemoDataGenerator(seed=42, now=now).build()


# ── Determinism ───────────────────────────────────────────────────────────────

class TestDeterminism:
    def test_same_seed_same_snapshot(self, now):
        first = DemoDataGenerator(seed=7, now=now).build()
        second = DemoDataGenerator(seed=7, now=now).build()
        assert first == second

    def test_build_twice_on_one_generator(self, now):
        gen = DemoDataGenerator(seed=7, now=now)
        assert gen.build() == gen.build()

    def test_different_seed_differs(self, now):
        first = DemoDataGenerator(seed=1, now=now).build()
        second = DemoDataGenerator(seed=2, now=now).build()
        assert first.work_orders != second.work_orders


# ── Shape ─────────────────────────────────────────────────────────────────────

class TestShape:
    def test_default_counts(self, snapshot):
        assert len(snapshot.locations) == len(seed_data.LOCATIONS)
        assert len(snapshot.assets) == len(seed_data.ASSETS) + 20
        assert len(snapshot.inventory) == len(seed_data.INVENTORY) + 20
        assert len(snapshot.work_orders) == len(seed_data.WORK_ORDERS) + 60
        assert len(snapshot.users) == len(seed_data.USERS) + 3
        assert len(snapshot.incidents) == len(seed_data.INCIDENTS)

    def test_custom_counts(self, now):
        snap = DemoDataGenerator(
            seed=1, now=now, generated_assets=2, generated_parts=0, generated_work_orders=5,
        ).build()
        assert len(snap.assets) == len(seed_data.ASSETS) + 2
        assert len(snap.inventory) == len(seed_data.INVENTORY)
        assert len(snap.work_orders) == len(seed_data.WORK_ORDERS) + 5

    def test_generated_technicians_capped(self, now):
        snap = DemoDataGenerator(seed=1, now=now, generated_technicians=50).build()
        assert len(snap.users) == len(seed_data.USERS) + len(seed_data.GENERATED_TECHNICIAN_NAMES)

    def test_reference_rows_kept(self, snapshot):
        ids = {a.asset_id for a in snapshot.assets}
        assert {"NFC-1001", "NFC-1040", "17678"} <= ids
        assert snapshot.work_orders[0].wo_id == 5001

    @pytest.mark.parametrize("collection, key", [
        ("assets", "asset_id"),
        ("work_orders", "wo_id"),
        ("inventory", "part_id"),
        ("users", "user_id"),
        ("movement_logs", "log_id"),
    ])
    def test_primary_keys_unique(self, snapshot, collection, key):
        values = [getattr(r, key) for r in getattr(snapshot, collection)]
        assert len(values) == len(set(values))


# ── Referential sanity ────────────────────────────────────────────────────────

class TestReferences:
    def test_orders_and_moves_resolve(self, snapshot):
        index = AssetIndex(snapshot.assets)
        assert all(index.resolve(wo.asset_id) for wo in snapshot.work_orders)
        assert all(index.resolve(m.asset_id) for m in snapshot.movement_logs)

    def test_some_orders_use_rfid_tags(self, snapshot):
        rfid_tags = {a.rfid_tag_id for a in snapshot.assets if a.rfid_tag_id}
        assert any(wo.asset_id in rfid_tags for wo in snapshot.work_orders)

    def test_generated_orders_skip_scrapped_assets(self, snapshot):
        index = AssetIndex(snapshot.assets)
        generated = [wo for wo in snapshot.work_orders if wo.wo_id >= 6001]
        assert all(index.get(wo.asset_id).status != AssetStatus.SCRAPPED for wo in generated)

    def test_generated_dates_within_last_year(self, snapshot, now):
        generated = [wo for wo in snapshot.work_orders if wo.wo_id >= 6001]
        for wo in generated:
            created = parse_timestamp(wo.created_at)
            assert now - timedelta(days=366) <= created <= now

    def test_closed_generated_orders_have_valid_durations(self, snapshot):
        for wo in snapshot.work_orders:
            if wo.wo_id >= 6001 and wo.is_closed:
                assert parse_timestamp(wo.close_time) > parse_timestamp(wo.start_time)

    def test_assignees_are_technicians(self, snapshot):
        tech_ids = {u.user_id for u in snapshot.technicians}
        generated = [wo for wo in snapshot.work_orders if wo.wo_id >= 6001]
        assert all(wo.assigned_to_id in tech_ids for wo in generated)


# ── Live simulation ───────────────────────────────────────────────────────────

class TestSimulation:
    def test_status_flip_writes_only_on_change(self, memory_store):
        rng = random.Random(3)
        current = {a.asset_id: a.status for a in memory_store.list_assets()}
        for _ in range(30):
            result = simulate_status_flip(memory_store, rng)
            if result is not None:
                asset_id, status = result
                assert current[asset_id] != status
                assert memory_store.get_asset(asset_id).status == status
                current[asset_id] = status
        assert {a.asset_id: a.status for a in memory_store.list_assets()} == current

    def test_status_flip_ignores_scrapped(self, now):
        store = InMemoryStore()
        snap = DemoDataGenerator(seed=1, now=now, generated_assets=0).build()
        store.save_asset(next(a for a in snap.assets if a.status == AssetStatus.SCRAPPED))
        assert simulate_status_flip(store, random.Random(0)) is None

    def test_status_flip_empty_store(self):
        assert simulate_status_flip(InMemoryStore(), random.Random(0)) is None

    def test_rfid_scan(self, sample_assets):
        assert simulate_rfid_scan(sample_assets, random.Random(0)) in sample_assets
        assert simulate_rfid_scan([], random.Random(0)) is None
