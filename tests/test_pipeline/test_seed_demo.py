"""
Tests for SeedDemoStage.

What we test
------------
1. Seeding an empty store writes the generated snapshot.
2. Re-running is idempotent (upsert).
3. The seed override and ``[demo]`` counts are honoured.
4. With a FallbackStore the local side is seeded and an empty remote is
   copied; a populated remote is left alone.
"""

from __future__ import annotations

import json

import httpx

from cmms_insights.config import DemoConfig
from cmms_insights.demo import seed_data
from cmms_insights.pipeline.seed_demo import SeedDemoStage
from cmms_insights.store.fallback import FallbackStore
from cmms_insights.store.memory import InMemoryStore
from cmms_insights.store.remote import PostgrestClient


def _small(app_config):
    return app_config.model_copy(update={
        "demo": DemoConfig(generated_assets=3, generated_parts=2, generated_work_orders=10),
    })


class TestSeedDemo:
    def test_seeds_empty_store(self, app_config, in_memory_db, now):
        store = InMemoryStore()
        run = SeedDemoStage(_small(app_config), conn=in_memory_db).run(store=store, now=now)
        assert run.status == "success"
        snap = store.snapshot()
        assert run.rows_processed == sum(
            len(records) for records in (
                snap.locations, snap.users, snap.assets, snap.inventory,
                snap.work_orders, snap.movement_logs, snap.incidents,
            )
        )
        assert len(store.list_assets()) == len(seed_data.ASSETS) + 3
        assert len(store.list_work_orders()) == len(seed_data.WORK_ORDERS) + 10

    def test_rerun_is_idempotent(self, app_config, in_memory_db, now):
        store = InMemoryStore()
        stage = SeedDemoStage(_small(app_config), conn=in_memory_db)
        stage.run(store=store, now=now)
        first = store.snapshot()
        stage.run(store=store, now=now)
        assert store.snapshot() == first

    def test_seed_override(self, app_config, in_memory_db, now):
        a, b = InMemoryStore(), InMemoryStore()
        stage = SeedDemoStage(_small(app_config), conn=in_memory_db)
        stage.run(store=a, now=now, seed=1)
        stage.run(store=b, now=now, seed=2)
        assert a.list_work_orders() != b.list_work_orders()

    def test_sqlite_store(self, app_config, sqlite_store, in_memory_db, now):
        SeedDemoStage(_small(app_config), conn=in_memory_db).run(store=sqlite_store, now=now)
        assert sqlite_store.get_asset("NFC-1002").model == "Baxter Sigma"
        # The sample fixture rows stay alongside the demo rows.
        assert sqlite_store.get_asset("NFC-2003") is not None


class TestSeedDemoRemote:
    @staticmethod
    def _remote(count: int):
        posted: dict[str, list] = {}

        def handler(request: httpx.Request) -> httpx.Response:
            table = request.url.path.rsplit("/", 1)[-1]
            if request.method == "HEAD":
                return httpx.Response(200, headers={"Content-Range": f"*/{count}"})
            if request.method == "POST":
                posted.setdefault(table, []).extend(json.loads(request.content))
                return httpx.Response(201)
            return httpx.Response(200, json=[])

        client = PostgrestClient("https://db.example", "k", transport=httpx.MockTransport(handler))
        return client, posted

    def test_empty_remote_copied(self, app_config, in_memory_db, now):
        client, posted = self._remote(count=0)
        local = InMemoryStore()
        SeedDemoStage(_small(app_config), conn=in_memory_db).run(
            store=FallbackStore(local, client), now=now
        )
        assert len(local.list_assets()) == len(seed_data.ASSETS) + 3
        assert len(posted["assets"]) == len(seed_data.ASSETS) + 3
        assert len(posted["locations"]) == len(seed_data.LOCATIONS)

    def test_populated_remote_left_alone(self, app_config, in_memory_db, now):
        client, posted = self._remote(count=12)
        local = InMemoryStore()
        SeedDemoStage(_small(app_config), conn=in_memory_db).run(
            store=FallbackStore(local, client), now=now
        )
        assert posted == {}
        assert len(local.list_assets()) == len(seed_data.ASSETS) + 3
