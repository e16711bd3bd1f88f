"""Tests for SqliteStore specifics — persistence across connections and indexed lookups."""

from __future__ import annotations

from cmms_insights.db.connection import get_connection
from cmms_insights.db.schema import apply_schema
from cmms_insights.store.sqlite_store import SqliteStore
from cmms_insights.taxonomy.maintenance_taxonomy import WorkOrderStatus


class TestPersistence:
    def test_seed_survives_reconnect(self, tmp_path, sample_snapshot):
        db_path = str(tmp_path / "cmms.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
            SqliteStore(conn).seed(sample_snapshot)

        with get_connection(db_path) as conn:
            store = SqliteStore(conn)
            assert len(store.list_assets()) == 3
            assert store.get_asset("E2000017000007D1").asset_id == "NFC-2001"

    def test_workflow_step_committed(self, tmp_path, sample_snapshot, now):
        db_path = str(tmp_path / "cmms.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
            store = SqliteStore(conn)
            store.seed(sample_snapshot)
            store.close_work_order(7004, now=now)

        with get_connection(db_path) as conn:
            assert SqliteStore(conn).get_work_order(7004).status == WorkOrderStatus.CLOSED

    def test_store_does_not_commit_on_its_own(self, tmp_path, sample_snapshot):
        db_path = str(tmp_path / "cmms.db")
        with get_connection(db_path) as conn:
            apply_schema(conn)
            SqliteStore(conn).seed(sample_snapshot)
            conn.rollback()
            assert SqliteStore(conn).list_assets() == []


class TestIndexedLookups:
    def test_technicians_from_role_index(self, sqlite_store):
        assert [u.name for u in sqlite_store.technicians()] == ["Abdalla Yasir", "Mike Ross"]

    def test_assignee_orders(self, sqlite_store):
        assert [wo.wo_id for wo in sqlite_store.technician_work_orders(2)] == [7001, 7002, 7004, 7005]

    def test_missing_ids(self, sqlite_store):
        assert sqlite_store.get_work_order(1) is None
        assert sqlite_store.get_part(1) is None
        assert sqlite_store.get_user(99) is None
