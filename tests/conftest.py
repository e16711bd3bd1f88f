"""
Shared pytest fixtures for the CMMS insights test suite.

Provides:
  - ``now``: the fixed reference time every time-dependent test uses.
  - ``in_memory_db``: a fresh in-memory SQLite connection with the full
    schema applied.
  - A small sample hospital (locations, users, assets, parts, work orders,
    movement logs) and stores pre-loaded with it.
  - ``app_config`` / ``config_file``: configuration pointing every output
    path into ``tmp_path``.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import datetime, timezone
from pathlib import Path
from typing import Generator

import pytest

from cmms_insights.config import AppConfig, DatabaseConfig, LoggingConfig, ReportingConfig
from cmms_insights.db.schema import apply_schema
from cmms_insights.models.asset import Asset, Location
from cmms_insights.models.inventory import InventoryPart, MovementLog
from cmms_insights.models.meta import RunMetadata
from cmms_insights.models.user import User
from cmms_insights.models.work_order import PartUsage, WorkOrder
from cmms_insights.store.base import StoreSnapshot
from cmms_insights.store.memory import InMemoryStore
from cmms_insights.store.sqlite_store import SqliteStore
from cmms_insights.taxonomy.maintenance_taxonomy import (
    AssetStatus,
    Priority,
    UserRole,
    WorkOrderStatus,
    WorkOrderType,
)

NOW = datetime(2026, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def now() -> datetime:
    return NOW


# ── Database fixture ──────────────────────────────────────────────────────────

@pytest.fixture
def in_memory_db() -> Generator[sqlite3.Connection, None, None]:
    """Yield a fresh in-memory SQLite connection with the full schema applied."""
    conn = sqlite3.connect(":memory:")
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA foreign_keys = ON;")
    apply_schema(conn)
    yield conn
    conn.close()


# ── Sample hospital ───────────────────────────────────────────────────────────

@pytest.fixture
def sample_locations() -> list[Location]:
    return [
        Location(location_id=101, name="Radio-1", department="Radiology"),
        Location(location_id=102, name="ICU-4", department="Intensive Care"),
        Location(location_id=104, name="ICU-1", department="Intensive Care"),
        Location(location_id=119, name="Maint-Shop", department="Maintenance"),
    ]


@pytest.fixture
def sample_users() -> list[User]:
    return [
        User(user_id=1, name="Dr. Sarah Smith", role=UserRole.SUPERVISOR, location_id=101),
        User(user_id=2, name="Abdalla Yasir", role=UserRole.TECHNICIAN, location_id=119),
        User(user_id=3, name="Nurse Jackie", role=UserRole.NURSE, location_id=102),
        User(user_id=4, name="Mike Ross", role=UserRole.ENGINEER, location_id=104),
    ]


@pytest.fixture
def sample_assets() -> list[Asset]:
    """Three devices: two Servo-U ventilators (one RFID-tagged) and a pump."""
    return [
        Asset(
            asset_id="NFC-2001",
            nfc_tag_id="NFC-2001",
            rfid_tag_id="E2000017000007D1",
            name="Ventilator",
            model="Servo-U",
            location_id=102,
            status=AssetStatus.RUNNING,
            purchase_date="2020-03-01",
            operating_hours=5200,
            last_calibration_date="2025-01-10",
            next_calibration_date="2026-01-10",
        ),
        Asset(
            asset_id="NFC-2002",
            nfc_tag_id="NFC-2002",
            name="Ventilator",
            model="Servo-U",
            location_id=104,
            status=AssetStatus.RUNNING,
            purchase_date="2024-07-01",
            operating_hours=300,
            next_calibration_date="2027-01-01",
        ),
        Asset(
            asset_id="NFC-2003",
            nfc_tag_id="NFC-2003",
            name="Infusion Pump",
            model="Baxter Sigma",
            location_id=101,
            status=AssetStatus.DOWN,
            purchase_date="2026-01-05",
            operating_hours=0,
        ),
    ]


@pytest.fixture
def sample_inventory() -> list[InventoryPart]:
    return [
        InventoryPart(part_id=4, part_name="Ventilator Filter", current_stock=0, min_reorder_level=20, cost=8),
        InventoryPart(part_id=5, part_name="Flow Sensor", current_stock=12, min_reorder_level=3, cost=120),
        InventoryPart(part_id=6, part_name="O2 Cell", current_stock=6, min_reorder_level=2, cost=90),
    ]


@pytest.fixture
def sample_work_orders() -> list[WorkOrder]:
    """Servo-U history plus an open queue for technician 2.

    Closed corrective Servo-U orders: 7001 (2h, part 5 x1), 7002 (4h via the
    RFID tag, part 5 x2 and part 6 x1) and 7003 (no start time).
    """
    return [
        WorkOrder(
            wo_id=7001, asset_id="NFC-2001", type=WorkOrderType.CORRECTIVE,
            priority=Priority.HIGH, assigned_to_id=2, status=WorkOrderStatus.CLOSED,
            created_at="2026-04-01T08:00:00Z", start_time="2026-04-01T09:00:00Z",
            close_time="2026-04-01T11:00:00Z", parts_used=[PartUsage(part_id=5, quantity=1)],
        ),
        WorkOrder(
            wo_id=7002, asset_id="E2000017000007D1", type=WorkOrderType.CORRECTIVE,
            assigned_to_id=2, status=WorkOrderStatus.CLOSED,
            created_at="2026-05-02T08:00:00Z", start_time="2026-05-02T10:00:00Z",
            close_time="2026-05-02T14:00:00Z",
            parts_used=[PartUsage(part_id=5, quantity=2), PartUsage(part_id=6, quantity=1)],
        ),
        WorkOrder(
            wo_id=7003, asset_id="NFC-2002", type=WorkOrderType.CORRECTIVE,
            assigned_to_id=4, status=WorkOrderStatus.CLOSED,
            created_at="2025-11-20T08:00:00Z", close_time="2025-11-21T08:00:00Z",
        ),
        WorkOrder(
            wo_id=7004, asset_id="NFC-2001", type=WorkOrderType.PREVENTIVE,
            assigned_to_id=2, status=WorkOrderStatus.OPEN, created_at="2026-06-01T08:00:00Z",
        ),
        WorkOrder(
            wo_id=7005, asset_id="NFC-2003", type=WorkOrderType.CORRECTIVE,
            assigned_to_id=2, status=WorkOrderStatus.IN_PROGRESS,
            created_at="2026-06-10T08:00:00Z", start_time="2026-06-10T09:00:00Z",
        ),
    ]


@pytest.fixture
def sample_movement_logs() -> list[MovementLog]:
    return [
        MovementLog(log_id=1, asset_id="NFC-2001", from_location_id=101, to_location_id=102,
                    timestamp="2026-03-01T10:00:00Z", user_id=2),
        MovementLog(log_id=2, asset_id="E2000017000007D1", from_location_id=104, to_location_id=102,
                    timestamp="2026-05-20T10:00:00Z", user_id=3),
        MovementLog(log_id=3, asset_id="NFC-2002", from_location_id=102, to_location_id=104,
                    timestamp="2025-06-01T10:00:00Z", user_id=3),
    ]


@pytest.fixture
def sample_snapshot(
    sample_locations,
    sample_users,
    sample_assets,
    sample_inventory,
    sample_work_orders,
    sample_movement_logs,
) -> StoreSnapshot:
    return StoreSnapshot(
        locations=sample_locations,
        users=sample_users,
        assets=sample_assets,
        inventory=sample_inventory,
        work_orders=sample_work_orders,
        movement_logs=sample_movement_logs,
        incidents=[],
    )


@pytest.fixture
def memory_store(sample_snapshot) -> InMemoryStore:
    return InMemoryStore(sample_snapshot)


@pytest.fixture
def sqlite_store(in_memory_db, sample_snapshot) -> SqliteStore:
    store = SqliteStore(in_memory_db)
    store.seed(sample_snapshot)
    return store


@pytest.fixture(params=["memory", "sqlite"])
def any_store(request, sample_snapshot, in_memory_db):
    """The sample hospital in each store implementation."""
    if request.param == "memory":
        return InMemoryStore(sample_snapshot)
    store = SqliteStore(in_memory_db)
    store.seed(sample_snapshot)
    return store


@pytest.fixture
def sample_run_metadata() -> RunMetadata:
    return RunMetadata(
        run_slug="test-run-uuid-0001",
        pipeline_stage="risk_refresh",
        status="started",
        config_snapshot={"database": {"db_path": ":memory:"}, "debug": True},
        started_at=NOW,
    )


# ── Logging ──────────────────────────────────────────────────────────────────

@pytest.fixture
def restore_logging() -> Generator[None, None, None]:
    """Put the root logger back the way it was after ``configure_logging`` runs."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


# ── Configuration ─────────────────────────────────────────────────────────────

@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Default config with the database, reports and log file under ``tmp_path``."""
    return AppConfig(
        database=DatabaseConfig(db_path=str(tmp_path / "db" / "test.db")),
        reporting=ReportingConfig(output_dir=str(tmp_path / "reports")),
        logging=LoggingConfig(log_file=""),
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """A TOML config file equivalent to ``app_config``."""
    path = tmp_path / "config" / "test.toml"
    path.parent.mkdir(parents=True, exist_ok=True)
    db_path = (tmp_path / "db" / "test.db").as_posix()
    report_dir = (tmp_path / "reports").as_posix()
    path.write_text(
        "\n".join([
            "[database]",
            f'db_path = "{db_path}"',
            "",
            "[reporting]",
            f'output_dir = "{report_dir}"',
            "",
            "[logging]",
            'level = "WARNING"',
            'log_file = ""',
            "",
            "[demo]",
            "generated_assets = 5",
            "generated_parts = 5",
            "generated_work_orders = 15",
        ]),
        encoding="utf-8",
    )
    return path
