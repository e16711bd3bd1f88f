"""
SQLite schema for the local maintenance database.

Every statement is guarded with ``IF NOT EXISTS``, so ``apply_schema()`` can
run on every startup and in every test.

Asset references in ``work_orders``, ``incidents`` and ``movement_logs`` are
plain TEXT without a foreign key: they may hold a tag identifier instead of
the primary ``asset_id`` and are resolved in Python
(``cmms_insights.utils.identifiers``).

``work_orders.parts_used``, ``approvals`` and ``repair`` are JSON text,
matching the nested objects the remote database returns.
"""

from __future__ import annotations

import logging
import sqlite3

logger = logging.getLogger(__name__)

# ── DDL statements ─────────────────────────────────────────────────────────────

_DDL_LOCATIONS = """
CREATE TABLE IF NOT EXISTS locations (
    location_id  INTEGER PRIMARY KEY,
    name         TEXT    NOT NULL,
    department   TEXT    NOT NULL,
    city         TEXT,
    building     TEXT,
    room         TEXT
);
"""

_DDL_USERS = """
CREATE TABLE IF NOT EXISTS users (
    user_id      INTEGER PRIMARY KEY,
    name         TEXT    NOT NULL,
    role         TEXT    NOT NULL,
    email        TEXT    NOT NULL DEFAULT '',
    location_id  INTEGER,
    phone_number TEXT,
    department   TEXT
);
CREATE INDEX IF NOT EXISTS idx_users_role ON users (role);
"""

_DDL_ASSETS = """
CREATE TABLE IF NOT EXISTS assets (
    asset_id                     TEXT    PRIMARY KEY,
    nfc_tag_id                   TEXT,
    rfid_tag_id                  TEXT,
    name                         TEXT    NOT NULL,
    model                        TEXT    NOT NULL,
    manufacturer                 TEXT,
    serial_number                TEXT,
    location_id                  INTEGER,
    status                       TEXT    NOT NULL DEFAULT 'Running',
    purchase_date                TEXT,
    warranty_expiration          TEXT,
    operating_hours              REAL    NOT NULL DEFAULT 0,
    risk_score                   INTEGER NOT NULL DEFAULT 0
                                 CHECK (risk_score BETWEEN 0 AND 100),
    last_calibration_date        TEXT,
    next_calibration_date        TEXT,
    purchase_cost                REAL,
    accumulated_maintenance_cost REAL
);
CREATE INDEX IF NOT EXISTS idx_assets_model ON assets (model);
CREATE INDEX IF NOT EXISTS idx_assets_nfc ON assets (nfc_tag_id);
"""

_DDL_WORK_ORDERS = """
CREATE TABLE IF NOT EXISTS work_orders (
    wo_id             INTEGER PRIMARY KEY,
    incident_id       INTEGER,
    asset_id          TEXT    NOT NULL,
    type              TEXT    NOT NULL,
    priority          TEXT    NOT NULL DEFAULT 'Medium',
    assigned_to_id    INTEGER,
    description       TEXT    NOT NULL DEFAULT '',
    status            TEXT    NOT NULL DEFAULT 'Open',
    start_time        TEXT,
    close_time        TEXT,
    created_at        TEXT,
    parts_used        TEXT    NOT NULL DEFAULT '[]',
    nurse_rating      INTEGER,
    is_first_time_fix INTEGER,
    approvals         TEXT    NOT NULL DEFAULT '{}',
    repair            TEXT
);
CREATE INDEX IF NOT EXISTS idx_work_orders_asset ON work_orders (asset_id);
CREATE INDEX IF NOT EXISTS idx_work_orders_assignee ON work_orders (assigned_to_id, status);
"""

_DDL_INVENTORY = """
CREATE TABLE IF NOT EXISTS inventory (
    part_id           INTEGER PRIMARY KEY,
    part_name         TEXT    NOT NULL,
    current_stock     INTEGER NOT NULL DEFAULT 0,
    min_reorder_level INTEGER NOT NULL DEFAULT 0,
    cost              REAL    NOT NULL DEFAULT 0
);
"""

_DDL_MOVEMENT_LOGS = """
CREATE TABLE IF NOT EXISTS movement_logs (
    log_id           INTEGER PRIMARY KEY,
    asset_id         TEXT    NOT NULL,
    from_location_id INTEGER,
    to_location_id   INTEGER,
    timestamp        TEXT,
    user_id          INTEGER
);
CREATE INDEX IF NOT EXISTS idx_movement_logs_asset ON movement_logs (asset_id);
"""

_DDL_INCIDENTS = """
CREATE TABLE IF NOT EXISTS incidents (
    incident_id         INTEGER PRIMARY KEY,
    timestamp           TEXT    NOT NULL,
    asset_id            TEXT    NOT NULL,
    reported_by_user_id INTEGER,
    report_type         TEXT    NOT NULL DEFAULT 'Corrective',
    description         TEXT    NOT NULL DEFAULT '',
    status              TEXT    NOT NULL DEFAULT 'Pending'
);
"""

_DDL_RUN_METADATA = """
CREATE TABLE IF NOT EXISTS run_metadata (
    run_id          INTEGER PRIMARY KEY AUTOINCREMENT,
    run_slug        TEXT    NOT NULL UNIQUE,
    pipeline_stage  TEXT    NOT NULL,
    status          TEXT    NOT NULL DEFAULT 'started',
    config_snapshot TEXT    NOT NULL,
    rows_processed  INTEGER NOT NULL DEFAULT 0,
    error_message   TEXT,
    started_at      TEXT    NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%SZ', 'now')),
    finished_at     TEXT
);
"""

_ALL_DDL: list[str] = [
    _DDL_LOCATIONS,
    _DDL_USERS,
    _DDL_ASSETS,
    _DDL_WORK_ORDERS,
    _DDL_INVENTORY,
    _DDL_MOVEMENT_LOGS,
    _DDL_INCIDENTS,
    _DDL_RUN_METADATA,
]

# Table names for introspection / tests
ALL_TABLE_NAMES = [
    "locations",
    "users",
    "assets",
    "work_orders",
    "inventory",
    "movement_logs",
    "incidents",
    "run_metadata",
]


def apply_schema(conn: sqlite3.Connection) -> None:
    """Create every table and index that does not exist yet.

    Args:
        conn: An open ``sqlite3.Connection``.
    """
    for ddl in _ALL_DDL:
        for statement in _split_ddl(ddl):
            conn.execute(statement)

    conn.commit()
    logger.info("Schema applied: %d tables verified.", len(ALL_TABLE_NAMES))


def _split_ddl(ddl: str) -> list[str]:
    return [s.strip() for s in ddl.split(";") if s.strip()]


def get_existing_tables(conn: sqlite3.Connection) -> list[str]:
    """Return the table names present in the database, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]


def get_existing_indexes(conn: sqlite3.Connection) -> list[str]:
    """Return the explicitly created index names, sorted."""
    rows = conn.execute(
        "SELECT name FROM sqlite_master WHERE type='index' AND name LIKE 'idx_%' ORDER BY name;"
    ).fetchall()
    return [row["name"] for row in rows]
