"""
SQLite connection management for the local maintenance database.

``get_connection()`` yields a connection that:
  - uses ``sqlite3.Row`` so repositories can read columns by name;
  - runs in WAL mode with a busy timeout, so the dashboard can read while a
    CLI command writes;
  - commits when the block exits cleanly and rolls back when it raises.

Usage::

    from cmms_insights.db.connection import get_connection

    with get_connection("data/db/cmms.db") as conn:
        SqliteStore(conn).update_asset_risk_score("NFC-1002", 72)
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator

logger = logging.getLogger(__name__)

MEMORY_DB = ":memory:"


@contextmanager
def get_connection(
    db_path:         str,
    wal_mode:        bool = True,
    busy_timeout_ms: int = 5000,
) -> Generator[sqlite3.Connection, None, None]:
    """Open, configure and yield a SQLite connection.

    Parent directories of ``db_path`` are created on first use.

    Args:
        db_path:         Database file, or ``":memory:"`` for a throwaway DB.
        wal_mode:        Enable write-ahead logging.
        busy_timeout_ms: How long a locked database is retried before
                         ``sqlite3.OperationalError`` is raised.

    Yields:
        The open connection. It is closed when the block exits.
    """
    if db_path != MEMORY_DB:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(db_path, timeout=busy_timeout_ms / 1000)
    conn.row_factory = sqlite3.Row
    logger.debug("Opened SQLite connection to %s", db_path)

    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(f"PRAGMA busy_timeout = {busy_timeout_ms};")
        if wal_mode and db_path != MEMORY_DB:
            conn.execute("PRAGMA journal_mode = WAL;")

        yield conn
        conn.commit()

    except Exception:
        conn.rollback()
        raise

    finally:
        conn.close()
