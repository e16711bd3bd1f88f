"""
Build the store a command should use from ``AppConfig``.

    local SQLite only            — remote disabled or not fully configured
    FallbackStore(SQLite, REST)  — remote enabled with URL and API key
"""

from __future__ import annotations

import logging
import sqlite3
from contextlib import ExitStack, contextmanager
from typing import Generator, Optional

from cmms_insights.config import AppConfig
from cmms_insights.db.connection import get_connection
from cmms_insights.db.schema import apply_schema
from cmms_insights.store.base import MaintenanceStore
from cmms_insights.store.fallback import FallbackStore
from cmms_insights.store.remote import PostgrestClient
from cmms_insights.store.sqlite_store import SqliteStore

logger = logging.getLogger(__name__)


@contextmanager
def open_store(
    config: AppConfig,
    conn:   Optional[sqlite3.Connection] = None,
) -> Generator[MaintenanceStore, None, None]:
    """Open the configured store for the duration of a ``with`` block.

    Args:
        config: Application configuration.
        conn:   Connection to build the local store on. When ``None`` one is
                opened from ``config.database`` and committed (or rolled back)
                when the block exits. The schema is applied either way.
    """
    with ExitStack() as stack:
        if conn is None:
            db = config.database
            conn = stack.enter_context(
                get_connection(db.db_path, db.wal_mode, db.busy_timeout_ms)
            )
        apply_schema(conn)
        local = SqliteStore(conn)

        if not config.remote.is_configured:
            yield local
            return

        logger.info("Remote store enabled: %s", config.remote.url)
        client = stack.enter_context(
            PostgrestClient(
                config.remote.url,
                config.remote.api_key,
                timeout=config.remote.timeout_seconds,
            )
        )
        yield FallbackStore(local, client)
