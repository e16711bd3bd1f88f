"""
Base repository with the SQL helpers every table repository shares.

Repositories receive an open ``sqlite3.Connection`` (usually from
``get_connection()``) and never commit themselves; the connection owner
decides the transaction boundary.

All SQL is explicit. Repositories accept and return Pydantic models, never
raw rows.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import Any, Optional, Sequence

logger = logging.getLogger(__name__)

Params = tuple[Any, ...] | dict[str, Any]


class BaseRepository:
    """Shared SQL execution helpers.

    Attributes:
        conn: The active ``sqlite3.Connection``.
    """

    def __init__(self, conn: sqlite3.Connection) -> None:
        self.conn = conn

    def execute(self, sql: str, params: Params = ()) -> sqlite3.Cursor:
        """Execute one statement with ``?`` or ``:name`` placeholders."""
        logger.debug("SQL: %s | params: %s", sql.strip(), params)
        return self.conn.execute(sql, params)

    def executemany(self, sql: str, params_list: list[Params]) -> sqlite3.Cursor:
        """Execute one statement once per parameter set."""
        logger.debug("SQL (many): %s | count: %d", sql.strip(), len(params_list))
        return self.conn.executemany(sql, params_list)

    def fetchone(self, sql: str, params: Params = ()) -> Optional[sqlite3.Row]:
        return self.execute(sql, params).fetchone()

    def fetchall(self, sql: str, params: Params = ()) -> list[sqlite3.Row]:
        return self.execute(sql, params).fetchall()

    def last_insert_rowid(self) -> int:
        row = self.fetchone("SELECT last_insert_rowid() AS rowid;")
        assert row is not None
        return int(row["rowid"])

    def upsert(
        self,
        table:   str,
        key:     str,
        columns: Sequence[str],
        values:  Sequence[Any],
    ) -> None:
        """Insert a row, or update every non-key column when ``key`` exists.

        ``table``, ``key`` and ``columns`` come from repository code, never
        from user input.

        Args:
            table:   Target table.
            key:     Primary-key column used as the conflict target.
            columns: Column names, in the same order as ``values``.
            values:  Column values.
        """
        placeholders = ", ".join("?" for _ in columns)
        updates = ", ".join(f"{col} = excluded.{col}" for col in columns if col != key)
        self.execute(
            f"""
            INSERT INTO {table} ({", ".join(columns)})
            VALUES ({placeholders})
            ON CONFLICT({key}) DO UPDATE SET {updates};
            """,
            tuple(values),
        )
