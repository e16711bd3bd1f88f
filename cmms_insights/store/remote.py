"""
Minimal client for a PostgREST-compatible remote database (e.g. Supabase).

Endpoints used::

    GET  {base}/rest/v1/{table}?select=*                 → list rows
    POST {base}/rest/v1/{table}?on_conflict={key}        → upsert rows
         Prefer: resolution=merge-duplicates
    HEAD {base}/rest/v1/{table}?select=*                 → exact row count
         Prefer: count=exact  (answer in Content-Range: */<n>)

Every request carries the project key twice, as ``apikey`` and as a bearer
token. Nothing here retries; callers decide what a failure means (the
``FallbackStore`` logs it and uses local state).

Credential setup (.env, gitignored)::

    CMMS_INSIGHTS_REMOTE_URL=https://<project>.supabase.co
    CMMS_INSIGHTS_REMOTE_API_KEY=<anon key>
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from cmms_insights.store.base import StoreSnapshot

logger = logging.getLogger(__name__)

REST_PREFIX = "/rest/v1"

# table → primary-key column (upsert conflict target)
TABLE_KEYS: dict[str, str] = {
    "locations":     "location_id",
    "users":         "user_id",
    "assets":        "asset_id",
    "inventory":     "part_id",
    "incidents":     "incident_id",
    "work_orders":   "wo_id",
    "movement_logs": "log_id",
}


class PostgrestClient:
    """Synchronous httpx client for the remote maintenance tables.

    Args:
        base_url:  Project URL, without the ``/rest/v1`` suffix.
        api_key:   Project API key.
        timeout:   Per-request timeout in seconds.
        transport: Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url:  str,
        api_key:   str,
        timeout:   float = 10.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=f"{self.base_url}{REST_PREFIX}",
            headers={
                "apikey": api_key,
                "Authorization": f"Bearer {api_key}",
                "Accept": "application/json",
            },
            timeout=timeout,
            transport=transport,
        )

    def fetch_rows(self, table: str) -> list[dict[str, Any]]:
        """Return every row of ``table``.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
            ValueError: If the body is not a JSON array.
        """
        resp = self._client.get(f"/{table}", params={"select": "*"})
        resp.raise_for_status()
        rows = resp.json()
        if not isinstance(rows, list):
            raise ValueError(f"Expected a JSON array from {table}, got {type(rows).__name__}.")
        logger.debug("Fetched %d rows from remote %s", len(rows), table)
        return rows

    def upsert_rows(
        self,
        table:       str,
        rows:        list[dict[str, Any]],
        on_conflict: Optional[str] = None,
    ) -> None:
        """Insert ``rows`` into ``table``, merging on the primary key.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
        """
        if not rows:
            return
        key = on_conflict or TABLE_KEYS[table]
        resp = self._client.post(
            f"/{table}",
            params={"on_conflict": key},
            json=rows,
            headers={"Prefer": "resolution=merge-duplicates,return=minimal"},
        )
        resp.raise_for_status()
        logger.debug("Upserted %d rows into remote %s", len(rows), table)

    def count_rows(self, table: str) -> int:
        """Exact row count of ``table`` from the ``Content-Range`` header.

        Raises:
            httpx.HTTPError: On transport failure or non-2xx status.
            ValueError: If the server did not report a count.
        """
        resp = self._client.head(
            f"/{table}",
            params={"select": "*"},
            headers={"Prefer": "count=exact"},
        )
        resp.raise_for_status()
        content_range = resp.headers.get("content-range", "")
        _, _, total = content_range.rpartition("/")
        if not total.isdigit():
            raise ValueError(f"No row count in Content-Range {content_range!r} for {table}.")
        return int(total)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "PostgrestClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def seed_remote_if_empty(client: PostgrestClient, snapshot: StoreSnapshot) -> bool:
    """Copy ``snapshot`` to the remote database when its ``assets`` table is empty.

    Failures are logged and reported as ``False``; they never propagate.

    Returns:
        ``True`` if the remote was seeded by this call.
    """
    try:
        if client.count_rows("assets") > 0:
            logger.info("Remote database already populated; skipping seed.")
            return False
        batches = [
            ("locations", snapshot.locations),
            ("users", snapshot.users),
            ("assets", snapshot.assets),
            ("inventory", snapshot.inventory),
            ("incidents", snapshot.incidents),
            ("work_orders", snapshot.work_orders),
            ("movement_logs", snapshot.movement_logs),
        ]
        for table, records in batches:
            client.upsert_rows(table, [r.model_dump(mode="json") for r in records])
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Remote seed failed: %s", exc)
        return False

    logger.info("Remote database seeded from local snapshot.")
    return True
