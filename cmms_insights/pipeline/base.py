"""
Base class for audited batch stages that operate on a ``MaintenanceStore``.

A stage is constructed with ``AppConfig`` and driven through ``run(store)``:

  1. A ``RunMetadata`` record is opened with a fresh slug and a JSON dump of
     the config.
  2. ``_execute(run, store, now, **kwargs)`` does the work and returns the
     number of records it touched.
  3. The record is closed as ``success`` or ``failed`` and written to the
     ``run_metadata`` table. Failures are re-raised after recording.

``now`` is normalised to aware UTC once, here, so every stage scores and
stamps against the same instant.

Run records are written on ``conn`` when one is given and commit with the
caller's transaction. On that connection ``_execute`` runs inside a savepoint:
a failing stage leaves none of its own writes behind, only the failed run
record. Without ``conn`` a short-lived connection to ``db_path`` is opened
for each record.

Usage::

    class ReindexStage(PipelineStage):
        stage_name = "risk_refresh"

        def _execute(self, run, store, now, **kwargs) -> int:
            return len(store.list_assets())

    run = ReindexStage(config).run(store)
"""

from __future__ import annotations

import logging
import sqlite3
from abc import ABC, abstractmethod
from contextlib import contextmanager
from datetime import datetime
from typing import Generator, Optional
from uuid import uuid4

from cmms_insights.config import AppConfig
from cmms_insights.models.meta import RunMetadata
from cmms_insights.store.base import MaintenanceStore
from cmms_insights.utils.time_utils import ensure_utc, utcnow

logger = logging.getLogger(__name__)


class PipelineStage(ABC):
    """A batch operation over a store that leaves an audit record.

    Attributes:
        stage_name: One of ``models.meta.VALID_PIPELINE_STAGES``.
        config:     Configuration the run is recorded with.
        db_path:    Database for run records when no ``conn`` is shared.
        conn:       Connection shared with the caller's store, if any.
    """

    stage_name: str

    def __init__(
        self,
        config:  AppConfig,
        db_path: Optional[str] = None,
        conn:    Optional[sqlite3.Connection] = None,
    ) -> None:
        self.config = config
        self.db_path = db_path or config.database.db_path
        self.conn = conn

    def run(
        self,
        store:    MaintenanceStore,
        now:      Optional[datetime] = None,
        **kwargs,
    ) -> RunMetadata:
        """Run the stage against ``store`` and return the closed run record.

        Args:
            store:    Store the stage reads and writes.
            now:      Reference time; naive values are taken as UTC,
                      ``None`` means the current time.
            **kwargs: Stage options forwarded to ``_execute``.

        Raises:
            Exception: Whatever ``_execute`` raised, after the failed run has
                been recorded.
        """
        now = ensure_utc(now) if now is not None else utcnow()
        run = RunMetadata(
            run_slug=str(uuid4()),
            pipeline_stage=self.stage_name,
            config_snapshot=self.config.model_dump(mode="json"),
            started_at=utcnow(),
        )
        logger.info("%s run %s started on %s", self.stage_name, run.run_slug,
                    type(store).__name__)

        try:
            with self._savepoint():
                rows = self._execute(run, store, now, **kwargs)
        except Exception as exc:
            self._finish(run, "failed", error=str(exc))
            logger.error("%s run %s failed: %s", self.stage_name, run.run_slug, exc)
            raise

        self._finish(run, "success", rows=rows)
        logger.info("%s run %s finished: %d records", self.stage_name, run.run_slug, rows)
        return run

    @abstractmethod
    def _execute(
        self,
        run:      RunMetadata,
        store:    MaintenanceStore,
        now:      datetime,
        **kwargs,
    ) -> int:
        """Do the stage's work and return how many records it processed."""

    # ── Run record ────────────────────────────────────────────────────────────

    @contextmanager
    def _savepoint(self) -> Generator[None, None, None]:
        if self.conn is None:
            yield
            return
        self.conn.execute("SAVEPOINT pipeline_stage;")
        try:
            yield
        except Exception:
            self.conn.execute("ROLLBACK TO pipeline_stage;")
            raise
        finally:
            self.conn.execute("RELEASE pipeline_stage;")

    def _finish(
        self,
        run:    RunMetadata,
        status: str,
        rows:   int = 0,
        error:  Optional[str] = None,
    ) -> None:
        run.status = status
        run.rows_processed = rows
        run.error_message = error
        run.finished_at = utcnow()
        self._persist_run(run)

    def _persist_run(self, run: RunMetadata) -> None:
        """Insert or update ``run`` in ``run_metadata``.

        A database error here is logged, not raised, so it cannot replace the
        stage's own result or exception.
        """
        from cmms_insights.db.connection import get_connection
        from cmms_insights.db.repositories.run_repo import RunMetadataRepository
        from cmms_insights.db.schema import apply_schema

        def _write(conn: sqlite3.Connection) -> None:
            repo = RunMetadataRepository(conn)
            if run.run_id is None:
                run.run_id = repo.insert_run(run)
            else:
                repo.update_run(run)

        db = self.config.database
        try:
            if self.conn is not None:
                _write(self.conn)
                return
            with get_connection(self.db_path, db.wal_mode, db.busy_timeout_ms) as conn:
                apply_schema(conn)
                _write(conn)
        except sqlite3.Error as exc:
            logger.error("Could not record %s run %s: %s", self.stage_name, run.run_slug, exc)
