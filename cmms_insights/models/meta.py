"""
Audit record written for every batch stage run (risk refresh, demo seeding).

The record keeps the full ``AppConfig`` dump the run used, so a risk refresh
can be repeated with the same lookback window and thresholds.

``RunMetadata`` is mutable: ``PipelineStage`` fills in the outcome fields
when the run finishes. Timestamps are held as aware UTC; naive values read
back from SQLite are taken to be UTC.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from cmms_insights.utils.time_utils import ensure_utc

VALID_PIPELINE_STAGES = frozenset({"risk_refresh", "seed_demo"})
VALID_RUN_STATUSES = frozenset({"started", "success", "failed"})


class RunMetadata(BaseModel):
    """One stage run.

    Attributes:
        run_id: ``run_metadata`` PK; ``None`` until the first write.
        run_slug: UUID4 string naming the run in logs and report files.
        pipeline_stage: Stage that produced the run.
        status: ``started``, then ``success`` or ``failed``.
        config_snapshot: ``AppConfig.model_dump(mode="json")`` at start.
        rows_processed: Records the stage touched (assets scored, rows seeded).
        error_message: Exception text for failed runs.
        started_at: When the run began.
        finished_at: When it ended; ``None`` while running.
    """

    model_config = ConfigDict(validate_assignment=True)

    run_id: Optional[int] = None
    run_slug: str
    pipeline_stage: str
    status: str = "started"
    config_snapshot: dict[str, Any]
    rows_processed: int = 0
    error_message: Optional[str] = None
    started_at: datetime
    finished_at: Optional[datetime] = None

    @field_validator("pipeline_stage")
    @classmethod
    def validate_pipeline_stage(cls, v: str) -> str:
        if v not in VALID_PIPELINE_STAGES:
            raise ValueError(
                f"Unknown pipeline_stage '{v}'. Must be one of {sorted(VALID_PIPELINE_STAGES)}."
            )
        return v

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: str) -> str:
        if v not in VALID_RUN_STATUSES:
            raise ValueError(f"Unknown status '{v}'. Must be one of {sorted(VALID_RUN_STATUSES)}.")
        return v

    @field_validator("started_at", "finished_at")
    @classmethod
    def as_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        return ensure_utc(v) if v is not None else None

    @property
    def duration_seconds(self) -> Optional[float]:
        """Wall-clock run time, or ``None`` while the run is open."""
        if self.finished_at is None:
            return None
        return (self.finished_at - self.started_at).total_seconds()
