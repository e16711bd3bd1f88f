"""
RiskRefreshStage — recompute every asset's risk score.

Flow
----
  1. Take one ``StoreSnapshot`` of the store.
  2. ``assess_risk()`` each asset against the snapshot's work orders and
     movement logs (lookback from ``config.scoring.risk_lookback_months``).
  3. Write back scores that changed via ``store.update_asset_risk_score``.
  4. Optionally write ``risk_{date}.json`` / ``.csv`` to
     ``config.reporting.output_dir``.

Returns the number of assets scored. The computed components stay on
``stage.results`` for callers that want to print them.
"""

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path

from cmms_insights.models.meta import RunMetadata
from cmms_insights.pipeline.base import PipelineStage
from cmms_insights.predictive.risk import RiskComponents, assess_risk
from cmms_insights.store.base import MaintenanceStore

logger = logging.getLogger(__name__)


class RiskRefreshStage(PipelineStage):
    """Score all assets and persist changed scores."""

    stage_name = "risk_refresh"

    results: list[RiskComponents]

    def _execute(
        self,
        run:          RunMetadata,
        store:        MaintenanceStore,
        now:          datetime,
        write_report: bool = False,
        **kwargs,
    ) -> int:
        """Recompute risk scores.

        Args:
            run:          In-progress RunMetadata (mutable).
            store:        Store to read from and write scores back to.
            now:          Reference time, aware UTC.
            write_report: Also write the risk report files.

        Returns:
            Number of assets scored.
        """
        from cmms_insights.reporting.export import (
            build_risk_rows,
            write_risk_report_csv,
            write_risk_report_json,
        )

        scoring = self.config.scoring
        snapshot = store.snapshot()

        self.results = []
        changed = 0
        for asset in snapshot.assets:
            components = assess_risk(
                asset,
                snapshot.work_orders,
                snapshot.movement_logs,
                now=now,
                lookback_months=scoring.risk_lookback_months,
            )
            self.results.append(components)
            if components.score != asset.risk_score:
                store.update_asset_risk_score(asset.asset_id, components.score)
                changed += 1

        logger.info(
            "Risk refresh: %d assets scored, %d scores changed",
            len(self.results), changed,
        )

        if write_report:
            rows = build_risk_rows(
                store.list_assets(),
                self.results,
                high=scoring.high_risk_threshold,
                medium=scoring.medium_risk_threshold,
            )
            output_dir = Path(self.config.reporting.output_dir)
            write_risk_report_json(rows, output_dir, now.date(), run_slug=run.run_slug)
            write_risk_report_csv(rows, output_dir, now.date())

        return len(self.results)
