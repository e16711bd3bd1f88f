"""
SeedDemoStage — load deterministic demo data into a store.

The snapshot comes from ``DemoDataGenerator`` configured by ``[demo]``.
Seeding upserts, so running the stage twice leaves the same records.

With a ``FallbackStore`` the snapshot is written to the local store and,
when ``config.remote.seed_if_empty`` is set, copied to the remote database
only if its ``assets`` table is empty.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from cmms_insights.models.meta import RunMetadata
from cmms_insights.pipeline.base import PipelineStage
from cmms_insights.store.base import MaintenanceStore

logger = logging.getLogger(__name__)


class SeedDemoStage(PipelineStage):
    """Seed a store with generated demo data."""

    stage_name = "seed_demo"

    def _execute(
        self,
        run:   RunMetadata,
        store: MaintenanceStore,
        now:   datetime,
        seed:  Optional[int] = None,
        **kwargs,
    ) -> int:
        """Generate and store the demo snapshot.

        Args:
            run:   In-progress RunMetadata (mutable).
            store: Target store.
            now:   Anchor for generated dates.
            seed:  RNG seed override (default: ``config.demo.seed``).

        Returns:
            Number of records written to the store.
        """
        from cmms_insights.demo.generator import DemoDataGenerator
        from cmms_insights.store.fallback import FallbackStore
        from cmms_insights.store.remote import seed_remote_if_empty

        demo = self.config.demo
        snapshot = DemoDataGenerator(
            seed=demo.seed if seed is None else seed,
            now=now,
            generated_assets=demo.generated_assets,
            generated_parts=demo.generated_parts,
            generated_work_orders=demo.generated_work_orders,
        ).build()

        if isinstance(store, FallbackStore):
            written = store.local.seed(snapshot)
            if self.config.remote.seed_if_empty:
                seed_remote_if_empty(store.remote, snapshot)
        else:
            written = store.seed(snapshot)

        logger.info("Demo data seeded: %d records", written)
        return written
