"""
cmms_insights.pipeline — audited batch stages.

  base          — PipelineStage ABC (run record bookkeeping)
  risk_refresh  — RiskRefreshStage: recompute and persist asset risk scores
  seed_demo     — SeedDemoStage: load demo data into a store
"""
