"""
Hospital CMMS Insights — CLI entry point.

All commands follow this pattern:
  1. Load ``AppConfig`` via ``load_config()``.
  2. Configure logging.
  3. Open the configured store (local SQLite, optionally remote-first).
  4. Run the command.
  5. Print a plain-text report; failures print ``[ERROR]`` and exit 1.

Install and run::

    pip install -e .
    cmms-insights --help
    cmms-insights init-db
    cmms-insights seed-demo
    cmms-insights refresh-risk --report
    cmms-insights recommend-techs NFC-1002
    cmms-insights analyze-history "Servo-U" --fault "pressure alarm"
    cmms-insights analytics --save
    cmms-insights alerts
"""

from __future__ import annotations

import json
import random
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

import typer

app = typer.Typer(
    name="cmms-insights",
    help="Hospital CMMS insights: equipment risk, technician ranking, repair history.",
    add_completion=False,
)


# ── Helpers ───────────────────────────────────────────────────────────────────

def _load_config_or_exit(config_path: Optional[str] = None, db_path: Optional[str] = None):
    """Load AppConfig, printing a friendly error and exiting on failure."""
    from cmms_insights.config import load_config

    try:
        cfg_path = Path(config_path) if config_path else None
        config = load_config(cfg_path)
    except FileNotFoundError as exc:
        typer.echo(f"[ERROR] {exc}", err=True)
        raise typer.Exit(code=1)
    except Exception as exc:
        typer.echo(f"[ERROR] Config validation failed: {exc}", err=True)
        raise typer.Exit(code=1)

    if db_path:
        config = config.model_copy(
            update={"database": config.database.model_copy(update={"db_path": db_path})}
        )
    return config


def _configure_logging(config):
    """Set up logging from config."""
    from cmms_insights.utils.logging import configure_logging
    configure_logging(config.logging)


@contextmanager
def _store_session(config):
    """Yield ``(conn, store)`` sharing one SQLite transaction.

    The transaction commits when the block exits cleanly and rolls back when
    it raises. A database that cannot be opened or read prints ``[ERROR]``
    and exits 1.
    """
    from cmms_insights.db.connection import get_connection
    from cmms_insights.store.factory import open_store

    db = config.database
    try:
        with get_connection(db.db_path, db.wal_mode, db.busy_timeout_ms) as conn:
            with open_store(config, conn=conn) as store:
                yield conn, store
    except (sqlite3.Error, OSError) as exc:
        typer.echo(f"[ERROR] Database unavailable: {exc}", err=True)
        raise typer.Exit(code=1)


_CONFIG_OPTION = typer.Option(None, "--config", help="Path to TOML config file.")
_DB_OPTION = typer.Option(None, "--db-path", help="Override DB path from config.")


# ── Setup ─────────────────────────────────────────────────────────────────────

@app.command("init-db")
def init_db(
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Create the SQLite database and apply the schema.

    Safe to run multiple times; all DDL uses IF NOT EXISTS.
    """
    from cmms_insights.db.connection import get_connection
    from cmms_insights.db.schema import ALL_TABLE_NAMES, apply_schema

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)

    db = config.database
    typer.echo(f"Initializing database at: {db.db_path}")
    with get_connection(db.db_path, db.wal_mode, db.busy_timeout_ms) as conn:
        apply_schema(conn)

    typer.echo(f"  Tables: {len(ALL_TABLE_NAMES)} created/verified.")
    typer.echo("[OK] Database ready.")


@app.command("validate-config")
def validate_config(
    config_path: Optional[str] = _CONFIG_OPTION,
    show_full:   bool = typer.Option(False, "--full", help="Print the full config as JSON."),
) -> None:
    """Validate the configuration file and print parsed values."""
    config = _load_config_or_exit(config_path)

    typer.echo("Configuration validated successfully.")
    typer.echo("")
    typer.echo(f"  Database path:    {config.database.db_path}")
    typer.echo(f"  Remote store:     {config.remote.url if config.remote.is_configured else 'disabled'}")
    typer.echo(f"  Risk lookback:    {config.scoring.risk_lookback_months} months")
    typer.echo(f"  Expertise scope:  {config.scoring.expertise_scope}")
    typer.echo(f"  Report dir:       {config.reporting.output_dir}")
    typer.echo(f"  Log level:        {config.logging.level}")
    typer.echo(f"  Debug mode:       {config.debug}")

    if show_full:
        dump = config.model_dump(mode="json")
        if dump["remote"]["api_key"]:
            dump["remote"]["api_key"] = "***"
        typer.echo("")
        typer.echo("Full config (JSON):")
        typer.echo(json.dumps(dump, indent=2, default=str))

    typer.echo("")
    typer.echo("[OK] Config valid.")


@app.command("seed-demo")
def seed_demo(
    seed:        Optional[int] = typer.Option(None, "--seed", help="RNG seed (default: [demo] seed)."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Load deterministic demo hospital data into the store."""
    from cmms_insights.pipeline.seed_demo import SeedDemoStage

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)

    # A failed stage rolls back its own writes; only its run record commits.
    error: Optional[Exception] = None
    with _store_session(config) as (conn, store):
        try:
            run = SeedDemoStage(config=config, conn=conn).run(store=store, seed=seed)
        except Exception as exc:
            error = exc

    if error is not None:
        typer.echo(f"[ERROR] Demo seed failed: {error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(f"  Records written: {run.rows_processed}")
    typer.echo(f"[OK] Demo data loaded (run {run.run_slug}).")


@app.command("refresh-risk")
def refresh_risk(
    report:      bool = typer.Option(False, "--report", help="Also write risk JSON/CSV reports."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Recompute and persist the risk score of every asset."""
    from cmms_insights.analytics.kpi import top_risk_assets
    from cmms_insights.pipeline.risk_refresh import RiskRefreshStage
    from cmms_insights.reporting.formatters import format_risk_table

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)
    scoring = config.scoring

    error: Optional[Exception] = None
    # A failed stage rolls back its own writes; only its run record commits.
    with _store_session(config) as (conn, store):
        try:
            run = RiskRefreshStage(config=config, conn=conn).run(store=store, write_report=report)
            rows = top_risk_assets(
                store.list_assets(),
                limit=config.reporting.top_risk_limit,
                high=scoring.high_risk_threshold,
                medium=scoring.medium_risk_threshold,
            )
        except Exception as exc:
            error = exc

    if error is not None:
        typer.echo(f"[ERROR] Risk refresh failed: {error}", err=True)
        raise typer.Exit(code=1)
    typer.echo(format_risk_table(rows))
    typer.echo("")
    typer.echo(f"[OK] {run.rows_processed} assets scored.")


# ── Predictive queries ────────────────────────────────────────────────────────

@app.command("recommend-techs")
def recommend_techs(
    asset_ref:   str = typer.Argument(..., help="Asset ID, NFC tag or RFID tag."),
    scope:       Optional[str] = typer.Option(
        None, "--scope", help="Expertise scope: 'all' or 'same_model' (default: config)."
    ),
    limit:       int = typer.Option(5, "--limit", help="Show at most N technicians."),
    save:        bool = typer.Option(False, "--save", help="Write the recommendations JSON report."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Rank technicians for a job on one asset."""
    from cmms_insights.predictive.technician import recommend_technicians
    from cmms_insights.reporting.export import write_recommendations_json
    from cmms_insights.reporting.formatters import format_recommendations
    from cmms_insights.taxonomy.maintenance_taxonomy import ExpertiseScope

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)

    try:
        expertise_scope = ExpertiseScope(scope) if scope else config.scoring.expertise_scope
    except ValueError:
        valid = ", ".join(s.value for s in ExpertiseScope)
        typer.echo(f"[ERROR] Unknown --scope '{scope}'. Use one of: {valid}.", err=True)
        raise typer.Exit(code=1)

    with _store_session(config) as (_, store):
        asset = store.get_asset(asset_ref)
        if asset is None:
            typer.echo(f"[ERROR] Asset not found: {asset_ref}", err=True)
            raise typer.Exit(code=1)
        recs = recommend_technicians(
            asset,
            store.technicians(),
            store.list_work_orders(),
            department_of=store.department_of,
            expertise_scope=expertise_scope,
            assets=store.list_assets(),
        )

    shown = recs[:limit] if limit > 0 else recs
    typer.echo(format_recommendations(asset, shown))
    if save:
        path = write_recommendations_json(asset, recs, Path(config.reporting.output_dir))
        typer.echo(f"  Report: {path}")
    typer.echo("")
    typer.echo(f"[OK] {len(recs)} technicians ranked.")


@app.command("analyze-history")
def analyze_history(
    model:       str = typer.Argument(..., help="Device model, e.g. 'Servo-U'."),
    fault:       Optional[str] = typer.Option(None, "--fault", help="Free-text fault description."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Summarise past corrective repairs on one device model."""
    from cmms_insights.predictive.history import analyze_historical_patterns
    from cmms_insights.reporting.formatters import format_history

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)

    with _store_session(config) as (_, store):
        patterns = analyze_historical_patterns(
            model,
            fault,
            store.list_work_orders(),
            assets=store.list_assets(),
            inventory=store.list_inventory(),
            top_parts_limit=config.scoring.top_parts_limit,
            solution_refs_limit=config.scoring.solution_refs_limit,
        )

    typer.echo(format_history(model, patterns))
    typer.echo("")
    typer.echo(f"[OK] {patterns.similar_cases_count} similar cases found.")


# ── Supervisor views ──────────────────────────────────────────────────────────

@app.command("analytics")
def analytics(
    save:        bool = typer.Option(False, "--save", help="Write the analytics JSON report."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Print fleet KPIs, MTTR trend, technician performance and fault counts."""
    from cmms_insights.analytics.alerts import generate_alerts
    from cmms_insights.analytics.kpi import (
        compute_kpis,
        fault_distribution,
        mttr_trend,
        technician_performance,
        top_risk_assets,
    )
    from cmms_insights.reporting.export import write_analytics_json
    from cmms_insights.reporting.formatters import format_analytics

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)
    reporting = config.reporting

    with _store_session(config) as (_, store):
        snap = store.snapshot()

    kpis = compute_kpis(snap.assets, snap.work_orders, snap.inventory)
    trend = mttr_trend(snap.work_orders, limit=reporting.mttr_trend_months)
    techs = technician_performance(snap.work_orders, snap.users)
    faults = fault_distribution(snap.work_orders, snap.assets, limit=reporting.fault_distribution_limit)

    typer.echo(format_analytics(kpis, trend, techs, faults))
    if save:
        risk = top_risk_assets(
            snap.assets,
            limit=reporting.top_risk_limit,
            high=config.scoring.high_risk_threshold,
            medium=config.scoring.medium_risk_threshold,
        )
        alerts = generate_alerts(
            snap.assets, snap.inventory, snap.locations,
            movement_logs=snap.movement_logs,
            boundary_window_hours=reporting.boundary_alert_hours,
        )
        path = write_analytics_json(
            kpis, trend, techs, faults, risk, alerts, Path(reporting.output_dir)
        )
        typer.echo(f"  Report: {path}")
    typer.echo("")
    typer.echo("[OK] Analytics complete.")


@app.command("alerts")
def alerts(
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """List overdue calibrations, recent department crossings and low-stock parts."""
    from cmms_insights.analytics.alerts import generate_alerts
    from cmms_insights.reporting.formatters import format_alerts

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)

    with _store_session(config) as (_, store):
        snap = store.snapshot()
    active = generate_alerts(
        snap.assets, snap.inventory, snap.locations,
        movement_logs=snap.movement_logs,
        boundary_window_hours=config.reporting.boundary_alert_hours,
    )

    typer.echo(format_alerts(active))
    typer.echo("")
    typer.echo(f"[OK] {len(active)} active alerts.")


@app.command("simulate")
def simulate(
    ticks:       int = typer.Option(5, "--ticks", help="Number of simulation steps."),
    seed:        Optional[int] = typer.Option(None, "--seed", help="RNG seed (default: [demo] seed)."),
    db_path:     Optional[str] = _DB_OPTION,
    config_path: Optional[str] = _CONFIG_OPTION,
) -> None:
    """Run the live demo: random status flips and simulated RFID reads."""
    from cmms_insights.demo.generator import simulate_rfid_scan, simulate_status_flip

    config = _load_config_or_exit(config_path, db_path)
    _configure_logging(config)
    rng = random.Random(config.demo.seed if seed is None else seed)

    flips = 0
    with _store_session(config) as (_, store):
        for tick in range(1, ticks + 1):
            flipped = simulate_status_flip(store, rng)
            if flipped is not None:
                flips += 1
                typer.echo(f"  [{tick}] {flipped[0]} -> {flipped[1]}")
            scanned = simulate_rfid_scan(store.list_assets(), rng)
            if scanned is not None:
                tag = scanned.rfid_tag_id or scanned.asset_id
                typer.echo(f"  [{tick}] RFID read {tag}: {scanned.name} ({scanned.status})")

    typer.echo("")
    typer.echo(f"[OK] {ticks} ticks simulated, {flips} status changes.")


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    app()
