"""
Report writers: JSON and CSV files for the risk table, supervisor analytics
and technician recommendations.

All functions are pure I/O over in-memory results; none touch the store.
Each writes ``{kind}_{YYYY-MM-DD}.{ext}`` into ``output_dir`` (created if
missing) and returns the written ``Path``.  A second run on the same day
overwrites that day's file.

Output files
------------
  data/outputs/reports/
    risk_{date}.json              -- risk table with every score component
    risk_{date}.csv               -- same rows, flat
    analytics_{date}.json         -- KPI tiles, MTTR trend, technicians, faults, alerts
    recommendations_{date}.json   -- ranked technicians for one asset
"""

from __future__ import annotations

import csv
import json
import logging
from dataclasses import asdict
from datetime import date
from pathlib import Path
from typing import Iterable, Optional

from cmms_insights.analytics.kpi import (
    FaultCount,
    FleetKpis,
    MttrPoint,
    RiskRow,
    TechnicianPerformance,
)
from cmms_insights.models.alert import SystemAlert
from cmms_insights.models.asset import Asset
from cmms_insights.predictive.risk import RiskComponents, risk_band
from cmms_insights.predictive.technician import TechnicianRecommendation

logger = logging.getLogger(__name__)

SCHEMA_VERSION = "v1"

RISK_FIELDNAMES = [
    "asset_id", "name", "model", "location_id", "risk_score", "band",
    "age_years", "age_points", "utilization_points",
    "recent_failures", "failure_points", "recent_moves", "mobility_points",
]


def report_path(output_dir: Path, kind: str, ext: str, run_date: date) -> Path:
    """Return ``output_dir/{kind}_{run_date}.{ext}``, creating ``output_dir``."""
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir / f"{kind}_{run_date.isoformat()}.{ext}"


# ── Risk ──────────────────────────────────────────────────────────────────────

def build_risk_rows(
    assets:     Iterable[Asset],
    components: Iterable[RiskComponents],
    high:       int = 70,
    medium:     int = 40,
) -> list[dict]:
    """Join assets with their risk components into flat rows, riskiest first.

    Assets without a matching ``RiskComponents`` entry are left out.
    """
    by_id = {asset.asset_id: asset for asset in assets}
    rows: list[dict] = []
    for comp in components:
        asset = by_id.get(comp.asset_id)
        if asset is None:
            continue
        rows.append(
            {
                "asset_id":           asset.asset_id,
                "name":               asset.name,
                "model":              asset.model,
                "location_id":        asset.location_id,
                "risk_score":         comp.score,
                "band":               risk_band(comp.score, high=high, medium=medium),
                "age_years":          comp.age_years,
                "age_points":         comp.age_points,
                "utilization_points": comp.utilization_points,
                "recent_failures":    comp.recent_failures,
                "failure_points":     comp.failure_points,
                "recent_moves":       comp.recent_moves,
                "mobility_points":    comp.mobility_points,
            }
        )
    rows.sort(key=lambda r: -r["risk_score"])
    return rows


def write_risk_report_json(
    rows:       list[dict],
    output_dir: Path,
    run_date:   Optional[date] = None,
    run_slug:   str = "",
) -> Path:
    """Write risk rows (see ``build_risk_rows``) to ``risk_{date}.json``."""
    if run_date is None:
        run_date = date.today()
    json_path = report_path(output_dir, "risk", "json", run_date)
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        "run_slug":       run_slug,
        "assets":         rows,
    }
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Risk JSON written: %s (%d assets)", json_path, len(rows))
    return json_path


def write_risk_report_csv(
    rows:       list[dict],
    output_dir: Path,
    run_date:   Optional[date] = None,
) -> Path:
    """Write risk rows to ``risk_{date}.csv`` with ``RISK_FIELDNAMES`` columns."""
    if run_date is None:
        run_date = date.today()
    csv_path = report_path(output_dir, "risk", "csv", run_date)
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.DictWriter(f, fieldnames=RISK_FIELDNAMES, extrasaction="ignore")
        writer.writeheader()
        writer.writerows(rows)
    logger.info("Risk CSV written: %s", csv_path)
    return csv_path


# ── Analytics ─────────────────────────────────────────────────────────────────

def write_analytics_json(
    kpis:        FleetKpis,
    trend:       list[MttrPoint],
    technicians: list[TechnicianPerformance],
    faults:      list[FaultCount],
    risk:        list[RiskRow],
    alerts:      list[SystemAlert],
    output_dir:  Path,
    run_date:    Optional[date] = None,
) -> Path:
    """Write the supervisor overview to ``analytics_{date}.json``."""
    if run_date is None:
        run_date = date.today()
    json_path = report_path(output_dir, "analytics", "json", run_date)
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        "kpis":           asdict(kpis),
        "mttr_trend":     [asdict(p) for p in trend],
        "technicians":    [asdict(t) for t in technicians],
        "faults":         [asdict(f) for f in faults],
        "top_risk":       [asdict(r) for r in risk],
        "alerts":         [a.model_dump(mode="json") for a in alerts],
    }
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Analytics JSON written: %s", json_path)
    return json_path


# ── Recommendations ───────────────────────────────────────────────────────────

def write_recommendations_json(
    asset:           Asset,
    recommendations: list[TechnicianRecommendation],
    output_dir:      Path,
    run_date:        Optional[date] = None,
) -> Path:
    """Write ranked technicians for ``asset`` to ``recommendations_{date}.json``."""
    if run_date is None:
        run_date = date.today()
    json_path = report_path(output_dir, "recommendations", "json", run_date)
    payload = {
        "schema_version": SCHEMA_VERSION,
        "generated_at":   run_date.isoformat(),
        "asset_id":       asset.asset_id,
        "asset_name":     asset.name,
        "technicians": [
            {
                "rank":        rank,
                "user_id":     rec.technician.user_id,
                "name":        rec.technician.name,
                "score":       rec.score,
                "reason":      rec.reason,
                "closed_jobs": rec.closed_jobs,
                "open_jobs":   rec.open_jobs,
            }
            for rank, rec in enumerate(recommendations, start=1)
        ],
    }
    json_path.write_text(json.dumps(payload, indent=2, default=str), encoding="utf-8")
    logger.info("Recommendations JSON written: %s", json_path)
    return json_path
