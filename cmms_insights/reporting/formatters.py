"""
Plain-text formatters for CLI commands.

Every formatter takes in-memory results and returns a multi-line string for
``typer.echo()``. No third-party dependencies.
"""

from __future__ import annotations

from cmms_insights.analytics.kpi import (
    FaultCount,
    FleetKpis,
    MttrPoint,
    RiskRow,
    TechnicianPerformance,
)
from cmms_insights.models.alert import SystemAlert
from cmms_insights.models.asset import Asset
from cmms_insights.predictive.history import HistoricalPatterns
from cmms_insights.predictive.technician import TechnicianRecommendation


def format_risk_table(rows: list[RiskRow]) -> str:
    """Risk table, one line per asset, highest score first."""
    lines = ["", "=== Asset Risk ==="]
    if not rows:
        lines.append("  (no assets)")
        return "\n".join(lines)
    header = f"  {'Asset':<14}  {'Name':<24}  {'Model':<18}  {'Score':>5}  {'Band':<6}  Note"
    lines.append(header)
    lines.append("  " + "-" * (len(header) - 2))
    for row in rows:
        lines.append(
            f"  {row.asset_id:<14}  {row.name[:24]:<24}  {row.model[:18]:<18}  "
            f"{row.risk_score:>5}  {row.band:<6}  {row.note}"
        )
    return "\n".join(lines)


def format_recommendations(asset: Asset, recs: list[TechnicianRecommendation]) -> str:
    lines = ["", f"=== Technicians for {asset.name} ({asset.asset_id}) ==="]
    if not recs:
        lines.append("  (no technicians available)")
        return "\n".join(lines)
    for rank, rec in enumerate(recs, start=1):
        reason = rec.reason or "-"
        lines.append(f"  {rank:>2}. {rec.technician.name:<28} {rec.score:>4}  {reason}")
    return "\n".join(lines)


def format_history(model: str, patterns: HistoricalPatterns) -> str:
    lines = [
        "",
        f"=== Repair history: {model} ===",
        f"  Similar cases:     {patterns.similar_cases_count}",
        f"  Avg repair time:   {patterns.avg_repair_time_hours:.1f} h",
    ]
    if patterns.top_parts_used:
        lines.append("  Top parts used:")
        for part in patterns.top_parts_used:
            lines.append(f"    {part.part_name:<32} x{part.count}")
    else:
        lines.append("  Top parts used:    (none)")
    refs = ", ".join(patterns.common_solutions_refs) or "(none)"
    lines.append(f"  Reference orders:  {refs}")
    return "\n".join(lines)


def format_analytics(
    kpis:        FleetKpis,
    trend:       list[MttrPoint],
    technicians: list[TechnicianPerformance],
    faults:      list[FaultCount],
) -> str:
    """Overview tiles followed by the MTTR trend, technician and fault tables."""
    lines = [
        "",
        "=== Fleet Overview ===",
        f"  Total assets:       {kpis.total_assets}",
        f"  Open work orders:   {kpis.open_work_orders}",
        f"  Low-stock parts:    {kpis.low_stock_count}",
        f"  MTTR:               {kpis.mttr_hours:.1f} h",
        "  Availability:",
    ]
    for status, count in kpis.availability.items():
        lines.append(f"    {status:<14} {count:>4}")

    lines += ["", "  MTTR trend:"]
    if not trend:
        lines.append("    (no closed orders)")
    for point in trend:
        lines.append(f"    {point.label:<10} {point.hours:>6.1f} h  ({point.orders} orders)")

    lines += ["", "  Technician performance:"]
    if not technicians:
        lines.append("    (no closed orders)")
    for tech in technicians:
        lines.append(
            f"    {tech.name:<16} closed={tech.closed_count:<4} avg={tech.avg_repair_hours:.1f} h"
        )

    lines += ["", "  Faults by device:"]
    if not faults:
        lines.append("    (no corrective orders)")
    for fault in faults:
        lines.append(f"    {fault.asset_name:<28} {fault.count:>4}")
    return "\n".join(lines)


def format_alerts(alerts: list[SystemAlert]) -> str:
    lines = ["", f"=== Active Alerts ({len(alerts)}) ==="]
    if not alerts:
        lines.append("  (none)")
    for alert in alerts:
        lines.append(f"  [{alert.severity.upper():<6}] {alert.alert_type:<10} {alert.message}")
    return "\n".join(lines)
