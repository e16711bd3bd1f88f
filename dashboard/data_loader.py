"""
Dashboard data loader.

Loaders are wrapped in ``st.cache_data`` so Streamlit only re-reads report
files after the TTL expires, not on every widget interaction. File discovery
and parsing are shared with the CLI through ``cmms_insights.reporting.reader``.

Every loader returns ``None`` when no report exists yet, so each view can show
a "no data" hint instead of failing.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import pandas as pd
import streamlit as st

from cmms_insights.reporting.reader import load_latest_report, report_age_days

_CACHE = st.cache_data


@_CACHE(ttl=300)
def load_risk(output_dir: str) -> Optional[dict]:
    """Latest ``risk_*.json`` report."""
    return load_latest_report("risk", Path(output_dir))


@_CACHE(ttl=300)
def load_analytics(output_dir: str) -> Optional[dict]:
    """Latest ``analytics_*.json`` report."""
    return load_latest_report("analytics", Path(output_dir))


def report_age(report: Optional[dict]) -> Optional[int]:
    """Days since ``report`` was generated; ``None`` when unknown."""
    if report is None:
        return None
    return report_age_days(report.get("generated_at"))


def risk_frame(report: dict) -> pd.DataFrame:
    """Risk rows as a DataFrame, highest score first."""
    frame = pd.DataFrame(report.get("assets", []))
    if frame.empty:
        return frame
    return frame.sort_values("risk_score", ascending=False, kind="stable")


def mttr_frame(report: dict) -> pd.DataFrame:
    """MTTR trend indexed by month label, oldest first."""
    frame = pd.DataFrame(report.get("mttr_trend", []))
    if frame.empty:
        return frame
    return frame.set_index("label")[["hours"]]


def technician_frame(report: dict) -> pd.DataFrame:
    frame = pd.DataFrame(report.get("technicians", []))
    if frame.empty:
        return frame
    return frame.rename(
        columns={
            "name":             "Technician",
            "closed_count":     "Closed",
            "avg_repair_hours": "Avg repair (h)",
        }
    )[["Technician", "Closed", "Avg repair (h)"]]
