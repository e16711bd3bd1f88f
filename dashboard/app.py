"""
Hospital CMMS Insights — Streamlit Dashboard
============================================

Optional supervisor view. Reads the latest report files from
``data/outputs/reports/`` only; it never opens the store or recomputes
scores.

App structure (4 tabs)
----------------------
  1. Overview     — KPI tiles and asset availability by status.
  2. Risk         — Risk table with every score component.
  3. MTTR         — Mean time to repair per month.
  4. Technicians  — Closed orders and mean repair hours per technician,
                    plus the active alerts from the same report.

Usage
-----
    pip install -e ".[dashboard]"
    cmms-insights refresh-risk --report
    cmms-insights analytics --save
    streamlit run dashboard/app.py
"""

from __future__ import annotations

import sys
from pathlib import Path

# ── Ensure project root is importable ────────────────────────────────────────
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import streamlit as st

# ── Must be the first Streamlit call ─────────────────────────────────────────
st.set_page_config(
    page_title="Hospital CMMS Insights",
    layout="wide",
    initial_sidebar_state="expanded",
)

import pandas as pd

from dashboard.data_loader import (
    load_analytics,
    load_risk,
    mttr_frame,
    report_age,
    risk_frame,
    technician_frame,
)

# Mirrors [reporting] output_dir in config/default.toml.
_REPORT_DIR = str(_ROOT / "data" / "outputs" / "reports")


# ── Sidebar ───────────────────────────────────────────────────────────────────

with st.sidebar:
    st.title("CMMS Insights")
    st.caption("Supervisor dashboard — reads report files only")
    st.divider()

    report_dir = st.text_input("Report directory", value=_REPORT_DIR)

    if st.button("Clear cache", help="Force re-read of all report files."):
        st.cache_data.clear()
        st.rerun()

    st.divider()
    st.caption("Refresh reports:")
    st.code("cmms-insights refresh-risk --report\ncmms-insights analytics --save")


def _age_badge(report: dict | None, label: str) -> None:
    age = report_age(report)
    if report is None:
        st.error(f"{label}  NO DATA — generate the report first")
    elif age is None or age > 0:
        st.warning(f"{label}  generated {report.get('generated_at', 'at an unknown date')}")
    else:
        st.success(f"{label}  generated today")


risk_report = load_risk(report_dir)
analytics_report = load_analytics(report_dir)

tab_overview, tab_risk, tab_mttr, tab_techs = st.tabs(
    ["Overview", "Risk", "MTTR", "Technicians"]
)


# ══════════════════════════════════════════════════════════════════════════════
# Tab 1 — Overview
# ══════════════════════════════════════════════════════════════════════════════

with tab_overview:
    st.header("Fleet Overview")
    _age_badge(analytics_report, "Analytics report")

    if analytics_report is not None:
        kpis = analytics_report.get("kpis", {})
        c1, c2, c3, c4 = st.columns(4)
        c1.metric("Total assets", kpis.get("total_assets", 0))
        c2.metric("Open work orders", kpis.get("open_work_orders", 0))
        c3.metric("Low-stock parts", kpis.get("low_stock_count", 0))
        c4.metric("MTTR (h)", f"{kpis.get('mttr_hours', 0.0):.1f}")

        availability = kpis.get("availability", {})
        if availability:
            st.subheader("Availability by status")
            st.bar_chart(pd.Series(availability, name="assets"))

        faults = analytics_report.get("faults", [])
        if faults:
            st.subheader("Corrective orders by device")
            st.bar_chart(pd.DataFrame(faults).set_index("asset_name")["count"])


# ══════════════════════════════════════════════════════════════════════════════
# Tab 2 — Risk
# ══════════════════════════════════════════════════════════════════════════════

with tab_risk:
    st.header("Asset Risk")
    st.caption(
        "Score = 2×age years + operating hours/500 + 10×recent corrective orders "
        "+ 5×recent moves, clamped to 0–100."
    )
    _age_badge(risk_report, "Risk report")

    if risk_report is not None:
        df_risk = risk_frame(risk_report)
        if df_risk.empty:
            st.info("The latest risk report has no assets.")
        else:
            bands = sorted(df_risk["band"].dropna().unique().tolist())
            selected = st.multiselect("Band", options=bands, default=bands)
            st.dataframe(
                df_risk[df_risk["band"].isin(selected)],
                use_container_width=True,
                hide_index=True,
            )


# ══════════════════════════════════════════════════════════════════════════════
# Tab 3 — MTTR trend
# ══════════════════════════════════════════════════════════════════════════════

with tab_mttr:
    st.header("Mean Time To Repair")
    _age_badge(analytics_report, "Analytics report")

    if analytics_report is not None:
        df_mttr = mttr_frame(analytics_report)
        if df_mttr.empty:
            st.info("No closed orders with valid repair times yet.")
        else:
            st.line_chart(df_mttr)


# ══════════════════════════════════════════════════════════════════════════════
# Tab 4 — Technicians
# ══════════════════════════════════════════════════════════════════════════════

with tab_techs:
    st.header("Technician Performance")
    _age_badge(analytics_report, "Analytics report")

    if analytics_report is not None:
        df_techs = technician_frame(analytics_report)
        if df_techs.empty:
            st.info("No closed, assigned orders yet.")
        else:
            st.dataframe(df_techs, use_container_width=True, hide_index=True)

        alerts = analytics_report.get("alerts", [])
        st.subheader(f"Active alerts ({len(alerts)})")
        for alert in alerts:
            text = f"{alert.get('alert_type', '')}: {alert.get('message', '')}"
            if alert.get("severity") == "high":
                st.error(text)
            else:
                st.warning(text)
