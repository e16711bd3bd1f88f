"""
Predictive core: risk scoring, technician ranking, historical patterns.

All functions here are pure: they read snapshots passed in by the caller and
never write to a store.
"""

from cmms_insights.predictive.history import (
    HistoricalPatterns,
    PartUsageSummary,
    analyze_historical_patterns,
)
from cmms_insights.predictive.risk import (
    RiskComponents,
    assess_risk,
    compute_risk_score,
    risk_band,
)
from cmms_insights.predictive.technician import (
    TechnicianRecommendation,
    department_lookup,
    recommend_technicians,
)

__all__ = [
    "HistoricalPatterns",
    "PartUsageSummary",
    "RiskComponents",
    "TechnicianRecommendation",
    "analyze_historical_patterns",
    "assess_risk",
    "compute_risk_score",
    "department_lookup",
    "recommend_technicians",
    "risk_band",
]
