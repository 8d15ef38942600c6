"""Project Atlas insights engine.

Derives project-health signals from counts-only project summaries.

Usage::

    from atlas.insights import calculate_insights, summarize_project

    summaries = [summarize_project(p) for p in projects]
    insights = calculate_insights(summaries)
    print(insights.drift)
"""

from atlas.insights.engine import (
    calculate_aggregation,
    calculate_drift,
    calculate_high_risk,
    calculate_insights,
    calculate_quick_wins,
    calculate_release_ready,
    days_since_update,
)
from atlas.insights.models import (
    CrossProjectAggregation,
    DriftProject,
    HighRiskProject,
    Insights,
    ProjectSummary,
    QuickWin,
    ReleaseReadyProject,
    WorkItemsSummary,
)
from atlas.insights.summary import completion_percentage, summarize_project

__all__ = [
    "calculate_insights",
    "calculate_drift",
    "calculate_quick_wins",
    "calculate_high_risk",
    "calculate_release_ready",
    "calculate_aggregation",
    "days_since_update",
    "completion_percentage",
    "summarize_project",
    "Insights",
    "ProjectSummary",
    "WorkItemsSummary",
    "DriftProject",
    "QuickWin",
    "HighRiskProject",
    "ReleaseReadyProject",
    "CrossProjectAggregation",
]
