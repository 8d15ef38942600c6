"""Cross-project insights.

Pure functions over a collection of :class:`ProjectSummary` values. Results
depend only on the input contents; ordering follows each function's
declared sort, with ties kept in input order. Only drift detection reads a
clock, and it accepts an explicit ``now`` for reproducible results.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timedelta, timezone
from typing import Any, Optional

from atlas.parser.models import ProjectStatus, WorkItemType

from .models import (
    CrossProjectAggregation,
    DriftProject,
    HighRiskProject,
    Insights,
    ProjectSummary,
    QuickWin,
    ReleaseReadyProject,
    StatusCounts,
    WorkItemCounts,
)


# ---------------------------------------------------------------------------
# Thresholds
# ---------------------------------------------------------------------------

DRIFT_THRESHOLD_DAYS = 20
QUICK_WIN_MAX_INCOMPLETE = 5
QUICK_WIN_MIN_COMPLETION = 50
HIGH_RISK_MIN_BUGS = 3
HIGH_RISK_MAX_COMPLETION = 70  # exclusive
RELEASE_READY_MIN_COMPLETION = 80
RELEASE_READY_MAX_BUGS = 3  # exclusive


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_timestamp(value: str) -> Optional[datetime]:
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.fromisoformat(text))
    except ValueError:
        return None


def days_since_update(last_updated: str, now: Optional[datetime] = None) -> Optional[int]:
    """Return whole calendar days elapsed since *last_updated*.

    Date-only and naive timestamps are read as UTC. Returns ``None`` when
    the value is not an ISO-8601 date.
    """
    updated = _parse_timestamp(last_updated)
    if updated is None:
        return None
    reference = _as_utc(now) if now is not None else datetime.now(timezone.utc)
    return (reference - updated) // timedelta(days=1)


def _status_value(status: Any) -> str:
    return str(getattr(status, "value", status))


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

def calculate_drift(
    projects: Sequence[ProjectSummary], now: Optional[datetime] = None
) -> list[DriftProject]:
    """Active projects not updated for more than 20 days, stalest first."""
    drift: list[DriftProject] = []
    for project in projects:
        manifest = project.manifest
        if manifest.status != ProjectStatus.ACTIVE:
            continue
        days = days_since_update(manifest.last_updated, now)
        if days is None or days <= DRIFT_THRESHOLD_DAYS:
            continue
        drift.append(DriftProject(
            project_id=manifest.project_id,
            name=manifest.name,
            status=_status_value(manifest.status),
            days_since_update=days,
        ))
    drift.sort(key=lambda d: -d.days_since_update)
    return drift


def calculate_quick_wins(projects: Sequence[ProjectSummary]) -> list[QuickWin]:
    """Projects at least half done with one to five open items, fewest first."""
    wins: list[QuickWin] = []
    for project in projects:
        summary = project.work_items_summary
        if not 0 < summary.incomplete <= QUICK_WIN_MAX_INCOMPLETE:
            continue
        if summary.completion_percentage < QUICK_WIN_MIN_COMPLETION:
            continue
        wins.append(QuickWin(
            project_id=project.manifest.project_id,
            name=project.manifest.name,
            incomplete_count=summary.incomplete,
            completion_percentage=summary.completion_percentage,
        ))
    wins.sort(key=lambda w: w.incomplete_count)
    return wins


def calculate_high_risk(projects: Sequence[ProjectSummary]) -> list[HighRiskProject]:
    """Projects with three or more bugs and under 70% completion.

    Sorted by bug count descending, then completion ascending.
    """
    risky: list[HighRiskProject] = []
    for project in projects:
        summary = project.work_items_summary
        if summary.by_type.bugs < HIGH_RISK_MIN_BUGS:
            continue
        if summary.completion_percentage >= HIGH_RISK_MAX_COMPLETION:
            continue
        risky.append(HighRiskProject(
            project_id=project.manifest.project_id,
            name=project.manifest.name,
            bug_count=summary.by_type.bugs,
            completion_percentage=summary.completion_percentage,
            total_work_items=summary.total,
        ))
    risky.sort(key=lambda r: (-r.bug_count, r.completion_percentage))
    return risky


def calculate_release_ready(projects: Sequence[ProjectSummary]) -> list[ReleaseReadyProject]:
    """Non-archived projects at least 80% complete with fewer than three bugs.

    Sorted by completion descending, then bug count ascending.
    """
    ready: list[ReleaseReadyProject] = []
    for project in projects:
        summary = project.work_items_summary
        if summary.completion_percentage < RELEASE_READY_MIN_COMPLETION:
            continue
        if summary.by_type.bugs >= RELEASE_READY_MAX_BUGS:
            continue
        if project.manifest.status == ProjectStatus.ARCHIVED:
            continue
        ready.append(ReleaseReadyProject(
            project_id=project.manifest.project_id,
            name=project.manifest.name,
            completion_percentage=summary.completion_percentage,
            bug_count=summary.by_type.bugs,
            total_work_items=summary.total,
        ))
    ready.sort(key=lambda r: (-r.completion_percentage, r.bug_count))
    return ready


def calculate_aggregation(projects: Sequence[ProjectSummary]) -> CrossProjectAggregation:
    """Sum work item counts and tally projects per status.

    Statuses outside the four known values are not bucketed.
    """
    by_type = {category.value: 0 for category in WorkItemType}
    by_status = {status.value: 0 for status in ProjectStatus}
    total = completed = incomplete = 0

    for project in projects:
        summary = project.work_items_summary
        total += summary.total
        completed += summary.completed
        incomplete += summary.incomplete
        for category in by_type:
            by_type[category] += getattr(summary.by_type, category)
        status = _status_value(project.manifest.status)
        if status in by_status:
            by_status[status] += 1

    return CrossProjectAggregation(
        total_projects=len(projects),
        total_work_items=total,
        completed_work_items=completed,
        incomplete_work_items=incomplete,
        by_type=WorkItemCounts(**by_type),
        by_status=StatusCounts(**by_status),
    )


def calculate_insights(
    projects: Sequence[ProjectSummary], now: Optional[datetime] = None
) -> Insights:
    """Compute every insight for *projects*."""
    return Insights(
        drift=calculate_drift(projects, now),
        quick_wins=calculate_quick_wins(projects),
        high_risk=calculate_high_risk(projects),
        release_ready=calculate_release_ready(projects),
        aggregation=calculate_aggregation(projects),
    )
