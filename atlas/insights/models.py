"""Pydantic v2 models for project summaries and derived insights."""

from __future__ import annotations

from pydantic import Field

from atlas.parser.models import AtlasModel, Manifest


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

class WorkItemCounts(AtlasModel):
    """Work item counts per category."""
    features: int = 0
    enhancements: int = 0
    bugs: int = 0
    tasks: int = 0


class WorkItemsSummary(AtlasModel):
    """Rollup of a project's work items."""
    total: int = 0
    completed: int = 0
    incomplete: int = 0
    completion_percentage: int = Field(default=0, ge=0, le=100)
    by_type: WorkItemCounts = Field(default_factory=WorkItemCounts)


class ProjectSummary(AtlasModel):
    """Counts-only projection of a parsed project, as stored in ``index.json``."""
    manifest: Manifest
    work_items_summary: WorkItemsSummary = Field(default_factory=WorkItemsSummary)


# ---------------------------------------------------------------------------
# Insights
# ---------------------------------------------------------------------------

class DriftProject(AtlasModel):
    """An active project that has not been updated recently."""
    project_id: str
    name: str
    status: str
    days_since_update: int


class QuickWin(AtlasModel):
    """A mostly finished project with only a few open items."""
    project_id: str
    name: str
    incomplete_count: int
    completion_percentage: int


class HighRiskProject(AtlasModel):
    """A project with many bugs and little progress."""
    project_id: str
    name: str
    bug_count: int
    completion_percentage: int
    total_work_items: int


class ReleaseReadyProject(AtlasModel):
    """A nearly complete project with few bugs."""
    project_id: str
    name: str
    completion_percentage: int
    bug_count: int
    total_work_items: int


class StatusCounts(AtlasModel):
    """Project counts per manifest status; every bucket is always present."""
    active: int = 0
    mvp: int = 0
    paused: int = 0
    archived: int = 0


class CrossProjectAggregation(AtlasModel):
    """Totals across every summarised project."""
    total_projects: int = 0
    total_work_items: int = 0
    completed_work_items: int = 0
    incomplete_work_items: int = 0
    by_type: WorkItemCounts = Field(default_factory=WorkItemCounts)
    by_status: StatusCounts = Field(default_factory=StatusCounts)


class Insights(AtlasModel):
    """Every derived insight for one collection of summaries."""
    drift: list[DriftProject] = Field(default_factory=list)
    quick_wins: list[QuickWin] = Field(default_factory=list)
    high_risk: list[HighRiskProject] = Field(default_factory=list)
    release_ready: list[ReleaseReadyProject] = Field(default_factory=list)
    aggregation: CrossProjectAggregation = Field(default_factory=CrossProjectAggregation)
