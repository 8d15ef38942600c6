"""Projection of parsed projects into counts-only summaries."""

from __future__ import annotations

from collections.abc import Iterable

from atlas.parser.models import ParsedProject, WorkItem, WorkItemType

from .models import ProjectSummary, WorkItemCounts, WorkItemsSummary


def completion_percentage(completed: int, total: int) -> int:
    """Return ``completed / total`` as a whole percentage, rounding halves up.

    A project without work items is 0% complete.
    """
    if total <= 0:
        return 0
    return (200 * completed + total) // (2 * total)


def summarize_work_items(work_items: Iterable[WorkItem]) -> WorkItemsSummary:
    """Count work items overall, by completion and by category."""
    by_type = {category.value: 0 for category in WorkItemType}
    total = 0
    completed = 0
    for item in work_items:
        total += 1
        if item.completed:
            completed += 1
        by_type[WorkItemType(item.type).value] += 1

    return WorkItemsSummary(
        total=total,
        completed=completed,
        incomplete=total - completed,
        completion_percentage=completion_percentage(completed, total),
        by_type=WorkItemCounts(**by_type),
    )


def summarize_project(project: ParsedProject) -> ProjectSummary:
    """Build the index entry for *project*."""
    return ProjectSummary(
        manifest=project.manifest,
        work_items_summary=summarize_work_items(project.work_items),
    )
