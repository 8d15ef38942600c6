"""All-projects markdown export.

Produces a single markdown report from the aggregated data directory: the
``index.json`` summaries plus each ``<projectId>.json`` record. The report
holds overall statistics, then per project the manifest, its work item
counts, per-category checklists and the full section bodies.
"""

from __future__ import annotations

import asyncio
import json
from collections.abc import Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console

from atlas.aggregator import load_index
from atlas.config import Config
from atlas.insights.engine import calculate_aggregation
from atlas.insights.models import ProjectSummary, WorkItemCounts
from atlas.insights.summary import completion_percentage
from atlas.parser.models import ParsedProject, WorkItemType
from atlas.utils import load_json

console = Console()

_CATEGORY_TITLES: dict[WorkItemType, str] = {
    WorkItemType.FEATURES: "Features",
    WorkItemType.ENHANCEMENTS: "Enhancements",
    WorkItemType.BUGS: "Bugs",
    WorkItemType.TASKS: "Tasks",
}


class ExportGenerator:
    """Renders and writes the all-projects markdown export."""

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate(self, config: Config) -> Path:
        """Export every project indexed in ``config.data_dir``.

        The report is written to ``config.export_path``. Projects listed in
        the index whose record file is missing are skipped with a warning.

        Raises:
            FileNotFoundError: If ``index.json`` is missing.
        """
        summaries = load_index(config.index_path)

        projects: list[ParsedProject] = []
        for summary in summaries:
            project_path = config.project_path(summary.manifest.project_id)
            if not project_path.exists():
                console.print(f"[yellow]Warning: Project file not found: {project_path}[/yellow]")
                continue
            projects.append(ParsedProject.model_validate(load_json(project_path)))

        content = self.render(summaries, projects)

        output = config.export_path.resolve()
        output.parent.mkdir(parents=True, exist_ok=True)
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(None, output.write_text, content, "utf-8")

        console.print(f"[green]Exported {len(summaries)} project(s) to: {output}[/green]")
        return output

    def render(
        self,
        summaries: Sequence[ProjectSummary],
        projects: Sequence[ParsedProject],
        generated_at: Optional[datetime] = None,
    ) -> str:
        """Render the export for *summaries*, pairing each with its record."""
        timestamp = (generated_at or datetime.now(timezone.utc)).isoformat()
        by_id = {project.manifest.project_id: project for project in projects}

        lines: list[str] = [
            "# Project Atlas - All Projects Export",
            "",
            f"**Generated**: {timestamp}",
            f"**Total Projects**: {len(summaries)}",
            "",
            "---",
            "",
        ]
        lines.extend(self._render_statistics(summaries))

        for summary in summaries:
            project = by_id.get(summary.manifest.project_id)
            if project is None:
                continue
            lines.extend(self._render_project(summary, project))

        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Section renderers
    # ------------------------------------------------------------------

    def _render_statistics(self, summaries: Sequence[ProjectSummary]) -> list[str]:
        totals = calculate_aggregation(summaries)
        lines = [
            "## Summary Statistics",
            "",
            f"- **Total Work Items**: {totals.total_work_items}",
        ]
        if totals.total_work_items > 0:
            percent = completion_percentage(totals.completed_work_items, totals.total_work_items)
            lines.append(f"- **Completed**: {totals.completed_work_items} ({percent}%)")
            lines.append(f"- **Incomplete**: {totals.incomplete_work_items}")
        lines.extend(self._render_by_type(totals.by_type))
        lines.extend(["", "---", ""])
        return lines

    def _render_by_type(self, counts: WorkItemCounts) -> list[str]:
        return [
            "- **By Type**:",
            f"  - Features: {counts.features}",
            f"  - Enhancements: {counts.enhancements}",
            f"  - Bugs: {counts.bugs}",
            f"  - Tasks: {counts.tasks}",
        ]

    def _render_project(self, summary: ProjectSummary, project: ParsedProject) -> list[str]:
        counts = summary.work_items_summary
        lines = [
            f"## {project.manifest.name}",
            "",
            "### Manifest",
            "",
            "```json",
            json.dumps(project.manifest.to_json_dict(), indent=2, ensure_ascii=False),
            "```",
            "",
            "### Work Items Summary",
            "",
            f"- **Total**: {counts.total}",
            f"- **Completed**: {counts.completed} ({counts.completion_percentage}%)",
            f"- **Incomplete**: {counts.incomplete}",
        ]
        lines.extend(self._render_by_type(counts.by_type))
        lines.append("")
        lines.extend(self._render_checklists(project))
        lines.extend(self._render_sections(project))
        lines.extend(["---", ""])
        return lines

    def _render_checklists(self, project: ParsedProject) -> list[str]:
        lines: list[str] = []
        for category, title in _CATEGORY_TITLES.items():
            items = [item for item in project.work_items if item.type == category]
            if not items:
                continue
            lines.extend([f"### {title}", ""])
            for item in items:
                checkbox = "[x]" if item.completed else "[ ]"
                lines.append(f"- {checkbox} {item.content}")
            lines.append("")
        return lines

    def _render_sections(self, project: ParsedProject) -> list[str]:
        if not project.sections:
            return []
        lines = ["### Project Sections", ""]
        for section in project.sections:
            lines.extend([f"#### {section.heading}", "", section.content, ""])
        return lines
