"""Batch aggregation of project documents.

Loads every configured project document (from disk or GitHub), parses each
one independently, and writes the per-project JSON records plus the
``index.json`` summary array. One document failing never stops or alters
the others; failures are collected as :class:`ProjectError` entries.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path
from typing import Union

from pydantic import BaseModel, Field
from rich.panel import Panel

from atlas.config import Config, ProjectSource, load_project_sources
from atlas.fetcher import GitHubClient
from atlas.insights.models import ProjectSummary
from atlas.insights.summary import summarize_project
from atlas.parser import ParsedProject, ProjectParseError, parse_project
from atlas.utils import (
    console,
    load_json_list,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    save_json,
)


# ---------------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------------

class ProjectError(BaseModel):
    """A per-document failure recorded during aggregation."""

    project_id: str = Field(..., description="Project id from the sources config")
    kind: str = Field(..., description="Failure kind, e.g. 'ManifestMissing'")
    message: str = Field(default="", description="Human-readable detail")


class AggregationResult(BaseModel):
    """Outcome of one aggregation run."""

    success: bool = Field(default=True)
    projects: list[ParsedProject] = Field(default_factory=list)
    errors: list[ProjectError] = Field(default_factory=list)


class DocumentLoadError(Exception):
    """Raised when a project document cannot be obtained."""

    def __init__(self, kind: str, message: str) -> None:
        self.kind = kind
        self.message = message
        super().__init__(message)


# ---------------------------------------------------------------------------
# Aggregator
# ---------------------------------------------------------------------------

class Aggregator:
    """Loads and parses a batch of project documents.

    Documents are loaded concurrently (bounded by ``max_concurrency``);
    parsing is synchronous and shares no state between documents.
    """

    def __init__(self, config: Config, client: GitHubClient | None = None) -> None:
        self.config = config
        self.client = client or GitHubClient(
            api_url=config.github.api_url,
            token=config.github.token,
            timeout=config.github.timeout,
            branches=config.github.branches,
        )

    async def load_document(self, source: ProjectSource) -> str:
        """Return the raw markdown of one configured project.

        Raises:
            DocumentLoadError: If the file is missing or the fetch failed.
        """
        if self.config.source == "github":
            result = await self.client.fetch_project_file(
                source.repo, source.path, source.branch
            )
            if not result.success or result.content is None:
                raise DocumentLoadError("FetchFailed", result.error or "Unknown fetch error")
            return result.content

        file_path = self.config.base_dir / source.path
        if not file_path.is_file():
            raise DocumentLoadError("FileNotFound", f"File not found: {file_path}")
        try:
            return await asyncio.to_thread(file_path.read_text, "utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise DocumentLoadError(
                "ReadFailed", f"Failed to read file {file_path}: {exc}"
            ) from exc

    async def _process(
        self, source: ProjectSource, semaphore: asyncio.Semaphore
    ) -> Union[ParsedProject, ProjectError]:
        async with semaphore:
            try:
                content = await self.load_document(source)
            except DocumentLoadError as exc:
                return ProjectError(
                    project_id=source.project_id, kind=exc.kind, message=exc.message
                )

        try:
            return parse_project(content)
        except ProjectParseError as exc:
            return ProjectError(
                project_id=source.project_id, kind=exc.kind, message=exc.message
            )

    async def aggregate(self, sources: Sequence[ProjectSource]) -> AggregationResult:
        """Load and parse every source, collecting per-document failures.

        Results keep the order of *sources*. When two documents declare the
        same ``projectId`` the first one wins and the later one is reported
        as ``DuplicateProjectId``.
        """
        semaphore = asyncio.Semaphore(self.config.max_concurrency)
        outcomes = await asyncio.gather(
            *(self._process(source, semaphore) for source in sources)
        )

        projects: list[ParsedProject] = []
        errors: list[ProjectError] = []
        seen: dict[str, str] = {}

        for source, outcome in zip(sources, outcomes):
            if isinstance(outcome, ProjectError):
                errors.append(outcome)
                continue
            project_id = outcome.manifest.project_id
            if project_id in seen:
                errors.append(ProjectError(
                    project_id=source.project_id,
                    kind="DuplicateProjectId",
                    message=(
                        f"projectId '{project_id}' is already used by "
                        f"source '{seen[project_id]}'"
                    ),
                ))
                continue
            seen[project_id] = source.project_id
            projects.append(outcome)

        return AggregationResult(
            success=not errors or bool(projects),
            projects=projects,
            errors=errors,
        )


# ---------------------------------------------------------------------------
# Writer
# ---------------------------------------------------------------------------

async def write_aggregated_data(
    projects: Sequence[ParsedProject], config: Config
) -> list[Path]:
    """Write ``index.json`` plus one ``<projectId>.json`` per project.

    Files land in ``config.data_dir``.

    Returns:
        Every path written, index first.
    """
    await save_json(
        [summarize_project(project).to_json_dict() for project in projects],
        config.index_path,
    )

    written = [config.index_path]
    for project in projects:
        project_path = config.project_path(project.manifest.project_id)
        await save_json(project.to_json_dict(), project_path)
        written.append(project_path)
    return written


def load_index(path: str | Path) -> list[ProjectSummary]:
    """Read an ``index.json`` summary array.

    Raises:
        FileNotFoundError: If the index does not exist.
        ValueError: If the index is not a JSON array of summaries.
    """
    index_path = Path(path)
    if not index_path.exists():
        raise FileNotFoundError(f"Index file not found: {index_path}")
    return [ProjectSummary.model_validate(entry) for entry in load_json_list(index_path)]


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------

async def run_aggregation(config: Config) -> AggregationResult:
    """Load the sources config, aggregate every project and write the output.

    Raises:
        ConfigError: If the sources config cannot be loaded.
    """
    console.print(
        Panel(
            f"[bold bright_cyan]Project Atlas Aggregation[/bold bright_cyan]\n"
            f"Config : {config.config_path}\n"
            f"Source : {config.source}\n"
            f"Output : {config.data_dir}",
            title="[bold]Aggregation Start[/bold]",
            border_style="bright_cyan",
        )
    )

    sources = load_project_sources(config.config_path)
    console.print(f"  Found {len(sources)} project(s) in config")

    result = await Aggregator(config).aggregate(sources)

    print_success(f"Successfully parsed: {len(result.projects)} project(s)")
    if result.errors:
        print_error(f"Errors: {len(result.errors)} project(s) failed")
        for error in result.errors:
            console.print(f"  [red]- {error.project_id} ({error.kind}): {error.message}[/red]")

    if result.projects:
        config.ensure_directories()
        written = await write_aggregated_data(result.projects, config)
        print_summary_table(
            {
                "Projects written": str(len(result.projects)),
                "Index file": str(written[0]),
                "Failures": str(len(result.errors)),
            },
            title="Aggregation Results",
        )
    else:
        print_warning("No projects to write")

    return result
