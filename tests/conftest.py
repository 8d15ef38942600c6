"""Shared pytest fixtures for the Project Atlas test suite.

Provides reusable fixtures for:
- The sample project document
- Manifest dictionaries and document builders
- Project summaries with chosen work item counts
- Temporary source and data directories
"""

from __future__ import annotations

import json
import textwrap
from pathlib import Path
from typing import Any, Callable

import pytest

from atlas.insights.models import ProjectSummary, WorkItemCounts, WorkItemsSummary
from atlas.insights.summary import completion_percentage
from atlas.parser.models import Manifest


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_document_path() -> Path:
    """Path to the sample-project.md fixture file."""
    path = Path(__file__).parent / "fixtures" / "sample-project.md"
    assert path.exists(), f"Sample project fixture not found at {path}"
    return path


@pytest.fixture
def sample_document_text(sample_document_path: Path) -> str:
    """Raw text of the sample project document."""
    return sample_document_path.read_text(encoding="utf-8")


def _manifest_dict(**overrides: Any) -> dict[str, Any]:
    data: dict[str, Any] = {
        "schemaVersion": 1,
        "projectId": "demo",
        "name": "Demo",
        "repo": "acme/demo",
        "visibility": "public",
        "status": "active",
        "domain": "other",
        "type": "tool",
        "lastUpdated": "2026-01-01",
        "links": {"prod": None, "staging": None},
        "tags": [],
    }
    data.update(overrides)
    return data


@pytest.fixture
def manifest_dict() -> Callable[..., dict[str, Any]]:
    """Factory for valid camelCase manifest dictionaries."""
    return _manifest_dict


def _build_document(body: str, manifest: dict[str, Any] | None = None) -> str:
    payload = json.dumps(manifest if manifest is not None else _manifest_dict(), indent=2)
    return (
        "# Demo\n\n"
        "<!-- PROJECT-MANIFEST:START -->\n"
        f"```json\n{payload}\n```\n"
        "<!-- PROJECT-MANIFEST:END -->\n\n"
        + textwrap.dedent(body)
    )


@pytest.fixture
def build_document() -> Callable[..., str]:
    """Factory wrapping a markdown body in a manifest-bearing document."""
    return _build_document


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

def _make_summary(
    project_id: str = "demo",
    *,
    status: str = "active",
    last_updated: str = "2026-01-01",
    total: int = 0,
    completed: int = 0,
    bugs: int = 0,
) -> ProjectSummary:
    manifest = Manifest.model_validate(_manifest_dict(
        projectId=project_id,
        name=project_id.title(),
        status=status,
        lastUpdated=last_updated,
    ))
    return ProjectSummary(
        manifest=manifest,
        work_items_summary=WorkItemsSummary(
            total=total,
            completed=completed,
            incomplete=total - completed,
            completion_percentage=completion_percentage(completed, total),
            by_type=WorkItemCounts(bugs=bugs, tasks=total - bugs),
        ),
    )


@pytest.fixture
def make_summary() -> Callable[..., ProjectSummary]:
    """Factory for project summaries with chosen counts."""
    return _make_summary


# ---------------------------------------------------------------------------
# Directories
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_data_dir(tmp_path: Path) -> Path:
    """Temporary aggregated-data directory (auto-cleanup)."""
    data_dir = tmp_path / "data" / "projects"
    data_dir.mkdir(parents=True)
    yield data_dir
