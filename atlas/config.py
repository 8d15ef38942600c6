"""Project Atlas configuration.

Typed configuration for aggregation runs. All settings use Pydantic v2
models so they are validated at construction time; ``Config.from_env``
reads overrides from environment variables. ``Config`` also owns the
layout of the aggregated data directory.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel


class ConfigError(Exception):
    """Raised when a configuration file cannot be read or is invalid."""


class GitHubConfig(BaseModel):
    """Settings for fetching project documents from GitHub."""

    api_url: str = Field(default="https://api.github.com")
    token: Optional[str] = Field(default=None, repr=False)
    timeout: int = Field(default=30, ge=1, description="Per-request timeout in seconds")
    branches: list[str] = Field(
        default_factory=lambda: ["main", "master"],
        description="Branches tried in order when a file is not found",
    )


class ProjectSource(BaseModel):
    """One entry of the projects configuration file."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    project_id: str
    repo: str
    path: str
    branch: Optional[str] = None


class Config(BaseModel):
    """Global Project Atlas configuration.

    Created once by the CLI (or by ``from_env``) and passed to the
    aggregator and exporter.
    """

    config_path: Path = Field(default=Path("config/projects.json"))
    base_dir: Path = Field(default=Path("."))
    source: Literal["local", "github"] = Field(default="local")
    data_dir: Path = Field(default=Path("data/projects"))
    export_path: Path = Field(default=Path("data/all-projects-summary.md"))
    max_concurrency: int = Field(default=4, ge=1, description="Documents loaded at once")
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    # ------------------------------------------------------------------
    # Derived paths
    # ------------------------------------------------------------------

    @property
    def index_path(self) -> Path:
        """Path to the summaries ``index.json``."""
        return self.data_dir / "index.json"

    def project_path(self, project_id: str) -> Path:
        """Path to the full JSON record of one project."""
        return self.data_dir / f"{project_id}.json"

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> "Config":
        """Build a ``Config`` from environment variables.

        Recognised variables (all optional):
            ATLAS_CONFIG_PATH, ATLAS_BASE_DIR, ATLAS_SOURCE, ATLAS_DATA_DIR,
            ATLAS_EXPORT_PATH, ATLAS_MAX_CONCURRENCY, GITHUB_TOKEN,
            ATLAS_GITHUB_API_URL, ATLAS_GITHUB_TIMEOUT.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("ATLAS_CONFIG_PATH"):
            kwargs["config_path"] = Path(os.environ["ATLAS_CONFIG_PATH"])
        if os.environ.get("ATLAS_BASE_DIR"):
            kwargs["base_dir"] = Path(os.environ["ATLAS_BASE_DIR"])
        if os.environ.get("ATLAS_SOURCE"):
            kwargs["source"] = os.environ["ATLAS_SOURCE"]
        if os.environ.get("ATLAS_DATA_DIR"):
            kwargs["data_dir"] = Path(os.environ["ATLAS_DATA_DIR"])
        if os.environ.get("ATLAS_EXPORT_PATH"):
            kwargs["export_path"] = Path(os.environ["ATLAS_EXPORT_PATH"])
        if os.environ.get("ATLAS_MAX_CONCURRENCY"):
            kwargs["max_concurrency"] = int(os.environ["ATLAS_MAX_CONCURRENCY"])

        github_kwargs: dict[str, Any] = {}
        if os.environ.get("GITHUB_TOKEN"):
            github_kwargs["token"] = os.environ["GITHUB_TOKEN"]
        if os.environ.get("ATLAS_GITHUB_API_URL"):
            github_kwargs["api_url"] = os.environ["ATLAS_GITHUB_API_URL"]
        if os.environ.get("ATLAS_GITHUB_TIMEOUT"):
            github_kwargs["timeout"] = int(os.environ["ATLAS_GITHUB_TIMEOUT"])

        return cls(github=GitHubConfig(**github_kwargs), **kwargs)

    def ensure_directories(self) -> None:
        """Create the data directory an aggregation run writes into."""
        self.data_dir.mkdir(parents=True, exist_ok=True)


def load_project_sources(path: Path) -> list[ProjectSource]:
    """Read the projects configuration file (a JSON array of sources).

    Raises:
        ConfigError: If the file is missing, not JSON, or malformed.
    """
    try:
        raw = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Failed to load config: {exc}") from exc

    if not isinstance(raw, list):
        raise ConfigError(f"Failed to load config: expected a JSON array in {path}")

    try:
        return [ProjectSource.model_validate(entry) for entry in raw]
    except ValidationError as exc:
        raise ConfigError(f"Failed to load config: {exc}") from exc
