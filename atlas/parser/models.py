"""Pydantic v2 models for the Project Atlas document parser.

Defines the manifest embedded in every project document and the records the
parser produces from it: sections, work items and the assembled project.
Python attributes are snake_case; the JSON form read from manifests and
written to disk is camelCase.
"""

from __future__ import annotations

from enum import Enum
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class Visibility(str, Enum):
    """Where a project is visible."""
    PUBLIC = "public"
    STAGING = "staging"
    PRIVATE = "private"


class ProjectStatus(str, Enum):
    """Lifecycle status declared by the manifest."""
    ACTIVE = "active"
    MVP = "mvp"
    PAUSED = "paused"
    ARCHIVED = "archived"


class Domain(str, Enum):
    """Business domain a project belongs to."""
    MUSIC = "music"
    MINECRAFT = "minecraft"
    MANAGEMENT = "management"
    OTHER = "other"


class ProjectType(str, Enum):
    """Kind of software the project ships."""
    WEBAPP = "webapp"
    MICROSERVICE = "microservice"
    TOOL = "tool"
    CLI = "cli"
    LIBRARY = "library"
    OTHER = "other"


class WorkItemType(str, Enum):
    """Work item category, derived from the owning section heading."""
    FEATURES = "features"
    ENHANCEMENTS = "enhancements"
    BUGS = "bugs"
    TASKS = "tasks"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class AtlasModel(BaseModel):
    """Base model serialising to camelCase JSON."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_json_dict(self) -> dict:
        """Return the camelCase JSON-compatible representation."""
        return self.model_dump(mode="json", by_alias=True)


# ---------------------------------------------------------------------------
# Manifest
# ---------------------------------------------------------------------------

class ManifestLinks(AtlasModel):
    """Deployment links. Both keys are required but may be null."""

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=False)

    prod: Optional[str] = Field(..., description="Production URL")
    staging: Optional[str] = Field(..., description="Staging URL")


class Manifest(AtlasModel):
    """Schema version 1 project manifest.

    Unknown keys are kept as extra fields so manifests written for a newer
    schema version survive a round trip unchanged.
    """

    # Manifest JSON is matched by its camelCase keys only.
    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=False)

    schema_version: Literal[1] = Field(..., description="Manifest schema version")
    project_id: str = Field(..., description="Corpus-wide unique project identifier")
    name: str = Field(..., description="Human-readable project name")
    repo: str = Field(..., description="Repository in 'owner/repo' form")
    visibility: Visibility
    status: ProjectStatus
    domain: Domain
    type: ProjectType
    last_updated: str = Field(..., description="ISO-8601 date of the last update")
    links: ManifestLinks
    tags: list[str] = Field(..., description="Free-form tags")

    @field_validator("schema_version", mode="before")
    @classmethod
    def _reject_boolean_version(cls, value: object) -> object:
        # JSON true would otherwise compare equal to 1.
        if isinstance(value, bool):
            raise ValueError("schemaVersion must be the number 1")
        return value


# ---------------------------------------------------------------------------
# Parsed document
# ---------------------------------------------------------------------------

class WorkItem(AtlasModel):
    """A checkbox entry under a categorised section."""

    model_config = ConfigDict(frozen=True)

    type: WorkItemType
    content: str
    completed: bool = False
    section: str = Field(..., description="Heading text of the owning section")


class Section(AtlasModel):
    """A top-level (``##``) region of a project document."""

    model_config = ConfigDict(frozen=True)

    heading: str
    level: int = 2
    content: str = ""
    work_items: list[WorkItem] = Field(default_factory=list)


class ParsedProject(AtlasModel):
    """Complete result of parsing one project document.

    ``work_items`` holds the same objects as the sections' own lists, in
    section order.
    """

    model_config = ConfigDict(frozen=True)

    manifest: Manifest
    sections: list[Section] = Field(default_factory=list)
    work_items: list[WorkItem] = Field(default_factory=list)
