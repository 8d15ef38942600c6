"""Project Atlas document parser.

Parses markdown project documents into a validated manifest, ordered
top-level sections and checkbox work items.

Usage::

    from atlas.parser import parse_project

    project = parse_project(path.read_text(encoding="utf-8"))
    print(project.manifest.name)
    print(len(project.work_items))
"""

from atlas.parser.errors import (
    ManifestInvalidError,
    ManifestMissingError,
    ManifestSchemaError,
    ManifestSyntaxError,
    ProjectParseError,
    SectionParseError,
)
from atlas.parser.extractor import parse_markdown_sections, parse_project
from atlas.parser.manifest import extract_manifest, parse_manifest, validate_manifest
from atlas.parser.models import (
    Manifest,
    ParsedProject,
    ProjectStatus,
    Section,
    WorkItem,
    WorkItemType,
)
from atlas.parser.sections import classify_heading

__all__ = [
    "parse_project",
    "parse_markdown_sections",
    "extract_manifest",
    "parse_manifest",
    "validate_manifest",
    "classify_heading",
    "Manifest",
    "ParsedProject",
    "ProjectStatus",
    "Section",
    "WorkItem",
    "WorkItemType",
    "ProjectParseError",
    "ManifestMissingError",
    "ManifestInvalidError",
    "ManifestSyntaxError",
    "ManifestSchemaError",
    "SectionParseError",
]
