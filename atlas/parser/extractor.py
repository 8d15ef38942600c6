"""Project document parser for Project Atlas.

Turns one project document into a :class:`ParsedProject`: extracts and
validates the embedded manifest, then segments the remaining markdown into
sections and work items. Pure and synchronous; callers that read documents
asynchronously call it at the boundary.
"""

from __future__ import annotations

from .blocks import parse_blocks
from .errors import ManifestMissingError
from .manifest import extract_manifest, parse_manifest
from .models import ParsedProject, Section, WorkItem
from .sections import segment_sections


def parse_markdown_sections(content: str) -> tuple[list[Section], list[WorkItem]]:
    """Segment manifest-free markdown into sections and work items.

    Raises:
        SectionParseError: If the markdown cannot be tokenised.
    """
    return segment_sections(parse_blocks(content))


def parse_project(content: str) -> ParsedProject:
    """Parse a complete project document.

    Args:
        content: The raw markdown document, manifest included.

    Returns:
        The fully populated project. There is no partial result: sections
        are never returned without a valid manifest.

    Raises:
        ManifestMissingError: If no delimited manifest block is present.
        ManifestSyntaxError: If the manifest payload is not valid JSON.
        ManifestSchemaError: If the manifest violates the schema.
        SectionParseError: If the markdown body cannot be tokenised.
    """
    extraction = extract_manifest(content)
    if not extraction.payload:
        raise ManifestMissingError()

    manifest = parse_manifest(extraction.payload)
    sections, work_items = parse_markdown_sections(extraction.body)
    return ParsedProject(manifest=manifest, sections=sections, work_items=work_items)
