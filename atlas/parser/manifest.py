"""Manifest extraction and validation.

A project document embeds its manifest between two HTML comment delimiters,
usually wrapped in a fenced ``json`` block::

    <!-- PROJECT-MANIFEST:START -->
    ```json
    {"schemaVersion": 1, ...}
    ```
    <!-- PROJECT-MANIFEST:END -->
"""

from __future__ import annotations

import json
import re
from typing import Any, NamedTuple, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ManifestSchemaError, ManifestSyntaxError
from .models import Manifest


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

MANIFEST_START = "<!-- PROJECT-MANIFEST:START -->"
MANIFEST_END = "<!-- PROJECT-MANIFEST:END -->"

_JSON_FENCE_PATTERN = re.compile(r"```json\s*([\s\S]*?)\s*```")


# ---------------------------------------------------------------------------
# Extraction
# ---------------------------------------------------------------------------

class ManifestExtraction(NamedTuple):
    """Manifest payload (``None`` when absent) and the remaining document."""

    payload: Optional[str]
    body: str


def extract_manifest(content: str) -> ManifestExtraction:
    """Locate the delimited manifest block in *content*.

    Returns the JSON payload and the document with the whole delimited
    region removed. When either delimiter is missing, or the end delimiter
    does not follow the start, the payload is ``None`` and the body is the
    untouched input.
    """
    start = content.find(MANIFEST_START)
    end = content.find(MANIFEST_END)
    if start == -1 or end == -1 or end <= start:
        return ManifestExtraction(payload=None, body=content)

    block = content[start + len(MANIFEST_START):end].strip()
    fence = _JSON_FENCE_PATTERN.search(block)
    payload = fence.group(1).strip() if fence else block

    body = (content[:start] + content[end + len(MANIFEST_END):]).strip()
    return ManifestExtraction(payload=payload, body=body)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class ManifestValidation(BaseModel):
    """Outcome of validating a decoded manifest."""

    valid: bool
    manifest: Optional[Manifest] = None
    errors: list[str] = Field(default_factory=list)


def _format_error(error: dict[str, Any]) -> str:
    path = "/".join(str(part) for part in error.get("loc", ()))
    return f"/{path} {error.get('msg', 'is invalid')}"


def validate_manifest(data: Any) -> ManifestValidation:
    """Validate decoded JSON against the version 1 manifest schema.

    Schema violations are reported, not raised: each message names the
    offending field path and the rule it broke.
    """
    try:
        manifest = Manifest.model_validate(data)
    except ValidationError as exc:
        errors = [_format_error(err) for err in exc.errors()]
        return ManifestValidation(valid=False, errors=errors or ["Unknown validation error"])
    return ManifestValidation(valid=True, manifest=manifest)


def parse_manifest(payload: str) -> Manifest:
    """Decode and validate a manifest payload.

    Raises:
        ManifestSyntaxError: If *payload* is not valid JSON.
        ManifestSchemaError: If the JSON does not satisfy the schema.
    """
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ManifestSyntaxError(f"Invalid manifest JSON: {exc}") from exc

    result = validate_manifest(data)
    if not result.valid or result.manifest is None:
        raise ManifestSchemaError(result.errors)
    return result.manifest
