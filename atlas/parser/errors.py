"""Per-document parse failures.

Every failure carries a short ``kind`` tag so batch callers can record
``(project, kind, message)`` without inspecting exception classes.
"""

from __future__ import annotations


class ProjectParseError(Exception):
    """Base class for failures that reject a single project document."""

    kind = "ProjectParseError"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ManifestMissingError(ProjectParseError):
    """No delimited manifest block was found."""

    kind = "ManifestMissing"

    def __init__(self, message: str = "Manifest block not found") -> None:
        super().__init__(message)


class ManifestInvalidError(ProjectParseError):
    """The manifest block exists but cannot be accepted."""

    kind = "ManifestInvalid"


class ManifestSyntaxError(ManifestInvalidError):
    """The manifest payload is not valid JSON."""

    kind = "ManifestSyntaxError"


class ManifestSchemaError(ManifestInvalidError):
    """The manifest JSON is well formed but violates the schema."""

    kind = "ManifestSchemaError"

    def __init__(self, errors: list[str]) -> None:
        self.errors = list(errors)
        super().__init__(f"Validation failed: {', '.join(self.errors)}")


class SectionParseError(ProjectParseError):
    """The markdown body could not be tokenised."""

    kind = "SectionParseFailure"
