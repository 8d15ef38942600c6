"""Report generation for Project Atlas.

Renders aggregated project data into human-readable documents.
"""

from atlas.reporter.export import ExportGenerator

__all__ = ["ExportGenerator"]
