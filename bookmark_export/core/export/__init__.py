"""Export pipeline built on the outline reader and writer."""
from bookmark_export.core.export.exporter import (
    BookmarkExporter,
    ExportResult,
    ExportStage,
)

__all__ = ["BookmarkExporter", "ExportResult", "ExportStage"]
