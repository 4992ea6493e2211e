"""
Bookmark Export API

FastAPI-based REST API for exporting PDFs with their bookmarks.
"""

from .export_api import create_app, ExportAPI

__all__ = ["create_app", "ExportAPI"]
