"""Configuration for the bookmark export pipeline."""
from bookmark_export.config.settings import EXPORT_SETTINGS, ExportSettings, load_settings

__all__ = ["EXPORT_SETTINGS", "ExportSettings", "load_settings"]
