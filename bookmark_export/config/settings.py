"""
Centralized export configuration.

Defaults live in the ExportSettings dataclass. load_settings() layers an
optional YAML file and BOOKMARK_EXPORT_* environment variables on top.
"""
import logging
import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from bookmark_export.config.limits import MAX_FILENAME_LENGTH
from bookmark_export.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "BOOKMARK_EXPORT_"


@dataclass
class ExportSettings:
    """
    Settings for one export pipeline.

    Usage:
        from bookmark_export.config.settings import EXPORT_SETTINGS

        suffix = EXPORT_SETTINGS.output_suffix
    """
    # Base name used when the source document has no usable file name
    default_file_name: str = "ScienceReading_Book"
    # Name used when a requested name sanitizes to nothing
    fallback_file_name: str = "exported_book"
    file_extension: str = ".pdf"
    output_suffix: str = "_with_bookmarks"
    max_filename_length: int = MAX_FILENAME_LENGTH

    # Store calls in flight during outline read/write (None = unlimited)
    max_concurrency: Optional[int] = None

    # Bearer token accepted by the HTTP API
    api_key: str = field(default="bookmark-export-dev-key", repr=False)

    def __post_init__(self):
        if self.max_filename_length < 1:
            raise ValidationError("max_filename_length must be positive")
        if self.max_concurrency is not None and self.max_concurrency < 1:
            raise ValidationError("max_concurrency must be positive")
        if not self.file_extension.startswith("."):
            raise ValidationError(f"file_extension must start with '.': {self.file_extension!r}")
        if not isinstance(self.api_key, str) or not self.api_key.strip():
            raise ValidationError("api_key must be a non-empty string")


# Global default instance
EXPORT_SETTINGS = ExportSettings()


def _coerce(name: str, raw: str) -> Any:
    """Convert an environment string to the type of the named field."""
    if name in ("max_filename_length", "max_concurrency"):
        if name == "max_concurrency" and raw.strip().lower() in ("", "none"):
            return None
        try:
            return int(raw)
        except ValueError as e:
            raise ValidationError(f"{ENV_PREFIX}{name.upper()} must be an integer: {raw!r}") from e
    return raw


def _env_overrides() -> Dict[str, Any]:
    overrides = {}
    for f in fields(ExportSettings):
        raw = os.environ.get(f"{ENV_PREFIX}{f.name.upper()}")
        if raw is not None:
            overrides[f.name] = _coerce(f.name, raw)
    return overrides


def _file_overrides(path: Union[str, Path]) -> Dict[str, Any]:
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ValidationError(f"Cannot read settings file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ValidationError(f"Invalid YAML in settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ValidationError(f"Settings file {path} must contain a mapping")

    known = {f.name for f in fields(ExportSettings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValidationError(f"Unknown settings in {path}: {', '.join(unknown)}")
    return data


def load_settings(path: Optional[Union[str, Path]] = None) -> ExportSettings:
    """
    Load export settings.

    Precedence (highest first): environment, YAML file, dataclass defaults.

    Args:
        path: Optional YAML file with ExportSettings field names as keys

    Returns:
        ExportSettings instance
    """
    overrides: Dict[str, Any] = {}
    if path is not None:
        overrides.update(_file_overrides(path))
        logger.info(f"Loaded settings from {path}")
    overrides.update(_env_overrides())

    if not overrides:
        return EXPORT_SETTINGS
    return replace(EXPORT_SETTINGS, **overrides)
