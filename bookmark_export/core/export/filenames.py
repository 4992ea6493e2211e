"""
Output file naming.

Derives the exported document's file name from the source name or a
user-supplied one.
"""
import re
from typing import Any, Optional

from bookmark_export.config.limits import MAX_FILENAME_LENGTH

ILLEGAL_CHARS = re.compile(r'[/\\:*?"<>|]')
PDF_SUFFIX = re.compile(r"\.pdf$", re.IGNORECASE)


def sanitize_filename(
    name: Any,
    default: str = "exported_book",
    max_length: int = MAX_FILENAME_LENGTH,
) -> str:
    """
    Remove characters that are illegal in file names.

    Args:
        name: Raw file name (non-strings yield the default)
        default: Name returned when nothing usable is left
        max_length: Maximum length kept before trimming

    Returns:
        Safe file name
    """
    if not isinstance(name, str):
        return default
    return ILLEGAL_CHARS.sub("", name)[:max_length].strip() or default


def ensure_extension(name: str, extension: str = ".pdf") -> str:
    """Append extension unless name already ends with it (any case)."""
    if name.lower().endswith(extension.lower()):
        return name
    return name + extension


def base_name(raw: Optional[str], default: str) -> str:
    """
    Strip a trailing .pdf from a document's file name.

    Args:
        raw: File name reported by the document, possibly None or blank
        default: Returned when raw is not a usable name

    Returns:
        Base name without extension
    """
    if isinstance(raw, str) and raw.strip():
        return PDF_SUFFIX.sub("", raw.strip()).strip() or default
    return default


def default_output_name(base: str, suffix: str = "_with_bookmarks") -> str:
    """Suggested output name for a source base name."""
    return f"{base}{suffix}"
