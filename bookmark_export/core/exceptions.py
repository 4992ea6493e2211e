"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch library-specific errors and re-raise as these.
"""
from typing import Any, Optional


class CoreError(Exception):
    """Base for all core domain errors."""
    pass


class EnumerationError(CoreError):
    """Source store could not list the children of a bookmark."""

    def __init__(
        self,
        message: str,
        parent_id: Any = None,
        title: Optional[str] = None,
    ):
        super().__init__(message)
        self.parent_id = parent_id
        self.title = title


class InsertionError(CoreError):
    """Destination store rejected or failed an insert."""

    def __init__(
        self,
        message: str,
        title: Optional[str] = None,
        parent_id: Any = None,
    ):
        super().__init__(message)
        self.title = title
        self.parent_id = parent_id


class PrerequisiteMissingError(CoreError):
    """A store or document handle needed by the export is unavailable."""
    pass


class PDFError(CoreError):
    """PDF operation failed."""
    pass


class ValidationError(CoreError):
    """Data validation failed."""
    pass


class ExportError(CoreError):
    """Export pipeline failed."""
    pass
