"""Bookmark store port interfaces.

Defines the contracts for enumerating and creating bookmarks. The outline
reader and writer depend only on these abstractions, not on a specific PDF
library.
"""
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional, Sequence

from bookmark_export.core.models.bookmark import BookmarkSpec


class SourceBookmarkStore(ABC):
    """Read side of a document's bookmark store.

    Implementations: PyMuPDFOutlineReader
    """

    @abstractmethod
    async def get_children(
        self, parent_id: Optional[Any] = None
    ) -> Sequence[Mapping[str, Any]]:
        """List the direct children of a bookmark.

        Args:
            parent_id: Store-scoped id of the parent, or None for the roots

        Returns:
            Raw records in display order, each with id, title, page, left,
            top, zoomFactor, zoomMode, color, isBold, isItalic
        """
        pass


class DestinationBookmarkStore(ABC):
    """Write side of a document's bookmark store.

    Implementations: PyMuPDFOutlineWriter
    """

    @abstractmethod
    async def add_bookmark(self, spec: BookmarkSpec) -> Any:
        """Insert one bookmark.

        Args:
            spec: Insert request; spec.parent_id is None for a root bookmark

        Returns:
            The id this store assigned to the new bookmark
        """
        pass
