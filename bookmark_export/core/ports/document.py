"""Document port interfaces.

Defines the contracts the export pipeline needs from a PDF document:
reading pages from the source, building the destination and serializing
it. Core code depends only on these abstractions, not on PyMuPDF.
"""
from abc import ABC, abstractmethod
from typing import List, Optional

from bookmark_export.core.ports.bookmarks import (
    DestinationBookmarkStore,
    SourceBookmarkStore,
)


class SourceDocumentPort(ABC):
    """Document whose pages and bookmarks are exported.

    Implementations: PyMuPDFSourceDocument
    """

    @abstractmethod
    def file_name(self) -> Optional[str]:
        """Original file name of the document, if known."""
        pass

    @abstractmethod
    def page_count(self) -> int:
        """Number of pages."""
        pass

    @abstractmethod
    async def extract_pages(self, start: int, end: int) -> List[bytes]:
        """Extract a page range as PDF data.

        Args:
            start: First page (0-indexed)
            end: Last page (inclusive)

        Returns:
            PDF data chunks; concatenated in order they form one document
        """
        pass

    @abstractmethod
    async def bookmark_store(self) -> SourceBookmarkStore:
        """Bookmark store of this document."""
        pass


class DestinationDocumentPort(ABC):
    """Newly created document that receives pages and bookmarks.

    Implementations: PyMuPDFDestinationDocument
    """

    @abstractmethod
    async def insert_pages(self, data: bytes, start: int, end: int) -> None:
        """Insert pages from PDF data at the start of this document.

        Args:
            data: PDF data holding the pages
            start: First page of data to insert (0-indexed)
            end: Last page of data to insert (inclusive)
        """
        pass

    @abstractmethod
    def page_count(self) -> int:
        """Number of pages."""
        pass

    @abstractmethod
    async def remove_page(self, index: int) -> None:
        """Remove one page (0-indexed)."""
        pass

    @abstractmethod
    async def bookmark_store(self) -> DestinationBookmarkStore:
        """Bookmark store of this document.

        Raises:
            PrerequisiteMissingError: If the document exposes no store
        """
        pass

    @abstractmethod
    async def to_bytes(self) -> bytes:
        """Serialize the document, bookmarks included."""
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the document once it has been serialized."""
        pass


class DocumentFactoryPort(ABC):
    """Creates destination documents.

    Implementations: PyMuPDFDocumentFactory
    """

    @abstractmethod
    async def create_document(self, name: str) -> DestinationDocumentPort:
        """Create an empty document.

        Args:
            name: File name the document will be saved under
        """
        pass
