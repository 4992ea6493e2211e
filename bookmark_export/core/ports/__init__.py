"""Abstract interfaces for external dependencies."""
from bookmark_export.core.ports.bookmarks import (
    DestinationBookmarkStore,
    SourceBookmarkStore,
)
from bookmark_export.core.ports.document import (
    DestinationDocumentPort,
    DocumentFactoryPort,
    SourceDocumentPort,
)

__all__ = [
    "SourceBookmarkStore",
    "DestinationBookmarkStore",
    "SourceDocumentPort",
    "DestinationDocumentPort",
    "DocumentFactoryPort",
]
