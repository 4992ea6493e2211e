"""
Bookmark export pipeline.

Copies every page of a source document into a new document, then copies
the bookmark tree and serializes the result:

1. Resolve the output file name
2. Extract all pages from the source
3. Read the source bookmark tree
4. Create the destination document and insert the pages
5. Write the bookmark tree into the destination
6. Serialize the destination document
"""
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from bookmark_export.config.settings import EXPORT_SETTINGS, ExportSettings
from bookmark_export.core.exceptions import CoreError, ExportError, PrerequisiteMissingError
from bookmark_export.core.export.filenames import (
    base_name,
    default_output_name,
    ensure_extension,
    sanitize_filename,
)
from bookmark_export.core.models.bookmark import count_nodes
from bookmark_export.core.outline.reader import read_tree
from bookmark_export.core.outline.writer import write_tree
from bookmark_export.core.ports.bookmarks import DestinationBookmarkStore
from bookmark_export.core.ports.document import (
    DestinationDocumentPort,
    DocumentFactoryPort,
    SourceDocumentPort,
)

logger = logging.getLogger(__name__)


class ExportStage(str, Enum):
    """Progress stages reported while exporting."""
    PREPARING = "Preparing..."
    EXTRACTING_PAGES = "Extracting pages..."
    READING_BOOKMARKS = "Reading bookmarks..."
    CREATING_DOCUMENT = "Creating new document..."
    RESTORING_BOOKMARKS = "Restoring bookmarks..."
    GENERATING_FILE = "Generating file..."
    DONE = "Done!"


ProgressCallback = Callable[[ExportStage], None]


@dataclass
class ExportResult:
    """Exported document and what went into it."""
    file_name: str
    data: bytes
    page_count: int
    bookmark_count: int
    elapsed: float = 0.0


def merge_chunks(chunks: List[bytes]) -> bytes:
    """Concatenate page data chunks in order."""
    return b"".join(chunks)


class BookmarkExporter:
    """
    Runs the export pipeline against document ports.

    Usage:
        exporter = BookmarkExporter(progress=print)
        result = await exporter.export(source_doc, document_factory)
    """

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        progress: Optional[ProgressCallback] = None,
    ):
        """
        Initialize exporter.

        Args:
            settings: Export settings (default: EXPORT_SETTINGS)
            progress: Optional callback receiving each ExportStage
        """
        self.settings = settings or EXPORT_SETTINGS
        self._progress = progress

    def output_name(self, source: SourceDocumentPort, requested: Optional[str] = None) -> str:
        """
        Resolve the exported file name.

        Args:
            source: Source document
            requested: Name chosen by the user (without extension), if any

        Returns:
            Sanitized file name ending in the configured extension
        """
        s = self.settings
        if requested is None:
            try:
                raw = source.file_name()
            except Exception as e:
                logger.warning(f"Failed to get source file name: {e}")
                raw = None
            requested = default_output_name(base_name(raw, s.default_file_name), s.output_suffix)

        name = sanitize_filename(requested, s.fallback_file_name, s.max_filename_length)
        return ensure_extension(name, s.file_extension)

    async def export(
        self,
        source: SourceDocumentPort,
        factory: DocumentFactoryPort,
        file_name: Optional[str] = None,
    ) -> ExportResult:
        """
        Export source with its bookmarks into a new document.

        The destination document is closed once serialized. A failure leaves
        any partially built destination document open and as is.

        Args:
            source: Document to copy
            factory: Creates the destination document
            file_name: Requested output name; derived from the source if None

        Returns:
            ExportResult with the serialized document

        Raises:
            CoreError: Any pipeline failure (ExportError wraps unexpected ones)
        """
        started = time.time()
        try:
            return await self._run(source, factory, file_name, started)
        except CoreError as e:
            logger.error(f"Export failed: {e}")
            raise
        except Exception as e:
            logger.error(f"Export failed: {e}", exc_info=True)
            raise ExportError(f"Export failed: {e}") from e

    async def _run(
        self,
        source: SourceDocumentPort,
        factory: DocumentFactoryPort,
        file_name: Optional[str],
        started: float,
    ) -> ExportResult:
        self._report(ExportStage.PREPARING)
        name = self.output_name(source, file_name)
        page_count = source.page_count()
        if page_count < 1:
            raise ExportError("Source document has no pages")

        self._report(ExportStage.EXTRACTING_PAGES)
        pages = merge_chunks(await source.extract_pages(0, page_count - 1))

        self._report(ExportStage.READING_BOOKMARKS)
        tree = await read_tree(await source.bookmark_store(), self.settings.max_concurrency)

        self._report(ExportStage.CREATING_DOCUMENT)
        document = await factory.create_document(name)
        await document.insert_pages(pages, 0, page_count - 1)
        await self._drop_extra_page(document, page_count)

        self._report(ExportStage.RESTORING_BOOKMARKS)
        store = await self._destination_store(document)
        written = await write_tree(store, tree, self.settings.max_concurrency)

        self._report(ExportStage.GENERATING_FILE)
        data = await document.to_bytes()
        document.close()

        self._report(ExportStage.DONE)
        elapsed = time.time() - started
        logger.info(
            f"Exported {name}: {page_count} pages, {written}/{count_nodes(tree)} bookmarks "
            f"in {elapsed:.2f}s"
        )
        return ExportResult(
            file_name=name,
            data=data,
            page_count=page_count,
            bookmark_count=written,
            elapsed=elapsed,
        )

    async def _drop_extra_page(self, document: DestinationDocumentPort, page_count: int) -> None:
        """Remove the blank page some backends create with a new document."""
        if document.page_count() > page_count:
            logger.debug("Removing trailing blank page from new document")
            await document.remove_page(document.page_count() - 1)

    async def _destination_store(self, document: DestinationDocumentPort) -> DestinationBookmarkStore:
        try:
            store = await document.bookmark_store()
        except PrerequisiteMissingError:
            raise
        except Exception as e:
            raise PrerequisiteMissingError(
                f"Failed to obtain bookmark store for new document: {e}"
            ) from e
        if store is None:
            raise PrerequisiteMissingError("Failed to obtain bookmark store for new document")
        return store

    def _report(self, stage: ExportStage) -> None:
        logger.info(f"Export stage: {stage.name}")
        if self._progress is not None:
            self._progress(stage)
