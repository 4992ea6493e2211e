"""PyMuPDF document adapters.

Implements the document ports using fitz (PyMuPDF). Blocking fitz calls
run in the default executor so the event loop stays responsive.
"""
import asyncio
import functools
import logging
from pathlib import Path
from typing import Any, Callable, List, Optional, Union

import fitz

from bookmark_export.core.exceptions import PDFError
from bookmark_export.core.ports.document import (
    DestinationDocumentPort,
    DocumentFactoryPort,
    SourceDocumentPort,
)
from bookmark_export.adapters.pdf.outline import PyMuPDFOutlineReader, PyMuPDFOutlineWriter

logger = logging.getLogger(__name__)


async def _in_executor(func: Callable[..., Any], *args, **kwargs) -> Any:
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))


def _open(source: Union[str, Path, bytes]) -> "fitz.Document":
    if isinstance(source, (bytes, bytearray)):
        return fitz.open(stream=bytes(source), filetype="pdf")
    return fitz.open(str(source))


class PyMuPDFSourceDocument(SourceDocumentPort):
    """Source document opened from a path or PDF bytes.

    Usage:
        with PyMuPDFSourceDocument("book.pdf") as source:
            result = await exporter.export(source, PyMuPDFDocumentFactory())
    """

    def __init__(self, source: Union[str, Path, bytes], file_name: Optional[str] = None):
        """
        Open a PDF.

        Args:
            source: Path to PDF file or PDF bytes
            file_name: Original file name (defaults to the path's name)
        """
        try:
            self._doc = _open(source)
        except Exception as e:
            raise PDFError(f"Failed to open PDF: {e}") from e

        if file_name is None and not isinstance(source, (bytes, bytearray)):
            file_name = Path(source).name
        self._file_name = file_name

    def __enter__(self) -> "PyMuPDFSourceDocument":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._doc.close()

    def file_name(self) -> Optional[str]:
        return self._file_name

    def page_count(self) -> int:
        return self._doc.page_count

    async def extract_pages(self, start: int, end: int) -> List[bytes]:
        """Copy pages start..end (0-indexed, inclusive) into one PDF."""
        try:
            return [await _in_executor(self._extract, start, end)]
        except Exception as e:
            raise PDFError(f"Failed to extract pages {start}-{end}: {e}") from e

    def _extract(self, start: int, end: int) -> bytes:
        with fitz.open() as part:
            part.insert_pdf(self._doc, from_page=start, to_page=end)
            return part.tobytes(garbage=3, deflate=True)

    async def bookmark_store(self) -> PyMuPDFOutlineReader:
        return PyMuPDFOutlineReader.from_document(self._doc)


class PyMuPDFDestinationDocument(DestinationDocumentPort):
    """New in-memory document; its outline is written on serialization."""

    def __init__(self, name: str, doc: Optional["fitz.Document"] = None):
        self.name = name
        self._doc = doc if doc is not None else fitz.open()
        self._outline = PyMuPDFOutlineWriter()

    async def insert_pages(self, data: bytes, start: int, end: int) -> None:
        try:
            await _in_executor(self._insert, data, start, end)
        except Exception as e:
            raise PDFError(f"Failed to insert pages into {self.name}: {e}") from e

    def _insert(self, data: bytes, start: int, end: int) -> None:
        with fitz.open(stream=data, filetype="pdf") as src:
            self._doc.insert_pdf(src, from_page=start, to_page=end, start_at=0)

    def page_count(self) -> int:
        return self._doc.page_count

    async def remove_page(self, index: int) -> None:
        try:
            await _in_executor(self._doc.delete_page, index)
        except Exception as e:
            raise PDFError(f"Failed to remove page {index} from {self.name}: {e}") from e

    async def bookmark_store(self) -> PyMuPDFOutlineWriter:
        return self._outline

    async def to_bytes(self) -> bytes:
        try:
            return await _in_executor(self._serialize)
        except PDFError:
            raise
        except Exception as e:
            raise PDFError(f"Failed to serialize {self.name}: {e}") from e

    def _serialize(self) -> bytes:
        self._outline.apply(self._doc)
        return self._doc.tobytes(garbage=3, deflate=True)

    def close(self) -> None:
        self._doc.close()


class PyMuPDFDocumentFactory(DocumentFactoryPort):
    """Creates empty PyMuPDF documents."""

    async def create_document(self, name: str) -> PyMuPDFDestinationDocument:
        try:
            return PyMuPDFDestinationDocument(name)
        except Exception as e:
            raise PDFError(f"Failed to create document {name}: {e}") from e
