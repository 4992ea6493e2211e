"""PyMuPDF implementations of the document and bookmark store ports."""
from bookmark_export.adapters.pdf.outline import PyMuPDFOutlineReader, PyMuPDFOutlineWriter
from bookmark_export.adapters.pdf.pymupdf import (
    PyMuPDFDestinationDocument,
    PyMuPDFDocumentFactory,
    PyMuPDFSourceDocument,
)

__all__ = [
    "PyMuPDFOutlineReader",
    "PyMuPDFOutlineWriter",
    "PyMuPDFSourceDocument",
    "PyMuPDFDestinationDocument",
    "PyMuPDFDocumentFactory",
]
