"""Bookmark export routes"""
import logging
from typing import Callable, Optional
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.responses import Response
from fastapi.security import HTTPBearer
from prometheus_client import Counter, Histogram
from slowapi import Limiter
from slowapi.util import get_remote_address

from bookmark_export.adapters.pdf import PyMuPDFDocumentFactory, PyMuPDFSourceDocument
from bookmark_export.api.schemas import OutlineResponse
from bookmark_export.config.limits import MAX_UPLOAD_BYTES
from bookmark_export.core.exceptions import CoreError
from bookmark_export.core.export import BookmarkExporter
from bookmark_export.core.models import count_nodes, tree_depth
from bookmark_export.core.outline import read_tree
from bookmark_export.core.ports.document import DocumentFactoryPort, SourceDocumentPort

logger = logging.getLogger(__name__)

# Prometheus metrics
EXPORT_COUNT = Counter(
    "bookmark_export_exports_total", "Exports attempted", ["status"]
)
EXPORT_DURATION = Histogram(
    "bookmark_export_duration_seconds", "Export pipeline time"
)

SourceOpener = Callable[[bytes, Optional[str]], SourceDocumentPort]


def open_pymupdf_source(data: bytes, file_name: Optional[str]) -> PyMuPDFSourceDocument:
    return PyMuPDFSourceDocument(data, file_name=file_name)


async def read_pdf_upload(file: UploadFile, max_bytes: int = MAX_UPLOAD_BYTES) -> bytes:
    """Read an uploaded PDF, rejecting non-PDF and oversized uploads."""
    filename = file.filename or ""
    content_type = (file.content_type or "").lower()
    if "pdf" not in content_type and not filename.lower().endswith(".pdf"):
        raise HTTPException(status_code=400, detail="Only PDF files are accepted")

    content = await file.read(max_bytes + 1)
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"PDF exceeds {max_bytes} bytes")
    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")
    return content


def _close(source: SourceDocumentPort) -> None:
    close = getattr(source, "close", None)
    if close is not None:
        close()


def create_export_router(
    exporter: BookmarkExporter,
    verify_token_func,
    factory: Optional[DocumentFactoryPort] = None,
    source_opener: Optional[SourceOpener] = None,
    export_limit: str = "10/minute",
    on_export: Optional[Callable[[], None]] = None,
) -> APIRouter:
    """Create export router with dependency injection.

    Args:
        exporter: BookmarkExporter running the pipeline
        verify_token_func: Token verification function
        factory: Destination document factory (default: PyMuPDFDocumentFactory)
        source_opener: Opens uploaded bytes as a source document
            (default: PyMuPDFSourceDocument)
        export_limit: slowapi rate limit for the export endpoint
        on_export: Called after each successful export

    Returns:
        APIRouter configured with export endpoints
    """
    router = APIRouter(tags=["Export"])
    security = HTTPBearer()
    limiter = Limiter(key_func=get_remote_address)
    factory = factory or PyMuPDFDocumentFactory()
    source_opener = source_opener or open_pymupdf_source

    async def get_current_token(credentials=Depends(security)) -> str:
        """Dependency wrapper for verify_token"""
        return await verify_token_func(credentials)

    @router.post("/api/v1/export")
    @limiter.limit(export_limit)
    async def export_document(
        request: Request,
        file: UploadFile = File(...),
        file_name: Optional[str] = Form(None),
        token: str = Depends(get_current_token),
    ):
        """Copy an uploaded PDF with its bookmarks and return the new file"""
        content = await read_pdf_upload(file)

        try:
            source = source_opener(content, file.filename)
            try:
                with EXPORT_DURATION.time():
                    result = await exporter.export(source, factory, file_name)
            finally:
                _close(source)
        except CoreError as e:
            EXPORT_COUNT.labels(status="failed").inc()
            raise HTTPException(status_code=422, detail=f"Export failed: {e}")

        EXPORT_COUNT.labels(status="completed").inc()
        if on_export is not None:
            on_export()

        return Response(
            content=result.data,
            media_type="application/pdf",
            headers={
                "Content-Disposition": f"attachment; filename*=UTF-8''{quote(result.file_name)}",
                "X-Bookmark-Count": str(result.bookmark_count),
                "X-Page-Count": str(result.page_count),
            },
        )

    @router.post("/api/v1/outline", response_model=OutlineResponse)
    @limiter.limit("30/minute")
    async def get_outline(
        request: Request,
        file: UploadFile = File(...),
        token: str = Depends(get_current_token),
    ):
        """Return the bookmark tree of an uploaded PDF"""
        content = await read_pdf_upload(file)

        try:
            source = source_opener(content, file.filename)
            try:
                tree = await read_tree(
                    await source.bookmark_store(), exporter.settings.max_concurrency
                )
            finally:
                _close(source)
        except CoreError as e:
            raise HTTPException(status_code=422, detail=f"Outline read failed: {e}")

        return OutlineResponse(
            file_name=file.filename,
            bookmark_count=count_nodes(tree),
            depth=tree_depth(tree),
            bookmarks=[node.to_dict() for node in tree],
        )

    return router
