#!/usr/bin/env python3
"""
Bookmark Export REST API

Uploads a PDF and returns a copy whose bookmark tree was rebuilt
through the outline reader and writer.
"""
import logging
import time
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address

from bookmark_export import __version__
from bookmark_export.api.errors import register_error_handlers
from bookmark_export.api.middleware import add_request_logging, create_token_verifier
from bookmark_export.api.routes.export import create_export_router
from bookmark_export.api.routes.health import create_health_router
from bookmark_export.config.settings import ExportSettings, load_settings
from bookmark_export.core.export import BookmarkExporter
from bookmark_export.core.ports.document import DocumentFactoryPort

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

# Rate limiting
limiter = Limiter(key_func=get_remote_address)


class ExportAPI:
    """Export API wiring the pipeline into FastAPI with dependency injection"""

    def __init__(
        self,
        settings: Optional[ExportSettings] = None,
        document_factory: Optional[DocumentFactoryPort] = None,
        source_opener=None,
    ):
        """Initialize API with dependency injection.

        Args:
            settings: Export settings (default: load_settings())
            document_factory: Destination factory (default: PyMuPDFDocumentFactory)
            source_opener: Opens uploaded bytes as a source document
                (default: PyMuPDFSourceDocument)
        """
        self.settings = settings or load_settings()
        self.exporter = BookmarkExporter(settings=self.settings)
        self.document_factory = document_factory
        self.source_opener = source_opener
        self.exports_served = 0
        self.start_time = time.time()

        self.app = FastAPI(
            title="Bookmark Export API",
            description="Copies PDF documents together with their bookmark tree",
            version=__version__,
            docs_url="/docs",
            redoc_url="/redoc",
        )

        self._setup_middleware()
        self._setup_routes()
        self._setup_error_handlers()

    def _setup_middleware(self):
        """Setup API middleware"""
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

        # Rate limiting
        self.app.state.limiter = limiter
        self.app.add_exception_handler(
            RateLimitExceeded, _rate_limit_exceeded_handler)
        self.app.add_middleware(SlowAPIMiddleware)

        add_request_logging(self.app)

    def _setup_routes(self):
        """Setup API routes"""
        @self.app.get("/")
        async def root():
            return {
                "service": "Bookmark Export API",
                "version": __version__,
                "status": "operational",
                "docs": "/docs",
            }

        self.app.include_router(create_health_router(
            start_time=self.start_time,
            exports_getter=lambda: self.exports_served,
        ))
        self.app.include_router(create_export_router(
            exporter=self.exporter,
            verify_token_func=create_token_verifier(self.settings),
            factory=self.document_factory,
            source_opener=self.source_opener,
            on_export=self._count_export,
        ))

    def _count_export(self):
        self.exports_served += 1

    def _setup_error_handlers(self):
        """Setup error handlers"""
        register_error_handlers(self.app)


# FastAPI app factory
def create_app(settings: Optional[ExportSettings] = None, **kwargs) -> FastAPI:
    """Create FastAPI application"""
    return ExportAPI(settings, **kwargs).app


def serve(
    host: str = "0.0.0.0",
    port: int = 8000,
    settings: Optional[ExportSettings] = None,
) -> None:
    """Run the API with uvicorn."""
    logger.info(f"Starting Bookmark Export API on {host}:{port}")
    uvicorn.run(create_app(settings), host=host, port=port)
