"""Health check and monitoring routes"""
import platform
import time
from datetime import datetime
from fastapi import APIRouter
from fastapi.responses import Response
from prometheus_client import generate_latest

from bookmark_export import __version__
from bookmark_export.api.schemas import HealthResponse


def create_health_router(
    start_time: float,
    exports_getter=None,
) -> APIRouter:
    """Create health check router.

    Args:
        start_time: Server start time for uptime calculation
        exports_getter: Callable that returns the number of exports served

    Returns:
        FastAPI router with health endpoints
    """
    router = APIRouter(tags=["Health"])

    @router.get("/api/v1/health", response_model=HealthResponse)
    async def health_check():
        """Health check endpoint"""
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(),
            version=__version__,
            uptime=time.time() - start_time,
            system_info={
                "exports_served": exports_getter() if exports_getter else 0,
                "python": platform.python_version(),
            },
        )

    @router.get("/metrics")
    async def get_metrics():
        """Prometheus metrics endpoint"""
        return Response(generate_latest(), media_type="text/plain")

    return router
