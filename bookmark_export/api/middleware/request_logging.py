"""Request logging and metrics middleware"""
import logging
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram
from starlette.routing import Match

logger = logging.getLogger(__name__)

# Prometheus metrics
REQUEST_COUNT = Counter(
    "bookmark_export_api_requests_total", "Total API requests",
    ["method", "endpoint", "status"])
REQUEST_DURATION = Histogram(
    "bookmark_export_api_request_duration_seconds", "Request duration",
    ["endpoint"])

UNMATCHED = "unmatched"


def endpoint_label(request: Request) -> str:
    """Path template of the route serving the request.

    Requests that match no route share the "unmatched" label.
    """
    for route in request.app.router.routes:
        match, _ = route.matches(request.scope)
        if match == Match.FULL:
            return getattr(route, "path", UNMATCHED)
    return UNMATCHED


def add_request_logging(app: FastAPI) -> None:
    """Log every request and record it in the request metrics."""

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        started = time.perf_counter()
        response = await call_next(request)
        elapsed = time.perf_counter() - started

        endpoint = endpoint_label(request)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code,
        ).inc()
        REQUEST_DURATION.labels(endpoint=endpoint).observe(elapsed)

        bookmarks = response.headers.get("X-Bookmark-Count")
        exported = f" - {bookmarks} bookmarks" if bookmarks is not None else ""
        logger.info(
            f"{request.method} {request.url.path} - {response.status_code} - {elapsed:.3f}s{exported}"
        )
        return response
