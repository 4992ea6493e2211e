"""
API Pydantic models for the bookmark export service.

Response models used by the export and health endpoints.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class BookmarkSchema(BaseModel):
    """One bookmark and its children"""

    title: str
    page: int = Field(..., description="Target page (0-indexed, -1 = no target)")
    left: float = 0.0
    top: float = 0.0
    zoom_factor: float = 0.0
    zoom_mode: int = 1
    color: Optional[Any] = None
    is_bold: bool = False
    is_italic: bool = False
    children: List["BookmarkSchema"] = Field(default_factory=list)


class OutlineResponse(BaseModel):
    """Bookmark tree of an uploaded document"""

    file_name: Optional[str] = None
    bookmark_count: int = Field(0, description="Total bookmarks at all levels")
    depth: int = Field(0, description="Number of outline levels")
    bookmarks: List[BookmarkSchema] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Health check response"""

    status: str
    timestamp: datetime
    version: str
    uptime: float
    system_info: Dict[str, Any]


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint"""

    error: str = Field(..., description="Error code, e.g. HTTP_400 or INVALID_REQUEST")
    message: str
    details: Optional[Dict[str, Any]] = None
    timestamp: datetime
