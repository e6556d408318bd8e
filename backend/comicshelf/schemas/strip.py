"""
ComicShelf Backend — Pydantic Response Schemas
================================================

What:  Pydantic models defining the JSON contract of the API.
Why:   Automatic serialization and OpenAPI documentation; the domain
       StripRecord stays a plain frozen dataclass.

Wire format:
    GET /api/years           → ["1989", "1990", ...]
    GET /api/strips/{year}   → [{"date": "1990-01-02", "year": "1990",
                                 "url": "/comics/1990/1990-01-02.jpg"}, ...]

    Dates always render as YYYY-MM-DD (Pydantic's ISO 8601 date format).
"""

import datetime
from typing import Dict, Optional

from pydantic import BaseModel, Field


class StripResponse(BaseModel):
    """One comic strip as listed by GET /api/strips/{year}."""

    date: datetime.date = Field(description="Publication date (YYYY-MM-DD)")
    year: str = Field(description="Four-digit year folder the strip was found in")
    url: str = Field(description="URL path serving the strip image")

    model_config = {"from_attributes": True}


class ErrorResponse(BaseModel):
    """
    What:  Standardized error response format for all API errors.

    Example:
        {
            "error": "not_found",
            "message": "year '2042' was not found",
            "request_id": "a1b2c3d4"
        }
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    """
    What:  Health check response.
    Why:   The index is fixed after startup, so "healthy" means a non-empty
           index is loaded; counts make a wrong archive obvious at a glance.
    """

    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    archive: str = Field(description="Archive path the index was built from")
    strips: int = Field(description="Number of strips in the index")
    years: int = Field(description="Number of years with at least one strip")
    skipped: Dict[str, int] = Field(
        default_factory=dict,
        description="Archive entries skipped during the scan, by reason",
    )
    uptime_seconds: float = Field(description="Seconds since service started")
