"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models: Define input shape only; URL and custom code rules are
  enforced by the service layer so they report the documented errors
- Response models: Define output structure
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class ShortenRequest(BaseModel):
    """Request model for URL shortening endpoint."""
    url: str = Field(..., description="The long URL to shorten (http:// or https://)")
    custom_code: Optional[str] = Field(
        default=None,
        description="Optional custom short code (3-10 letters or digits)"
    )


class ShortenResponse(BaseModel):
    """Response model for URL shortening endpoint."""
    short_code: str = Field(..., description="The short code")
    short_url: str = Field(..., description="The complete short URL")
    original_url: str = Field(..., description="The original long URL")


class LinkResponse(BaseModel):
    """A stored link, as returned by the listing endpoints."""
    id: int
    short_code: str
    short_url: str
    original_url: str
    click_count: int
    created_at: datetime


class StatsResponse(BaseModel):
    """Response model for statistics endpoint."""
    total_links: int
    total_clicks: int


class ErrorResponse(BaseModel):
    """Body of every error response."""
    error: str
