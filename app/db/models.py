"""
Database Models for URL Shortener Service

This module defines the SQLModel database schema for:
- Link: Stores the mapping between short codes and original URLs

Design Decisions:
- Unique index on short_code: the database is the final arbiter of uniqueness
- Index on created_at for newest-first listings
- click_count lives on the row and is only changed by atomic SQL increments
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel
from sqlalchemy import BigInteger, DateTime, String, Text
from sqlmodel import Column, Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Link(SQLModel, table=True):
    """
    Main table storing URL shortening mappings.

    Fields:
    - id: Auto-incrementing primary key assigned by the database
    - short_code: Unique short code (3-10 characters, [A-Za-z0-9])
    - original_url: The long URL that was shortened
    - click_count: Redirect counter (updated asynchronously)
    - created_at: Timestamp when the link was created

    Indexes:
    - short_code: Unique index for fast lookups (most critical path)
    - created_at: For newest-first listings
    """
    __tablename__ = "links"

    id: Optional[int] = Field(default=None, primary_key=True)
    short_code: str = Field(
        sa_column=Column(String(10), nullable=False, unique=True, index=True),
        max_length=10
    )
    original_url: str = Field(sa_column=Column(Text, nullable=False))
    click_count: int = Field(
        default=0,
        sa_column=Column(BigInteger, nullable=False, default=0, server_default="0")
    )
    created_at: datetime = Field(
        default_factory=utcnow,
        sa_column=Column(DateTime(timezone=True), nullable=False, index=True)
    )


class LinkStats(BaseModel):
    """Aggregate over all links, computed on demand."""
    total_links: int
    total_clicks: int
