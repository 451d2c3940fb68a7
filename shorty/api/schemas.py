"""
API Request and Response Schemas

This module defines all Pydantic models for API requests and responses.
Separated from endpoints to keep concerns separated and enable reuse.

Design Principles:
- Request models check shape and types only; format rules (URL scheme,
  short_name charset) live in shorty.core.validators so they can report
  every field at once with the service's own messages
- Response models define the JSON returned to clients
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from shorty.db.models import Link


class LinkIn(BaseModel):
    """Request body for creating or updating a link."""
    original_url: str = Field(default="", description="The long URL to shorten")
    short_name: Optional[str] = Field(
        default=None,
        description="Custom short name; generated when omitted on create"
    )


class LinkOut(BaseModel):
    """Response model for a link."""
    id: int
    original_url: str
    short_name: str
    short_url: str = Field(..., description="The complete short URL")

    @classmethod
    def from_link(cls, link: Link, base_url: str) -> "LinkOut":
        return cls(
            id=link.id,
            original_url=link.original_url,
            short_name=link.short_name,
            short_url=f"{base_url}/r/{link.short_name}",
        )


class VisitOut(BaseModel):
    """Response model for a recorded visit."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    link_id: int
    created_at: datetime
    ip: str
    user_agent: str
    status: int
