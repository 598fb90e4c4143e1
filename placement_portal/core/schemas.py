"""
placement_portal/core/schemas.py

Response envelopes shared by every router.
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class PaginatedResponse(BaseModel, Generic[T]):
    """One page of results plus the total across all pages."""

    total_count: int = Field(..., description="Total number of items available")
    has_next_page: bool = Field(..., description="Whether skip + limit falls short of total_count")
    items: list[T] = Field(..., description="Items on this page")


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    detail: str = Field(..., description="Response message detail")
