"""Core schema definitions shared by every domain.

Success bodies are plain response models; errors always use the envelope
produced by the handlers in ``app.core.exceptions``:

    {
        "success": false,
        "error": {"code": "NOT_FOUND", "message": "...", "details": {...}}
    }
"""

import math

from pydantic import BaseModel, Field


class Pagination(BaseModel):
    """Pagination metadata for list responses."""

    page: int = Field(..., ge=1, description="Current page number")
    limit: int = Field(..., ge=1, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")

    @classmethod
    def from_query(cls, total: int, page: int, limit: int) -> "Pagination":
        """Build pagination metadata for a 1-indexed page."""
        total_pages = math.ceil(total / limit) if limit > 0 else 0
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


def page_offset(page: int, limit: int) -> int:
    return (page - 1) * limit
