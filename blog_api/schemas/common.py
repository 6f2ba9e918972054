# blog_api/schemas/common.py
"""Response envelope and pagination schemas shared by all routes."""
from pydantic import BaseModel, Field
from typing import Generic, TypeVar, Optional
from math import ceil

T = TypeVar('T')


class ApiResponse(BaseModel, Generic[T]):
    """
    Envelope every successful response is wrapped in.

    Usage:
        ApiResponse[BlogPostRead](data=post, message="Blog created successfully")
    """
    success: bool = Field(True, description="Operation success status")
    message: Optional[str] = Field(None, description="Human-readable message")
    data: Optional[T] = Field(None, description="Response payload")


class ErrorResponse(BaseModel):
    """Standard error response format."""
    success: bool = Field(False, description="Always false for errors")
    message: str = Field(..., description="Human-readable error message")
    error: Optional[str] = Field(None, description="Error detail (non-production only)")
    path: Optional[str] = Field(None, description="Request path, for unknown routes")


class PaginationMetadata(BaseModel):
    """Pagination metadata for list responses."""
    current_page: int = Field(..., ge=1, alias="currentPage", description="Current page number (1-indexed)")
    total_pages: int = Field(..., ge=0, alias="totalPages", description="Total number of pages")
    total_blogs: int = Field(..., ge=0, alias="totalBlogs", description="Total number of matching blogs")
    has_next_page: bool = Field(..., alias="hasNextPage", description="Whether there is a next page")
    has_prev_page: bool = Field(..., alias="hasPrevPage", description="Whether there is a previous page")

    class Config:
        populate_by_name = True


def create_pagination_metadata(
    total: int,
    page: int,
    page_size: int
) -> PaginationMetadata:
    """
    Helper function to create pagination metadata.

    Args:
        total: Total number of items
        page: Current page number (1-indexed)
        page_size: Number of items per page

    Returns:
        PaginationMetadata object
    """
    total_pages = ceil(total / page_size) if page_size > 0 else 0

    return PaginationMetadata(
        current_page=page,
        total_pages=total_pages,
        total_blogs=total,
        has_next_page=page < total_pages,
        has_prev_page=page > 1
    )
