"""
Pydantic schemas for the response envelope, pagination and health check.
"""

from pydantic import BaseModel, Field
from typing import Any, Optional


class APIEnvelope(BaseModel):
    """Uniform wrapper every endpoint responds with."""

    success: bool = Field(
        ...,
        description="Whether the server handled the request"
    )

    message: Optional[str] = Field(
        None,
        description="Optional human-readable message"
    )

    data: Optional[Any] = Field(
        None,
        description="Payload, shape depends on the endpoint"
    )

    error: Optional[str] = Field(
        None,
        description="Error description on failure"
    )

    @property
    def error_message(self) -> Optional[str]:
        return self.error or self.message or None


class PaginationInfo(BaseModel):
    """Pagination metadata of a list response."""

    page: int = Field(..., ge=1, description="Current page number (1-based)")
    page_size: int = Field(..., ge=0, description="Items per page")
    total: int = Field(..., ge=0, description="Total number of matching items")
    total_pages: int = Field(..., ge=0, description="Total number of pages")


class HealthStatus(BaseModel):
    """Health check payload."""

    status: str = Field(..., examples=["ok"])
    message: Optional[str] = None
