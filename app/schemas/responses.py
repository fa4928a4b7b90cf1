"""
Standard API Response Wrappers
Generic response schemas and envelope helpers for API endpoints.
"""

from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper."""

    success: bool = Field(description="Whether the operation was successful")
    data: Optional[T] = Field(default=None, description="Response data")
    message: str = Field(default="", description="Response message")


class Pagination(BaseModel):
    """Pagination block attached to list responses."""

    total: int = Field(ge=0, description="Total items")
    page: int = Field(ge=1, description="Current page number")
    pages: int = Field(ge=0, description="Total number of pages")
    limit: int = Field(ge=1, description="Items per page")


class ErrorDetail(BaseModel):
    """Error body rendered by the exception handler."""

    code: str = Field(description="Error code")
    message: str = Field(description="Error message")
    details: Dict[str, Any] = Field(default_factory=dict, description="Additional error details")


class ErrorResponse(BaseModel):
    """Error response."""

    success: bool = False
    error: ErrorDetail


def success_response(data: Any = None, message: str = "Success") -> Dict[str, Any]:
    """Build the ``{success, data, message}`` envelope."""
    return {"success": True, "data": data, "message": message}


def list_response(
    items: List[Any],
    key: str,
    message: str = "Success",
    pagination: Optional[Dict[str, Any]] = None,
    **extra: Any,
) -> Dict[str, Any]:
    """Envelope for list endpoints: ``data`` carries ``results``, the items and optional pagination."""
    data: Dict[str, Any] = {"results": len(items), key: items}
    if pagination is not None:
        data["pagination"] = Pagination(**pagination).model_dump()
    data.update(extra)
    return success_response(data, message)
