"""Error response schemas for OpenAPI documentation."""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standardized API error response body."""

    status: str = Field(default="error", description="Always 'error'")
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Book not found"],
    )
    code: str = Field(
        ...,
        description="Error code for client-side handling",
        examples=["NOT_FOUND"],
    )
    error_id: Optional[str] = Field(
        None,
        description="Unique error ID for support tracking",
        examples=["a1b2c3d4"],
    )
    details: Optional[Dict[str, Any]] = Field(
        None,
        description="Additional error context and field-specific errors",
    )


COMMON_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation or business rule error"},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token"},
    500: {"model": ErrorResponse, "description": "Internal or upstream service error"},
}

DOCUMENT_ERROR_RESPONSES: Dict[int, Dict[str, Any]] = {
    **COMMON_ERROR_RESPONSES,
    403: {"model": ErrorResponse, "description": "Caller does not own the document"},
    404: {"model": ErrorResponse, "description": "Document not found"},
}
