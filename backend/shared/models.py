"""
Shared data models used across modules.

These models are shared infrastructure, not business logic.
Module-specific models should stay in their respective module directories.
"""

from typing import Any, Optional

from pydantic import BaseModel, Field


class ApiResponse(BaseModel):
    """
    Response envelope used by every endpoint.

    Successful responses carry error_code=None; failures carry the
    IdentaError code so clients can branch without parsing messages.
    """

    message: str = Field(..., description="Human-readable outcome")
    data: dict[str, Any] = Field(default_factory=dict, description="Payload")
    error_code: Optional[str] = Field(None, description="Machine-readable error code")


def ok(message: str, data: Optional[dict[str, Any]] = None) -> ApiResponse:
    """Build a success envelope."""
    return ApiResponse(message=message, data=data or {})
