"""API response envelopes shared by every route."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response wrapper.

    Attributes:
        success: Whether the request was successful.
        data: The response payload (when success is True).
        message: A human-readable message about the response.
        error: Error details (when success is False).
    """

    success: bool = True
    data: T | None = None
    message: str = "Operation completed successfully"
    error: dict[str, Any] | None = None


class ErrorResponse(ApiResponse[None]):
    """Error envelope; ``error`` carries at least ``correlation_id`` and ``type``."""

    success: bool = False
    message: str = "An error occurred"
    error: dict[str, Any] | None = None
