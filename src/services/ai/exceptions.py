"""Domain exceptions for the generation service boundary.

Only *hard* failures live here: the model call itself failed (transport,
authentication, provider error) or no provider is configured. Recovery
failures (unparseable output) are soft and never raised; stages substitute
default records instead.

Each exception carries a stable ``error_code`` used by the API error handler
and by log tagging.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class AIServiceError(Exception):
    """Base class for generation service errors."""

    message: str
    error_code: str

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.error_code}: {self.message}"


class GenerationServiceError(AIServiceError):
    def __init__(
        self,
        message: str = "Generation service call failed",
        error_code: str = "generation_failed",
    ) -> None:
        super().__init__(message=message, error_code=error_code)


class GenerationConfigurationError(GenerationServiceError):
    def __init__(
        self, message: str = "No generation provider is configured"
    ) -> None:
        super().__init__(message=message, error_code="not_configured")
