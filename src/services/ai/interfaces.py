"""Service interfaces for the generation boundary.

Protocols keep the meeting stages independent of any concrete model
provider so tests can pass simple fakes and production can pass the
pydantic-ai backed client.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol


class GenerationClientProtocol(Protocol):
    """Text generation collaborator consumed by every meeting stage."""

    async def generate(
        self, prompt: str, parameters: Mapping[str, Any] | None = None
    ) -> str:
        """Return the raw text produced for ``prompt``.

        Raises:
            GenerationServiceError: if the underlying call fails.
        """
        ...

    def is_configured(self) -> bool:
        """Whether credentials for the backing provider are present."""
        ...
