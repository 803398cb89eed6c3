"""Protocols consumed by the meeting orchestrator."""

from __future__ import annotations

from typing import Protocol

from schemas.meeting import UnderstandingRecord


class SessionStoreProtocol(Protocol):
    """Storage for Understanding records reused across requests."""

    def get(self, session_id: str) -> UnderstandingRecord | None:
        """Return the record if present and still fresh."""
        ...

    def set(self, session_id: str, record: UnderstandingRecord) -> None:
        """Store (or overwrite) the record for ``session_id``."""
        ...

    def delete(self, session_id: str) -> bool: ...

    def clear(self) -> int: ...
