"""In-process, time-bounded cache of Understanding records keyed by session id."""

from __future__ import annotations

import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass

from schemas.meeting import UnderstandingRecord


logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_MAX_ENTRIES = 1024


@dataclass(frozen=True, slots=True)
class SessionCacheEntry:
    session_id: str
    record: UnderstandingRecord
    created_at: float


class SessionCache:
    """TTL cache with a hard capacity.

    An entry is fresh while ``clock() - created_at < ttl_seconds``. Stale
    entries are dropped when read, and every write sweeps them; if the cache is
    still over capacity the oldest entry is evicted.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: OrderedDict[str, SessionCacheEntry] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, session_id: object) -> bool:
        return isinstance(session_id, str) and self.get(session_id) is not None

    def _is_fresh(self, entry: SessionCacheEntry, now: float) -> bool:
        return now - entry.created_at < self.ttl_seconds

    def get(self, session_id: str) -> UnderstandingRecord | None:
        entry = self._entries.get(session_id)
        if entry is None:
            return None
        if not self._is_fresh(entry, self._clock()):
            del self._entries[session_id]
            logger.debug("Session cache entry expired")
            return None
        return entry.record

    def set(self, session_id: str, record: UnderstandingRecord) -> None:
        """Store (or overwrite) a record stamped with the current time."""
        now = self._clock()
        self._entries.pop(session_id, None)
        self._entries[session_id] = SessionCacheEntry(session_id, record, now)
        self.sweep(now)
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)
            logger.info("Session cache full; evicted oldest entry")

    def sweep(self, now: float | None = None) -> int:
        """Drop every stale entry; return how many went."""
        if now is None:
            now = self._clock()
        stale = [
            key
            for key, entry in self._entries.items()
            if not self._is_fresh(entry, now)
        ]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def delete(self, session_id: str) -> bool:
        return self._entries.pop(session_id, None) is not None

    def clear(self) -> int:
        count = len(self._entries)
        self._entries.clear()
        return count
