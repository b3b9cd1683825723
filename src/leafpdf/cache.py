"""In-process artifact cache with a fixed time-to-live.

Entries live only as long as the process. Every per-key read and write
happens under one ``asyncio.Lock`` so concurrent pipelines never observe a
half-updated map; expired entries read as misses and are dropped on access
or by the periodic ``cleanup_expired`` sweep.
"""

from __future__ import annotations

import asyncio
from collections import OrderedDict
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import structlog

from leafpdf.models.artifact import ArtifactCacheEntry

if TYPE_CHECKING:
    from collections.abc import Callable

    from leafpdf.models.artifact import ResolvedArtifact

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class MemoryArtifactCache:
    """Bounded TTL cache implementing ArtifactCacheProtocol."""

    def __init__(
        self,
        max_entries: int = 256,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._entries: OrderedDict[str, ArtifactCacheEntry] = OrderedDict()
        self._lock = asyncio.Lock()
        self._max_entries = max_entries
        self._clock = clock

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, token: str) -> ArtifactCacheEntry | None:
        """Return the fresh entry for ``token``, or ``None`` on miss or expiry."""
        async with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            if self._clock() >= entry.expires_at:
                del self._entries[token]
                log.debug("cache_entry_expired", token=token)
                return None
            return entry

    async def set(self, token: str, artifact: ResolvedArtifact, ttl_seconds: int) -> None:
        """Store ``artifact`` for ``token``, replacing any previous entry."""
        now = self._clock()
        entry = ArtifactCacheEntry(
            token=token,
            artifact=artifact,
            fetched_at=now,
            expires_at=now + timedelta(seconds=ttl_seconds),
        )
        async with self._lock:
            self._entries[token] = entry
            self._entries.move_to_end(token)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("cache_entry_evicted", token=evicted)

    async def invalidate(self, token: str) -> None:
        async with self._lock:
            self._entries.pop(token, None)

    async def cleanup_expired(self) -> int:
        """Drop every expired entry and return how many were removed."""
        async with self._lock:
            now = self._clock()
            expired = [token for token, entry in self._entries.items() if now >= entry.expires_at]
            for token in expired:
                del self._entries[token]
        log.info("cache_cleanup_complete", deleted=len(expired), remaining=len(self._entries))
        return len(expired)
