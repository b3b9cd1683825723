"""Protocol interfaces for swappable components.

The pipeline and AppState reference these protocols, not the concrete
implementations, so tests can pass lightweight fakes and another cache
backend can be dropped in without touching the pipeline.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from leafpdf.models.artifact import ArtifactCacheEntry, ResolvedArtifact


class ArtifactCacheProtocol(Protocol):
    """Interface for the per-token artifact cache."""

    async def get(self, token: str) -> ArtifactCacheEntry | None: ...

    async def set(self, token: str, artifact: ResolvedArtifact, ttl_seconds: int) -> None: ...

    async def invalidate(self, token: str) -> None: ...

    async def cleanup_expired(self) -> int: ...
