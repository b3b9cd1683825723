"""Application state container.

AppState is created once at startup (inside the Starlette lifespan) and
stored on ``app.state.leafpdf`` where the request handlers read it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import httpx

    from leafpdf.config import Settings
    from leafpdf.pipeline import Pipeline
    from leafpdf.protocols import ArtifactCacheProtocol


@dataclass
class AppState:
    """Holds all shared runtime state."""

    settings: Settings
    http_client: httpx.AsyncClient
    cache: ArtifactCacheProtocol
    pipeline: Pipeline
