"""Integration test fixtures.

Provides a fully wired AppState: real MemoryArtifactCache, real Pipeline and
an httpx client whose traffic is served by the ``remote_routes`` respx
fixture from tests/conftest.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import pytest

from leafpdf.cache import MemoryArtifactCache
from leafpdf.config import Settings
from leafpdf.pipeline import Pipeline
from leafpdf.state import AppState

if TYPE_CHECKING:
    from collections.abc import Callable


@pytest.fixture()
async def http_client() -> httpx.AsyncClient:
    async with httpx.AsyncClient() as client:
        yield client


@pytest.fixture()
def make_state(http_client: httpx.AsyncClient) -> Callable[..., AppState]:
    """Build an AppState from nested settings overrides."""

    def _make(**overrides: dict) -> AppState:
        settings = Settings(**overrides)
        cache = MemoryArtifactCache(max_entries=settings.cache.max_entries)
        return AppState(
            settings=settings,
            http_client=http_client,
            cache=cache,
            pipeline=Pipeline(http_client, cache, settings),
        )

    return _make


@pytest.fixture()
def app_state(make_state: Callable[..., AppState]) -> AppState:
    """URL strategy, default settings."""
    return make_state()
