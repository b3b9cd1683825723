"""Background scheduler coroutine for cache cleanup."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from leafpdf.state import AppState

log = structlog.get_logger()


async def run_cache_cleanup_scheduler(state: AppState) -> None:
    """Sweep expired cache entries every ``cleanup_interval_seconds``."""
    interval_seconds = state.settings.cache.cleanup_interval_seconds

    while True:
        await asyncio.sleep(interval_seconds)
        try:
            await state.cache.cleanup_expired()
        except Exception:
            log.warning("cache_cleanup_scheduler_error", exc_info=True)
