"""Unit tests for the cache cleanup scheduler."""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from leafpdf.config import Settings
from leafpdf.schedulers import run_cache_cleanup_scheduler
from leafpdf.state import AppState


def _make_state(cache: AsyncMock) -> AppState:
    return AppState(
        settings=Settings(cache={"cleanup_interval_seconds": 42}),
        http_client=MagicMock(),
        cache=cache,
        pipeline=MagicMock(),
    )


class _StopLoop(Exception):
    pass


async def test_sleeps_interval_then_cleans() -> None:
    cache = AsyncMock()
    state = _make_state(cache)
    sleeps: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        sleeps.append(seconds)
        if len(sleeps) > 2:
            raise _StopLoop

    with patch("leafpdf.schedulers.asyncio.sleep", side_effect=fake_sleep):
        with pytest.raises(_StopLoop):
            await run_cache_cleanup_scheduler(state)

    assert sleeps == [42, 42, 42]
    assert cache.cleanup_expired.await_count == 2


async def test_cleanup_error_does_not_stop_loop() -> None:
    cache = AsyncMock()
    cache.cleanup_expired.side_effect = [RuntimeError("boom"), 0]
    state = _make_state(cache)
    sleeps = 0

    async def fake_sleep(seconds: float) -> None:
        nonlocal sleeps
        sleeps += 1
        if sleeps > 2:
            raise _StopLoop

    with patch("leafpdf.schedulers.asyncio.sleep", side_effect=fake_sleep):
        with pytest.raises(_StopLoop):
            await run_cache_cleanup_scheduler(state)

    assert cache.cleanup_expired.await_count == 2


async def test_cancellation_stops_scheduler() -> None:
    state = _make_state(AsyncMock())
    task = asyncio.create_task(run_cache_cleanup_scheduler(state))
    await asyncio.sleep(0)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task
