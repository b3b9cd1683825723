"""Unit tests for the optional project-metadata stage."""

from __future__ import annotations

import httpx
import pytest
import respx

from leafpdf.config import RemoteSettings
from leafpdf.errors import RemoteFetchError
from leafpdf.models.session import ResourceHandle, SessionState
from leafpdf.stages.metadata import load_metadata
from overleaf_fakes import BASE_URL, PROJECT_ID, share_page

REMOTE = RemoteSettings()
PROJECT_URL = f"{BASE_URL}/project/{PROJECT_ID}"
RESOURCE = ResourceHandle(resource_id=PROJECT_ID)


async def test_reads_title_and_rotates_cookie(session: SessionState) -> None:
    with respx.mock:
        route = respx.get(PROJECT_URL).mock(
            return_value=httpx.Response(
                200, text=share_page(title="Thesis"), headers={"set-cookie": "sess=3"}
            )
        )
        async with httpx.AsyncClient() as client:
            metadata, updated = await load_metadata(client, RESOURCE, session, REMOTE)

    assert metadata.title == "Thesis"
    assert updated.session_cookie == "sess=3"
    assert route.calls.last.request.headers["cookie"] == "sess=1"


async def test_untitled_fallback(session: SessionState) -> None:
    with respx.mock:
        respx.get(PROJECT_URL).mock(return_value=httpx.Response(200, text="<html></html>"))
        async with httpx.AsyncClient() as client:
            metadata, updated = await load_metadata(client, RESOURCE, session, REMOTE)
    assert metadata.title == "Untitled"
    assert updated is session


async def test_error_status_raises(session: SessionState) -> None:
    with respx.mock:
        respx.get(PROJECT_URL).mock(return_value=httpx.Response(401))
        async with httpx.AsyncClient() as client:
            with pytest.raises(RemoteFetchError) as exc_info:
                await load_metadata(client, RESOURCE, session, REMOTE)
    assert exc_info.value.stage == "metadata"
    assert exc_info.value.status == 401
