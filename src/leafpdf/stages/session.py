"""Session extraction: scrape guest credentials from the public share page."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from leafpdf.errors import CredentialExtractionError, RemoteFetchError
from leafpdf.fetcher import browser_headers, response_cookie
from leafpdf.markup import RegexMarkupParser, SessionMarkupParser
from leafpdf.models.session import SessionState

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings


async def extract_session(
    client: httpx.AsyncClient,
    token: str,
    remote: RemoteSettings,
    parser: SessionMarkupParser | None = None,
) -> SessionState:
    """Fetch ``/read/{token}`` anonymously and return the guest session.

    The final URL after redirects becomes the referer of every later
    authenticated call.
    """
    log = structlog.get_logger().bind(stage="read", token=token)
    parser = parser or RegexMarkupParser()
    url = f"{remote.base_url}/read/{token}"

    try:
        response = await client.get(url, headers=browser_headers(remote), follow_redirects=True)
    except httpx.HTTPError as exc:
        log.warning("share_page_network_error", error=type(exc).__name__)
        raise RemoteFetchError(stage="read", status=None) from exc

    log.info("share_page_fetched", status_code=response.status_code)
    if response.status_code != 200:
        raise RemoteFetchError(stage="read", status=response.status_code)

    csrf_token = parser.csrf_token(response.text)
    if not csrf_token:
        raise CredentialExtractionError("csrf")

    cookie = response_cookie(response)
    if not cookie:
        raise CredentialExtractionError("cookie")

    log.debug("session_extracted", csrf_length=len(csrf_token), cookie_length=len(cookie))
    return SessionState(
        csrf_token=csrf_token,
        session_cookie=cookie,
        referer_url=str(response.url),
    )
