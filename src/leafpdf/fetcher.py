"""Shared HTTP client and browser-impersonation headers.

All remote calls go through one httpx.AsyncClient created at startup and
injected into the pipeline; the lifespan owns its lifecycle. Session cookies
are carried explicitly in ``SessionState`` and sent as a ``Cookie`` header,
so the client's own cookie jar is configured to accept nothing. Otherwise
cookies from one share token would be replayed on another token's requests.
"""

from __future__ import annotations

from http.cookiejar import CookieJar, DefaultCookiePolicy
from typing import TYPE_CHECKING

import httpx

from leafpdf.markup import fold_cookies

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings
    from leafpdf.models.session import SessionState


def build_http_client(remote: RemoteSettings) -> httpx.AsyncClient:
    """Create the shared httpx client. Called once at startup."""
    return httpx.AsyncClient(
        follow_redirects=False,
        timeout=httpx.Timeout(remote.timeout_seconds),
        cookies=CookieJar(policy=DefaultCookiePolicy(allowed_domains=[])),
        limits=httpx.Limits(
            max_connections=20,
            max_keepalive_connections=10,
        ),
    )


def browser_headers(remote: RemoteSettings) -> dict[str, str]:
    """Headers every request carries to look like the service's own web client."""
    return {
        "User-Agent": remote.user_agent,
        "Origin": remote.base_url,
    }


def session_headers(
    remote: RemoteSettings,
    session: SessionState,
    *,
    referer: str | None = None,
) -> dict[str, str]:
    """Browser headers plus the session cookie and a referer."""
    return {
        **browser_headers(remote),
        "Cookie": session.session_cookie,
        "Referer": referer or session.referer_url,
    }


def response_cookie(response: httpx.Response) -> str:
    """Fold the response's ``Set-Cookie`` headers into a ``Cookie`` value."""
    return fold_cookies(response.headers.get_list("set-cookie"))
