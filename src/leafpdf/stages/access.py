"""Access grant: promote the guest session to read access on the project."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING

import httpx
import structlog

from leafpdf.errors import AccessGrantError
from leafpdf.fetcher import response_cookie, session_headers
from leafpdf.models.session import ResourceHandle

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings
    from leafpdf.models.session import SessionState

_PROJECT_REDIRECT_RE = re.compile(r"^/project/([^/?#]+)/?$")


def parse_project_redirect(payload: object) -> str | None:
    """Return the project id from a ``{"redirect": "/project/<id>"}`` body."""
    if not isinstance(payload, dict):
        return None
    redirect = payload.get("redirect")
    if not isinstance(redirect, str):
        return None
    match = _PROJECT_REDIRECT_RE.match(redirect)
    return match.group(1) if match else None


async def grant_access(
    client: httpx.AsyncClient,
    token: str,
    session: SessionState,
    remote: RemoteSettings,
) -> tuple[ResourceHandle, SessionState]:
    """POST the CSRF token to ``/read/{token}/grant``.

    Returns the project handle and the session with its cookie replaced by
    the grant response's cookies, when it set any.
    """
    log = structlog.get_logger().bind(stage="grant", token=token)

    try:
        response = await client.post(
            f"{remote.base_url}/read/{token}/grant",
            json={"_csrf": session.csrf_token},
            headers=session_headers(remote, session),
        )
    except httpx.HTTPError as exc:
        log.warning("grant_network_error", error=type(exc).__name__)
        raise AccessGrantError(status=None) from exc

    try:
        payload = response.json()
    except ValueError:
        payload = None

    resource_id = parse_project_redirect(payload)
    if resource_id is None:
        log.warning("grant_without_redirect", status_code=response.status_code)
        raise AccessGrantError(status=response.status_code)

    log.info("access_granted", status_code=response.status_code, resource_id=resource_id)
    return ResourceHandle(resource_id=resource_id), session.with_cookie(response_cookie(response))
