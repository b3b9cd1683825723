"""Optional project-metadata load between grant and compile."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog

from leafpdf.errors import RemoteFetchError
from leafpdf.fetcher import response_cookie, session_headers
from leafpdf.markup import RegexMarkupParser, SessionMarkupParser
from leafpdf.models.session import ProjectMetadata

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings
    from leafpdf.models.session import ResourceHandle, SessionState


async def load_metadata(
    client: httpx.AsyncClient,
    resource: ResourceHandle,
    session: SessionState,
    remote: RemoteSettings,
    parser: SessionMarkupParser | None = None,
) -> tuple[ProjectMetadata, SessionState]:
    """Read the project page and pull its title from the ``og:title`` tag."""
    log = structlog.get_logger().bind(stage="metadata", resource_id=resource.resource_id)
    parser = parser or RegexMarkupParser()

    try:
        response = await client.get(
            f"{remote.base_url}/project/{resource.resource_id}",
            headers=session_headers(remote, session),
            follow_redirects=True,
        )
    except httpx.HTTPError as exc:
        log.warning("metadata_network_error", error=type(exc).__name__)
        raise RemoteFetchError(stage="metadata", status=None) from exc

    if response.status_code != 200:
        raise RemoteFetchError(stage="metadata", status=response.status_code)

    metadata = ProjectMetadata(title=parser.project_title(response.text) or "Untitled")
    log.info("metadata_loaded", title=metadata.title)
    return metadata, session.with_cookie(response_cookie(response))
