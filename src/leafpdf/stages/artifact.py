"""Artifact resolution: turn compile output into a PDF URL or PDF bytes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal
from urllib.parse import urlencode

import httpx
import structlog

from leafpdf.errors import ArtifactDownloadError, ArtifactNotFoundError
from leafpdf.fetcher import browser_headers
from leafpdf.models.artifact import ResolvedArtifact

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings
    from leafpdf.models.session import CompileResult, OutputFile, SessionState


def select_pdf(result: CompileResult) -> OutputFile:
    for output_file in result.output_files:
        if output_file.type == "pdf":
            return output_file
    raise ArtifactNotFoundError()


def build_download_url(result: CompileResult, output_file: OutputFile) -> str:
    """Compose the download URL with the compile server routing parameters."""
    params: dict[str, str] = {}
    if result.compile_group:
        params["compileGroup"] = result.compile_group
    if result.server_id:
        params["clsiserverid"] = result.server_id
    params["enable_pdf_caching"] = "true"

    separator = "&" if "?" in output_file.url else "?"
    domain = result.pdf_download_domain.rstrip("/")
    return f"{domain}{output_file.url}{separator}{urlencode(params)}"


async def resolve_artifact(
    client: httpx.AsyncClient,
    token: str,
    result: CompileResult,
    session: SessionState,
    remote: RemoteSettings,
    *,
    strategy: Literal["url", "bytes"],
    title: str | None = None,
) -> ResolvedArtifact:
    """Resolve the compiled PDF according to ``strategy``.

    ``url`` returns the composed download URL without touching the network.
    ``bytes`` downloads it with the session cookie and returns the payload.
    """
    log = structlog.get_logger().bind(stage="artifact", token=token, strategy=strategy)
    url = build_download_url(result, select_pdf(result))

    if strategy == "url":
        log.info("artifact_resolved", url=url)
        return ResolvedArtifact(token=token, kind="url", url=url, title=title)

    try:
        response = await client.get(
            url,
            headers={**browser_headers(remote), "Cookie": session.session_cookie},
        )
    except httpx.HTTPError as exc:
        log.warning("artifact_network_error", error=type(exc).__name__)
        raise ArtifactDownloadError(status=None) from exc

    if response.status_code != 200:
        raise ArtifactDownloadError(status=response.status_code)

    log.info("artifact_resolved", url=url, content_length=len(response.content))
    return ResolvedArtifact(
        token=token,
        kind="bytes",
        url=url,
        content=response.content,
        title=title,
    )
