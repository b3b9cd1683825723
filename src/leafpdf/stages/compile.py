"""Compile trigger: ask the remote service to build the project's PDF."""

from __future__ import annotations

from typing import TYPE_CHECKING

import httpx
import structlog
from pydantic import ValidationError

from leafpdf.errors import CompileError
from leafpdf.fetcher import response_cookie, session_headers
from leafpdf.models.session import CompileResult, OutputFile

if TYPE_CHECKING:
    from leafpdf.config import RemoteSettings
    from leafpdf.models.session import ResourceHandle, SessionState


def compile_request_body(session: SessionState, remote: RemoteSettings) -> dict:
    """Fixed compile options: non-draft, silent checks, no root override, full build."""
    body: dict = {
        "rootDoc_id": None,
        "draft": False,
        "check": "silent",
        "incrementalCompilesEnabled": False,
    }
    if remote.csrf_mode == "body":
        body["_csrf"] = session.csrf_token
    return body


def parse_compile_response(
    payload: object,
    status_code: int,
    remote: RemoteSettings,
) -> CompileResult:
    """Validate a compile response body, raising CompileError if unusable.

    A 2xx response whose body has no output files is a remote compile
    failure (usually an error in the document), reported with the body's
    ``status`` field so it reads differently from a transport failure.
    """
    body = payload if isinstance(payload, dict) else {}
    compile_status = body.get("status") if isinstance(body.get("status"), str) else None

    raw_files = body.get("outputFiles")
    if not isinstance(raw_files, list) or not raw_files:
        raise CompileError(status=status_code, compile_status=compile_status or "no_output")

    try:
        output_files = [OutputFile.model_validate(item) for item in raw_files]
    except ValidationError as exc:
        raise CompileError(status=status_code, compile_status="malformed_output") from exc

    return CompileResult(
        output_files=output_files,
        pdf_download_domain=body.get("pdfDownloadDomain") or remote.base_url,
        compile_group=body.get("compileGroup") or "",
        server_id=body.get("clsiServerId") or "",
    )


async def compile_project(
    client: httpx.AsyncClient,
    resource: ResourceHandle,
    session: SessionState,
    remote: RemoteSettings,
) -> tuple[CompileResult, SessionState]:
    """POST to ``/project/{id}/compile`` and return the parsed output listing."""
    log = structlog.get_logger().bind(stage="compile", resource_id=resource.resource_id)
    project_url = f"{remote.base_url}/project/{resource.resource_id}"

    headers = {
        **session_headers(remote, session, referer=project_url),
        "Accept": "application/json",
    }
    if remote.csrf_mode == "header":
        headers["X-Csrf-Token"] = session.csrf_token

    try:
        response = await client.post(
            f"{project_url}/compile",
            params={"auto_compile": "true"},
            json=compile_request_body(session, remote),
            headers=headers,
        )
    except httpx.HTTPError as exc:
        log.warning("compile_network_error", error=type(exc).__name__)
        raise CompileError(status=None) from exc

    log.info("compile_response", status_code=response.status_code)

    try:
        payload = response.json()
    except ValueError:
        payload = None

    if not response.is_success:
        compile_status = payload.get("status") if isinstance(payload, dict) else None
        raise CompileError(
            status=response.status_code,
            compile_status=compile_status if isinstance(compile_status, str) else None,
        )

    result = parse_compile_response(payload, response.status_code, remote)
    log.info(
        "compile_complete",
        output_count=len(result.output_files),
        compile_group=result.compile_group,
        server_id=result.server_id,
    )
    return result, session.with_cookie(response_cookie(response))
