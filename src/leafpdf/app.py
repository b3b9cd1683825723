"""Starlette application exposing the resolve boundary.

Routes:
  GET /resolve/{token}  -> JSON ``{"pdf": url}`` or ``application/pdf`` bytes
  GET /healthz          -> liveness check

Token validation happens here, before the pipeline, the cache or the
network are touched. Errors are serialised from ``LeafPdfError.to_dict``;
messages never include session credentials.
"""

from __future__ import annotations

import asyncio
import re
from contextlib import asynccontextmanager, suppress
from typing import TYPE_CHECKING

import structlog
from starlette.applications import Starlette
from starlette.responses import JSONResponse, Response
from starlette.routing import Route

from leafpdf import __version__
from leafpdf.cache import MemoryArtifactCache
from leafpdf.config import Settings
from leafpdf.errors import InvalidTokenFormat, LeafPdfError
from leafpdf.fetcher import build_http_client
from leafpdf.models.artifact import ResolveInput
from leafpdf.pipeline import Pipeline
from leafpdf.schedulers import run_cache_cleanup_scheduler
from leafpdf.state import AppState

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator

    from starlette.requests import Request

    from leafpdf.models.artifact import ResolvedArtifact

log = structlog.get_logger()

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


async def handle_resolve(token: str, state: AppState) -> ResolvedArtifact:
    """Validate ``token`` and run the pipeline for it."""
    try:
        validated = ResolveInput(token=token)
    except ValueError as exc:
        raise InvalidTokenFormat(token) from exc
    return await state.pipeline.resolve(validated.token)


def _pdf_filename(artifact: ResolvedArtifact) -> str:
    stem = _UNSAFE_FILENAME_CHARS.sub("_", artifact.title or "").strip("_")
    return f"{stem or artifact.token}.pdf"


def artifact_response(artifact: ResolvedArtifact) -> Response:
    if artifact.kind == "bytes":
        return Response(
            artifact.content,
            media_type="application/pdf",
            headers={"Content-Disposition": f'inline; filename="{_pdf_filename(artifact)}"'},
        )
    body: dict[str, str] = {"pdf": artifact.url}
    if artifact.title:
        body["title"] = artifact.title
    return JSONResponse(body)


async def resolve_endpoint(request: Request) -> Response:
    state: AppState = request.app.state.leafpdf
    token = request.path_params["token"]
    try:
        artifact = await handle_resolve(token, state)
    except LeafPdfError as exc:
        log.warning(
            "resolve_error",
            code=exc.code,
            message=exc.message,
            status=exc.http_status,
        )
        return JSONResponse(exc.to_dict(), status_code=exc.http_status)
    except Exception:
        log.error("resolve_unexpected_error", exc_info=True)
        return JSONResponse(
            {"error": "Unknown error", "kind": "INTERNAL_ERROR", "status": 500},
            status_code=500,
        )
    return artifact_response(artifact)


async def healthz_endpoint(request: Request) -> Response:
    return JSONResponse({"status": "ok", "version": __version__})


def build_state(settings: Settings) -> AppState:
    """Wire the HTTP client, cache and pipeline for one process."""
    http_client = build_http_client(settings.remote)
    cache = MemoryArtifactCache(max_entries=settings.cache.max_entries)
    pipeline = Pipeline(http_client, cache, settings)
    return AppState(
        settings=settings,
        http_client=http_client,
        cache=cache,
        pipeline=pipeline,
    )


def create_app(settings: Settings | None = None, *, state: AppState | None = None) -> Starlette:
    """Build the ASGI app.

    Passing ``state`` skips resource creation in the lifespan; the caller
    then owns the client's lifecycle (used by tests).
    """

    @asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncGenerator[None, None]:
        if state is not None:
            yield
            return

        app_state = build_state(settings or Settings())
        app.state.leafpdf = app_state
        cleanup_task = asyncio.create_task(run_cache_cleanup_scheduler(app_state))
        log.info(
            "server_started",
            version=__version__,
            strategy=app_state.settings.artifact.strategy,
            cache_ttl_seconds=app_state.settings.cache.ttl_seconds,
        )
        try:
            yield
        finally:
            cleanup_task.cancel()
            with suppress(asyncio.CancelledError):
                await cleanup_task
            await app_state.http_client.aclose()
            log.info("server_stopping")

    app = Starlette(
        routes=[
            Route("/resolve/{token}", resolve_endpoint, methods=["GET"]),
            Route("/healthz", healthz_endpoint, methods=["GET"]),
        ],
        lifespan=lifespan,
    )
    if state is not None:
        app.state.leafpdf = state
    return app
