"""Pipeline orchestrator: the single entry point behind ``GET /resolve/{token}``.

Stages run strictly in order, each awaiting the previous round-trip:

    cache check -> extract_session -> grant_access -> [load_metadata]
                -> compile_project -> resolve_artifact -> cache write

A fresh cache entry short-circuits everything. Any stage error aborts the
run, nothing is cached, and the error propagates unchanged. Concurrent
calls for a token that is already being resolved join the running task
instead of starting a second remote compile.
"""

from __future__ import annotations

import asyncio
from enum import StrEnum
from typing import TYPE_CHECKING

import structlog

from leafpdf.errors import LeafPdfError
from leafpdf.stages import (
    compile_project,
    extract_session,
    grant_access,
    load_metadata,
    resolve_artifact,
)

if TYPE_CHECKING:
    import httpx

    from leafpdf.config import Settings
    from leafpdf.markup import SessionMarkupParser
    from leafpdf.models.artifact import ResolvedArtifact
    from leafpdf.protocols import ArtifactCacheProtocol


class Stage(StrEnum):
    EXTRACT_SESSION = "extract_session"
    GRANT_ACCESS = "grant_access"
    LOAD_METADATA = "load_metadata"
    COMPILE = "compile"
    RESOLVE_ARTIFACT = "resolve_artifact"
    DONE = "done"


class Pipeline:
    """Resolves share tokens to PDF artifacts, memoised through the cache."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        cache: ArtifactCacheProtocol,
        settings: Settings,
        *,
        parser: SessionMarkupParser | None = None,
    ) -> None:
        self._client = client
        self._cache = cache
        self._settings = settings
        self._parser = parser
        self._inflight: dict[str, asyncio.Task[ResolvedArtifact]] = {}

    @property
    def inflight_tokens(self) -> frozenset[str]:
        return frozenset(self._inflight)

    async def resolve(self, token: str) -> ResolvedArtifact:
        """Return the artifact for ``token`` from cache or by running every stage.

        ``token`` must already be validated by the caller.
        """
        log = structlog.get_logger().bind(token=token)

        cached = await self._cache.get(token)
        if cached is not None:
            log.info(
                "cache_hit",
                kind=cached.artifact.kind,
                expires_at=cached.expires_at.isoformat(),
            )
            return cached.artifact

        if not self._settings.cache.coalesce_inflight:
            return await self._run(token)

        task = self._inflight.get(token)
        if task is not None:
            log.info("pipeline_joined_inflight")
        else:
            task = asyncio.create_task(self._run(token))
            self._inflight[token] = task
            task.add_done_callback(lambda t: self._forget(token, t))

        # Shielded so one caller going away does not cancel the run for the others
        return await asyncio.shield(task)

    def _forget(self, token: str, task: asyncio.Task[ResolvedArtifact]) -> None:
        if self._inflight.get(token) is task:
            del self._inflight[token]
        if not task.cancelled():
            # Mark the exception retrieved even if every waiter went away
            task.exception()

    async def _run(self, token: str) -> ResolvedArtifact:
        log = structlog.get_logger().bind(token=token)
        remote = self._settings.remote
        stage = Stage.EXTRACT_SESSION
        log.info("pipeline_started", strategy=self._settings.artifact.strategy)

        try:
            session = await extract_session(self._client, token, remote, self._parser)

            stage = Stage.GRANT_ACCESS
            resource, session = await grant_access(self._client, token, session, remote)

            title: str | None = None
            if remote.load_metadata:
                stage = Stage.LOAD_METADATA
                metadata, session = await load_metadata(
                    self._client, resource, session, remote, self._parser
                )
                title = metadata.title

            stage = Stage.COMPILE
            result, session = await compile_project(self._client, resource, session, remote)

            stage = Stage.RESOLVE_ARTIFACT
            artifact = await resolve_artifact(
                self._client,
                token,
                result,
                session,
                remote,
                strategy=self._settings.artifact.strategy,
                title=title,
            )
        except LeafPdfError as exc:
            log.warning(
                "pipeline_failed",
                stage=stage,
                code=exc.code,
                status=exc.status,
                message=exc.message,
            )
            raise

        await self._cache.set(token, artifact, self._settings.cache.ttl_seconds)
        log.info("pipeline_complete", stage=Stage.DONE, kind=artifact.kind)
        return artifact
