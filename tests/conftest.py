"""Shared test fixtures for the leafpdf test suite."""

from __future__ import annotations

from dataclasses import dataclass

import httpx
import pytest
import respx

from leafpdf.models.session import CompileResult, OutputFile, SessionState
from overleaf_fakes import (
    BASE_URL,
    CLSI_DOMAIN,
    CSRF,
    PDF_BYTES,
    PROJECT_ID,
    TOKEN,
    compile_payload,
    share_page,
)


@dataclass
class RemoteRoutes:
    """respx routes standing in for the remote service."""

    router: respx.MockRouter
    read: respx.Route
    grant: respx.Route
    project: respx.Route
    compile: respx.Route
    download: respx.Route

    @property
    def call_count(self) -> int:
        return sum(
            route.call_count
            for route in (self.read, self.grant, self.project, self.compile, self.download)
        )


@pytest.fixture()
def session() -> SessionState:
    return SessionState(
        csrf_token=CSRF,
        session_cookie="sess=1",
        referer_url=f"{BASE_URL}/read/{TOKEN}",
    )


@pytest.fixture()
def compile_result() -> CompileResult:
    return CompileResult(
        output_files=[
            OutputFile(type="log", url="/out.log"),
            OutputFile(type="pdf", url="/out.pdf"),
        ],
        pdf_download_domain=CLSI_DOMAIN,
        compile_group="standard",
        server_id="clsi-pre-emp-n2d-1",
    )


@pytest.fixture()
def remote_routes() -> RemoteRoutes:
    """Happy-path responses for the full pipeline of TOKEN.

    Individual tests override a route's return value to inject failures.
    """
    with respx.mock(assert_all_called=False) as router:
        yield RemoteRoutes(
            router=router,
            read=router.get(f"{BASE_URL}/read/{TOKEN}").mock(
                return_value=httpx.Response(
                    200,
                    text=share_page(),
                    headers=[
                        ("set-cookie", "sess=1; Path=/; HttpOnly"),
                        ("set-cookie", "GCLB=abc; Path=/"),
                    ],
                )
            ),
            grant=router.post(f"{BASE_URL}/read/{TOKEN}/grant").mock(
                return_value=httpx.Response(
                    200,
                    json={"redirect": f"/project/{PROJECT_ID}"},
                    headers=[("set-cookie", "sess=2; Path=/; HttpOnly")],
                )
            ),
            project=router.get(f"{BASE_URL}/project/{PROJECT_ID}").mock(
                return_value=httpx.Response(200, text=share_page(title="Project Title"))
            ),
            compile=router.post(
                host="www.overleaf.com", path=f"/project/{PROJECT_ID}/compile"
            ).mock(return_value=httpx.Response(200, json=compile_payload())),
            download=router.get(host="clsi.example.com", path="/out.pdf").mock(
                return_value=httpx.Response(
                    200, content=PDF_BYTES, headers={"content-type": "application/pdf"}
                )
            ),
        )
