"""Values threaded between pipeline stages.

Every stage that talks to the remote service takes a ``SessionState`` and
returns the (possibly updated) one next to its own result, so cookie
rotation is an explicit data dependency rather than shared state.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SessionState(BaseModel):
    """Guest session credentials scraped from the share page."""

    model_config = ConfigDict(frozen=True)

    csrf_token: str = Field(min_length=1)
    session_cookie: str = Field(min_length=1)
    referer_url: str

    def with_cookie(self, cookie: str) -> SessionState:
        """Return a copy carrying ``cookie`` when it is non-empty, else ``self``."""
        if not cookie:
            return self
        return self.model_copy(update={"session_cookie": cookie})


class ResourceHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    resource_id: str = Field(min_length=1)


class ProjectMetadata(BaseModel):
    title: str = "Untitled"


class OutputFile(BaseModel):
    """Single entry of a compile response's ``outputFiles`` list."""

    model_config = ConfigDict(extra="ignore")

    type: str
    url: str
    path: str | None = None
    build: str | None = None


class CompileResult(BaseModel):
    output_files: list[OutputFile]
    pdf_download_domain: str
    compile_group: str = ""
    server_id: str = ""
