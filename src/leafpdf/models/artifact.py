from __future__ import annotations

import re
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, field_validator

TOKEN_PATTERN = re.compile(r"[a-z0-9]{12}")


class ResolveInput(BaseModel):
    token: str

    @field_validator("token")
    @classmethod
    def validate_token(cls, v: str) -> str:
        if not TOKEN_PATTERN.fullmatch(v):
            raise ValueError(f"Invalid token: {v!r}")
        return v


class ResolvedArtifact(BaseModel):
    """The resolved PDF: a download URL or the raw bytes, never both."""

    model_config = ConfigDict(frozen=True)

    token: str
    kind: Literal["url", "bytes"]
    url: str
    content: bytes | None = None
    title: str | None = None


class ArtifactCacheEntry(BaseModel):
    """Cached artifact for one share token."""

    token: str
    artifact: ResolvedArtifact
    fetched_at: datetime
    expires_at: datetime
