from __future__ import annotations

from leafpdf.models.artifact import ArtifactCacheEntry, ResolvedArtifact, ResolveInput
from leafpdf.models.session import (
    CompileResult,
    OutputFile,
    ProjectMetadata,
    ResourceHandle,
    SessionState,
)

__all__ = [
    # session
    "SessionState",
    "ResourceHandle",
    "OutputFile",
    "CompileResult",
    "ProjectMetadata",
    # artifact
    "ResolvedArtifact",
    "ArtifactCacheEntry",
    "ResolveInput",
]
