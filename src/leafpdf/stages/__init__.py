"""Remote pipeline stages, in execution order.

Each stage performs exactly one round-trip to the remote service, takes the
current ``SessionState`` and returns the updated one next to its result.
No stage catches ``LeafPdfError``; failures propagate to the pipeline.
"""

from __future__ import annotations

from leafpdf.stages.access import grant_access
from leafpdf.stages.artifact import build_download_url, resolve_artifact, select_pdf
from leafpdf.stages.compile import compile_project
from leafpdf.stages.metadata import load_metadata
from leafpdf.stages.session import extract_session

__all__ = [
    "extract_session",
    "grant_access",
    "load_metadata",
    "compile_project",
    "select_pdf",
    "build_download_url",
    "resolve_artifact",
]
