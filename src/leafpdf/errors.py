from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_TOKEN_FORMAT = "INVALID_TOKEN_FORMAT"
    REMOTE_FETCH_FAILED = "REMOTE_FETCH_FAILED"
    CREDENTIAL_EXTRACTION_FAILED = "CREDENTIAL_EXTRACTION_FAILED"
    ACCESS_GRANT_FAILED = "ACCESS_GRANT_FAILED"
    COMPILE_FAILED = "COMPILE_FAILED"
    ARTIFACT_NOT_FOUND = "ARTIFACT_NOT_FOUND"
    ARTIFACT_DOWNLOAD_FAILED = "ARTIFACT_DOWNLOAD_FAILED"


class LeafPdfError(Exception):
    """Base class for every expected pipeline failure.

    Raised by the stages, propagated unchanged through the pipeline and
    serialised by app.py into the JSON error body. Never catch this inside
    a stage; the boundary is the only place that turns it into a response.

    ``status`` is the upstream HTTP status the failing call observed, or
    ``None`` when the call never produced a response (network error,
    timeout) or the failure was not an HTTP one.
    """

    code: ErrorCode

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def http_status(self) -> int:
        """Status the boundary answers with: upstream 4xx/5xx, else 500."""
        if self.status is not None and 400 <= self.status < 600:
            return self.status
        return 500

    def to_dict(self) -> dict:
        return {
            "error": self.message,
            "kind": self.code,
            "status": self.http_status,
        }


class InvalidTokenFormat(LeafPdfError):
    code = ErrorCode.INVALID_TOKEN_FORMAT

    def __init__(self, token: str) -> None:
        super().__init__("Invalid token format", status=400)
        self.token = token


class RemoteFetchError(LeafPdfError):
    code = ErrorCode.REMOTE_FETCH_FAILED

    def __init__(self, stage: str, status: int | None) -> None:
        super().__init__(f"Fetching the {stage} page failed", status=status)
        self.stage = stage


class CredentialExtractionError(LeafPdfError):
    code = ErrorCode.CREDENTIAL_EXTRACTION_FAILED

    def __init__(self, field: str) -> None:
        super().__init__(f"Session credential '{field}' not found on share page")
        self.field = field


class AccessGrantError(LeafPdfError):
    code = ErrorCode.ACCESS_GRANT_FAILED

    def __init__(self, status: int | None) -> None:
        super().__init__(
            "Grant failed; the link may lack read access or sharing is disabled",
            status=status,
        )


class CompileError(LeafPdfError):
    """Compile endpoint failed or returned no output files.

    ``compile_status`` holds the remote compile outcome (``"failure"``,
    ``"timedout"``, ...) when the endpoint answered but produced nothing,
    which separates a document error from a transport failure.
    """

    code = ErrorCode.COMPILE_FAILED

    def __init__(self, status: int | None, compile_status: str | None = None) -> None:
        if compile_status:
            message = f"Compilation failed or incomplete (remote status: {compile_status})"
        else:
            message = "Compilation failed or incomplete"
        super().__init__(message, status=status)
        self.compile_status = compile_status


class ArtifactNotFoundError(LeafPdfError):
    code = ErrorCode.ARTIFACT_NOT_FOUND

    def __init__(self) -> None:
        super().__init__("PDF file not found in output files")


class ArtifactDownloadError(LeafPdfError):
    code = ErrorCode.ARTIFACT_DOWNLOAD_FAILED

    def __init__(self, status: int | None) -> None:
        super().__init__("PDF download failed", status=status)
