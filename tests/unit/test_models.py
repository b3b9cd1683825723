"""Unit tests for request and session models."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from leafpdf.models.artifact import ResolveInput
from leafpdf.models.session import SessionState


class TestResolveInput:
    def test_accepts_twelve_lowercase_alphanumerics(self) -> None:
        assert ResolveInput(token="abcd1234efgh").token == "abcd1234efgh"

    @pytest.mark.parametrize(
        "token",
        [
            "abcd1234efgh\n",
            "\nabcd1234efgh",
            "abcd1234efgh ",
            "abcd1234efg",
            "abcd1234efghi",
            "Abcd1234efgh",
            "",
        ],
    )
    def test_rejects_everything_else(self, token: str) -> None:
        with pytest.raises(ValidationError):
            ResolveInput(token=token)


class TestSessionState:
    def test_with_cookie_replaces_cookie(self) -> None:
        session = SessionState(csrf_token="c", session_cookie="sess=1", referer_url="https://r")
        assert session.with_cookie("sess=2").session_cookie == "sess=2"

    def test_with_empty_cookie_keeps_previous(self) -> None:
        session = SessionState(csrf_token="c", session_cookie="sess=1", referer_url="https://r")
        assert session.with_cookie("") is session

    def test_empty_credentials_rejected(self) -> None:
        with pytest.raises(ValidationError):
            SessionState(csrf_token="", session_cookie="sess=1", referer_url="https://r")
