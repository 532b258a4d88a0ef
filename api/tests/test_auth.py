"""Tests for the X-API-Key dependency."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from fastapi import HTTPException

from app.dependencies.auth import verify_api_key

CONFIGURED_KEY = "league-key-" + "x" * 21


@pytest.fixture
def request_stub() -> MagicMock:
    request = MagicMock()
    request.client.host = "10.0.0.8"
    request.url.path = "/notifications/unread-count"
    return request


class TestVerifyApiKey:
    @pytest.mark.asyncio
    async def test_matching_key_passes(self, request_stub: MagicMock) -> None:
        with patch("app.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = CONFIGURED_KEY
            assert await verify_api_key(request_stub, CONFIGURED_KEY) == CONFIGURED_KEY

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        ("provided", "detail"),
        [
            (None, "Missing API key"),
            ("", "Missing API key"),
            ("league-key-" + "y" * 21, "Invalid API key"),
        ],
    )
    async def test_bad_key_is_401(
        self, request_stub: MagicMock, provided: str | None, detail: str
    ) -> None:
        with patch("app.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = CONFIGURED_KEY

            with pytest.raises(HTTPException) as exc_info:
                await verify_api_key(request_stub, provided)

        assert exc_info.value.status_code == 401
        assert exc_info.value.detail == detail
        assert exc_info.value.headers == {"WWW-Authenticate": "ApiKey"}

    @pytest.mark.asyncio
    async def test_request_without_client_still_rejected(self) -> None:
        request = MagicMock()
        request.client = None
        request.url.path = "/leagues/lg-1/standings"

        with patch("app.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = CONFIGURED_KEY
            with pytest.raises(HTTPException):
                await verify_api_key(request, "nope")

    @pytest.mark.asyncio
    async def test_unconfigured_key_allows_request(self, request_stub: MagicMock) -> None:
        with patch("app.dependencies.auth.settings") as mock_settings:
            mock_settings.api_key = None
            assert await verify_api_key(request_stub, None) == ""
