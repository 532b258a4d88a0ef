"""API key authentication dependency."""

from __future__ import annotations

import logging
import secrets

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import APIKeyHeader

from app.config import settings

logger = logging.getLogger(__name__)

API_KEY_HEADER = APIKeyHeader(name="X-API-Key", auto_error=False)


def _reject(request: Request, detail: str) -> HTTPException:
    logger.warning(
        detail,
        extra={
            "client_ip": request.client.host if request.client else "unknown",
            "path": request.url.path,
        },
    )
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "ApiKey"},
    )


async def verify_api_key(
    request: Request,
    api_key: str | None = Depends(API_KEY_HEADER),
) -> str:
    """Validate the X-API-Key header with a constant-time comparison.

    When no API_KEY is configured (local development) every request is let
    through; ``validate_env`` refuses to start production without one.

    Raises:
        HTTPException: 401 if the key is missing or wrong.
    """
    if not settings.api_key:
        logger.debug("API_KEY not configured - allowing unauthenticated request")
        return ""

    if not api_key:
        raise _reject(request, "Missing API key")

    if not secrets.compare_digest(api_key, settings.api_key):
        raise _reject(request, "Invalid API key")

    return api_key
