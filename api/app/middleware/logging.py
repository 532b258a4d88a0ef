"""Access logging middleware."""

from __future__ import annotations

import logging
import time
from typing import Callable


class StructuredLoggingMiddleware:
    """Log one ``request`` record per HTTP exchange once the response has finished.

    For event streams the record is written when the stream closes, so
    ``duration_ms`` is the session length.
    """

    def __init__(self, app: Callable) -> None:
        self.app = app
        self.logger = logging.getLogger("api.access")

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        start = time.perf_counter()
        status_code = 500

        async def send_wrapper(message: dict) -> None:
            nonlocal status_code
            if message["type"] == "http.response.start":
                status_code = message["status"]
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        finally:
            self._log(scope, status_code, (time.perf_counter() - start) * 1000)

    def _log(self, scope: dict, status_code: int, elapsed_ms: float) -> None:
        headers = dict(scope.get("headers") or [])
        client = scope.get("client")
        level = logging.WARNING if status_code >= 500 else logging.INFO
        self.logger.log(
            level,
            "request",
            extra={
                "method": scope.get("method"),
                "path": scope.get("path"),
                "query": scope.get("query_string", b"").decode("latin-1"),
                "status_code": status_code,
                "client_ip": client[0] if client else None,
                "duration_ms": round(elapsed_ms, 2),
                "user_agent": headers.get(b"user-agent", b"").decode("latin-1") or None,
            },
        )
