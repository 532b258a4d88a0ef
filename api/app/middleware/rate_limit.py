"""Per-client request limiting for the notification and league endpoints."""

from __future__ import annotations

import logging
import math
import time
from collections import deque
from typing import Callable, Deque

from starlette.responses import JSONResponse

from app.config import settings

logger = logging.getLogger(__name__)

_EXEMPT_PATHS = frozenset({"/healthz"})


class RateLimitMiddleware:
    """Sliding-window limit of RATE_LIMIT_REQUESTS per RATE_LIMIT_WINDOW_SECONDS per client IP.

    A realtime stream counts once, when it is opened. Clients whose window has
    emptied are dropped so the table only holds recently active addresses.
    """

    def __init__(self, app: Callable, clock: Callable[[], float] = time.monotonic) -> None:
        self.app = app
        self._clock = clock
        self._windows: dict[str, Deque[float]] = {}

    def _retry_after(self, window: Deque[float], now: float, span: int) -> int:
        return max(1, math.ceil(window[0] + span - now))

    def _prune(self, now: float, span: int) -> None:
        stale = [ip for ip, hits in self._windows.items() if not hits or hits[-1] <= now - span]
        for ip in stale:
            del self._windows[ip]

    async def __call__(self, scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http" or scope.get("path") in _EXEMPT_PATHS:
            await self.app(scope, receive, send)
            return

        client = scope.get("client")
        client_ip = client[0] if client else "unknown"
        now = self._clock()
        span = settings.rate_limit_window_seconds

        hits = self._windows.setdefault(client_ip, deque())
        while hits and hits[0] <= now - span:
            hits.popleft()

        if len(hits) >= settings.rate_limit_requests:
            retry_after = self._retry_after(hits, now, span)
            logger.warning(
                "rate_limited",
                extra={"client_ip": client_ip, "path": scope.get("path"), "retry_after": retry_after},
            )
            response = JSONResponse(
                {"error": "Rate limit exceeded"},
                status_code=429,
                headers={"Retry-After": str(retry_after)},
            )
            await response(scope, receive, send)
            return

        hits.append(now)
        if len(self._windows) > 1024:
            self._prune(now, span)
        await self.app(scope, receive, send)
