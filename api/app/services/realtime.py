"""Server-sent-events channel pushing league standings to one client.

Each open connection owns one ``StreamSession`` and moves through

    OPEN -> STREAMING <-> IDLE_WAIT -> CLOSED

STREAMING asks the snapshot builder for the league's standings and emits a
``snapshot`` event only when the content or its ``stale`` flag changed since
the last one sent; unchanged ticks emit a heartbeat comment so proxies keep
the connection open.
IDLE_WAIT is an ``asyncio.sleep`` and is where task cancellation usually lands
when the client goes away.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, AsyncIterator, Awaitable, Callable, Protocol

from ..errors import FantasyApiError
from .league_snapshot import LeagueSnapshot

logger = logging.getLogger(__name__)

SSE_HEADERS = {
    "Content-Type": "text/event-stream",
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "Access-Control-Allow-Origin": "*",
}


class StreamState(str, Enum):
    open = "open"
    streaming = "streaming"
    idle_wait = "idle_wait"
    closed = "closed"


@dataclass
class StreamSession:
    league_id: str
    opened_at: float
    last_snapshot_hash: str | None = None
    last_stale: bool = False
    state: StreamState = StreamState.open
    snapshots_sent: int = 0
    heartbeats_sent: int = 0


class SnapshotProvider(Protocol):
    async def get_snapshot(self, league_id: str) -> LeagueSnapshot: ...


def format_event(event: str, data: Any, *, event_id: str | None = None) -> str:
    lines = [f"event: {event}"]
    if event_id is not None:
        lines.append(f"id: {event_id}")
    lines.append(f"data: {json.dumps(data, separators=(',', ':'))}")
    return "\n".join(lines) + "\n\n"


def format_comment(text: str) -> str:
    return f": {text}\n\n"


def format_retry(milliseconds: int) -> str:
    return f"retry: {milliseconds}\n\n"


class RealtimeLeagueChannel:
    def __init__(
        self,
        snapshots: SnapshotProvider,
        *,
        poll_interval_seconds: float,
        max_session_seconds: float,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._snapshots = snapshots
        self._poll_interval_seconds = poll_interval_seconds
        self._max_session_seconds = max_session_seconds
        self._clock = clock
        self.active_sessions: set[int] = set()

    async def stream(
        self,
        league_id: str,
        is_disconnected: Callable[[], Awaitable[bool]],
    ) -> AsyncIterator[str]:
        """Yield SSE frames for ``league_id`` until the session closes."""
        session = StreamSession(league_id=league_id, opened_at=self._clock())
        self.active_sessions.add(id(session))
        logger.info("realtime_stream_opened", extra={"league_id": league_id})
        try:
            yield format_retry(int(self._poll_interval_seconds * 1000))
            session.state = StreamState.streaming

            while True:
                if await is_disconnected():
                    break

                try:
                    snapshot = await self._snapshots.get_snapshot(league_id)
                except FantasyApiError as exc:
                    logger.warning(
                        "realtime_snapshot_failed",
                        extra={"league_id": league_id, "error": exc.message},
                    )
                    yield format_event("error", {"error": exc.message})
                    break
                except Exception:
                    logger.exception("realtime_snapshot_crashed", extra={"league_id": league_id})
                    yield format_event("error", {"error": "Internal server error"})
                    break

                fingerprint = snapshot.fingerprint()
                # A change in staleness alone is news to the client too.
                changed = (
                    fingerprint != session.last_snapshot_hash
                    or snapshot.stale != session.last_stale
                )
                if changed:
                    session.last_snapshot_hash = fingerprint
                    session.last_stale = snapshot.stale
                    session.snapshots_sent += 1
                    yield format_event(
                        "snapshot",
                        snapshot.to_payload(),
                        event_id=str(session.snapshots_sent),
                    )
                else:
                    session.heartbeats_sent += 1
                    yield format_comment("heartbeat")

                session.state = StreamState.idle_wait
                if self._clock() - session.opened_at >= self._max_session_seconds:
                    yield format_event("close", {"reason": "max_session_duration"})
                    break
                await asyncio.sleep(self._poll_interval_seconds)
                session.state = StreamState.streaming
        finally:
            session.state = StreamState.closed
            self.active_sessions.discard(id(session))
            logger.info(
                "realtime_stream_closed",
                extra={
                    "league_id": league_id,
                    "snapshots_sent": session.snapshots_sent,
                    "heartbeats_sent": session.heartbeats_sent,
                    "duration_seconds": round(self._clock() - session.opened_at, 3),
                },
            )
