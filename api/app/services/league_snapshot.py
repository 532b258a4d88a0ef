"""League standings snapshots with a short-lived in-process cache.

A snapshot is a recomputable view: nothing here is persisted. Cache entries
are keyed by league id and expire after a configurable TTL. Concurrent misses
for the same league share one recompute, and a failed recompute falls back to
the last good snapshot (flagged ``stale``) when one exists.
"""

from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import time
from contextlib import asynccontextmanager
from dataclasses import dataclass, replace
from datetime import datetime
from typing import AsyncIterator, Callable, Protocol

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_fixed

from ..errors import DataUnavailable, require_identifier
from ..utils.datetime_utils import isoformat_utc, now_utc
from .league_data import LeagueResults
from .standings import TeamStanding, compute_standings

logger = logging.getLogger(__name__)

RECOMPUTE_ATTEMPTS = 2
RECOMPUTE_RETRY_WAIT_SECONDS = 0.2


class StandingsSource(Protocol):
    async def find_standings(self, league_id: str) -> LeagueResults: ...


@dataclass(frozen=True)
class LeagueSnapshot:
    league_id: str
    season: int
    standings: tuple[TeamStanding, ...]
    computed_at: datetime
    stale: bool = False

    def fingerprint(self) -> str:
        """Hash of the standings content, ignoring when it was computed."""
        body = json.dumps(
            {
                "season": self.season,
                "standings": [standing.to_payload() for standing in self.standings],
            },
            sort_keys=True,
        )
        return hashlib.sha256(body.encode()).hexdigest()

    def to_payload(self) -> dict[str, object]:
        return {
            "leagueId": self.league_id,
            "season": self.season,
            "standings": [standing.to_payload() for standing in self.standings],
            "computedAt": isoformat_utc(self.computed_at),
            "stale": self.stale,
        }


@dataclass
class _CacheEntry:
    snapshot: LeagueSnapshot
    stored_at: float


class SnapshotCache:
    """League id -> snapshot map with per-key locks. Last writer wins.

    A league's lock only exists while some caller holds or waits on it, so
    lookups of unknown or failing leagues leave nothing behind.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def get(self, league_id: str, max_age: float) -> LeagueSnapshot | None:
        """Return the cached snapshot if it is younger than ``max_age`` seconds."""
        entry = self._entries.get(league_id)
        if entry is None or self._clock() - entry.stored_at >= max_age:
            return None
        return entry.snapshot

    def peek(self, league_id: str) -> LeagueSnapshot | None:
        """Return the cached snapshot regardless of age."""
        entry = self._entries.get(league_id)
        return entry.snapshot if entry else None

    def put(self, league_id: str, snapshot: LeagueSnapshot) -> None:
        self._entries[league_id] = _CacheEntry(snapshot=snapshot, stored_at=self._clock())

    def invalidate(self, league_id: str) -> None:
        self._entries.pop(league_id, None)

    @asynccontextmanager
    async def locked(self, league_id: str) -> AsyncIterator[None]:
        """Hold the league's recompute lock for the duration of the block."""
        lock = self._locks.get(league_id)
        if lock is None:
            lock = self._locks[league_id] = asyncio.Lock()
        self._lock_users[league_id] = self._lock_users.get(league_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users.get(league_id, 1) - 1
            if remaining > 0:
                self._lock_users[league_id] = remaining
            else:
                self._lock_users.pop(league_id, None)
                if self._locks.get(league_id) is lock:
                    del self._locks[league_id]

    @property
    def lock_count(self) -> int:
        return len(self._locks)

    def clear(self) -> None:
        self._entries.clear()
        self._locks.clear()
        self._lock_users.clear()

    def __len__(self) -> int:
        return len(self._entries)


class LeagueSnapshotBuilder:
    def __init__(
        self,
        source: StandingsSource,
        cache: SnapshotCache,
        *,
        ttl_seconds: float,
    ) -> None:
        self._source = source
        self._cache = cache
        self._ttl_seconds = ttl_seconds

    async def get_snapshot(self, league_id: str) -> LeagueSnapshot:
        """Return the current standings snapshot for ``league_id``.

        Raises:
            InvalidArgument: empty league id.
            NotFound: league does not exist.
            DataUnavailable: recompute failed and nothing was cached.
        """
        league_id = require_identifier(league_id, "leagueId")

        cached = self._cache.get(league_id, self._ttl_seconds)
        if cached is not None:
            return cached

        async with self._cache.locked(league_id):
            # Another waiter may have filled the entry while we were blocked.
            cached = self._cache.get(league_id, self._ttl_seconds)
            if cached is not None:
                return cached

            try:
                snapshot = await self._recompute(league_id)
            except DataUnavailable:
                previous = self._cache.peek(league_id)
                if previous is None:
                    raise
                logger.warning(
                    "serving_stale_snapshot",
                    extra={
                        "league_id": league_id,
                        "computed_at": isoformat_utc(previous.computed_at),
                    },
                )
                return replace(previous, stale=True)

            self._cache.put(league_id, snapshot)
            return snapshot

    @retry(
        retry=retry_if_exception_type(DataUnavailable),
        stop=stop_after_attempt(RECOMPUTE_ATTEMPTS),
        wait=wait_fixed(RECOMPUTE_RETRY_WAIT_SECONDS),
        reraise=True,
    )
    async def _recompute(self, league_id: str) -> LeagueSnapshot:
        results = await self._source.find_standings(league_id)
        standings = compute_standings(results)
        logger.debug(
            "snapshot_recomputed",
            extra={"league_id": league_id, "teams": len(standings)},
        )
        return LeagueSnapshot(
            league_id=league_id,
            season=results.season,
            standings=tuple(standings),
            computed_at=now_utc(),
        )
