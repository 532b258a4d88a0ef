"""Process-wide application context.

Built once at startup, stored on ``app.state.context`` and handed to route
handlers through ``app.dependencies.get_context``. The services it holds are
stateless apart from the snapshot cache, which is flushed on shutdown.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from .config import Settings
from .db import close_db, get_session_factory
from .services.league_data import LeagueDataAccessor
from .services.league_snapshot import LeagueSnapshotBuilder, SnapshotCache, StandingsSource
from .services.notification_store import NotificationStore
from .services.notifications import (
    LeagueMembersProtocol,
    NotificationService,
    NotificationStoreProtocol,
)
from .services.realtime import RealtimeLeagueChannel

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    notifications: NotificationService
    snapshot_cache: SnapshotCache
    snapshots: LeagueSnapshotBuilder
    realtime: RealtimeLeagueChannel
    owns_database: bool = False

    @classmethod
    def build(
        cls,
        settings: Settings,
        *,
        notification_store: NotificationStoreProtocol,
        league_data: StandingsSource,
        league_members: LeagueMembersProtocol,
        snapshot_cache: SnapshotCache | None = None,
        owns_database: bool = False,
    ) -> "AppContext":
        cache = snapshot_cache if snapshot_cache is not None else SnapshotCache()
        snapshots = LeagueSnapshotBuilder(
            league_data,
            cache,
            ttl_seconds=settings.snapshot_cache_ttl_seconds,
        )
        return cls(
            settings=settings,
            notifications=NotificationService(notification_store, league_members),
            snapshot_cache=cache,
            snapshots=snapshots,
            realtime=RealtimeLeagueChannel(
                snapshots,
                poll_interval_seconds=settings.realtime_poll_interval_seconds,
                max_session_seconds=settings.realtime_max_session_seconds,
            ),
            owns_database=owns_database,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> "AppContext":
        """Wire the database-backed accessors."""
        factory = session_factory or get_session_factory()
        league_data = LeagueDataAccessor(factory)
        return cls.build(
            settings,
            notification_store=NotificationStore(factory),
            league_data=league_data,
            league_members=league_data,
            owns_database=session_factory is None,
        )

    async def shutdown(self) -> None:
        cached = len(self.snapshot_cache)
        self.snapshot_cache.clear()
        logger.info(
            "app_context_shutdown",
            extra={
                "cached_snapshots": cached,
                "open_streams": len(self.realtime.active_sessions),
            },
        )
        if self.owns_database:
            await close_db()
