"""Database models and session management.

Models live in their own modules:
    from app.db.leagues import FantasyLeague, FantasyTeam, FantasyMatchup
    from app.db.notifications import Notification, NotificationPreference

Accessors take a session factory rather than a session so each operation runs
in its own short transaction:
    from app.db import get_session_factory
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..config import settings
from .base import Base
from .leagues import FantasyLeague, FantasyMatchup, FantasyTeam
from .notifications import Notification, NotificationPreference, NotificationPriority

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

# Created on first use so importing models never opens a connection pool.
_engine: "AsyncEngine | None" = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def _get_engine() -> "AsyncEngine":
    global _engine
    if _engine is None:
        # SQL echo is handled by logging_config so statements stay in the JSON stream.
        _engine = create_async_engine(settings.database_url, pool_pre_ping=True)
    return _engine


def get_session_factory() -> async_sessionmaker[AsyncSession]:
    """Get or create the process-wide session factory."""
    global _session_factory
    if _session_factory is None:
        _session_factory = async_sessionmaker(
            _get_engine(),
            class_=AsyncSession,
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


async def close_db() -> None:
    """Dispose of the engine's pool; the next session request recreates it."""
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
        _engine = None
        _session_factory = None


__all__ = [
    "Base",
    "AsyncSession",
    "FantasyLeague",
    "FantasyMatchup",
    "FantasyTeam",
    "Notification",
    "NotificationPreference",
    "NotificationPriority",
    "get_session_factory",
    "close_db",
]
