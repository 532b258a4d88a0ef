"""Data access for notification rows.

All writes are single predicate updates so concurrent mark-read calls for the
same user cannot lose each other's changes.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, AsyncIterator, Sequence

from sqlalchemy import func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db.notifications import Notification, NotificationPreference
from ..errors import InvalidArgument, StoreUnavailable
from ..utils.datetime_utils import now_utc

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NotificationRecord:
    id: str
    user_id: str
    type: str
    title: str
    message: str
    priority: str
    read: bool
    created_at: datetime
    league_id: str | None = None
    read_at: datetime | None = None
    data: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class NotificationDraft:
    """A notification about to be stored for one user."""

    user_id: str
    type: str
    title: str
    message: str
    priority: str = "normal"
    league_id: str | None = None
    data: dict[str, Any] = field(default_factory=dict)


def _to_record(row: Notification) -> NotificationRecord:
    return NotificationRecord(
        id=row.id,
        user_id=row.user_id,
        type=row.type,
        title=row.title,
        message=row.message,
        priority=row.priority,
        read=row.read,
        created_at=row.created_at,
        league_id=row.league_id,
        read_at=row.read_at,
        data=dict(row.data or {}),
    )


class NotificationStore:
    """Reads and writes notifications through short-lived sessions."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    @asynccontextmanager
    async def _session(self, operation: str) -> AsyncIterator[AsyncSession]:
        try:
            async with self._session_factory() as session:
                yield session
                await session.commit()
        except SQLAlchemyError as exc:
            logger.exception("notification_store_failed", extra={"operation": operation})
            raise StoreUnavailable() from exc

    async def count_unread(self, user_id: str) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(Notification.user_id == user_id, Notification.read.is_(False))
        )
        async with self._session("count_unread") as session:
            result = await session.execute(stmt)
            return int(result.scalar_one())

    async def update_read(
        self,
        *,
        notification_id: str | None = None,
        user_id: str | None = None,
    ) -> int:
        """Flip unread rows to read for one notification or for all of a user's.

        Returns the number of rows changed; already-read and missing rows are
        simply not matched.
        """
        if (notification_id is None) == (user_id is None):
            raise InvalidArgument("Exactly one of notification_id or user_id is required")

        stmt = update(Notification).where(Notification.read.is_(False))
        if notification_id is not None:
            stmt = stmt.where(Notification.id == notification_id)
        else:
            stmt = stmt.where(Notification.user_id == user_id)
        stmt = stmt.values(read=True, read_at=now_utc()).execution_options(
            synchronize_session=False
        )

        async with self._session("update_read") as session:
            result = await session.execute(stmt)
            return result.rowcount or 0

    async def list_for_user(
        self,
        user_id: str,
        *,
        limit: int,
        unread_only: bool = False,
    ) -> list[NotificationRecord]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.read.is_(False))
        stmt = stmt.order_by(Notification.created_at.desc(), Notification.id.desc()).limit(limit)

        async with self._session("list_for_user") as session:
            result = await session.execute(stmt)
            return [_to_record(row) for row in result.scalars().all()]

    async def create_many(self, drafts: Sequence[NotificationDraft]) -> list[NotificationRecord]:
        if not drafts:
            return []
        rows = [
            Notification(
                user_id=draft.user_id,
                league_id=draft.league_id,
                type=draft.type,
                title=draft.title,
                message=draft.message,
                priority=draft.priority,
                data=dict(draft.data),
                read=False,
                created_at=now_utc(),
            )
            for draft in drafts
        ]
        async with self._session("create_many") as session:
            session.add_all(rows)
            await session.flush()
            return [_to_record(row) for row in rows]

    async def disabled_users(self, user_ids: Sequence[str], category: str) -> set[str]:
        """Return the subset of ``user_ids`` that opted out of ``category``."""
        if not user_ids:
            return set()
        stmt = select(NotificationPreference.user_id).where(
            NotificationPreference.user_id.in_(list(user_ids)),
            NotificationPreference.category == category,
            NotificationPreference.enabled.is_(False),
        )
        async with self._session("disabled_users") as session:
            result = await session.execute(stmt)
            return set(result.scalars().all())
