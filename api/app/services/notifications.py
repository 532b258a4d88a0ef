"""Notification service: unread counts, mark-read, history and delivery.

Unread count always equals the number of the user's rows with ``read=false``;
both mark-read operations are idempotent single updates, so a count read
after either returns reflects it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Protocol, Sequence

from ..db.notifications import NotificationPriority
from ..errors import InvalidArgument, require_identifier
from .notification_store import NotificationDraft, NotificationRecord

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 20
MAX_HISTORY_LIMIT = 100

# Notification type -> preference category a user can opt out of.
NOTIFICATION_CATEGORIES: dict[str, str] = {
    "trade_proposed": "trades",
    "trade_accepted": "trades",
    "trade_rejected": "trades",
    "trade_countered": "trades",
    "draft_pick_made": "draft",
    "draft_your_turn": "draft",
    "waiver_processed": "waivers",
    "waiver_claimed": "waivers",
    "score_update": "scoring",
    "matchup_close": "scoring",
    "commissioner_action": "league",
    "league_update": "league",
    "player_news": "news",
    "lineup_reminder": "lineup",
}


class NotificationStoreProtocol(Protocol):
    async def count_unread(self, user_id: str) -> int: ...

    async def update_read(
        self, *, notification_id: str | None = None, user_id: str | None = None
    ) -> int: ...

    async def list_for_user(
        self, user_id: str, *, limit: int, unread_only: bool = False
    ) -> list[NotificationRecord]: ...

    async def create_many(self, drafts: Sequence[NotificationDraft]) -> list[NotificationRecord]: ...

    async def disabled_users(self, user_ids: Sequence[str], category: str) -> set[str]: ...


class LeagueMembersProtocol(Protocol):
    async def find_member_ids(
        self, league_id: str, *, exclude_user_id: str | None = None
    ) -> list[str]: ...


@dataclass(frozen=True)
class NotificationMessage:
    type: str
    title: str
    message: str
    priority: str = NotificationPriority.normal.value
    data: dict[str, Any] | None = None


@dataclass(frozen=True)
class SendResult:
    created: list[NotificationRecord]
    skipped_user_ids: list[str]


def _validate_message(message: NotificationMessage) -> str:
    """Check the message and return its preference category."""
    category = NOTIFICATION_CATEGORIES.get(message.type)
    if category is None:
        raise InvalidArgument("Invalid notification type")
    if message.priority not in {p.value for p in NotificationPriority}:
        raise InvalidArgument("Invalid notification priority")
    if not message.title.strip() or not message.message.strip():
        raise InvalidArgument("title and message are required")
    return category


class NotificationService:
    def __init__(
        self,
        store: NotificationStoreProtocol,
        league_members: LeagueMembersProtocol,
    ) -> None:
        self._store = store
        self._league_members = league_members

    async def get_unread_count(self, user_id: str) -> int:
        user_id = require_identifier(user_id, "userId")
        return await self._store.count_unread(user_id)

    async def mark_as_read(self, notification_id: str) -> None:
        """Mark one notification read. Unknown or already-read ids are a no-op."""
        notification_id = require_identifier(notification_id, "notificationId")
        changed = await self._store.update_read(notification_id=notification_id)
        logger.debug(
            "notification_marked_read",
            extra={"notification_id": notification_id, "changed": changed},
        )

    async def mark_all_as_read(self, user_id: str) -> None:
        user_id = require_identifier(user_id, "userId")
        changed = await self._store.update_read(user_id=user_id)
        logger.info(
            "notifications_marked_read",
            extra={"user_id": user_id, "changed": changed},
        )

    async def list_notifications(
        self,
        user_id: str,
        *,
        limit: int = DEFAULT_HISTORY_LIMIT,
        unread_only: bool = False,
    ) -> list[NotificationRecord]:
        """Most recent notifications for a user, newest first."""
        user_id = require_identifier(user_id, "userId")
        if limit < 1 or limit > MAX_HISTORY_LIMIT:
            raise InvalidArgument(f"limit must be between 1 and {MAX_HISTORY_LIMIT}")
        return await self._store.list_for_user(user_id, limit=limit, unread_only=unread_only)

    async def send(
        self,
        user_ids: Sequence[str],
        message: NotificationMessage,
        *,
        league_id: str | None = None,
    ) -> SendResult:
        """Store ``message`` for each user who has not opted out of its category."""
        category = _validate_message(message)
        targets: list[str] = []
        for user_id in user_ids:
            user_id = require_identifier(user_id, "userIds")
            if user_id not in targets:
                targets.append(user_id)
        if not targets:
            raise InvalidArgument("userIds must not be empty")

        disabled = await self._store.disabled_users(targets, category)
        recipients = [user_id for user_id in targets if user_id not in disabled]
        drafts = [
            NotificationDraft(
                user_id=user_id,
                type=message.type,
                title=message.title.strip(),
                message=message.message.strip(),
                priority=message.priority,
                league_id=league_id,
                data=dict(message.data or {}),
            )
            for user_id in recipients
        ]
        created = await self._store.create_many(drafts)
        skipped = [user_id for user_id in targets if user_id in disabled]
        logger.info(
            "notifications_sent",
            extra={
                "type": message.type,
                "league_id": league_id,
                "created": len(created),
                "skipped": len(skipped),
            },
        )
        return SendResult(created=created, skipped_user_ids=skipped)

    async def send_to_league(
        self,
        league_id: str,
        message: NotificationMessage,
        *,
        exclude_user_id: str | None = None,
    ) -> SendResult:
        """Notify every team owner in a league, optionally leaving one user out."""
        league_id = require_identifier(league_id, "leagueId")
        _validate_message(message)
        members = await self._league_members.find_member_ids(
            league_id, exclude_user_id=exclude_user_id
        )
        if not members:
            return SendResult(created=[], skipped_user_ids=[])
        return await self.send(members, message, league_id=league_id)
