"""Request and response models for notification endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..services.notification_store import NotificationRecord


class SuccessResponse(BaseModel):
    success: bool = True


class UnreadCountResponse(BaseModel):
    count: int = Field(..., ge=0)


class MarkAllReadRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(None, alias="userId")


class NotificationItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    league_id: str | None = Field(None, alias="leagueId")
    type: str
    title: str
    message: str
    priority: str
    read: bool
    created_at: datetime = Field(..., alias="createdAt")
    read_at: datetime | None = Field(None, alias="readAt")
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_record(cls, record: NotificationRecord) -> "NotificationItem":
        return cls(
            id=record.id,
            userId=record.user_id,
            leagueId=record.league_id,
            type=record.type,
            title=record.title,
            message=record.message,
            priority=record.priority,
            read=record.read,
            createdAt=record.created_at,
            readAt=record.read_at,
            data=record.data,
        )


class NotificationListResponse(BaseModel):
    notifications: list[NotificationItem]


class NotificationContent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: str = Field(..., min_length=1, max_length=50)
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)
    priority: str = "normal"
    data: dict[str, Any] | None = None


class SendNotificationRequest(NotificationContent):
    user_ids: list[str] = Field(..., alias="userIds", min_length=1)
    league_id: str | None = Field(None, alias="leagueId")


class LeagueNotificationRequest(NotificationContent):
    exclude_user_id: str | None = Field(None, alias="excludeUserId")


class SendNotificationResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    created: int
    skipped_user_ids: list[str] = Field(default_factory=list, alias="skippedUserIds")
