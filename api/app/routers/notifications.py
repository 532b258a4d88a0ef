"""Notification endpoints: unread counts, mark-read, history and sending."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from ..context import AppContext
from ..dependencies import get_context, verify_api_key
from ..services.notifications import DEFAULT_HISTORY_LIMIT, NotificationMessage
from .notification_models import (
    MarkAllReadRequest,
    NotificationItem,
    NotificationListResponse,
    SendNotificationRequest,
    SendNotificationResponse,
    SuccessResponse,
    UnreadCountResponse,
)

router = APIRouter(
    prefix="/notifications",
    tags=["notifications"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("/unread-count", response_model=UnreadCountResponse)
async def get_unread_count(
    user_id: str | None = Query(None, alias="userId"),
    context: AppContext = Depends(get_context),
) -> UnreadCountResponse:
    """
    Count a user's unread notifications.

    Example request:
        GET /notifications/unread-count?userId=user-1
    Example response:
        {"count": 3}
    """
    count = await context.notifications.get_unread_count(user_id or "")
    return UnreadCountResponse(count=count)


@router.post("/mark-all-read", response_model=SuccessResponse)
async def mark_all_read(
    payload: MarkAllReadRequest,
    context: AppContext = Depends(get_context),
) -> SuccessResponse:
    await context.notifications.mark_all_as_read(payload.user_id or "")
    return SuccessResponse()


@router.post("/{notification_id}/read", response_model=SuccessResponse)
async def mark_read(
    notification_id: str,
    context: AppContext = Depends(get_context),
) -> SuccessResponse:
    """Mark one notification read. Succeeds whether or not it was unread or exists."""
    await context.notifications.mark_as_read(notification_id)
    return SuccessResponse()


@router.get("", response_model=NotificationListResponse)
async def list_notifications(
    user_id: str | None = Query(None, alias="userId"),
    limit: int = Query(DEFAULT_HISTORY_LIMIT),
    unread_only: bool = Query(False, alias="unreadOnly"),
    context: AppContext = Depends(get_context),
) -> NotificationListResponse:
    records = await context.notifications.list_notifications(
        user_id or "", limit=limit, unread_only=unread_only
    )
    return NotificationListResponse(
        notifications=[NotificationItem.from_record(record) for record in records]
    )


@router.post("", response_model=SendNotificationResponse)
async def send_notification(
    payload: SendNotificationRequest,
    context: AppContext = Depends(get_context),
) -> SendNotificationResponse:
    result = await context.notifications.send(
        payload.user_ids,
        NotificationMessage(
            type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
            data=payload.data,
        ),
        league_id=payload.league_id,
    )
    return SendNotificationResponse(
        created=len(result.created),
        skippedUserIds=result.skipped_user_ids,
    )
