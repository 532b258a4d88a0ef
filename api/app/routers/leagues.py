"""League endpoints: standings snapshot and league-wide notifications."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from ..context import AppContext
from ..dependencies import get_context, verify_api_key
from ..services.notifications import NotificationMessage
from .notification_models import LeagueNotificationRequest, SendNotificationResponse

router = APIRouter(
    prefix="/leagues",
    tags=["leagues"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("/{league_id}/standings")
async def get_standings(
    league_id: str,
    context: AppContext = Depends(get_context),
) -> dict[str, Any]:
    """
    Current standings for a league, served from the snapshot cache when fresh.

    Example response:
        {
          "leagueId": "lg-1",
          "season": 2025,
          "standings": [
            {"teamId": "t1", "teamName": "Gridiron", "wins": 8, "losses": 2,
             "ties": 0, "pointsFor": 1200.0, "pointsAgainst": 1010.5, "rank": 1}
          ],
          "computedAt": "2025-11-02T18:00:00+00:00",
          "stale": false
        }
    """
    snapshot = await context.snapshots.get_snapshot(league_id)
    return snapshot.to_payload()


@router.post("/{league_id}/notifications", response_model=SendNotificationResponse)
async def notify_league(
    league_id: str,
    payload: LeagueNotificationRequest,
    context: AppContext = Depends(get_context),
) -> SendNotificationResponse:
    result = await context.notifications.send_to_league(
        league_id,
        NotificationMessage(
            type=payload.type,
            title=payload.title,
            message=payload.message,
            priority=payload.priority,
            data=payload.data,
        ),
        exclude_user_id=payload.exclude_user_id,
    )
    return SendNotificationResponse(
        created=len(result.created),
        skippedUserIds=result.skipped_user_ids,
    )
