"""Realtime league standings over server-sent events."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request
from fastapi.responses import StreamingResponse

from ..context import AppContext
from ..dependencies import get_context, verify_api_key
from ..services.realtime import SSE_HEADERS

router = APIRouter(
    prefix="/realtime",
    tags=["realtime"],
    dependencies=[Depends(verify_api_key)],
)


@router.get("/league/{league_id}")
async def stream_league(
    league_id: str,
    request: Request,
    context: AppContext = Depends(get_context),
) -> StreamingResponse:
    """
    Stream standings updates for a league.

    The league is resolved before the stream opens so an unknown league is a
    plain 404. Frames afterwards:

        retry: 5000

        event: snapshot
        id: 1
        data: {"leagueId": "lg-1", "standings": [...], ...}

        : heartbeat

        event: error
        data: {"error": "League data is temporarily unavailable"}
    """
    await context.snapshots.get_snapshot(league_id)
    return StreamingResponse(
        context.realtime.stream(league_id, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )
