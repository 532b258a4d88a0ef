"""Read access to league, team and matchup records."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from ..db.leagues import FantasyLeague, FantasyMatchup, FantasyTeam
from ..errors import DataUnavailable, NotFound

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TeamRef:
    team_id: str
    name: str
    owner_id: str


@dataclass(frozen=True)
class MatchupResult:
    home_team_id: str
    away_team_id: str
    home_score: float
    away_score: float


@dataclass(frozen=True)
class LeagueResults:
    """Everything needed to rank a league: its teams and completed matchups."""

    league_id: str
    season: int
    teams: tuple[TeamRef, ...]
    matchups: tuple[MatchupResult, ...]


class LeagueDataAccessor:
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_standings(self, league_id: str) -> LeagueResults:
        """Load teams and completed current-season matchups for a league.

        Raises:
            NotFound: league does not exist.
            DataUnavailable: the database could not be read.
        """
        try:
            async with self._session_factory() as session:
                league = await session.get(FantasyLeague, league_id)
                if league is None:
                    raise NotFound(f"League {league_id} not found")

                teams_result = await session.execute(
                    select(FantasyTeam)
                    .where(FantasyTeam.league_id == league_id)
                    .order_by(FantasyTeam.id)
                )
                matchups_result = await session.execute(
                    select(FantasyMatchup).where(
                        FantasyMatchup.league_id == league_id,
                        FantasyMatchup.season == league.season,
                        FantasyMatchup.is_complete.is_(True),
                    )
                )
                teams = tuple(
                    TeamRef(team_id=team.id, name=team.name, owner_id=team.owner_id)
                    for team in teams_result.scalars().all()
                )
                matchups = tuple(
                    MatchupResult(
                        home_team_id=matchup.home_team_id,
                        away_team_id=matchup.away_team_id,
                        home_score=matchup.home_score,
                        away_score=matchup.away_score,
                    )
                    for matchup in matchups_result.scalars().all()
                )
                return LeagueResults(
                    league_id=league.id,
                    season=league.season,
                    teams=teams,
                    matchups=matchups,
                )
        except SQLAlchemyError as exc:
            logger.exception("league_data_failed", extra={"league_id": league_id})
            raise DataUnavailable() from exc

    async def find_member_ids(
        self, league_id: str, *, exclude_user_id: str | None = None
    ) -> list[str]:
        """Owner ids of every team in the league, de-duplicated, in team order."""
        try:
            async with self._session_factory() as session:
                league = await session.get(FantasyLeague, league_id)
                if league is None:
                    raise NotFound(f"League {league_id} not found")
                result = await session.execute(
                    select(FantasyTeam.owner_id)
                    .where(FantasyTeam.league_id == league_id)
                    .order_by(FantasyTeam.id)
                )
                owners = result.scalars().all()
        except SQLAlchemyError as exc:
            logger.exception("league_members_failed", extra={"league_id": league_id})
            raise DataUnavailable() from exc

        members: list[str] = []
        for owner_id in owners:
            if owner_id == exclude_user_id or owner_id in members:
                continue
            members.append(owner_id)
        return members
