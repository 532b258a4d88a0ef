"""Fantasy league models: leagues, teams, matchups."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base


class FantasyLeague(Base):
    """A fantasy league; ``season`` is the season standings are computed for."""

    __tablename__ = "fantasy_leagues"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    season: Mapped[int] = mapped_column(Integer, nullable=False)
    commissioner_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    teams: Mapped[list["FantasyTeam"]] = relationship(
        "FantasyTeam", back_populates="league", cascade="all, delete-orphan"
    )
    matchups: Mapped[list["FantasyMatchup"]] = relationship(
        "FantasyMatchup", back_populates="league", cascade="all, delete-orphan"
    )


class FantasyTeam(Base):
    """A team in a league, owned by one user."""

    __tablename__ = "fantasy_teams"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    league_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("fantasy_leagues.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    owner_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    league: Mapped[FantasyLeague] = relationship("FantasyLeague", back_populates="teams")


class FantasyMatchup(Base):
    """A head-to-head weekly matchup. Only completed matchups count toward standings."""

    __tablename__ = "fantasy_matchups"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    league_id: Mapped[str] = mapped_column(
        String(64),
        ForeignKey("fantasy_leagues.id", ondelete="CASCADE"),
        nullable=False,
    )
    season: Mapped[int] = mapped_column(Integer, nullable=False)
    week: Mapped[int] = mapped_column(Integer, nullable=False)
    home_team_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("fantasy_teams.id", ondelete="CASCADE"), nullable=False
    )
    away_team_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("fantasy_teams.id", ondelete="CASCADE"), nullable=False
    )
    home_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    away_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    is_complete: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    league: Mapped[FantasyLeague] = relationship("FantasyLeague", back_populates="matchups")

    __table_args__ = (
        Index("idx_fantasy_matchups_league_season", "league_id", "season", "is_complete"),
    )
