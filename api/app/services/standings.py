"""League standings aggregation.

Pure functions: given a league's teams and completed matchups, produce the
ordered standings table. No database access happens here.

Ordering: wins desc, points-for desc. Teams equal on both share a rank
(dense ranking); inside a shared rank they are listed by points-against asc,
then team id, so output order is deterministic.
"""

from __future__ import annotations

from dataclasses import dataclass

from .league_data import LeagueResults, TeamRef

# Fantasy scores are reported to two decimals.
_POINTS_PRECISION = 2


@dataclass(frozen=True)
class TeamStanding:
    team_id: str
    team_name: str
    wins: int
    losses: int
    ties: int
    points_for: float
    points_against: float
    rank: int

    def to_payload(self) -> dict[str, object]:
        return {
            "teamId": self.team_id,
            "teamName": self.team_name,
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "pointsFor": self.points_for,
            "pointsAgainst": self.points_against,
            "rank": self.rank,
        }


@dataclass
class _Tally:
    team: TeamRef
    wins: int = 0
    losses: int = 0
    ties: int = 0
    points_for: float = 0.0
    points_against: float = 0.0

    def record(self, scored: float, allowed: float) -> None:
        self.points_for += scored
        self.points_against += allowed
        if scored > allowed:
            self.wins += 1
        elif scored < allowed:
            self.losses += 1
        else:
            self.ties += 1


def _ranking_key(tally: _Tally) -> tuple[int, float]:
    return (tally.wins, round(tally.points_for, _POINTS_PRECISION))


def compute_standings(results: LeagueResults) -> list[TeamStanding]:
    """Aggregate records for every team and assign dense ranks starting at 1.

    Teams without completed matchups appear with an empty record. Matchups that
    reference a team outside the league are ignored.
    """
    tallies = {team.team_id: _Tally(team=team) for team in results.teams}

    for matchup in results.matchups:
        home = tallies.get(matchup.home_team_id)
        away = tallies.get(matchup.away_team_id)
        if home is None or away is None:
            continue
        home.record(matchup.home_score, matchup.away_score)
        away.record(matchup.away_score, matchup.home_score)

    ordered = sorted(
        tallies.values(),
        key=lambda t: (
            -t.wins,
            -round(t.points_for, _POINTS_PRECISION),
            round(t.points_against, _POINTS_PRECISION),
            t.team.team_id,
        ),
    )

    standings: list[TeamStanding] = []
    rank = 0
    previous_key: tuple[int, float] | None = None
    for tally in ordered:
        key = _ranking_key(tally)
        if key != previous_key:
            rank += 1
            previous_key = key
        standings.append(
            TeamStanding(
                team_id=tally.team.team_id,
                team_name=tally.team.name,
                wins=tally.wins,
                losses=tally.losses,
                ties=tally.ties,
                points_for=round(tally.points_for, _POINTS_PRECISION),
                points_against=round(tally.points_against, _POINTS_PRECISION),
                rank=rank,
            )
        )
    return standings
