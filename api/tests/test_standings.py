"""Tests for standings aggregation and ranking."""

from __future__ import annotations

from app.services.league_data import LeagueResults, MatchupResult, TeamRef
from app.services.standings import compute_standings


def _results(
    teams: list[str],
    matchups: list[tuple[str, str, float, float]],
) -> LeagueResults:
    return LeagueResults(
        league_id="lg",
        season=2025,
        teams=tuple(TeamRef(team_id=t, name=t.upper(), owner_id=f"owner-{t}") for t in teams),
        matchups=tuple(MatchupResult(h, a, hs, aws) for h, a, hs, aws in matchups),
    )


class TestComputeStandings:
    def test_ranks_by_wins_then_points_for(self, league_data) -> None:
        """8-2/1200, 8-2/1100, 7-3/1300 rank 1, 2, 3."""
        standings = compute_standings(league_data.leagues["lg-1"])
        by_team = {s.team_id: s for s in standings}

        assert (by_team["t1"].wins, by_team["t1"].losses, by_team["t1"].points_for) == (8, 2, 1200.0)
        assert (by_team["t2"].wins, by_team["t2"].losses, by_team["t2"].points_for) == (8, 2, 1100.0)
        assert (by_team["t3"].wins, by_team["t3"].losses, by_team["t3"].points_for) == (7, 3, 1300.0)
        assert [by_team[t].rank for t in ("t1", "t2", "t3")] == [1, 2, 3]
        assert [s.team_id for s in standings[:3]] == ["t1", "t2", "t3"]

    def test_ranks_are_dense_and_start_at_one(self, league_data) -> None:
        standings = compute_standings(league_data.leagues["lg-1"])
        assert [s.rank for s in standings] == [1, 2, 3, 4, 5]

    def test_equal_wins_and_points_share_rank(self) -> None:
        results = _results(
            ["a", "b", "c", "d"],
            [("a", "c", 100.0, 90.0), ("b", "d", 100.0, 90.0)],
        )
        standings = compute_standings(results)

        assert [(s.team_id, s.rank) for s in standings] == [
            ("a", 1),
            ("b", 1),
            ("c", 2),
            ("d", 2),
        ]

    def test_shared_rank_ordered_by_points_against(self) -> None:
        results = _results(
            ["a", "b", "c", "d"],
            [("a", "c", 100.0, 95.0), ("b", "d", 100.0, 60.0)],
        )
        standings = compute_standings(results)

        assert standings[0].team_id == "b"
        assert standings[1].team_id == "a"
        assert standings[0].rank == standings[1].rank == 1

    def test_equal_scores_are_ties_for_both_teams(self) -> None:
        standings = compute_standings(_results(["a", "b"], [("a", "b", 101.5, 101.5)]))
        for standing in standings:
            assert (standing.wins, standing.losses, standing.ties) == (0, 0, 1)
            assert standing.points_for == 101.5
            assert standing.points_against == 101.5

    def test_team_without_games_has_empty_record(self) -> None:
        standings = compute_standings(_results(["a", "b", "idle"], [("a", "b", 90.0, 80.0)]))
        idle = next(s for s in standings if s.team_id == "idle")

        assert (idle.wins, idle.losses, idle.ties, idle.points_for) == (0, 0, 0, 0.0)
        assert idle.rank == 3

    def test_matchups_with_unknown_teams_are_ignored(self) -> None:
        standings = compute_standings(
            _results(["a", "b"], [("a", "ghost", 150.0, 10.0), ("a", "b", 80.0, 90.0)])
        )
        a = next(s for s in standings if s.team_id == "a")

        assert (a.wins, a.losses, a.points_for) == (0, 1, 80.0)

    def test_points_rounded_to_two_decimals(self) -> None:
        standings = compute_standings(
            _results(["a", "b"], [("a", "b", 0.1, 0.0), ("a", "b", 0.2, 0.0)])
        )
        a = next(s for s in standings if s.team_id == "a")
        assert a.points_for == 0.3

    def test_empty_league(self) -> None:
        assert compute_standings(_results([], [])) == []

    def test_payload_uses_camel_case(self) -> None:
        standing = compute_standings(_results(["a", "b"], [("a", "b", 10.0, 5.0)]))[0]
        assert standing.to_payload() == {
            "teamId": "a",
            "teamName": "A",
            "wins": 1,
            "losses": 0,
            "ties": 0,
            "pointsFor": 10.0,
            "pointsAgainst": 5.0,
            "rank": 1,
        }
