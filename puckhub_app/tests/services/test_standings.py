# file: puckhub_app/tests/services/test_standings.py
"""Round standings aggregation, ranking and recalculation tests.

Coverage:
* Pure ``build_standings``: W/D/L and goal tallies, bonus points, tie-breaks,
  ``None`` scores, bonus-only teams and consecutive ranks.
* ``recalculate_standings``: full replace, idempotence, ``previous_rank``
  carry-over, missing round, ignored non-completed games, totals.
* ``recalculate_division_standings``, ``standings_for_round``, ``team_form``.
"""

from __future__ import annotations

from typing import Any

import pytest
from django.apps import apps

from puckhub_app.services.rows import GameResult, RoundRule
from puckhub_app.services.standings import (
    build_standings,
    recalculate_division_standings,
    recalculate_standings,
    standings_for_round,
    team_form,
)

pytestmark = pytest.mark.django_db

RULE_210 = RoundRule(points_win=2, points_draw=1, points_loss=0)
A, B, C, D = 1, 2, 3, 4


def _g(gid: int, home: int, away: int, hs: int | None, as_: int | None) -> GameResult:
    return GameResult(id=gid, home_team_id=home, away_team_id=away, home_score=hs, away_score=as_)


def _by_team(rows: list[Any]) -> dict[int, Any]:
    return {r.team_id: r for r in rows}


# --- Pure aggregation ------------------------------------------------------


def test_two_games_win_and_draw() -> None:
    """A beats B 4:2 and draws 1:1 in the second game."""
    rows = build_standings(RULE_210, [_g(1, A, B, 4, 2), _g(2, A, B, 1, 1)])
    t = _by_team(rows)

    a = t[A]
    assert (a.games_played, a.wins, a.draws, a.losses) == (2, 1, 1, 0)
    assert (a.goals_for, a.goals_against, a.goal_difference) == (5, 3, 2)
    assert (a.points, a.bonus_points, a.total_points, a.rank) == (3, 0, 3, 1)

    b = t[B]
    assert (b.wins, b.draws, b.losses, b.points, b.rank) == (0, 1, 1, 1, 2)


def test_bonus_points_can_change_the_leader() -> None:
    """Bonus points are added to the game points before ranking."""
    rows = build_standings(RULE_210, [_g(1, A, B, 4, 2), _g(2, A, B, 1, 1)], bonus_totals={B: 3})
    t = _by_team(rows)
    assert t[B].total_points == 4
    assert t[B].points == 1
    assert t[B].rank == 1
    assert t[A].rank == 2


def test_negative_bonus_is_applied() -> None:
    rows = build_standings(RULE_210, [_g(1, A, B, 1, 0)], bonus_totals={A: -5})
    t = _by_team(rows)
    assert t[A].total_points == -3
    assert [r.team_id for r in rows] == [B, A]


def test_bonus_only_team_gets_a_line() -> None:
    """A team with bonus points but no completed game still appears."""
    rows = build_standings(RULE_210, [_g(1, A, B, 2, 0)], bonus_totals={C: 1})
    c = _by_team(rows)[C]
    assert c.games_played == 0
    assert c.points == 0
    assert c.total_points == 1
    assert [r.rank for r in rows] == [1, 2, 3]


def test_tie_break_goal_difference_then_goals_for() -> None:
    """Equal points and games: goal difference first, then goals for."""
    rows = build_standings(RULE_210, [_g(1, A, C, 4, 2), _g(2, B, D, 3, 1)])
    assert [r.team_id for r in rows][:2] == [A, B]

    rows = build_standings(RULE_210, [_g(1, A, C, 2, 1), _g(2, B, D, 5, 1)])
    assert [r.team_id for r in rows][:2] == [B, A]


def test_fewer_games_played_ranks_higher_on_equal_points() -> None:
    """A: one win (2 pts, 1 game). B: two draws (2 pts, 2 games)."""
    rows = build_standings(RULE_210, [_g(1, A, C, 1, 0), _g(2, B, D, 0, 0), _g(3, D, B, 1, 1)])
    t = _by_team(rows)
    assert t[A].total_points == t[B].total_points == 2
    assert t[A].rank < t[B].rank


def test_full_tie_keeps_distinct_consecutive_ranks() -> None:
    rows = build_standings(RULE_210, [_g(1, A, B, 1, 1)])
    assert [r.rank for r in rows] == [1, 2]
    assert [r.team_id for r in rows] == [A, B]


def test_none_scores_count_as_zero_draw() -> None:
    rows = build_standings(RULE_210, [_g(1, A, B, None, None)])
    t = _by_team(rows)
    assert (t[A].draws, t[A].goals_for, t[A].points) == (1, 0, 1)
    assert (t[B].draws, t[B].goals_against, t[B].points) == (1, 0, 1)


def test_custom_points_rule_and_loss_points() -> None:
    rule = RoundRule(points_win=3, points_draw=1, points_loss=1)
    t = _by_team(build_standings(rule, [_g(1, A, B, 5, 4)]))
    assert t[A].points == 3
    assert t[B].points == 1


def test_previous_ranks_are_carried_over() -> None:
    rows = build_standings(RULE_210, [_g(1, A, B, 0, 1)], previous_ranks={A: 1, B: 2})
    t = _by_team(rows)
    assert (t[B].rank, t[B].previous_rank) == (1, 2)
    assert (t[A].rank, t[A].previous_rank) == (2, 1)


def test_empty_round_has_empty_table() -> None:
    assert build_standings(RULE_210, []) == []


# --- Recalculation against the database ------------------------------------


def _standing_model() -> Any:
    return apps.get_model("puckhub_app", "Standing")


def test_recalculate_writes_table(round_: Any, teams: dict[str, Any], make_game: Any) -> None:
    make_game(round_, teams["A"], teams["B"], 3, 1)
    make_game(round_, teams["B"], teams["A"], 2, 2)

    recalculate_standings(round_.pk)

    table = list(standings_for_round(round_.pk))
    assert [s.team_id for s in table] == [teams["A"].pk, teams["B"].pk]
    a = table[0]
    assert (a.games_played, a.wins, a.draws, a.losses, a.points, a.rank) == (2, 1, 1, 0, 3, 1)
    assert a.previous_rank is None


def test_recalculate_is_idempotent_and_sets_previous_rank(
    round_: Any, teams: dict[str, Any], make_game: Any
) -> None:
    make_game(round_, teams["A"], teams["B"], 3, 1)
    make_game(round_, teams["C"], teams["A"], 0, 0)

    recalculate_standings(round_.pk)
    first = {s.team_id: (s.rank, s.total_points) for s in standings_for_round(round_.pk)}

    recalculate_standings(round_.pk)
    second = list(standings_for_round(round_.pk))

    assert {s.team_id: (s.rank, s.total_points) for s in second} == first
    assert all(s.previous_rank == s.rank for s in second)
    assert _standing_model().objects.filter(round=round_).count() == 3


def test_recalculate_ignores_games_not_completed(
    round_: Any, teams: dict[str, Any], make_game: Any
) -> None:
    make_game(round_, teams["A"], teams["B"], 1, 0)
    make_game(round_, teams["A"], teams["C"], None, None, status="scheduled", finalized_at=None)
    make_game(round_, teams["B"], teams["C"], 4, 0, status="in_progress")

    recalculate_standings(round_.pk)

    team_ids = {s.team_id for s in standings_for_round(round_.pk)}
    assert team_ids == {teams["A"].pk, teams["B"].pk}


def test_recalculate_removes_stale_rows(round_: Any, teams: dict[str, Any], make_game: Any) -> None:
    game = make_game(round_, teams["A"], teams["C"], 2, 1)
    make_game(round_, teams["A"], teams["B"], 1, 0)
    recalculate_standings(round_.pk)
    assert standings_for_round(round_.pk).count() == 3

    game.delete()
    recalculate_standings(round_.pk)
    assert {s.team_id for s in standings_for_round(round_.pk)} == {teams["A"].pk, teams["B"].pk}


def test_recalculate_totals_are_consistent(round_: Any, teams: dict[str, Any], make_game: Any) -> None:
    make_game(round_, teams["A"], teams["B"], 3, 1)
    make_game(round_, teams["B"], teams["C"], 2, 2)
    make_game(round_, teams["C"], teams["A"], 4, 0)

    recalculate_standings(round_.pk)
    rows = list(standings_for_round(round_.pk))

    assert sum(r.games_played for r in rows) == 2 * 3
    assert sum(r.wins for r in rows) == sum(r.losses for r in rows)
    assert sum(r.goals_for for r in rows) == sum(r.goals_against for r in rows)
    assert sorted(r.rank for r in rows) == [1, 2, 3]


def test_recalculate_with_bonus_points(round_: Any, teams: dict[str, Any], make_game: Any) -> None:
    BonusPoints = apps.get_model("puckhub_app", "BonusPoints")
    make_game(round_, teams["A"], teams["B"], 3, 1)
    BonusPoints.objects.create(team=teams["B"], round=round_, points=2, reason="Fair Play")
    BonusPoints.objects.create(team=teams["B"], round=round_, points=1)
    BonusPoints.objects.create(team=teams["C"], round=round_, points=-1, reason="Abzug")

    recalculate_standings(round_.pk)
    t = {s.team_id: s for s in standings_for_round(round_.pk)}

    assert t[teams["B"].pk].bonus_points == 3
    assert t[teams["B"].pk].total_points == 3
    assert t[teams["B"].pk].rank == 1
    assert t[teams["C"].pk].games_played == 0
    assert t[teams["C"].pk].total_points == -1


def test_recalculate_missing_round_is_noop() -> None:
    recalculate_standings(987654)
    assert _standing_model().objects.count() == 0


def test_recalculate_uses_round_points_rule(division: Any, teams: dict[str, Any], make_game: Any) -> None:
    Round = apps.get_model("puckhub_app", "Round")
    rnd = Round.objects.create(division=division, name="Playoffs", round_type="playoffs", points_win=3)
    make_game(rnd, teams["A"], teams["B"], 2, 1)

    recalculate_standings(rnd.pk)
    assert standings_for_round(rnd.pk).first().points == 3


def test_recalculate_division_standings_counts_rounds(
    division: Any, round_: Any, teams: dict[str, Any], make_game: Any
) -> None:
    Round = apps.get_model("puckhub_app", "Round")
    second = Round.objects.create(division=division, name="Playdowns", round_type="playdowns", sort_order=1)
    make_game(round_, teams["A"], teams["B"], 1, 0)
    make_game(second, teams["B"], teams["C"], 0, 3)

    assert recalculate_division_standings(division.pk) == 2
    assert standings_for_round(round_.pk).count() == 2
    assert standings_for_round(second.pk).count() == 2


# --- Team form -------------------------------------------------------------


def test_team_form_newest_first_and_limited(round_: Any, teams: dict[str, Any], make_game: Any) -> None:
    make_game(round_, teams["A"], teams["B"], 1, 0)  # oldest
    make_game(round_, teams["A"], teams["C"], 2, 2)
    make_game(round_, teams["B"], teams["A"], 3, 0)  # newest

    form = team_form(round_.pk, limit=2)
    a_form = form[teams["A"].pk]

    assert [e.result for e in a_form] == ["L", "D"]
    assert a_form[0].opponent_id == teams["B"].pk
    assert (a_form[0].goals_for, a_form[0].goals_against) == (0, 3)
    assert [e.result for e in form[teams["B"].pk]] == ["W", "L"]


def test_team_form_default_limit_from_settings(
    settings: Any, round_: Any, teams: dict[str, Any], make_game: Any
) -> None:
    settings.PUCKHUB_TEAM_FORM_LIMIT = 1
    make_game(round_, teams["A"], teams["B"], 1, 0)
    make_game(round_, teams["A"], teams["B"], 0, 1)
    assert len(team_form(round_.pk)[teams["A"].pk]) == 1


@pytest.mark.parametrize("limit", [0, 21, -1])
def test_team_form_rejects_out_of_range_limit(round_: Any, limit: int) -> None:
    with pytest.raises(ValueError):
        team_form(round_.pk, limit=limit)


def test_team_form_puts_games_without_finalization_time_last(
    round_: Any, teams: dict[str, Any], make_game: Any
) -> None:
    make_game(round_, teams["A"], teams["B"], 5, 0, finalized_at=None)
    make_game(round_, teams["A"], teams["B"], 0, 1)

    assert [e.result for e in team_form(round_.pk)[teams["A"].pk]] == ["L", "W"]
