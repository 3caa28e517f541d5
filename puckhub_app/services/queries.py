# file: puckhub_app/services/queries.py
"""Data access for the recalculation services.

Readers turn querysets into the plain rows of :mod:`puckhub_app.services.rows`;
writers replace derived tables for one scope (round or season) with a delete
followed by a bulk insert inside ``transaction.atomic``.

No function here catches database errors; they propagate to the caller.
"""

from __future__ import annotations

from collections.abc import Iterable
from decimal import Decimal

from django.db import transaction
from django.db.models import Sum

from puckhub_app.models import (
    BonusPoints,
    Game,
    GameLineup,
    GameStatus,
    Goal,
    GoalieGameStat,
    GoalieSeasonStat,
    Penalty,
    PlayerSeasonStat,
    Round,
    Standing,
)
from puckhub_app.services.rows import (
    GameResult,
    GoalFact,
    GoalieFact,
    GoalieStatRow,
    LineupFact,
    PenaltyFact,
    PlayerStatRow,
    RoundRule,
    StandingRow,
)

PLAYER_STATS_FLAG = "counts_for_player_stats"
GOALIE_STATS_FLAG = "counts_for_goalie_stats"
ELIGIBILITY_FLAGS = (PLAYER_STATS_FLAG, GOALIE_STATS_FLAG)

__all__ = [
    "PLAYER_STATS_FLAG",
    "GOALIE_STATS_FLAG",
    "get_round",
    "list_completed_games",
    "list_goal_events",
    "list_penalty_events",
    "list_lineup_entries",
    "list_goalie_game_stats",
    "sum_bonus_points",
    "list_eligible_round_ids",
    "list_season_round_ids",
    "list_existing_standings_ranks",
    "replace_standings",
    "replace_player_season_stats",
    "replace_goalie_season_stats",
]


def _as_id_list(ids: int | Iterable[int]) -> list[int]:
    if isinstance(ids, int):
        return [ids]
    return list(ids)


# --- Readers ---------------------------------------------------------------


def get_round(round_id: int) -> RoundRule | None:
    """Return the scoring rule of a round, or ``None`` when it does not exist."""
    row = (
        Round.objects.filter(pk=round_id)
        .values(
            "points_win",
            "points_draw",
            "points_loss",
            "division_id",
            PLAYER_STATS_FLAG,
            GOALIE_STATS_FLAG,
        )
        .first()
    )
    if row is None:
        return None
    return RoundRule(**row)


def list_completed_games(round_ids: int | Iterable[int]) -> list[GameResult]:
    """Completed games of one round or a set of rounds, in primary-key order."""
    qs = (
        Game.objects.filter(round_id__in=_as_id_list(round_ids), status=GameStatus.COMPLETED)
        .order_by("pk")
        .values_list("id", "home_team_id", "away_team_id", "home_score", "away_score")
    )
    return [GameResult(*row) for row in qs]


def list_goal_events(game_ids: Iterable[int]) -> list[GoalFact]:
    """Goal events of the given games as ``(team, scorer, assist 1, assist 2)``."""
    qs = (
        Goal.objects.filter(game_id__in=list(game_ids))
        .order_by("pk")
        .values_list("team_id", "scorer_id", "assist_1_id", "assist_2_id")
    )
    return [GoalFact(*row) for row in qs]


def list_penalty_events(game_ids: Iterable[int]) -> list[PenaltyFact]:
    """Penalty events of the given games with the penalized player and minutes."""
    qs = (
        Penalty.objects.filter(game_id__in=list(game_ids))
        .order_by("pk")
        .values_list("team_id", "penalized_player_id", "minutes")
    )
    return [PenaltyFact(*row) for row in qs]


def list_lineup_entries(game_ids: Iterable[int]) -> list[LineupFact]:
    """Lineup entries of the given games."""
    qs = (
        GameLineup.objects.filter(game_id__in=list(game_ids))
        .order_by("pk")
        .values_list("game_id", "player_id", "team_id")
    )
    return [LineupFact(*row) for row in qs]


def list_goalie_game_stats(game_ids: Iterable[int]) -> list[GoalieFact]:
    """Per-game goalie rows of the given games."""
    qs = (
        GoalieGameStat.objects.filter(game_id__in=list(game_ids))
        .order_by("pk")
        .values_list("player_id", "team_id", "goals_against")
    )
    return [GoalieFact(*row) for row in qs]


def sum_bonus_points(round_id: int) -> dict[int, int]:
    """Return ``{team_id: summed points}`` for a round, ordered by team id."""
    qs = (
        BonusPoints.objects.filter(round_id=round_id)
        .values("team_id")
        .annotate(total=Sum("points"))
        .order_by("team_id")
    )
    return {row["team_id"]: int(row["total"] or 0) for row in qs}


def list_eligible_round_ids(season_id: int, eligibility_flag: str) -> list[int]:
    """Rounds of a season whose ``eligibility_flag`` is set.

    Raises:
        ValueError: If ``eligibility_flag`` is not one of the round flags.
    """
    if eligibility_flag not in ELIGIBILITY_FLAGS:
        raise ValueError(f"Unknown eligibility flag: {eligibility_flag!r}")
    return list(
        Round.objects.filter(division__season_id=season_id, **{eligibility_flag: True})
        .order_by("pk")
        .values_list("id", flat=True)
    )


def list_season_round_ids(season_id: int) -> list[int]:
    """All rounds of a season in table order (division, then round sort order)."""
    return list(
        Round.objects.filter(division__season_id=season_id)
        .order_by("division__sort_order", "division_id", "sort_order", "pk")
        .values_list("id", flat=True)
    )


def list_existing_standings_ranks(round_id: int) -> dict[int, int | None]:
    """Currently stored rank per team id, read before a table is replaced."""
    return dict(Standing.objects.filter(round_id=round_id).values_list("team_id", "rank"))


# --- Writers ---------------------------------------------------------------


@transaction.atomic
def replace_standings(round_id: int, rows: Iterable[StandingRow]) -> int:
    """Delete all standings of the round and insert ``rows``. Returns the count."""
    Standing.objects.filter(round_id=round_id).delete()
    objs = [
        Standing(
            round_id=round_id,
            team_id=r.team_id,
            games_played=r.games_played,
            wins=r.wins,
            draws=r.draws,
            losses=r.losses,
            goals_for=r.goals_for,
            goals_against=r.goals_against,
            goal_difference=r.goal_difference,
            points=r.points,
            bonus_points=r.bonus_points,
            total_points=r.total_points,
            rank=r.rank,
            previous_rank=r.previous_rank,
        )
        for r in rows
    ]
    Standing.objects.bulk_create(objs)
    return len(objs)


@transaction.atomic
def replace_player_season_stats(season_id: int, rows: Iterable[PlayerStatRow]) -> int:
    """Delete the season's player rows and insert ``rows``. Returns the count."""
    PlayerSeasonStat.objects.filter(season_id=season_id).delete()
    objs = [
        PlayerSeasonStat(
            season_id=season_id,
            player_id=r.player_id,
            team_id=r.team_id,
            games_played=r.games_played,
            goals=r.goals,
            assists=r.assists,
            total_points=r.total_points,
            penalty_minutes=r.penalty_minutes,
        )
        for r in rows
    ]
    PlayerSeasonStat.objects.bulk_create(objs)
    return len(objs)


@transaction.atomic
def replace_goalie_season_stats(season_id: int, rows: Iterable[GoalieStatRow]) -> int:
    """Delete the season's goalie rows and insert ``rows``. Returns the count."""
    GoalieSeasonStat.objects.filter(season_id=season_id).delete()
    objs = [
        GoalieSeasonStat(
            season_id=season_id,
            player_id=r.player_id,
            team_id=r.team_id,
            games_played=r.games_played,
            goals_against=r.goals_against,
            gaa=Decimal(r.gaa),
        )
        for r in rows
    ]
    GoalieSeasonStat.objects.bulk_create(objs)
    return len(objs)
