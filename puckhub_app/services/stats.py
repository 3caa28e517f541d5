# file: puckhub_app/services/stats.py
"""Season statistics for skaters and goalies.

Provided utilities:
    - :func:`aggregate_player_stats` – merge goal, assist, penalty and lineup
      facts into one row per ``(player, team)``.
    - :func:`aggregate_goalie_stats` – group per-game goalie facts.
    - :func:`format_gaa` – goals-against average as a 2-decimal string.
    - :func:`recalculate_player_stats` / :func:`recalculate_goalie_stats` –
      rebuild the stored season rows from eligible rounds only.

Every count is grouped by the team recorded on the fact (event, lineup or
goalie row), not by the player's current roster team, so a transferred player
keeps separate rows per team.
"""

from __future__ import annotations

from collections import Counter, defaultdict
from collections.abc import Iterable
from decimal import ROUND_HALF_UP, Decimal

from django.db import transaction

from puckhub_app.log import get_logger
from puckhub_app.services import queries
from puckhub_app.services.rows import (
    GoalFact,
    GoalieFact,
    GoalieStatRow,
    LineupFact,
    PenaltyFact,
    PlayerStatRow,
)

log = get_logger(__name__)

_TWO_PLACES = Decimal("0.01")

__all__ = [
    "aggregate_player_stats",
    "aggregate_goalie_stats",
    "format_gaa",
    "eligible_game_ids",
    "recalculate_player_stats",
    "recalculate_goalie_stats",
]

Key = tuple[int, int]  # (player_id, team_id)


# --- Pure aggregation ------------------------------------------------------


def aggregate_player_stats(
    goals: Iterable[GoalFact],
    penalties: Iterable[PenaltyFact],
    lineups: Iterable[LineupFact],
) -> list[PlayerStatRow]:
    """Merge the four skater aggregates into one row per ``(player, team)``.

    - goals: goal events with the player as scorer;
    - assists: goal events with the player as assist 1, plus those with the
      player as assist 2;
    - penalty minutes: summed minutes of the player's penalties;
    - games played: distinct games with a lineup entry.

    Missing aggregates default to 0. Rows are ordered by player id, team id.
    """
    goal_counts: Counter[Key] = Counter()
    assist_counts: Counter[Key] = Counter()
    for goal in goals:
        if goal.scorer_id is not None:
            goal_counts[(goal.scorer_id, goal.team_id)] += 1
        for assist_id in (goal.assist_1_id, goal.assist_2_id):
            if assist_id is not None:
                assist_counts[(assist_id, goal.team_id)] += 1

    penalty_minutes: Counter[Key] = Counter()
    for penalty in penalties:
        if penalty.player_id is not None:
            penalty_minutes[(penalty.player_id, penalty.team_id)] += penalty.minutes or 0

    games_played: defaultdict[Key, set[int]] = defaultdict(set)
    for entry in lineups:
        games_played[(entry.player_id, entry.team_id)].add(entry.game_id)

    keys = set(goal_counts) | set(assist_counts) | set(penalty_minutes) | set(games_played)
    return [
        PlayerStatRow(
            player_id=player_id,
            team_id=team_id,
            games_played=len(games_played.get((player_id, team_id), ())),
            goals=goal_counts[(player_id, team_id)],
            assists=assist_counts[(player_id, team_id)],
            penalty_minutes=penalty_minutes[(player_id, team_id)],
        )
        for player_id, team_id in sorted(keys)
    ]


def format_gaa(goals_against: int, games_played: int) -> str:
    """Goals-against average rounded half-up to two places.

    >>> format_gaa(7, 3)
    '2.33'
    >>> format_gaa(0, 0)
    '0.00'
    """
    if games_played <= 0:
        return "0.00"
    value = (Decimal(goals_against) / Decimal(games_played)).quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)
    return f"{value:.2f}"


def aggregate_goalie_stats(rows: Iterable[GoalieFact]) -> list[GoalieStatRow]:
    """Group goalie game facts by ``(player, team)``: count games, sum goals against."""
    games: Counter[Key] = Counter()
    against: Counter[Key] = Counter()
    for row in rows:
        key = (row.player_id, row.team_id)
        games[key] += 1
        against[key] += row.goals_against or 0

    return [
        GoalieStatRow(
            player_id=player_id,
            team_id=team_id,
            games_played=games[(player_id, team_id)],
            goals_against=against[(player_id, team_id)],
            gaa=format_gaa(against[(player_id, team_id)], games[(player_id, team_id)]),
        )
        for player_id, team_id in sorted(games)
    ]


# --- Recalculation ---------------------------------------------------------


def eligible_game_ids(season_id: int, eligibility_flag: str) -> list[int]:
    """Completed games of the season's rounds that have ``eligibility_flag`` set."""
    round_ids = queries.list_eligible_round_ids(season_id, eligibility_flag)
    if not round_ids:
        return []
    return [game.id for game in queries.list_completed_games(round_ids)]


@transaction.atomic
def recalculate_player_stats(season_id: int) -> None:
    """Rebuild all ``PlayerSeasonStat`` rows of a season.

    A season without eligible rounds or without completed games in them ends
    up with no rows at all.
    """
    game_ids = eligible_game_ids(season_id, queries.PLAYER_STATS_FLAG)
    if not game_ids:
        queries.replace_player_season_stats(season_id, [])
        log.info("player_stats_cleared", season_id=season_id, reason="no_eligible_games")
        return

    rows = aggregate_player_stats(
        queries.list_goal_events(game_ids),
        queries.list_penalty_events(game_ids),
        queries.list_lineup_entries(game_ids),
    )
    queries.replace_player_season_stats(season_id, rows)
    log.info("player_stats_recalculated", season_id=season_id, games=len(game_ids), rows=len(rows))


@transaction.atomic
def recalculate_goalie_stats(season_id: int) -> None:
    """Rebuild all ``GoalieSeasonStat`` rows of a season from goalie game facts."""
    game_ids = eligible_game_ids(season_id, queries.GOALIE_STATS_FLAG)
    if not game_ids:
        queries.replace_goalie_season_stats(season_id, [])
        log.info("goalie_stats_cleared", season_id=season_id, reason="no_eligible_games")
        return

    rows = aggregate_goalie_stats(queries.list_goalie_game_stats(game_ids))
    queries.replace_goalie_season_stats(season_id, rows)
    log.info("goalie_stats_recalculated", season_id=season_id, games=len(game_ids), rows=len(rows))
