# file: puckhub_app/services/rows.py
"""Plain row types exchanged between the query layer and the aggregators.

The aggregation functions in :mod:`puckhub_app.services.standings` and
:mod:`puckhub_app.services.stats` only see these frozen dataclasses, never
model instances, which keeps them testable without a database.
"""

from __future__ import annotations

from dataclasses import dataclass


# --- Source facts ----------------------------------------------------------


@dataclass(frozen=True)
class RoundRule:
    """Scoring rule triple and statistics flags of a round."""

    points_win: int
    points_draw: int
    points_loss: int
    division_id: int | None = None
    counts_for_player_stats: bool = True
    counts_for_goalie_stats: bool = True


@dataclass(frozen=True)
class GameResult:
    """Result of a completed game. Scores may be ``None`` on malformed data."""

    id: int
    home_team_id: int
    away_team_id: int
    home_score: int | None
    away_score: int | None


@dataclass(frozen=True)
class GoalFact:
    """Goal event credited to ``team_id`` with optional scorer and assists."""

    team_id: int
    scorer_id: int | None = None
    assist_1_id: int | None = None
    assist_2_id: int | None = None


@dataclass(frozen=True)
class PenaltyFact:
    """Penalty event; ``player_id`` is ``None`` for bench penalties."""

    team_id: int
    player_id: int | None
    minutes: int | None


@dataclass(frozen=True)
class LineupFact:
    """Player dressed for a game on the given team."""

    game_id: int
    player_id: int
    team_id: int


@dataclass(frozen=True)
class GoalieFact:
    """Goals against of one goalie in one game."""

    player_id: int
    team_id: int
    goals_against: int


# --- Derived rows ----------------------------------------------------------


@dataclass(frozen=True)
class StandingRow:
    """One ranked line of a round's table."""

    team_id: int
    games_played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int
    goal_difference: int
    points: int
    bonus_points: int
    total_points: int
    rank: int
    previous_rank: int | None


@dataclass(frozen=True)
class PlayerStatRow:
    """Season totals of one skater for one team."""

    player_id: int
    team_id: int
    games_played: int
    goals: int
    assists: int
    penalty_minutes: int

    @property
    def total_points(self) -> int:
        return self.goals + self.assists


@dataclass(frozen=True)
class GoalieStatRow:
    """Season totals of one goalie for one team; ``gaa`` is a 2-decimal string."""

    player_id: int
    team_id: int
    games_played: int
    goals_against: int
    gaa: str
