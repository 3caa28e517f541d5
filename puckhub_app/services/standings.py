# file: puckhub_app/services/standings.py
"""Round standings: aggregation, ranking and full-replace recalculation.

Provided utilities:
    - :func:`build_standings` – pure aggregation of completed games and bonus
      points into ranked :class:`~puckhub_app.services.rows.StandingRow` s.
    - :func:`recalculate_standings` – rebuild the stored table of one round.
    - :func:`recalculate_division_standings` – rebuild every round of a division.
    - :func:`standings_for_round` – stored table in ranking order.
    - :func:`team_form` – recent W/D/L results per team within a round.

Ranking order: total points (desc), games played (asc), goal difference
(desc), goals for (desc). Teams equal on all four keys keep the order in which
they were first seen (games by primary key, then bonus-only teams by id).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, replace

from django.conf import settings
from django.db import transaction
from django.db.models import F, QuerySet

from puckhub_app.log import get_logger
from puckhub_app.models import Game, GameStatus, Round, Standing
from puckhub_app.services import queries
from puckhub_app.services.rows import GameResult, RoundRule, StandingRow

log = get_logger(__name__)

TEAM_FORM_MAX = 20

__all__ = [
    "build_standings",
    "ranking_key",
    "recalculate_standings",
    "recalculate_division_standings",
    "standings_for_round",
    "team_form",
    "FormEntry",
]


@dataclass
class _Tally:
    games_played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0

    def add(self, scored: int, conceded: int) -> None:
        self.games_played += 1
        self.goals_for += scored
        self.goals_against += conceded
        if scored > conceded:
            self.wins += 1
        elif scored < conceded:
            self.losses += 1
        else:
            self.draws += 1


def ranking_key(row: StandingRow) -> tuple[int, int, int, int]:
    """Sort key implementing the table order (smaller sorts first)."""
    return (-row.total_points, row.games_played, -row.goal_difference, -row.goals_for)


def build_standings(
    rule: RoundRule,
    games: Iterable[GameResult],
    bonus_totals: Mapping[int, int] | None = None,
    previous_ranks: Mapping[int, int | None] | None = None,
) -> list[StandingRow]:
    """Aggregate completed games into a ranked table.

    Args:
        rule: Points awarded for a win, draw and loss.
        games: Completed games; ``None`` scores count as 0.
        bonus_totals: Summed bonus points per team id (missing = 0).
        previous_ranks: Current stored rank per team id, carried into
            ``previous_rank``.

    Returns:
        Rows ordered by rank; ranks are 1..n without gaps.
    """
    bonus_totals = bonus_totals or {}
    previous_ranks = previous_ranks or {}

    tallies: dict[int, _Tally] = {}
    for game in games:
        home_score = game.home_score or 0
        away_score = game.away_score or 0
        tallies.setdefault(game.home_team_id, _Tally()).add(home_score, away_score)
        tallies.setdefault(game.away_team_id, _Tally()).add(away_score, home_score)

    # Teams with bonus points but no completed game still get a line.
    for team_id in bonus_totals:
        tallies.setdefault(team_id, _Tally())

    unranked: list[StandingRow] = []
    for team_id, t in tallies.items():
        points = t.wins * rule.points_win + t.draws * rule.points_draw + t.losses * rule.points_loss
        bonus = int(bonus_totals.get(team_id, 0))
        unranked.append(
            StandingRow(
                team_id=team_id,
                games_played=t.games_played,
                wins=t.wins,
                draws=t.draws,
                losses=t.losses,
                goals_for=t.goals_for,
                goals_against=t.goals_against,
                goal_difference=t.goals_for - t.goals_against,
                points=points,
                bonus_points=bonus,
                total_points=points + bonus,
                rank=0,
                previous_rank=None,
            )
        )

    unranked.sort(key=ranking_key)
    return [
        replace(row, rank=position, previous_rank=previous_ranks.get(row.team_id))
        for position, row in enumerate(unranked, start=1)
    ]


@transaction.atomic
def recalculate_standings(round_id: int) -> None:
    """Rebuild the stored standings of a round from its completed games.

    A missing round is a no-op. The previous ranks are read before the old
    rows are deleted, and the whole sequence runs in one transaction.

    Raises:
        django.db.DatabaseError: Propagated unchanged from the storage layer.
    """
    rule = queries.get_round(round_id)
    if rule is None:
        log.debug("standings_skipped", round_id=round_id, reason="round_not_found")
        return

    games = queries.list_completed_games(round_id)
    bonus = queries.sum_bonus_points(round_id)
    previous = queries.list_existing_standings_ranks(round_id)

    rows = build_standings(rule, games, bonus, previous)
    queries.replace_standings(round_id, rows)
    log.info("standings_recalculated", round_id=round_id, games=len(games), teams=len(rows))


def recalculate_division_standings(division_id: int) -> int:
    """Recalculate every round of a division in its configured order.

    Returns:
        Number of rounds recalculated.
    """
    round_ids = list(
        Round.objects.filter(division_id=division_id)
        .order_by("sort_order", "pk")
        .values_list("id", flat=True)
    )
    for round_id in round_ids:
        recalculate_standings(round_id)
    return len(round_ids)


def standings_for_round(round_id: int) -> QuerySet[Standing]:
    """Stored table of a round in ranking order."""
    return (
        Standing.objects.filter(round_id=round_id)
        .select_related("team")
        .order_by("-total_points", "games_played", "-goal_difference", "-goals_for", "rank")
    )


@dataclass(frozen=True)
class FormEntry:
    """One recent result of a team: W/D/L, opponent and score from its side."""

    result: str  # "W" | "D" | "L"
    opponent_id: int
    goals_for: int
    goals_against: int


def team_form(round_id: int, limit: int | None = None) -> dict[int, list[FormEntry]]:
    """Most recent results per team among the round's completed games.

    Games are visited newest first (by ``finalized_at``, then id) and each team
    keeps at most ``limit`` entries (default: ``PUCKHUB_TEAM_FORM_LIMIT``).

    Raises:
        ValueError: If ``limit`` is outside ``1..20``.
    """
    if limit is None:
        limit = int(getattr(settings, "PUCKHUB_TEAM_FORM_LIMIT", 5))
    if not 1 <= limit <= TEAM_FORM_MAX:
        raise ValueError(f"limit must be between 1 and {TEAM_FORM_MAX}")

    games = (
        Game.objects.filter(round_id=round_id, status=GameStatus.COMPLETED)
        .order_by(F("finalized_at").desc(nulls_last=True), "-pk")
        .values_list("home_team_id", "away_team_id", "home_score", "away_score")
    )

    form: dict[int, list[FormEntry]] = {}
    for home_id, away_id, home_score, away_score in games:
        hs, as_ = home_score or 0, away_score or 0
        for team_id, opponent_id, scored, conceded in (
            (home_id, away_id, hs, as_),
            (away_id, home_id, as_, hs),
        ):
            entries = form.setdefault(team_id, [])
            if len(entries) < limit:
                result = "W" if scored > conceded else "L" if scored < conceded else "D"
                entries.append(FormEntry(result, opponent_id, scored, conceded))
    return form
