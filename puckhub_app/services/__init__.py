"""Recalculation services for standings and season statistics."""

from puckhub_app.services.standings import (
    recalculate_division_standings,
    recalculate_standings,
    standings_for_round,
    team_form,
)
from puckhub_app.services.stats import recalculate_goalie_stats, recalculate_player_stats

__all__ = [
    "recalculate_standings",
    "recalculate_division_standings",
    "standings_for_round",
    "team_form",
    "recalculate_player_stats",
    "recalculate_goalie_stats",
]
