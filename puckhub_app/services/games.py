# file: puckhub_app/services/games.py
"""Game result helpers used by game reporting."""

from __future__ import annotations

from django.db.models import Count

from puckhub_app.models import Game, Goal


def sync_score_from_goals(game: Game) -> tuple[int, int]:
    """Recount ``home_score``/``away_score`` from the game's goal events.

    A goal credited to the home team counts for the home side; every other
    goal counts for the away side. The game is saved with ``update_fields``
    so the usual post-save recalculation triggers fire.

    Returns:
        The new ``(home_score, away_score)``.
    """
    per_team = dict(
        Goal.objects.filter(game=game).values_list("team_id").annotate(c=Count("id")).order_by()
    )
    home = per_team.pop(game.home_team_id, 0)
    away = sum(per_team.values())

    game.home_score = home
    game.away_score = away
    game.save(update_fields=["home_score", "away_score"])
    return home, away
