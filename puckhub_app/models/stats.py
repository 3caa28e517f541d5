# file: puckhub_app/models/stats.py
"""Per-season statistics for skaters and goalies.

Both tables are derived and keyed by ``(season, player, team)``: a player who
changed teams during a season has one row per team. Rows are replaced in full
by :mod:`puckhub_app.services.stats`.

Internal documentation is English; user-facing labels are German.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models


class PlayerSeasonStat(models.Model):
    """Season totals of a player for one team."""

    player = models.ForeignKey(
        "puckhub_app.Player", on_delete=models.CASCADE, related_name="season_stats", verbose_name="Spieler"
    )
    team = models.ForeignKey(
        "puckhub_app.Team", on_delete=models.CASCADE, related_name="player_season_stats", verbose_name="Mannschaft"
    )
    season = models.ForeignKey(
        "puckhub_app.Season", on_delete=models.CASCADE, related_name="player_stats", verbose_name="Saison"
    )

    games_played = models.PositiveIntegerField("Spiele", default=0)
    goals = models.PositiveIntegerField("Tore", default=0)
    assists = models.PositiveIntegerField("Assists", default=0)
    total_points = models.PositiveIntegerField("Punkte", default=0)
    penalty_minutes = models.PositiveIntegerField("Strafminuten", default=0)
    updated_at = models.DateTimeField("Aktualisiert am", auto_now=True)

    class Meta:
        ordering = ("season", "-total_points", "-goals")
        verbose_name = "Spielerstatistik"
        verbose_name_plural = "Spielerstatistiken"
        constraints = [
            models.UniqueConstraint(
                fields=["season", "player", "team"], name="uniq_player_season_stat"
            )
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.player} ({self.team}) – {self.total_points} P"


class GoalieSeasonStat(models.Model):
    """Season totals of a goalie for one team.

    ``gaa`` is stored with two decimal places, so ``str(stat.gaa)`` is the
    fixed display string (e.g. ``"2.33"``).
    """

    player = models.ForeignKey(
        "puckhub_app.Player", on_delete=models.CASCADE, related_name="goalie_season_stats", verbose_name="Torhüter"
    )
    team = models.ForeignKey(
        "puckhub_app.Team", on_delete=models.CASCADE, related_name="goalie_season_stats", verbose_name="Mannschaft"
    )
    season = models.ForeignKey(
        "puckhub_app.Season", on_delete=models.CASCADE, related_name="goalie_stats", verbose_name="Saison"
    )

    games_played = models.PositiveIntegerField("Spiele", default=0)
    goals_against = models.PositiveIntegerField("Gegentore", default=0)
    gaa = models.DecimalField("GAA", max_digits=5, decimal_places=2, default=Decimal("0.00"))
    updated_at = models.DateTimeField("Aktualisiert am", auto_now=True)

    class Meta:
        ordering = ("season", "gaa")
        verbose_name = "Torhüterstatistik"
        verbose_name_plural = "Torhüterstatistiken"
        constraints = [
            models.UniqueConstraint(
                fields=["season", "player", "team"], name="uniq_goalie_season_stat"
            )
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.player} ({self.team}) – GAA {self.gaa}"
