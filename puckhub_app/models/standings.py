# file: puckhub_app/models/standings.py
"""Round standings and manual bonus-point adjustments.

:class:`BonusPoints` is a source fact entered by league admins.
:class:`Standing` is derived: rows for a round are deleted and reinserted in
full by :func:`puckhub_app.services.standings.recalculate_standings` and must
not be edited by hand.
"""

from __future__ import annotations

from django.db import models


class BonusPoints(models.Model):
    """Manual points adjustment (positive or negative) for a team in a round."""

    team = models.ForeignKey(
        "puckhub_app.Team", on_delete=models.CASCADE, related_name="bonus_points", verbose_name="Mannschaft"
    )
    round = models.ForeignKey(
        "puckhub_app.Round", on_delete=models.CASCADE, related_name="bonus_points", verbose_name="Runde"
    )
    points = models.IntegerField("Punkte")
    reason = models.CharField("Begründung", max_length=255, blank=True)
    created_at = models.DateTimeField("Erstellt am", auto_now_add=True)

    class Meta:
        ordering = ("-created_at",)
        verbose_name = "Bonuspunkte"
        verbose_name_plural = "Bonuspunkte"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.team}: {self.points:+d}"


class Standing(models.Model):
    """One ranked line of a round's table.

    Notes:
        - ``rank`` is dense and 1-based; there are no shared ranks.
        - ``previous_rank`` is the rank the team held before the last
          recalculation (``None`` when the team had no row).
    """

    team = models.ForeignKey(
        "puckhub_app.Team", on_delete=models.CASCADE, related_name="standings", verbose_name="Mannschaft"
    )
    round = models.ForeignKey(
        "puckhub_app.Round", on_delete=models.CASCADE, related_name="standings", verbose_name="Runde"
    )
    games_played = models.PositiveIntegerField("Spiele", default=0)
    wins = models.PositiveIntegerField("Siege", default=0)
    draws = models.PositiveIntegerField("Unentschieden", default=0)
    losses = models.PositiveIntegerField("Niederlagen", default=0)
    goals_for = models.PositiveIntegerField("Tore", default=0)
    goals_against = models.PositiveIntegerField("Gegentore", default=0)
    goal_difference = models.IntegerField("Tordifferenz", default=0)
    points = models.IntegerField("Punkte", default=0)
    bonus_points = models.IntegerField("Bonuspunkte", default=0)
    total_points = models.IntegerField("Gesamtpunkte", default=0)
    rank = models.PositiveIntegerField("Platz", null=True, blank=True)
    previous_rank = models.PositiveIntegerField("Vorheriger Platz", null=True, blank=True)
    updated_at = models.DateTimeField("Aktualisiert am", auto_now=True)

    class Meta:
        ordering = ("round", "rank")
        verbose_name = "Tabellenplatz"
        verbose_name_plural = "Tabelle"
        constraints = [
            models.UniqueConstraint(fields=("round", "team"), name="uniq_standing_round_team"),
        ]

    @property
    def rank_delta(self) -> int | None:
        """Positive when the team climbed since the previous recalculation."""
        if self.rank is None or self.previous_rank is None:
            return None
        return self.previous_rank - self.rank

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.rank}. {self.team} ({self.total_points})"
