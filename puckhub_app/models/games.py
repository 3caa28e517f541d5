# file: puckhub_app/models/games.py
"""Game domain models: fixtures, lineups and per-game goalie facts.

Contains:
* :class:`GameStatus` – lifecycle of a game.
* :class:`Game` – scheduled match inside a :class:`~puckhub_app.models.Round`.
* :class:`GameLineup` – player dressed for a game (drives games played).
* :class:`GoalieGameStat` – goals against per goalie and game.

These rows are *source facts* for the recalculation services; nothing here is
derived. Internal documentation is English; user-facing labels are German.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from .core import Player


# --- Status enum -----------------------------------------------------------


class GameStatus(models.TextChoices):
    """Lifecycle of a game (labels in German)."""

    SCHEDULED = "scheduled", "Angesetzt"
    IN_PROGRESS = "in_progress", "Läuft"
    COMPLETED = "completed", "Beendet"
    POSTPONED = "postponed", "Verschoben"
    CANCELLED = "cancelled", "Abgesagt"


# --- Game ------------------------------------------------------------------


class Game(models.Model):
    """A game between two teams within a round.

    Notes:
        * Only ``COMPLETED`` games count for standings and statistics.
        * Scores stay ``NULL`` until a result is entered; completing a game
          requires both scores.
    """

    round = models.ForeignKey(
        "puckhub_app.Round", on_delete=models.CASCADE, related_name="games", verbose_name="Runde"
    )
    home_team = models.ForeignKey(
        "puckhub_app.Team",
        on_delete=models.PROTECT,
        related_name="games_home",
        verbose_name="Heim",
    )
    away_team = models.ForeignKey(
        "puckhub_app.Team",
        on_delete=models.PROTECT,
        related_name="games_away",
        verbose_name="Gast",
    )
    scheduled_at = models.DateTimeField("Anpfiff", blank=True, null=True)
    status = models.CharField(
        "Status", max_length=20, choices=GameStatus.choices, default=GameStatus.SCHEDULED
    )
    home_score = models.PositiveIntegerField("Tore Heim", blank=True, null=True)
    away_score = models.PositiveIntegerField("Tore Gast", blank=True, null=True)
    game_number = models.PositiveIntegerField("Spielnummer", blank=True, null=True)
    finalized_at = models.DateTimeField("Abgeschlossen am", blank=True, null=True)

    class Meta:
        ordering = ("scheduled_at", "pk")
        verbose_name = "Spiel"
        verbose_name_plural = "Spiele"
        indexes = [models.Index(fields=["round", "status"], name="game_round_status_idx")]

    def clean(self) -> None:
        """Validate team distinctness and result completeness.

        Raises:
            ValidationError: If both sides are the same team or a completed
            game is missing a score.
        """
        if self.home_team_id and self.home_team_id == self.away_team_id:
            raise ValidationError("Heim- und Gastmannschaft dürfen nicht identisch sein.")
        if self.status == GameStatus.COMPLETED and (self.home_score is None or self.away_score is None):
            raise ValidationError("Für ein beendetes Spiel müssen beide Ergebnisse eingetragen sein.")

    @property
    def is_completed(self) -> bool:
        return self.status == GameStatus.COMPLETED

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.home_team} vs {self.away_team}"


# --- Lineup ----------------------------------------------------------------


class GameLineup(models.Model):
    """A player dressed for a game. ``team`` is the side the player dressed for."""

    game = models.ForeignKey(Game, on_delete=models.CASCADE, related_name="lineups", verbose_name="Spiel")
    player = models.ForeignKey(
        "puckhub_app.Player", on_delete=models.CASCADE, related_name="lineups", verbose_name="Spieler"
    )
    team = models.ForeignKey("puckhub_app.Team", on_delete=models.PROTECT, verbose_name="Mannschaft")
    position = models.CharField("Position", max_length=20, choices=Player.Position.choices)
    jersey_number = models.PositiveIntegerField("Trikotnummer", blank=True, null=True)
    is_starting_goalie = models.BooleanField("Starttorhüter", default=False)

    class Meta:
        verbose_name = "Aufstellung"
        verbose_name_plural = "Aufstellungen"
        constraints = [
            models.UniqueConstraint(fields=("game", "player"), name="uniq_lineup_game_player"),
        ]

    def clean(self) -> None:
        """The lineup team must be one of the two sides of the game."""
        if (
            self.game_id
            and self.team_id
            and self.team_id not in (self.game.home_team_id, self.game.away_team_id)
        ):
            raise ValidationError("Die Mannschaft nimmt an diesem Spiel nicht teil.")

    def save(self, *args, **kwargs) -> None:
        """Fill ``team`` from the player's current team if missing, then persist."""
        if not self.team_id and self.player_id:
            self.team_id = self.player.team_id
        super().save(*args, **kwargs)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.game} – {self.player}"


# --- Goalie game stat ------------------------------------------------------


class GoalieGameStat(models.Model):
    """Goals against for one goalie in one game (one row per goalie used)."""

    game = models.ForeignKey(
        Game, on_delete=models.CASCADE, related_name="goalie_stats", verbose_name="Spiel"
    )
    player = models.ForeignKey(
        "puckhub_app.Player", on_delete=models.CASCADE, related_name="goalie_game_stats", verbose_name="Torhüter"
    )
    team = models.ForeignKey("puckhub_app.Team", on_delete=models.PROTECT, verbose_name="Mannschaft")
    goals_against = models.PositiveIntegerField("Gegentore", default=0)

    class Meta:
        verbose_name = "Torhüterstatistik (Spiel)"
        verbose_name_plural = "Torhüterstatistiken (Spiel)"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.player} – {self.game} ({self.goals_against})"
