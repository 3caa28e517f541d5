# file: puckhub_app/models/core.py
"""Season structure, teams and players.

Contains foundational entities:
- :class:`Season` with its date range.
- :class:`Division` grouping teams inside a season.
- :class:`Round` carrying the scoring rule triple and the two statistics
  eligibility flags consumed by the recalculation services.
- :class:`Team` (globally unique name).
- :class:`Player` with a current roster team.

Internal documentation is English; user-facing labels are German.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


# --- Season ----------------------------------------------------------------


class Season(models.Model):
    """A playing season; player and goalie statistics are aggregated per season."""

    name = models.CharField("Name", max_length=255)
    season_start = models.DateField("Saisonbeginn")
    season_end = models.DateField("Saisonende")

    class Meta:
        ordering = ("-season_start",)
        verbose_name = "Saison"
        verbose_name_plural = "Saisons"

    def clean(self) -> None:
        """Validate model state before saving.

        Raises:
            ValidationError: If ``season_end`` is before ``season_start``.
        """
        if self.season_end and self.season_start and self.season_end < self.season_start:
            raise ValidationError("Das Saisonende muss nach dem Saisonbeginn liegen.")

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


# --- Division --------------------------------------------------------------


class Division(models.Model):
    """A division of a season (e.g. "Herren", "U18")."""

    season = models.ForeignKey(
        Season, on_delete=models.CASCADE, related_name="divisions", verbose_name="Saison"
    )
    name = models.CharField("Name", max_length=255)
    sort_order = models.IntegerField("Reihenfolge", default=0)
    goalie_min_games = models.PositiveIntegerField(
        "Mindestspiele Torhüter",
        default=7,
        help_text="Mindestanzahl Spiele, ab der ein Torhüter in der GAA-Rangliste erscheint.",
    )

    class Meta:
        ordering = ("season", "sort_order", "name")
        verbose_name = "Liga"
        verbose_name_plural = "Ligen"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.name} ({self.season})"


# --- Round -----------------------------------------------------------------


class RoundType(models.TextChoices):
    """Kinds of rounds inside a division (labels in German)."""

    REGULAR = "regular", "Hauptrunde"
    PREROUND = "preround", "Vorrunde"
    PLAYOFFS = "playoffs", "Playoffs"
    PLAYDOWNS = "playdowns", "Playdowns"
    PLAYUPS = "playups", "Playups"
    RELEGATION = "relegation", "Relegation"
    PLACEMENT = "placement", "Platzierungsrunde"
    FINAL = "final", "Finale"


class Round(models.Model):
    """A round of a division with its own scoring rule.

    Standings are kept per round. ``points_win``/``points_draw``/``points_loss``
    form the rule triple applied to the round's completed games; the two
    ``counts_for_*`` flags decide whether the round's games feed the season
    statistics.
    """

    division = models.ForeignKey(
        Division, on_delete=models.CASCADE, related_name="rounds", verbose_name="Liga"
    )
    name = models.CharField("Name", max_length=255)
    round_type = models.CharField(
        "Rundentyp", max_length=20, choices=RoundType.choices, default=RoundType.REGULAR
    )
    sort_order = models.IntegerField("Reihenfolge", default=0)
    points_win = models.IntegerField("Punkte Sieg", default=2)
    points_draw = models.IntegerField("Punkte Unentschieden", default=1)
    points_loss = models.IntegerField("Punkte Niederlage", default=0)
    counts_for_player_stats = models.BooleanField("Zählt für Spielerstatistik", default=True)
    counts_for_goalie_stats = models.BooleanField("Zählt für Torhüterstatistik", default=True)

    class Meta:
        ordering = ("division", "sort_order", "name")
        verbose_name = "Runde"
        verbose_name_plural = "Runden"

    @property
    def season_id(self) -> int:
        """Season of the round (through its division)."""
        return self.division.season_id

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.division.name} – {self.name}"


# --- Team ------------------------------------------------------------------


class Team(models.Model):
    """A club team. ``name`` is globally unique."""

    name = models.CharField("Name", max_length=255, unique=True)
    short_name = models.CharField("Kurzname", max_length=20, blank=True)
    city = models.CharField("Stadt", max_length=255, blank=True)

    class Meta:
        ordering = ("name",)
        verbose_name = "Mannschaft"
        verbose_name_plural = "Mannschaften"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


# --- Player ----------------------------------------------------------------


class Player(models.Model):
    """Player with an optional current roster team.

    ``team`` is only the *current* team. Statistics are always attributed to
    the team recorded on the game facts, so transfers never rewrite history.
    """

    class Position(models.TextChoices):
        """Supported positions (labels in German)."""

        FORWARD = "forward", "Stürmer"
        DEFENSE = "defense", "Verteidiger"
        GOALIE = "goalie", "Torhüter"

    first_name = models.CharField("Vorname", max_length=255)
    last_name = models.CharField("Nachname", max_length=255)
    position = models.CharField("Position", max_length=20, choices=Position.choices)
    jersey_number = models.PositiveIntegerField("Trikotnummer", blank=True, null=True)
    team = models.ForeignKey(
        Team,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="players",
        verbose_name="Aktuelle Mannschaft",
    )

    class Meta:
        ordering = ("last_name", "first_name")
        verbose_name = "Spieler"
        verbose_name_plural = "Spieler"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.first_name} {self.last_name}"
