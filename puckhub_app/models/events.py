# file: puckhub_app/models/events.py
"""Game event models attached to a :class:`Game`.

Goals and penalties are separate concrete tables that share an abstract base,
so a goal can never carry penalty fields (and vice versa):

- **Abstract base**
  - :class:`GameEventBase` – shared fields (``game``, ``team``, ``period``,
    ``time_minutes``, ``time_seconds``) and validation that the team plays in
    the game.

- **Concrete events**
  - :class:`Goal` – scorer, up to two assists and the goalie scored on.
  - :class:`Penalty` – penalized player, penalty type, minutes, description.

- **Catalogue**
  - :class:`PenaltyType` – configurable penalty kinds with default minutes.

The ``team`` recorded on an event is the team credited in the season
statistics, independent of the player's current roster team.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models


# --- Catalogue -------------------------------------------------------------


class PenaltyType(models.Model):
    """A penalty kind (e.g. ``MINOR`` – 2 minutes)."""

    code = models.CharField("Code", max_length=20, unique=True)
    name = models.CharField("Name", max_length=255)
    short_name = models.CharField("Kurzname", max_length=20)
    default_minutes = models.PositiveSmallIntegerField("Standardminuten")

    class Meta:
        ordering = ("code",)
        verbose_name = "Strafart"
        verbose_name_plural = "Strafarten"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.short_name} ({self.default_minutes} min)"


# --- Base ------------------------------------------------------------------


class GameEventBase(models.Model):
    """Abstract base for timestamped, team-bound game events."""

    game = models.ForeignKey("puckhub_app.Game", on_delete=models.CASCADE, verbose_name="Spiel")
    team = models.ForeignKey("puckhub_app.Team", on_delete=models.PROTECT, verbose_name="Mannschaft")
    period = models.PositiveSmallIntegerField("Drittel")
    time_minutes = models.PositiveSmallIntegerField("Minute")
    time_seconds = models.PositiveSmallIntegerField("Sekunde", default=0)

    class Meta:
        abstract = True
        ordering = ("period", "time_minutes", "time_seconds")

    def clean(self) -> None:
        """The event team must be one of the two sides of the game."""
        if (
            self.game_id
            and self.team_id
            and self.team_id not in (self.game.home_team_id, self.game.away_team_id)
        ):
            raise ValidationError("Die Mannschaft nimmt an diesem Spiel nicht teil.")
        if self.time_seconds is not None and self.time_seconds > 59:
            raise ValidationError({"time_seconds": "Sekunden müssen zwischen 0 und 59 liegen."})


# --- Concrete events -------------------------------------------------------


class Goal(GameEventBase):
    """Scored goal with optional assists and the goalie scored on."""

    scorer = models.ForeignKey(
        "puckhub_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="goals_scored",
        verbose_name="Torschütze",
    )
    assist_1 = models.ForeignKey(
        "puckhub_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assists_primary",
        verbose_name="Assist 1",
    )
    assist_2 = models.ForeignKey(
        "puckhub_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="assists_secondary",
        verbose_name="Assist 2",
    )
    goalie = models.ForeignKey(
        "puckhub_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="goals_conceded",
        verbose_name="Torhüter (Gegentor)",
    )

    class Meta(GameEventBase.Meta):
        verbose_name = "Tor"
        verbose_name_plural = "Tore"

    def clean(self) -> None:
        """Domain validation for goals."""
        super().clean()

        if self.assist_1_id and self.assist_1_id == self.scorer_id:
            raise ValidationError("Assist 1 darf nicht der Torschütze sein.")

        if self.assist_2_id and self.assist_2_id in (self.scorer_id, self.assist_1_id):
            raise ValidationError("Assist 2 darf weder Torschütze noch Assist 1 sein.")


class Penalty(GameEventBase):
    """Penalty assigned to a player within a specific game/team context."""

    penalized_player = models.ForeignKey(
        "puckhub_app.Player",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="penalties",
        verbose_name="Bestrafter Spieler",
    )
    penalty_type = models.ForeignKey(
        PenaltyType, on_delete=models.SET_NULL, null=True, blank=True, verbose_name="Strafart"
    )
    minutes = models.PositiveSmallIntegerField(
        "Strafminuten", null=True, blank=True, help_text="Leer lassen für die Standardminuten der Strafart."
    )
    description = models.CharField("Beschreibung", max_length=255, blank=True)

    class Meta(GameEventBase.Meta):
        verbose_name = "Strafe"
        verbose_name_plural = "Strafen"

    def save(self, *args, **kwargs) -> None:
        """Default ``minutes`` from the penalty type when left empty; an explicit 0 is kept."""
        if self.minutes is None:
            self.minutes = self.penalty_type.default_minutes if self.penalty_type_id else 0
        super().save(*args, **kwargs)
