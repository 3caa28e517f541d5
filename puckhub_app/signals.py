# file: puckhub_app/signals.py
"""Signal handlers that keep standings and season statistics current.

This module wires Django model signals to the recalculation services:

* :class:`Game` saved or deleted → standings of its round, player and goalie
  statistics of its season. A game moved to another round also refreshes the
  round it left.
* :class:`BonusPoints` saved or deleted → standings of the round.
* :class:`Round` saved (scoring rule or eligibility flags) → standings of the
  round and both season statistics. A round moved into another season also
  refreshes the season it left.
* :class:`Division` moved into another season → statistics of both seasons.
* :class:`Goal`, :class:`Penalty`, :class:`GameLineup`,
  :class:`GoalieGameStat` changed on a completed game → season statistics.

Recalculation is deferred with ``transaction.on_commit`` so it reads the
committed state. Writers of the same scope are serialized by locking the
scope row (``Round`` or ``Season``) for the duration of the recalculation.
Setting ``PUCKHUB_RECALC_ON_SAVE = False`` disables all triggers.
"""

from __future__ import annotations

from typing import Any

from django.conf import settings
from django.db import transaction
from django.db.models.signals import post_delete, post_save, pre_save
from django.dispatch import receiver

from puckhub_app.log import get_logger
from puckhub_app.models import (
    BonusPoints,
    Division,
    Game,
    GameLineup,
    Goal,
    GoalieGameStat,
    Penalty,
    Round,
    Season,
)
from puckhub_app.services.standings import recalculate_standings
from puckhub_app.services.stats import recalculate_goalie_stats, recalculate_player_stats

log = get_logger(__name__)


def _enabled() -> bool:
    return bool(getattr(settings, "PUCKHUB_RECALC_ON_SAVE", True))


# --- Scope-locked recalculation --------------------------------------------


def recalculate_round_scope(round_id: int) -> None:
    """Recalculate one round's standings while holding a lock on the round row."""
    with transaction.atomic():
        if not Round.objects.select_for_update().filter(pk=round_id).exists():
            return
        recalculate_standings(round_id)


def recalculate_season_scope(season_id: int) -> None:
    """Recalculate player and goalie statistics while holding a lock on the season row."""
    with transaction.atomic():
        if not Season.objects.select_for_update().filter(pk=season_id).exists():
            return
        recalculate_player_stats(season_id)
        recalculate_goalie_stats(season_id)


def _season_of_round(round_id: int) -> int | None:
    return Round.objects.filter(pk=round_id).values_list("division__season_id", flat=True).first()


def _schedule(round_ids: set[int], season_ids: set[int], *, cause: str) -> None:
    """Queue recalculation of the given scopes after the current commit."""
    round_ids.discard(None)
    season_ids.discard(None)
    if not round_ids and not season_ids:
        return

    def run() -> None:
        log.info("recalculation_triggered", cause=cause, rounds=sorted(round_ids), seasons=sorted(season_ids))
        for round_id in sorted(round_ids):
            recalculate_round_scope(round_id)
        for season_id in sorted(season_ids):
            recalculate_season_scope(season_id)

    transaction.on_commit(run)


# --- Game ------------------------------------------------------------------


@receiver(pre_save, sender=Game)
def _game_remember_round(sender: type[Game], instance: Game, **kwargs: Any) -> None:
    """Remember the stored round so a move between rounds refreshes both."""
    if instance.pk is None:
        instance._previous_round_id = None
        return
    instance._previous_round_id = (
        Game.objects.filter(pk=instance.pk).values_list("round_id", flat=True).first()
    )


@receiver(post_save, sender=Game)
@receiver(post_delete, sender=Game)
def _game_changed(sender: type[Game], instance: Game, **kwargs: Any) -> None:
    """Refresh standings and statistics touched by a game write."""
    if not _enabled():
        return
    round_ids = {instance.round_id, getattr(instance, "_previous_round_id", None)}
    season_ids = {_season_of_round(rid) for rid in round_ids if rid is not None}
    _schedule(round_ids, season_ids, cause="game")


# --- Bonus points ----------------------------------------------------------


@receiver(post_save, sender=BonusPoints)
@receiver(post_delete, sender=BonusPoints)
def _bonus_points_changed(sender: type[BonusPoints], instance: BonusPoints, **kwargs: Any) -> None:
    """Bonus points only affect the standings of their round."""
    if not _enabled():
        return
    _schedule({instance.round_id}, set(), cause="bonus_points")


# --- Round rules -----------------------------------------------------------


@receiver(pre_save, sender=Round)
def _round_remember_season(sender: type[Round], instance: Round, **kwargs: Any) -> None:
    """Remember the stored season so a round moved between seasons refreshes both."""
    instance._previous_season_id = None if instance.pk is None else _season_of_round(instance.pk)


@receiver(post_save, sender=Round)
def _round_saved(sender: type[Round], instance: Round, created: bool, **kwargs: Any) -> None:
    """A changed scoring rule or eligibility flag invalidates every derived scope."""
    if not _enabled() or created:
        return
    season_ids = {instance.season_id, getattr(instance, "_previous_season_id", None)}
    _schedule({instance.pk}, season_ids, cause="round")


# --- Divisions -------------------------------------------------------------


@receiver(pre_save, sender=Division)
def _division_remember_season(sender: type[Division], instance: Division, **kwargs: Any) -> None:
    if instance.pk is None:
        instance._previous_season_id = None
        return
    instance._previous_season_id = (
        Division.objects.filter(pk=instance.pk).values_list("season_id", flat=True).first()
    )


@receiver(post_save, sender=Division)
def _division_saved(sender: type[Division], instance: Division, created: bool, **kwargs: Any) -> None:
    """A division moved into another season takes its games' statistics along."""
    if not _enabled() or created:
        return
    previous = getattr(instance, "_previous_season_id", None)
    if previous is None or previous == instance.season_id:
        return
    _schedule(set(), {previous, instance.season_id}, cause="division")


# --- Game report facts -----------------------------------------------------


@receiver(post_save, sender=Goal)
@receiver(post_delete, sender=Goal)
@receiver(post_save, sender=Penalty)
@receiver(post_delete, sender=Penalty)
@receiver(post_save, sender=GameLineup)
@receiver(post_delete, sender=GameLineup)
@receiver(post_save, sender=GoalieGameStat)
@receiver(post_delete, sender=GoalieGameStat)
def _report_fact_changed(sender: type[Any], instance: Any, **kwargs: Any) -> None:
    """Report facts only matter for statistics once the game is completed."""
    if not _enabled():
        return
    game = Game.objects.filter(pk=instance.game_id).select_related("round__division").first()
    if game is None or not game.is_completed:
        return
    _schedule(set(), {game.round.season_id}, cause=sender.__name__.lower())
