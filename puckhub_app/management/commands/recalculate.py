# file: puckhub_app/management/commands/recalculate.py
"""Recalculate standings and season statistics from the command line.

Selects scopes by id and runs the same full-replace recalculations the signal
handlers run after a commit:

    ``--round ID``     standings of one round
    ``--division ID``  standings of every round of a division
    ``--season ID``    standings of every round of the season plus player and
                       goalie statistics
    ``--all``          every round and every season

The options can be combined and repeated. All user-facing CLI strings are
German.
"""

from __future__ import annotations

import argparse
from typing import Any

from django.core.management.base import BaseCommand, CommandError

from puckhub_app.log import get_logger
from puckhub_app.models import Division, Round, Season
from puckhub_app.services.queries import list_season_round_ids
from puckhub_app.signals import recalculate_round_scope, recalculate_season_scope

log = get_logger(__name__)


class Command(BaseCommand):
    """Management command to rebuild derived tables for selected scopes."""

    help = "Berechnet Tabellen sowie Spieler- und Torhüterstatistiken neu."

    def add_arguments(self, parser: argparse.ArgumentParser) -> None:  # type: ignore[override]
        """Declare command-line arguments."""
        parser.add_argument("--round", type=int, action="append", default=[], dest="rounds", help="ID der Runde.")
        parser.add_argument(
            "--division", type=int, action="append", default=[], dest="divisions", help="ID der Liga/Gruppe."
        )
        parser.add_argument("--season", type=int, action="append", default=[], dest="seasons", help="ID der Saison.")
        parser.add_argument("--all", action="store_true", help="Alle Runden und Saisons neu berechnen.")

    # ---------- helpers ----------
    @staticmethod
    def _require(model: Any, ids: list[int], label: str) -> None:
        """Raise ``CommandError`` naming every id that does not exist."""
        found = set(model.objects.filter(pk__in=ids).values_list("pk", flat=True))
        missing = sorted(set(ids) - found)
        if missing:
            raise CommandError(f"{label} nicht gefunden: {', '.join(map(str, missing))}")

    def _resolve(self, options: dict[str, Any]) -> tuple[list[int], list[int]]:
        """Expand the selected options into ordered round and season ids."""
        if options["all"]:
            round_ids = list(
                Round.objects.order_by("division__season_id", "division__sort_order", "sort_order", "pk")
                .values_list("pk", flat=True)
            )
            season_ids = list(Season.objects.order_by("pk").values_list("pk", flat=True))
            return round_ids, season_ids

        rounds: list[int] = options["rounds"]
        divisions: list[int] = options["divisions"]
        seasons: list[int] = options["seasons"]
        if not (rounds or divisions or seasons):
            raise CommandError("Bitte --round, --division, --season oder --all angeben.")

        self._require(Round, rounds, "Runde(n)")
        self._require(Division, divisions, "Liga/Gruppe(n)")
        self._require(Season, seasons, "Saison(s)")

        round_ids: list[int] = list(dict.fromkeys(rounds))
        for division_id in divisions:
            round_ids.extend(
                Round.objects.filter(division_id=division_id)
                .order_by("sort_order", "pk")
                .values_list("pk", flat=True)
            )
        for season_id in seasons:
            round_ids.extend(list_season_round_ids(season_id))
        return list(dict.fromkeys(round_ids)), list(dict.fromkeys(seasons))

    # ---------- main ----------
    def handle(self, *args: Any, **options: Any) -> None:  # type: ignore[override]
        """Entrypoint; recalculates rounds first, then seasons."""
        round_ids, season_ids = self._resolve(options)

        for round_id in round_ids:
            recalculate_round_scope(round_id)
        for season_id in season_ids:
            recalculate_season_scope(season_id)

        log.info("recalculate_command_finished", rounds=len(round_ids), seasons=len(season_ids))
        self.stdout.write(
            self.style.SUCCESS(
                f"Neu berechnet: {len(round_ids)} Runde(n), {len(season_ids)} Saison(s)."
            )
        )
