# file: puckhub_app/admin.py
"""Django admin configuration for seasons, games, bonus points and derived tables.

Internal documentation (docstrings, comments) is in **English**. All
user-facing labels/descriptions are **German** to match the target market.

Derived tables (standings, season statistics) are read-only here; they are
rebuilt by the recalculation services, either through signals or through the
admin actions below.
"""

from __future__ import annotations

from typing import Any

import nested_admin
from django.contrib import admin, messages

from .models import (
    BonusPoints,
    Division,
    Game,
    GameLineup,
    Goal,
    GoalieGameStat,
    GoalieSeasonStat,
    Penalty,
    PenaltyType,
    Player,
    PlayerSeasonStat,
    Round,
    Season,
    Standing,
    Team,
)
from .services.games import sync_score_from_goals
from .services.queries import list_season_round_ids
from .signals import recalculate_round_scope, recalculate_season_scope


# ------------------------------------------------------------
# Season structure (Season → Division → Round)
# ------------------------------------------------------------
class RoundInline(nested_admin.NestedTabularInline):
    model = Round
    extra = 0
    fields = (
        "name",
        "round_type",
        "sort_order",
        "points_win",
        "points_draw",
        "points_loss",
        "counts_for_player_stats",
        "counts_for_goalie_stats",
    )


class DivisionInline(nested_admin.NestedStackedInline):
    model = Division
    extra = 0
    inlines = [RoundInline]


@admin.register(Season)
class SeasonAdmin(nested_admin.NestedModelAdmin):
    """Season editor with nested divisions and rounds."""

    list_display = ("name", "season_start", "season_end")
    inlines = [DivisionInline]
    actions = ["recalculate_season"]

    @admin.action(description="Saisonstatistiken und Tabellen neu berechnen")
    def recalculate_season(self, request: Any, queryset: Any) -> None:
        """Recalculate standings of every round plus player/goalie statistics.

        Each scope runs under its row lock, like the ``recalculate --season``
        command.
        """
        rounds = 0
        for season in queryset:
            for round_id in list_season_round_ids(season.pk):
                recalculate_round_scope(round_id)
                rounds += 1
            recalculate_season_scope(season.pk)
        self.message_user(
            request, f"Neu berechnet: {queryset.count()} Saison(s), {rounds} Runde(n)."
        )


@admin.register(Round)
class RoundAdmin(admin.ModelAdmin):
    list_display = (
        "name",
        "division",
        "round_type",
        "points_win",
        "points_draw",
        "points_loss",
        "counts_for_player_stats",
        "counts_for_goalie_stats",
    )
    list_filter = ("division__season", "round_type")
    actions = ["recalculate_round_standings"]

    @admin.action(description="Tabelle neu berechnen")
    def recalculate_round_standings(self, request: Any, queryset: Any) -> None:
        for rnd in queryset:
            recalculate_round_scope(rnd.pk)
        self.message_user(request, f"Tabelle neu berechnet für {queryset.count()} Runde(n).")


# ------------------------------------------------------------
# Simple registries
# ------------------------------------------------------------
@admin.register(Team)
class TeamAdmin(admin.ModelAdmin):
    list_display = ("name", "short_name", "city")
    search_fields = ("name", "short_name", "city")


@admin.register(Player)
class PlayerAdmin(admin.ModelAdmin):
    list_display = ("last_name", "first_name", "position", "jersey_number", "team")
    list_filter = ("position", "team")
    search_fields = ("first_name", "last_name")


@admin.register(PenaltyType)
class PenaltyTypeAdmin(admin.ModelAdmin):
    list_display = ("code", "short_name", "name", "default_minutes")


@admin.register(BonusPoints)
class BonusPointsAdmin(admin.ModelAdmin):
    """Bonus points; saving or deleting triggers a standings recalculation."""

    list_display = ("team", "round", "points", "reason", "created_at")
    list_filter = ("round__division__season", "round")


# ------------------------------------------------------------
# Game report inlines
# ------------------------------------------------------------
class GoalInline(nested_admin.NestedTabularInline):
    model = Goal
    extra = 0
    fields = ("team", "period", "time_minutes", "time_seconds", "scorer", "assist_1", "assist_2", "goalie")
    autocomplete_fields = ("scorer", "assist_1", "assist_2", "goalie")


class PenaltyInline(nested_admin.NestedTabularInline):
    model = Penalty
    extra = 0
    fields = ("team", "period", "time_minutes", "time_seconds", "penalized_player", "penalty_type", "minutes", "description")
    autocomplete_fields = ("penalized_player",)


class GameLineupInline(nested_admin.NestedTabularInline):
    model = GameLineup
    extra = 0
    fields = ("team", "player", "position", "jersey_number", "is_starting_goalie")
    autocomplete_fields = ("player",)


class GoalieGameStatInline(nested_admin.NestedTabularInline):
    model = GoalieGameStat
    extra = 0
    fields = ("team", "player", "goals_against")
    autocomplete_fields = ("player",)


@admin.register(Game)
class GameAdmin(nested_admin.NestedModelAdmin):
    """Game report: result header plus nested goals, penalties, lineups and goalie stats."""

    list_display = ("id", "scheduled_at", "round", "home_team", "away_team", "home_score", "away_score", "status")
    list_filter = ("status", "round__division__season", "round")
    search_fields = ("home_team__name", "away_team__name")
    date_hierarchy = "scheduled_at"
    inlines = [GameLineupInline, GoalInline, PenaltyInline, GoalieGameStatInline]
    actions = ["score_from_goals"]

    fieldsets = (
        ("Info", {"fields": ("round", "scheduled_at", "game_number", "status", "finalized_at")}),
        ("Mannschaften", {"fields": (("home_team", "home_score"), ("away_team", "away_score"))}),
    )

    @admin.action(description="Ergebnis aus erfassten Toren übernehmen")
    def score_from_goals(self, request: Any, queryset: Any) -> None:
        """Overwrite the score of each selected game with its goal count."""
        for game in queryset:
            sync_score_from_goals(game)
        self.message_user(request, f"Ergebnis übernommen für {queryset.count()} Spiel(e).", level=messages.SUCCESS)


# ------------------------------------------------------------
# Derived tables (read-only)
# ------------------------------------------------------------
class ReadOnlyAdmin(admin.ModelAdmin):
    """Derived rows are owned by the recalculation services."""

    def has_add_permission(self, request: Any) -> bool:
        return False

    def has_change_permission(self, request: Any, obj: Any | None = None) -> bool:
        return False

    def has_delete_permission(self, request: Any, obj: Any | None = None) -> bool:
        return False


@admin.register(Standing)
class StandingAdmin(ReadOnlyAdmin):
    list_display = (
        "round",
        "rank",
        "previous_rank",
        "team",
        "games_played",
        "wins",
        "draws",
        "losses",
        "goals_for",
        "goals_against",
        "goal_difference",
        "points",
        "bonus_points",
        "total_points",
    )
    list_filter = ("round__division__season", "round")


@admin.register(PlayerSeasonStat)
class PlayerSeasonStatAdmin(ReadOnlyAdmin):
    list_display = ("player", "team", "season", "games_played", "goals", "assists", "total_points", "penalty_minutes")
    list_filter = ("season", "team")
    search_fields = ("player__first_name", "player__last_name")


@admin.register(GoalieSeasonStat)
class GoalieSeasonStatAdmin(ReadOnlyAdmin):
    list_display = ("player", "team", "season", "games_played", "goals_against", "gaa")
    list_filter = ("season", "team")
    search_fields = ("player__first_name", "player__last_name")
