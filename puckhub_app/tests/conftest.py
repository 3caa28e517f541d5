# file: puckhub_app/tests/conftest.py
"""Common pytest fixtures for puckhub_app tests.

Provides model accessors (resolved via ``apps.get_model``) and small data
builders shared by the model, service and command tests.

Fixtures:
    - ``Team``, ``Player``, ``Game``: Model classes.
    - ``season``: Season 2025/26 with one division ``division``.
    - ``round_``: Regular round of ``division`` using the 2/1/0 rule.
    - ``teams``: Three teams ``A``, ``B`` and ``C`` keyed by short name.
    - ``make_game``: Factory for completed (or other status) games.
"""

from __future__ import annotations

import datetime as _dt
from typing import Any, Callable

import pytest
from django.apps import apps
from django.utils import timezone

APP: str = "puckhub_app"


@pytest.fixture
def Team() -> Any:
    """Return the Team model class."""
    return apps.get_model(APP, "Team")


@pytest.fixture
def Player() -> Any:
    """Return the Player model class."""
    return apps.get_model(APP, "Player")


@pytest.fixture
def Game() -> Any:
    """Return the Game model class."""
    return apps.get_model(APP, "Game")


@pytest.fixture
def season() -> Any:
    """Create the 2025/26 season."""
    Season = apps.get_model(APP, "Season")
    return Season.objects.create(
        name="2025/26",
        season_start=_dt.date(2025, 9, 1),
        season_end=_dt.date(2026, 4, 30),
    )


@pytest.fixture
def division(season: Any) -> Any:
    """Create one division inside ``season``."""
    Division = apps.get_model(APP, "Division")
    return Division.objects.create(season=season, name="Regionalliga Nord")


@pytest.fixture
def round_(division: Any) -> Any:
    """Create a regular round with the default 2/1/0 points rule."""
    Round = apps.get_model(APP, "Round")
    return Round.objects.create(division=division, name="Hauptrunde", round_type="regular")


@pytest.fixture
def teams(Team: Any) -> dict[str, Any]:
    """Create teams A, B and C."""
    return {
        code: Team.objects.create(name=f"EHC {code}", short_name=code)
        for code in ("A", "B", "C")
    }


@pytest.fixture
def make_game(Game: Any) -> Callable[..., Any]:
    """Return a factory creating a game in a round (completed by default)."""
    counter = {"n": 0}

    def _make(rnd: Any, home: Any, away: Any, hs: int | None, as_: int | None, **extra: Any) -> Any:
        counter["n"] += 1
        extra.setdefault("status", "completed")
        extra.setdefault("finalized_at", timezone.now() + _dt.timedelta(minutes=counter["n"]))
        return Game.objects.create(
            round=rnd,
            home_team=home,
            away_team=away,
            home_score=hs,
            away_score=as_,
            **extra,
        )

    return _make
