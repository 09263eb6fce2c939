"""Pytest configuration and fixtures."""

from datetime import datetime

import pytest

from workout_scoring.config import reset_settings
from workout_scoring.llm.providers import reset_llm_client
from workout_scoring.models.exercise import LoggedExercise, SetRecord


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate every test from the developer's environment and cached singletons."""
    for name in ("OPENAI_API_KEY", "LLM_MODEL", "SEASON_PHASE", "TEAM_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    reset_llm_client()
    yield
    reset_settings()
    reset_llm_client()


@pytest.fixture
def make_exercise():
    """Factory for logged exercises with uniform sets."""

    def _make(
        name,
        category,
        sets=0,
        reps=None,
        load_kg=None,
        distance_km=None,
        duration_sec=None,
        rpe=None,
        planned_sets=None,
        notes=None,
    ):
        records = [
            SetRecord(reps=reps, load_kg=load_kg, distance_km=distance_km, duration_sec=duration_sec)
            for _ in range(sets)
        ]
        return LoggedExercise(
            name=name,
            category=category,
            set_records=records,
            planned_sets=sets if planned_sets is None else planned_sets,
            rpe=rpe,
            notes=notes,
        )

    return _make


@pytest.fixture
def strength_session(make_exercise):
    """Two lifts, 4 x 10 @ 80 kg each, no RPE logged (6400 kg total)."""
    return [
        make_exercise("Back Squat", "Strength", sets=4, reps=10, load_kg=80),
        make_exercise("Bench Press", "Strength", sets=4, reps=10, load_kg=80),
    ]


@pytest.fixture
def now():
    return datetime(2026, 3, 16, 18, 0)
