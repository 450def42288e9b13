"""
Test fixtures for gymtracker.

Provides sample workout histories, an in-memory store and a TestClient with
the store and coach dependencies overridden, so tests run offline.
"""

import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import List
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Make src/ importable so tests can do `import gymtracker...`
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from gymtracker.api.routes import get_coach, get_store
from gymtracker.main import app
from gymtracker.models import MuscleGroup, Workout
from gymtracker.services.storage import InMemoryWorkoutStore

from factories import make_workout


# ---------------------------------------------------------------------------
# Sample Data
# ---------------------------------------------------------------------------


@pytest.fixture
def chest_day() -> Workout:
    return make_workout(
        datetime(2024, 3, 4, 18, 30, tzinfo=timezone.utc),
        MuscleGroup.CHEST,
        {"Bench Press": [(50, 10), (60, 8)], "Cable Fly": [(12.5, 15)]},
    )


@pytest.fixture
def back_day() -> Workout:
    return make_workout(
        datetime(2024, 3, 6, 19, 0, tzinfo=timezone.utc),
        MuscleGroup.BACK,
        {"Deadlift": [(100, 5), (110, 3)], "引體上升": [(0, 8), (0, 6)]},
    )


@pytest.fixture
def legs_day() -> Workout:
    return make_workout(
        datetime(2024, 3, 8, 7, 15, tzinfo=timezone.utc),
        MuscleGroup.LEGS,
        {"Squat": [(80, 8), (90, 6), (95.5, 4)]},
    )


@pytest.fixture
def history(chest_day, back_day, legs_day) -> List[Workout]:
    """Three sessions, most recent first (as the API returns them)."""
    return [legs_day, back_day, chest_day]


@pytest.fixture
def store(history) -> InMemoryWorkoutStore:
    return InMemoryWorkoutStore(history)


@pytest.fixture
def empty_store() -> InMemoryWorkoutStore:
    return InMemoryWorkoutStore()


@pytest.fixture
def mock_coach() -> MagicMock:
    coach = MagicMock()
    coach.motivational_quote.return_value = "做得好！"
    coach.progress_analysis.return_value = "- 深蹲重量穩定上升"
    return coach


# ---------------------------------------------------------------------------
# Test Client
# ---------------------------------------------------------------------------


@pytest.fixture
def client(store, mock_coach):
    """TestClient backed by the sample history."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_coach] = lambda: mock_coach
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def empty_client(empty_store, mock_coach):
    """TestClient with nothing logged yet."""
    app.dependency_overrides[get_store] = lambda: empty_store
    app.dependency_overrides[get_coach] = lambda: mock_coach
    yield TestClient(app)
    app.dependency_overrides.clear()
