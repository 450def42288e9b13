"""Workout persistence.

Stores are passed explicitly to whatever needs them; the statistics,
rotation and spreadsheet functions only ever see plain workout lists.
"""
from __future__ import annotations

import json
import logging
import os
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterable, List

from pydantic import TypeAdapter, ValidationError

from gymtracker.models import Workout


logger = logging.getLogger(__name__)

STORAGE_KEY = "gym_tracker_data_v1"

_workout_list = TypeAdapter(List[Workout])

# One lock per data file, shared by every store instance pointing at it
_path_locks: Dict[str, threading.Lock] = {}
_path_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    key = str(path.resolve())
    with _path_locks_guard:
        return _path_locks.setdefault(key, threading.Lock())


class WorkoutStore(ABC):
    """Key-value style store holding the whole workout list."""

    def __init__(self):
        # Held across load-modify-save so concurrent requests do not drop writes
        self.lock = threading.Lock()

    @abstractmethod
    def load(self) -> List[Workout]:
        """Return all saved workouts; an empty list if nothing usable is stored."""

    @abstractmethod
    def save(self, workouts: Iterable[Workout]) -> None:
        """Replace the stored workout list."""

    def history(self) -> List[Workout]:
        """Saved workouts, most recent first."""
        return sorted(self.load(), key=lambda w: w.date, reverse=True)

    def add(self, workout: Workout) -> Workout:
        with self.lock:
            workouts = self.load()
            workouts.append(workout)
            self.save(workouts)
        return workout

    def extend(self, workouts: Iterable[Workout]) -> int:
        """Append imported workouts to the existing ones."""
        new = list(workouts)
        with self.lock:
            self.save(self.load() + new)
        return len(new)

    def delete(self, workout_id: str) -> bool:
        """Remove a workout by id. Returns False when no workout matched."""
        with self.lock:
            workouts = self.load()
            remaining = [w for w in workouts if w.id != workout_id]
            if len(remaining) == len(workouts):
                return False
            self.save(remaining)
        return True


class InMemoryWorkoutStore(WorkoutStore):
    """Store kept in process memory."""

    def __init__(self, workouts: Iterable[Workout] | None = None):
        super().__init__()
        self._workouts = [w.model_copy(deep=True) for w in workouts or []]

    def load(self) -> List[Workout]:
        return [w.model_copy(deep=True) for w in self._workouts]

    def save(self, workouts: Iterable[Workout]) -> None:
        self._workouts = [w.model_copy(deep=True) for w in workouts]


class JsonFileWorkoutStore(WorkoutStore):
    """Store backed by a JSON array on disk."""

    def __init__(self, path: str | os.PathLike):
        self.path = Path(path)
        self.lock = _lock_for(self.path)

    def load(self) -> List[Workout]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            logger.error(f"Could not read {self.path}: {e}")
            return []
        except UnicodeDecodeError as e:
            logger.warning(f"Ignoring undecodable workout data in {self.path}: {e}")
            return []

        if not raw.strip():
            return []
        try:
            return _workout_list.validate_json(raw)
        except ValidationError as e:
            logger.warning(f"Ignoring corrupt workout data in {self.path}: {e}")
            return []

    def save(self, workouts: Iterable[Workout]) -> None:
        payload = [w.model_dump(mode="json", by_alias=True) for w in workouts]
        self.path.parent.mkdir(parents=True, exist_ok=True)

        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=f".{STORAGE_KEY}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(payload, fh, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise
        logger.debug(f"Saved {len(payload)} workouts to {self.path}")
