"""Muscle group rotation and workout templates.

The training plan cycles through a fixed order (chest -> back -> legs). The
next session continues from whatever the most recent workout trained.
"""
import logging
from typing import List, Optional, Sequence

from gymtracker.models import (
    TRAINING_ORDER,
    Exercise,
    MuscleGroup,
    SetEntry,
    Workout,
)


logger = logging.getLogger(__name__)

# Defaults for a blank exercise in a new workout form
DEFAULT_REPS = 10
DEFAULT_WEIGHT = 0.0


def latest_workout(history: Sequence[Workout]) -> Optional[Workout]:
    """Return the most recent workout by date; ties keep the earlier list entry."""
    latest: Optional[Workout] = None
    for workout in history:
        if latest is None or workout.date > latest.date:
            latest = workout
    return latest


def suggest_next(history: Sequence[Workout]) -> MuscleGroup:
    """Suggest the muscle group to train next."""
    latest = latest_workout(history)
    if latest is None:
        return TRAINING_ORDER[0]

    index = TRAINING_ORDER.index(latest.muscle_group)
    return TRAINING_ORDER[(index + 1) % len(TRAINING_ORDER)]


def build_template(history: Sequence[Workout], muscle_group: MuscleGroup) -> List[Exercise]:
    """
    Pre-fill a new workout from the last session of the same muscle group.

    Exercise names, set counts and reps carry over; weights reset to 0 so the
    user enters what they actually lift today.

    Args:
        history: Saved workouts, in any order
        muscle_group: Muscle group of the workout being started

    Returns:
        Fresh exercises (new ids). With no previous session of that group,
        a single blank exercise with one default set.
    """
    previous = latest_workout([w for w in history if w.muscle_group == muscle_group])
    if previous is None:
        return [Exercise(name="", sets=[SetEntry(reps=DEFAULT_REPS, weight=DEFAULT_WEIGHT)])]

    logger.debug(f"Building {muscle_group.value} template from workout {previous.id}")
    return [
        Exercise(
            name=exercise.name,
            sets=[SetEntry(reps=s.reps, weight=DEFAULT_WEIGHT) for s in exercise.sets],
        )
        for exercise in previous.exercises
    ]
