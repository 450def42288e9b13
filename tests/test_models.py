"""Unit tests for data models."""
from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from gymtracker.models import (
    COLUMN_EXERCISE,
    SPREADSHEET_COLUMNS,
    MuscleGroup,
    SpreadsheetRow,
    Workout,
    WorkoutCreate,
    parse_iso,
    to_iso,
)


class TestMuscleGroup:
    """Test cases for MuscleGroup."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("chest", MuscleGroup.CHEST),
            ("Back", MuscleGroup.BACK),
            (" legs ", MuscleGroup.LEGS),
            ("胸", MuscleGroup.CHEST),
            ("腿", MuscleGroup.LEGS),
            (MuscleGroup.BACK, MuscleGroup.BACK),
        ],
    )
    def test_parse(self, value, expected):
        assert MuscleGroup.parse(value) == expected

    @pytest.mark.parametrize("value", [None, "", "arms", 3])
    def test_parse_unknown(self, value):
        assert MuscleGroup.parse(value) is None

    def test_labels(self):
        assert [g.label for g in MuscleGroup] == ["胸", "背", "腿"]


class TestTimestamps:
    def test_to_iso_millisecond_z(self):
        value = datetime(2024, 1, 31, 18, 5, 0, 123000, tzinfo=timezone.utc)
        assert to_iso(value) == "2024-01-31T18:05:00.123Z"

    def test_to_iso_converts_offsets(self):
        value = datetime(2024, 1, 31, 20, 5, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(value) == "2024-01-31T18:05:00.000Z"

    def test_parse_iso_accepts_z(self):
        assert parse_iso("2024-01-31T18:05:00.000Z") == datetime(2024, 1, 31, 18, 5, tzinfo=timezone.utc)

    def test_parse_iso_naive_is_utc(self):
        assert parse_iso("2024-01-31T18:05:00").tzinfo is not None


class TestWorkout:
    """Test cases for Workout."""

    def test_alias_and_field_name(self):
        by_alias = Workout(date=datetime(2024, 3, 1), muscleGroup="back")
        by_name = Workout(date=datetime(2024, 3, 1), muscle_group=MuscleGroup.BACK)

        assert by_alias.muscle_group == by_name.muscle_group == MuscleGroup.BACK
        assert by_alias.id != by_name.id

    @pytest.mark.parametrize(
        "label,expected",
        [("胸", MuscleGroup.CHEST), ("背", MuscleGroup.BACK), ("腿", MuscleGroup.LEGS)],
    )
    def test_label_muscle_group_accepted(self, label, expected):
        workout = Workout.model_validate({"date": "2024-03-01T09:00:00.000Z", "muscleGroup": label})

        assert workout.muscle_group == expected
        assert workout.model_dump(mode="json", by_alias=True)["muscleGroup"] == expected.value

    def test_naive_date_becomes_utc(self):
        workout = Workout(date=datetime(2024, 3, 1, 9), muscle_group=MuscleGroup.CHEST)
        assert workout.date.tzinfo == timezone.utc

    def test_dump_by_alias(self):
        workout = Workout(date=datetime(2024, 3, 1), muscle_group=MuscleGroup.LEGS)
        data = workout.model_dump(mode="json", by_alias=True)

        assert data["muscleGroup"] == "legs"
        assert "muscle_group" not in data

    def test_unknown_muscle_group_rejected(self):
        with pytest.raises(ValidationError):
            Workout(date=datetime(2024, 3, 1), muscle_group="arms")


class TestWorkoutCreate:
    """Test cases for the new-workout payload."""

    def test_to_workout(self):
        now = datetime(2024, 3, 1, 9, 30, 0, 123456, tzinfo=timezone.utc)
        payload = WorkoutCreate(
            muscleGroup="chest",
            exercises=[{"name": "Bench Press", "sets": [{"reps": 8, "weight": 60}, {}]}],
        )
        workout = payload.to_workout(now=now)

        assert workout.muscle_group == MuscleGroup.CHEST
        assert workout.date.microsecond == 123000
        assert [(s.reps, s.weight) for s in workout.exercises[0].sets] == [(8, 60), (10, 0)]
        assert workout.exercises[0].sets[0].id != workout.exercises[0].sets[1].id

    def test_requires_an_exercise(self):
        with pytest.raises(ValidationError):
            WorkoutCreate(muscle_group=MuscleGroup.CHEST, exercises=[])

    def test_blank_exercise_name_rejected(self):
        with pytest.raises(ValidationError):
            WorkoutCreate(muscle_group=MuscleGroup.CHEST, exercises=[{"name": "  "}])

    @pytest.mark.parametrize("field", ["reps", "weight"])
    def test_negative_values_rejected(self, field):
        with pytest.raises(ValidationError):
            WorkoutCreate(
                muscle_group=MuscleGroup.CHEST,
                exercises=[{"name": "Bench", "sets": [{field: -1}]}],
            )


class TestSpreadsheetRow:
    def test_header_aliases(self):
        row = SpreadsheetRow(
            date="4/3/2024",
            muscle_group="胸",
            exercise_name="Bench Press",
            set_index=1,
            weight=50,
            reps=10,
            workout_id="w-1",
            iso_date="2024-03-04T18:30:00.000Z",
        )
        record = row.to_record()

        assert list(record) == SPREADSHEET_COLUMNS
        assert record[COLUMN_EXERCISE] == "Bench Press"

    def test_set_index_starts_at_one(self):
        with pytest.raises(ValidationError):
            SpreadsheetRow(
                date="4/3/2024",
                muscle_group="胸",
                exercise_name="Bench Press",
                set_index=0,
                weight=50,
                reps=10,
                workout_id="w-1",
                iso_date="2024-03-04T18:30:00.000Z",
            )
