"""Data models for workout logging."""
import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


def new_id() -> str:
    """Generate a fresh opaque identifier."""
    return str(uuid.uuid4())


def ensure_utc(value: datetime) -> datetime:
    """Treat naive timestamps as UTC so history can always be compared."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_iso(value: datetime) -> str:
    """Render a timestamp the way the stored blob carries it (`2024-01-31T18:05:00.000Z`)."""
    value = ensure_utc(value).astimezone(timezone.utc)
    base = value.strftime("%Y-%m-%dT%H:%M:%S")
    if value.microsecond % 1000 == 0:
        return f"{base}.{value.microsecond // 1000:03d}Z"
    return f"{base}.{value.microsecond:06d}Z"


def parse_iso(text: str) -> datetime:
    """Parse an ISO-8601 timestamp, accepting a trailing `Z`."""
    text = text.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    return ensure_utc(datetime.fromisoformat(text))


class MuscleGroup(str, Enum):
    """Training focus for a single session."""
    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"

    @property
    def label(self) -> str:
        """Display label used in spreadsheets and coach prompts."""
        return MUSCLE_GROUP_LABELS[self]

    @classmethod
    def parse(cls, value: object) -> Optional["MuscleGroup"]:
        """Resolve an enum value ("legs") or a display label ("腿")."""
        if isinstance(value, MuscleGroup):
            return value
        if value is None:
            return None
        text = str(value).strip()
        for group in cls:
            if text.lower() == group.value or text == group.label:
                return group
        return None


MUSCLE_GROUP_LABELS = {
    MuscleGroup.CHEST: "胸",
    MuscleGroup.BACK: "背",
    MuscleGroup.LEGS: "腿",
}

# Fixed rotation: chest -> back -> legs -> chest ...
TRAINING_ORDER: List[MuscleGroup] = [MuscleGroup.CHEST, MuscleGroup.BACK, MuscleGroup.LEGS]


class SetEntry(BaseModel):
    """One set of an exercise."""
    id: str = Field(default_factory=new_id)
    reps: int = 0
    weight: float = 0.0


class Exercise(BaseModel):
    """Represents a single exercise with its ordered sets."""
    id: str = Field(default_factory=new_id)
    name: str
    sets: List[SetEntry] = Field(default_factory=list)


class Workout(BaseModel):
    """Represents a saved workout session."""
    id: str = Field(default_factory=new_id)
    date: datetime
    muscle_group: MuscleGroup = Field(alias="muscleGroup")
    exercises: List[Exercise] = Field(default_factory=list)

    class Config:
        populate_by_name = True

    @field_validator("muscle_group", mode="before")
    @classmethod
    def _accept_labels(cls, value):
        # Blobs written by the web app store the display label ("胸")
        return MuscleGroup.parse(value) or value

    @field_validator("date")
    @classmethod
    def _date_is_aware(cls, value: datetime) -> datetime:
        return ensure_utc(value)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SetCreate(BaseModel):
    """A set entered in the workout form."""
    reps: int = Field(default=10, ge=0)
    weight: float = Field(default=0, ge=0)


class ExerciseCreate(BaseModel):
    """An exercise entered in the workout form."""
    name: str
    sets: List[SetCreate] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def _name_required(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("exercise name is required")
        return value


class WorkoutCreate(BaseModel):
    """Payload for saving a new workout."""
    muscle_group: MuscleGroup = Field(alias="muscleGroup")
    exercises: List[ExerciseCreate] = Field(..., min_length=1)

    class Config:
        populate_by_name = True

    def to_workout(self, now: Optional[datetime] = None) -> Workout:
        """Build a Workout with fresh ids, timestamped at creation time."""
        now = ensure_utc(now or datetime.now(timezone.utc))
        # Millisecond precision, like the stored timestamps
        now = now.replace(microsecond=now.microsecond - now.microsecond % 1000)
        return Workout(
            date=now,
            muscle_group=self.muscle_group,
            exercises=[
                Exercise(
                    name=ex.name,
                    sets=[SetEntry(reps=s.reps, weight=s.weight) for s in ex.sets],
                )
                for ex in self.exercises
            ],
        )


# ---------------------------------------------------------------------------
# Statistics models
# ---------------------------------------------------------------------------


class WorkoutStats(BaseModel):
    """Aggregate numbers shown on the analysis view."""
    total_volume: float
    max_weight: float
    last_volume: float
    total_workouts: int = 0
    workouts_this_month: int = 0


class ChartMetric(str, Enum):
    """Value plotted on the progress chart."""
    MAX_WEIGHT = "max_weight"
    VOLUME = "volume"


class ChartPoint(BaseModel):
    date: datetime
    max_weight: float
    volume: float


class ChartSeries(BaseModel):
    muscle_group: MuscleGroup
    label: str
    points: List[ChartPoint] = Field(default_factory=list)


class ChartData(BaseModel):
    """Per-muscle-group series plus a suggested value-axis bound."""
    metric: ChartMetric
    series: List[ChartSeries] = Field(default_factory=list)
    axis_max: float = 0


class CalendarDay(BaseModel):
    day: int
    muscle_group: Optional[MuscleGroup] = None
    workout_id: Optional[str] = None


class CalendarMonth(BaseModel):
    year: int
    month: int
    days_in_month: int
    first_weekday: int = Field(..., ge=0, le=6, description="0 = Sunday")
    days: List[CalendarDay] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Spreadsheet interchange
# ---------------------------------------------------------------------------

COLUMN_DATE = "日期"
COLUMN_MUSCLE_GROUP = "訓練部位"
COLUMN_EXERCISE = "動作名稱"
COLUMN_SET_INDEX = "組數"
COLUMN_WEIGHT = "重量 (kg)"
COLUMN_REPS = "次數"
COLUMN_WORKOUT_ID = "_workoutId"
COLUMN_ISO_DATE = "_isoDate"

SPREADSHEET_COLUMNS = [
    COLUMN_DATE,
    COLUMN_MUSCLE_GROUP,
    COLUMN_EXERCISE,
    COLUMN_SET_INDEX,
    COLUMN_WEIGHT,
    COLUMN_REPS,
    COLUMN_WORKOUT_ID,
    COLUMN_ISO_DATE,
]


class SpreadsheetRow(BaseModel):
    """One flattened (workout, exercise, set) row of an export."""
    date: str = Field(alias=COLUMN_DATE)
    muscle_group: str = Field(alias=COLUMN_MUSCLE_GROUP)
    exercise_name: str = Field(alias=COLUMN_EXERCISE)
    set_index: int = Field(alias=COLUMN_SET_INDEX, ge=1)
    weight: float = Field(alias=COLUMN_WEIGHT)
    reps: int = Field(alias=COLUMN_REPS)
    # Hidden columns used to match rows back to their workout on re-import
    workout_id: str = Field(alias=COLUMN_WORKOUT_ID)
    iso_date: str = Field(alias=COLUMN_ISO_DATE)

    class Config:
        populate_by_name = True

    def to_record(self) -> dict:
        """Header-keyed dict in column order."""
        return self.model_dump(by_alias=True)
