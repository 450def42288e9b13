"""Spreadsheet export/import for workout history.

Export flattens every (workout, exercise, set) into one row. Import groups
rows back into workouts using the hidden `_workoutId` column, or the
`_isoDate` + muscle group pair for hand-made files without it.
"""
import csv
import io
import logging
from datetime import date, datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from gymtracker.models import (
    COLUMN_DATE,
    COLUMN_EXERCISE,
    COLUMN_ISO_DATE,
    COLUMN_MUSCLE_GROUP,
    COLUMN_REPS,
    COLUMN_WEIGHT,
    COLUMN_WORKOUT_ID,
    SPREADSHEET_COLUMNS,
    Exercise,
    MuscleGroup,
    SetEntry,
    SpreadsheetRow,
    Workout,
    ensure_utc,
    parse_iso,
    to_iso,
)
from gymtracker.parsers import FileInfo, FormatError, get_parser
from gymtracker.utils import clean_str, to_int, to_number


logger = logging.getLogger(__name__)

SHEET_NAME = "GymWorkouts"
HIDDEN_COLUMNS = (COLUMN_WORKOUT_ID, COLUMN_ISO_DATE)

RowLike = Union[SpreadsheetRow, Mapping[str, Any]]


def format_display_date(value: datetime) -> str:
    """Short zh-HK date, e.g. 5/1/2024 for 5 January 2024."""
    return f"{value.day}/{value.month}/{value.year}"


def _parse_display_date(value: Any) -> Optional[datetime]:
    """Read the visible date column: a date cell, an ISO string or d/m/yyyy."""
    if isinstance(value, datetime):
        return ensure_utc(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=timezone.utc)

    text = clean_str(value)
    if text is None:
        return None
    text = text.strip()
    try:
        return parse_iso(text)
    except ValueError:
        pass
    try:
        return datetime.strptime(text, "%d/%m/%Y").replace(tzinfo=timezone.utc)
    except ValueError:
        return None


def _resolve_date(row: Mapping[str, Any]) -> Optional[tuple]:
    """Return (timestamp, key text) for a row, preferring the hidden ISO column."""
    iso_text = clean_str(row.get(COLUMN_ISO_DATE))
    if iso_text is not None:
        try:
            return parse_iso(iso_text), iso_text
        except ValueError:
            logger.warning(f"Unreadable {COLUMN_ISO_DATE} value {iso_text!r}, using {COLUMN_DATE}")

    parsed = _parse_display_date(row.get(COLUMN_DATE))
    if parsed is None:
        return None
    return parsed, to_iso(parsed)


def flatten(history: Sequence[Workout]) -> List[SpreadsheetRow]:
    """One row per (workout, exercise, set), in source order."""
    rows = []
    for workout in history:
        for exercise in workout.exercises:
            for index, entry in enumerate(exercise.sets, start=1):
                rows.append(SpreadsheetRow(
                    date=format_display_date(workout.date),
                    muscle_group=workout.muscle_group.label,
                    exercise_name=exercise.name,
                    set_index=index,
                    weight=entry.weight,
                    reps=entry.reps,
                    workout_id=workout.id,
                    iso_date=to_iso(workout.date),
                ))
    return rows


def reconcile(rows: Iterable[RowLike]) -> List[Workout]:
    """
    Group flat rows back into workouts.

    Rows sharing a workout key become one workout (fresh id); rows sharing an
    exercise name within that workout become sets of one exercise. Bad numeric
    cells read as 0. Rows without a date, muscle group or exercise name are
    skipped.

    Args:
        rows: SpreadsheetRow objects or header-keyed dicts from a parser

    Returns:
        Workouts in the order their key first appears

    Raises:
        FormatError: If no row is usable
    """
    workouts: Dict[str, Workout] = {}
    skipped = 0

    for position, raw in enumerate(rows, start=1):
        row = raw.to_record() if isinstance(raw, SpreadsheetRow) else raw

        resolved = _resolve_date(row)
        muscle_text = clean_str(row.get(COLUMN_MUSCLE_GROUP))
        muscle_group = MuscleGroup.parse(muscle_text)
        exercise_name = clean_str(row.get(COLUMN_EXERCISE))

        if resolved is None or muscle_group is None or exercise_name is None:
            skipped += 1
            logger.warning(
                f"Skipping row {position}: date={row.get(COLUMN_DATE)!r} "
                f"muscle_group={muscle_text!r} exercise={exercise_name!r}"
            )
            continue

        workout_date, date_key = resolved
        key = clean_str(row.get(COLUMN_WORKOUT_ID)) or f"{date_key}-{muscle_text}"

        workout = workouts.get(key)
        if workout is None:
            workout = Workout(date=workout_date, muscle_group=muscle_group)
            workouts[key] = workout

        exercise = next((ex for ex in workout.exercises if ex.name == exercise_name), None)
        if exercise is None:
            exercise = Exercise(name=exercise_name)
            workout.exercises.append(exercise)

        exercise.sets.append(SetEntry(
            weight=to_number(row.get(COLUMN_WEIGHT)),
            reps=to_int(row.get(COLUMN_REPS)),
        ))

    if not workouts:
        raise FormatError("No usable workout rows found")

    if skipped:
        logger.info(f"Reconciled {len(workouts)} workouts, skipped {skipped} rows")
    return list(workouts.values())


# ---------------------------------------------------------------------------
# File interchange
# ---------------------------------------------------------------------------


def export_filename(extension: str, today: Optional[date] = None) -> str:
    """Download name, e.g. GymTracker_Export_2024-01-31.xlsx"""
    today = today or datetime.now(timezone.utc).date()
    return f"GymTracker_Export_{today.isoformat()}.{extension.lstrip('.')}"


def export_xlsx(history: Sequence[Workout]) -> bytes:
    """Write the flattened history to a single-sheet workbook."""
    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_NAME

    ws.append(SPREADSHEET_COLUMNS)
    for row in flatten(history):
        ws.append(list(row.to_record().values()))

    for column in HIDDEN_COLUMNS:
        letter = get_column_letter(SPREADSHEET_COLUMNS.index(column) + 1)
        ws.column_dimensions[letter].hidden = True

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()


def export_csv(history: Sequence[Workout]) -> str:
    """Write the flattened history as CSV text."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=SPREADSHEET_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for row in flatten(history):
        writer.writerow(row.to_record())
    return buffer.getvalue()


async def import_file(
    content: bytes,
    filename: str,
    content_type: Optional[str] = None,
) -> List[Workout]:
    """
    Read an uploaded spreadsheet and reconcile it into workouts.

    Raises:
        FormatError: Unsupported file type, unreadable file, or no usable rows
    """
    file_info = FileInfo.from_filename(filename, size_bytes=len(content), content_type=content_type)
    parser = get_parser(file_info)
    if parser is None:
        raise FormatError(f"Unsupported file type: {file_info.extension or filename}")

    result = await parser.parse(content, file_info)
    if not result.rows:
        raise FormatError(f"{filename} contains no data rows")

    workouts = reconcile(result.rows)
    logger.info(f"Imported {len(workouts)} workouts from {filename}")
    return workouts
