"""API routes for workout logging, statistics and spreadsheet interchange."""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from fastapi import (
    APIRouter,
    Depends,
    File,
    HTTPException,
    Query,
    UploadFile,
)
from fastapi.responses import Response
from pydantic import BaseModel

from gymtracker.config import settings
from gymtracker.models import (
    TRAINING_ORDER,
    CalendarMonth,
    ChartData,
    ChartMetric,
    Exercise,
    MuscleGroup,
    Workout,
    WorkoutCreate,
    WorkoutStats,
)
from gymtracker.parsers import FormatError
from gymtracker.services import spreadsheet_service, stats_service
from gymtracker.services.coach_service import CoachService
from gymtracker.services.rotation import build_template, suggest_next
from gymtracker.services.storage import JsonFileWorkoutStore, WorkoutStore


logger = logging.getLogger(__name__)

router = APIRouter()

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


# ---------------------------------------------------------------------------
# Dependencies
# ---------------------------------------------------------------------------


def get_store() -> WorkoutStore:
    """Workout store for the request (overridden in tests)."""
    return JsonFileWorkoutStore(settings.DATA_PATH)


def get_coach() -> CoachService:
    """Coach text generator for the request (overridden in tests)."""
    return CoachService()


# ---------------------------------------------------------------------------
# Small response models
# ---------------------------------------------------------------------------


class NextMuscleGroupResponse(BaseModel):
    muscle_group: MuscleGroup
    label: str
    order: List[MuscleGroup]


class ImportResponse(BaseModel):
    imported: int
    workouts: List[Workout]


class CoachTextResponse(BaseModel):
    text: str


# ---------------------------------------------------------------------------
# Workouts
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    """Simple liveness check."""
    return {"status": "ok"}


@router.get("/workouts", response_model=List[Workout])
def list_workouts(store: WorkoutStore = Depends(get_store)):
    """All saved workouts, most recent first."""
    return store.history()


@router.post("/workouts", response_model=Workout, status_code=201)
def create_workout(payload: WorkoutCreate, store: WorkoutStore = Depends(get_store)):
    """Save a finished workout, timestamped now."""
    workout = store.add(payload.to_workout())
    logger.info(f"Saved {workout.muscle_group.value} workout {workout.id}")
    return workout


@router.delete("/workouts/{workout_id}", status_code=204)
def delete_workout(workout_id: str, store: WorkoutStore = Depends(get_store)):
    """Delete a workout by id."""
    if not store.delete(workout_id):
        raise HTTPException(status_code=404, detail=f"Workout {workout_id} not found")
    logger.info(f"Deleted workout {workout_id}")
    return Response(status_code=204)


@router.get("/workouts/next", response_model=NextMuscleGroupResponse)
def next_muscle_group(store: WorkoutStore = Depends(get_store)):
    """Muscle group to train today, following the chest/back/legs rotation."""
    group = suggest_next(store.load())
    return NextMuscleGroupResponse(muscle_group=group, label=group.label, order=TRAINING_ORDER)


@router.get("/workouts/template", response_model=List[Exercise])
def workout_template(
    muscle_group: MuscleGroup = Query(...),
    store: WorkoutStore = Depends(get_store),
):
    """Exercises from the last session of this muscle group, weights reset."""
    return build_template(store.load(), muscle_group)


# ---------------------------------------------------------------------------
# Statistics
# ---------------------------------------------------------------------------


@router.get("/stats", response_model=Optional[WorkoutStats])
def get_stats(store: WorkoutStore = Depends(get_store)):
    """Totals for the analysis view; null when nothing is logged yet."""
    return stats_service.aggregate(store.load())


@router.get("/stats/chart", response_model=ChartData)
def get_chart(
    metric: ChartMetric = Query(ChartMetric.MAX_WEIGHT),
    store: WorkoutStore = Depends(get_store),
):
    """Per-muscle-group progress series."""
    return stats_service.build_chart(store.load(), metric)


@router.get("/calendar", response_model=CalendarMonth)
def get_calendar(
    year: Optional[int] = Query(None, ge=1, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    store: WorkoutStore = Depends(get_store),
):
    """Workout days for a month (defaults to the current month)."""
    today = datetime.now(timezone.utc)
    return stats_service.build_calendar(store.load(), year or today.year, month or today.month)


# ---------------------------------------------------------------------------
# Spreadsheet export / import
# ---------------------------------------------------------------------------


@router.get("/export/xlsx")
def export_xlsx(store: WorkoutStore = Depends(get_store)):
    """Download every workout as an Excel workbook."""
    history = store.history()
    if not history:
        raise HTTPException(status_code=404, detail="No workouts to export")
    blob = spreadsheet_service.export_xlsx(history)
    filename = spreadsheet_service.export_filename("xlsx")
    return Response(
        content=blob,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/export/csv")
def export_csv(store: WorkoutStore = Depends(get_store)):
    """Download every workout as CSV."""
    history = store.history()
    if not history:
        raise HTTPException(status_code=404, detail="No workouts to export")
    # BOM so spreadsheet apps detect UTF-8 column names
    text = spreadsheet_service.export_csv(history)
    filename = spreadsheet_service.export_filename("csv")
    return Response(
        content=text.encode("utf-8-sig"),
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("/import", response_model=ImportResponse)
async def import_workouts(
    file: UploadFile = File(...),
    store: WorkoutStore = Depends(get_store),
):
    """Merge workouts from an exported (or hand-made) spreadsheet."""
    content = await file.read()
    try:
        workouts = await spreadsheet_service.import_file(
            content,
            file.filename or "upload",
            content_type=file.content_type,
        )
    except FormatError as e:
        logger.warning(f"Import of {file.filename} failed: {e}")
        raise HTTPException(status_code=400, detail=f"Import failed: {e}") from e

    store.extend(workouts)
    return ImportResponse(imported=len(workouts), workouts=workouts)


# ---------------------------------------------------------------------------
# Coach text
# ---------------------------------------------------------------------------


@router.get("/coach/quote", response_model=CoachTextResponse)
def coach_quote(
    store: WorkoutStore = Depends(get_store),
    coach: CoachService = Depends(get_coach),
):
    """Short motivational line for the dashboard."""
    return CoachTextResponse(text=coach.motivational_quote(store.load()))


@router.get("/coach/analysis", response_model=CoachTextResponse)
def coach_analysis(
    store: WorkoutStore = Depends(get_store),
    coach: CoachService = Depends(get_coach),
):
    """Detailed progress commentary for the analysis view."""
    return CoachTextResponse(text=coach.progress_analysis(store.load()))
