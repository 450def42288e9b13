"""Workout statistics for the dashboard, analysis view and calendar."""
import calendar
import logging
from datetime import datetime, timezone
from typing import Dict, List, Optional, Sequence

from gymtracker.models import (
    TRAINING_ORDER,
    CalendarDay,
    CalendarMonth,
    ChartData,
    ChartMetric,
    ChartPoint,
    ChartSeries,
    MuscleGroup,
    Workout,
    WorkoutStats,
)
from gymtracker.services.rotation import latest_workout


logger = logging.getLogger(__name__)

# Axis headroom so the top data point is not flush with the chart edge
CHART_HEADROOM = 1.2


def workout_volume(workout: Workout) -> float:
    """Sum of weight x reps over every set of the workout."""
    return sum(s.weight * s.reps for ex in workout.exercises for s in ex.sets)


def workout_max_weight(workout: Workout) -> float:
    """Heaviest set weight in the workout (0 when it has no sets)."""
    return max((s.weight for ex in workout.exercises for s in ex.sets), default=0)


def aggregate(
    history: Sequence[Workout],
    now: Optional[datetime] = None,
) -> Optional[WorkoutStats]:
    """
    Compute total volume, heaviest weight and last-session volume.

    Values are not rounded and not validated; negative input propagates.

    Args:
        history: Saved workouts, in any order
        now: Reference date for the monthly count (defaults to now, UTC)

    Returns:
        WorkoutStats, or None when there is no history
    """
    if not history:
        return None

    now = now or datetime.now(timezone.utc)

    total_volume = 0.0
    max_weight = 0.0
    for workout in history:
        for exercise in workout.exercises:
            for s in exercise.sets:
                total_volume += s.weight * s.reps
                if s.weight > max_weight:
                    max_weight = s.weight

    latest = latest_workout(history)
    last_volume = workout_volume(latest) if latest else 0.0

    this_month = sum(
        1 for w in history
        if w.date.year == now.year and w.date.month == now.month
    )

    return WorkoutStats(
        total_volume=total_volume,
        max_weight=max_weight,
        last_volume=last_volume,
        total_workouts=len(history),
        workouts_this_month=this_month,
    )


def build_chart(
    history: Sequence[Workout],
    metric: ChartMetric = ChartMetric.MAX_WEIGHT,
) -> ChartData:
    """
    Build one ascending time series per muscle group.

    `axis_max` is the largest value of the selected metric across all series,
    scaled by CHART_HEADROOM.
    """
    buckets: Dict[MuscleGroup, List[Workout]] = {group: [] for group in TRAINING_ORDER}
    for workout in history:
        buckets[workout.muscle_group].append(workout)

    series = []
    peak = 0.0
    for group in TRAINING_ORDER:
        points = [
            ChartPoint(
                date=w.date,
                max_weight=workout_max_weight(w),
                volume=workout_volume(w),
            )
            for w in sorted(buckets[group], key=lambda w: w.date)
        ]
        for point in points:
            value = point.volume if metric == ChartMetric.VOLUME else point.max_weight
            peak = max(peak, value)
        series.append(ChartSeries(muscle_group=group, label=group.label, points=points))

    return ChartData(metric=metric, series=series, axis_max=peak * CHART_HEADROOM)


def build_calendar(history: Sequence[Workout], year: int, month: int) -> CalendarMonth:
    """Mark the days of a month that have a workout logged."""
    weekday, days_in_month = calendar.monthrange(year, month)

    by_day: Dict[int, Workout] = {}
    for workout in history:
        if workout.date.year == year and workout.date.month == month:
            by_day.setdefault(workout.date.day, workout)

    days = []
    for day in range(1, days_in_month + 1):
        workout = by_day.get(day)
        days.append(CalendarDay(
            day=day,
            muscle_group=workout.muscle_group if workout else None,
            workout_id=workout.id if workout else None,
        ))

    return CalendarMonth(
        year=year,
        month=month,
        days_in_month=days_in_month,
        # calendar.monthrange counts from Monday; the grid starts on Sunday
        first_weekday=(weekday + 1) % 7,
        days=days,
    )
