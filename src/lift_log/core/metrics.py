"""
Pure metric computation functions.

One-rep-max estimation (Epley) and the least-squares trend line shared by
the bodyweight and 1RM charts.
"""

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .config import ONE_RM_REPS_DIVISOR
from .models import Exercise, Workout


@dataclass(frozen=True)
class OneRepMaxPoint:
    """Best estimated 1RM of one exercise in one workout."""

    date: str
    one_rm: float


def calculate_1rm(weight: float, reps: float) -> float:
    """
    Estimate 1RM using the Epley formula.

    1RM = weight                       if reps == 1
    1RM = weight * (1 + reps/30)       otherwise

    Args:
        weight: Load lifted
        reps: Reps performed

    Returns:
        Estimated 1RM in the same unit as weight
    """
    if reps == 1:
        return weight
    return weight * (1 + reps / ONE_RM_REPS_DIVISOR)


def exercise_best_1rm(exercise: Exercise) -> float:
    """Highest finite estimated 1RM over the exercise's sets; 0.0 without positive sets."""
    best = 0.0
    for s in exercise.sets:
        one_rm = calculate_1rm(s.weight, s.reps)
        if math.isfinite(one_rm) and one_rm > best:
            best = one_rm
    return best


def find_exercise(workout: Workout, exercise_name: str) -> Exercise | None:
    """First exercise in the workout whose name matches, ignoring case."""
    wanted = exercise_name.lower()
    return next((ex for ex in workout.exercises if ex.name.lower() == wanted), None)


def one_rm_history(workouts: Iterable[Workout], exercise_name: str) -> list[OneRepMaxPoint]:
    """
    Estimated 1RM history of an exercise across workouts.

    One point per workout containing the exercise (case-insensitive name
    match) whose best set estimate is positive.

    Returns:
        Points sorted by date ascending
    """
    history: list[OneRepMaxPoint] = []
    for workout in workouts:
        exercise = find_exercise(workout, exercise_name)
        if exercise is None:
            continue
        best = exercise_best_1rm(exercise)
        if best > 0:
            history.append(OneRepMaxPoint(date=workout.date, one_rm=best))
    history.sort(key=lambda p: p.date)
    return history


def one_rm_chart_points(
    workouts: Iterable[Workout],
    exercise: Exercise,
    buffer_date: str,
) -> list[OneRepMaxPoint]:
    """
    Points for the 1RM chart of an exercise being edited.

    Uses the saved history; when there is none yet and the unsaved sets give
    a positive estimate, a single provisional point dated buffer_date is
    returned instead.
    """
    if not exercise.name:
        return []
    history = one_rm_history(workouts, exercise.name)
    if not history:
        current = exercise_best_1rm(exercise)
        if current > 0:
            history.append(OneRepMaxPoint(date=buffer_date, one_rm=current))
    return history


def calculate_trend_line(values: Sequence[float]) -> list[float] | None:
    """
    Least-squares linear fit over (index, value) pairs.

    x is the position in the sequence, so points are treated as evenly
    spaced regardless of the dates behind them.

        slope     = (nΣxy − ΣxΣy) / (nΣx² − (Σx)²)
        intercept = (Σy − slope·Σx) / n

    Args:
        values: Series to fit

    Returns:
        Fitted value at every index, or None for fewer than two values
    """
    n = len(values)
    if n < 2:
        return None

    sum_x = sum_y = sum_xy = sum_xx = 0.0
    for i, y in enumerate(values):
        sum_x += i
        sum_y += y
        sum_xy += i * y
        sum_xx += i * i

    slope = (n * sum_xy - sum_x * sum_y) / (n * sum_xx - sum_x * sum_x)
    intercept = (sum_y - slope * sum_x) / n
    return [slope * i + intercept for i in range(n)]
