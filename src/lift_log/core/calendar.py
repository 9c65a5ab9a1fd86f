"""
Monthly adherence calendar.

Builds a Sunday-first month grid where each day is marked as today, as done
(a workout is dated that day) or as missed (a past day without a workout).
"""

import calendar as _calendar
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date

from .config import DATE_FORMAT
from .models import WeightEntry, Workout


@dataclass(frozen=True)
class DayCell:
    """
    One day of the month grid.

    is_today is an overlay independent of the other two flags; workout_done
    and workout_missed are mutually exclusive.
    """

    date: str
    day: int
    is_today: bool = False
    workout_done: bool = False
    workout_missed: bool = False

    @property
    def css_classes(self) -> list[str]:
        classes = ["calendar-day"]
        if self.is_today:
            classes.append("today")
        if self.workout_done:
            classes.append("workout-done")
        if self.workout_missed:
            classes.append("workout-missed")
        return classes


@dataclass
class MonthGrid:
    """A month laid out for a 7-column Sunday-first grid."""

    year: int
    month: int
    leading_blanks: int
    days: list[DayCell] = field(default_factory=list)

    @property
    def title(self) -> str:
        return f"{_calendar.month_name[self.month]} {self.year}"

    def weeks(self) -> list[list[DayCell | None]]:
        """Rows of 7 cells; None for blanks before day 1 and after the last day."""
        cells: list[DayCell | None] = [None] * self.leading_blanks + list(self.days)
        while len(cells) % 7:
            cells.append(None)
        return [cells[i : i + 7] for i in range(0, len(cells), 7)]


@dataclass
class DayDetails:
    """What happened on one date."""

    date: str
    workout: Workout | None
    weight: WeightEntry | None


def first_weekday_offset(year: int, month: int) -> int:
    """Blank cells before day 1 in a Sunday-first week (0 when the 1st is a Sunday)."""
    # date.weekday(): Monday == 0 ... Sunday == 6
    return (date(year, month, 1).weekday() + 1) % 7


def month_grid(year: int, month: int, workout_dates: Iterable[str], today: date) -> MonthGrid:
    """
    Classify every day of a month.

    Args:
        year: Calendar year
        month: Month 1..12
        workout_dates: ISO dates of all workouts, across all weeks
        today: Real current date

    Returns:
        MonthGrid with one DayCell per day
    """
    done = set(workout_dates)
    today_str = today.strftime(DATE_FORMAT)
    days_in_month = _calendar.monthrange(year, month)[1]

    cells = []
    for day in range(1, days_in_month + 1):
        date_str = f"{year:04d}-{month:02d}-{day:02d}"
        has_workout = date_str in done
        cells.append(
            DayCell(
                date=date_str,
                day=day,
                is_today=date_str == today_str,
                workout_done=has_workout,
                workout_missed=not has_workout and date_str < today_str,
            )
        )

    return MonthGrid(
        year=year,
        month=month,
        leading_blanks=first_weekday_offset(year, month),
        days=cells,
    )


def shift_month(cursor: date, delta: int) -> date:
    """
    Move a month cursor by delta months, rolling over year boundaries.

    The day-of-month is not meaningful for navigation and is reset to 1.
    """
    index = cursor.year * 12 + (cursor.month - 1) + delta
    return date(index // 12, index % 12 + 1, 1)


def day_details(workouts: Iterable[Workout], weights: Iterable[WeightEntry], date_str: str) -> DayDetails:
    """First workout dated date_str (if any) and the weight logged that day (if any)."""
    workout = next((w for w in workouts if w.date == date_str), None)
    weight = next((w for w in weights if w.date == date_str), None)
    return DayDetails(date=date_str, workout=workout, weight=weight)
