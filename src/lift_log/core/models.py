"""
Data models for lift-log.

All core dataclasses representing weeks, workouts, templates and bodyweight
entries. Every model can produce a deep value copy via clone(); the workout
editor relies on this so that edits never touch persisted objects until save.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime

from .config import DATE_FORMAT

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def validate_iso_date(date_str: str) -> None:
    """Raise ValueError unless date_str is a real calendar date in YYYY-MM-DD form."""
    if not isinstance(date_str, str) or not _DATE_RE.match(date_str):
        raise ValueError(f"Invalid date format: {date_str!r}. Expected YYYY-MM-DD")
    try:
        datetime.strptime(date_str, DATE_FORMAT)
    except ValueError as e:
        raise ValueError(f"Invalid date: {date_str}") from e


@dataclass
class SetEntry:
    """
    One performed set: load lifted and repetitions done.

    Blank sets (freshly added in the editor) hold zeros.
    """

    weight: float = 0.0
    reps: float = 0.0

    def clone(self) -> "SetEntry":
        return SetEntry(weight=self.weight, reps=self.reps)


@dataclass
class Exercise:
    """A named movement with its ordered sets, owned by a workout or template."""

    name: str = ""
    sets: list[SetEntry] = field(default_factory=list)

    def clone(self) -> "Exercise":
        return Exercise(name=self.name, sets=[s.clone() for s in self.sets])


@dataclass
class Workout:
    """
    A dated training session.

    id is None until the store assigns one on insert.
    """

    date: str  # ISO format: YYYY-MM-DD
    title: str
    exercises: list[Exercise] = field(default_factory=list)
    id: int | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        validate_iso_date(self.date)

    @property
    def is_new(self) -> bool:
        """True when the workout has never been stored."""
        return self.id is None

    def clone(self) -> "Workout":
        return Workout(
            date=self.date,
            title=self.title,
            exercises=[ex.clone() for ex in self.exercises],
            id=self.id,
        )


@dataclass
class Template:
    """A reusable exercise list applied by value to new workouts."""

    name: str
    exercises: list[Exercise] = field(default_factory=list)

    def clone(self) -> "Template":
        return Template(name=self.name, exercises=[ex.clone() for ex in self.exercises])


@dataclass
class Week:
    """A named grouping of workouts, referenced by id in insertion order."""

    id: int
    name: str
    workout_ids: list[int] = field(default_factory=list)

    def clone(self) -> "Week":
        return Week(id=self.id, name=self.name, workout_ids=list(self.workout_ids))


@dataclass
class WeightEntry:
    """Bodyweight logged for one calendar date."""

    date: str  # ISO format: YYYY-MM-DD
    weight: float

    def __post_init__(self) -> None:
        """Validate weight entry."""
        validate_iso_date(self.date)

    def clone(self) -> "WeightEntry":
        return WeightEntry(date=self.date, weight=self.weight)


@dataclass
class TrackerState:
    """
    Root of all persisted data.

    workouts maps workout id to workout; weeks reference workouts by id.
    weights is kept sorted ascending by date.
    """

    weeks: list[Week] = field(default_factory=list)
    workouts: dict[int, Workout] = field(default_factory=dict)
    templates: list[Template] = field(default_factory=list)
    weights: list[WeightEntry] = field(default_factory=list)

    def clone(self) -> "TrackerState":
        return TrackerState(
            weeks=[w.clone() for w in self.weeks],
            workouts={k: w.clone() for k, w in self.workouts.items()},
            templates=[t.clone() for t in self.templates],
            weights=[w.clone() for w in self.weights],
        )

    def max_id(self) -> int:
        """Highest week or workout id in use, 0 when empty."""
        ids = [w.id for w in self.weeks] + list(self.workouts)
        return max(ids, default=0)
