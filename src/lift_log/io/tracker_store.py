"""
Single-blob state storage for the tracker.

Owns all durable data: weeks, workouts, templates and bodyweight entries.
The whole state is serialized under one storage key and rewritten on every
mutation.
"""

import logging
import time
from collections.abc import Callable, Iterable
from datetime import datetime

from ..core.config import (
    CORRUPT_SUFFIX,
    DATE_FORMAT,
    DEFAULT_TEMPLATE_NAMES,
    DEFAULT_WEEK_NAME,
    STORAGE_KEY,
    WEEK_NAME_FORMAT,
)
from ..core.models import Template, TrackerState, Week, WeightEntry, Workout
from .serializers import ValidationError, dumps_state, loads_state
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


class MonotonicIdGenerator:
    """
    Issues strictly increasing integer ids.

    Ids track the wall clock in milliseconds but never repeat: two calls in
    the same millisecond get consecutive values.
    """

    def __init__(self, clock: Callable[[], int] | None = None, start_after: int = 0):
        self._clock = clock or (lambda: time.time_ns() // 1_000_000)
        self._last = start_after

    def seed(self, value: int) -> None:
        """Make sure future ids are greater than value."""
        self._last = max(self._last, value)

    def __call__(self) -> int:
        self._last = max(self._clock(), self._last + 1)
        return self._last


class TrackerStore:
    """
    Manages the tracker state stored under one key.

    Accessors return live objects; changes must go through the mutators,
    which persist before returning. Persistence errors propagate.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = STORAGE_KEY,
        id_generator: Callable[[], int] | None = None,
        default_templates: Iterable[str] = DEFAULT_TEMPLATE_NAMES,
    ):
        """
        Load state from storage, or start from the defaults.

        Args:
            storage: Key-value storage holding the serialized state
            key: Storage key of the state blob
            id_generator: Callable returning fresh ids (MonotonicIdGenerator by default)
            default_templates: Template names created on first run
        """
        self.storage = storage
        self.key = key
        self.default_templates = tuple(default_templates)
        self.next_id = id_generator or MonotonicIdGenerator()
        self.data = self._load()
        if isinstance(self.next_id, MonotonicIdGenerator):
            self.next_id.seed(self.data.max_id())
        self.save()

    def _default_state(self) -> TrackerState:
        return TrackerState(
            weeks=[Week(id=self.next_id(), name=DEFAULT_WEEK_NAME)],
            workouts={},
            templates=[Template(name=name) for name in self.default_templates],
            weights=[],
        )

    def _load(self) -> TrackerState:
        raw = self.storage.get_item(self.key)
        if raw is None:
            logger.debug("No stored state; starting fresh", extra={"storage_key": self.key})
            return self._default_state()
        try:
            return loads_state(raw)
        except ValidationError as e:
            backup_key = self.key + CORRUPT_SUFFIX
            logger.warning(
                "Stored state is invalid (%s); starting fresh",
                e,
                extra={"storage_key": self.key, "backup": backup_key},
            )
            self.storage.set_item(backup_key, raw)
            return self._default_state()

    def save(self) -> None:
        """Write the whole state to storage."""
        self.storage.set_item(self.key, dumps_state(self.data))
        logger.debug(
            "Saved state",
            extra={
                "storage_key": self.key,
                "weeks": len(self.data.weeks),
                "workouts": len(self.data.workouts),
                "templates": len(self.data.templates),
                "weights": len(self.data.weights),
            },
        )

    def export_state(self) -> str:
        """Return the serialized state exactly as persisted."""
        return dumps_state(self.data)

    # -- weeks -------------------------------------------------------------

    def get_weeks(self) -> list[Week]:
        return self.data.weeks

    def get_week(self, week_id: int) -> Week | None:
        return next((w for w in self.data.weeks if w.id == week_id), None)

    def add_week(self) -> Week:
        """Append "Week N" where N is the current week count plus one."""
        week = Week(
            id=self.next_id(),
            name=WEEK_NAME_FORMAT.format(number=len(self.data.weeks) + 1),
        )
        self.data.weeks.append(week)
        self.save()
        return week

    # -- workouts ----------------------------------------------------------

    def get_workout(self, workout_id: int) -> Workout | None:
        return self.data.workouts.get(workout_id)

    def get_workouts(self) -> list[Workout]:
        """All workouts, in no particular order."""
        return list(self.data.workouts.values())

    def workouts_on(self, date: str) -> list[Workout]:
        """Workouts dated exactly date, across all weeks."""
        return [w for w in self.data.workouts.values() if w.date == date]

    def add_workout(self, week_id: int, workout: Workout) -> Workout:
        """
        Store a new workout and link it to a week.

        A fresh id is assigned to workout; a copy is stored. If week_id does
        not match any week the workout is still stored but no week links it.

        Returns:
            The stored workout
        """
        workout.id = self.next_id()
        stored = workout.clone()
        self.data.workouts[stored.id] = stored  # type: ignore[index]
        week = self.get_week(week_id)
        if week is not None:
            week.workout_ids.append(stored.id)  # type: ignore[arg-type]
        else:
            logger.warning(
                "Workout stored without a week: no week has that id",
                extra={"workout_id": stored.id, "week_id": week_id},
            )
        self.save()
        return stored

    def update_workout(self, workout: Workout) -> None:
        """Overwrite the stored workout with the same id (not checked)."""
        self.data.workouts[workout.id] = workout.clone()  # type: ignore[index]
        self.save()

    # -- templates ---------------------------------------------------------

    def get_templates(self) -> list[Template]:
        return self.data.templates

    def get_template(self, name: str) -> Template | None:
        """First template with exactly this name."""
        return next((t for t in self.data.templates if t.name == name), None)

    def add_template(self, template: Template) -> None:
        """Append a template. Names are not deduplicated."""
        self.data.templates.append(template.clone())
        self.save()

    # -- bodyweight --------------------------------------------------------

    def add_weight(self, date: str, weight: float) -> None:
        """
        Record bodyweight for a date, replacing any entry for that date.

        The list stays sorted by date ascending.
        """
        existing = self.get_weight_for_date(date)
        if existing is not None:
            existing.weight = weight
        else:
            self.data.weights.append(WeightEntry(date=date, weight=weight))
        self.data.weights.sort(key=lambda w: datetime.strptime(w.date, DATE_FORMAT))
        self.save()

    def get_weights(self) -> list[WeightEntry]:
        return self.data.weights

    def get_weight_for_date(self, date: str) -> WeightEntry | None:
        return next((w for w in self.data.weights if w.date == date), None)
