"""
JSON serialization for tracker data models.

Handles conversion between dataclasses and the JSON-compatible dicts stored
in the single state blob, plus parsing of compact set notation used by the
command line.
"""

import json
import math
import re
from typing import Any

from ..core.models import (
    Exercise,
    SetEntry,
    Template,
    TrackerState,
    Week,
    WeightEntry,
    Workout,
    validate_iso_date,
)


class ValidationError(Exception):
    """Raised when data validation fails."""

    pass


def validate_date(date_str: str) -> str:
    """
    Validate a date string is in ISO format.

    Args:
        date_str: Date string to validate

    Returns:
        The same YYYY-MM-DD string

    Raises:
        ValidationError: If date format is invalid
    """
    try:
        validate_iso_date(date_str)
    except ValueError as e:
        raise ValidationError(str(e)) from e
    return date_str


def parse_number(raw: Any) -> float:
    """
    Coerce user input to a float.

    Anything that does not parse (empty string, text, None) becomes 0.0, and
    so do nan, inf and values that overflow to inf such as "1e309".
    """
    if isinstance(raw, bool):
        return 0.0
    try:
        value = float(raw) if isinstance(raw, (int, float)) else float(str(raw).strip())
    except (ValueError, OverflowError):
        return 0.0
    return value if math.isfinite(value) else 0.0


def _require(data: Any, key: str, kind: type | tuple[type, ...], where: str) -> Any:
    if not isinstance(data, dict):
        raise ValidationError(f"{where}: expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValidationError(f"{where}: missing field '{key}'")
    value = data[key]
    if not isinstance(value, kind) or isinstance(value, bool):
        raise ValidationError(f"{where}: field '{key}' has wrong type {type(value).__name__}")
    return value


def _finite(value: int | float, where: str) -> float:
    # json.loads accepts NaN and Infinity; huge integers overflow float()
    try:
        number = float(value)
    except OverflowError:
        number = math.inf
    if not math.isfinite(number):
        raise ValidationError(f"{where}: expected a finite number, got {value!r}")
    return number


def _stored_number(value: Any, where: str) -> float:
    # Blank editor fields were historically persisted as ""
    if value == "":
        return 0.0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{where}: expected a number, got {value!r}")
    return _finite(value, where)


# =============================================================================
# Model -> dict
# =============================================================================


def set_entry_to_dict(entry: SetEntry) -> dict[str, Any]:
    return {"weight": entry.weight, "reps": entry.reps}


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    return {
        "name": exercise.name,
        "sets": [set_entry_to_dict(s) for s in exercise.sets],
    }


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    """
    Convert Workout to JSON-compatible dict.

    Args:
        workout: Workout to convert

    Returns:
        Dict representation
    """
    return {
        "id": workout.id,
        "date": workout.date,
        "title": workout.title,
        "exercises": [exercise_to_dict(ex) for ex in workout.exercises],
    }


def template_to_dict(template: Template) -> dict[str, Any]:
    return {
        "name": template.name,
        "exercises": [exercise_to_dict(ex) for ex in template.exercises],
    }


def week_to_dict(week: Week) -> dict[str, Any]:
    return {"id": week.id, "name": week.name, "workoutIds": list(week.workout_ids)}


def weight_entry_to_dict(entry: WeightEntry) -> dict[str, Any]:
    return {"date": entry.date, "weight": entry.weight}


def state_to_dict(state: TrackerState) -> dict[str, Any]:
    """
    Convert the full tracker state to a JSON-compatible dict.

    Workout ids become string keys, as JSON objects require.
    """
    return {
        "weeks": [week_to_dict(w) for w in state.weeks],
        "workouts": {str(k): workout_to_dict(w) for k, w in state.workouts.items()},
        "templates": [template_to_dict(t) for t in state.templates],
        "weights": [weight_entry_to_dict(w) for w in state.weights],
    }


# =============================================================================
# dict -> Model
# =============================================================================


def dict_to_set_entry(data: dict[str, Any]) -> SetEntry:
    if not isinstance(data, dict):
        raise ValidationError(f"set: expected an object, got {type(data).__name__}")
    try:
        weight, reps = data["weight"], data["reps"]
    except KeyError as e:
        raise ValidationError(f"set: missing field {e}") from e
    return SetEntry(weight=_stored_number(weight, "set.weight"), reps=_stored_number(reps, "set.reps"))


def dict_to_exercise(data: dict[str, Any]) -> Exercise:
    name = _require(data, "name", str, "exercise")
    sets = _require(data, "sets", list, "exercise")
    return Exercise(name=name, sets=[dict_to_set_entry(s) for s in sets])


def dict_to_workout(data: dict[str, Any]) -> Workout:
    """
    Convert dict to Workout.

    Args:
        data: Dict with id, date, title, exercises

    Returns:
        Workout

    Raises:
        ValidationError: If any field is missing or malformed
    """
    workout_id = _require(data, "id", int, "workout")
    date = validate_date(_require(data, "date", str, "workout"))
    title = _require(data, "title", str, "workout")
    exercises = _require(data, "exercises", list, "workout")
    return Workout(
        id=workout_id,
        date=date,
        title=title,
        exercises=[dict_to_exercise(ex) for ex in exercises],
    )


def dict_to_template(data: dict[str, Any]) -> Template:
    name = _require(data, "name", str, "template")
    exercises = _require(data, "exercises", list, "template")
    return Template(name=name, exercises=[dict_to_exercise(ex) for ex in exercises])


def dict_to_week(data: dict[str, Any]) -> Week:
    week_id = _require(data, "id", int, "week")
    name = _require(data, "name", str, "week")
    workout_ids = _require(data, "workoutIds", list, "week")
    for wid in workout_ids:
        if isinstance(wid, bool) or not isinstance(wid, int):
            raise ValidationError(f"week {week_id}: workout id {wid!r} is not an integer")
    return Week(id=week_id, name=name, workout_ids=list(workout_ids))


def dict_to_weight_entry(data: dict[str, Any]) -> WeightEntry:
    date = validate_date(_require(data, "date", str, "weight"))
    weight = _require(data, "weight", (int, float), "weight")
    return WeightEntry(date=date, weight=_finite(weight, f"weight {date}"))


def dict_to_state(data: dict[str, Any]) -> TrackerState:
    """
    Convert a stored dict to TrackerState.

    Raises:
        ValidationError: On any shape mismatch, including week entries that
            point at workouts which do not exist
    """
    weeks = [dict_to_week(w) for w in _require(data, "weeks", list, "state")]
    raw_workouts = _require(data, "workouts", dict, "state")
    templates = [dict_to_template(t) for t in _require(data, "templates", list, "state")]
    weights = [dict_to_weight_entry(w) for w in _require(data, "weights", list, "state")]

    if not weeks:
        raise ValidationError("state: at least one week is required")

    workouts: dict[int, Workout] = {}
    for key, raw in raw_workouts.items():
        workout = dict_to_workout(raw)
        if str(workout.id) != str(key):
            raise ValidationError(f"workout keyed {key} carries id {workout.id}")
        workouts[workout.id] = workout  # type: ignore[index]

    for week in weeks:
        missing = [wid for wid in week.workout_ids if wid not in workouts]
        if missing:
            raise ValidationError(f"{week.name}: unknown workout ids {missing}")

    return TrackerState(
        weeks=weeks,
        workouts=workouts,
        templates=templates,
        weights=sorted(weights, key=lambda w: w.date),
    )


def dumps_state(state: TrackerState) -> str:
    """Serialize the tracker state to the stored string form."""
    return json.dumps(state_to_dict(state))


def loads_state(text: str) -> TrackerState:
    """
    Parse the stored string form.

    Raises:
        ValidationError: If the text is not valid JSON or not a valid state
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValidationError(f"State is not valid JSON: {e}") from e
    return dict_to_state(data)


# =============================================================================
# Compact set notation (command line)
# =============================================================================

_SET_RE = re.compile(
    r"^\s*(?P<weight>\d+(?:\.\d+)?)\s*[xX×]\s*(?P<reps>\d+)(?:\s*[xX×]\s*(?P<count>\d+))?\s*$"
)


def parse_sets_string(sets_str: str) -> list[SetEntry]:
    """
    Parse compact set notation.

    Formats (comma separated):
        100x5        one set of 5 reps at 100
        100x5x3      three identical sets

    Args:
        sets_str: Sets string, e.g. "60x10, 80x5x3"

    Returns:
        List of SetEntry in the given order

    Raises:
        ValidationError: If any part does not match
    """
    sets: list[SetEntry] = []
    for part in sets_str.split(","):
        if not part.strip():
            continue
        m = _SET_RE.match(part)
        if m is None:
            raise ValidationError(
                f"Invalid set {part.strip()!r}. Expected WEIGHTxREPS or WEIGHTxREPSxSETS, e.g. 100x5"
            )
        count = int(m.group("count") or 1)
        if count < 1:
            raise ValidationError(f"Set count must be at least 1 in {part.strip()!r}")
        for _ in range(count):
            sets.append(SetEntry(weight=float(m.group("weight")), reps=float(m.group("reps"))))
    return sets


def parse_exercise_string(exercise_str: str) -> Exercise:
    """
    Parse "Name:sets" into an Exercise.

    The sets part may be empty ("Bench:" or just "Bench") for a template entry
    with no sets.
    """
    name, _, sets_str = exercise_str.partition(":")
    name = name.strip()
    if not name:
        raise ValidationError(f"Exercise name missing in {exercise_str!r}")
    return Exercise(name=name, sets=parse_sets_string(sets_str))
