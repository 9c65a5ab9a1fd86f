"""Workout commands: log-workout, show-workout, history."""

import json
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.config import DATE_FORMAT, NEW_WORKOUT_TITLE
from ...core.models import Workout
from ...io.serializers import ValidationError, parse_exercise_string, validate_date, workout_to_dict
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store


@app.command("log-workout")
def log_workout(
    exercises: Annotated[
        Optional[list[str]],
        typer.Option(
            "--exercise",
            "-e",
            help='Exercise with sets, repeatable: "Bench:100x5,100x5" or "Squat:140x5x3"',
        ),
    ] = None,
    week_number: Annotated[
        Optional[int],
        typer.Option("--week", "-w", help="Week number as listed by 'weeks' (default: last week)"),
    ] = None,
    title: Annotated[
        Optional[str],
        typer.Option("--title", "-t", help="Workout title"),
    ] = None,
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Workout date (YYYY-MM-DD, default: today)"),
    ] = None,
    template_name: Annotated[
        Optional[str],
        typer.Option("--template", "-T", help="Start from this template's exercises"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Log a workout into a week.

    Template exercises come first, followed by any --exercise entries:

      lift-log log-workout --template Push -e "Bench:100x5,100x5,100x4"
    """
    store = get_store(data_path)
    weeks = store.get_weeks()

    if week_number is None:
        week = weeks[-1]
    elif 1 <= week_number <= len(weeks):
        week = weeks[week_number - 1]
    else:
        views.print_error(f"Week number must be between 1 and {len(weeks)}")
        raise typer.Exit(1)

    try:
        workout_date = validate_date(date) if date else datetime.now().strftime(DATE_FORMAT)
        parsed = [parse_exercise_string(e) for e in exercises or []]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    workout = Workout(date=workout_date, title=NEW_WORKOUT_TITLE)
    if template_name:
        template = store.get_template(template_name)
        if template is None:
            views.print_error(f"No template named {template_name!r}")
            raise typer.Exit(1)
        workout.title = template.name
        workout.exercises = [ex.clone() for ex in template.exercises]
    if title:
        workout.title = title
    workout.exercises.extend(parsed)

    saved = store.add_workout(week.id, workout)
    views.print_success(f"Logged {saved.title} on {saved.date} in {week.name} (id {saved.id})")


@app.command("show-workout")
def show_workout(
    workout_id: Annotated[int, typer.Argument(help="Workout ID (see 'history')")],
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show one workout with all its sets.
    """
    store = get_store(data_path)
    workout = store.get_workout(workout_id)
    if workout is None:
        views.print_error(f"No workout with id {workout_id}")
        raise typer.Exit(1)

    if json_out:
        print(json.dumps(workout_to_dict(workout), indent=2))
        return

    views.print_workout(workout)


@app.command("history")
def show_history(
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", "-l", help="Show only the most recent N workouts"),
    ] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Display all workouts across weeks, oldest first.
    """
    store = get_store(data_path)
    workouts = sorted(store.get_workouts(), key=lambda w: w.date)

    if limit is not None:
        workouts = workouts[-limit:] if limit > 0 else []

    if json_out:
        print(json.dumps([workout_to_dict(w) for w in workouts], indent=2))
        return

    views.print_history(workouts)
