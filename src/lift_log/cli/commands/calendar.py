"""Calendar commands: calendar, day."""

import json
from datetime import date as date_cls
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.calendar import day_details, month_grid
from ...io.serializers import ValidationError, validate_date, weight_entry_to_dict, workout_to_dict
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store


def _parse_month(month: str) -> tuple[int, int]:
    """Parse YYYY-MM."""
    try:
        parsed = datetime.strptime(month, "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month: {month}. Expected YYYY-MM") from None
    return parsed.year, parsed.month


@app.command("calendar")
def show_calendar(
    month: Annotated[
        Optional[str],
        typer.Option("--month", "-m", help="Month to show (YYYY-MM, default: current month)"),
    ] = None,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show a month with done (✓) and missed (✗) workout days.
    """
    today = date_cls.today()
    if month:
        try:
            year, month_num = _parse_month(month)
        except ValidationError as e:
            views.print_error(str(e))
            raise typer.Exit(1)
    else:
        year, month_num = today.year, today.month

    store = get_store(data_path)
    grid = month_grid(year, month_num, (w.date for w in store.get_workouts()), today)

    if json_out:
        output = {
            "year": grid.year,
            "month": grid.month,
            "leading_blanks": grid.leading_blanks,
            "days": [
                {
                    "date": d.date,
                    "today": d.is_today,
                    "workout_done": d.workout_done,
                    "workout_missed": d.workout_missed,
                }
                for d in grid.days
            ],
        }
        print(json.dumps(output, indent=2))
        return

    views.console.print(views.format_calendar_table(grid))


@app.command("day")
def show_day(
    date: Annotated[str, typer.Argument(help="Date (YYYY-MM-DD)")],
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show the workout and bodyweight recorded on a date.
    """
    try:
        validate_date(date)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_path)
    details = day_details(store.workouts_on(date), store.get_weights(), date)

    if json_out:
        output = {
            "date": details.date,
            "workout": workout_to_dict(details.workout) if details.workout else None,
            "weight": weight_entry_to_dict(details.weight) if details.weight else None,
        }
        print(json.dumps(output, indent=2))
        return

    views.console.print(views.format_day_details(details))
