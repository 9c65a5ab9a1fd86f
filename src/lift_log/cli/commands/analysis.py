"""Analysis commands: onerepmax, export."""

import json
from typing import Annotated

import typer

from ...core.charts import build_one_rm_chart
from ...core.metrics import one_rm_history
from .. import views
from ..app import DataPathOption, JsonOption, app, get_settings, get_store


@app.command("onerepmax")
def one_rep_max(
    exercise: Annotated[str, typer.Argument(help="Exercise name (case-insensitive)")],
    no_chart: Annotated[
        bool,
        typer.Option("--no-chart", help="Skip the trend chart"),
    ] = False,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show estimated 1RM history for an exercise (Epley, best set per workout).
    """
    if not exercise.strip():
        views.print_error("Exercise name must not be empty")
        raise typer.Exit(1)

    settings = get_settings(data_path)
    store = get_store(data_path, settings)
    points = one_rm_history(store.get_workouts(), exercise)

    if json_out:
        output = [{"date": p.date, "one_rm": round(p.one_rm, 2)} for p in points]
        print(json.dumps(output, indent=2))
        return

    if not points:
        views.print_info(f"No recorded sets for {exercise}.")
        return

    if not no_chart:
        views.print_chart(
            build_one_rm_chart(points, exercise),
            settings.chart_width,
            settings.chart_height,
        )
    views.print_one_rm_history(points, exercise)


@app.command("export")
def export(data_path: DataPathOption = None) -> None:
    """
    Print the stored tracker state as JSON.
    """
    store = get_store(data_path)
    print(store.export_state())
