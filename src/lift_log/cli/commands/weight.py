"""Bodyweight commands: log-weight, weights."""

import json
import math
from datetime import datetime
from typing import Annotated, Optional

import typer

from ...core.charts import build_weight_chart
from ...core.config import DATE_FORMAT
from ...io.serializers import ValidationError, validate_date, weight_entry_to_dict
from .. import views
from ..app import DataPathOption, JsonOption, app, get_settings, get_store


@app.command("log-weight")
def log_weight(
    weight: Annotated[float, typer.Argument(help="Bodyweight")],
    date: Annotated[
        Optional[str],
        typer.Option("--date", "-d", help="Date (YYYY-MM-DD, default: today)"),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Record bodyweight for a date. An existing entry for that date is replaced.
    """
    try:
        entry_date = validate_date(date) if date else datetime.now().strftime(DATE_FORMAT)
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    if not weight or not math.isfinite(weight):
        views.print_error("Weight must be a finite, non-zero number")
        raise typer.Exit(1)

    store = get_store(data_path)
    replaced = store.get_weight_for_date(entry_date) is not None
    store.add_weight(entry_date, weight)
    verb = "Updated" if replaced else "Logged"
    views.print_success(f"{verb} weight {weight:g} on {entry_date}")


@app.command("weights")
def show_weights(
    no_chart: Annotated[
        bool,
        typer.Option("--no-chart", help="Skip the trend chart"),
    ] = False,
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Show bodyweight history with a trend chart.
    """
    settings = get_settings(data_path)
    store = get_store(data_path, settings)
    weights = store.get_weights()

    if json_out:
        print(json.dumps([weight_entry_to_dict(w) for w in weights], indent=2))
        return

    if not no_chart:
        views.print_chart(build_weight_chart(weights), settings.chart_width, settings.chart_height)
    views.print_weights(weights)
