"""Week commands: weeks, add-week."""

import json

from ...io.serializers import week_to_dict
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store


@app.command("weeks")
def list_weeks(
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List all weeks with their workout counts.
    """
    store = get_store(data_path)
    weeks = store.get_weeks()

    if json_out:
        print(json.dumps([week_to_dict(w) for w in weeks], indent=2))
        return

    workouts_by_id = {w.id: w for w in store.get_workouts() if w.id is not None}
    views.print_weeks(weeks, workouts_by_id)


@app.command("add-week")
def add_week(data_path: DataPathOption = None) -> None:
    """
    Add the next week ("Week N").
    """
    store = get_store(data_path)
    week = store.add_week()
    views.print_success(f"Added {week.name} (id {week.id})")
