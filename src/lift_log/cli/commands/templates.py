"""Template commands: templates, add-template."""

import json
from typing import Annotated, Optional

import typer

from ...core.models import Template
from ...io.serializers import ValidationError, parse_exercise_string, template_to_dict
from .. import views
from ..app import DataPathOption, JsonOption, app, get_store


@app.command("templates")
def list_templates(
    data_path: DataPathOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    List saved workout templates.
    """
    store = get_store(data_path)
    templates = store.get_templates()

    if json_out:
        print(json.dumps([template_to_dict(t) for t in templates], indent=2))
        return

    views.print_templates(templates)


@app.command("add-template")
def add_template(
    name: Annotated[str, typer.Argument(help="Template name")],
    exercises: Annotated[
        Optional[list[str]],
        typer.Option("--exercise", "-e", help='Exercise, repeatable: "Bench" or "Bench:60x10"'),
    ] = None,
    data_path: DataPathOption = None,
) -> None:
    """
    Save a new template. Names may repeat; the first match is used when applying.
    """
    if not name.strip():
        views.print_error("Template name must not be empty")
        raise typer.Exit(1)

    try:
        parsed = [parse_exercise_string(e) for e in exercises or []]
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store = get_store(data_path)
    store.add_template(Template(name=name, exercises=parsed))
    views.print_success(f"Template saved: {name} ({len(parsed)} exercises)")
