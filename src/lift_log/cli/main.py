"""
CLI entry point using Typer.

Run without a command for the interactive tracker (weeks, workout editor,
weight tracking, calendar). Subcommands cover the same operations for scripting:
- weeks / add-week: list and add training weeks
- log-workout / show-workout / history: record and review workouts
- templates / add-template: reusable workout blueprints
- log-weight / weights: bodyweight log with trend chart
- calendar / day: monthly adherence view and per-day details
- onerepmax / export: 1RM history and raw data export
"""

import logging
from typing import Annotated

import typer

from ..logging_setup import setup_logging
from . import views
from .app import DataPathOption, app, get_settings, get_store
from .commands import analysis, calendar, templates, weeks, weight, workouts  # noqa: F401  (registers commands)
from .controller import AppController
from .interactive import run_interactive


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log debug output to stderr"),
    ] = False,
    data_path: DataPathOption = None,
) -> None:
    """
    Workout and bodyweight tracker. Run without a command for interactive mode.
    """
    settings = get_settings(data_path)
    setup_logging(settings.log_format, logging.DEBUG if verbose else settings.log_level)

    if ctx.invoked_subcommand is not None:
        return

    store = get_store(data_path, settings)
    run_interactive(AppController(store), settings)
    views.console.print("Bye.")


if __name__ == "__main__":
    app()
