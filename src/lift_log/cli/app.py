"""Shared Typer app object, shared option types, and store utility."""

from pathlib import Path
from typing import Annotated, Optional

import typer

from ..core.config_loader import Settings, load_settings
from ..io.storage import JsonFileStorage
from ..io.tracker_store import TrackerStore

# Shared --data-path option type used across all commands
DataPathOption = Annotated[
    Optional[Path],
    typer.Option("--data-path", "-p", help="Path to the storage file (default: ~/.lift-log/storage.json)"),
]

# Shared --json option type for listing commands
JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="lift-log",
    help="Workout and bodyweight tracker: weeks of workouts, templates, 1RM trends and an adherence calendar.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_settings(data_path: Path | None = None) -> Settings:
    """Load settings, letting an explicit --data-path win."""
    settings = load_settings()
    if data_path is not None:
        settings.data_path = data_path
    return settings


def get_store(data_path: Path | None, settings: Settings | None = None) -> TrackerStore:
    """Open the tracker store from path or the configured location."""
    if settings is None:
        settings = get_settings(data_path)
    elif data_path is not None:
        settings.data_path = data_path
    return TrackerStore(
        JsonFileStorage(settings.data_path),
        key=settings.storage_key,
        default_templates=settings.default_templates,
    )
