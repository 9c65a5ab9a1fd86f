"""Logging configuration for lift-log.

Log format is "text" (default) or "json", chosen via settings.yaml. Output
goes to stderr so it never mixes with rendered screens or --json output.

Store and storage messages pass context through ``extra=`` using the names
in STATE_FIELDS (storage key, file paths, section counts). Both formats
append whichever of those a record carries.
"""

import json
import logging
import sys
from datetime import datetime, timezone

# extra= names understood by the formatters, in output order
STATE_FIELDS = (
    "storage_key",
    "storage_path",
    "backup",
    "weeks",
    "workouts",
    "templates",
    "weights",
    "workout_id",
    "week_id",
)

TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def state_context(record: logging.LogRecord) -> dict[str, object]:
    """STATE_FIELDS values present on a record."""
    return {name: getattr(record, name) for name in STATE_FIELDS if hasattr(record, name)}


class TextFormatter(logging.Formatter):
    """Plain text line followed by key=value pairs for tracker context."""

    def __init__(self) -> None:
        super().__init__(TEXT_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = state_context(record)
        if not context:
            return line
        pairs = " ".join(f"{k}={v}" for k, v in context.items())
        # Keep the traceback (if any) after the pairs on its own lines
        head, sep, tail = line.partition("\n")
        return f"{head} [{pairs}]{sep}{tail}"


class JSONFormatter(logging.Formatter):
    """One JSON object per record, with tracker context nested under "state"."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        context = state_context(record)
        if context:
            entry["state"] = context
        if record.exc_info:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def setup_logging(log_format: str = "text", level: int | str = logging.WARNING) -> None:
    """
    Install a single stderr handler on the root logger.

    Args:
        log_format: "json" for JSONFormatter, anything else for TextFormatter
        level: Level name or number for the root logger and the handler

    Calling it again replaces the previous handler rather than adding one.
    """
    root = logging.getLogger()
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if log_format == "json" else TextFormatter())
    root.addHandler(handler)
