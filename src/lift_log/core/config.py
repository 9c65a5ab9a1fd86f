"""
Configuration constants for the workout tracker.

Values that users may want to change live in settings.yaml (see
config_loader.py); these are the defaults and the fixed constants.
"""

from typing import Final

# =============================================================================
# PERSISTENCE
# =============================================================================

STORAGE_KEY: Final[str] = "workoutTrackerData"  # Key of the single state blob
CORRUPT_SUFFIX: Final[str] = ".corrupt"  # Rejected blobs are kept under key + suffix
DEFAULT_DATA_DIR_NAME: Final[str] = ".lift-log"
DEFAULT_DATA_FILE_NAME: Final[str] = "storage.json"
DATA_PATH_ENV_VAR: Final[str] = "LIFT_LOG_DATA"

DATE_FORMAT: Final[str] = "%Y-%m-%d"

# =============================================================================
# BOOTSTRAP STATE
# =============================================================================

DEFAULT_WEEK_NAME: Final[str] = "Week 1"
WEEK_NAME_FORMAT: Final[str] = "Week {number}"
DEFAULT_TEMPLATE_NAMES: Final[tuple[str, ...]] = ("Push", "Pull", "Legs")
NEW_WORKOUT_TITLE: Final[str] = "New Workout"

# =============================================================================
# ONE-REP-MAX (Epley)
# =============================================================================

ONE_RM_REPS_DIVISOR: Final[float] = 30.0  # 1RM = w * (1 + reps / 30)

# =============================================================================
# CHARTS
# =============================================================================

DEFAULT_CHART_WIDTH: Final[int] = 60
DEFAULT_CHART_HEIGHT: Final[int] = 16

SERIES_COLOR: Final[str] = "#bb86fc"
TREND_COLOR: Final[str] = "#03dac6"
GRID_COLOR: Final[str] = "#333"
TICK_COLOR: Final[str] = "#e0e0e0"
TREND_DASH: Final[tuple[int, int]] = (5, 5)

SERIES_MARKER: Final[str] = "●"
TREND_MARKER: Final[str] = "·"
