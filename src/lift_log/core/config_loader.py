"""
YAML → typed settings loader.

Loads settings from settings.yaml (bundled with the package) and optionally
merges user overrides from ~/.lift-log/settings.yaml.

Usage:
    from lift_log.core.config_loader import load_settings
    settings = load_settings()
    settings.data_path  # where the storage file lives

If the user override file exists but has parse errors, a warning is emitted
and the file is ignored. The LIFT_LOG_DATA environment variable overrides the
storage file path from either file.
"""

from __future__ import annotations

import os
import warnings
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from .config import (
    DATA_PATH_ENV_VAR,
    DEFAULT_CHART_HEIGHT,
    DEFAULT_CHART_WIDTH,
    DEFAULT_DATA_DIR_NAME,
    DEFAULT_DATA_FILE_NAME,
    DEFAULT_TEMPLATE_NAMES,
    STORAGE_KEY,
)


@dataclass
class Settings:
    """Resolved runtime settings."""

    data_path: Path
    storage_key: str = STORAGE_KEY
    default_templates: list[str] = field(default_factory=lambda: list(DEFAULT_TEMPLATE_NAMES))
    chart_width: int = DEFAULT_CHART_WIDTH
    chart_height: int = DEFAULT_CHART_HEIGHT
    log_level: str = "WARNING"
    log_format: str = "text"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML file; raise yaml.YAMLError / OSError on failure."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    return data if isinstance(data, dict) else {}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


def _home() -> Path:
    return Path(os.environ.get("HOME", "~")).expanduser()


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled settings.yaml (at the package root)."""
    return Path(__file__).parent.parent / "settings.yaml"


def get_user_yaml_path() -> Path | None:
    """Return ~/.lift-log/settings.yaml if it exists, else None."""
    p = _home() / DEFAULT_DATA_DIR_NAME / "settings.yaml"
    return p if p.exists() else None


def get_default_data_path() -> Path:
    """Default storage file: ~/.lift-log/storage.json."""
    return _home() / DEFAULT_DATA_DIR_NAME / DEFAULT_DATA_FILE_NAME


def load_raw_config() -> dict[str, Any]:
    """
    Load and merge configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/lift_log/settings.yaml
    2. User override at ~/.lift-log/settings.yaml

    Returns:
        Merged dict of config sections
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled.exists():
        config = _deep_merge(config, _load_yaml_file(bundled))

    user = get_user_yaml_path()
    if user is not None:
        try:
            user_cfg = _load_yaml_file(user)
        except (yaml.YAMLError, OSError) as e:
            warnings.warn(f"Ignoring {user}: {e}", stacklevel=2)
            user_cfg = {}
        config = _deep_merge(config, user_cfg)

    return config


def settings_from_dict(raw: dict[str, Any]) -> Settings:
    """Convert a merged config dict to Settings, falling back to defaults per key."""
    storage = raw.get("storage", {}) or {}
    charts = raw.get("charts", {}) or {}
    logging_cfg = raw.get("logging", {}) or {}

    env_path = os.environ.get(DATA_PATH_ENV_VAR)
    if env_path:
        data_path = Path(env_path).expanduser()
    elif storage.get("path"):
        data_path = Path(str(storage["path"])).expanduser()
    else:
        data_path = get_default_data_path()

    return Settings(
        data_path=data_path,
        storage_key=str(storage.get("key", STORAGE_KEY)),
        default_templates=[str(n) for n in raw.get("default_templates", DEFAULT_TEMPLATE_NAMES)],
        chart_width=int(charts.get("width", DEFAULT_CHART_WIDTH)),
        chart_height=int(charts.get("height", DEFAULT_CHART_HEIGHT)),
        log_level=str(logging_cfg.get("level", "WARNING")).upper(),
        log_format=str(logging_cfg.get("format", "text")),
    )


def load_settings() -> Settings:
    """Load settings from the bundled file, user overrides and environment."""
    return settings_from_dict(load_raw_config())
