"""
YAML → config dict loader.

Loads model constants from model.yaml (bundled with the package) and
optionally merges user overrides from ~/.gymtrack/model.yaml.

Usage:
    from gymtrack.core.engine.config_loader import load_model_config
    cfg = load_model_config()
    frequency = cfg.get("periodization", {}).get("DELOAD_FREQUENCY", 4)

If the bundled YAML cannot be parsed, lookups fall back to the Python
defaults in config.py.  If the user override file exists but has parse
errors, a warning is emitted and the file is ignored.
"""

from __future__ import annotations

import importlib.resources
import os
import warnings
from pathlib import Path
from typing import Any

import yaml

USER_DIR_ENV = "GYMTRACK_HOME"
CONFIG_FILENAME = "model.yaml"


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping; raise on unreadable or malformed files."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_user_dir() -> Path:
    """Return the per-user gymtrack directory ($GYMTRACK_HOME or ~/.gymtrack)."""
    override = os.environ.get(USER_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path("~").expanduser() / ".gymtrack"


def get_bundled_yaml_path() -> Path | None:
    """Return the path to the bundled model.yaml, or None if not found."""
    ref = importlib.resources.files("gymtrack").joinpath(CONFIG_FILENAME)
    with importlib.resources.as_file(ref) as p:
        return p if p.exists() else None


def get_user_yaml_path() -> Path | None:
    """Return the user's model.yaml if it exists, else None."""
    p = get_user_dir() / CONFIG_FILENAME
    return p if p.exists() else None


def load_model_config() -> dict[str, Any]:
    """
    Load and merge model configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/gymtrack/model.yaml
    2. User override at ~/.gymtrack/model.yaml

    Returns:
        Merged dict of config sections.  Empty dict if no YAML available.
    """
    config: dict[str, Any] = {}

    bundled = get_bundled_yaml_path()
    if bundled is not None:
        try:
            config = _deep_merge(config, _load_yaml_file(bundled))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            warnings.warn(
                f"gymtrack: failed to load bundled {CONFIG_FILENAME} ({exc}); "
                "using Python defaults.",
                stacklevel=2,
            )

    user = get_user_yaml_path()
    if user is not None:
        try:
            config = _deep_merge(config, _load_yaml_file(user))
        except (OSError, ValueError, yaml.YAMLError) as exc:
            warnings.warn(
                f"gymtrack: ignoring user config {user} ({exc})",
                stacklevel=2,
            )

    return config
