"""Per-user file locations."""
from __future__ import annotations

import os
from pathlib import Path

_APP_DIR_WINDOWS = "NarrativeRuntime"
_APP_DIR_POSIX = "narrative_runtime"


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / _APP_DIR_WINDOWS
        return Path.home() / _APP_DIR_WINDOWS
    return Path.home() / ".config" / _APP_DIR_POSIX


def get_default_config_path() -> Path:
    return get_user_data_dir() / "config.json"


def get_save_dir() -> Path:
    """Return the per-user save directory."""
    return get_user_data_dir() / "saves"


def get_default_unlocks_path() -> Path:
    """Return the file holding unlocks shared by all save slots."""
    return get_save_dir() / "unlocks.json"
