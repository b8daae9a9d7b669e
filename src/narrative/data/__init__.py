"""Data layer: JSON files, per-user paths, configuration, save slots and unlocks."""

from .config import RuntimeConfig, load_config, save_config
from .errors import DataError, DataLoadError, DataValidationError
from .paths import get_default_config_path, get_default_unlocks_path, get_save_dir, get_user_data_dir
from .save_slots import SaveSlotStore, SlotMetadata
from .unlock_store import load_unlocks, save_unlocks

__all__ = [
    "DataError",
    "DataLoadError",
    "DataValidationError",
    "RuntimeConfig",
    "SaveSlotStore",
    "SlotMetadata",
    "get_default_config_path",
    "get_default_unlocks_path",
    "get_save_dir",
    "get_user_data_dir",
    "load_config",
    "load_unlocks",
    "save_config",
    "save_unlocks",
]
