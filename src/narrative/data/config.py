"""Runtime options persisted as JSON."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any, Mapping

from .errors import DataLoadError
from .json_loader import load_json, write_json
from .paths import get_default_config_path

logger = logging.getLogger(__name__)

DEFAULT_BACKLOG_MAX_ENTRIES = 0
DEFAULT_SAVE_SLOT_COUNT = 10


@dataclass(frozen=True, slots=True)
class RuntimeConfig:
    """Host-tunable limits.

    ``backlog_max_entries`` of 0 keeps every backlog entry.
    """

    backlog_max_entries: int = DEFAULT_BACKLOG_MAX_ENTRIES
    save_slot_count: int = DEFAULT_SAVE_SLOT_COUNT

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "RuntimeConfig":
        """Build a config from loose JSON data, replacing bad values with defaults."""
        return cls(
            backlog_max_entries=_normalize_int(
                raw.get("backlog_max_entries"), DEFAULT_BACKLOG_MAX_ENTRIES, minimum=0
            ),
            save_slot_count=_normalize_int(
                raw.get("save_slot_count"), DEFAULT_SAVE_SLOT_COUNT, minimum=1
            ),
        )

    def to_mapping(self) -> dict[str, int]:
        return asdict(self)


def _normalize_int(value: object, default: int, *, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if value < minimum:
        return default
    return value


def load_config(path: Path | None = None) -> RuntimeConfig:
    """Load config from disk or return defaults."""
    config_path = path or get_default_config_path()
    try:
        raw = load_json(config_path)
    except DataLoadError as exc:
        logger.debug("Using default runtime config: %s", exc)
        return RuntimeConfig()
    if not isinstance(raw, dict):
        logger.warning("Ignoring config at %s: expected a JSON object", config_path)
        return RuntimeConfig()
    return RuntimeConfig.from_mapping(raw)


def save_config(config: RuntimeConfig, path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or get_default_config_path()
    write_json(config_path, config.to_mapping())
