"""JSON persistence for unlock progress shared across save slots."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Set

from narrative.domain.unlocks import UNLOCKS_VERSION, UnlockData

from .errors import DataValidationError
from .json_loader import load_json, write_json
from .paths import get_default_unlocks_path

logger = logging.getLogger(__name__)


def load_unlocks(path: Path | None = None) -> UnlockData:
    """Load unlocks from disk; a missing file means nothing is unlocked yet.

    Unreadable or malformed files raise instead of resetting progress.
    """
    unlocks_path = path or get_default_unlocks_path()
    if not unlocks_path.exists():
        logger.debug("No unlock file at %s, starting empty", unlocks_path)
        return UnlockData()
    raw = load_json(unlocks_path)
    if not isinstance(raw, dict):
        raise DataValidationError(f"Unlock file {unlocks_path} must contain a JSON object.")
    version = raw.get("version")
    if version != UNLOCKS_VERSION:
        raise DataValidationError(f"Unsupported unlock file version: {version!r}.")
    return UnlockData(
        version=UNLOCKS_VERSION,
        unlocked_cgs=_require_id_set(raw.get("unlocked_cgs"), "unlocked_cgs"),
        unlocked_bgm=_require_id_set(raw.get("unlocked_bgm"), "unlocked_bgm"),
    )


def save_unlocks(data: UnlockData, path: Path | None = None) -> None:
    unlocks_path = path or get_default_unlocks_path()
    payload: Dict[str, Any] = {
        "version": data.version,
        "unlocked_cgs": sorted(data.unlocked_cgs),
        "unlocked_bgm": sorted(data.unlocked_bgm),
    }
    write_json(unlocks_path, payload)
    logger.info("Saved unlocks (%d CGs) to %s", data.unlocked_cg_count, unlocks_path)


def _require_id_set(value: object, field_name: str) -> Set[str]:
    if value is None:
        return set()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise DataValidationError(f"{field_name} must be a list of strings.")
    return set(value)
