"""File-system storage for numbered save slots."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List

from .config import DEFAULT_SAVE_SLOT_COUNT
from .errors import DataLoadError, DataValidationError
from .json_loader import load_json, write_json
from .paths import get_save_dir

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SlotMetadata:
    """Describes the contents of a save slot for menu display."""

    slot: int
    exists: bool
    metadata: Dict[str, Any] | None = None
    is_corrupt: bool = False


class SaveSlotStore:
    """Reads and writes ``slot_<n>.json`` files under one directory."""

    def __init__(
        self,
        base_dir: Path | str | None = None,
        slot_count: int = DEFAULT_SAVE_SLOT_COUNT,
    ) -> None:
        if slot_count < 1:
            raise ValueError("slot_count must be at least 1.")
        self._base_dir = Path(base_dir) if base_dir is not None else get_save_dir()
        self._slot_count = slot_count

    @property
    def slot_count(self) -> int:
        return self._slot_count

    def list_slots(self) -> List[SlotMetadata]:
        """Return metadata for each configured slot."""
        slots: List[SlotMetadata] = []
        for slot_index in range(1, self._slot_count + 1):
            path = self._slot_path(slot_index)
            if not path.exists():
                slots.append(SlotMetadata(slot=slot_index, exists=False))
                continue
            try:
                payload = load_json(path)
            except DataLoadError as exc:
                logger.warning("Save slot %d is unreadable: %s", slot_index, exc)
                slots.append(SlotMetadata(slot=slot_index, exists=True, is_corrupt=True))
                continue
            raw_metadata = payload.get("metadata") if isinstance(payload, dict) else None
            if not isinstance(raw_metadata, dict):
                slots.append(SlotMetadata(slot=slot_index, exists=True, is_corrupt=True))
                continue
            slots.append(SlotMetadata(slot=slot_index, exists=True, metadata=raw_metadata))
        return slots

    def slot_exists(self, slot: int) -> bool:
        self._validate_slot(slot)
        return self._slot_path(slot).exists()

    def read_slot(self, slot: int) -> Dict[str, Any]:
        """Load and parse the payload stored in the requested slot."""
        self._validate_slot(slot)
        payload = load_json(self._slot_path(slot))
        if not isinstance(payload, dict):
            raise DataValidationError(f"Save slot {slot} does not contain a JSON object.")
        return payload

    def write_slot(self, slot: int, payload: Dict[str, Any]) -> None:
        self._validate_slot(slot)
        write_json(self._slot_path(slot), payload)
        logger.info("Wrote save slot %d", slot)

    def delete_slot(self, slot: int) -> None:
        """Delete the requested slot payload if it exists."""
        self._validate_slot(slot)
        try:
            self._slot_path(slot).unlink()
        except FileNotFoundError:
            return

    def _slot_path(self, slot: int) -> Path:
        return self._base_dir / f"slot_{slot}.json"

    def _validate_slot(self, slot: int) -> None:
        if not 1 <= slot <= self._slot_count:
            raise ValueError(f"Slot index must be between 1 and {self._slot_count}.")
