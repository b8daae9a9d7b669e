"""Unlock progress shared by every save slot (CG gallery, BGM collection)."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PureWindowsPath
from typing import Set

UNLOCKS_VERSION = 1


@dataclass(slots=True)
class UnlockData:
    version: int = UNLOCKS_VERSION
    unlocked_cgs: Set[str] = field(default_factory=set)
    unlocked_bgm: Set[str] = field(default_factory=set)

    def is_cg_unlocked(self, cg_id: str) -> bool:
        return cg_id in self.unlocked_cgs

    def unlock_cg(self, cg_id: str) -> bool:
        """Record ``cg_id``. Returns True only the first time it is unlocked."""
        if cg_id in self.unlocked_cgs:
            return False
        self.unlocked_cgs.add(cg_id)
        return True

    @property
    def unlocked_cg_count(self) -> int:
        return len(self.unlocked_cgs)

    def cg_unlock_rate(self, total_cgs: int) -> float:
        """Fraction of ``total_cgs`` unlocked; 1.0 when there are no CGs at all."""
        if total_cgs <= 0:
            return 1.0
        return self.unlocked_cg_count / total_cgs

    def is_bgm_unlocked(self, bgm_id: str) -> bool:
        return bgm_id in self.unlocked_bgm

    def unlock_bgm(self, bgm_id: str) -> bool:
        if bgm_id in self.unlocked_bgm:
            return False
        self.unlocked_bgm.add(bgm_id)
        return True


def cg_id_from_path(asset_path: str) -> str | None:
    """Return the CG id for an asset path: its file name without extension.

    Both ``/`` and ``\\`` separators are accepted.
    """
    stem = PureWindowsPath(asset_path).stem
    return stem or None
