"""Boolean story flags."""
from __future__ import annotations

from typing import Dict, Iterator, Mapping

from narrative.core.types import FlagId


class FlagStore:
    """Maps flag ids to booleans. A flag that was never set reads as False."""

    __slots__ = ("_flags",)

    def __init__(self, flags: Mapping[FlagId, bool] | None = None) -> None:
        self._flags: Dict[FlagId, bool] = dict(flags) if flags else {}

    def get(self, flag_id: FlagId) -> bool:
        return self._flags.get(flag_id, False)

    def is_set(self, flag_id: FlagId) -> bool:
        """Return True when the flag is present and true."""
        return self.get(flag_id)

    def set(self, flag_id: FlagId, value: bool) -> None:
        self._flags[flag_id] = value

    def toggle(self, flag_id: FlagId) -> bool:
        """Flip the flag and return the new value."""
        value = not self.get(flag_id)
        self._flags[flag_id] = value
        return value

    def clear(self) -> None:
        self._flags.clear()

    def __len__(self) -> int:
        return len(self._flags)

    def __contains__(self, flag_id: object) -> bool:
        return flag_id in self._flags

    def __iter__(self) -> Iterator[FlagId]:
        return iter(self._flags)

    def to_save_format(self) -> Dict[FlagId, bool]:
        return dict(self._flags)

    @classmethod
    def from_save_format(cls, flags: Mapping[FlagId, bool]) -> "FlagStore":
        return cls(flags)
