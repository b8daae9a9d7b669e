"""Dialogue backlog shown to the player for scrolling back through text."""
from __future__ import annotations

from collections import OrderedDict
from itertools import islice
from dataclasses import dataclass
from typing import Iterator, Tuple

from narrative.core.types import SceneId
from narrative.domain.defs import Speaker
from narrative.domain.read_history import DialogueId


@dataclass(frozen=True, slots=True)
class BacklogEntry:
    scene_id: SceneId
    command_index: int
    speaker: Speaker
    text: str

    @property
    def dialogue_id(self) -> DialogueId:
        return DialogueId(self.scene_id, self.command_index)

    @property
    def speaker_name(self) -> str:
        return self.speaker.display_name


class Backlog:
    """Ordered, de-duplicated record of displayed dialogue.

    Each dialogue line appears at most once. When ``max_entries`` is positive
    the oldest entries are evicted to stay within it; zero means unlimited.
    """

    __slots__ = ("_entries", "_max_entries")

    def __init__(self, max_entries: int = 0) -> None:
        if max_entries < 0:
            raise ValueError("max_entries cannot be negative.")
        self._entries: "OrderedDict[DialogueId, BacklogEntry]" = OrderedDict()
        self._max_entries = max_entries

    @property
    def max_entries(self) -> int:
        return self._max_entries

    def add_entry(self, entry: BacklogEntry) -> None:
        key = entry.dialogue_id
        if key in self._entries:
            return
        self._entries[key] = entry
        if self._max_entries > 0:
            while len(self._entries) > self._max_entries:
                self._entries.popitem(last=False)

    def entries(self) -> Tuple[BacklogEntry, ...]:
        """Return entries from oldest to newest."""
        return tuple(self._entries.values())

    def entries_reversed(self) -> Iterator[BacklogEntry]:
        """Iterate entries from newest to oldest."""
        return reversed(self._entries.values())

    def get(self, index: int) -> BacklogEntry | None:
        if not 0 <= index < len(self._entries):
            return None
        return next(islice(self._entries.values(), index, None))

    def contains(self, dialogue_id: DialogueId) -> bool:
        return dialogue_id in self._entries

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[BacklogEntry]:
        return iter(self._entries.values())
