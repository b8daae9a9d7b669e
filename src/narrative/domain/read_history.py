"""Tracks which dialogue lines the player has already seen."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Set

from narrative.core.types import SceneId


@dataclass(frozen=True, slots=True, order=True)
class DialogueId:
    """Identifies one dialogue command by scene and command index."""

    scene_id: SceneId
    command_index: int


class ReadHistory:
    __slots__ = ("_read",)

    def __init__(self, read: Iterable[DialogueId] = ()) -> None:
        self._read: Set[DialogueId] = set(read)

    def mark_read(self, scene_id: SceneId, command_index: int) -> None:
        self._read.add(DialogueId(scene_id, command_index))

    def is_read(self, scene_id: SceneId, command_index: int) -> bool:
        return DialogueId(scene_id, command_index) in self._read

    @property
    def read_count(self) -> int:
        return len(self._read)

    def clear(self) -> None:
        self._read.clear()

    def __iter__(self) -> Iterator[DialogueId]:
        return iter(self._read)

    def __len__(self) -> int:
        return len(self._read)

    def __contains__(self, dialogue_id: object) -> bool:
        return dialogue_id in self._read

    def to_save_format(self) -> Set[DialogueId]:
        return set(self._read)

    @classmethod
    def from_save_format(cls, read: Iterable[DialogueId]) -> "ReadHistory":
        return cls(read)
