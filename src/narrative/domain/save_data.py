"""Snapshot of runtime state at the persistence boundary."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Set, Tuple

from narrative.core.types import AssetRef, CharacterPosition, SceneId
from narrative.domain.read_history import DialogueId

SAVE_VERSION = 1


@dataclass(slots=True)
class SavedCharacterDisplay:
    character_id: str
    sprite: AssetRef
    position: CharacterPosition = "center"


@dataclass(slots=True)
class SaveData:
    """Everything needed to resume a play session.

    ``current_scene`` is empty when the runtime had not been started.
    ``variables`` only carries integer variables.
    """

    slot: int
    version: int = SAVE_VERSION
    timestamp: int = 0
    play_time_secs: int = 0
    current_scene: SceneId = ""
    command_index: int = 0
    flags: Dict[str, bool] = field(default_factory=dict)
    variables: Dict[str, int] = field(default_factory=dict)
    read_history: Set[DialogueId] = field(default_factory=set)
    scene_stack: List[Tuple[SceneId, int]] = field(default_factory=list)
    current_background: AssetRef | None = None
    current_cg: AssetRef | None = None
    displayed_characters: Dict[str, SavedCharacterDisplay] = field(default_factory=dict)
