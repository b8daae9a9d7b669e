"""What the runtime believes is currently on screen."""
from __future__ import annotations

from dataclasses import dataclass, field

from narrative.core.types import AssetRef, CharacterPosition
from narrative.domain.defs import TransitionDef


@dataclass(slots=True)
class DisplayedCharacter:
    """A character sprite currently shown by ShowCharacter."""

    character_id: str
    sprite: AssetRef
    position: CharacterPosition = "center"
    transition: TransitionDef = field(default_factory=TransitionDef.instant)
