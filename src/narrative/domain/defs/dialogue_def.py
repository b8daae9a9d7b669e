"""Dialogue lines and their speakers."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from narrative.core.types import SpeakerKind


@dataclass(frozen=True, slots=True)
class Speaker:
    """Who says a line: a character, the narrator or the system."""

    kind: SpeakerKind = "narrator"
    character_id: str | None = None

    @classmethod
    def character(cls, character_id: str) -> "Speaker":
        return cls("character", character_id)

    @classmethod
    def narrator(cls) -> "Speaker":
        return cls("narrator")

    @classmethod
    def system(cls) -> "Speaker":
        return cls("system")

    @classmethod
    def parse(cls, name: str) -> "Speaker":
        if name in ("", "narrator", "Narrator"):
            return cls.narrator()
        if name in ("system", "System"):
            return cls.system()
        return cls.character(name)

    @property
    def display_name(self) -> str:
        if self.kind == "character" and self.character_id:
            return self.character_id
        return "System" if self.kind == "system" else "Narrator"


@dataclass(frozen=True, slots=True)
class DialogueDef:
    """A single displayed line. ``expression`` and ``animation`` are opaque."""

    speaker: Speaker
    text: str
    expression: str | None = None
    animation: Mapping[str, Any] | None = None

    @classmethod
    def narration(cls, text: str) -> "DialogueDef":
        return cls(Speaker.narrator(), text)

    @classmethod
    def spoken(cls, character_id: str, text: str) -> "DialogueDef":
        return cls(Speaker.character(character_id), text)
