"""Scene and sprite transition descriptors.

The runtime never interprets these; it only hands them to the renderer.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict

from narrative.core.types import TransitionKind

_NAME_ALIASES: Dict[str, TransitionKind] = {
    "none": "none",
    "instant": "none",
    "fade": "fade",
    "fade_in": "fade",
    "fade_out": "fade",
    "fade_black": "fade",
    "fade_white": "fade_white",
    "crossfade": "crossfade",
    "dissolve": "crossfade",
    "slide_left": "slide_left",
    "slide_right": "slide_right",
    "slide_up": "slide_up",
    "slide_down": "slide_down",
    "wipe_left": "wipe_left",
    "wipe_right": "wipe_right",
    "wipe_up": "wipe_up",
    "wipe_down": "wipe_down",
}


@dataclass(frozen=True, slots=True)
class TransitionDef:
    """Visual transition kind plus its duration in seconds."""

    kind: TransitionKind = "none"
    duration: float = 0.0

    @classmethod
    def instant(cls) -> "TransitionDef":
        return cls("none", 0.0)

    @classmethod
    def quick_fade(cls) -> "TransitionDef":
        return cls("fade", 0.3)

    @classmethod
    def fade(cls) -> "TransitionDef":
        return cls("fade", 0.5)

    @classmethod
    def slow_fade(cls) -> "TransitionDef":
        return cls("fade", 1.0)

    @classmethod
    def crossfade(cls) -> "TransitionDef":
        return cls("crossfade", 0.5)

    @classmethod
    def from_name(cls, name: str, duration: float) -> "TransitionDef":
        """Build a transition from an authoring name; unknown names are instant."""
        return cls(_NAME_ALIASES.get(name, "none"), duration)

    @property
    def is_instant(self) -> bool:
        return self.kind == "none" or self.duration <= 0.0
