"""Shared type aliases for the core and domain layers."""
from typing import Literal

SceneId = str
FlagId = str
VariableId = str
AssetRef = str

CompareOp = Literal[
    "equal",
    "not_equal",
    "greater_than",
    "greater_or_equal",
    "less_than",
    "less_or_equal",
]

TransitionKind = Literal[
    "none",
    "fade",
    "fade_white",
    "crossfade",
    "dissolve",
    "slide_left",
    "slide_right",
    "slide_up",
    "slide_down",
    "wipe_left",
    "wipe_right",
    "wipe_up",
    "wipe_down",
]

SpeakerKind = Literal["character", "narrator", "system"]

CharacterPosition = Literal["far_left", "left", "center", "right", "far_right"]

__all__ = [
    "AssetRef",
    "CharacterPosition",
    "CompareOp",
    "FlagId",
    "SceneId",
    "SpeakerKind",
    "TransitionKind",
    "VariableId",
]
