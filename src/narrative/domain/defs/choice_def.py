"""Player choice definitions."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .condition_def import Condition


@dataclass(frozen=True, slots=True)
class ChoiceOptionDef:
    """A selectable option, shown only when all of its conditions hold."""

    text: str
    next_scene: str
    conditions: Tuple[Condition, ...] = ()
    flags_to_set: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class ChoiceDef:
    options: Tuple[ChoiceOptionDef, ...]
    prompt: str | None = None
