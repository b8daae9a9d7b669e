"""Scenario and scene definitions consumed by the runtime."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from .command_def import ScenarioCommand
from .transition_def import TransitionDef


@dataclass(frozen=True, slots=True)
class ScenarioMetadata:
    id: str
    title: str
    description: str | None = None
    author: str | None = None
    version: str | None = None


@dataclass(frozen=True, slots=True)
class SceneDef:
    """Named, ordered command list with optional entry/exit transitions."""

    id: str
    title: str
    commands: Tuple[ScenarioCommand, ...] = ()
    entry_transition: TransitionDef | None = None
    exit_transition: TransitionDef | None = None

    @property
    def command_count(self) -> int:
        return len(self.commands)


@dataclass(frozen=True, slots=True)
class ScenarioDef:
    """Fully parsed scenario. Scenes reference each other only by id."""

    metadata: ScenarioMetadata
    start_scene: str
    scenes: Mapping[str, SceneDef] = field(default_factory=dict)
    characters: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "scenes", MappingProxyType(dict(self.scenes)))

    @classmethod
    def from_scenes(
        cls,
        metadata: ScenarioMetadata,
        start_scene: str,
        scenes: Iterable[SceneDef],
        *,
        characters: Iterable[str] = (),
    ) -> "ScenarioDef":
        """Build a scenario keyed by each scene's own id."""
        return cls(
            metadata=metadata,
            start_scene=start_scene,
            scenes={scene.id: scene for scene in scenes},
            characters=tuple(characters),
        )

    def has_scene(self, scene_id: str) -> bool:
        return scene_id in self.scenes

    def get_scene(self, scene_id: str) -> SceneDef | None:
        return self.scenes.get(scene_id)

    def get_start_scene(self) -> SceneDef | None:
        return self.get_scene(self.start_scene)
