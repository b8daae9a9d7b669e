"""Scenario command definitions.

``ScenarioCommand`` is a closed union; every dispatch site handles each
variant explicitly.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple, Union

from narrative.core.types import AssetRef, CharacterPosition
from narrative.domain.variables import VariableOperation, VariableValue

from .choice_def import ChoiceDef
from .condition_def import Condition
from .dialogue_def import DialogueDef
from .transition_def import TransitionDef


@dataclass(frozen=True, slots=True)
class DialogueCommand:
    dialogue: DialogueDef


@dataclass(frozen=True, slots=True)
class SetFlagCommand:
    flag_name: str
    value: bool


@dataclass(frozen=True, slots=True)
class SetVariableCommand:
    variable_name: str
    value: VariableValue


@dataclass(frozen=True, slots=True)
class ModifyVariableCommand:
    variable_name: str
    operation: VariableOperation


@dataclass(frozen=True, slots=True)
class IfCommand:
    condition: Condition
    then_commands: Tuple["ScenarioCommand", ...]
    else_commands: Tuple["ScenarioCommand", ...] = ()


@dataclass(frozen=True, slots=True)
class ShowChoiceCommand:
    choice: ChoiceDef


@dataclass(frozen=True, slots=True)
class JumpToSceneCommand:
    scene_id: str


@dataclass(frozen=True, slots=True)
class CallCommand:
    """Enter ``scene_id`` as a subroutine; Return resumes in ``return_scene``."""

    scene_id: str
    return_scene: str


@dataclass(frozen=True, slots=True)
class ReturnCommand:
    pass


@dataclass(frozen=True, slots=True)
class WaitCommand:
    duration: float


@dataclass(frozen=True, slots=True)
class EndCommand:
    pass


@dataclass(frozen=True, slots=True)
class ShowBackgroundCommand:
    asset: AssetRef
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class HideBackgroundCommand:
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class ShowCGCommand:
    asset: AssetRef
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class HideCGCommand:
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class ShowCharacterCommand:
    character_id: str
    sprite: AssetRef
    position: CharacterPosition = "center"
    expression: str | None = None
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class HideCharacterCommand:
    character_id: str
    transition: TransitionDef = field(default_factory=TransitionDef.instant)


@dataclass(frozen=True, slots=True)
class MoveCharacterCommand:
    character_id: str
    position: CharacterPosition
    duration: float = 0.0


@dataclass(frozen=True, slots=True)
class ChangeExpressionCommand:
    character_id: str
    expression: str


@dataclass(frozen=True, slots=True)
class ChangeSpriteCommand:
    character_id: str
    sprite: AssetRef


@dataclass(frozen=True, slots=True)
class PlayBgmCommand:
    asset: AssetRef
    volume: float = 1.0
    fade_in: float = 0.0


@dataclass(frozen=True, slots=True)
class StopBgmCommand:
    fade_out: float = 0.0


@dataclass(frozen=True, slots=True)
class PlaySeCommand:
    asset: AssetRef
    volume: float = 1.0


@dataclass(frozen=True, slots=True)
class PlayVoiceCommand:
    asset: AssetRef
    volume: float = 1.0


PresentationCommand = Union[
    ShowBackgroundCommand,
    HideBackgroundCommand,
    ShowCGCommand,
    HideCGCommand,
    ShowCharacterCommand,
    HideCharacterCommand,
    MoveCharacterCommand,
    ChangeExpressionCommand,
    ChangeSpriteCommand,
]

AudioCommand = Union[PlayBgmCommand, StopBgmCommand, PlaySeCommand, PlayVoiceCommand]

ScenarioCommand = Union[
    DialogueCommand,
    SetFlagCommand,
    SetVariableCommand,
    ModifyVariableCommand,
    IfCommand,
    ShowChoiceCommand,
    JumpToSceneCommand,
    CallCommand,
    ReturnCommand,
    WaitCommand,
    EndCommand,
    PresentationCommand,
    AudioCommand,
]

# Commands that move the execution position; not allowed inside If branches.
FLOW_COMMANDS: Tuple[type, ...] = (JumpToSceneCommand, CallCommand, ReturnCommand, EndCommand)

PRESENTATION_COMMANDS: Tuple[type, ...] = (
    ShowBackgroundCommand,
    HideBackgroundCommand,
    ShowCGCommand,
    HideCGCommand,
    ShowCharacterCommand,
    HideCharacterCommand,
    MoveCharacterCommand,
    ChangeExpressionCommand,
    ChangeSpriteCommand,
)

AUDIO_COMMANDS: Tuple[type, ...] = (PlayBgmCommand, StopBgmCommand, PlaySeCommand, PlayVoiceCommand)
