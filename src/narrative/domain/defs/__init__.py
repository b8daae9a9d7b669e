"""Scenario definition exports."""

from .choice_def import ChoiceDef, ChoiceOptionDef
from .command_def import (
    AUDIO_COMMANDS,
    FLOW_COMMANDS,
    PRESENTATION_COMMANDS,
    CallCommand,
    ChangeExpressionCommand,
    ChangeSpriteCommand,
    DialogueCommand,
    EndCommand,
    HideBackgroundCommand,
    HideCGCommand,
    HideCharacterCommand,
    IfCommand,
    JumpToSceneCommand,
    ModifyVariableCommand,
    MoveCharacterCommand,
    PlayBgmCommand,
    PlaySeCommand,
    PlayVoiceCommand,
    ReturnCommand,
    ScenarioCommand,
    SetFlagCommand,
    SetVariableCommand,
    ShowBackgroundCommand,
    ShowCGCommand,
    ShowCharacterCommand,
    ShowChoiceCommand,
    StopBgmCommand,
    WaitCommand,
)
from .condition_def import (
    AndCondition,
    Condition,
    ConstantCondition,
    FlagCondition,
    NotCondition,
    OrCondition,
    VariableCondition,
)
from .dialogue_def import DialogueDef, Speaker
from .scenario_def import ScenarioDef, ScenarioMetadata, SceneDef
from .transition_def import TransitionDef

__all__ = [
    "AUDIO_COMMANDS",
    "FLOW_COMMANDS",
    "PRESENTATION_COMMANDS",
    "AndCondition",
    "CallCommand",
    "ChangeExpressionCommand",
    "ChangeSpriteCommand",
    "ChoiceDef",
    "ChoiceOptionDef",
    "Condition",
    "ConstantCondition",
    "DialogueCommand",
    "DialogueDef",
    "EndCommand",
    "FlagCondition",
    "HideBackgroundCommand",
    "HideCGCommand",
    "HideCharacterCommand",
    "IfCommand",
    "JumpToSceneCommand",
    "ModifyVariableCommand",
    "MoveCharacterCommand",
    "NotCondition",
    "OrCondition",
    "PlayBgmCommand",
    "PlaySeCommand",
    "PlayVoiceCommand",
    "ReturnCommand",
    "ScenarioCommand",
    "ScenarioDef",
    "ScenarioMetadata",
    "SceneDef",
    "SetFlagCommand",
    "SetVariableCommand",
    "ShowBackgroundCommand",
    "ShowCGCommand",
    "ShowCharacterCommand",
    "ShowChoiceCommand",
    "Speaker",
    "StopBgmCommand",
    "TransitionDef",
    "VariableCondition",
    "WaitCommand",
]
