"""Step-wise execution of a parsed scenario."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from narrative.data.config import RuntimeConfig
from narrative.domain.backlog import Backlog, BacklogEntry
from narrative.domain.conditions import evaluate_condition
from narrative.domain.defs import (
    AUDIO_COMMANDS,
    FLOW_COMMANDS,
    PRESENTATION_COMMANDS,
    CallCommand,
    ChangeExpressionCommand,
    ChangeSpriteCommand,
    ChoiceOptionDef,
    Condition,
    DialogueCommand,
    EndCommand,
    HideBackgroundCommand,
    HideCGCommand,
    HideCharacterCommand,
    IfCommand,
    JumpToSceneCommand,
    ModifyVariableCommand,
    MoveCharacterCommand,
    ReturnCommand,
    ScenarioCommand,
    ScenarioDef,
    SceneDef,
    SetFlagCommand,
    SetVariableCommand,
    ShowBackgroundCommand,
    ShowCGCommand,
    ShowCharacterCommand,
    ShowChoiceCommand,
    Speaker,
    TransitionDef,
    WaitCommand,
)
from narrative.domain.display_state import DisplayedCharacter
from narrative.domain.errors import VariableOperationError
from narrative.domain.flag_store import FlagStore
from narrative.domain.read_history import ReadHistory
from narrative.domain.save_data import SAVE_VERSION, SaveData, SavedCharacterDisplay
from narrative.domain.unlocks import UnlockData, cg_id_from_path
from narrative.domain.variable_store import VariableStore
from narrative.domain.variables import (
    VariableOperation,
    apply_operation,
    default_value_for,
)
from narrative.services.errors import ScenarioExecutionError

logger = logging.getLogger(__name__)

MAX_CALL_STACK_DEPTH = 100

SceneFrame = Tuple[str, int]


@dataclass(slots=True)
class CommandResult:
    """Base class for the outcome of executing one command."""


@dataclass(slots=True)
class ContinueResult(CommandResult):
    """The driver may advance to the next command."""


@dataclass(slots=True)
class SceneChangedResult(CommandResult):
    """The position moved to another scene; the new command index is already set."""

    exit_transition: TransitionDef | None = None
    entry_transition: TransitionDef | None = None


@dataclass(slots=True)
class ShowChoicesResult(CommandResult):
    """Options whose conditions currently hold, in authored order."""

    options: Tuple[ChoiceOptionDef, ...]


@dataclass(slots=True)
class WaitResult(CommandResult):
    seconds: float


@dataclass(slots=True)
class EndResult(CommandResult):
    pass


class ScenarioRuntime:
    """Executes a scenario one command at a time.

    The runtime owns every piece of mutable play state: the current position,
    the call stack, flags, variables, read history, backlog and what is on
    screen. It never advances on its own; the driver calls
    ``execute_current_command`` and then ``advance_command`` or
    ``select_choice`` depending on the result.

    Unlocks are the exception: they outlive any single playthrough, so the
    host may pass in a shared ``UnlockData`` and persist it when
    ``unlocks_changed`` reports new entries.
    """

    def __init__(
        self,
        scenario: ScenarioDef,
        *,
        config: RuntimeConfig | None = None,
        unlocks: UnlockData | None = None,
    ) -> None:
        config = config or RuntimeConfig()
        self._scenario = scenario
        self._current_scene: str | None = None
        self._command_index = 0
        self._scene_stack: List[SceneFrame] = []
        self._flags = FlagStore()
        self._variables = VariableStore()
        self._read_history = ReadHistory()
        self._backlog = Backlog(max_entries=config.backlog_max_entries)
        self._current_background: str | None = None
        self._current_cg: str | None = None
        self._displayed_characters: Dict[str, DisplayedCharacter] = {}
        self._displayed_characters_dirty = False
        self._unlocks = unlocks if unlocks is not None else UnlockData()
        self._unlocks_dirty = False

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def scenario(self) -> ScenarioDef:
        return self._scenario

    @property
    def current_scene(self) -> str | None:
        return self._current_scene

    @property
    def command_index(self) -> int:
        return self._command_index

    @property
    def scene_stack(self) -> Tuple[SceneFrame, ...]:
        return tuple(self._scene_stack)

    @property
    def flags(self) -> FlagStore:
        return self._flags

    @property
    def variables(self) -> VariableStore:
        return self._variables

    @property
    def read_history(self) -> ReadHistory:
        return self._read_history

    @property
    def backlog(self) -> Backlog:
        return self._backlog

    @property
    def current_background(self) -> str | None:
        return self._current_background

    @property
    def current_cg(self) -> str | None:
        return self._current_cg

    @property
    def displayed_characters(self) -> Mapping[str, DisplayedCharacter]:
        return MappingProxyType(self._displayed_characters)

    def displayed_characters_changed(self) -> bool:
        """Return True once after the displayed characters changed."""
        changed = self._displayed_characters_dirty
        self._displayed_characters_dirty = False
        return changed

    @property
    def unlocks(self) -> UnlockData:
        return self._unlocks

    def unlocks_changed(self) -> bool:
        """Return True once after something was unlocked for the first time."""
        changed = self._unlocks_dirty
        self._unlocks_dirty = False
        return changed

    # ------------------------------------------------------------------
    # Lifecycle and navigation
    # ------------------------------------------------------------------
    def start(self) -> None:
        start_scene = self._scenario.start_scene
        if not self._scenario.has_scene(start_scene):
            raise ScenarioExecutionError(f"Start scene '{start_scene}' not found in scenario")
        self._current_scene = start_scene
        self._command_index = 0
        logger.debug("Started scenario '%s' at scene '%s'", self._scenario.metadata.id, start_scene)

    def get_current_scene(self) -> SceneDef | None:
        if self._current_scene is None:
            return None
        return self._scenario.get_scene(self._current_scene)

    def get_current_command(self) -> ScenarioCommand | None:
        scene = self.get_current_scene()
        if scene is None or not 0 <= self._command_index < scene.command_count:
            return None
        return scene.commands[self._command_index]

    def advance_command(self) -> bool:
        """Move to the next command. Returns False when already past the end."""
        scene = self.get_current_scene()
        if scene is None:
            return False
        if self._command_index < scene.command_count:
            self._command_index += 1
            return True
        return False

    def is_ended(self) -> bool:
        command = self.get_current_command()
        return command is None or isinstance(command, EndCommand)

    def jump_to_scene(self, scene_id: str) -> SceneChangedResult:
        """Move to the first command of ``scene_id``."""
        target = self._scenario.get_scene(scene_id)
        if target is None:
            raise ScenarioExecutionError(f"Scene '{scene_id}' not found")
        leaving = self.get_current_scene()
        exit_transition = leaving.exit_transition if leaving is not None else None
        logger.debug("Scene change: %s -> %s", self._current_scene, scene_id)
        self._current_scene = scene_id
        self._command_index = 0
        return SceneChangedResult(
            exit_transition=exit_transition,
            entry_transition=target.entry_transition,
        )

    def select_choice(self, choice_index: int) -> SceneChangedResult:
        """Apply the chosen option of the current ShowChoice and jump to its scene.

        ``choice_index`` refers to the authored option list, not the filtered
        one returned by ``execute_current_command``.
        """
        command = self.get_current_command()
        if command is None:
            raise ScenarioExecutionError("No command at current position")
        if not isinstance(command, ShowChoiceCommand):
            raise ScenarioExecutionError("Current command is not a choice")
        options = command.choice.options
        if not 0 <= choice_index < len(options):
            raise ScenarioExecutionError(
                f"Invalid choice index: {choice_index} (max: {len(options)})"
            )
        selected = options[choice_index]
        for flag_name in selected.flags_to_set:
            self._flags.set(flag_name, True)
        return self.jump_to_scene(selected.next_scene)

    # ------------------------------------------------------------------
    # Execution
    # ------------------------------------------------------------------
    def execute_current_command(self) -> CommandResult:
        command = self.get_current_command()
        if command is None:
            raise ScenarioExecutionError("No command at current position")

        if isinstance(command, DialogueCommand):
            return ContinueResult()
        if isinstance(command, SetFlagCommand):
            self._flags.set(command.flag_name, command.value)
            return ContinueResult()
        if isinstance(command, SetVariableCommand):
            self._variables.set(command.variable_name, command.value)
            return ContinueResult()
        if isinstance(command, ModifyVariableCommand):
            self._modify_variable(command.variable_name, command.operation)
            return ContinueResult()
        if isinstance(command, IfCommand):
            self._execute_branch(command)
            return ContinueResult()
        if isinstance(command, ShowChoiceCommand):
            return self._show_choices(command)
        if isinstance(command, JumpToSceneCommand):
            return self.jump_to_scene(command.scene_id)
        if isinstance(command, CallCommand):
            return self._call(command)
        if isinstance(command, ReturnCommand):
            return self._return()
        if isinstance(command, WaitCommand):
            return WaitResult(seconds=command.duration)
        if isinstance(command, EndCommand):
            return EndResult()
        if isinstance(command, AUDIO_COMMANDS):
            return ContinueResult()
        if isinstance(command, PRESENTATION_COMMANDS):
            self._apply_presentation(command)
            return ContinueResult()
        raise TypeError(f"Unknown scenario command: {command!r}")

    def evaluate_condition(self, condition: Condition) -> bool:
        """Evaluate ``condition`` against the current flags and variables."""
        return evaluate_condition(condition, self._flags.get, self._variables.get)

    def _modify_variable(self, variable_name: str, operation: VariableOperation) -> None:
        current = self._variables.get(variable_name)
        if current is None:
            current = default_value_for(operation)
        try:
            updated = apply_operation(operation, current)
        except VariableOperationError as exc:
            raise type(exc)(
                f"Failed to apply operation to variable '{variable_name}': {exc}"
            ) from exc
        self._variables.set(variable_name, updated)

    def _execute_branch(self, command: IfCommand) -> None:
        branch = command.then_commands if self.evaluate_condition(command.condition) else command.else_commands
        for inner in branch:
            self._execute_inline(inner)

    def _execute_inline(self, command: ScenarioCommand) -> None:
        """Run a command nested in an If branch without moving the position."""
        if isinstance(command, SetFlagCommand):
            self._flags.set(command.flag_name, command.value)
        elif isinstance(command, SetVariableCommand):
            self._variables.set(command.variable_name, command.value)
        elif isinstance(command, ModifyVariableCommand):
            self._modify_variable(command.variable_name, command.operation)
        elif isinstance(command, IfCommand):
            self._execute_branch(command)
        elif isinstance(command, FLOW_COMMANDS):
            raise ScenarioExecutionError(
                f"Command {type(command).__name__} cannot be executed inside If/Else block. "
                "Only SetFlag, SetVariable, ModifyVariable, and nested If commands are allowed."
            )
        else:
            logger.warning(
                "Command %s in If/Else block has no effect in inline execution",
                type(command).__name__,
            )

    def _show_choices(self, command: ShowChoiceCommand) -> ShowChoicesResult:
        available = tuple(
            option
            for option in command.choice.options
            if all(self.evaluate_condition(condition) for condition in option.conditions)
        )
        if not available:
            raise ScenarioExecutionError(
                "No available choices after condition filtering. "
                "At least one choice must be available."
            )
        return ShowChoicesResult(options=available)

    def _call(self, command: CallCommand) -> SceneChangedResult:
        if not self._scenario.has_scene(command.return_scene):
            raise ScenarioExecutionError(
                f"Return scene '{command.return_scene}' not found in Call command"
            )
        if len(self._scene_stack) >= MAX_CALL_STACK_DEPTH:
            raise ScenarioExecutionError(
                f"Call stack depth limit exceeded: maximum depth is {MAX_CALL_STACK_DEPTH}. "
                "This may indicate infinite recursion in your scenario."
            )
        # Checked before pushing so a failed call leaves the stack untouched.
        if not self._scenario.has_scene(command.scene_id):
            raise ScenarioExecutionError(f"Scene '{command.scene_id}' not found")
        self._scene_stack.append((command.return_scene, self._command_index + 1))
        logger.debug(
            "Call %s (depth %d, resume %s:%d)",
            command.scene_id,
            len(self._scene_stack),
            command.return_scene,
            self._command_index + 1,
        )
        return self.jump_to_scene(command.scene_id)

    def _return(self) -> SceneChangedResult:
        if not self._scene_stack:
            raise ScenarioExecutionError(
                "Return command executed but scene_stack is empty. "
                "Make sure Call command was used to enter this subroutine."
            )
        scene_id, resume_index = self._scene_stack.pop()
        result = self.jump_to_scene(scene_id)
        self._command_index = resume_index
        logger.debug("Return to %s:%d (depth %d)", scene_id, resume_index, len(self._scene_stack))
        return result

    def _apply_presentation(self, command: ScenarioCommand) -> None:
        if isinstance(command, ShowBackgroundCommand):
            logger.info("ShowBackground: asset=%s", command.asset)
            self._current_background = command.asset
        elif isinstance(command, HideBackgroundCommand):
            logger.info("HideBackground")
            self._current_background = None
        elif isinstance(command, ShowCGCommand):
            logger.info("ShowCG: asset=%s", command.asset)
            self._current_cg = command.asset
            self._unlock_cg(command.asset)
        elif isinstance(command, HideCGCommand):
            logger.info("HideCG")
            self._current_cg = None
        elif isinstance(command, ShowCharacterCommand):
            logger.info(
                "ShowCharacter: id=%s, sprite=%s, position=%s",
                command.character_id,
                command.sprite,
                command.position,
            )
            self._displayed_characters[command.character_id] = DisplayedCharacter(
                character_id=command.character_id,
                sprite=command.sprite,
                position=command.position,
                transition=command.transition,
            )
            self._displayed_characters_dirty = True
        elif isinstance(command, HideCharacterCommand):
            logger.info("HideCharacter: id=%s", command.character_id)
            self._displayed_characters.pop(command.character_id, None)
            self._displayed_characters_dirty = True
        elif isinstance(command, MoveCharacterCommand):
            character = self._displayed_characters.get(command.character_id)
            if character is None:
                logger.warning(
                    "MoveCharacter: character '%s' not currently displayed, ignoring",
                    command.character_id,
                )
                return
            logger.info("MoveCharacter: id=%s, position=%s", command.character_id, command.position)
            character.position = command.position
            self._displayed_characters_dirty = True
        elif isinstance(command, ChangeSpriteCommand):
            character = self._displayed_characters.get(command.character_id)
            if character is None:
                logger.warning(
                    "ChangeSprite: character '%s' not currently displayed, ignoring",
                    command.character_id,
                )
                return
            logger.info("ChangeSprite: id=%s, sprite=%s", command.character_id, command.sprite)
            character.sprite = command.sprite
            self._displayed_characters_dirty = True
        elif isinstance(command, ChangeExpressionCommand):
            # Expressions are resolved by the renderer.
            pass
        else:
            raise TypeError(f"Unknown scenario command: {command!r}")

    def _unlock_cg(self, asset: str) -> None:
        cg_id = cg_id_from_path(asset)
        if cg_id is None:
            logger.debug("Could not extract CG id from path: %s", asset)
            return
        if self._unlocks.unlock_cg(cg_id):
            logger.info("CG unlocked: %s", cg_id)
            self._unlocks_dirty = True

    # ------------------------------------------------------------------
    # Backlog and read history hooks
    # ------------------------------------------------------------------
    def add_to_backlog(self, scene_id: str, command_index: int, speaker: Speaker, text: str) -> None:
        """Record a displayed line. Call this when the line is actually shown."""
        self._backlog.add_entry(BacklogEntry(scene_id, command_index, speaker, text))

    def mark_read(self, scene_id: str, command_index: int) -> None:
        self._read_history.mark_read(scene_id, command_index)

    def is_read(self, scene_id: str, command_index: int) -> bool:
        return self._read_history.is_read(scene_id, command_index)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_save_data(self, slot: int) -> SaveData:
        """Snapshot the current state.

        ``timestamp`` and ``play_time_secs`` are left at zero for the caller
        to fill in. Only integer variables are carried over.
        """
        return SaveData(
            slot=slot,
            version=SAVE_VERSION,
            current_scene=self._current_scene or "",
            command_index=self._command_index,
            flags=self._flags.to_save_format(),
            variables=self._variables.to_save_format(),
            read_history=self._read_history.to_save_format(),
            scene_stack=list(self._scene_stack),
            current_background=self._current_background,
            current_cg=self._current_cg,
            displayed_characters={
                character_id: SavedCharacterDisplay(
                    character_id=character.character_id,
                    sprite=character.sprite,
                    position=character.position,
                )
                for character_id, character in self._displayed_characters.items()
            },
        )

    def from_save_data(self, data: SaveData) -> None:
        """Replace all runtime state with the contents of ``data``.

        Nothing is changed when validation fails.
        """
        if data.current_scene and not self._scenario.has_scene(data.current_scene):
            raise ScenarioExecutionError(
                f"Save data references non-existent scene: {data.current_scene}"
            )
        if data.command_index < 0:
            raise ScenarioExecutionError(
                f"Save data has a negative command index: {data.command_index}"
            )
        if len(data.scene_stack) > MAX_CALL_STACK_DEPTH:
            raise ScenarioExecutionError(
                f"Save data scene stack exceeds maximum depth of {MAX_CALL_STACK_DEPTH}"
            )
        for scene_id, resume_index in data.scene_stack:
            if not self._scenario.has_scene(scene_id):
                raise ScenarioExecutionError(
                    f"Save data references non-existent scene: {scene_id}"
                )
            if resume_index < 0:
                raise ScenarioExecutionError(
                    f"Save data scene stack has a negative command index: {scene_id}:{resume_index}"
                )

        self._current_scene = data.current_scene or None
        self._command_index = data.command_index
        self._flags = FlagStore.from_save_format(data.flags)
        self._variables = VariableStore.from_save_format(data.variables)
        self._read_history = ReadHistory.from_save_format(data.read_history)
        self._scene_stack = [(scene_id, index) for scene_id, index in data.scene_stack]
        self._current_background = data.current_background
        self._current_cg = data.current_cg
        self._displayed_characters = {
            character_id: DisplayedCharacter(
                character_id=saved.character_id,
                sprite=saved.sprite,
                position=saved.position,
                transition=TransitionDef.instant(),
            )
            for character_id, saved in data.displayed_characters.items()
        }
        self._displayed_characters_dirty = True
        logger.debug(
            "Restored save slot %d at %s:%d", data.slot, self._current_scene, self._command_index
        )
