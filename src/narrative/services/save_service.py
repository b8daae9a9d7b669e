"""Serialization helpers for manual save/load."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Set, Tuple, get_args

from narrative.core.types import CharacterPosition
from narrative.domain.defs import ScenarioDef
from narrative.domain.read_history import DialogueId
from narrative.domain.save_data import SAVE_VERSION, SaveData, SavedCharacterDisplay
from narrative.services.errors import SaveLoadError
from narrative.services.scenario_runtime import MAX_CALL_STACK_DEPTH

SavePayload = Dict[str, Any]
_VALID_POSITIONS: tuple[str, ...] = get_args(CharacterPosition)


class SaveService:
    """Converts SaveData to/from a validated, versioned JSON-safe payload.

    When constructed with a scenario, scene references in the payload are
    checked against it on load.
    """

    SAVE_VERSION = SAVE_VERSION

    def __init__(self, scenario: ScenarioDef | None = None) -> None:
        self._scenario = scenario

    def serialize(self, data: SaveData) -> SavePayload:
        """Return a JSON-serializable payload for disk persistence."""
        return {
            "save_version": self.SAVE_VERSION,
            "metadata": self._build_metadata(data),
            "state": self._serialize_state(data),
        }

    def deserialize(self, payload: Mapping[str, Any]) -> SaveData:
        """Rebuild SaveData from a persisted payload."""
        if not isinstance(payload, Mapping):
            raise SaveLoadError("Save data must be a JSON object.")
        version = payload.get("save_version")
        if version != self.SAVE_VERSION:
            raise SaveLoadError(f"Unsupported save version: {version!r}.")
        state = payload.get("state")
        if not isinstance(state, Mapping):
            raise SaveLoadError("Save data is missing required sections.")

        current_scene = self._require_str(state.get("current_scene"), "state.current_scene")
        if current_scene:
            self._validate_scene(current_scene, "state.current_scene")

        return SaveData(
            slot=self._require_int(state.get("slot"), "state.slot"),
            version=self.SAVE_VERSION,
            timestamp=self._coerce_non_negative_int(state.get("timestamp"), "state.timestamp", default=0),
            play_time_secs=self._coerce_non_negative_int(
                state.get("play_time_secs"), "state.play_time_secs", default=0
            ),
            current_scene=current_scene,
            command_index=self._coerce_non_negative_int(
                state.get("command_index"), "state.command_index", default=0
            ),
            flags=self._coerce_bool_dict(state.get("flags"), "state.flags"),
            variables=self._coerce_int_dict(state.get("variables"), "state.variables"),
            read_history=self._coerce_read_history(state.get("read_history")),
            scene_stack=self._coerce_scene_stack(state.get("scene_stack")),
            current_background=self._coerce_optional_str(
                state.get("current_background"), "state.current_background"
            ),
            current_cg=self._coerce_optional_str(state.get("current_cg"), "state.current_cg"),
            displayed_characters=self._coerce_displayed_characters(state.get("displayed_characters")),
        )

    def _build_metadata(self, data: SaveData) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {
            "slot": data.slot,
            "current_scene": data.current_scene,
            "play_time_secs": data.play_time_secs,
            "saved_at": datetime.now(timezone.utc).isoformat(),
        }
        if self._scenario is not None:
            metadata["scenario_id"] = self._scenario.metadata.id
            metadata["scenario_title"] = self._scenario.metadata.title
            scene = self._scenario.get_scene(data.current_scene) if data.current_scene else None
            if scene is not None:
                metadata["scene_title"] = scene.title
        return metadata

    def _serialize_state(self, data: SaveData) -> Dict[str, Any]:
        # Stable order across saves.
        read_history = [
            {"scene_id": entry.scene_id, "command_index": entry.command_index}
            for entry in sorted(data.read_history)
        ]
        return {
            "slot": data.slot,
            "timestamp": data.timestamp,
            "play_time_secs": data.play_time_secs,
            "current_scene": data.current_scene,
            "command_index": data.command_index,
            "flags": dict(data.flags),
            "variables": dict(data.variables),
            "read_history": read_history,
            "scene_stack": [
                {"scene_id": scene_id, "command_index": index} for scene_id, index in data.scene_stack
            ],
            "current_background": data.current_background,
            "current_cg": data.current_cg,
            "displayed_characters": {
                character_id: {
                    "character_id": saved.character_id,
                    "sprite": saved.sprite,
                    "position": saved.position,
                }
                for character_id, saved in data.displayed_characters.items()
            },
        }

    def _coerce_read_history(self, value: Any) -> Set[DialogueId]:
        if value is None:
            return set()
        if not isinstance(value, list):
            raise SaveLoadError("state.read_history must be a list.")
        result: Set[DialogueId] = set()
        for index, entry in enumerate(value):
            scene_id, command_index = self._coerce_position(entry, f"state.read_history[{index}]")
            result.add(DialogueId(scene_id, command_index))
        return result

    def _coerce_scene_stack(self, value: Any) -> List[Tuple[str, int]]:
        if value is None:
            return []
        if not isinstance(value, list):
            raise SaveLoadError("state.scene_stack must be a list.")
        if len(value) > MAX_CALL_STACK_DEPTH:
            raise SaveLoadError(
                f"state.scene_stack cannot be deeper than {MAX_CALL_STACK_DEPTH} frames."
            )
        frames: List[Tuple[str, int]] = []
        for index, entry in enumerate(value):
            context = f"state.scene_stack[{index}]"
            scene_id, command_index = self._coerce_position(entry, context)
            self._validate_scene(scene_id, context)
            frames.append((scene_id, command_index))
        return frames

    def _coerce_position(self, value: Any, context: str) -> Tuple[str, int]:
        mapping = self._require_dict(value, context)
        scene_id = self._require_str(mapping.get("scene_id"), f"{context}.scene_id")
        command_index = self._require_int(mapping.get("command_index"), f"{context}.command_index")
        if command_index < 0:
            raise SaveLoadError(f"{context}.command_index must be a non-negative integer.")
        return scene_id, command_index

    def _coerce_displayed_characters(self, value: Any) -> Dict[str, SavedCharacterDisplay]:
        if value is None:
            return {}
        mapping = self._require_dict(value, "state.displayed_characters")
        result: Dict[str, SavedCharacterDisplay] = {}
        for key, entry in mapping.items():
            context = f"state.displayed_characters[{key}]"
            entry_map = self._require_dict(entry, context)
            position = entry_map.get("position", "center")
            if position not in _VALID_POSITIONS:
                raise SaveLoadError(f"{context}.position must be one of {list(_VALID_POSITIONS)}.")
            result[key] = SavedCharacterDisplay(
                character_id=self._require_str(entry_map.get("character_id"), f"{context}.character_id"),
                sprite=self._require_str(entry_map.get("sprite"), f"{context}.sprite"),
                position=position,
            )
        return result

    def _validate_scene(self, scene_id: str, context: str) -> None:
        if self._scenario is None:
            return
        if not self._scenario.has_scene(scene_id):
            raise SaveLoadError(f"{context} references unknown scene '{scene_id}'.")

    def _coerce_bool_dict(self, value: Any, context: str) -> Dict[str, bool]:
        if value is None:
            return {}
        mapping = self._require_dict(value, context)
        result: Dict[str, bool] = {}
        for key, entry in mapping.items():
            if not isinstance(entry, bool):
                raise SaveLoadError(f"{context}.{key} must be a boolean.")
            result[key] = entry
        return result

    def _coerce_int_dict(self, value: Any, context: str) -> Dict[str, int]:
        if value is None:
            return {}
        mapping = self._require_dict(value, context)
        result: Dict[str, int] = {}
        for key, entry in mapping.items():
            result[key] = self._require_int(entry, f"{context}.{key}")
        return result

    def _coerce_non_negative_int(self, value: Any, context: str, *, default: int) -> int:
        if value is None:
            return default
        value_int = self._require_int(value, context)
        if value_int < 0:
            raise SaveLoadError(f"{context} must be a non-negative integer.")
        return value_int

    def _coerce_optional_str(self, value: Any, context: str) -> str | None:
        if value is None:
            return None
        return self._require_str(value, context)

    @staticmethod
    def _require_str(value: Any, context: str) -> str:
        if not isinstance(value, str):
            raise SaveLoadError(f"{context} must be a string.")
        return value

    @staticmethod
    def _require_int(value: Any, context: str) -> int:
        if isinstance(value, bool) or not isinstance(value, int):
            raise SaveLoadError(f"{context} must be an integer.")
        return value

    @staticmethod
    def _require_dict(value: Any, context: str) -> Dict[str, Any]:
        if not isinstance(value, Mapping):
            raise SaveLoadError(f"{context} must be an object.")
        for key in value:
            if not isinstance(key, str):
                raise SaveLoadError(f"{context} keys must be strings.")
        return dict(value)
