from __future__ import annotations

import json

import pytest

from narrative.domain.read_history import DialogueId
from narrative.domain.save_data import SaveData, SavedCharacterDisplay
from narrative.services.errors import SaveLoadError
from narrative.services.save_service import SaveService
from narrative.services.scenario_runtime import ScenarioRuntime
from tests.helpers.scenarios import build_call_scenario


def _sample_save() -> SaveData:
    return SaveData(
        slot=2,
        timestamp=1_700_000_000,
        play_time_secs=360,
        current_scene="sub",
        command_index=1,
        flags={"met": True, "lost": False},
        variables={"gold": 42},
        read_history={DialogueId("main", 0), DialogueId("sub", 0)},
        scene_stack=[("main", 2)],
        current_background="bg/park.png",
        current_cg=None,
        displayed_characters={
            "alice": SavedCharacterDisplay(character_id="alice", sprite="alice/normal.png", position="left")
        },
    )


def test_serialize_produces_versioned_json_payload() -> None:
    service = SaveService(build_call_scenario())
    payload = service.serialize(_sample_save())

    assert payload["save_version"] == SaveService.SAVE_VERSION
    assert payload["metadata"]["scenario_id"] == "test_scenario"
    assert payload["metadata"]["scene_title"] == "Sub"
    assert payload["state"]["read_history"] == [
        {"scene_id": "main", "command_index": 0},
        {"scene_id": "sub", "command_index": 0},
    ]
    json.dumps(payload)


def test_payload_round_trip_through_json() -> None:
    service = SaveService(build_call_scenario())
    saved = _sample_save()

    restored = service.deserialize(json.loads(json.dumps(service.serialize(saved))))

    assert restored == saved


def test_runtime_state_survives_disk_format() -> None:
    scenario = build_call_scenario()
    runtime = ScenarioRuntime(scenario)
    runtime.start()
    runtime.advance_command()
    runtime.execute_current_command()
    runtime.flags.set("met", True)
    service = SaveService(scenario)

    payload = json.loads(json.dumps(service.serialize(runtime.to_save_data(slot=1))))
    resumed = ScenarioRuntime(scenario)
    resumed.from_save_data(service.deserialize(payload))

    assert resumed.current_scene == "sub"
    assert resumed.scene_stack == (("main", 2),)
    assert resumed.flags.get("met") is True


def test_deserialize_rejects_wrong_version() -> None:
    service = SaveService()
    payload = service.serialize(_sample_save())
    payload["save_version"] = 99
    with pytest.raises(SaveLoadError, match="Unsupported save version"):
        service.deserialize(payload)


def test_deserialize_rejects_missing_state() -> None:
    with pytest.raises(SaveLoadError, match="missing required sections"):
        SaveService().deserialize({"save_version": SaveService.SAVE_VERSION})
    with pytest.raises(SaveLoadError, match="must be a JSON object"):
        SaveService().deserialize(["not", "a", "mapping"])


@pytest.mark.parametrize(
    ("field", "value", "message"),
    [
        ("current_scene", 5, "state.current_scene must be a string"),
        ("slot", "1", "state.slot must be an integer"),
        ("command_index", -1, "state.command_index must be a non-negative integer"),
        ("flags", {"met": "yes"}, "state.flags.met must be a boolean"),
        ("variables", {"gold": 1.5}, "state.variables.gold must be an integer"),
        ("variables", {"gold": True}, "state.variables.gold must be an integer"),
        ("scene_stack", "main", "state.scene_stack must be a list"),
        ("read_history", [{"scene_id": "main"}], r"state.read_history\[0\].command_index must be an integer"),
    ],
)
def test_deserialize_reports_bad_fields(field, value, message) -> None:
    service = SaveService()
    payload = service.serialize(_sample_save())
    payload["state"][field] = value
    with pytest.raises(SaveLoadError, match=message):
        service.deserialize(payload)


def test_deserialize_rejects_unknown_position() -> None:
    service = SaveService()
    payload = service.serialize(_sample_save())
    payload["state"]["displayed_characters"]["alice"]["position"] = "ceiling"
    with pytest.raises(SaveLoadError, match="position must be one of"):
        service.deserialize(payload)


def test_deserialize_checks_scene_references_against_scenario() -> None:
    service = SaveService(build_call_scenario())
    payload = service.serialize(_sample_save())
    payload["state"]["scene_stack"] = [{"scene_id": "deleted", "command_index": 0}]
    with pytest.raises(SaveLoadError, match="unknown scene 'deleted'"):
        service.deserialize(payload)

    payload = service.serialize(_sample_save())
    payload["state"]["current_scene"] = "deleted"
    with pytest.raises(SaveLoadError, match="unknown scene 'deleted'"):
        service.deserialize(payload)


def test_deserialize_without_scenario_skips_scene_checks() -> None:
    service = SaveService()
    payload = service.serialize(_sample_save())
    payload["state"]["current_scene"] = "anything"
    assert service.deserialize(payload).current_scene == "anything"


def test_deserialize_defaults_optional_sections() -> None:
    payload = {
        "save_version": SaveService.SAVE_VERSION,
        "state": {"slot": 1, "current_scene": ""},
    }
    data = SaveService().deserialize(payload)
    assert data.flags == {}
    assert data.scene_stack == []
    assert data.read_history == set()
    assert data.displayed_characters == {}
