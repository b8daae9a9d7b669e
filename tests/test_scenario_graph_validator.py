from narrative.domain.defs import (
    CallCommand,
    ChoiceDef,
    ChoiceOptionDef,
    EndCommand,
    FlagCondition,
    IfCommand,
    JumpToSceneCommand,
    ModifyVariableCommand,
    ReturnCommand,
    ScenarioDef,
    SetFlagCommand,
    SetVariableCommand,
    ShowChoiceCommand,
)
from narrative.domain.variables import Add, Append, IntValue, SetValue, StringValue
from narrative.services.scenario_graph_validator import Issue, format_issue, validate_scenario_graph
from tests.helpers.scenarios import (
    METADATA,
    build_call_scenario,
    build_two_scene_scenario,
    line,
    scenario,
    scene,
)


def _codes(issues: list[Issue]) -> list[str]:
    return [issue.code for issue in issues]


def test_valid_scenarios_have_no_issues() -> None:
    assert validate_scenario_graph(build_two_scene_scenario()) == []
    assert validate_scenario_graph(build_call_scenario()) == []


def test_missing_start_scene() -> None:
    issues = validate_scenario_graph(scenario("nope", [scene("s1", EndCommand())]))
    assert "MISSING_START_SCENE" in _codes(issues)
    assert "UNREACHABLE_SCENE" in _codes(issues)


def test_missing_scene_references() -> None:
    graph = scenario(
        "s1",
        [
            scene(
                "s1",
                JumpToSceneCommand("ghost"),
                CallCommand("sub", "gone"),
                ShowChoiceCommand(ChoiceDef(options=(ChoiceOptionDef("Go", "void"),))),
            ),
            scene("sub", ReturnCommand()),
        ],
    )
    issues = [issue for issue in validate_scenario_graph(graph) if issue.code == "MISSING_SCENE_REF"]
    assert [issue.context["referenced_id"] for issue in issues] == ["ghost", "gone", "void"]
    assert issues[1].context["field_path"] == "commands[1].return_scene"
    assert issues[2].context["field_path"] == "commands[2].options[0].next_scene"


def test_flow_commands_inside_if_are_errors() -> None:
    graph = scenario(
        "s1",
        [
            scene(
                "s1",
                IfCommand(
                    condition=FlagCondition("x"),
                    then_commands=(SetFlagCommand("y", True),),
                    else_commands=(JumpToSceneCommand("s2"),),
                ),
                EndCommand(),
            ),
            scene("s2", EndCommand()),
        ],
    )
    issues = validate_scenario_graph(graph)
    inline = [issue for issue in issues if issue.code == "INLINE_COMMAND_NOT_ALLOWED"]
    assert len(inline) == 1
    assert inline[0].severity == "ERROR"
    assert inline[0].context["field_path"] == "commands[0].else[0]"
    # The jump never executes, so s2 cannot be reached.
    assert "UNREACHABLE_SCENE" in _codes(issues)


def test_empty_choice_is_an_error() -> None:
    graph = scenario("s1", [scene("s1", ShowChoiceCommand(ChoiceDef(options=())))])
    assert _codes(validate_scenario_graph(graph)) == ["EMPTY_CHOICE"]


def test_unreachable_scene_and_extra_roots() -> None:
    graph = scenario("s1", [scene("s1", EndCommand()), scene("extra", line("bonus"), EndCommand())])
    issues = validate_scenario_graph(graph)
    assert [(issue.severity, issue.code) for issue in issues] == [("WARN", "UNREACHABLE_SCENE")]
    assert validate_scenario_graph(graph, extra_roots=["extra"]) == []


def test_scene_id_mismatch() -> None:
    s1 = scene("s1", EndCommand())
    graph = ScenarioDef(metadata=METADATA, start_scene="alias", scenes={"alias": s1})
    issues = validate_scenario_graph(graph)
    assert _codes(issues) == ["SCENE_ID_MISMATCH"]
    assert issues[0].context == {"scene_id": "alias", "declared_id": "s1"}


def test_variable_type_conflicts() -> None:
    graph = scenario(
        "s1",
        [
            scene(
                "s1",
                SetVariableCommand("score", IntValue(0)),
                ModifyVariableCommand("score", Add(1)),
                ModifyVariableCommand("name", SetValue(StringValue("a"))),
                JumpToSceneCommand("s2"),
            ),
            scene("s2", ModifyVariableCommand("score", Append("!")), EndCommand()),
        ],
    )
    issues = [issue for issue in validate_scenario_graph(graph) if issue.code == "VARIABLE_TYPE_CONFLICT"]
    assert len(issues) == 1
    assert issues[0].context["variable"] == "score"
    assert issues[0].context["kinds"] == "int,string"


def test_format_issue() -> None:
    issue = Issue(
        severity="ERROR",
        code="MISSING_SCENE_REF",
        message="Command references missing scene.",
        context={"scene_id": "s1", "referenced_id": "ghost"},
    )
    assert format_issue(issue) == (
        "[ERROR] MISSING_SCENE_REF: Command references missing scene. (scene_id=s1 referenced_id=ghost)"
    )
