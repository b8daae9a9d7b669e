"""Static scenario graph validation utilities."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Mapping, Sequence

from narrative.domain.defs import (
    FLOW_COMMANDS,
    CallCommand,
    IfCommand,
    JumpToSceneCommand,
    ModifyVariableCommand,
    ScenarioCommand,
    ScenarioDef,
    SceneDef,
    SetVariableCommand,
    ShowChoiceCommand,
)
from narrative.domain.variables import SetValue, operation_kind

Severity = str


@dataclass(frozen=True, slots=True)
class Issue:
    severity: Severity
    code: str
    message: str
    context: dict[str, str]


@dataclass(frozen=True, slots=True)
class SceneRef:
    source_scene: str
    field_path: str
    referenced_id: str


@dataclass(slots=True)
class SceneInfo:
    scene_id: str
    refs: list[SceneRef] = field(default_factory=list)
    # variable name -> {kind: first field path that assigned it}
    variable_kinds: dict[str, dict[str, str]] = field(default_factory=dict)


def format_issue(issue: Issue) -> str:
    context = " ".join(f"{key}={value}" for key, value in issue.context.items())
    suffix = f" ({context})" if context else ""
    return f"[{issue.severity}] {issue.code}: {issue.message}{suffix}"


def validate_scenario_graph(
    scenario: ScenarioDef,
    extra_roots: Sequence[str] = (),
) -> list[Issue]:
    """Report structural problems in ``scenario`` without raising.

    ``extra_roots`` names scenes entered by the host directly (for example a
    chapter select) so they are not reported as unreachable.
    """
    issues: list[Issue] = []
    scene_ids = set(scenario.scenes.keys())

    if scenario.start_scene not in scene_ids:
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_START_SCENE",
                message="Start scene is not defined in the scenario.",
                context={"referenced_id": scenario.start_scene},
            )
        )

    scene_infos: dict[str, SceneInfo] = {}
    for scene_id, scene in scenario.scenes.items():
        if scene.id != scene_id:
            issues.append(
                Issue(
                    severity="WARN",
                    code="SCENE_ID_MISMATCH",
                    message="Scene is registered under a different id than its own.",
                    context={"scene_id": scene_id, "declared_id": scene.id},
                )
            )
        scene_infos[scene_id] = _build_scene_info(scene_id, scene, issues)

    for scene_info in scene_infos.values():
        _validate_scene_references(scene_info, scene_ids, issues)

    _validate_variable_kinds(scene_infos.values(), issues)
    _validate_reachability(scene_infos, [scenario.start_scene, *extra_roots], issues)
    return issues


def _build_scene_info(scene_id: str, scene: SceneDef, issues: list[Issue]) -> SceneInfo:
    info = SceneInfo(scene_id=scene_id)
    _walk_commands(info, scene.commands, "commands", issues, inline=False)
    return info


def _walk_commands(
    info: SceneInfo,
    commands: Sequence[ScenarioCommand],
    path: str,
    issues: list[Issue],
    *,
    inline: bool,
) -> None:
    for index, command in enumerate(commands):
        command_path = f"{path}[{index}]"
        if inline and isinstance(command, FLOW_COMMANDS):
            issues.append(
                Issue(
                    severity="ERROR",
                    code="INLINE_COMMAND_NOT_ALLOWED",
                    message=f"{type(command).__name__} cannot be used inside an If branch.",
                    context={"scene_id": info.scene_id, "field_path": command_path},
                )
            )
            continue
        if isinstance(command, JumpToSceneCommand):
            info.refs.append(SceneRef(info.scene_id, f"{command_path}.scene_id", command.scene_id))
        elif isinstance(command, CallCommand):
            info.refs.append(SceneRef(info.scene_id, f"{command_path}.scene_id", command.scene_id))
            info.refs.append(
                SceneRef(info.scene_id, f"{command_path}.return_scene", command.return_scene)
            )
        elif isinstance(command, ShowChoiceCommand):
            if not command.choice.options:
                issues.append(
                    Issue(
                        severity="ERROR",
                        code="EMPTY_CHOICE",
                        message="Choice has no options.",
                        context={"scene_id": info.scene_id, "field_path": command_path},
                    )
                )
            for option_index, option in enumerate(command.choice.options):
                info.refs.append(
                    SceneRef(
                        info.scene_id,
                        f"{command_path}.options[{option_index}].next_scene",
                        option.next_scene,
                    )
                )
        elif isinstance(command, SetVariableCommand):
            _record_kind(info, command.variable_name, command.value.kind, command_path)
        elif isinstance(command, ModifyVariableCommand):
            operation = command.operation
            kind = operation.value.kind if isinstance(operation, SetValue) else operation_kind(operation)
            _record_kind(info, command.variable_name, kind, command_path)
        elif isinstance(command, IfCommand):
            _walk_commands(info, command.then_commands, f"{command_path}.then", issues, inline=True)
            _walk_commands(info, command.else_commands, f"{command_path}.else", issues, inline=True)


def _record_kind(info: SceneInfo, variable_name: str, kind: str, path: str) -> None:
    kinds = info.variable_kinds.setdefault(variable_name, {})
    kinds.setdefault(kind, path)


def _validate_scene_references(
    scene_info: SceneInfo, scene_ids: set[str], issues: list[Issue]
) -> None:
    for ref in scene_info.refs:
        if ref.referenced_id in scene_ids:
            continue
        issues.append(
            Issue(
                severity="ERROR",
                code="MISSING_SCENE_REF",
                message="Command references missing scene.",
                context={
                    "scene_id": ref.source_scene,
                    "field_path": ref.field_path,
                    "referenced_id": ref.referenced_id,
                },
            )
        )


def _validate_variable_kinds(scene_infos: Iterable[SceneInfo], issues: list[Issue]) -> None:
    merged: dict[str, dict[str, str]] = {}
    for scene_info in scene_infos:
        for variable_name, kinds in scene_info.variable_kinds.items():
            target = merged.setdefault(variable_name, {})
            for kind, path in kinds.items():
                target.setdefault(kind, f"{scene_info.scene_id}:{path}")
    for variable_name in sorted(merged):
        kinds = merged[variable_name]
        if len(kinds) < 2:
            continue
        issues.append(
            Issue(
                severity="WARN",
                code="VARIABLE_TYPE_CONFLICT",
                message="Variable is used with more than one value type.",
                context={
                    "variable": variable_name,
                    "kinds": ",".join(sorted(kinds)),
                    "first_uses": " ".join(kinds[kind] for kind in sorted(kinds)),
                },
            )
        )


def _validate_reachability(
    scene_infos: Mapping[str, SceneInfo],
    roots: Sequence[str],
    issues: list[Issue],
) -> None:
    scene_ids = set(scene_infos.keys())
    reachable: set[str] = set()
    stack = [root for root in roots if root in scene_ids]
    while stack:
        scene_id = stack.pop()
        if scene_id in reachable:
            continue
        reachable.add(scene_id)
        for ref in scene_infos[scene_id].refs:
            if ref.referenced_id in scene_ids:
                stack.append(ref.referenced_id)
    for scene_id in sorted(scene_ids - reachable):
        issues.append(
            Issue(
                severity="WARN",
                code="UNREACHABLE_SCENE",
                message="Scene is unreachable from the start scene.",
                context={"scene_id": scene_id},
            )
        )
