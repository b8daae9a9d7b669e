"""Service layer exports."""

from .errors import SaveLoadError, ScenarioExecutionError
from .save_service import SaveService
from .scenario_graph_validator import Issue, format_issue, validate_scenario_graph
from .scenario_runtime import (
    MAX_CALL_STACK_DEPTH,
    CommandResult,
    ContinueResult,
    EndResult,
    ScenarioRuntime,
    SceneChangedResult,
    ShowChoicesResult,
    WaitResult,
)

__all__ = [
    "MAX_CALL_STACK_DEPTH",
    "CommandResult",
    "ContinueResult",
    "EndResult",
    "Issue",
    "SaveLoadError",
    "SaveService",
    "ScenarioExecutionError",
    "ScenarioRuntime",
    "SceneChangedResult",
    "ShowChoicesResult",
    "WaitResult",
    "format_issue",
    "validate_scenario_graph",
]
