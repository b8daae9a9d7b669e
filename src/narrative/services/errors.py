"""Service-layer exceptions."""


class ScenarioExecutionError(Exception):
    """Raised when the runtime cannot navigate or execute the scenario."""


class SaveLoadError(Exception):
    """Raised when save or load operations fail."""
