"""Domain-level exceptions."""


class VariableOperationError(Exception):
    """Raised when a variable operation cannot be applied to the stored value."""


class VariableTypeMismatchError(VariableOperationError):
    """Raised when an operation targets a value of an incompatible kind."""


class DivisionByZeroError(VariableOperationError):
    """Raised when an integer or float division uses a zero divisor."""
