"""Typed scenario variables and the operations that modify them."""
from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Union

from narrative.domain.errors import DivisionByZeroError, VariableTypeMismatchError

INT_MIN = -(2**63)
INT_MAX = 2**63 - 1


@dataclass(frozen=True, slots=True)
class BoolValue:
    value: bool
    kind: ClassVar[str] = "bool"


@dataclass(frozen=True, slots=True)
class IntValue:
    value: int
    kind: ClassVar[str] = "int"


@dataclass(frozen=True, slots=True)
class FloatValue:
    value: float
    kind: ClassVar[str] = "float"


@dataclass(frozen=True, slots=True)
class StringValue:
    value: str
    kind: ClassVar[str] = "string"


VariableValue = Union[BoolValue, IntValue, FloatValue, StringValue]


def variable_value(raw: object) -> VariableValue:
    """Wrap a plain Python value in the matching VariableValue variant."""
    # bool is a subclass of int, so it has to be checked first.
    if isinstance(raw, bool):
        return BoolValue(raw)
    if isinstance(raw, int):
        return IntValue(raw)
    if isinstance(raw, float):
        return FloatValue(raw)
    if isinstance(raw, str):
        return StringValue(raw)
    raise TypeError(f"Unsupported variable value type: {type(raw).__name__}")


@dataclass(frozen=True, slots=True)
class SetValue:
    value: VariableValue


@dataclass(frozen=True, slots=True)
class Add:
    value: int


@dataclass(frozen=True, slots=True)
class Subtract:
    value: int


@dataclass(frozen=True, slots=True)
class Multiply:
    value: int


@dataclass(frozen=True, slots=True)
class Divide:
    value: int


@dataclass(frozen=True, slots=True)
class AddFloat:
    value: float


@dataclass(frozen=True, slots=True)
class SubtractFloat:
    value: float


@dataclass(frozen=True, slots=True)
class MultiplyFloat:
    value: float


@dataclass(frozen=True, slots=True)
class DivideFloat:
    value: float


@dataclass(frozen=True, slots=True)
class Append:
    text: str


@dataclass(frozen=True, slots=True)
class Toggle:
    pass


VariableOperation = Union[
    SetValue,
    Add,
    Subtract,
    Multiply,
    Divide,
    AddFloat,
    SubtractFloat,
    MultiplyFloat,
    DivideFloat,
    Append,
    Toggle,
]

_INT_OPERATIONS = (Add, Subtract, Multiply, Divide)
_FLOAT_OPERATIONS = (AddFloat, SubtractFloat, MultiplyFloat, DivideFloat)


def default_value_for(operation: VariableOperation) -> VariableValue:
    """Return the starting value used when the target variable is undefined."""
    if isinstance(operation, SetValue):
        return operation.value
    if isinstance(operation, _INT_OPERATIONS):
        return IntValue(0)
    if isinstance(operation, _FLOAT_OPERATIONS):
        return FloatValue(0.0)
    if isinstance(operation, Append):
        return StringValue("")
    if isinstance(operation, Toggle):
        return BoolValue(False)
    raise TypeError(f"Unknown variable operation: {operation!r}")


def apply_operation(operation: VariableOperation, current: VariableValue) -> VariableValue:
    """Apply ``operation`` to ``current`` and return the new value.

    Integer results saturate at the signed 64-bit range and integer division
    truncates toward zero. Raises VariableTypeMismatchError when the operation
    does not accept the kind of ``current`` and DivisionByZeroError on a zero
    divisor.
    """
    if isinstance(operation, SetValue):
        return operation.value

    if isinstance(operation, _INT_OPERATIONS):
        if not isinstance(current, IntValue):
            raise _mismatch(operation, current)
        if isinstance(operation.value, bool) or not isinstance(operation.value, int):
            raise _bad_operand(operation, "an integer")
        left = current.value
        right = operation.value
        if isinstance(operation, Add):
            return IntValue(_saturate(left + right))
        if isinstance(operation, Subtract):
            return IntValue(_saturate(left - right))
        if isinstance(operation, Multiply):
            return IntValue(_saturate(left * right))
        if right == 0:
            raise DivisionByZeroError("Division by zero")
        return IntValue(_saturate(_truncating_div(left, right)))

    if isinstance(operation, _FLOAT_OPERATIONS):
        if not isinstance(current, FloatValue):
            raise _mismatch(operation, current)
        if isinstance(operation.value, bool) or not isinstance(operation.value, (int, float)):
            raise _bad_operand(operation, "a number")
        left_f = current.value
        right_f = float(operation.value)
        if isinstance(operation, AddFloat):
            return FloatValue(left_f + right_f)
        if isinstance(operation, SubtractFloat):
            return FloatValue(left_f - right_f)
        if isinstance(operation, MultiplyFloat):
            return FloatValue(left_f * right_f)
        if right_f == 0.0:
            raise DivisionByZeroError("Division by zero")
        return FloatValue(left_f / right_f)

    if isinstance(operation, Append):
        if not isinstance(current, StringValue):
            raise _mismatch(operation, current)
        return StringValue(current.value + operation.text)

    if isinstance(operation, Toggle):
        if not isinstance(current, BoolValue):
            raise _mismatch(operation, current)
        return BoolValue(not current.value)

    raise TypeError(f"Unknown variable operation: {operation!r}")


def operation_kind(operation: VariableOperation) -> str | None:
    """Return the value kind an operation expects, or None for SetValue."""
    if isinstance(operation, SetValue):
        return None
    if isinstance(operation, _INT_OPERATIONS):
        return IntValue.kind
    if isinstance(operation, _FLOAT_OPERATIONS):
        return FloatValue.kind
    if isinstance(operation, Append):
        return StringValue.kind
    return BoolValue.kind


def _saturate(value: int) -> int:
    return max(INT_MIN, min(INT_MAX, value))


def _truncating_div(left: int, right: int) -> int:
    quotient = abs(left) // abs(right)
    return quotient if (left >= 0) == (right >= 0) else -quotient


def _mismatch(operation: VariableOperation, current: VariableValue) -> VariableTypeMismatchError:
    return VariableTypeMismatchError(
        f"Operation {type(operation).__name__} cannot be applied to value type {current.kind}"
    )


def _bad_operand(operation: VariableOperation, expected: str) -> VariableTypeMismatchError:
    operand = getattr(operation, "value", None)
    return VariableTypeMismatchError(
        f"Operation {type(operation).__name__} needs {expected} operand, "
        f"got {type(operand).__name__}"
    )
