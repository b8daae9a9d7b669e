"""Pure evaluation of scenario conditions."""
from __future__ import annotations

from typing import Callable

from narrative.core.types import CompareOp
from narrative.domain.defs import (
    AndCondition,
    Condition,
    ConstantCondition,
    FlagCondition,
    NotCondition,
    OrCondition,
    VariableCondition,
)
from narrative.domain.variables import BoolValue, FloatValue, IntValue, StringValue, VariableValue

FLOAT_TOLERANCE = 1e-10

FlagLookup = Callable[[str], bool]
VariableLookup = Callable[[str], "VariableValue | None"]


def evaluate_condition(
    condition: Condition,
    flag_lookup: FlagLookup,
    variable_lookup: VariableLookup,
) -> bool:
    """Evaluate ``condition`` against snapshot lookups of flags and variables.

    A variable condition on an undefined variable is never satisfied,
    whatever its comparator.
    """
    if isinstance(condition, FlagCondition):
        return flag_lookup(condition.flag_name) == condition.expected
    if isinstance(condition, VariableCondition):
        stored = variable_lookup(condition.variable_name)
        if stored is None:
            return False
        return compare(condition.op, stored, condition.value)
    if isinstance(condition, AndCondition):
        return all(evaluate_condition(c, flag_lookup, variable_lookup) for c in condition.conditions)
    if isinstance(condition, OrCondition):
        return any(evaluate_condition(c, flag_lookup, variable_lookup) for c in condition.conditions)
    if isinstance(condition, NotCondition):
        return not evaluate_condition(condition.condition, flag_lookup, variable_lookup)
    if isinstance(condition, ConstantCondition):
        return condition.value
    raise TypeError(f"Unknown condition: {condition!r}")


def compare(op: CompareOp, left: VariableValue, right: VariableValue) -> bool:
    """Compare two values. Values of different kinds are only ever not_equal."""
    if isinstance(left, BoolValue) and isinstance(right, BoolValue):
        if op == "equal":
            return left.value == right.value
        if op == "not_equal":
            return left.value != right.value
        return False
    if isinstance(left, FloatValue) and isinstance(right, FloatValue):
        return _compare_float(op, left.value, right.value)
    if (isinstance(left, IntValue) and isinstance(right, IntValue)) or (
        isinstance(left, StringValue) and isinstance(right, StringValue)
    ):
        return _compare_ordered(op, left.value, right.value)
    return op == "not_equal"


def _compare_ordered(op: CompareOp, a, b) -> bool:
    if op == "equal":
        return a == b
    if op == "not_equal":
        return a != b
    if op == "greater_than":
        return a > b
    if op == "greater_or_equal":
        return a >= b
    if op == "less_than":
        return a < b
    if op == "less_or_equal":
        return a <= b
    raise ValueError(f"Unknown comparison operator: {op}")


def _compare_float(op: CompareOp, a: float, b: float) -> bool:
    diff = abs(a - b)
    if op == "equal":
        return diff < FLOAT_TOLERANCE
    if op == "not_equal":
        return diff >= FLOAT_TOLERANCE
    if op == "greater_than":
        return a > b + FLOAT_TOLERANCE
    if op == "greater_or_equal":
        return a >= b - FLOAT_TOLERANCE
    if op == "less_than":
        return a < b - FLOAT_TOLERANCE
    if op == "less_or_equal":
        return a <= b + FLOAT_TOLERANCE
    raise ValueError(f"Unknown comparison operator: {op}")
