"""Condition expressions that gate branches and choices."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple, Union

from narrative.core.types import CompareOp
from narrative.domain.variables import VariableValue


@dataclass(frozen=True, slots=True)
class FlagCondition:
    """Satisfied when the flag currently reads ``expected``."""

    flag_name: str
    expected: bool = True


@dataclass(frozen=True, slots=True)
class VariableCondition:
    """Compares a stored variable against a literal value."""

    variable_name: str
    op: CompareOp
    value: VariableValue


@dataclass(frozen=True, slots=True)
class AndCondition:
    """Satisfied when every nested condition is; vacuously true."""

    conditions: Tuple["Condition", ...] = ()


@dataclass(frozen=True, slots=True)
class OrCondition:
    """Satisfied when any nested condition is; false when empty."""

    conditions: Tuple["Condition", ...] = ()


@dataclass(frozen=True, slots=True)
class NotCondition:
    condition: "Condition"


@dataclass(frozen=True, slots=True)
class ConstantCondition:
    value: bool


Condition = Union[
    FlagCondition,
    VariableCondition,
    AndCondition,
    OrCondition,
    NotCondition,
    ConstantCondition,
]
