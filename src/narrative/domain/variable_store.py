"""Typed scenario variables."""
from __future__ import annotations

from typing import Dict, Iterator, Mapping

from narrative.core.types import VariableId
from narrative.domain.variables import IntValue, VariableValue


class VariableStore:
    """Maps variable ids to typed values. Undefined variables read as None."""

    __slots__ = ("_variables",)

    def __init__(self, variables: Mapping[VariableId, VariableValue] | None = None) -> None:
        self._variables: Dict[VariableId, VariableValue] = dict(variables) if variables else {}

    def get(self, variable_id: VariableId) -> VariableValue | None:
        return self._variables.get(variable_id)

    def set(self, variable_id: VariableId, value: VariableValue) -> None:
        self._variables[variable_id] = value

    def remove(self, variable_id: VariableId) -> VariableValue | None:
        """Delete the variable and return its previous value, if any."""
        return self._variables.pop(variable_id, None)

    def clear(self) -> None:
        self._variables.clear()

    def items(self):
        return self._variables.items()

    def __len__(self) -> int:
        return len(self._variables)

    def __contains__(self, variable_id: object) -> bool:
        return variable_id in self._variables

    def __iter__(self) -> Iterator[VariableId]:
        return iter(self._variables)

    def to_save_format(self) -> Dict[VariableId, int]:
        """Return the integer variables as plain ints.

        Only integer variables are persisted. Bool, float and string
        variables are dropped from the save and read as undefined after a
        load.
        """
        return {
            variable_id: value.value
            for variable_id, value in self._variables.items()
            if isinstance(value, IntValue)
        }

    @classmethod
    def from_save_format(cls, variables: Mapping[VariableId, int]) -> "VariableStore":
        return cls({variable_id: IntValue(value) for variable_id, value in variables.items()})
