"""Per-session ruleset variable state.

RulesetVariablesOverlay keeps one RulesetVariablesManager per ruleset id.
Variables set here are appended to every request made with that ruleset,
after any variables supplied by the request itself.

Storage is last-write-wins keyed by variable id. Overwriting a variable
updates its value in place: it keeps the position of its first set.
"""

from __future__ import annotations

__all__ = [
    "RulesetVariablesManager",
    "RulesetVariablesOverlay",
    "VariableChange",
]

from typing import NamedTuple

from presentation_client.events import Event
from presentation_client.models.rulesets import RulesetVariable, VariableValue, VariableValueType

# Value of an unset or invalid id64 variable
INVALID_ID64 = "0"


class VariableChange(NamedTuple):
    """Argument of RulesetVariablesManager.on_variable_changed."""

    variable_id: str
    old_value: VariableValue | None
    new_value: VariableValue


class RulesetVariablesManager:
    """Typed variables of one ruleset.

    Typed getters return a default when the variable is not set or holds a
    value of a different type.
    """

    def __init__(self, ruleset_id: str) -> None:
        self.ruleset_id = ruleset_id
        self._variables: dict[str, RulesetVariable] = {}
        self.on_variable_changed: Event[VariableChange] = Event()

    def set(self, variable_id: str, value_type: VariableValueType, value: VariableValue) -> None:
        """Set a variable value.

        Args:
            variable_id: Variable name.
            value_type: Type of the value.
            value: New value.
        """
        old = self._variables.get(variable_id)
        self._variables[variable_id] = RulesetVariable(id=variable_id, type=value_type, value=value)
        if old is None or old.value != value or old.type != value_type:
            self.on_variable_changed.raise_event(
                VariableChange(variable_id, old.value if old else None, value)
            )

    def get_all_variables(self) -> list[RulesetVariable]:
        """Return all variables in the order they were first set."""
        return list(self._variables.values())

    # Typed setters

    def set_string(self, variable_id: str, value: str) -> None:
        self.set(variable_id, VariableValueType.STRING, value)

    def set_bool(self, variable_id: str, value: bool) -> None:
        self.set(variable_id, VariableValueType.BOOL, value)

    def set_int(self, variable_id: str, value: int) -> None:
        self.set(variable_id, VariableValueType.INT, value)

    def set_ints(self, variable_id: str, value: list[int]) -> None:
        self.set(variable_id, VariableValueType.INT_ARRAY, list(value))

    def set_id64(self, variable_id: str, value: str) -> None:
        self.set(variable_id, VariableValueType.ID64, value)

    def set_id64s(self, variable_id: str, value: list[str]) -> None:
        self.set(variable_id, VariableValueType.ID64_ARRAY, list(value))

    # Typed getters

    def get_string(self, variable_id: str) -> str:
        """Return a string variable, "" if not set."""
        variable = self._variables.get(variable_id)
        if variable is None or variable.type != VariableValueType.STRING:
            return ""
        return str(variable.value)

    def get_bool(self, variable_id: str) -> bool:
        """Return a bool variable, False if not set.

        Int variables are read as their truth value.
        """
        variable = self._variables.get(variable_id)
        if variable is None:
            return False
        if variable.type in (VariableValueType.BOOL, VariableValueType.INT):
            return bool(variable.value)
        return False

    def get_int(self, variable_id: str) -> int:
        """Return an int variable, 0 if not set."""
        variable = self._variables.get(variable_id)
        if variable is None:
            return 0
        if variable.type == VariableValueType.INT:
            return int(variable.value)  # type: ignore[arg-type]
        if variable.type == VariableValueType.BOOL:
            return 1 if variable.value else 0
        return 0

    def get_ints(self, variable_id: str) -> list[int]:
        """Return an int array variable, [] if not set."""
        variable = self._variables.get(variable_id)
        if variable is None or variable.type != VariableValueType.INT_ARRAY:
            return []
        return list(variable.value)  # type: ignore[arg-type]

    def get_id64(self, variable_id: str) -> str:
        """Return an id64 variable, "0" if not set."""
        variable = self._variables.get(variable_id)
        if variable is None or variable.type != VariableValueType.ID64:
            return INVALID_ID64
        return str(variable.value)

    def get_id64s(self, variable_id: str) -> list[str]:
        """Return an id64 array variable, [] if not set."""
        variable = self._variables.get(variable_id)
        if variable is None or variable.type != VariableValueType.ID64_ARRAY:
            return []
        return list(variable.value)  # type: ignore[arg-type]


class RulesetVariablesOverlay:
    """Ruleset variables of one manager, keyed by ruleset id."""

    def __init__(self) -> None:
        self._managers: dict[str, RulesetVariablesManager] = {}

    def vars(self, ruleset_id: str) -> RulesetVariablesManager:
        """Return the variables manager of a ruleset, creating it on first use."""
        manager = self._managers.get(ruleset_id)
        if manager is None:
            manager = RulesetVariablesManager(ruleset_id)
            self._managers[ruleset_id] = manager
        return manager

    def get(self, ruleset_id: str) -> list[RulesetVariable]:
        """Return the variables set for a ruleset ([] for unknown ids)."""
        manager = self._managers.get(ruleset_id)
        if manager is None:
            return []
        return manager.get_all_variables()

    def set(
        self,
        ruleset_id: str,
        variable_id: str,
        value_type: VariableValueType,
        value: VariableValue,
    ) -> None:
        """Set a variable of a ruleset."""
        self.vars(ruleset_id).set(variable_id, value_type, value)
