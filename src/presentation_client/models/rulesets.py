"""Ruleset and ruleset variable models.

A ruleset is a named definition of hierarchy/content query rules. Its rules
are opaque to this client and are sent to the backend as-is. Ruleset
variables are typed named values scoped to a ruleset id.
"""

from __future__ import annotations

__all__ = [
    "Ruleset",
    "RulesetVariable",
    "VariableValue",
    "VariableValueType",
]

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

# Bool, string, int, id64 (hex string) and their array forms
VariableValue = bool | int | str | list[int] | list[str]


class VariableValueType(str, Enum):
    """Types of ruleset variable values (wire names)."""

    BOOL = "bool"
    STRING = "string"
    INT = "int"
    INT_ARRAY = "int[]"
    ID64 = "id64"
    ID64_ARRAY = "id64[]"


class Ruleset(BaseModel):
    """Ruleset definition.

    Only the id is interpreted by this client. Rules and any other fields
    are kept as received and sent back unchanged.
    """

    id: str = Field(min_length=1)
    rules: list[dict[str, Any]] = Field(default_factory=list)
    version: str | None = None

    model_config = ConfigDict(extra="allow")

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return self.model_dump(exclude_none=True)


class RulesetVariable(BaseModel):
    """Immutable typed variable value.

    Attributes:
        id: Variable name, unique within a ruleset.
        type: Value type.
        value: The value.
    """

    id: str
    type: VariableValueType
    value: VariableValue

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {"id": self.id, "type": self.type.value, "value": self.value}
