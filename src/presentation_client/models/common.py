"""Enumerations and keys shared by hierarchy and content requests."""

from __future__ import annotations

__all__ = [
    "InstanceKey",
    "PresentationUnitSystem",
    "RequestPriority",
]

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PresentationUnitSystem(str, Enum):
    """Unit system used to format property values."""

    METRIC = "metric"
    BRITISH_IMPERIAL = "british-imperial"
    US_CUSTOMARY = "us-customary"
    US_SURVEY = "us-survey"


class RequestPriority(IntEnum):
    """Backend scheduling priority of a request."""

    PRELOAD = 0
    MAX = 2**53 - 1


class InstanceKey(BaseModel):
    """Key identifying one instance in the queried data source.

    Attributes:
        class_name: Full class name, e.g. "BisCore:Element".
        id: Instance id (hex string).
    """

    class_name: str = Field(alias="className", min_length=1)
    id: str = Field(min_length=1)

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return {"className": self.class_name, "id": self.id}
