"""Content payload wrappers.

Descriptors, content items and distinct value groups are opaque JSON
payloads. Descriptor is wrapped so that a full descriptor can be told apart
from descriptor overrides, which are plain dicts.
"""

from __future__ import annotations

__all__ = [
    "Content",
    "ContentAndSize",
    "DESCRIPTOR_OVERRIDE_FIELDS",
    "Descriptor",
    "NodesAndCount",
]

from dataclasses import dataclass, field
from typing import Any, NamedTuple

# Descriptor fields the backend accepts as overrides
DESCRIPTOR_OVERRIDE_FIELDS: tuple[str, ...] = (
    "displayType",
    "contentFlags",
    "hiddenFieldNames",
    "sorting",
    "filterExpression",
)


@dataclass
class Descriptor:
    """Full content descriptor as returned by the backend."""

    payload: dict[str, Any]

    @classmethod
    def from_wire(cls, data: dict[str, Any] | None) -> "Descriptor | None":
        """Wrap a wire descriptor; None stays None."""
        if data is None:
            return None
        return cls(payload=dict(data))

    @property
    def display_type(self) -> str:
        """Display type the descriptor was created for."""
        return str(self.payload.get("displayType", ""))

    def to_wire(self) -> dict[str, Any]:
        """Convert to the wire representation."""
        return self.payload

    def create_descriptor_overrides(self) -> dict[str, Any]:
        """Return the subset of the descriptor sent with content requests.

        Returns:
            Dict with the override fields present in the descriptor.
        """
        return {name: self.payload[name] for name in DESCRIPTOR_OVERRIDE_FIELDS if name in self.payload}


@dataclass
class Content:
    """Descriptor and the content items produced for it."""

    descriptor: Descriptor
    content_set: list[dict[str, Any]] = field(default_factory=list)


class ContentAndSize(NamedTuple):
    """Content of a requested window and the size of the whole content set."""

    size: int
    content: Content


class NodesAndCount(NamedTuple):
    """Nodes of a requested window and the number of nodes at that level."""

    count: int
    nodes: list[dict[str, Any]]
