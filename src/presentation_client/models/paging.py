"""Paging models.

A PagingWindow selects a sub-range of a larger ordered result. A PagedResult
is one window's worth of items plus the total size of the full result.
"""

from __future__ import annotations

__all__ = [
    "PagedResult",
    "PagingWindow",
]

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PagingWindow(BaseModel):
    """Requested sub-range of an ordered result.

    Attributes:
        start: Index of the first requested item.
        size: Maximum number of items; 0 means "everything from start".
    """

    start: int = Field(default=0, ge=0)
    size: int = Field(default=0, ge=0)

    model_config = ConfigDict(frozen=True)

    def to_wire(self) -> dict[str, int]:
        """Convert to the wire representation."""
        return {"start": self.start, "size": self.size}


class PagedResult(BaseModel, Generic[T]):
    """A window of items and the total number of items in the full result.

    Attributes:
        total: Number of items in the full result.
        items: Items of the window, in result order.
    """

    total: int = Field(default=0, ge=0)
    items: list[T] = Field(default_factory=list)

    @classmethod
    def from_wire(cls, data: dict[str, Any] | None) -> "PagedResult[Any]":
        """Build from a wire `{total, items}` object; None becomes an empty result."""
        if data is None:
            return cls(total=0, items=[])
        return cls(total=data.get("total", 0), items=list(data.get("items") or []))
