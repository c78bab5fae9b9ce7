"""Protocol definition for presentation transports.

A transport performs one backend call per logical operation. It receives
canonical requests produced by RequestOptionsBuilder and returns decoded
JSON: plain values, `{total, items}` dicts for paged operations, or None
when the backend has nothing to return.

Implementations raise PresentationError for any failure. Retries and
timeouts are the transport's business, not the manager's.

Any object with these coroutine methods works (structural subtyping), e.g.
an in-process adapter calling a local backend directly:

    class LocalTransport:
        async def get_nodes_count(self, request: CanonicalRequest) -> int:
            return backend.nodes_count(request.to_wire())
        ...
"""

from __future__ import annotations

__all__ = [
    "PresentationTransport",
]

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from presentation_client.models.requests import CanonicalLabelRequest, CanonicalRequest


@runtime_checkable
class PresentationTransport(Protocol):
    """Request/response channel to the presentation backend.

    Paged methods receive the window in `request.paging` and return a
    `{"total": int, "items": list}` dict.
    """

    async def get_nodes_count(self, request: "CanonicalRequest") -> int: ...

    async def get_paged_nodes(self, request: "CanonicalRequest") -> dict[str, Any]: ...

    async def get_filtered_node_paths(self, request: "CanonicalRequest") -> list[Any]: ...

    async def get_node_paths(self, request: "CanonicalRequest") -> list[Any]: ...

    async def load_hierarchy(self, request: "CanonicalRequest") -> None: ...

    async def get_content_descriptor(self, request: "CanonicalRequest") -> dict[str, Any] | None: ...

    async def get_content_set_size(self, request: "CanonicalRequest") -> int: ...

    async def get_paged_content_set(self, request: "CanonicalRequest") -> dict[str, Any]: ...

    async def get_paged_content(self, request: "CanonicalRequest") -> dict[str, Any] | None:
        """Return `{"descriptor": ..., "contentSet": {total, items}}` or None."""
        ...

    async def get_paged_distinct_values(self, request: "CanonicalRequest") -> dict[str, Any]: ...

    async def get_display_label_definition(self, request: "CanonicalLabelRequest") -> dict[str, Any]: ...

    async def get_paged_display_label_definitions(self, request: "CanonicalLabelRequest") -> dict[str, Any]: ...

    async def compare_hierarchies(self, request: "CanonicalRequest") -> list[Any]: ...

    async def aclose(self) -> None:
        """Release network resources."""
        ...
