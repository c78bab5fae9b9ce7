"""Stitching of partial response windows into one page.

The backend may return fewer items than requested for a window (payload
size limits). assemble_paged_response keeps requesting the remainder until
the requested window is complete, so callers never see partial windows.

Calls are strictly sequential: each call starts where the previous one
ended. The total reported by the first call is used for the whole sequence.
"""

from __future__ import annotations

__all__ = [
    "PagedGetter",
    "assemble_paged_response",
]

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from presentation_client.models.paging import PagedResult, PagingWindow
from presentation_client.telemetry.system import get_system_logger

T = TypeVar("T")

# Fetches one window; returns a {total, items} result
PagedGetter = Callable[[PagingWindow], Awaitable[PagedResult[Any]]]

_logger = get_system_logger()


async def assemble_paged_response(
    window: PagingWindow | None,
    getter: PagedGetter,
) -> PagedResult[Any]:
    """Fetch a complete window, issuing as many calls as the backend needs.

    The first call always uses the caller's window as given (size 0 means
    "everything from start"). Assembly stops when:
    - size > 0 and `size` items were collected, or
    - size == 0 and start + collected >= total, or
    - a call returned no items.

    Args:
        window: Requested window. None means {start: 0, size: 0}.
        getter: Coroutine function fetching one window.

    Returns:
        PagedResult with the total of the first call and the collected items
        in response order.
    """
    requested = window or PagingWindow()
    start, size = requested.start, requested.size

    first = await getter(PagingWindow(start=start, size=size))
    total = first.total
    items: list[Any] = list(first.items)
    received = len(first.items)

    while received > 0 and _needs_more(start, size, total, len(items)):
        next_start = start + len(items)
        next_size = size - len(items) if size > 0 else 0
        page = await getter(PagingWindow(start=next_start, size=next_size))
        received = len(page.items)
        items.extend(page.items)

    if received == 0 and _needs_more(start, size, total, len(items)):
        _logger.warning(
            {
                "event": "paged_response_stalled",
                "message": f"Backend returned an empty window after {len(items)} of the requested items",
                "start": start,
                "size": size,
                "total": total,
                "received": len(items),
            }
        )

    return PagedResult(total=total, items=items)


def _needs_more(start: int, size: int, total: int, collected: int) -> bool:
    if size > 0:
        return collected < size and start + collected < total
    return start + collected < total
