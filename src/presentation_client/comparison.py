"""Hierarchy comparison.

Comparing hierarchies asks the backend which nodes changed between the
hierarchy created with a previous ruleset/variables state and the current
one. The comparison is skipped when the previous state is empty, and a
canceled comparison (superseded by a newer one on the backend) yields no
changes instead of an error.
"""

from __future__ import annotations

__all__ = ["HierarchyComparator"]

from typing import Any

from presentation_client.exceptions import PresentationError
from presentation_client.models.requests import HierarchyCompareOptions
from presentation_client.options import RequestOptionsBuilder
from presentation_client.telemetry.system import get_system_logger
from presentation_client.transport.protocol import PresentationTransport

_logger = get_system_logger()


class HierarchyComparator:
    """Compares hierarchies through the transport."""

    def __init__(self, builder: RequestOptionsBuilder, transport: PresentationTransport) -> None:
        self._builder = builder
        self._transport = transport

    async def compare(self, options: HierarchyCompareOptions) -> list[Any]:
        """Return the hierarchy changes between the previous and current state.

        Args:
            options: Comparison request. `prev` holds the previous state.

        Returns:
            Hierarchy change entries as returned by the backend, or [] when
            nothing changed or the comparison was canceled.

        Raises:
            PresentationError: Any backend failure other than cancellation.
        """
        if options.prev.is_empty:
            return []

        request = await self._builder.build(options)
        try:
            result = await self._transport.compare_hierarchies(request)
        except PresentationError as e:
            if not e.is_canceled:
                raise
            _logger.debug(
                {
                    "event": "hierarchy_compare_canceled",
                    "message": "Hierarchy comparison canceled by the backend",
                    "ruleset_id": request.ruleset_id,
                }
            )
            return []
        return list(result or [])
