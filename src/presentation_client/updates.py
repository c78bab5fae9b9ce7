"""Routing of backend update notifications into change events.

UpdateEventRouter registers one callback with the push channel for the
presentation interface's "update" events. Each notification maps ruleset
ids to the hierarchy and/or content changes of that ruleset:

    Unsubscribed --subscribe()--> Subscribed --unsubscribe()--> Unsubscribed (terminal)

For every ruleset id, in notification key order, the ruleset is resolved
through the registry; unknown ids are dropped. A `hierarchy` entry raises
hierarchy_changed, a `content` entry raises content_changed. A malformed
entry is logged and skipped without affecting its siblings, and a listener
that raises is logged while the remaining listeners and rulesets still run.

Resolution is asynchronous, so events are raised after the push callback
returns. Listeners must not assume any ordering relative to other manager
operations.
"""

from __future__ import annotations

__all__ = [
    "RouterState",
    "UpdateEventRouter",
]

import asyncio
from enum import Enum
from typing import Any

from pydantic import ValidationError

from presentation_client.constants import PRESENTATION_INTERFACE_NAME, UPDATE_EVENT_KIND
from presentation_client.events import Event
from presentation_client.models.updates import (
    ContentChangeEventArgs,
    HierarchyChangeEventArgs,
    UpdateInfo,
    parse_update_info,
)
from presentation_client.rulesets import RulesetRegistry
from presentation_client.telemetry.system import get_system_logger
from presentation_client.transport.push import PushChannel

_logger = get_system_logger()


class RouterState(str, Enum):
    """Subscription state of an UpdateEventRouter."""

    UNSUBSCRIBED = "unsubscribed"
    SUBSCRIBED = "subscribed"
    CLOSED = "closed"


class UpdateEventRouter:
    """Fans push notifications out into typed change events.

    Args:
        push_channel: Channel to subscribe to. None disables routing.
        registry: Registry resolving ruleset ids.
        enabled: Whether push delivery is meaningful in this environment.
            When False, subscribe() is a no-op and no events are raised.
    """

    def __init__(
        self,
        push_channel: PushChannel | None,
        registry: RulesetRegistry,
        *,
        enabled: bool = True,
    ) -> None:
        self._push_channel = push_channel
        self._registry = registry
        self._enabled = enabled and push_channel is not None
        self._state = RouterState.UNSUBSCRIBED
        self._pending: set[asyncio.Task[None]] = set()

        self.hierarchy_changed: Event[HierarchyChangeEventArgs] = Event()
        self.content_changed: Event[ContentChangeEventArgs] = Event()

    @property
    def state(self) -> RouterState:
        return self._state

    def subscribe(self) -> None:
        """Register the update callback with the push channel (once)."""
        if self._state != RouterState.UNSUBSCRIBED or not self._enabled:
            return
        if self._push_channel is None:
            return
        self._push_channel.on(PRESENTATION_INTERFACE_NAME, UPDATE_EVENT_KIND, self._on_update)
        self._state = RouterState.SUBSCRIBED
        _logger.debug({"event": "update_subscribed", "source_id": PRESENTATION_INTERFACE_NAME})

    def unsubscribe(self) -> None:
        """Unregister the update callback. The router cannot subscribe again."""
        if self._state == RouterState.SUBSCRIBED and self._push_channel is not None:
            self._push_channel.off(PRESENTATION_INTERFACE_NAME, UPDATE_EVENT_KIND, self._on_update)
            _logger.debug({"event": "update_unsubscribed", "source_id": PRESENTATION_INTERFACE_NAME})
        self._state = RouterState.CLOSED

    async def handle_update(self, info: UpdateInfo) -> None:
        """Resolve the rulesets of a notification and raise change events.

        Ruleset ids are processed sequentially in key order.

        Args:
            info: Parsed notification.
        """
        for ruleset_id, ruleset_info in info.items():
            if ruleset_info.is_empty:
                continue
            registered = await self._registry.get(ruleset_id)
            if registered is None:
                _logger.debug(
                    {
                        "event": "update_ruleset_not_found",
                        "message": f"Dropping update for unknown ruleset {ruleset_id}",
                        "ruleset_id": ruleset_id,
                    }
                )
                continue
            if ruleset_info.hierarchy is not None:
                self.hierarchy_changed.raise_event(
                    HierarchyChangeEventArgs(ruleset=registered.ruleset, update_info=ruleset_info.hierarchy),
                    on_error=self._on_listener_error,
                )
            if ruleset_info.content is not None:
                self.content_changed.raise_event(
                    ContentChangeEventArgs(ruleset=registered.ruleset, update_info=ruleset_info.content),
                    on_error=self._on_listener_error,
                )

    async def wait_idle(self) -> None:
        """Wait until all notifications received so far have been routed."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_update(self, payload: Any) -> None:
        # Push channel callback: must not raise into the channel
        if self._state != RouterState.SUBSCRIBED:
            return
        try:
            info, invalid = parse_update_info(payload)
        except ValidationError as e:
            _logger.warning(
                {
                    "event": "update_dispatch_failed",
                    "message": "Ignoring malformed update notification",
                    "error": str(e),
                }
            )
            return
        for ruleset_id, error in invalid.items():
            _logger.warning(
                {
                    "event": "update_dispatch_failed",
                    "message": f"Ignoring malformed update entry for ruleset {ruleset_id}",
                    "ruleset_id": ruleset_id,
                    "error": str(error),
                }
            )

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Channel delivers outside of an event loop
            asyncio.run(self._route(info))
            return

        task = loop.create_task(self._route(info))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _route(self, info: UpdateInfo) -> None:
        try:
            await self.handle_update(info)
        except Exception as e:
            _logger.error(
                {
                    "event": "update_dispatch_failed",
                    "message": f"Failed to route update notification: {e}",
                    "error_type": type(e).__name__,
                    "ruleset_ids": list(info),
                },
                exc_info=True,
            )

    def _on_listener_error(self, listener: Any, error: Exception) -> None:
        _logger.error(
            {
                "event": "update_listener_failed",
                "message": f"Change listener raised: {error}",
                "error_type": type(error).__name__,
                "listener": getattr(listener, "__qualname__", repr(listener)),
            },
            exc_info=error,
        )
