"""Push channels delivering backend notifications.

A push channel dispatches payloads to callbacks registered per
(source id, event kind). Subscribing and unsubscribing use the same callback
reference.

- InProcessPushChannel: payloads are emitted directly by the host process
  (embedded backends, tests).
- SsePushChannel: payloads arrive over a server-sent events stream. The
  `event:` field is the event kind, the `data:` field a JSON payload. One
  stream carries the events of one source id.
"""

from __future__ import annotations

__all__ = [
    "InProcessPushChannel",
    "PushCallback",
    "PushChannel",
    "SsePushChannel",
]

import asyncio
import json
from collections.abc import AsyncIterator, Callable
from typing import Any, Protocol, runtime_checkable

import httpx

from presentation_client.constants import (
    CLIENT_ID_HEADER,
    DEFAULT_BASE_URL,
    PRESENTATION_INTERFACE_NAME,
    SSE_RECONNECT_DELAY_SECONDS,
    SSE_STREAM_PATH,
)
from presentation_client.telemetry.system import get_system_logger

PushCallback = Callable[[Any], None]

_logger = get_system_logger()


@runtime_checkable
class PushChannel(Protocol):
    """Subscribe/unsubscribe capability of a notification channel."""

    def on(self, source_id: str, event_kind: str, callback: PushCallback) -> None: ...

    def off(self, source_id: str, event_kind: str, callback: PushCallback) -> None: ...


class _CallbackTable:
    """Callbacks keyed by (source id, event kind), in registration order."""

    def __init__(self) -> None:
        self._callbacks: dict[tuple[str, str], list[PushCallback]] = {}

    def on(self, source_id: str, event_kind: str, callback: PushCallback) -> None:
        self._callbacks.setdefault((source_id, event_kind), []).append(callback)

    def off(self, source_id: str, event_kind: str, callback: PushCallback) -> None:
        callbacks = self._callbacks.get((source_id, event_kind))
        if not callbacks:
            return
        try:
            callbacks.remove(callback)
        except ValueError:
            return
        if not callbacks:
            del self._callbacks[(source_id, event_kind)]

    def callbacks(self, source_id: str, event_kind: str) -> list[PushCallback]:
        return list(self._callbacks.get((source_id, event_kind), []))

    def count(self, source_id: str, event_kind: str) -> int:
        return len(self._callbacks.get((source_id, event_kind), []))


class InProcessPushChannel(_CallbackTable):
    """Push channel fed directly by the host process."""

    def emit(self, source_id: str, event_kind: str, payload: Any) -> None:
        """Call every callback registered for (source_id, event_kind).

        Callback exceptions propagate to the emitter.
        """
        for callback in self.callbacks(source_id, event_kind):
            callback(payload)


class SsePushChannel(_CallbackTable):
    """Push channel reading a server-sent events stream.

    The stream is opened by start() and read in a background task until
    aclose(). A dropped stream is reopened after a delay.

    Args:
        base_url: Backend URL the stream path is appended to.
        source_id: Source id the stream's events are dispatched under.
        path: Stream path relative to base_url.
        client_id: Value of the X-Client-Id header.
        client: Pre-configured client (tests). Not closed by aclose().
        reconnect_delay: Seconds to wait before reopening a dropped stream.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        *,
        source_id: str = PRESENTATION_INTERFACE_NAME,
        path: str = SSE_STREAM_PATH,
        client_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        reconnect_delay: float = SSE_RECONNECT_DELAY_SECONDS,
    ) -> None:
        super().__init__()
        self.source_id = source_id
        self._path = path
        self._reconnect_delay = reconnect_delay
        self._owns_client = client is None
        headers = {"Accept": "text/event-stream"}
        if client_id:
            headers[CLIENT_ID_HEADER] = client_id
        # No read timeout: the stream stays open while idle
        self._client = client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(10.0, read=None),
        )
        self._client.headers.update(headers)
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start reading the stream in a background task. Requires a running loop."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run())

    async def aclose(self) -> None:
        """Stop reading and close the client if this channel created it."""
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self._owns_client:
            await self._client.aclose()

    async def _run(self) -> None:
        while True:
            try:
                async with self._client.stream("GET", self._path) as response:
                    response.raise_for_status()
                    await self.consume(response.aiter_lines())
            except httpx.HTTPError as e:
                _logger.warning(
                    {
                        "event": "push_stream_error",
                        "message": f"Event stream dropped: {e}",
                        "error_type": type(e).__name__,
                        "reconnect_in_seconds": self._reconnect_delay,
                    }
                )
            await asyncio.sleep(self._reconnect_delay)

    async def consume(self, lines: AsyncIterator[str]) -> None:
        """Parse SSE lines and dispatch complete events.

        Args:
            lines: Stream lines without line terminators.
        """
        event_kind = "message"
        data_lines: list[str] = []
        async for line in lines:
            if not line:
                if data_lines:
                    self._dispatch(event_kind, "\n".join(data_lines))
                event_kind, data_lines = "message", []
            elif line.startswith(":"):
                continue
            elif line.startswith("event:"):
                event_kind = line[len("event:") :].strip()
            elif line.startswith("data:"):
                data_lines.append(line[len("data:") :].lstrip())

    def _dispatch(self, event_kind: str, data: str) -> None:
        try:
            payload = json.loads(data)
        except json.JSONDecodeError:
            _logger.warning(
                {
                    "event": "push_stream_error",
                    "message": f"Ignoring non-JSON '{event_kind}' event",
                    "event_kind": event_kind,
                }
            )
            return
        for callback in self.callbacks(self.source_id, event_kind):
            callback(payload)
