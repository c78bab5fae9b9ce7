"""Connection handles and first-use tracking.

A connection is the application's handle to one opened data source on the
backend. Requests carry its serializable token instead of the handle itself.

ConnectionLifecycleTracker remembers which live connections have already
been seen so that per-connection initialization runs once per connection
lifetime:

    first request   -> on_first_use(connection), close listener registered
    later requests  -> no-op
    connection.close() -> forgotten; the next request runs on_first_use again
"""

from __future__ import annotations

__all__ = [
    "Connection",
    "ConnectionLifecycleTracker",
    "RemoteConnection",
]

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from presentation_client.constants import APP_NAME
from presentation_client.events import Event

logger = logging.getLogger(f"{APP_NAME}.connections")


@runtime_checkable
class Connection(Protocol):
    """Handle to an opened data source."""

    @property
    def on_close(self) -> Event["Connection"]:
        """Raised once when the connection is closed."""
        ...

    def get_rpc_props(self) -> dict[str, Any]:
        """Return the serializable token sent with requests."""
        ...


@dataclass(eq=False)
class RemoteConnection:
    """Connection to a data source opened on a remote backend.

    Instances compare by identity: two handles to the same data source are
    distinct connections.

    Attributes:
        imodel_id: Id of the data source.
        changeset_id: Version of the data source.
        context_id: Id of the project/context the data source belongs to.
        key: Backend key of the opened data source.
    """

    imodel_id: str
    changeset_id: str = ""
    context_id: str | None = None
    key: str = ""
    on_close: Event["Connection"] = field(default_factory=Event, repr=False)
    _closed: bool = field(default=False, init=False, repr=False)

    @property
    def is_closed(self) -> bool:
        return self._closed

    def get_rpc_props(self) -> dict[str, Any]:
        props: dict[str, Any] = {
            "iModelId": self.imodel_id,
            "changeSetId": self.changeset_id,
            "key": self.key or self.imodel_id,
        }
        if self.context_id is not None:
            props["contextId"] = self.context_id
        return props

    def close(self) -> None:
        """Close the connection and raise on_close. Later calls are no-ops."""
        if self._closed:
            return
        self._closed = True
        self.on_close.raise_event(self)


class ConnectionLifecycleTracker:
    """Runs a first-use hook once per live connection."""

    def __init__(self) -> None:
        # id(connection) -> connection; holding the reference keeps ids unique
        self._known: dict[int, Connection] = {}

    def __contains__(self, connection: object) -> bool:
        return id(connection) in self._known

    def __len__(self) -> int:
        return len(self._known)

    def ensure_initialized(
        self,
        connection: Connection,
        on_first_use: Callable[[Connection], None],
    ) -> None:
        """Run on_first_use if the connection has not been seen while open.

        The hook runs synchronously before this method returns. The
        connection is forgotten when its on_close event fires.

        Args:
            connection: Connection used by a request.
            on_first_use: Hook called with the connection on first use.
        """
        key = id(connection)
        if key in self._known:
            return

        self._known[key] = connection
        connection.on_close.add_once(lambda _closed: self._forget(key))
        logger.debug({"event": "connection_first_use", "token": connection.get_rpc_props()})
        on_first_use(connection)

    def clear(self) -> None:
        """Forget all connections."""
        self._known.clear()

    def _forget(self, key: int) -> None:
        connection = self._known.pop(key, None)
        if connection is not None:
            logger.debug({"event": "connection_closed", "token": connection.get_rpc_props()})
