"""Tests for connection handles and first-use tracking."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from presentation_client.connections import Connection, ConnectionLifecycleTracker, RemoteConnection
from presentation_client.events import Event


@pytest.fixture
def tracker() -> ConnectionLifecycleTracker:
    return ConnectionLifecycleTracker()


class TestRemoteConnection:
    """Tests for RemoteConnection."""

    def test_satisfies_connection_protocol(self) -> None:
        assert isinstance(RemoteConnection(imodel_id="m"), Connection)

    def test_rpc_props(self) -> None:
        conn = RemoteConnection(imodel_id="m", changeset_id="c", context_id="ctx", key="k")

        assert conn.get_rpc_props() == {"iModelId": "m", "changeSetId": "c", "key": "k", "contextId": "ctx"}

    def test_key_defaults_to_imodel_id(self) -> None:
        assert RemoteConnection(imodel_id="m").get_rpc_props()["key"] == "m"

    def test_close_raises_on_close_once(self) -> None:
        conn = RemoteConnection(imodel_id="m")
        listener = MagicMock()
        conn.on_close.add_listener(listener)

        conn.close()
        conn.close()

        listener.assert_called_once_with(conn)
        assert conn.is_closed

    def test_handles_compare_by_identity(self) -> None:
        assert RemoteConnection(imodel_id="m") != RemoteConnection(imodel_id="m")


class TestConnectionLifecycleTracker:
    """First-use hook runs once per live connection."""

    def test_first_use_runs_hook_once(self, tracker: ConnectionLifecycleTracker, connection: RemoteConnection) -> None:
        hook = MagicMock()

        tracker.ensure_initialized(connection, hook)
        tracker.ensure_initialized(connection, hook)

        hook.assert_called_once_with(connection)
        assert connection in tracker

    def test_hook_runs_again_after_close(self, tracker: ConnectionLifecycleTracker) -> None:
        """A closed connection is forgotten; reusing it runs the hook again."""
        hook = MagicMock()
        conn = MagicMock()
        conn.on_close = Event()
        conn.get_rpc_props.return_value = {"key": "k"}

        tracker.ensure_initialized(conn, hook)
        conn.on_close.raise_event(conn)
        tracker.ensure_initialized(conn, hook)

        assert hook.call_count == 2

    def test_close_listener_is_registered_once(
        self, tracker: ConnectionLifecycleTracker, connection: RemoteConnection
    ) -> None:
        tracker.ensure_initialized(connection, MagicMock())
        tracker.ensure_initialized(connection, MagicMock())

        assert connection.on_close.num_listeners == 1

    def test_distinct_connections_are_tracked_separately(self, tracker: ConnectionLifecycleTracker) -> None:
        hook = MagicMock()
        first, second = RemoteConnection(imodel_id="m"), RemoteConnection(imodel_id="m")

        tracker.ensure_initialized(first, hook)
        tracker.ensure_initialized(second, hook)
        first.close()

        assert hook.call_count == 2
        assert first not in tracker
        assert second in tracker
        assert len(tracker) == 1

    def test_clear_forgets_everything(self, tracker: ConnectionLifecycleTracker, connection: RemoteConnection) -> None:
        hook = MagicMock()
        tracker.ensure_initialized(connection, hook)

        tracker.clear()
        tracker.ensure_initialized(connection, hook)

        assert hook.call_count == 2
