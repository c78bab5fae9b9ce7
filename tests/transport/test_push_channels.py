"""Tests for push notification channels."""

from __future__ import annotations

from collections.abc import AsyncIterator
from unittest.mock import MagicMock, patch

import httpx
import pytest

from presentation_client.constants import PRESENTATION_INTERFACE_NAME
from presentation_client.transport.push import InProcessPushChannel, PushChannel, SsePushChannel


async def lines_of(*lines: str) -> AsyncIterator[str]:
    for line in lines:
        yield line


@pytest.fixture
def sse_channel() -> SsePushChannel:
    client = httpx.AsyncClient(transport=httpx.MockTransport(lambda _r: httpx.Response(200)))
    return SsePushChannel(client=client)


class TestInProcessPushChannel:
    """Direct emission."""

    def test_satisfies_push_channel_protocol(self) -> None:
        assert isinstance(InProcessPushChannel(), PushChannel)

    def test_emit_reaches_matching_callbacks_only(self) -> None:
        channel = InProcessPushChannel()
        matching, other = MagicMock(), MagicMock()
        channel.on("src", "update", matching)
        channel.on("src", "other", other)

        channel.emit("src", "update", {"a": 1})

        matching.assert_called_once_with({"a": 1})
        other.assert_not_called()

    def test_off_removes_callback(self) -> None:
        channel = InProcessPushChannel()
        callback = MagicMock()
        channel.on("src", "update", callback)

        channel.off("src", "update", callback)
        channel.off("src", "update", callback)
        channel.emit("src", "update", {})

        callback.assert_not_called()
        assert channel.count("src", "update") == 0

    def test_callback_errors_reach_emitter(self) -> None:
        channel = InProcessPushChannel()
        channel.on("src", "update", MagicMock(side_effect=RuntimeError("callback")))

        with pytest.raises(RuntimeError):
            channel.emit("src", "update", {})


class TestSsePushChannel:
    """Server-sent events parsing."""

    async def test_events_dispatched_by_kind(self, sse_channel: SsePushChannel) -> None:
        callback = MagicMock()
        sse_channel.on(PRESENTATION_INTERFACE_NAME, "update", callback)

        await sse_channel.consume(lines_of("event: update", 'data: {"R": {"hierarchy": "FULL"}}', ""))

        callback.assert_called_once_with({"R": {"hierarchy": "FULL"}})

    async def test_multiline_data_and_comments(self, sse_channel: SsePushChannel) -> None:
        callback = MagicMock()
        sse_channel.on(PRESENTATION_INTERFACE_NAME, "update", callback)

        await sse_channel.consume(
            lines_of(": keep-alive", "event: update", 'data: {"R":', 'data: {"content": "FULL"}}', "")
        )

        callback.assert_called_once_with({"R": {"content": "FULL"}})

    async def test_default_kind_is_message(self, sse_channel: SsePushChannel) -> None:
        callback = MagicMock()
        sse_channel.on(PRESENTATION_INTERFACE_NAME, "message", callback)

        await sse_channel.consume(lines_of("data: 1", "", "data: 2", ""))

        assert [c.args[0] for c in callback.call_args_list] == [1, 2]

    async def test_incomplete_event_is_not_dispatched(self, sse_channel: SsePushChannel) -> None:
        callback = MagicMock()
        sse_channel.on(PRESENTATION_INTERFACE_NAME, "update", callback)

        await sse_channel.consume(lines_of("event: update", "data: {}"))

        callback.assert_not_called()

    async def test_invalid_json_is_logged(self, sse_channel: SsePushChannel) -> None:
        callback = MagicMock()
        sse_channel.on(PRESENTATION_INTERFACE_NAME, "update", callback)

        with patch("presentation_client.transport.push._logger") as mock_logger:
            await sse_channel.consume(lines_of("event: update", "data: not-json", ""))

        callback.assert_not_called()
        assert mock_logger.warning.call_args.args[0]["event"] == "push_stream_error"

    async def test_aclose_without_start(self, sse_channel: SsePushChannel) -> None:
        await sse_channel.aclose()

        assert not sse_channel.is_running
