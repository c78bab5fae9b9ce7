"""Tests for the system logger and its JSONL formatting."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterator
from pathlib import Path

import httpx
import pytest

from presentation_client.telemetry.system import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
    is_transport_error,
    reset_system_logger,
)
from presentation_client.utils.logging.iso_formatter import ISO8601Formatter


@pytest.fixture(autouse=True)
def fresh_logger() -> Iterator[None]:
    reset_system_logger()
    yield
    reset_system_logger()


def make_record(msg: object, level: int = logging.WARNING) -> logging.LogRecord:
    return logging.LogRecord("test", level, __file__, 1, msg, None, None)


class TestSystemLogger:
    """Singleton and file handler."""

    def test_singleton(self) -> None:
        assert get_system_logger() is get_system_logger()

    def test_file_receives_warnings_only(self, tmp_path: Path) -> None:
        log_path = tmp_path / "logs" / "system.jsonl"
        configure_system_logger_file(log_path)
        logger = get_system_logger()

        logger.info({"event": "connection_first_use", "message": "info"})
        logger.warning({"event": "paged_response_stalled", "message": "stalled"})

        lines = log_path.read_text().splitlines()
        assert len(lines) == 1
        entry = json.loads(lines[0])
        assert entry["level"] == "WARNING"
        assert entry["event"] == "paged_response_stalled"

    def test_configure_twice_adds_one_handler(self, tmp_path: Path) -> None:
        configure_system_logger_file(tmp_path / "a.jsonl")
        configure_system_logger_file(tmp_path / "b.jsonl")

        file_handlers = [h for h in get_system_logger().handlers if isinstance(h, logging.FileHandler)]
        assert len(file_handlers) == 1

    def test_reset_allows_reconfigure(self, tmp_path: Path) -> None:
        configure_system_logger_file(tmp_path / "a.jsonl")

        reset_system_logger()
        configure_system_logger_file(tmp_path / "b.jsonl")

        file_handlers = [h for h in get_system_logger().handlers if isinstance(h, logging.FileHandler)]
        assert [Path(h.baseFilename).name for h in file_handlers] == ["b.jsonl"]


class TestFormatters:
    """Console and JSONL formatting."""

    def test_console_prefers_message_field(self) -> None:
        record = make_record({"event": "e", "message": "readable"})

        assert ConsoleFormatter().format(record) == "WARNING: readable"

    def test_console_falls_back_to_event(self) -> None:
        assert ConsoleFormatter().format(make_record({"event": "only_event"})) == "WARNING: only_event"

    def test_jsonl_has_utc_timestamp_first(self) -> None:
        line = ISO8601Formatter().format(make_record({"event": "e"}))

        entry = json.loads(line)
        assert list(entry)[:2] == ["time", "level"]
        assert entry["time"].endswith("Z")

    def test_plain_messages_are_wrapped(self) -> None:
        entry = json.loads(ISO8601Formatter().format(make_record("plain text")))

        assert entry["message"] == "plain text"


class TestTransportErrors:
    """Classification of unreachable-backend errors."""

    @pytest.mark.parametrize(
        ("exc", "expected"),
        [
            (httpx.ConnectError("refused"), True),
            (httpx.ReadTimeout("slow"), True),
            (httpx.RemoteProtocolError("closed"), True),
            (ValueError("other"), False),
        ],
    )
    def test_is_transport_error(self, exc: BaseException, expected: bool) -> None:
        assert is_transport_error(exc) is expected
