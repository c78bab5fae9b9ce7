"""System logger for operational events.

This module provides a singleton system logger for operational events of the
client (first use of a connection, push channel subscription, stalled paged
requests, transport failures).

Logging strategy:
- Console (stderr): INFO and above
- File (system.jsonl): Only issues (WARNING, ERROR, CRITICAL)

The file handler is configured separately via configure_system_logger_file()
once the log_dir from config is available.
"""

from __future__ import annotations

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "is_transport_error",
    "reset_system_logger",
]

import logging
import sys
from pathlib import Path

from presentation_client.constants import APP_NAME, TRANSPORT_ERRORS
from presentation_client.utils.logging.iso_formatter import ISO8601Formatter


class ConsoleFormatter(logging.Formatter):
    """Human-readable formatter for console output.

    Extracts 'message' or 'event' field from dict messages for cleaner stderr output.
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record for human-readable console output.

        Args:
            record: The log record to format.

        Returns:
            str: Formatted log message with level prefix.
        """
        if isinstance(record.msg, dict):
            msg = record.msg.get("message") or record.msg.get("event", "")
            return f"{record.levelname}: {msg}"
        return f"{record.levelname}: {record.getMessage()}"


# Module-level singleton logger
_system_logger: logging.Logger | None = None
_file_handler_configured: bool = False


def get_system_logger() -> logging.Logger:
    """Get the singleton system logger instance.

    Creates the logger on first call with stderr handler only.
    File handler is added later via configure_system_logger_file().

    Returns:
        logging.Logger: Configured system logger instance.

    Example:
        >>> logger = get_system_logger()
        >>> logger.warning({"event": "paged_response_stalled", "message": "..."})
    """
    global _system_logger

    if _system_logger is not None:
        return _system_logger

    _system_logger = logging.getLogger(f"{APP_NAME}.system")
    _system_logger.setLevel(logging.INFO)
    _system_logger.propagate = False

    # Close and remove any existing handlers to avoid duplicates and resource leaks
    for handler in _system_logger.handlers:
        handler.close()
    _system_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.INFO)
    stderr_handler.setFormatter(ConsoleFormatter())
    _system_logger.addHandler(stderr_handler)

    return _system_logger


def configure_system_logger_file(log_path: Path) -> None:
    """Add the JSONL file handler to the system logger.

    Should be called once after config is loaded. The file handler logs
    WARNING, ERROR, CRITICAL only. Later calls are no-ops.

    Args:
        log_path: Path to the system log file.
    """
    global _file_handler_configured

    if _file_handler_configured:
        return

    logger = get_system_logger()

    try:
        log_path.parent.mkdir(parents=True, exist_ok=True)
    except OSError:
        logger.warning(
            {
                "event": "log_dir_unavailable",
                "message": f"Cannot create log directory {log_path.parent}, logging to stderr only",
                "log_dir": str(log_path.parent),
            }
        )
        return

    file_handler = logging.FileHandler(log_path, mode="a", encoding="utf-8")
    file_handler.setLevel(logging.WARNING)
    file_handler.setFormatter(ISO8601Formatter())
    logger.addHandler(file_handler)

    _file_handler_configured = True


def reset_system_logger() -> None:
    """Close all handlers and forget the singleton (used by tests and CLI teardown)."""
    global _system_logger, _file_handler_configured

    if _system_logger is not None:
        for handler in _system_logger.handlers:
            handler.close()
        _system_logger.handlers.clear()
    _system_logger = None
    _file_handler_configured = False


def is_transport_error(exc: BaseException) -> bool:
    """Check if an exception means the backend could not be reached.

    Args:
        exc: Exception to check.

    Returns:
        True if exception indicates a network/timeout/protocol failure.
    """
    return isinstance(exc, TRANSPORT_ERRORS)
