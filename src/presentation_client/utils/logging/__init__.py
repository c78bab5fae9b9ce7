"""Logging utilities: JSONL formatting for log files."""

from presentation_client.utils.logging.iso_formatter import ISO8601Formatter

__all__ = ["ISO8601Formatter"]
