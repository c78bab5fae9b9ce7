"""Log formatting for JSONL output.

Every record becomes one JSON object with an ISO 8601 UTC timestamp first,
followed by the level and the structured fields of the record.
"""

from __future__ import annotations

__all__ = ["ISO8601Formatter"]

import json
import logging
from datetime import datetime, timezone
from typing import Any


class ISO8601Formatter(logging.Formatter):
    """Formatter with ISO 8601 timestamps (UTC) for JSONL output.

    Format: YYYY-MM-DDTHH:MM:SS.sssZ
    Example: 2025-12-04T10:48:37.123Z
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as a JSONL line.

        Args:
            record: The log record to format.

        Returns:
            str: JSON-formatted log entry with timestamp and level.
        """
        timestamp = (
            datetime.fromtimestamp(record.created, tz=timezone.utc)
            .isoformat(timespec="milliseconds")
            .replace("+00:00", "Z")
        )

        log_data: dict[str, Any]
        if isinstance(record.msg, dict):
            log_data = dict(record.msg)
        else:
            log_data = {"message": record.getMessage()}

        if record.exc_info and "stacktrace" not in log_data:
            log_data["stacktrace"] = self.formatException(record.exc_info)

        log_entry = {"time": timestamp, "level": record.levelname, **log_data}
        return json.dumps(log_entry, default=str)
