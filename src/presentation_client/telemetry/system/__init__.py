"""System operational logging.

Provides the system logger for operational events (connection lifecycle,
push channel problems, transport failures, stalled paged requests).
"""

from presentation_client.telemetry.system.system_logger import (
    ConsoleFormatter,
    configure_system_logger_file,
    get_system_logger,
    is_transport_error,
    reset_system_logger,
)

__all__ = [
    "ConsoleFormatter",
    "configure_system_logger_file",
    "get_system_logger",
    "is_transport_error",
    "reset_system_logger",
]
