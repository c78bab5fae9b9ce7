"""Application-wide constants for presentation-client.

Constants that define application behavior.
For user-configurable settings per deployment, see config.py.
"""

import os

__all__ = [
    # Application identity
    "APP_NAME",
    # Push channel
    "PRESENTATION_INTERFACE_NAME",
    "UPDATE_EVENT_KIND",
    # HTTP transport
    "DEFAULT_HTTP_TIMEOUT_SECONDS",
    "MIN_HTTP_TIMEOUT_SECONDS",
    "MAX_HTTP_TIMEOUT_SECONDS",
    "CLIENT_ID_HEADER",
    "SSE_STREAM_PATH",
    "SSE_RECONNECT_DELAY_SECONDS",
    "TRANSPORT_ERRORS",
    # Defaults
    "DEFAULT_LOG_DIR",
    "DEFAULT_BASE_URL",
    "CONFIG_FILENAME",
    "SYSTEM_LOG_FILENAME",
]

import httpx
from platformdirs import user_log_dir

# ============================================================================
# Application Identity
# ============================================================================

# Application name used for logger names, config directory, etc.
APP_NAME: str = "presentation-client"

# ============================================================================
# Push Channel
# ============================================================================

# Source id the update callback is registered under on the push channel.
PRESENTATION_INTERFACE_NAME: str = "PresentationRpcInterface"

# Event kind carrying UpdateInfo payloads.
UPDATE_EVENT_KIND: str = "update"

# Path of the server-sent events endpoint, relative to the backend base URL
SSE_STREAM_PATH: str = "/events"

# Delay before reopening a dropped event stream (seconds)
SSE_RECONNECT_DELAY_SECONDS: float = 3.0

# ============================================================================
# HTTP Transport
# ============================================================================

# Default request timeout (seconds)
DEFAULT_HTTP_TIMEOUT_SECONDS: int = 30

# Timeout validation range (seconds)
MIN_HTTP_TIMEOUT_SECONDS: int = 1
MAX_HTTP_TIMEOUT_SECONDS: int = 300  # 5 minutes

# Header identifying this client to the backend (used for request affinity)
CLIENT_ID_HEADER: str = "X-Client-Id"

# Errors meaning the backend could not be reached at all.
# - NetworkError: ConnectError, CloseError, ReadError, WriteError
# - TimeoutException: ConnectTimeout, ReadTimeout, WriteTimeout, PoolTimeout
# - ProtocolError: RemoteProtocolError, LocalProtocolError
TRANSPORT_ERRORS: tuple[type[Exception], ...] = (
    httpx.NetworkError,
    httpx.TimeoutException,
    httpx.ProtocolError,
)

# ============================================================================
# Defaults
# ============================================================================

DEFAULT_BASE_URL: str = os.environ.get("PRESENTATION_BACKEND_URL", "http://localhost:3001/presentation")

# Platform log directory:
# - macOS: ~/Library/Logs/presentation-client
# - Linux: ~/.local/state/presentation-client/log
# - Windows: %LOCALAPPDATA%\presentation-client\Logs
DEFAULT_LOG_DIR: str = user_log_dir(APP_NAME)

CONFIG_FILENAME: str = "config.json"
SYSTEM_LOG_FILENAME: str = "system.jsonl"
