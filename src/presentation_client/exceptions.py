"""Custom exceptions for presentation-client.

Errors are organized into two categories:

Service errors (reported by the presentation backend):
    - PresentationError: Carries a PresentationStatus code. The CANCELED
      status is recovered locally by hierarchy comparison only; everywhere
      else it reaches the caller like any other failure.

Local errors:
    - ConfigurationError: Invalid or missing client configuration.

Usage:
    from presentation_client.exceptions import PresentationError, PresentationStatus
"""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "PresentationError",
    "PresentationStatus",
]

from enum import IntEnum
from typing import Any


class PresentationStatus(IntEnum):
    """Status codes reported by the presentation backend."""

    SUCCESS = 0
    CANCELED = 1
    ERROR = 0x10000
    NOT_INITIALIZED = ERROR + 1
    USE_AFTER_DISPOSAL = ERROR + 2
    INVALID_ARGUMENT = ERROR + 3
    INVALID_RESPONSE = ERROR + 4
    NO_CONTENT = ERROR + 5
    BACKEND_TIMEOUT = ERROR + 6


class PresentationError(Exception):
    """Raised when a presentation request fails.

    Attributes:
        status: Status code describing the failure.
        message: Human-readable description.
    """

    def __init__(self, status: PresentationStatus | int, message: str | None = None) -> None:
        """Initialize PresentationError.

        Args:
            status: Status code. Unknown integer codes collapse to ERROR.
            message: Optional description. Defaults to the status name.
        """
        try:
            self.status = PresentationStatus(status)
        except ValueError:
            self.status = PresentationStatus.ERROR
        self.message = message or self.status.name.replace("_", " ").capitalize()
        super().__init__(self.message)

    @property
    def is_canceled(self) -> bool:
        """Whether the backend reported the request as canceled."""
        return self.status == PresentationStatus.CANCELED

    def to_dict(self) -> dict[str, Any]:
        """Convert to the wire error body."""
        return {"status": int(self.status), "message": self.message}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PresentationError":
        """Build an error from a wire error body.

        Args:
            data: Dict with "status" (int) and optional "message".

        Returns:
            PresentationError instance.
        """
        status = data.get("status", PresentationStatus.ERROR)
        if not isinstance(status, int):
            status = PresentationStatus.ERROR
        message = data.get("message")
        return cls(status, message if isinstance(message, str) else None)

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return f"PresentationError({self.status.name}, {self.message!r})"


class ConfigurationError(Exception):
    """Raised when client configuration is invalid or missing."""

    pass
