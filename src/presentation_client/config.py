"""Client configuration for presentation-client.

The configuration says where the backend is and which session defaults the
manager starts with. It is stored as JSON at the OS-appropriate location
(via click.get_app_dir) and created with `presentation-client init`.

Example usage:
    config = ClientConfig.load_from_file(get_config_path())
    transport = config.create_transport()
"""

from __future__ import annotations

__all__ = [
    "ClientConfig",
    "get_config_path",
]

import json
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from presentation_client.constants import (
    CONFIG_FILENAME,
    DEFAULT_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_DIR,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
    SYSTEM_LOG_FILENAME,
)
from presentation_client.exceptions import ConfigurationError
from presentation_client.models.common import PresentationUnitSystem
from presentation_client.transport.http import HttpPresentationTransport
from presentation_client.transport.push import SsePushChannel
from presentation_client.utils.file_helpers import get_app_dir, load_validated_json, require_file_exists


def get_config_path() -> Path:
    """Return the default config file path."""
    return get_app_dir() / CONFIG_FILENAME


class ClientConfig(BaseModel):
    """Presentation client configuration.

    Attributes:
        base_url: Backend URL (e.g. "http://localhost:3001/presentation").
        timeout_seconds: Request timeout in seconds (1-300).
        client_id: Value of the X-Client-Id header. Random per process if None.
        active_locale: Default locale of requests.
        active_unit_system: Default unit system of requests.
        push_enabled: Whether to subscribe to the backend's event stream.
        log_dir: Directory of the system log file.
    """

    base_url: str = Field(default=DEFAULT_BASE_URL, min_length=1, pattern=r"^https?://")
    timeout_seconds: int = Field(
        default=DEFAULT_HTTP_TIMEOUT_SECONDS,
        ge=MIN_HTTP_TIMEOUT_SECONDS,
        le=MAX_HTTP_TIMEOUT_SECONDS,
    )
    client_id: str | None = None
    active_locale: str | None = None
    active_unit_system: PresentationUnitSystem | None = None
    push_enabled: bool = True
    log_dir: str = DEFAULT_LOG_DIR

    @property
    def system_log_path(self) -> Path:
        return Path(self.log_dir).expanduser() / SYSTEM_LOG_FILENAME

    def create_transport(self) -> HttpPresentationTransport:
        """Create the HTTP transport described by this configuration."""
        return HttpPresentationTransport(
            self.base_url,
            timeout=self.timeout_seconds,
            client_id=self.client_id,
        )

    def create_push_channel(self, client_id: str | None = None) -> SsePushChannel:
        """Create the SSE push channel described by this configuration.

        Args:
            client_id: Client id to announce; defaults to the configured one.
        """
        return SsePushChannel(self.base_url, client_id=client_id or self.client_id)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file.

        Creates parent directories if they don't exist.

        Args:
            config_path: Path where the config JSON file should be saved.
        """
        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def load_from_file(cls, config_path: Path) -> "ClientConfig":
        """Load configuration from a JSON file.

        Args:
            config_path: Path to the config JSON file.

        Returns:
            ClientConfig instance.

        Raises:
            ConfigurationError: If the file is missing or invalid.
        """
        try:
            require_file_exists(config_path, file_type="configuration")
            return load_validated_json(
                config_path,
                cls,
                file_type="config",
                recovery_hint=f"Run 'presentation-client init --force' to recreate {config_path}.",
            )
        except (FileNotFoundError, ValueError) as e:
            raise ConfigurationError(str(e)) from e

    @classmethod
    def load_or_default(cls, config_path: Path) -> "ClientConfig":
        """Load configuration, or return defaults if the file does not exist.

        Raises:
            ConfigurationError: If the file exists but is invalid.
        """
        if not config_path.exists():
            return cls()
        return cls.load_from_file(config_path)

    def with_overrides(self, **overrides: object) -> "ClientConfig":
        """Return a copy with non-None overrides applied and validated.

        Raises:
            ConfigurationError: If an override is invalid.
        """
        data = self.model_dump()
        data.update({key: value for key, value in overrides.items() if value is not None})
        try:
            return ClientConfig.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid configuration override: {e}") from e
