"""Shared helpers for CLI commands.

Commands load the client configuration, build a manager over the HTTP
transport and run one coroutine against it. Backend failures surface as
click errors.
"""

from __future__ import annotations

__all__ = [
    "PresentationCommandError",
    "build_connection",
    "echo_json",
    "load_config_or_exit",
    "load_ruleset_file",
    "parse_instance_key",
    "parse_json_option",
    "parse_variable",
    "run_with_manager",
]

import asyncio
import json
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any, TypeVar

import click
from pydantic import ValidationError

from presentation_client.config import ClientConfig, get_config_path
from presentation_client.connections import RemoteConnection
from presentation_client.exceptions import ConfigurationError, PresentationError
from presentation_client.manager import PresentationManager, PresentationManagerProps
from presentation_client.models.common import InstanceKey
from presentation_client.models.rulesets import Ruleset, RulesetVariable, VariableValueType
from presentation_client.telemetry.system import configure_system_logger_file
from presentation_client.utils.file_helpers import load_validated_json

R = TypeVar("R")

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off"})


class PresentationCommandError(click.ClickException):
    """Raised when a backend request made by a command fails."""

    def __init__(self, error: PresentationError) -> None:
        super().__init__(f"Presentation request failed ({error.status.name}): {error.message}")
        self.error = error


def load_config_or_exit(config_path: Path | None = None, **overrides: Any) -> ClientConfig:
    """Load the client configuration, falling back to defaults.

    Args:
        config_path: Config file; the default location if None.
        **overrides: Values replacing configured ones (None values are ignored).

    Returns:
        ClientConfig instance.

    Raises:
        click.ClickException: If the config file is invalid.
    """
    try:
        config = ClientConfig.load_or_default(config_path or get_config_path())
        return config.with_overrides(**overrides)
    except ConfigurationError as e:
        raise click.ClickException(f"Failed to load configuration: {e}") from e


def run_with_manager(
    config: ClientConfig,
    action: Callable[[PresentationManager], Awaitable[R]],
    *,
    rulesets: list[Ruleset] | None = None,
    push: bool = False,
) -> R:
    """Create a manager from config, run action against it and close it.

    Args:
        config: Client configuration.
        action: Coroutine function receiving the manager.
        rulesets: Rulesets registered before the action runs.
        push: Whether to open the backend's event stream.

    Returns:
        Result of action.

    Raises:
        PresentationCommandError: If a backend request fails.
    """
    configure_system_logger_file(config.system_log_path)

    async def runner() -> R:
        transport = config.create_transport()
        push_channel = config.create_push_channel(transport.client_id) if push else None
        manager = PresentationManager.create(
            PresentationManagerProps(
                transport=transport,
                push_channel=push_channel,
                push_enabled=push and config.push_enabled,
                active_locale=config.active_locale,
                active_unit_system=config.active_unit_system,
            )
        )
        async with manager:
            for ruleset in rulesets or []:
                await manager.rulesets().add(ruleset)
            if push_channel is not None and config.push_enabled:
                push_channel.start()
            return await action(manager)

    try:
        return asyncio.run(runner())
    except PresentationError as e:
        raise PresentationCommandError(e) from e


def build_connection(imodel_id: str, changeset_id: str | None) -> RemoteConnection:
    return RemoteConnection(imodel_id=imodel_id, changeset_id=changeset_id or "")


def load_ruleset_file(path: Path) -> Ruleset:
    """Load and validate a ruleset JSON file.

    Raises:
        click.BadParameter: If the file is missing or not a valid ruleset.
    """
    try:
        return load_validated_json(path, Ruleset, file_type="ruleset")
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--ruleset-file") from e


def parse_json_option(value: str | None, option_name: str) -> Any:
    """Decode a JSON option value (None stays None)."""
    if value is None:
        return None
    try:
        return json.loads(value)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"Invalid JSON: {e}", param_hint=option_name) from e


def parse_instance_key(value: str) -> InstanceKey:
    """Parse "Schema:Class:0x1" into an InstanceKey (id after the last colon)."""
    class_name, sep, instance_id = value.rpartition(":")
    if not sep or not class_name or not instance_id:
        raise click.BadParameter(f"Expected CLASS_NAME:ID, got '{value}'", param_hint="KEYS")
    return InstanceKey(class_name=class_name, id=instance_id)


def parse_variable(text: str) -> RulesetVariable:
    """Parse a ruleset variable given as ID:TYPE=VALUE.

    Array values are comma-separated. Examples:
        show_private:bool=true
        ids:id64[]=0x1,0x2

    Raises:
        click.BadParameter: If the text or value is malformed.
    """
    head, sep, raw_value = text.partition("=")
    variable_id, colon, type_name = head.partition(":")
    if not sep or not colon or not variable_id:
        raise click.BadParameter(f"Expected ID:TYPE=VALUE, got '{text}'", param_hint="--var")
    try:
        value_type = VariableValueType(type_name)
    except ValueError as e:
        choices = ", ".join(t.value for t in VariableValueType)
        raise click.BadParameter(f"Unknown type '{type_name}' (one of: {choices})", param_hint="--var") from e

    try:
        value = _convert_value(value_type, raw_value)
        return RulesetVariable(id=variable_id, type=value_type, value=value)
    except (ValueError, ValidationError) as e:
        raise click.BadParameter(f"Invalid {value_type.value} value '{raw_value}'", param_hint="--var") from e


def _convert_value(value_type: VariableValueType, raw: str) -> Any:
    items = [item.strip() for item in raw.split(",") if item.strip()]
    if value_type == VariableValueType.BOOL:
        lowered = raw.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
        raise ValueError(raw)
    if value_type == VariableValueType.INT:
        return int(raw)
    if value_type == VariableValueType.INT_ARRAY:
        return [int(item) for item in items]
    if value_type == VariableValueType.ID64_ARRAY:
        return items
    return raw


def echo_json(data: Any) -> None:
    click.echo(json.dumps(data, indent=2, default=str))
