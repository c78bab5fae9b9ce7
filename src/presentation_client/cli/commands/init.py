"""Init command for presentation-client CLI.

Writes the client configuration file.
"""

from __future__ import annotations

__all__ = ["init"]

from pathlib import Path

import click
from pydantic import ValidationError

from presentation_client.cli.styling import style_success
from presentation_client.config import ClientConfig, get_config_path
from presentation_client.constants import (
    DEFAULT_BASE_URL,
    DEFAULT_HTTP_TIMEOUT_SECONDS,
    DEFAULT_LOG_DIR,
    MAX_HTTP_TIMEOUT_SECONDS,
    MIN_HTTP_TIMEOUT_SECONDS,
)
from presentation_client.models.common import PresentationUnitSystem


@click.command()
@click.option("--base-url", default=DEFAULT_BASE_URL, show_default=True, help="Presentation backend URL")
@click.option(
    "--timeout",
    type=click.IntRange(MIN_HTTP_TIMEOUT_SECONDS, MAX_HTTP_TIMEOUT_SECONDS),
    default=DEFAULT_HTTP_TIMEOUT_SECONDS,
    show_default=True,
    help="Request timeout in seconds",
)
@click.option("--client-id", help="Client id announced to the backend (random if omitted)")
@click.option("--locale", help="Default locale of requests")
@click.option(
    "--unit-system",
    type=click.Choice([u.value for u in PresentationUnitSystem]),
    help="Default unit system of requests",
)
@click.option("--no-push", is_flag=True, help="Do not subscribe to backend change events")
@click.option("--log-dir", default=DEFAULT_LOG_DIR, show_default=True, help="Directory of the system log")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--force", is_flag=True, help="Overwrite an existing configuration")
def init(
    base_url: str,
    timeout: int,
    client_id: str | None,
    locale: str | None,
    unit_system: str | None,
    no_push: bool,
    log_dir: str,
    config_path: Path | None,
    force: bool,
) -> None:
    """Create the client configuration file.

    Examples:
        presentation-client init --base-url http://localhost:3001/presentation
        presentation-client init --locale de --unit-system metric --force
    """
    path = config_path or get_config_path()
    if path.exists() and not force:
        raise click.ClickException(f"Configuration already exists at {path}\nUse --force to overwrite.")

    try:
        config = ClientConfig(
            base_url=base_url,
            timeout_seconds=timeout,
            client_id=client_id,
            active_locale=locale,
            active_unit_system=PresentationUnitSystem(unit_system) if unit_system else None,
            push_enabled=not no_push,
            log_dir=log_dir,
        )
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    config.save_to_file(path)
    click.echo(style_success(f"Configuration saved to {path}"))
