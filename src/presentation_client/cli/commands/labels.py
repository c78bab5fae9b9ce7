"""Labels command for presentation-client CLI."""

from __future__ import annotations

__all__ = ["labels"]

from pathlib import Path
from typing import Any

import click

from presentation_client.cli.helpers import (
    build_connection,
    echo_json,
    load_config_or_exit,
    parse_instance_key,
    run_with_manager,
)
from presentation_client.manager import PresentationManager
from presentation_client.models.requests import DisplayLabelsRequestOptions


@click.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--imodel", "imodel_id", required=True, help="Id of the data source")
@click.option("--changeset", "changeset_id", help="Changeset (version) of the data source")
@click.option("--locale", help="Locale of the labels")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def labels(
    keys: tuple[str, ...],
    imodel_id: str,
    changeset_id: str | None,
    locale: str | None,
    config_path: Path | None,
    as_json: bool,
) -> None:
    """Show display labels of instance KEYS (CLASS_NAME:ID).

    Examples:
        presentation-client labels --imodel abc BisCore:Element:0x1 BisCore:Element:0x2
    """
    config = load_config_or_exit(config_path, active_locale=locale)
    instance_keys = [parse_instance_key(key) for key in keys]
    options = DisplayLabelsRequestOptions(
        connection=build_connection(imodel_id, changeset_id),
        keys=instance_keys,
    )

    async def action(manager: PresentationManager) -> list[Any]:
        return await manager.get_display_label_definitions(options)

    definitions = run_with_manager(config, action)

    if as_json:
        echo_json([{"key": key.to_wire(), "label": label} for key, label in zip(instance_keys, definitions)])
        return
    for key, label in zip(keys, definitions):
        display = label.get("displayValue") if isinstance(label, dict) else label
        click.echo(f"{key}  {display or ''}")
