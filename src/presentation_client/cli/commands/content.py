"""Content command for presentation-client CLI.

Fetches content for a set of instance keys. The descriptor is created by
the backend for the requested display type.
"""

from __future__ import annotations

__all__ = ["content"]

from pathlib import Path

import click

from presentation_client.cli.helpers import (
    build_connection,
    echo_json,
    load_config_or_exit,
    load_ruleset_file,
    parse_instance_key,
    parse_variable,
    run_with_manager,
)
from presentation_client.cli.styling import style_dim, style_label
from presentation_client.manager import PresentationManager
from presentation_client.models.content import ContentAndSize
from presentation_client.models.paging import PagingWindow
from presentation_client.models.requests import ContentRequestOptions

DEFAULT_DISPLAY_TYPE = "Grid"


@click.command()
@click.argument("keys", nargs=-1, required=True)
@click.option("--imodel", "imodel_id", required=True, help="Id of the data source")
@click.option("--changeset", "changeset_id", help="Changeset (version) of the data source")
@click.option("--ruleset", "ruleset_id", help="Id of a ruleset known to the backend")
@click.option(
    "--ruleset-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Ruleset JSON file sent with the request",
)
@click.option("--display-type", default=DEFAULT_DISPLAY_TYPE, show_default=True, help="Content display type")
@click.option("--start", type=click.IntRange(min=0), default=0, show_default=True, help="First item index")
@click.option("--size", type=click.IntRange(min=0), default=0, help="Number of items (0 = all)")
@click.option("--var", "variables", multiple=True, help="Ruleset variable as ID:TYPE=VALUE (repeatable)")
@click.option("--locale", help="Locale of labels and values")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def content(
    keys: tuple[str, ...],
    imodel_id: str,
    changeset_id: str | None,
    ruleset_id: str | None,
    ruleset_file: Path | None,
    display_type: str,
    start: int,
    size: int,
    variables: tuple[str, ...],
    locale: str | None,
    config_path: Path | None,
    as_json: bool,
) -> None:
    """Show content for instance KEYS (CLASS_NAME:ID).

    Examples:
        presentation-client content --imodel abc --ruleset Items BisCore:Element:0x1
    """
    if not ruleset_id and ruleset_file is None:
        raise click.UsageError("Provide --ruleset or --ruleset-file")

    config = load_config_or_exit(config_path, active_locale=locale)
    ruleset = load_ruleset_file(ruleset_file) if ruleset_file is not None else None
    instance_keys = [parse_instance_key(key) for key in keys]
    options = ContentRequestOptions(
        connection=build_connection(imodel_id, changeset_id),
        ruleset_or_id=ruleset.id if ruleset is not None else (ruleset_id or ""),
        ruleset_variables=[parse_variable(text) for text in variables] or None,
        descriptor={"displayType": display_type},
        keys={"instanceKeys": [key.to_wire() for key in instance_keys]},
        paging=PagingWindow(start=start, size=size),
    )

    async def action(manager: PresentationManager) -> ContentAndSize | None:
        return await manager.get_content_and_size(options)

    result = run_with_manager(config, action, rulesets=[ruleset] if ruleset is not None else None)

    if as_json:
        if result is None:
            echo_json(None)
        else:
            echo_json(
                {
                    "size": result.size,
                    "descriptor": result.content.descriptor.to_wire(),
                    "items": result.content.content_set,
                }
            )
        return

    if result is None:
        click.echo(style_dim("No content."))
        return
    click.echo(style_label("Items") + f" {len(result.content.content_set)} of {result.size}")
    for index, item in enumerate(result.content.content_set, start=start):
        label = item.get("label") if isinstance(item, dict) else item
        if isinstance(label, dict):
            label = label.get("displayValue")
        click.echo(f"  {index:>4}  {label or ''}")
