"""Nodes command for presentation-client CLI.

Lists hierarchy nodes produced by a ruleset, root level or under a parent.
"""

from __future__ import annotations

__all__ = ["nodes"]

from pathlib import Path
from typing import Any

import click

from presentation_client.cli.helpers import (
    build_connection,
    echo_json,
    load_config_or_exit,
    load_ruleset_file,
    parse_json_option,
    parse_variable,
    run_with_manager,
)
from presentation_client.cli.styling import style_dim, style_label
from presentation_client.manager import PresentationManager
from presentation_client.models.content import NodesAndCount
from presentation_client.models.paging import PagingWindow
from presentation_client.models.requests import HierarchyRequestOptions


@click.command()
@click.option("--imodel", "imodel_id", required=True, help="Id of the data source")
@click.option("--changeset", "changeset_id", help="Changeset (version) of the data source")
@click.option("--ruleset", "ruleset_id", help="Id of a ruleset known to the backend")
@click.option(
    "--ruleset-file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Ruleset JSON file sent with the request",
)
@click.option("--parent-key", help="Parent node key as JSON (root nodes if omitted)")
@click.option("--start", type=click.IntRange(min=0), default=0, show_default=True, help="First node index")
@click.option("--size", type=click.IntRange(min=0), default=0, help="Number of nodes (0 = all)")
@click.option("--var", "variables", multiple=True, help="Ruleset variable as ID:TYPE=VALUE (repeatable)")
@click.option("--locale", help="Locale of node labels")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
def nodes(
    imodel_id: str,
    changeset_id: str | None,
    ruleset_id: str | None,
    ruleset_file: Path | None,
    parent_key: str | None,
    start: int,
    size: int,
    variables: tuple[str, ...],
    locale: str | None,
    config_path: Path | None,
    as_json: bool,
) -> None:
    """List hierarchy nodes.

    Examples:
        presentation-client nodes --imodel abc --ruleset Tree
        presentation-client nodes --imodel abc --ruleset-file tree.json --size 10
    """
    if not ruleset_id and ruleset_file is None:
        raise click.UsageError("Provide --ruleset or --ruleset-file")

    config = load_config_or_exit(config_path, active_locale=locale)
    ruleset = load_ruleset_file(ruleset_file) if ruleset_file is not None else None
    options = HierarchyRequestOptions(
        connection=build_connection(imodel_id, changeset_id),
        ruleset_or_id=ruleset.id if ruleset is not None else (ruleset_id or ""),
        ruleset_variables=[parse_variable(text) for text in variables] or None,
        paging=PagingWindow(start=start, size=size),
        parent_key=parse_json_option(parent_key, "--parent-key"),
    )

    async def action(manager: PresentationManager) -> NodesAndCount:
        return await manager.get_nodes_and_count(options)

    result = run_with_manager(config, action, rulesets=[ruleset] if ruleset is not None else None)

    if as_json:
        echo_json({"count": result.count, "nodes": result.nodes})
        return
    _print_nodes(result, start)


def _print_nodes(result: NodesAndCount, start: int) -> None:
    click.echo(style_label("Nodes") + f" {len(result.nodes)} of {result.count}")
    if not result.nodes:
        click.echo(style_dim("  No nodes."))
        return
    for index, node in enumerate(result.nodes, start=start):
        click.echo(f"  {index:>4}  {_node_label(node)}")


def _node_label(node: Any) -> str:
    if not isinstance(node, dict):
        return str(node)
    label = node.get("label")
    if isinstance(label, dict):
        return str(label.get("displayValue") or label.get("rawValue") or "")
    return str(label or node.get("key") or "")
