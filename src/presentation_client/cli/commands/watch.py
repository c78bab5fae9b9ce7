"""Watch command for presentation-client CLI.

Opens the backend's event stream and prints hierarchy/content change events
of the given rulesets. Updates of rulesets not given here are not shown.
"""

from __future__ import annotations

__all__ = ["watch"]

import asyncio
from pathlib import Path
from typing import Any

import click

from presentation_client.cli.helpers import echo_json, load_config_or_exit, load_ruleset_file, run_with_manager
from presentation_client.cli.styling import style_dim, style_header
from presentation_client.manager import PresentationManager
from presentation_client.models.rulesets import Ruleset
from presentation_client.models.updates import ContentChangeEventArgs, HierarchyChangeEventArgs


@click.command()
@click.option("--ruleset", "ruleset_ids", multiple=True, help="Ruleset id to watch (repeatable)")
@click.option(
    "--ruleset-file",
    "ruleset_files",
    multiple=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Ruleset JSON file to watch (repeatable)",
)
@click.option("--max-events", type=click.IntRange(min=0), default=0, help="Stop after N events (0 = run until Ctrl+C)")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path), help="Config file")
@click.option("--json", "as_json", is_flag=True, help="Output events as JSON lines")
def watch(
    ruleset_ids: tuple[str, ...],
    ruleset_files: tuple[Path, ...],
    max_events: int,
    config_path: Path | None,
    as_json: bool,
) -> None:
    """Print change events pushed by the backend.

    Examples:
        presentation-client watch --ruleset Tree
        presentation-client watch --ruleset-file tree.json --max-events 5 --json
    """
    rulesets = [Ruleset(id=ruleset_id) for ruleset_id in ruleset_ids]
    rulesets.extend(load_ruleset_file(path) for path in ruleset_files)
    if not rulesets:
        raise click.UsageError("Provide at least one --ruleset or --ruleset-file")

    config = load_config_or_exit(config_path)
    if not config.push_enabled:
        raise click.ClickException("Push notifications are disabled in the configuration (push_enabled)")

    async def action(manager: PresentationManager) -> int:
        queue: asyncio.Queue[tuple[str, HierarchyChangeEventArgs | ContentChangeEventArgs]] = asyncio.Queue()
        manager.on_hierarchy_changed.add_listener(lambda args: queue.put_nowait(("hierarchy", args)))
        manager.on_content_changed.add_listener(lambda args: queue.put_nowait(("content", args)))

        if not as_json:
            click.echo(style_header("Watching " + ", ".join(r.id for r in rulesets)))
        received = 0
        while max_events == 0 or received < max_events:
            kind, args = await queue.get()
            _print_event(kind, args.ruleset.id, args.update_info, as_json)
            received += 1
        return received

    try:
        run_with_manager(config, action, rulesets=rulesets, push=True)
    except KeyboardInterrupt:
        if not as_json:
            click.echo(style_dim("Stopped."))


def _print_event(kind: str, ruleset_id: str, update_info: Any, as_json: bool) -> None:
    if as_json:
        echo_json({"kind": kind, "ruleset_id": ruleset_id, "update_info": update_info})
        return
    if update_info == "FULL":
        detail = "full reload"
    else:
        detail = f"{len(update_info)} change(s)"
    click.echo(f"{kind:10} {ruleset_id:30} {detail}")
