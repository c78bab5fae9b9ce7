"""Main CLI entry point for presentation-client.

Defines the CLI group and registers all subcommands.

Commands:
    init     - Create the client configuration
    nodes    - List hierarchy nodes
    content  - Show content for instance keys
    labels   - Show display labels of instance keys
    watch    - Print change events pushed by the backend

Subcommand help:
    presentation-client COMMAND -h     Show help for a specific command
"""

from __future__ import annotations

__all__ = ["cli", "main"]

import sys

import click

from presentation_client import __version__

from .commands.content import content
from .commands.init import init
from .commands.labels import labels
from .commands.nodes import nodes
from .commands.watch import watch


class ReorderedGroup(click.Group):
    """Group that shows a quick start after the commands section."""

    def format_epilog(self, ctx: click.Context, formatter: click.HelpFormatter) -> None:
        formatter.write(
            """
Quick Start:
  presentation-client init --base-url http://localhost:3001/presentation
  presentation-client nodes --imodel <id> --ruleset <ruleset-id>
  presentation-client labels --imodel <id> BisCore:Element:0x1

Ruleset variables (nodes, content):
  --var show_private:bool=true --var ids:id64[]=0x1,0x2
"""
        )


@click.group(
    cls=ReorderedGroup,
    invoke_without_command=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def cli(ctx: click.Context, version: bool) -> None:
    """presentation-client: query hierarchies and content from a presentation backend."""
    if version:
        click.echo(f"presentation-client {__version__}")
        sys.exit(0)
    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


# Register commands
cli.add_command(content)
cli.add_command(init)
cli.add_command(labels)
cli.add_command(nodes)
cli.add_command(watch)


def main() -> None:
    """CLI entry point."""
    cli()
