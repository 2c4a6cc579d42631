"""CLI package for peeker."""

from __future__ import annotations

from pathlib import Path

import click

from peeker import __version__
from peeker.cli.config_cmd import register_config_commands
from peeker.cli.notebooks import register_notebook_commands
from peeker.cli.notes import register_note_commands
from peeker.cli.search import register_search_commands
from peeker.cli.web import register_web_commands


@click.group()
@click.version_option(version=__version__, prog_name="peeker")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    help="Config file (default: config.json or config.yaml in the current directory)",
)
@click.option("--joplin", help="Joplin server address (default: http://localhost:41184)")
@click.option("--token", help="Joplin access token")
@click.option("--verbose", "-v", is_flag=True, default=None, help="Verbose logging")
@click.pass_context
def cli(
    ctx: click.Context,
    config_path: Path | None,
    joplin: str | None,
    token: str | None,
    verbose: bool | None,
) -> None:
    """A read-only web gateway for Joplin notes.

    Settings come from the options below, then the environment (JOPLIN_SERVER,
    JOPLIN_TOKEN, ...), then config.json / config.yaml, then defaults.
    """
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path
    ctx.obj["overrides"] = {
        "joplin_server": joplin,
        "joplin_token": token,
        "verbose": verbose,
    }


register_web_commands(cli)
register_notebook_commands(cli)
register_note_commands(cli)
register_search_commands(cli)
register_config_commands(cli)


def main() -> None:
    """Entry point for the CLI."""
    cli()
