"""Config-related CLI commands."""

from __future__ import annotations

from pathlib import Path

import click
from rich.table import Table

from peeker.cli.utils import console, get_cli_config
from peeker.config import init_config


def register_config_commands(cli: click.Group) -> None:
    """Register all config-related commands with the CLI."""
    cli.add_command(config_cmd)


@click.group("config", invoke_without_command=True)
@click.pass_context
def config_cmd(ctx: click.Context) -> None:
    """Show or create the configuration.

    When called without a subcommand, shows the resolved settings.

    \b
    Subcommands:
      init [PATH]   Write a default config.yaml
    """
    if ctx.invoked_subcommand is not None:
        return

    config = get_cli_config(ctx)
    table = Table(show_header=True)
    table.add_column("Setting")
    table.add_column("Value")
    table.add_row("joplin_server", config.joplin_server)
    table.add_row("joplin_token", config.masked_token)
    table.add_row("listen", config.listen_address)
    table.add_row("timeout", f"{config.timeout:g}s")
    table.add_row("retries", str(config.retries))
    table.add_row("max_pages", str(config.max_pages))
    table.add_row("verbose", str(config.verbose))
    console.print(table)


@config_cmd.command("init")
@click.argument("path", type=click.Path(path_type=Path), default=Path("config.yaml"))
def config_init(path: Path) -> None:
    """Write a default config file (kept if it already exists)."""
    existed = path.exists()
    init_config(path)
    if existed:
        console.print(f"[yellow]{path} already exists, left unchanged.[/yellow]")
    else:
        console.print(f"[green]Created {path}[/green]")
