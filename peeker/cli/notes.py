"""Note-related CLI commands."""

from __future__ import annotations

import click
from rich.markdown import Markdown

from peeker.cli.utils import console, get_cli_client, upstream_errors
from peeker.core.notes import get_note_document


def register_note_commands(cli: click.Group) -> None:
    """Register all note-related commands with the CLI."""
    cli.add_command(show_cmd)


@click.command("show")
@click.argument("note_id")
@click.option("--nav", is_flag=True, help="Include the navigation links")
@click.option("--render", "-r", is_flag=True, help="Render markdown in the terminal")
@click.pass_context
def show_cmd(ctx: click.Context, note_id: str, nav: bool, render: bool) -> None:
    """Print a note with its links rewritten for the gateway."""
    _, client = get_cli_client(ctx)
    with upstream_errors():
        document = get_note_document(client, note_id)

    markdown = document.to_markdown() if nav else document.body
    if render:
        console.print(Markdown(markdown))
    else:
        click.echo(markdown)
