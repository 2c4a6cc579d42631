"""Search CLI command."""

from __future__ import annotations

import click
from rich.table import Table

from peeker.cli.utils import console, get_cli_client, upstream_errors
from peeker.core.search import parse_search_results, search_notes


def register_search_commands(cli: click.Group) -> None:
    cli.add_command(search_cmd)


@click.command("search")
@click.argument("query")
@click.option("--json", "as_json", is_flag=True, help="Print Joplin's JSON as is")
@click.pass_context
def search_cmd(ctx: click.Context, query: str, as_json: bool) -> None:
    """Search notes on the Joplin server."""
    _, client = get_cli_client(ctx)
    with upstream_errors():
        raw = search_notes(client, query)
        if as_json:
            click.echo(raw.decode("utf-8", errors="replace"))
            return
        items = parse_search_results(raw)

    if not items:
        console.print("[dim]No results.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Id", style="dim")
    table.add_column("Title")
    for item in items:
        table.add_row(str(item.get("id", "")), str(item.get("title", "")))
    console.print(table)
