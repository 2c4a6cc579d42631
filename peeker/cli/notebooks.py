"""Notebook-related CLI commands."""

from __future__ import annotations

import json

import click
from rich.table import Table
from rich.tree import Tree

from peeker.cli.utils import console, get_cli_client, upstream_errors
from peeker.core.notebooks import fetch_notebook_notes, get_notebook_tree
from peeker.models import NotebookNode


def register_notebook_commands(cli: click.Group) -> None:
    """Register all notebook-related commands with the CLI."""
    cli.add_command(notebooks_cmd)


def _add_children(branch: Tree, node: NotebookNode, show_ids: bool) -> None:
    for child in node.children:
        label = child.title or "[dim](untitled)[/dim]"
        if show_ids:
            label += f" [dim]{child.id}[/dim]"
        _add_children(branch.add(label), child, show_ids)


@click.group("notebooks", invoke_without_command=True)
@click.option("--ids", is_flag=True, help="Show notebook ids")
@click.option("--json", "as_json", is_flag=True, help="Print the tree as JSON")
@click.pass_context
def notebooks_cmd(ctx: click.Context, ids: bool, as_json: bool) -> None:
    """Show the notebook tree.

    Run without a subcommand to print all notebooks.
    """
    if ctx.invoked_subcommand is not None:
        return

    config, client = get_cli_client(ctx)
    with upstream_errors():
        tree = get_notebook_tree(client, config.max_pages)

    if as_json:
        click.echo(json.dumps(tree.to_dict(), indent=2))
        return

    if not tree.children:
        console.print("[dim]No notebooks found.[/dim]")
        return

    root = Tree("[bold]Notebooks[/bold]")
    _add_children(root, tree, ids)
    console.print(root)


@notebooks_cmd.command("notes")
@click.argument("notebook_id")
@click.pass_context
def notebooks_notes(ctx: click.Context, notebook_id: str) -> None:
    """List the notes of a notebook."""
    config, client = get_cli_client(ctx)
    with upstream_errors():
        notes = fetch_notebook_notes(client, notebook_id, config.max_pages)

    if not notes:
        console.print("[dim]No notes in this notebook.[/dim]")
        return

    table = Table(show_header=True)
    table.add_column("Id", style="dim")
    table.add_column("Title")
    for note in notes:
        table.add_row(note.id, note.title)
    console.print(table)
