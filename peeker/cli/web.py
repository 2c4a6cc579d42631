"""Gateway server command for peeker."""

from __future__ import annotations

import click

from peeker.cli.utils import console, get_cli_config


@click.command("serve")
@click.option("--host", help="Listen address (default: 127.0.0.1)")
@click.option("--port", "-p", type=int, help="Listen port (default: 8080)")
@click.option("--open", "open_browser", is_flag=True, help="Open the browser once started")
@click.pass_context
def serve_cmd(ctx: click.Context, host: str | None, port: int | None, open_browser: bool) -> None:
    """Run the peeker gateway.

    Serves notes, notebooks, images and search results of the Joplin
    server over HTTP. Press Ctrl+C to stop.

    \b
    Options not given on the command line are read from the environment
    (JOPLIN_SERVER, JOPLIN_TOKEN, PEEKER_HOST, PEEKER_PORT), then from
    config.json / config.yaml in the current directory.
    """
    from peeker.webserver import run_server

    config = get_cli_config(ctx, peeker_host=host, peeker_port=port)
    console.print(f"[dim]Starting gateway at http://{config.listen_address}[/dim]")
    console.print("[dim]Press Ctrl+C to stop[/dim]")
    run_server(config, open_browser=open_browser)


def register_web_commands(cli: click.Group) -> None:
    """Register web commands with the CLI."""
    cli.add_command(serve_cmd)
