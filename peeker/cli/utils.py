"""Shared utilities for CLI commands."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

import click
from rich.console import Console

from peeker.config import ConfigError, PeekerConfig, load_config
from peeker.core.joplin import JoplinClient, UpstreamError

# Main console for stdout (user-facing output)
console = Console(highlight=False)

# Stderr console for errors and status (doesn't interfere with piped output)
stderr_console = Console(stderr=True, highlight=False)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logging(verbose: bool = False) -> None:
    """Configure root logging; verbose mode shows the request trace."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler()],
    )
    # httpx logs every request at INFO; keep it for verbose mode only
    logging.getLogger("httpx").setLevel(logging.INFO if verbose else logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def get_cli_config(ctx: click.Context, **extra: Any) -> PeekerConfig:
    """Load the config from the group options plus command-specific ones.

    Exits with status 1 and a message if the config is incomplete.
    """
    obj = ctx.ensure_object(dict)
    overrides = dict(obj.get("overrides", {}))
    overrides.update(extra)
    try:
        config = load_config(obj.get("config_path"), overrides)
    except ConfigError as e:
        stderr_console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1) from None
    setup_logging(config.verbose)
    return config


def get_cli_client(ctx: click.Context) -> tuple[PeekerConfig, JoplinClient]:
    config = get_cli_config(ctx)
    return config, JoplinClient(config)


@contextmanager
def upstream_errors() -> Iterator[None]:
    """Turn upstream failures into a red message and exit status 1."""
    try:
        yield
    except UpstreamError as e:
        stderr_console.print(f"[red]Error: {e}[/red]")
        raise SystemExit(1) from None
