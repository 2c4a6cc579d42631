"""Configuration parsing functions for peeker."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from .models import CONFIG_FILE_NAMES, ConfigError

BOOL_TRUE_VALUES = ("true", "1", "yes", "on")
BOOL_FALSE_VALUES = ("false", "0", "no", "off")

# Config file key -> environment variable
ENV_VARS = {
    "joplin_server": "JOPLIN_SERVER",
    "joplin_token": "JOPLIN_TOKEN",
    "peeker_host": "PEEKER_HOST",
    "peeker_port": "PEEKER_PORT",
    "timeout": "PEEKER_TIMEOUT",
    "retries": "PEEKER_RETRIES",
    "max_pages": "PEEKER_MAX_PAGES",
    "verbose": "PEEKER_VERBOSE",
}


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in a path."""
    path_str = os.path.expandvars(str(path))
    return Path(path_str).expanduser()


def get_config_path(directory: Path | None = None) -> Path | None:
    """Find the config file to load.

    PEEKER_CONFIG wins when set. Otherwise the first of config.json,
    config.yaml or config.yml found in ``directory`` (default: the working
    directory) is used. Returns None when there is no config file.
    """
    env_path = os.environ.get("PEEKER_CONFIG")
    if env_path:
        return expand_path(env_path)

    directory = directory or Path.cwd()
    for name in CONFIG_FILE_NAMES:
        candidate = directory / name
        if candidate.exists():
            return candidate
    return None


def parse_bool_strict(value: str | bool, setting_name: str) -> bool:
    """Parse a boolean setting strictly.

    Raises:
        ConfigError: If the value is not a recognized boolean string
    """
    if isinstance(value, bool):
        return value
    lower = str(value).strip().lower()
    if lower in BOOL_TRUE_VALUES:
        return True
    if lower in BOOL_FALSE_VALUES:
        return False
    valid = ", ".join(BOOL_TRUE_VALUES + BOOL_FALSE_VALUES)
    raise ConfigError(
        f"Invalid boolean value '{value}' for {setting_name}. Valid: {valid}"
    )


def _parse_int(value: Any, setting_name: str, minimum: int = 0) -> int:
    """Parse an integer setting, rejecting values below ``minimum``."""
    try:
        result = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid integer '{value}' for {setting_name}") from None
    if result < minimum:
        raise ConfigError(f"{setting_name} must be >= {minimum}, got {result}")
    return result


def _parse_port(value: Any) -> int:
    port = _parse_int(value, "peeker_port", minimum=0)
    if port > 65535:
        raise ConfigError(f"peeker_port must be <= 65535, got {port}")
    return port


def _parse_timeout(value: Any) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid number '{value}' for timeout") from None
    if result <= 0:
        raise ConfigError(f"timeout must be positive, got {result}")
    return result


def _parse_server_url(value: Any) -> str:
    """Normalize the Joplin server address (no trailing slash)."""
    url = str(value).strip().rstrip("/")
    if not url.startswith(("http://", "https://")):
        raise ConfigError(
            f"joplin_server must start with http:// or https://, got '{value}'"
        )
    return url
