"""Configuration I/O functions for peeker."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .models import (
    DEFAULT_CONFIG_YAML,
    DEFAULT_JOPLIN_SERVER,
    DEFAULT_MAX_PAGES,
    DEFAULT_PEEKER_HOST,
    DEFAULT_PEEKER_PORT,
    DEFAULT_RETRIES,
    DEFAULT_TIMEOUT,
    ConfigError,
    PeekerConfig,
)
from .parsers import (
    ENV_VARS,
    _parse_int,
    _parse_port,
    _parse_server_url,
    _parse_timeout,
    get_config_path,
    parse_bool_strict,
)

logger = logging.getLogger(__name__)

_DEFAULTS: dict[str, Any] = {
    "joplin_server": DEFAULT_JOPLIN_SERVER,
    "joplin_token": "",
    "peeker_host": DEFAULT_PEEKER_HOST,
    "peeker_port": DEFAULT_PEEKER_PORT,
    "timeout": DEFAULT_TIMEOUT,
    "retries": DEFAULT_RETRIES,
    "max_pages": DEFAULT_MAX_PAGES,
    "verbose": False,
}


def read_config_file(config_path: Path) -> dict[str, Any]:
    """Read a JSON or YAML config file into a dict.

    YAML is a superset of JSON, so ``config.json`` files are parsed by the
    same loader.

    Raises:
        ConfigError: If the file cannot be read or does not hold a mapping
    """
    try:
        with config_path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {config_path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid config file {config_path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config file {config_path} must contain a mapping")
    return data


def _resolve(
    key: str, overrides: dict[str, Any], file_data: dict[str, Any]
) -> Any:
    """Resolve one setting: override > environment > config file > default."""
    value = overrides.get(key)
    if value is not None and value != "":
        return value

    env_value = os.environ.get(ENV_VARS[key])
    if env_value:
        return env_value

    value = file_data.get(key)
    if value is not None and value != "":
        return value

    return _DEFAULTS[key]


def load_config(
    config_path: Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> PeekerConfig:
    """Build the gateway configuration.

    Each setting is looked up in this priority order (first wins):
    1. ``overrides`` (command line options; None values are ignored)
    2. Environment variables (JOPLIN_SERVER, JOPLIN_TOKEN, PEEKER_HOST, ...)
    3. The config file (config.json / config.yaml, or PEEKER_CONFIG)
    4. Built-in defaults

    A ``.env`` file next to the config file (or in the working directory) is
    loaded first without overriding variables already set in the shell.

    Raises:
        ConfigError: If the token is missing or a value is invalid
    """
    overrides = overrides or {}

    if config_path is None:
        config_path = get_config_path()

    env_dir = config_path.parent if config_path is not None else Path.cwd()
    env_file = env_dir / ".env"
    if env_file.exists():
        load_dotenv(env_file, override=False)

    file_data: dict[str, Any] = {}
    if config_path is not None:
        if config_path.exists():
            file_data = read_config_file(config_path)
            logger.debug("Loaded config file %s", config_path)
        else:
            logger.warning("Config file %s not found, ignoring", config_path)

    token = str(_resolve("joplin_token", overrides, file_data)).strip()
    if not token:
        raise ConfigError(
            "JOPLIN_TOKEN is missing. Pass --token, set the JOPLIN_TOKEN "
            "environment variable or add joplin_token to config.json."
        )

    return PeekerConfig(
        joplin_token=token,
        joplin_server=_parse_server_url(
            _resolve("joplin_server", overrides, file_data)
        ),
        host=str(_resolve("peeker_host", overrides, file_data)),
        port=_parse_port(_resolve("peeker_port", overrides, file_data)),
        verbose=parse_bool_strict(_resolve("verbose", overrides, file_data), "verbose"),
        timeout=_parse_timeout(_resolve("timeout", overrides, file_data)),
        retries=_parse_int(_resolve("retries", overrides, file_data), "retries"),
        max_pages=_parse_int(
            _resolve("max_pages", overrides, file_data), "max_pages", minimum=1
        ),
    )


def init_config(config_path: Path) -> Path:
    """Write the default YAML config to ``config_path`` if it doesn't exist."""
    if not config_path.exists():
        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(DEFAULT_CONFIG_YAML, encoding="utf-8")
    return config_path
