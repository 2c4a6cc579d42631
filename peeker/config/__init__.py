"""Configuration management for peeker.

The main entry points are:
- load_config(): Build a PeekerConfig from options, environment and file
- init_config(): Write a default config file
"""

from __future__ import annotations

from .io import init_config, load_config, read_config_file
from .models import (
    CONFIG_FILE_NAMES,
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
    BOOL_FALSE_VALUES,
    BOOL_TRUE_VALUES,
    ENV_VARS,
    expand_path,
    get_config_path,
    parse_bool_strict,
)

__all__ = [
    "BOOL_FALSE_VALUES",
    "BOOL_TRUE_VALUES",
    "CONFIG_FILE_NAMES",
    "DEFAULT_CONFIG_YAML",
    "DEFAULT_JOPLIN_SERVER",
    "DEFAULT_MAX_PAGES",
    "DEFAULT_PEEKER_HOST",
    "DEFAULT_PEEKER_PORT",
    "DEFAULT_RETRIES",
    "DEFAULT_TIMEOUT",
    "ENV_VARS",
    "ConfigError",
    "PeekerConfig",
    "expand_path",
    "get_config_path",
    "init_config",
    "load_config",
    "parse_bool_strict",
    "read_config_file",
]
