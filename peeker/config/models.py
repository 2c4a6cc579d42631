"""Configuration dataclass models for peeker."""

from __future__ import annotations

from dataclasses import dataclass

# Default configuration values
DEFAULT_JOPLIN_SERVER = "http://localhost:41184"
DEFAULT_PEEKER_HOST = "127.0.0.1"
DEFAULT_PEEKER_PORT = 8080
DEFAULT_TIMEOUT = 10.0  # Seconds per upstream call
DEFAULT_RETRIES = 2  # Connection retries per upstream call
DEFAULT_MAX_PAGES = 500  # Upper bound for paginated upstream listings

# Config files looked up in the working directory, first match wins
CONFIG_FILE_NAMES = ("config.json", "config.yaml", "config.yml")


class ConfigError(Exception):
    """Raised when the configuration is incomplete or invalid."""

    pass


@dataclass(frozen=True)
class PeekerConfig:
    """Gateway configuration.

    Built once at startup and passed explicitly to the upstream client and
    the web server. Instances are immutable so they can be shared by all
    request threads.
    """

    joplin_token: str
    joplin_server: str = DEFAULT_JOPLIN_SERVER
    host: str = DEFAULT_PEEKER_HOST
    port: int = DEFAULT_PEEKER_PORT
    verbose: bool = False
    timeout: float = DEFAULT_TIMEOUT
    retries: int = DEFAULT_RETRIES
    max_pages: int = DEFAULT_MAX_PAGES

    @property
    def listen_address(self) -> str:
        """Return host:port the gateway listens on."""
        return f"{self.host}:{self.port}"

    @property
    def masked_token(self) -> str:
        """Return the token with all but the last four characters hidden."""
        if len(self.joplin_token) <= 4:
            return "*" * len(self.joplin_token)
        return "*" * (len(self.joplin_token) - 4) + self.joplin_token[-4:]


DEFAULT_CONFIG_YAML = """\
# peeker configuration
# Any value can also be set with an environment variable or a CLI option.

# Joplin data API address (JOPLIN_SERVER)
joplin_server: http://localhost:41184

# Joplin web clipper token (JOPLIN_TOKEN)
joplin_token: ""

# Address the gateway listens on (PEEKER_HOST / PEEKER_PORT)
peeker_host: 127.0.0.1
peeker_port: 8080

# Upstream behaviour
timeout: 10       # Seconds per upstream request (PEEKER_TIMEOUT)
retries: 2        # Connection retries (PEEKER_RETRIES)
max_pages: 500    # Pagination guard (PEEKER_MAX_PAGES)
"""
