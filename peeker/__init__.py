"""peeker - a read-only web gateway for Joplin notes."""

__version__ = "0.1.0"
