"""Allow running as ``python -m peeker``."""

from peeker.cli import main

main()
