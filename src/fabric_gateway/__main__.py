"""Entry point for ``python -m fabric_gateway``."""

from .cli import main

main()
