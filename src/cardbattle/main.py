"""Entry-point for launching the CLI application."""
from __future__ import annotations

import logging
import os

from .core.config import load_config
from .presentation.cli.app import main as cli_main


def configure_logging(level_name: str) -> None:
    """Send library logs to stderr; CARDBATTLE_DEBUG=1 forces DEBUG."""
    if os.getenv("CARDBATTLE_DEBUG") == "1":
        level_name = "DEBUG"
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main() -> None:
    """Run the CLI presentation layer."""
    config = load_config()
    configure_logging(config.log_level)
    cli_main(config)


if __name__ == "__main__":
    main()
