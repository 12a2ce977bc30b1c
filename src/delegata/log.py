"""
Logging utilities.

Diagnostics go through stdlib logging rendered by rich on stderr;
command output stays on stdout via click.echo.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

DEFAULT_LEVEL = "WARNING"

console = Console(stderr=True)


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger with a rich handler."""
    level_name = (level or os.environ.get("DELEGATA_LOG_LEVEL") or DEFAULT_LEVEL).upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(message)s",
        datefmt="[%X]",
        handlers=[
            RichHandler(
                console=console,
                rich_tracebacks=True,
                show_path=False,
            )
        ],
        force=True,
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)

