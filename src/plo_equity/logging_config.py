"""
logging_config.py

Root logger setup for command line use. Library modules only call
logging.getLogger(__name__) and never install handlers themselves.
"""
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from plo_equity import config


def configure_logging(level: Optional[str] = None, console: Optional[Console] = None) -> logging.Logger:
    """Install a RichHandler on the root logger and return the package logger."""
    logging.basicConfig(
        level=(level or config.LOG_LEVEL).upper(),
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
        force=True,
    )
    return logging.getLogger("plo_equity")
