"""Logging setup for the plugin.

Standard output carries the protocol response, so every handler writes to
standard error through a rich console.
"""

import logging
import os
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "protoc_gen_txt"
LOG_LEVEL_ENV = "PROTOC_GEN_TXT_LOG_LEVEL"

_stderr_console = Console(stderr=True)


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the plugin namespace."""
    if name == LOGGER_NAME or name.startswith(LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAME}.{name}")


def get_console() -> Console:
    """Console used for human-facing output (always stderr)."""
    return _stderr_console


def configure_logging(level: Optional[str] = None) -> logging.Logger:
    """Attach a rich stderr handler to the plugin logger.

    Args:
        level: Level name. Falls back to the environment variable and then
            to INFO.

    Returns:
        The configured package logger.
    """
    level_name = (level or os.environ.get(LOG_LEVEL_ENV) or "INFO").upper()
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(getattr(logging, level_name, logging.INFO))

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=_stderr_console,
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(handler)
        logger.propagate = False

    return logger


def set_level(level: str) -> None:
    """Change the level of the plugin logger after setup."""
    logging.getLogger(LOGGER_NAME).setLevel(
        getattr(logging, level.upper(), logging.INFO)
    )
