"""Logging configuration using loguru.

Logs are written to a daily file under the log directory and kept for 1 week.
Nothing is written to the terminal unless a stderr sink is added (the CLI does
this for its ``--log-level`` option), so library users get quiet imports.
"""

import os
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from loguru import logger

if TYPE_CHECKING:
    import loguru

# Remove default handler
logger.remove()

# Define log directory (default ~/.local/share/gorge/logs, overridable via GORGE_LOG_DIR)
_default_log_dir = Path.home() / ".local" / "share" / "gorge" / "logs"
LOG_DIR = Path(os.environ.get("GORGE_LOG_DIR", str(_default_log_dir))).expanduser().resolve()
LOG_DIR.mkdir(parents=True, exist_ok=True)

STDERR_FORMAT = "<level>{level: <8}</level> | <cyan>{name}</cyan> - <level>{message}</level>"

# Configure file handler with rotation and retention
logger.add(
    LOG_DIR / "gorge_{time:YYYY-MM-DD}.log",
    level="DEBUG",
    format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}",
    rotation="00:00",  # New file at midnight
    retention="1 week",  # Keep logs for 1 week
    compression="gz",  # Compress old logs
    backtrace=True,
    diagnose=False,
)


def get_logger(name: str) -> "loguru.Logger":
    """Get a logger instance with the given name.

    Args:
        name: The name for the logger (typically __name__).

    Returns:
        A configured logger instance.
    """
    return logger.bind(name=name)


def add_stderr_sink(level: str = "WARNING") -> int:
    """Echo log records to stderr.

    Args:
        level: Minimum log level for the stderr sink.

    Returns:
        The sink ID that can be used to remove the sink later.
    """
    return logger.add(sys.stderr, level=level, format=STDERR_FORMAT, colorize=None)


def remove_sink(sink_id: int) -> None:
    """Remove a sink previously added with :func:`add_stderr_sink`.

    Args:
        sink_id: The sink ID returned when the sink was added.
    """
    logger.remove(sink_id)
