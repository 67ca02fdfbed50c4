"""Logging configuration for crossmodel.

Engine modules log through ``logging.getLogger(__name__)`` and never attach
handlers themselves; the CLI (or an embedding application) calls
``setup_logger`` once to decide where records go.
"""

import logging
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from crossmodel.config import get_settings

ROOT_LOGGER = "crossmodel"

FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def resolve_level(level: str) -> int:
    """Translate a level name such as ``"debug"`` into its numeric value.

    Raises:
        ValueError: If the name is not a standard logging level
    """
    value = logging.getLevelName(level.strip().upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def setup_logger(
    name: str = ROOT_LOGGER,
    log_file: Optional[str] = None,
    log_level: Optional[str] = None,
) -> logging.Logger:
    """Configure the package logger.

    Console records are rendered by rich on stderr, keeping stdout free for
    ``--json`` output. A file handler is added when a log file is configured
    and always records at DEBUG.

    Args:
        name: Logger name
        log_file: Log file path. If None, uses config value (no file when unset).
        log_level: Console level name. If None, uses config value.

    Returns:
        Configured logger instance
    """
    settings = get_settings()
    log_file = log_file or settings.log_file
    level = resolve_level(log_level or settings.log_level)

    logger = logging.getLogger(name)
    logger.setLevel(min(level, logging.DEBUG) if log_file else level)
    logger.propagate = False

    # Re-running setup replaces handlers rather than stacking them
    logger.handlers.clear()

    console_handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    console_handler.setLevel(level)
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(file_handler)

    return logger
