"""
Logging for CBMT.

Library modules only ask for named loggers under the "cbmt" namespace and
never touch handlers. Applications (the CLI included) opt in to output by
calling setup_logging(), which installs a colored stderr handler and,
optionally, a plain file handler.
"""

import logging
import sys
from pathlib import Path
from typing import List, Optional

import colorlog

ROOT_NAME = "cbmt"
LOG_FILE = "cbmt.log"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Silent until an application configures output
logging.getLogger(ROOT_NAME).addHandler(logging.NullHandler())


def get_logger(name: str) -> logging.Logger:
    """Logger for a subsystem, e.g. get_logger("proof") -> "cbmt.proof"."""
    return logging.getLogger(f"{ROOT_NAME}.{name}")


def _console_handler(level: int) -> logging.Handler:
    handler = colorlog.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(colorlog.ColoredFormatter(
        "%(log_color)s%(asctime)s [%(name)s] %(levelname)-8s%(reset)s %(message)s",
        datefmt=DATE_FORMAT,
        log_colors=LOG_COLORS,
    ))
    return handler


def _file_handler(level: int, log_dir: Path) -> logging.Handler:
    log_dir.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_dir / LOG_FILE)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s [%(name)s] %(levelname)-8s %(message)s",
        datefmt=DATE_FORMAT,
    ))
    return handler


def setup_logging(
    level: int = logging.INFO,
    log_dir: Optional[str] = None,
    log_to_file: bool = False,
) -> List[logging.Handler]:
    """
    Route "cbmt" log records to stderr and optionally to a file.

    Replaces whatever an earlier call installed.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: Directory for the log file. If None, uses ./logs
        log_to_file: Whether to also write LOG_FILE under log_dir

    Returns:
        The installed handlers
    """
    root_logger = logging.getLogger(ROOT_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    handlers = [_console_handler(level)]
    if log_to_file:
        handlers.append(_file_handler(level, Path(log_dir) if log_dir else Path("logs")))

    root_logger.setLevel(level)
    for handler in handlers:
        root_logger.addHandler(handler)
    return handlers
