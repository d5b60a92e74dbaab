"""Logging setup with verbosity flags and a debug log file."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

_VERBOSITY_LEVELS = {0: logging.WARNING, 1: logging.INFO}
_VERBOSITY_FLAGS = {"-v": 1, "-vv": 2, "-vvv": 3}

CONSOLE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
FILE_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"


def setup_logging(
    verbosity: int = 0,
    log_file: Optional[str] = None,
    log_dir: str = "logs",
) -> logging.Logger:
    """
    Configure the root logger for the bot process.

    The console follows the verbosity level while the log file always
    records DEBUG output.

    Args:
        verbosity: 0=WARNING, 1=INFO, 2 or more=DEBUG
        log_file: Explicit log file path. Defaults to a timestamped file in log_dir.
        log_dir: Directory for the default log file

    Returns:
        Logger for this module
    """
    console_level = _VERBOSITY_LEVELS.get(verbosity, logging.DEBUG)

    if log_file is None:
        directory = Path(log_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_path = directory / f"collaborator_{stamp}.log"
    else:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    root_logger.addHandler(file_handler)

    # Chatty third-party loggers stay at WARNING unless -vvv
    if verbosity < 3:
        for noisy in ("httpx", "httpcore", "telegram.ext", "aiosqlite"):
            logging.getLogger(noisy).setLevel(logging.WARNING)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized. Verbosity: {verbosity}, Log file: {log_path}")
    return logger


def parse_verbosity(args: List[str]) -> int:
    """
    Read the verbosity flag from command line arguments.

    Args:
        args: Command line arguments

    Returns:
        Verbosity level (0-3), last flag wins
    """
    verbosity = 0
    for arg in args:
        if arg in _VERBOSITY_FLAGS:
            verbosity = _VERBOSITY_FLAGS[arg]
    return verbosity


def strip_verbosity_flags(args: List[str]) -> List[str]:
    """Return args without -v/-vv/-vvv."""
    return [arg for arg in args if arg not in _VERBOSITY_FLAGS]
