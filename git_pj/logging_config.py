"""Logging configuration for git-pj"""
import copy
import logging
import sys
from pathlib import Path
from typing import Optional

DETAILED_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
SIMPLE_FORMAT = '[%(name)s] %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Formatter that colours level names when stderr is a terminal."""

    COLORS = {
        'DEBUG': '\033[36m',     # Cyan
        'INFO': '\033[32m',      # Green
        'WARNING': '\033[33m',   # Yellow
        'ERROR': '\033[31m',     # Red
        'CRITICAL': '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color and sys.stderr.isatty():
            # Other handlers see the same record, so colour a copy
            record = copy.copy(record)
            record.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(record)


def _resolve_level(verbose: bool, debug: bool) -> int:
    if debug:
        return logging.DEBUG
    if verbose:
        return logging.INFO
    return logging.WARNING


def _file_handler(log_file: Path) -> logging.Handler:
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='w')  # One run per file
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False, tui_mode: bool = False) -> Optional[Path]:
    """
    Configure logging for the application.

    Console logging goes to stderr. Debug runs and picker runs also write a
    log file in the app directory; picker runs log to that file only.

    Args:
        verbose: If True, show INFO level messages
        debug: If True, show DEBUG level messages and write the log file
        tui_mode: If True, log to file only

    Returns:
        Path of the log file, or None when only the console is used
    """
    from git_pj.config import get_app_dir
    from git_pj.constants import LOG_FILE_NAME

    level = _resolve_level(verbose, debug)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG if tui_mode else level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    log_file = None
    if tui_mode or debug:
        log_file = get_app_dir() / LOG_FILE_NAME
        root_logger.addHandler(_file_handler(log_file))

    if not tui_mode:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(level)
        if debug:
            console_handler.setFormatter(ColoredFormatter(fmt=DETAILED_FORMAT, datefmt=DATE_FORMAT))
        else:
            console_handler.setFormatter(ColoredFormatter(fmt=SIMPLE_FORMAT))
        root_logger.addHandler(console_handler)

    return log_file


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the ``git_pj.`` / ``services.`` prefixes."""
    for prefix in ('git_pj.', 'services.'):
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
