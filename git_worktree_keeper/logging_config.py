"""Logging configuration for git-worktree-keeper

Diagnostics go to stderr through the standard ``logging`` module. User-facing
result lines are printed with rich and never pass through here.
"""
import copy
import logging
import sys
from pathlib import Path

LEVEL_COLORS = {
    logging.DEBUG: '\033[36m',     # Cyan
    logging.INFO: '\033[32m',      # Green
    logging.WARNING: '\033[33m',   # Yellow
    logging.ERROR: '\033[31m',     # Red
    logging.CRITICAL: '\033[35m',  # Magenta
}
RESET = '\033[0m'

DEBUG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'

# Package prefixes dropped from logger names, outermost first
_NAME_PREFIXES = ('git_worktree_keeper.', 'services.')


class ColoredFormatter(logging.Formatter):
    """Formatter that colors the level name when stderr is a terminal."""

    def format(self, record):
        color = LEVEL_COLORS.get(record.levelno)
        if color is None or not sys.stderr.isatty():
            return super().format(record)
        # Other handlers share the record, so color a copy
        record = copy.copy(record)
        record.levelname = f"{color}{record.levelname}{RESET}"
        return super().format(record)


def get_log_file() -> Path:
    """Location of the debug log file."""
    return Path.home() / '.gw' / 'gw.log'


def _file_handler() -> logging.Handler:
    log_file = get_log_file()
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_file, mode='w')  # One run per file
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(logging.Formatter(fmt=DEBUG_FORMAT, datefmt=DATE_FORMAT))
    return handler


def _stderr_handler(level: int, debug: bool) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    if debug:
        handler.setFormatter(ColoredFormatter(fmt=DEBUG_FORMAT, datefmt=DATE_FORMAT))
    else:
        handler.setFormatter(ColoredFormatter(fmt='[%(name)s] %(message)s'))
    return handler


def setup_logging(verbose: bool = False, debug: bool = False) -> None:
    """
    Configure the root logger for one gw invocation.

    Args:
        verbose: Show INFO messages
        debug: Show DEBUG messages with timestamps and also write them to ~/.gw/gw.log
    """
    level = logging.DEBUG if debug else logging.INFO if verbose else logging.WARNING

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    if debug:
        root_logger.addHandler(_file_handler())
    root_logger.addHandler(_stderr_handler(level, debug))


def get_logger(name: str) -> logging.Logger:
    """Logger for a module, named without the package prefix ("core.worktree_keeper")."""
    for prefix in _NAME_PREFIXES:
        if name.startswith(prefix):
            name = name[len(prefix):]
    return logging.getLogger(name)
