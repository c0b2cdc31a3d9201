# core/logging_setup.py
from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from core.config import get_config_dir
from core.constants import (
    LOG_BACKUP_COUNT,
    LOG_CONSOLE_FORMAT,
    LOG_FILE_FORMAT,
    LOG_FILE_NAME,
    LOG_MAX_BYTES,
    NOISY_LOGGERS,
)


def _reset_handlers(root_logger: logging.Logger) -> None:
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()


def _file_handler(log_file: Path, level: int) -> RotatingFileHandler:
    handler = RotatingFileHandler(
        log_file,
        maxBytes=LOG_MAX_BYTES,
        backupCount=LOG_BACKUP_COUNT,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FILE_FORMAT))
    handler.setLevel(level)
    return handler


def _console_handler(level: int) -> logging.StreamHandler:
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_CONSOLE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logging(
    debug: bool = False,
    quiet: bool = False,
    log_dir: Optional[Path] = None,
) -> Path:
    """
    Configure application-wide logging for a CLI session.

    Everything at the root level goes to a rotating ``app.log`` in the
    config directory (~/.gotchi_closet/ unless log_dir is given). The
    console (stderr) gets the same stream, or only warnings when quiet is
    set so ranking output stays readable. HTTP client loggers are held at
    WARNING outside debug mode.

    Safe to call more than once; earlier handlers are closed and replaced.

    Args:
        debug: Log at DEBUG instead of INFO, including HTTP client chatter
        quiet: Only show warnings and errors on the console
        log_dir: Directory for the log file (default: the config directory)

    Returns:
        Path of the log file
    """
    target_dir = Path(log_dir) if log_dir is not None else get_config_dir()
    target_dir.mkdir(parents=True, exist_ok=True)
    log_file = target_dir / LOG_FILE_NAME

    level = logging.DEBUG if debug else logging.INFO

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    _reset_handlers(root_logger)

    root_logger.addHandler(_file_handler(log_file, level))
    root_logger.addHandler(_console_handler(logging.WARNING if quiet else level))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.NOTSET if debug else logging.WARNING)

    root_logger.info(f"Logging initialized (level={logging.getLevelName(level)}, log file: {log_file})")
    return log_file
