"""Logging configuration and utilities.

Loggers either propagate to the host application's handlers or, when
propagation is switched off, write through handlers of their own. A logger
never does both, so each record is emitted once.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from tablewriter.core.config import LoggingConfig, get_settings

_configured: set[str] = set()


def _formatter(config: LoggingConfig) -> logging.Formatter:
    return logging.Formatter(config.format, datefmt=config.date_format)


def _console_handler(config: LoggingConfig) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_formatter(config))
    return handler


def _file_handler(config: LoggingConfig, file_path: str) -> logging.Handler:
    Path(file_path).parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(
        file_path,
        maxBytes=config.file_max_bytes,
        backupCount=config.file_backup_count,
        encoding="utf-8",
    )
    handler.setFormatter(_formatter(config))
    return handler


def setup_logging(
    name: Optional[str] = None,
    level: Optional[str] = None,
    log_file: Optional[str] = None,
) -> logging.Logger:
    """
    Configure a logger from the logging settings, once per name.

    With `propagate` enabled (the default) records go to the application's
    handlers and no console handler is attached. The rotating file handler is
    independent of propagation and only added when file logging is enabled.

    Args:
        name: Logger name (defaults to root logger)
        level: Log level (defaults to settings)
        log_file: Log file path (defaults to settings)

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    key = logger.name
    if key in _configured:
        return logger

    config = get_settings().logging
    logger.setLevel((level or config.level).upper())
    logger.propagate = config.propagate

    if config.console_enabled and not config.propagate:
        logger.addHandler(_console_handler(config))

    if config.file_enabled:
        logger.addHandler(_file_handler(config, log_file or config.file_path))

    _configured.add(key)
    return logger


def get_logger(name: str) -> logging.Logger:
    """Get the configured logger for a module (typically `__name__`)."""
    return setup_logging(name)
