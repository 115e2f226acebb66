"""Core components: configuration, errors and logging."""

from tablewriter.core.config import (
    Settings,
    TableInitializationConfig,
    get_settings,
)
from tablewriter.core.exceptions import (
    ApplicationError,
    ConfigurationError,
    ConnectionError,
    DatabaseError,
    ValidationError,
)
from tablewriter.core.logging import get_logger, setup_logging

__all__ = [
    "Settings",
    "TableInitializationConfig",
    "get_settings",
    "ApplicationError",
    "ConfigurationError",
    "ConnectionError",
    "DatabaseError",
    "ValidationError",
    "get_logger",
    "setup_logging",
]
