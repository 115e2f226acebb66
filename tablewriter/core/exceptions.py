"""Custom exception classes for the library."""

from typing import Any, Optional


class ApplicationError(Exception):
    """Base exception for all tablewriter errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the application error.

        Args:
            message: Error message
            error_code: Optional error code for categorization
            details: Optional additional error details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation of the error."""
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class ConfigurationError(ApplicationError):
    """Exception raised for configuration-related errors."""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "CONFIG_ERROR", details)
        self.config_key = config_key


class ConnectionError(ApplicationError):
    """Exception raised for database connection errors."""

    def __init__(
        self,
        message: str,
        server: Optional[str] = None,
        database: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the connection error.

        Args:
            message: Error message
            server: Optional server name
            database: Optional database name
            details: Optional additional error details
        """
        super().__init__(message, "CONNECTION_ERROR", details)
        self.server = server
        self.database = database


class DatabaseError(ApplicationError):
    """Exception raised when a metadata query or DDL statement fails."""

    def __init__(
        self,
        message: str,
        query: Optional[str] = None,
        table: Optional[str] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Initialize the database error.

        Args:
            message: Error message
            query: Optional SQL statement that caused the error
            table: Optional table name
            details: Optional additional error details
        """
        super().__init__(message, "DATABASE_ERROR", details)
        self.query = query
        self.table = table


class ValidationError(ApplicationError):
    """Exception raised for invalid identifiers, schemas and types."""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, "VALIDATION_ERROR", details)
        self.field = field
        self.value = value
