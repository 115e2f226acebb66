"""Data access layer components."""

from tablewriter.data.models import (
    AuthType,
    Column,
    ConnectionInfo,
    IndexDescriptor,
    PortableType,
    Schema,
    index_name_for,
)
from tablewriter.data.adapters import (
    DatabaseAdapter,
    DatabaseType,
    MySQLAdapter,
    PostgreSQLAdapter,
    SQLAlchemyAdapter,
    SQLiteAdapter,
    SQLServerAdapter,
    get_adapter,
)

__all__ = [
    # Models
    "AuthType",
    "Column",
    "ConnectionInfo",
    "IndexDescriptor",
    "PortableType",
    "Schema",
    "index_name_for",
    # Adapters
    "DatabaseAdapter",
    "DatabaseType",
    "MySQLAdapter",
    "PostgreSQLAdapter",
    "SQLAlchemyAdapter",
    "SQLiteAdapter",
    "SQLServerAdapter",
    "get_adapter",
]
