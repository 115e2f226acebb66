"""Database adapters for multi-database support."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import Any, Optional
from urllib.parse import quote_plus

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, Engine
from sqlalchemy.pool import QueuePool

from tablewriter.core.config import DatabaseConfig
from tablewriter.core.exceptions import ConnectionError, DatabaseError, ValidationError
from tablewriter.core.logging import get_logger
from tablewriter.data.models import (
    AuthType,
    Column,
    ConnectionInfo,
    IndexDescriptor,
    PortableType,
    Schema,
)
from tablewriter.utils.odbc_driver import get_odbc_driver_string
from tablewriter.utils.validators import (
    validate_column_name,
    validate_index_name,
    validate_schema_name,
    validate_table_name,
)

logger = get_logger(__name__)


class DatabaseType(str, Enum):
    """Supported database types."""

    SQL_SERVER = "sqlserver"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    SQLITE = "sqlite"


class DatabaseAdapter(ABC):
    """
    Capability set the table manager needs from a database.

    Every method may raise; the table manager turns those errors into failed
    results, so implementations should not swallow driver errors.
    """

    @abstractmethod
    def exists_table(self, table_name: str) -> bool:
        """Check whether a table exists."""

    @abstractmethod
    def get_schema(self, table_name: str) -> Schema:
        """
        Read the structure of an existing table.

        Raises:
            DatabaseError: If the table does not exist or cannot be read
        """

    @abstractmethod
    def create_table(self, schema: Schema) -> None:
        """Create a table with the schema's columns, in order."""

    @abstractmethod
    def add_columns_to_table_to_match_schema(
        self, table_name: str, schema: Schema
    ) -> None:
        """Add the schema's columns that the table lacks. Never drops columns."""

    @abstractmethod
    def get_indexes(self, table_name: str) -> list[IndexDescriptor]:
        """List the table's indexes, except those backing primary-key or unique constraints."""

    @abstractmethod
    def create_index_on_table(
        self, table_name: str, column_name: str, index_name: str
    ) -> None:
        """Create a non-clustered single-column index."""

    @abstractmethod
    def cluster_index(self, table_name: str, index_name: str) -> None:
        """Mark an existing index as the table's clustered index."""

    @abstractmethod
    def drop_index(self, index_name: str, table_name: Optional[str] = None) -> None:
        """
        Drop an index.

        Args:
            index_name: Index to drop
            table_name: Owning table, for engines whose DROP INDEX needs it
        """


class SQLAlchemyAdapter(DatabaseAdapter):
    """Database adapter backed by a SQLAlchemy engine."""

    # Portable type -> DDL type name
    TYPE_NAMES: dict[PortableType, str] = {}
    # Lower-cased native type name -> portable type
    NATIVE_TYPES: dict[str, PortableType] = {}
    DEFAULT_SCHEMA: Optional[str] = None

    def __init__(
        self,
        connection_info: ConnectionInfo,
        database_config: Optional[DatabaseConfig] = None,
    ) -> None:
        """
        Initialize the adapter.

        Args:
            connection_info: Connection information
            database_config: Engine pool settings (defaults apply when omitted)
        """
        self.connection_info = connection_info
        self.database_config = database_config or DatabaseConfig()
        self._engine: Optional[Engine] = None

    @abstractmethod
    def build_connection_string(self) -> Any:
        """Build database-specific connection string or URL."""

    @abstractmethod
    def quote_identifier(self, name: str) -> str:
        """Quote an identifier for this engine."""

    @property
    def schema_name(self) -> Optional[str]:
        """Namespace the adapter's tables live in."""
        return self.connection_info.schema_name or self.DEFAULT_SCHEMA

    @property
    def is_connected(self) -> bool:
        """Check whether an engine is open."""
        return self._engine is not None

    def _engine_options(self) -> dict[str, Any]:
        """Keyword arguments for create_engine."""
        return {
            "poolclass": QueuePool,
            "pool_size": self.database_config.pool_size,
            "max_overflow": self.database_config.max_overflow,
            "pool_recycle": self.database_config.pool_recycle,
            "pool_pre_ping": True,
            "echo": self.database_config.echo,
        }

    def connect(self) -> None:
        """
        Establish database connection.

        Raises:
            ConnectionError: If connection fails
        """
        try:
            logger.info(f"Connecting to {self.connection_info.get_display_name()}")

            self._engine = create_engine(
                self.build_connection_string(), **self._engine_options()
            )

            # Test connection
            with self._engine.connect() as conn:
                conn.execute(text("SELECT 1"))

            logger.info(f"Connected to {self.connection_info.get_display_name()}")

        except Exception as e:
            logger.error(f"Connection failed: {str(e)}")
            self._engine = None
            raise ConnectionError(
                f"Failed to connect: {str(e)}",
                server=self.connection_info.server,
                database=self.connection_info.database,
            ) from e

    def disconnect(self) -> None:
        """Close database connection."""
        if self._engine:
            logger.info(f"Disconnecting from {self.connection_info.get_display_name()}")
            self._engine.dispose()
            self._engine = None

    def __enter__(self) -> "SQLAlchemyAdapter":
        """Context manager entry."""
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Context manager exit."""
        self.disconnect()

    def _require_engine(self) -> Engine:
        if not self._engine:
            raise ConnectionError(
                "Not connected to database. Call connect() first.",
                server=self.connection_info.server,
                database=self.connection_info.database,
            )
        return self._engine

    def execute_query(
        self, query: str, params: Optional[dict[str, Any]] = None
    ) -> list[dict[str, Any]]:
        """
        Execute a query and return its rows.

        Args:
            query: SQL query to execute
            params: Optional named parameters

        Returns:
            List of result rows as dictionaries

        Raises:
            DatabaseError: If query execution fails
        """
        engine = self._require_engine()
        try:
            with engine.connect() as conn:
                result = conn.execute(text(query), params or {})
                if result.returns_rows:
                    columns = list(result.keys())
                    return [dict(zip(columns, row)) for row in result.fetchall()]
                return []

        except Exception as e:
            logger.error(f"Query failed: {str(e)}")
            raise DatabaseError(f"Query failed: {str(e)}", query=query) from e

    def execute_statement(
        self, statement: str, params: Optional[dict[str, Any]] = None
    ) -> None:
        """
        Execute a DDL/DML statement in its own transaction.

        Raises:
            DatabaseError: If the statement fails
        """
        engine = self._require_engine()
        try:
            with engine.begin() as conn:
                conn.execute(text(statement), params or {})

        except Exception as e:
            logger.error(f"Statement failed: {str(e)}")
            raise DatabaseError(f"Statement failed: {str(e)}", query=statement) from e

    # ---- naming and types ----

    def qualified_name(self, name: str) -> str:
        """Quote a table or index name, prefixed with the schema if there is one."""
        if self.schema_name:
            validate_schema_name(self.schema_name)
            return f"{self.quote_identifier(self.schema_name)}.{self.quote_identifier(name)}"
        return self.quote_identifier(name)

    def to_native_type(self, data_type: PortableType) -> str:
        """
        Get the DDL type for a portable type.

        Raises:
            ValidationError: If the engine has no type for it
        """
        native = self.TYPE_NAMES.get(data_type)
        if native is None:
            raise ValidationError(
                f"Type '{data_type.value}' cannot be mapped to a "
                f"{type(self).__name__} column type",
                field="data_type",
                value=data_type.value,
            )
        return native

    def to_portable_type(self, native_type: str) -> PortableType:
        """Map a native type name to a portable type (OTHER when unknown)."""
        normalized = " ".join(str(native_type).lower().split())
        candidates = [
            normalized,
            normalized.split("(")[0].strip(),
            normalized.split(" ")[0].split("(")[0],
        ]
        for candidate in candidates:
            if candidate in self.NATIVE_TYPES:
                return self.NATIVE_TYPES[candidate]
        logger.debug(f"No portable type for native type '{native_type}'")
        return PortableType.OTHER

    @staticmethod
    def _parse_nullable(value: Any) -> bool:
        if isinstance(value, str):
            return value.strip().upper() in ("YES", "Y", "1", "TRUE")
        return bool(value)

    def column_definition(self, column: Column) -> str:
        """Build the column clause used by CREATE TABLE and ALTER TABLE."""
        validate_column_name(column.name)
        null_clause = "NULL" if column.nullable else "NOT NULL"
        return (
            f"{self.quote_identifier(column.name)} "
            f"{self.to_native_type(column.data_type)} {null_clause}"
        )

    # ---- statement builders ----

    def _table_params(self, table_name: str) -> dict[str, Any]:
        return {"schema": self.schema_name, "table": table_name}

    @abstractmethod
    def get_table_exists_query(self) -> str:
        """Query returning a row when :table exists in :schema."""

    @abstractmethod
    def get_columns_query(self) -> str:
        """Query returning column_name, data_type, is_nullable in ordinal order."""

    @abstractmethod
    def get_indexes_query(self) -> str:
        """Query returning index_name, column_name, is_clustered per indexed column."""

    def build_create_table_statement(self, schema: Schema) -> str:
        """Build CREATE TABLE for a schema."""
        validate_table_name(schema.name)
        if not schema.columns:
            raise ValidationError(
                f"Cannot create table '{schema.name}' without columns",
                field="columns",
            )
        column_sql = ",\n    ".join(self.column_definition(c) for c in schema.columns)
        return f"CREATE TABLE {self.qualified_name(schema.name)} (\n    {column_sql}\n)"

    def build_add_column_statement(self, table_name: str, column: Column) -> str:
        """Build ALTER TABLE ... ADD for one column."""
        return (
            f"ALTER TABLE {self.qualified_name(table_name)} "
            f"ADD COLUMN {self.column_definition(column)}"
        )

    def build_create_index_statement(
        self, table_name: str, column_name: str, index_name: str
    ) -> str:
        """Build CREATE INDEX for a non-clustered single-column index."""
        return (
            f"CREATE INDEX {self.quote_identifier(index_name)} "
            f"ON {self.qualified_name(table_name)} "
            f"({self.quote_identifier(column_name)})"
        )

    def build_cluster_index_statements(
        self, table_name: str, index_name: str
    ) -> list[str]:
        """
        Build the statements that make an index clustered.

        Raises:
            DatabaseError: If the engine cannot cluster secondary indexes
        """
        raise DatabaseError(
            f"{type(self).__name__} does not support clustering index '{index_name}'",
            table=table_name,
        )

    def build_drop_index_statement(
        self, index_name: str, table_name: Optional[str] = None
    ) -> str:
        """Build DROP INDEX."""
        return f"DROP INDEX {self.qualified_name(index_name)}"

    # ---- row fetchers ----

    def _fetch_column_rows(self, table_name: str) -> list[dict[str, Any]]:
        return self.execute_query(self.get_columns_query(), self._table_params(table_name))

    def _fetch_index_rows(self, table_name: str) -> list[dict[str, Any]]:
        return self.execute_query(self.get_indexes_query(), self._table_params(table_name))

    # ---- DatabaseAdapter ----

    def exists_table(self, table_name: str) -> bool:
        rows = self.execute_query(
            self.get_table_exists_query(), self._table_params(table_name)
        )
        return len(rows) > 0

    def get_schema(self, table_name: str) -> Schema:
        rows = self._fetch_column_rows(table_name)
        if not rows:
            raise DatabaseError(
                f"Table '{table_name}' does not exist", table=table_name
            )

        columns = [
            Column(
                name=row["column_name"],
                data_type=self.to_portable_type(row["data_type"]),
                nullable=self._parse_nullable(row["is_nullable"]),
            )
            for row in rows
        ]
        return Schema(name=table_name, columns=tuple(columns))

    def create_table(self, schema: Schema) -> None:
        statement = self.build_create_table_statement(schema)
        logger.info(f"Creating table {self.qualified_name(schema.name)}")
        self.execute_statement(statement)

    def add_columns_to_table_to_match_schema(
        self, table_name: str, schema: Schema
    ) -> None:
        validate_table_name(table_name)
        existing = self.get_schema(table_name)
        for column in schema.missing_from(existing):
            logger.info(f"Adding column '{column.describe()}' to table '{table_name}'")
            self.execute_statement(self.build_add_column_statement(table_name, column))

    def get_indexes(self, table_name: str) -> list[IndexDescriptor]:
        grouped: dict[str, tuple[list[str], bool]] = {}
        for row in self._fetch_index_rows(table_name):
            columns, clustered = grouped.setdefault(
                row["index_name"], ([], bool(row["is_clustered"]))
            )
            columns.append(row["column_name"])

        return [
            IndexDescriptor(
                index_name=name,
                indexed_columns=tuple(columns),
                is_clustered=clustered,
            )
            for name, (columns, clustered) in grouped.items()
        ]

    def create_index_on_table(
        self, table_name: str, column_name: str, index_name: str
    ) -> None:
        validate_table_name(table_name)
        validate_column_name(column_name)
        validate_index_name(index_name)
        logger.info(
            f"Creating index '{index_name}' on '{table_name}' ({column_name})"
        )
        self.execute_statement(
            self.build_create_index_statement(table_name, column_name, index_name)
        )

    def cluster_index(self, table_name: str, index_name: str) -> None:
        validate_table_name(table_name)
        validate_index_name(index_name)
        logger.info(f"Clustering table '{table_name}' on index '{index_name}'")
        for statement in self.build_cluster_index_statements(table_name, index_name):
            self.execute_statement(statement)

    def drop_index(self, index_name: str, table_name: Optional[str] = None) -> None:
        validate_index_name(index_name)
        if table_name is not None:
            validate_table_name(table_name)
        logger.info(f"Dropping index '{index_name}'")
        self.execute_statement(self.build_drop_index_statement(index_name, table_name))


class SQLServerAdapter(SQLAlchemyAdapter):
    """Adapter for Microsoft SQL Server."""

    DEFAULT_SCHEMA = "dbo"

    TYPE_NAMES = {
        PortableType.BOOLEAN: "bit",
        PortableType.SMALLINT: "smallint",
        PortableType.INTEGER: "int",
        PortableType.BIGINT: "bigint",
        PortableType.FLOAT: "float",
        PortableType.DECIMAL: "decimal(18, 4)",
        # 450 characters keeps the column within the 900-byte index key limit
        PortableType.STRING: "nvarchar(450)",
        PortableType.DATE: "date",
        PortableType.DATETIME: "datetime2",
        PortableType.TIME: "time",
        PortableType.BINARY: "varbinary(max)",
        PortableType.GUID: "uniqueidentifier",
    }

    NATIVE_TYPES = {
        "bit": PortableType.BOOLEAN,
        "tinyint": PortableType.SMALLINT,
        "smallint": PortableType.SMALLINT,
        "int": PortableType.INTEGER,
        "bigint": PortableType.BIGINT,
        "float": PortableType.FLOAT,
        "real": PortableType.FLOAT,
        "decimal": PortableType.DECIMAL,
        "numeric": PortableType.DECIMAL,
        "money": PortableType.DECIMAL,
        "smallmoney": PortableType.DECIMAL,
        "char": PortableType.STRING,
        "varchar": PortableType.STRING,
        "nchar": PortableType.STRING,
        "nvarchar": PortableType.STRING,
        "text": PortableType.STRING,
        "ntext": PortableType.STRING,
        "date": PortableType.DATE,
        "datetime": PortableType.DATETIME,
        "datetime2": PortableType.DATETIME,
        "smalldatetime": PortableType.DATETIME,
        "datetimeoffset": PortableType.DATETIME,
        "time": PortableType.TIME,
        "binary": PortableType.BINARY,
        "varbinary": PortableType.BINARY,
        "image": PortableType.BINARY,
        "uniqueidentifier": PortableType.GUID,
    }

    def build_connection_string(self) -> str:
        """Build SQL Server connection string."""
        server = self.connection_info.server
        if self.connection_info.port:
            server = f"{server},{self.connection_info.port}"

        parts = [
            f"DRIVER={get_odbc_driver_string()}",
            f"SERVER={server}",
            f"DATABASE={self.connection_info.database}",
            "TrustServerCertificate=yes",
        ]
        if self.connection_info.auth_type == AuthType.WINDOWS:
            parts.append("Trusted_Connection=yes")
        else:
            parts.append(f"UID={self.connection_info.username}")
            parts.append(f"PWD={self.connection_info.password}")
        if self.connection_info.connection_timeout:
            parts.append(f"Connection Timeout={self.connection_info.connection_timeout}")

        return f"mssql+pyodbc:///?odbc_connect={quote_plus(';'.join(parts))}"

    def quote_identifier(self, name: str) -> str:
        return f"[{name}]"

    def get_table_exists_query(self) -> str:
        """Get SQL Server table existence query."""
        return """
            SELECT TABLE_NAME AS table_name
            FROM INFORMATION_SCHEMA.TABLES
            WHERE TABLE_SCHEMA = :schema
            AND TABLE_NAME = :table
            AND TABLE_TYPE = 'BASE TABLE'
        """

    def get_columns_query(self) -> str:
        """Get SQL Server columns query."""
        return """
            SELECT
                COLUMN_NAME AS column_name,
                DATA_TYPE AS data_type,
                IS_NULLABLE AS is_nullable
            FROM INFORMATION_SCHEMA.COLUMNS
            WHERE TABLE_SCHEMA = :schema
            AND TABLE_NAME = :table
            ORDER BY ORDINAL_POSITION
        """

    def get_indexes_query(self) -> str:
        """Get SQL Server indexes query."""
        return """
            SELECT
                i.name AS index_name,
                c.name AS column_name,
                CASE WHEN i.type = 1 THEN 1 ELSE 0 END AS is_clustered
            FROM sys.indexes i
            INNER JOIN sys.tables t ON i.object_id = t.object_id
            INNER JOIN sys.schemas s ON t.schema_id = s.schema_id
            INNER JOIN sys.index_columns ic ON i.object_id = ic.object_id
                AND i.index_id = ic.index_id
            INNER JOIN sys.columns c ON ic.object_id = c.object_id
                AND ic.column_id = c.column_id
            WHERE s.name = :schema
                AND t.name = :table
                AND i.type > 0
                AND i.is_primary_key = 0
                AND i.is_unique_constraint = 0
                AND ic.is_included_column = 0
            ORDER BY i.name, ic.key_ordinal
        """

    def build_add_column_statement(self, table_name: str, column: Column) -> str:
        # T-SQL has no COLUMN keyword in ALTER TABLE ... ADD
        return (
            f"ALTER TABLE {self.qualified_name(table_name)} "
            f"ADD {self.column_definition(column)}"
        )

    def build_create_index_statement(
        self, table_name: str, column_name: str, index_name: str
    ) -> str:
        return (
            f"CREATE NONCLUSTERED INDEX {self.quote_identifier(index_name)} "
            f"ON {self.qualified_name(table_name)} "
            f"({self.quote_identifier(column_name)})"
        )

    def build_cluster_index_statements(
        self, table_name: str, index_name: str
    ) -> list[str]:
        """Rebuild the index as clustered, keeping its key columns."""
        index = next(
            (i for i in self.get_indexes(table_name) if i.index_name == index_name),
            None,
        )
        if index is None:
            raise DatabaseError(
                f"Index '{index_name}' does not exist on table '{table_name}'",
                table=table_name,
            )
        key_columns = ", ".join(self.quote_identifier(c) for c in index.indexed_columns)
        return [
            f"CREATE CLUSTERED INDEX {self.quote_identifier(index_name)} "
            f"ON {self.qualified_name(table_name)} ({key_columns}) "
            "WITH (DROP_EXISTING = ON)"
        ]

    def build_drop_index_statement(
        self, index_name: str, table_name: Optional[str] = None
    ) -> str:
        if table_name is None:
            raise DatabaseError(
                f"SQL Server needs the table name to drop index '{index_name}'"
            )
        return (
            f"DROP INDEX {self.quote_identifier(index_name)} "
            f"ON {self.qualified_name(table_name)}"
        )


class PostgreSQLAdapter(SQLAlchemyAdapter):
    """Adapter for PostgreSQL."""

    DEFAULT_SCHEMA = "public"

    TYPE_NAMES = {
        PortableType.BOOLEAN: "boolean",
        PortableType.SMALLINT: "smallint",
        PortableType.INTEGER: "integer",
        PortableType.BIGINT: "bigint",
        PortableType.FLOAT: "double precision",
        PortableType.DECIMAL: "numeric(18, 4)",
        PortableType.STRING: "text",
        PortableType.DATE: "date",
        PortableType.DATETIME: "timestamp",
        PortableType.TIME: "time",
        PortableType.BINARY: "bytea",
        PortableType.GUID: "uuid",
    }

    NATIVE_TYPES = {
        "boolean": PortableType.BOOLEAN,
        "smallint": PortableType.SMALLINT,
        "integer": PortableType.INTEGER,
        "bigint": PortableType.BIGINT,
        "double precision": PortableType.FLOAT,
        "real": PortableType.FLOAT,
        "numeric": PortableType.DECIMAL,
        "text": PortableType.STRING,
        "character varying": PortableType.STRING,
        "character": PortableType.STRING,
        "date": PortableType.DATE,
        "timestamp": PortableType.DATETIME,
        "timestamp without time zone": PortableType.DATETIME,
        "timestamp with time zone": PortableType.DATETIME,
        "time": PortableType.TIME,
        "time without time zone": PortableType.TIME,
        "time with time zone": PortableType.TIME,
        "bytea": PortableType.BINARY,
        "uuid": PortableType.GUID,
    }

    def build_connection_string(self) -> URL:
        """Build PostgreSQL connection URL."""
        return URL.create(
            "postgresql+psycopg2",
            username=self.connection_info.username,
            password=self.connection_info.password,
            host=self.connection_info.server,
            port=self.connection_info.port,
            database=self.connection_info.database,
        )

    def _engine_options(self) -> dict[str, Any]:
        options = super()._engine_options()
        options["connect_args"] = {
            "connect_timeout": self.connection_info.connection_timeout
        }
        return options

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def get_table_exists_query(self) -> str:
        """Get PostgreSQL table existence query."""
        return """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = :schema
            AND table_name = :table
            AND table_type = 'BASE TABLE'
        """

    def get_columns_query(self) -> str:
        """Get PostgreSQL columns query."""
        return """
            SELECT
                column_name,
                data_type,
                is_nullable
            FROM information_schema.columns
            WHERE table_schema = :schema
            AND table_name = :table
            ORDER BY ordinal_position
        """

    def get_indexes_query(self) -> str:
        """Get PostgreSQL indexes query."""
        return """
            SELECT
                i.relname AS index_name,
                a.attname AS column_name,
                ix.indisclustered AS is_clustered
            FROM pg_class t
            JOIN pg_namespace n ON n.oid = t.relnamespace
            JOIN pg_index ix ON ix.indrelid = t.oid
            JOIN pg_class i ON i.oid = ix.indexrelid
            JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS k(attnum, ord) ON true
            JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = k.attnum
            WHERE n.nspname = :schema
                AND t.relname = :table
                AND NOT ix.indisprimary
                AND NOT EXISTS (
                    SELECT 1 FROM pg_constraint con
                    WHERE con.conindid = ix.indexrelid
                )
            ORDER BY i.relname, k.ord
        """

    def build_cluster_index_statements(
        self, table_name: str, index_name: str
    ) -> list[str]:
        return [
            f"CLUSTER {self.qualified_name(table_name)} "
            f"USING {self.quote_identifier(index_name)}"
        ]


class MySQLAdapter(SQLAlchemyAdapter):
    """
    Adapter for MySQL.

    InnoDB always clusters on the primary key, so secondary indexes are
    reported as non-clustered and cannot be clustered.
    """

    TYPE_NAMES = {
        PortableType.BOOLEAN: "tinyint(1)",
        PortableType.SMALLINT: "smallint",
        PortableType.INTEGER: "int",
        PortableType.BIGINT: "bigint",
        PortableType.FLOAT: "double",
        PortableType.DECIMAL: "decimal(18, 4)",
        PortableType.STRING: "varchar(255)",
        PortableType.DATE: "date",
        PortableType.DATETIME: "datetime",
        PortableType.TIME: "time",
        PortableType.BINARY: "longblob",
        PortableType.GUID: "char(36)",
    }

    # Matched against COLUMN_TYPE first, so tinyint(1) and char(36) win
    NATIVE_TYPES = {
        "tinyint(1)": PortableType.BOOLEAN,
        "char(36)": PortableType.GUID,
        "tinyint": PortableType.SMALLINT,
        "smallint": PortableType.SMALLINT,
        "mediumint": PortableType.INTEGER,
        "int": PortableType.INTEGER,
        "bigint": PortableType.BIGINT,
        "float": PortableType.FLOAT,
        "double": PortableType.FLOAT,
        "decimal": PortableType.DECIMAL,
        "char": PortableType.STRING,
        "varchar": PortableType.STRING,
        "text": PortableType.STRING,
        "mediumtext": PortableType.STRING,
        "longtext": PortableType.STRING,
        "date": PortableType.DATE,
        "datetime": PortableType.DATETIME,
        "timestamp": PortableType.DATETIME,
        "time": PortableType.TIME,
        "binary": PortableType.BINARY,
        "varbinary": PortableType.BINARY,
        "blob": PortableType.BINARY,
        "longblob": PortableType.BINARY,
    }

    @property
    def schema_name(self) -> Optional[str]:
        return self.connection_info.schema_name or self.connection_info.database

    def build_connection_string(self) -> URL:
        """Build MySQL connection URL."""
        return URL.create(
            "mysql+pymysql",
            username=self.connection_info.username,
            password=self.connection_info.password,
            host=self.connection_info.server,
            port=self.connection_info.port,
            database=self.connection_info.database,
        )

    def _engine_options(self) -> dict[str, Any]:
        options = super()._engine_options()
        options["connect_args"] = {
            "connect_timeout": self.connection_info.connection_timeout
        }
        return options

    def quote_identifier(self, name: str) -> str:
        return f"`{name}`"

    def get_table_exists_query(self) -> str:
        """Get MySQL table existence query."""
        return """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = :schema
            AND table_name = :table
            AND table_type = 'BASE TABLE'
        """

    def get_columns_query(self) -> str:
        """Get MySQL columns query."""
        return """
            SELECT
                column_name AS column_name,
                column_type AS data_type,
                is_nullable AS is_nullable
            FROM information_schema.columns
            WHERE table_schema = :schema
            AND table_name = :table
            ORDER BY ordinal_position
        """

    def get_indexes_query(self) -> str:
        """Get MySQL indexes query."""
        return """
            SELECT
                index_name AS index_name,
                column_name AS column_name,
                0 AS is_clustered
            FROM information_schema.statistics
            WHERE table_schema = :schema
            AND table_name = :table
            AND index_name <> 'PRIMARY'
            ORDER BY index_name, seq_in_index
        """

    def build_drop_index_statement(
        self, index_name: str, table_name: Optional[str] = None
    ) -> str:
        if table_name is None:
            raise DatabaseError(
                f"MySQL needs the table name to drop index '{index_name}'"
            )
        return (
            f"DROP INDEX {self.quote_identifier(index_name)} "
            f"ON {self.qualified_name(table_name)}"
        )


class SQLiteAdapter(SQLAlchemyAdapter):
    """
    Adapter for SQLite.

    `connection_info.database` is the database file path (or ':memory:').
    SQLite has no clustered indexes.
    """

    TYPE_NAMES = {
        PortableType.BOOLEAN: "BOOLEAN",
        PortableType.SMALLINT: "SMALLINT",
        PortableType.INTEGER: "INTEGER",
        PortableType.BIGINT: "BIGINT",
        PortableType.FLOAT: "REAL",
        PortableType.DECIMAL: "NUMERIC",
        PortableType.STRING: "TEXT",
        PortableType.DATE: "DATE",
        PortableType.DATETIME: "DATETIME",
        PortableType.TIME: "TIME",
        PortableType.BINARY: "BLOB",
        PortableType.GUID: "UUID",
    }

    NATIVE_TYPES = {
        "boolean": PortableType.BOOLEAN,
        "smallint": PortableType.SMALLINT,
        "int": PortableType.INTEGER,
        "integer": PortableType.INTEGER,
        "bigint": PortableType.BIGINT,
        "real": PortableType.FLOAT,
        "double": PortableType.FLOAT,
        "float": PortableType.FLOAT,
        "numeric": PortableType.DECIMAL,
        "decimal": PortableType.DECIMAL,
        "text": PortableType.STRING,
        "varchar": PortableType.STRING,
        "char": PortableType.STRING,
        "clob": PortableType.STRING,
        "date": PortableType.DATE,
        "datetime": PortableType.DATETIME,
        "timestamp": PortableType.DATETIME,
        "time": PortableType.TIME,
        "blob": PortableType.BINARY,
        "uuid": PortableType.GUID,
    }

    @property
    def schema_name(self) -> Optional[str]:
        # Tables live in the connection's main database
        return None

    def build_connection_string(self) -> str:
        """Build SQLite connection URL."""
        database = self.connection_info.database
        if not database or database == ":memory:":
            return "sqlite://"
        return f"sqlite:///{database}"

    def _engine_options(self) -> dict[str, Any]:
        # SQLAlchemy picks the pool SQLite needs
        return {"echo": self.database_config.echo}

    def quote_identifier(self, name: str) -> str:
        return f'"{name}"'

    def _table_params(self, table_name: str) -> dict[str, Any]:
        return {"table": table_name}

    def get_table_exists_query(self) -> str:
        """Get SQLite table existence query."""
        return "SELECT name FROM sqlite_master WHERE type = 'table' AND name = :table"

    def get_columns_query(self) -> str:
        # PRAGMA arguments cannot be bound; the name is validated and quoted instead
        return 'PRAGMA table_info("{table}")'

    def get_indexes_query(self) -> str:
        return 'PRAGMA index_list("{table}")'

    def _fetch_column_rows(self, table_name: str) -> list[dict[str, Any]]:
        validate_table_name(table_name)
        rows = self.execute_query(self.get_columns_query().format(table=table_name))
        return [
            {
                "column_name": row["name"],
                "data_type": row["type"],
                "is_nullable": not row["notnull"],
            }
            for row in rows
        ]

    def _fetch_index_rows(self, table_name: str) -> list[dict[str, Any]]:
        validate_table_name(table_name)
        rows = []
        for index in self.execute_query(self.get_indexes_query().format(table=table_name)):
            # 'c' = CREATE INDEX; 'u'/'pk' indexes belong to constraints
            if index["origin"] != "c":
                continue
            index_columns = self.execute_query(
                f"PRAGMA index_info({self.quote_identifier(index['name'])})"
            )
            for column in sorted(index_columns, key=lambda r: r["seqno"]):
                rows.append(
                    {
                        "index_name": index["name"],
                        "column_name": column["name"],
                        "is_clustered": False,
                    }
                )
        return rows


def get_adapter(
    db_type: DatabaseType,
    connection_info: ConnectionInfo,
    database_config: Optional[DatabaseConfig] = None,
) -> SQLAlchemyAdapter:
    """
    Factory function to get the appropriate database adapter.

    Args:
        db_type: Type of database
        connection_info: Connection information
        database_config: Optional engine pool settings

    Returns:
        Appropriate database adapter instance
    """
    adapters = {
        DatabaseType.SQL_SERVER: SQLServerAdapter,
        DatabaseType.POSTGRESQL: PostgreSQLAdapter,
        DatabaseType.MYSQL: MySQLAdapter,
        DatabaseType.SQLITE: SQLiteAdapter,
    }

    adapter_class = adapters.get(DatabaseType(db_type))
    if not adapter_class:
        raise ValueError(f"Unsupported database type: {db_type}")

    return adapter_class(connection_info, database_config)
