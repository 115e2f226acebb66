"""Data models for table descriptions and remote index directories."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from tablewriter.core.exceptions import ValidationError

INDEX_NAME_SUFFIX = "_idx"


def index_name_for(column_name: str) -> str:
    """Get the name of the single-column index managed for a column."""
    return f"{column_name}{INDEX_NAME_SUFFIX}"


class AuthType(Enum):
    """Database authentication types."""

    WINDOWS = "windows"
    SQL = "sql"


class PortableType(Enum):
    """Engine-independent column data types."""

    BOOLEAN = "boolean"
    SMALLINT = "smallint"
    INTEGER = "integer"
    BIGINT = "bigint"
    FLOAT = "float"
    DECIMAL = "decimal"
    STRING = "string"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    BINARY = "binary"
    GUID = "guid"
    # Native types with no portable counterpart
    OTHER = "other"


@dataclass
class ConnectionInfo:
    """Database connection information."""

    server: str
    database: str
    username: Optional[str] = None
    password: Optional[str] = None
    auth_type: AuthType = AuthType.SQL
    port: Optional[int] = None
    schema_name: Optional[str] = None
    connection_timeout: int = 30

    def get_display_name(self) -> str:
        """Get a display-friendly connection name."""
        if self.port:
            return f"{self.server}:{self.port}/{self.database}"
        return f"{self.server}/{self.database}"

    def mask_password(self) -> "ConnectionInfo":
        """Return a copy with masked password for logging."""
        return ConnectionInfo(
            server=self.server,
            database=self.database,
            username=self.username,
            password="****" if self.password else None,
            auth_type=self.auth_type,
            port=self.port,
            schema_name=self.schema_name,
            connection_timeout=self.connection_timeout,
        )


@dataclass(frozen=True)
class Column:
    """A named, typed table column."""

    name: str
    data_type: PortableType
    nullable: bool = True

    def describe(self) -> str:
        """Get a short description such as 'age integer NOT NULL'."""
        null_text = "NULL" if self.nullable else "NOT NULL"
        return f"{self.name} {self.data_type.value} {null_text}"


@dataclass(frozen=True, eq=False)
class Schema:
    """
    In-memory description of a table.

    Two schemas are equal when they hold the same column names and each pair
    of same-named columns agrees on type and nullability. Neither the table
    name nor the column order takes part in the comparison; the order only
    matters when the table is created.
    """

    name: str
    columns: tuple[Column, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Schema name cannot be empty", field="name")

        # Accept any iterable of columns but store a tuple
        object.__setattr__(self, "columns", tuple(self.columns))

        seen: set[str] = set()
        for column in self.columns:
            if not column.name:
                raise ValidationError(
                    f"Column name cannot be empty in schema '{self.name}'",
                    field="columns",
                )
            if column.name in seen:
                raise ValidationError(
                    f"Duplicate column '{column.name}' in schema '{self.name}'",
                    field="columns",
                    value=column.name,
                )
            seen.add(column.name)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Schema):
            return NotImplemented
        return self._column_map() == other._column_map()

    def __hash__(self) -> int:
        return hash(frozenset(self.columns))

    def __len__(self) -> int:
        return len(self.columns)

    def __iter__(self):
        return iter(self.columns)

    def _column_map(self) -> dict[str, Column]:
        return {column.name: column for column in self.columns}

    @property
    def column_names(self) -> list[str]:
        """Column names in declaration order."""
        return [column.name for column in self.columns]

    def has_column(self, name: str) -> bool:
        """Check whether a column exists."""
        return any(column.name == name for column in self.columns)

    def get_column(self, name: str) -> Optional[Column]:
        """Get a column by name, or None."""
        return next((c for c in self.columns if c.name == name), None)

    def missing_from(self, other: "Schema") -> list[Column]:
        """Columns of this schema that the other schema lacks, in this schema's order."""
        return [column for column in self.columns if not other.has_column(column.name)]

    def renamed(self, name: str) -> "Schema":
        """Get the same columns under another table name."""
        return Schema(name=name, columns=self.columns)

    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain data."""
        return {
            "name": self.name,
            "columns": [
                {
                    "name": column.name,
                    "type": column.data_type.value,
                    "nullable": column.nullable,
                }
                for column in self.columns
            ],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Schema":
        """
        Build a schema from plain data.

        Args:
            data: Mapping with 'name' and a 'columns' list of
                {'name', 'type', 'nullable'} mappings

        Returns:
            Schema instance

        Raises:
            ValidationError: If the data is incomplete or names an unknown type
        """
        if "name" not in data:
            raise ValidationError("Schema description requires a 'name'", field="name")

        columns = []
        for entry in data.get("columns", []):
            type_name = str(entry.get("type", "")).lower()
            try:
                data_type = PortableType(type_name)
            except ValueError as e:
                raise ValidationError(
                    f"Unknown column type '{type_name}'",
                    field="type",
                    value=type_name,
                ) from e
            columns.append(
                Column(
                    name=entry.get("name", ""),
                    data_type=data_type,
                    nullable=bool(entry.get("nullable", True)),
                )
            )
        return cls(name=data["name"], columns=tuple(columns))


@dataclass(frozen=True)
class IndexDescriptor:
    """An index as reported by the database."""

    index_name: str
    indexed_columns: tuple[str, ...] = field(default_factory=tuple)
    is_clustered: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "indexed_columns", tuple(self.indexed_columns))
