"""Pytest configuration and fixtures."""

from typing import Iterable, Optional

import pytest

from tablewriter.core.exceptions import DatabaseError
from tablewriter.data.adapters import DatabaseAdapter, SQLiteAdapter
from tablewriter.data.models import (
    Column,
    ConnectionInfo,
    IndexDescriptor,
    PortableType,
    Schema,
)

MUTATING_CALLS = {
    "create_table",
    "add_columns_to_table_to_match_schema",
    "create_index_on_table",
    "cluster_index",
    "drop_index",
}


class FakeDatabaseAdapter(DatabaseAdapter):
    """In-memory database that records every call made through it."""

    def __init__(
        self,
        tables: Iterable[Schema] = (),
        indexes: Optional[dict[str, list[IndexDescriptor]]] = None,
        fail_on: Iterable[str] = (),
    ) -> None:
        self.tables: dict[str, Schema] = {schema.name: schema for schema in tables}
        self.indexes: dict[str, list[IndexDescriptor]] = {
            name: list(entries) for name, entries in (indexes or {}).items()
        }
        self.fail_on = set(fail_on)
        self.calls: list[tuple] = []

    @property
    def mutating_calls(self) -> list[tuple]:
        return [call for call in self.calls if call[0] in MUTATING_CALLS]

    def index_names(self, table_name: str) -> list[str]:
        return [index.index_name for index in self.indexes.get(table_name, [])]

    def get_index(self, table_name: str, index_name: str) -> Optional[IndexDescriptor]:
        return next(
            (i for i in self.indexes.get(table_name, []) if i.index_name == index_name),
            None,
        )

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))
        if name in self.fail_on:
            raise DatabaseError(f"{name} failed")

    def exists_table(self, table_name):
        self._record("exists_table", table_name)
        return table_name in self.tables

    def get_schema(self, table_name):
        self._record("get_schema", table_name)
        if table_name not in self.tables:
            raise DatabaseError(f"Table '{table_name}' does not exist", table=table_name)
        return self.tables[table_name]

    def create_table(self, schema):
        self._record("create_table", schema.name)
        self.tables[schema.name] = schema
        self.indexes.setdefault(schema.name, [])

    def add_columns_to_table_to_match_schema(self, table_name, schema):
        self._record("add_columns_to_table_to_match_schema", table_name)
        existing = self.tables[table_name]
        self.tables[table_name] = Schema(
            name=table_name,
            columns=existing.columns + tuple(schema.missing_from(existing)),
        )

    def get_indexes(self, table_name):
        self._record("get_indexes", table_name)
        return list(self.indexes.get(table_name, []))

    def create_index_on_table(self, table_name, column_name, index_name):
        self._record("create_index_on_table", table_name, column_name, index_name)
        if self.get_index(table_name, index_name) is not None:
            raise DatabaseError(f"Index '{index_name}' already exists")
        self.indexes.setdefault(table_name, []).append(
            IndexDescriptor(index_name=index_name, indexed_columns=(column_name,))
        )

    def cluster_index(self, table_name, index_name):
        self._record("cluster_index", table_name, index_name)
        entries = self.indexes.get(table_name, [])
        for position, index in enumerate(entries):
            if index.index_name == index_name:
                entries[position] = IndexDescriptor(
                    index_name=index_name,
                    indexed_columns=index.indexed_columns,
                    is_clustered=True,
                )
                return
        raise DatabaseError(f"Index '{index_name}' does not exist")

    def drop_index(self, index_name, table_name=None):
        self._record("drop_index", index_name, table_name)
        for entries in self.indexes.values():
            for index in entries:
                if index.index_name == index_name:
                    entries.remove(index)
                    return
        raise DatabaseError(f"Index '{index_name}' does not exist")


@pytest.fixture
def users_schema():
    """Create the in-memory schema of a users table."""
    return Schema(
        name="users",
        columns=(
            Column("id", PortableType.INTEGER, nullable=False),
            Column("name", PortableType.STRING, nullable=False),
            Column("age", PortableType.INTEGER),
        ),
    )


@pytest.fixture
def make_adapter():
    """Create fake adapters preloaded with tables and indexes."""

    def _make(tables=(), indexes=None, fail_on=()):
        return FakeDatabaseAdapter(tables=tables, indexes=indexes, fail_on=fail_on)

    return _make


@pytest.fixture
def sqlite_connection_info(tmp_path):
    """Create connection info for a throwaway SQLite database."""
    return ConnectionInfo(server="localhost", database=str(tmp_path / "tables.db"))


@pytest.fixture
def sqlite_adapter(sqlite_connection_info):
    """Create a connected SQLite adapter."""
    adapter = SQLiteAdapter(sqlite_connection_info)
    adapter.connect()
    yield adapter
    adapter.disconnect()
