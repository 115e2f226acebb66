"""
Table manager: reconciles in-memory schemas with database tables.

Creates tables on a database and keeps existing tables, in-memory schemas and
index sets in step with each other. Every function takes an open adapter and
returns an OperationResult; database errors are logged and reported as failed
results, never raised. The adapter's connection belongs to the caller.
"""

from typing import Mapping

from tablewriter.core.config import TableInitializationConfig
from tablewriter.core.logging import get_logger
from tablewriter.data.adapters import DatabaseAdapter
from tablewriter.data.models import Schema, index_name_for
from tablewriter.services.results import (
    InitializationReport,
    InitializationStep,
    OperationResult,
)

logger = get_logger(__name__)


def _fail(result: OperationResult, message: str) -> OperationResult:
    logger.error(message)
    return result.fail(message)


def _absorb(result: OperationResult, inner: OperationResult) -> OperationResult:
    """Carry a nested operation's failure over to the enclosing result."""
    if not inner.success:
        result.success = False
    result.messages.extend(inner.messages)
    return result


def create_table(
    adapter: DatabaseAdapter, schema: Schema, indexes: Mapping[str, bool]
) -> OperationResult:
    """
    Create a table and its indexes unless the table already exists.

    Args:
        adapter: Open adapter to a database
        schema: Schema of the table to create
        indexes: Column name -> whether its index is clustered

    Returns:
        Successful result if the table exists afterwards with all indexes
        created, or already existed
    """
    result = OperationResult(InitializationStep.CREATE_TABLE, schema.name)
    try:
        if adapter.exists_table(schema.name):
            logger.debug(
                f"Database table '{schema.name}' already exists; skipping creation."
            )
            return result
        adapter.create_table(schema)
        logger.info(f"Created database table '{schema.name}'")
    except Exception as e:
        return _fail(result, f"Failed to create database table '{schema.name}': {e}")

    return _absorb(result, create_indexes(adapter, schema, indexes))


def update_table_to_match_schema(
    adapter: DatabaseAdapter, schema: Schema
) -> OperationResult:
    """
    Add the schema's columns that the database table lacks.

    Columns only present on the table are left alone, and existing columns
    are never altered.
    """
    result = OperationResult(
        InitializationStep.UPDATE_TABLE_TO_MATCH_SCHEMA, schema.name
    )
    try:
        db_schema = adapter.get_schema(schema.name)
        if schema == db_schema:
            logger.debug(
                f"Database table '{schema.name}' already matches schema; nothing to update."
            )
            return result

        for column in schema.columns:
            db_column = db_schema.get_column(column.name)
            if db_column is not None and db_column != column:
                message = (
                    f"Column '{column.name}' of table '{schema.name}' differs from "
                    f"the schema (schema: {column.describe()}, table: "
                    f"{db_column.describe()}); existing columns are not altered."
                )
                logger.warning(message)
                result.messages.append(message)

        adapter.add_columns_to_table_to_match_schema(schema.name, schema)
        logger.info(f"Updated database table '{schema.name}' to match schema")
        return result

    except Exception as e:
        return _fail(
            result, f"Failed to update database table '{schema.name}' to match schema: {e}"
        )


def update_schema_to_match_table(
    adapter: DatabaseAdapter, schema: Schema
) -> OperationResult:
    """
    Replace a schema with the database table's, if they are compatible.

    Every column of the schema must exist on the table with the same type
    and nullability; the table may have more columns. On success
    `result.schema` is the table's schema, otherwise it is the schema that was
    passed in. The passed schema is never modified.
    """
    result = OperationResult(
        InitializationStep.UPDATE_SCHEMA_TO_MATCH_TABLE, schema.name, schema=schema
    )
    try:
        db_schema = adapter.get_schema(schema.name)
    except Exception as e:
        return _fail(result, f"Error updating schema '{schema.name}' from database: {e}")

    prefix = f"Cannot update schema '{schema.name}' to match database table"
    for column in schema.columns:
        db_column = db_schema.get_column(column.name)
        if db_column is None:
            return _fail(
                result,
                f"{prefix}; column '{column.name}' exists in the schema, "
                "but not the database table (missing).",
            )
        if db_column.data_type != column.data_type:
            return _fail(
                result,
                f"{prefix}; type mismatch on column '{column.name}'. "
                f"[Schema='{column.data_type.value}', DbTable='{db_column.data_type.value}']",
            )
        if db_column.nullable != column.nullable:
            return _fail(
                result,
                f"{prefix}; nullability mismatch on column '{column.name}'. "
                f"[Schema='{column.nullable}', DbTable='{db_column.nullable}']",
            )

    result.schema = db_schema
    logger.debug(f"Updated schema to match database table '{db_schema.name}'.")
    return result


def create_indexes(
    adapter: DatabaseAdapter, schema: Schema, columns: Mapping[str, bool]
) -> OperationResult:
    """
    Create one index per column, named '<column>_idx'.

    Stops at the first failure; indexes created before it are kept.

    Args:
        adapter: Open adapter to a database
        schema: Schema of the indexed table
        columns: Column name -> whether its index is clustered
    """
    result = OperationResult(InitializationStep.CREATE_INDEXES, schema.name)
    try:
        table_exists = adapter.exists_table(schema.name)
    except Exception as e:
        return _fail(result, f"Error creating indexes for table '{schema.name}': {e}")

    if not table_exists:
        return _fail(
            result, f"Error creating index: table '{schema.name}' does not exist"
        )

    for column_name, clustered in columns.items():
        index_name = index_name_for(column_name)
        try:
            adapter.create_index_on_table(schema.name, column_name, index_name)
            if clustered:
                adapter.cluster_index(schema.name, index_name)
        except Exception as e:
            return _fail(
                result,
                f"Error creating index on column '{column_name}' "
                f"for table '{schema.name}': {e}",
            )

    return result


def add_db_indexes_to_match(
    adapter: DatabaseAdapter, schema: Schema, columns: Mapping[str, bool]
) -> OperationResult:
    """
    Create the wanted indexes that the table does not have yet.

    Indexes are matched by name only; clustering differences are left to
    update_index_clusters.
    """
    result = OperationResult(InitializationStep.ADD_INDEXES, schema.name)
    try:
        if not adapter.exists_table(schema.name):
            return result
        logger.debug(
            f"Checking to see if indexes should be added to table '{schema.name}'.."
        )
        existing = {index.index_name for index in adapter.get_indexes(schema.name)}
    except Exception as e:
        return _fail(result, f"Unable to update indexes for table '{schema.name}': {e}")

    to_create = {
        column_name: clustered
        for column_name, clustered in columns.items()
        if index_name_for(column_name) not in existing
    }
    if not to_create:
        return result

    return _absorb(result, create_indexes(adapter, schema, to_create))


def remove_db_indexes_to_match(
    adapter: DatabaseAdapter, schema: Schema, columns: Mapping[str, bool]
) -> OperationResult:
    """Drop every index that covers a column not in `columns`."""
    result = OperationResult(InitializationStep.REMOVE_INDEXES, schema.name)
    try:
        if not adapter.exists_table(schema.name):
            return result
        logger.debug(
            f"Checking to see if indexes should be removed from table '{schema.name}'.."
        )

        to_drop: list[str] = []
        for index in adapter.get_indexes(schema.name):
            unwanted = any(c not in columns for c in index.indexed_columns)
            if unwanted and index.index_name not in to_drop:
                to_drop.append(index.index_name)

        for index_name in to_drop:
            adapter.drop_index(index_name, table_name=schema.name)
            logger.info(f"Dropped index '{index_name}' from table '{schema.name}'")

    except Exception as e:
        return _fail(
            result, f"Unable to remove indexes from table '{schema.name}': {e}"
        )

    return result


def update_index_clusters(
    adapter: DatabaseAdapter, schema: Schema, columns: Mapping[str, bool]
) -> OperationResult:
    """
    Bring the clustered flag of existing indexes in line with `columns`.

    An index that should be clustered is clustered in place; one that should
    not be is dropped and recreated under the same name.
    """
    result = OperationResult(InitializationStep.UPDATE_INDEX_CLUSTERS, schema.name)
    try:
        if not adapter.exists_table(schema.name):
            return result
        logger.debug(
            f"Checking to see if clusters on indexes should be updated "
            f"for table '{schema.name}'.."
        )

        for index in adapter.get_indexes(schema.name):
            for column_name in index.indexed_columns:
                if column_name not in columns:
                    continue
                wants_clustered = columns[column_name]
                if wants_clustered and not index.is_clustered:
                    adapter.cluster_index(schema.name, index.index_name)
                elif not wants_clustered and index.is_clustered:
                    adapter.drop_index(index.index_name, table_name=schema.name)
                    adapter.create_index_on_table(
                        schema.name, column_name, index.index_name
                    )

    except Exception as e:
        return _fail(
            result, f"Unable to update index clusters for table '{schema.name}': {e}"
        )

    return result


def initialize_table(
    adapter: DatabaseAdapter,
    schema: Schema,
    options: TableInitializationConfig,
) -> InitializationReport:
    """
    Run the reconciliation steps enabled in `options`.

    Steps run in a fixed order (create, push columns, pull schema, add,
    remove and re-cluster indexes) and every enabled step runs whatever the
    earlier ones returned. When the schema is pulled from the table, later
    steps and `report.schema` use the pulled schema.

    Args:
        adapter: Open adapter to a database
        schema: Schema to initialize the table from
        options: Which steps to run and the indexes to maintain

    Returns:
        Report with one result per step that ran
    """
    report = InitializationReport(table_name=schema.name, schema=schema)
    indexes = dict(options.indexes_to_generate)

    if options.create_table_dynamically:
        report.results.append(create_table(adapter, report.schema, indexes))

    if options.update_db_table_to_match_schema:
        report.results.append(update_table_to_match_schema(adapter, report.schema))

    if options.update_schema_to_match_db_table:
        pulled = update_schema_to_match_table(adapter, report.schema)
        report.results.append(pulled)
        if pulled.success and pulled.schema is not None:
            report.schema = pulled.schema

    if options.update_indexes:
        report.results.append(add_db_indexes_to_match(adapter, report.schema, indexes))
        report.results.append(
            remove_db_indexes_to_match(adapter, report.schema, indexes)
        )
        report.results.append(update_index_clusters(adapter, report.schema, indexes))

    if report.results:
        if report.success:
            logger.info(
                f"Initialized table '{schema.name}' ({len(report.results)} steps)"
            )
        else:
            failed = ", ".join(step.value for step in report.failed_steps)
            logger.warning(f"Initialized table '{schema.name}' with failures: {failed}")

    return report
