"""Table reconciliation services."""

from tablewriter.services.results import (
    InitializationReport,
    InitializationStep,
    OperationResult,
)
from tablewriter.services.table_manager import (
    add_db_indexes_to_match,
    create_indexes,
    create_table,
    initialize_table,
    remove_db_indexes_to_match,
    update_index_clusters,
    update_schema_to_match_table,
    update_table_to_match_schema,
)

__all__ = [
    "InitializationReport",
    "InitializationStep",
    "OperationResult",
    "add_db_indexes_to_match",
    "create_indexes",
    "create_table",
    "initialize_table",
    "remove_db_indexes_to_match",
    "update_index_clusters",
    "update_schema_to_match_table",
    "update_table_to_match_schema",
]
