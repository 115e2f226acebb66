"""Utility functions and helpers."""

from tablewriter.utils.validators import (
    validate_column_name,
    validate_identifier,
    validate_index_name,
    validate_schema_name,
    validate_table_name,
)

__all__ = [
    "validate_column_name",
    "validate_identifier",
    "validate_index_name",
    "validate_schema_name",
    "validate_table_name",
]
