"""Identifier validation helpers.

Adapters interpolate table, column and index names into DDL, so every name
that reaches them is checked here first.
"""

import re

from tablewriter.core.exceptions import ValidationError

IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_][a-zA-Z0-9_@#$]*$")
MAX_IDENTIFIER_LENGTH = 128


def validate_identifier(name: str, field: str = "identifier") -> bool:
    """
    Validate a SQL identifier.

    Args:
        name: Identifier to validate
        field: Kind of identifier, used in error messages

    Returns:
        True if valid

    Raises:
        ValidationError: If the identifier is invalid
    """
    label = field.replace("_", " ").capitalize()

    if not name:
        raise ValidationError(
            f"{label} name cannot be empty",
            field=field,
        )

    if not IDENTIFIER_PATTERN.match(name):
        raise ValidationError(
            f"Invalid {field.replace('_', ' ')} name format. "
            "Must start with letter or underscore.",
            field=field,
            value=name,
        )

    if len(name) > MAX_IDENTIFIER_LENGTH:
        raise ValidationError(
            f"{label} name cannot exceed {MAX_IDENTIFIER_LENGTH} characters",
            field=field,
            value=name,
        )

    return True


def validate_table_name(table: str) -> bool:
    """Validate table name."""
    return validate_identifier(table, "table")


def validate_column_name(column: str) -> bool:
    """Validate column name."""
    return validate_identifier(column, "column")


def validate_index_name(index: str) -> bool:
    """Validate index name."""
    return validate_identifier(index, "index")


def validate_schema_name(schema: str) -> bool:
    """Validate database schema (namespace) name."""
    return validate_identifier(schema, "schema")
