"""Result types reported by the table manager."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from tablewriter.data.models import Schema


class InitializationStep(str, Enum):
    """Reconciliation steps, in the order initialize_table runs them."""

    CREATE_TABLE = "create_table"
    UPDATE_TABLE_TO_MATCH_SCHEMA = "update_table_to_match_schema"
    UPDATE_SCHEMA_TO_MATCH_TABLE = "update_schema_to_match_table"
    CREATE_INDEXES = "create_indexes"
    ADD_INDEXES = "add_indexes"
    REMOVE_INDEXES = "remove_indexes"
    UPDATE_INDEX_CLUSTERS = "update_index_clusters"


@dataclass
class OperationResult:
    """
    Outcome of one table manager operation.

    Truthy exactly when the operation succeeded. `messages` holds the
    diagnostics that were logged at warning level or above; `schema` is only
    set by update_schema_to_match_table.
    """

    step: InitializationStep
    table_name: str
    success: bool = True
    messages: list[str] = field(default_factory=list)
    schema: Optional[Schema] = None

    def __bool__(self) -> bool:
        return self.success

    def fail(self, message: str) -> "OperationResult":
        """Mark the operation failed and record why."""
        self.success = False
        self.messages.append(message)
        return self


@dataclass
class InitializationReport:
    """Per-step outcome of initialize_table."""

    table_name: str
    schema: Schema
    results: list[OperationResult] = field(default_factory=list)

    @property
    def success(self) -> bool:
        """True when every step that ran succeeded."""
        return all(result.success for result in self.results)

    @property
    def failed_steps(self) -> list[InitializationStep]:
        """Steps that failed, in run order."""
        return [result.step for result in self.results if not result.success]

    @property
    def steps_run(self) -> list[InitializationStep]:
        """Steps that ran, in run order."""
        return [result.step for result in self.results]

    def get_result(self, step: InitializationStep) -> Optional[OperationResult]:
        """Get the result of a step, or None if it did not run."""
        return next((r for r in self.results if r.step == step), None)

    def get_summary(self) -> dict[str, Any]:
        """Get report summary."""
        return {
            "table": self.table_name,
            "steps_run": len(self.results),
            "steps_failed": len(self.failed_steps),
            "success": self.success,
            "failed_steps": [step.value for step in self.failed_steps],
            "messages": [m for r in self.results for m in r.messages],
        }
