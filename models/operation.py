"""
models/operation.py
-------------------
Domain model for the fixed set of database operations.

Each Operation carries its JSON argument schema (also published to the
client as the tool's input schema) and the transaction mode it runs in.
Raw argument maps are validated against the schema and turned into a
typed record before any SQL is built.
"""

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, Optional, Union

from jsonschema import validate as jsonschema_validate, ValidationError as JsonSchemaError

from models.errors import UnknownOperation, ValidationError


class TransactionMode(str, Enum):
    READ_ONLY = "read_only"    # explicit BEGIN TRANSACTION READ ONLY
    AUTOCOMMIT = "autocommit"  # single statement, committed on its own


class Operation(str, Enum):
    QUERY = "query"
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"

    @classmethod
    def from_name(cls, name: str) -> "Operation":
        """
        Resolve a tool name to an Operation.

        Raises:
            UnknownOperation: If the name is not a known operation.
        """
        try:
            return cls(name)
        except ValueError:
            raise UnknownOperation(str(name)) from None

    @property
    def transaction_mode(self) -> TransactionMode:
        if self is Operation.QUERY:
            return TransactionMode.READ_ONLY
        return TransactionMode.AUTOCOMMIT

    @property
    def returns_single_row(self) -> bool:
        return self is Operation.INSERT

    @property
    def description(self) -> str:
        return DESCRIPTIONS[self]

    @property
    def input_schema(self) -> dict:
        return INPUT_SCHEMAS[self]


# ── Argument schemas ──────────────────────────────────────

_TABLE = {"type": "string", "description": "Name of the target table"}
_VALUES = {
    "type": "object",
    "minProperties": 1,
    "description": "Column names mapped to the values to write",
}
_WHERE = {"type": "string", "description": "SQL condition selecting the affected rows"}

INPUT_SCHEMAS: dict[Operation, dict] = {
    Operation.QUERY: {
        "type": "object",
        "properties": {"sql": {"type": "string", "description": "SQL query to run"}},
        "required": ["sql"],
    },
    Operation.INSERT: {
        "type": "object",
        "properties": {"table": _TABLE, "values": _VALUES},
        "required": ["table", "values"],
    },
    Operation.UPDATE: {
        "type": "object",
        "properties": {"table": _TABLE, "values": _VALUES, "where": _WHERE},
        "required": ["table", "values", "where"],
    },
    Operation.DELETE: {
        "type": "object",
        "properties": {"table": _TABLE, "where": _WHERE},
        "required": ["table", "where"],
    },
}

DESCRIPTIONS: dict[Operation, str] = {
    Operation.QUERY: "Run a read-only SQL query",
    Operation.INSERT: "Insert a row into a table and return it",
    Operation.UPDATE: "Update rows in a table and return them",
    Operation.DELETE: "Delete rows from a table and return them",
}


# ── Typed arguments ───────────────────────────────────────

@dataclass(frozen=True)
class QueryArguments:
    sql: str


@dataclass(frozen=True)
class InsertArguments:
    table: str
    values: dict[str, Any]


@dataclass(frozen=True)
class UpdateArguments:
    table: str
    values: dict[str, Any]
    where: str


@dataclass(frozen=True)
class DeleteArguments:
    table: str
    where: str


OperationArguments = Union[QueryArguments, InsertArguments, UpdateArguments, DeleteArguments]

_ARGUMENT_TYPES = {
    Operation.QUERY: QueryArguments,
    Operation.INSERT: InsertArguments,
    Operation.UPDATE: UpdateArguments,
    Operation.DELETE: DeleteArguments,
}


def parse_arguments(operation: Operation, arguments: Optional[dict]) -> OperationArguments:
    """
    Validate a raw argument map and build the operation's typed record.

    Args:
        operation: The operation the arguments belong to.
        arguments: Caller-supplied map; None is treated as empty.

    Returns:
        One of QueryArguments, InsertArguments, UpdateArguments, DeleteArguments.

    Raises:
        ValidationError: If a required argument is missing or has the wrong shape.
    """
    if arguments is None:
        arguments = {}
    try:
        jsonschema_validate(arguments, INPUT_SCHEMAS[operation])
    except JsonSchemaError as e:
        location = ".".join(str(p) for p in e.absolute_path)
        prefix = f"{location}: " if location else ""
        raise ValidationError(f"Invalid arguments for {operation.value}: {prefix}{e.message}") from e

    record_type = _ARGUMENT_TYPES[operation]
    return record_type(**{f.name: arguments[f.name] for f in fields(record_type)})
