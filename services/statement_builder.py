"""
services/statement_builder.py
-----------------------------
Turns an operation and its caller-supplied arguments into a Statement.

Values always travel as positional parameters. Identifiers (table and
column names) are double-quoted and placed in the text; quote characters
inside them are not escaped. The `where` text of update/delete and the
whole `sql` of query are trusted and used verbatim.
"""

from typing import Any, Optional

from psycopg2.extras import Json

from models.operation import (
    DeleteArguments,
    InsertArguments,
    Operation,
    QueryArguments,
    UpdateArguments,
    parse_arguments,
)
from models.statement import Statement

PLACEHOLDER = "%s"


def quote_identifier(name: str) -> str:
    return f'"{name}"'


def _verbatim(text: str) -> str:
    """Protect literal '%' in text that goes into a parameterized statement."""
    return text.replace("%", "%%")


def _adapt(value: Any) -> Any:
    # Mappings go to the database as JSON; lists are adapted to arrays by the driver.
    if isinstance(value, dict):
        return Json(value)
    return value


class StatementBuilder:
    """Builds one Statement per operation call."""

    def build(self, operation: Operation, arguments: Optional[dict]) -> Statement:
        """
        Validate arguments and assemble the statement for an operation.

        Args:
            operation: The operation to build for.
            arguments: Raw argument map from the caller.

        Returns:
            The Statement to execute.

        Raises:
            ValidationError: If the arguments are missing or malformed.
        """
        args = parse_arguments(operation, arguments)
        if isinstance(args, QueryArguments):
            return Statement(args.sql)
        if isinstance(args, InsertArguments):
            return self._insert(args)
        if isinstance(args, UpdateArguments):
            return self._update(args)
        if isinstance(args, DeleteArguments):
            return self._delete(args)
        raise TypeError(f"No statement form for {operation!r}")

    def _insert(self, args: InsertArguments) -> Statement:
        # Columns and parameters come from a single pass over the map so their order always matches.
        columns, params = [], []
        for column, value in args.values.items():
            columns.append(_verbatim(quote_identifier(column)))
            params.append(_adapt(value))
        placeholders = ", ".join(PLACEHOLDER for _ in params)
        sql = (
            f"INSERT INTO {_verbatim(quote_identifier(args.table))} "
            f"({', '.join(columns)}) VALUES ({placeholders}) RETURNING *"
        )
        return Statement(sql, tuple(params))

    def _update(self, args: UpdateArguments) -> Statement:
        assignments, params = [], []
        for column, value in args.values.items():
            assignments.append(f"{_verbatim(quote_identifier(column))} = {PLACEHOLDER}")
            params.append(_adapt(value))
        sql = (
            f"UPDATE {_verbatim(quote_identifier(args.table))} "
            f"SET {', '.join(assignments)} WHERE {_verbatim(args.where)} RETURNING *"
        )
        return Statement(sql, tuple(params))

    def _delete(self, args: DeleteArguments) -> Statement:
        sql = f"DELETE FROM {quote_identifier(args.table)} WHERE {args.where} RETURNING *"
        return Statement(sql)
