"""
services/normalizer.py
----------------------
Collapses execution outcomes into the two caller-facing shapes.

    rows / row            -> Success
    OperationError        -> Failure(kind, message)
    psycopg2.Error        -> DatabaseExecutionError with a classified kind

and renders an ExecutionResult as a tool response:
    {"content": [{"type": "text", "text": ...}], "isError": bool}
"""

import json
from typing import Any

import psycopg2
from psycopg2 import errors
from psycopg2.extensions import TransactionRollbackError

from models.errors import DatabaseExecutionError, ErrorKind, OperationError
from models.operation import Operation
from models.statement import ExecutionResult, Failure, Success


def classify(error: psycopg2.Error) -> ErrorKind:
    """Map a driver exception to an ErrorKind."""
    if isinstance(error, errors.ReadOnlySqlTransaction):
        return ErrorKind.READ_ONLY_VIOLATION
    if isinstance(error, psycopg2.IntegrityError):
        return ErrorKind.CONSTRAINT_VIOLATION
    if isinstance(error, psycopg2.ProgrammingError):
        return ErrorKind.SYNTAX_ERROR
    if isinstance(error, psycopg2.DataError):
        return ErrorKind.DATA_ERROR
    if isinstance(error, TransactionRollbackError):
        return ErrorKind.DATABASE_ERROR
    if isinstance(error, (psycopg2.OperationalError, psycopg2.InterfaceError)):
        return ErrorKind.CONNECTION_LOST
    return ErrorKind.DATABASE_ERROR


def driver_message(error: psycopg2.Error) -> str:
    """The server's primary message when there is one, else the exception text."""
    diag = getattr(error, "diag", None)
    primary = getattr(diag, "message_primary", None) if diag is not None else None
    return (primary or str(error)).strip() or type(error).__name__


def wrap_driver_error(error: psycopg2.Error) -> DatabaseExecutionError:
    wrapped = DatabaseExecutionError(driver_message(error), classify(error))
    wrapped.__cause__ = error
    return wrapped


def success(operation: Operation, rows: list[dict]) -> Success:
    if operation.returns_single_row:
        return Success(rows[0] if rows else None)
    return Success(rows)


def failure(error: OperationError) -> Failure:
    return Failure(message=error.message, kind=error.kind)


def _json_default(value: Any) -> str:
    # bytea columns arrive as memoryview
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value).hex()
    return str(value)


def to_text(payload: Any) -> str:
    return json.dumps(payload, indent=2, default=_json_default)


def to_tool_response(result: ExecutionResult) -> dict:
    """Render an ExecutionResult in the tool-call response shape."""
    if isinstance(result, Failure):
        text = f"Error: {result.message}"
    else:
        text = to_text(result.payload)
    return {
        "content": [{"type": "text", "text": text}],
        "isError": result.is_error,
    }
