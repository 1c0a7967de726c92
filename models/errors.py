"""
models/errors.py
----------------
Error taxonomy for operation handling.

Every fault raised while handling an operation is an OperationError and
carries an ErrorKind; the dispatcher turns these into error payloads.
Pool exhaustion and fatal I/O are deliberately not part of this hierarchy.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION_ERROR = "validation_error"
    UNKNOWN_OPERATION = "unknown_operation"
    READ_ONLY_VIOLATION = "read_only_violation"
    CONSTRAINT_VIOLATION = "constraint_violation"
    SYNTAX_ERROR = "syntax_error"
    DATA_ERROR = "data_error"
    CONNECTION_LOST = "connection_lost"
    DATABASE_ERROR = "database_error"


class OperationError(Exception):
    """Base class for faults that are reported back to the caller as data."""

    kind: ErrorKind = ErrorKind.DATABASE_ERROR

    def __init__(self, message: str, kind: Optional[ErrorKind] = None):
        super().__init__(message)
        self.message = message
        if kind is not None:
            self.kind = kind


class ValidationError(OperationError):
    """Missing or malformed operation arguments."""

    kind = ErrorKind.VALIDATION_ERROR


class UnknownOperation(OperationError):
    """The requested operation name is not one we serve."""

    kind = ErrorKind.UNKNOWN_OPERATION

    def __init__(self, name: str):
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class DatabaseExecutionError(OperationError):
    """A statement failed inside the database (or the link to it broke mid-statement)."""
