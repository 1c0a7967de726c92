"""
services/dispatcher.py
----------------------
Operation dispatcher: the single entry point for tool calls.

Workflow per call:
    1. Resolve the operation name (unknown names never touch the pool).
    2. Lease a connection.
    3. Open the transaction scope for the operation's mode.
    4. Build the statement from the arguments.
    5. Execute it.
    6. Close the scope (unconditional ROLLBACK).
    7. Return the lease.
    8. Hand back a normalized ExecutionResult.

Operation-level faults come back as Failure values. Pool exhaustion and
faults while leasing or returning a connection propagate.
"""

from typing import Optional

import psycopg2

from db.connection import ConnectionPool
from db.transaction import TransactionScope
from models.errors import OperationError
from models.operation import Operation, TransactionMode
from models.statement import ExecutionResult
from services import normalizer
from services.statement_builder import StatementBuilder
from utils.logger import get_logger

logger = get_logger(__name__)


class Dispatcher:
    """
    Executes named operations against a connection pool.

    The pool is injected at construction; the dispatcher holds no other state
    and may be called from several threads at once.
    """

    def __init__(self, pool: ConnectionPool, builder: Optional[StatementBuilder] = None):
        self.pool = pool
        self.builder = builder or StatementBuilder()

    def dispatch(self, name: str, arguments: Optional[dict]) -> ExecutionResult:
        """
        Run one operation call.

        Args:
            name: Operation (tool) name.
            arguments: Raw argument map from the caller.

        Returns:
            Success with rows (or a single row for insert), or Failure.

        Raises:
            psycopg2.pool.PoolError: If no connection can be leased.
        """
        try:
            operation = Operation.from_name(name)
        except OperationError as e:
            logger.warning(f"Rejected call: {e.message}")
            return normalizer.failure(e)

        conn = self.pool.acquire()
        try:
            result = self._run(conn, operation, arguments)
        finally:
            self.pool.release(conn)

        if result.is_error:
            logger.warning(f"{operation.value} failed ({result.kind.value}): {result.message}")
        else:
            logger.info(f"{operation.value} completed")
        return result

    def _run(self, conn, operation: Operation, arguments: Optional[dict]) -> ExecutionResult:
        read_only = operation.transaction_mode is TransactionMode.READ_ONLY
        try:
            with TransactionScope(conn, read_only=read_only) as scope:
                statement = self.builder.build(operation, arguments)
                rows = scope.execute(statement.sql, statement.driver_params())
        except OperationError as e:
            return normalizer.failure(e)
        except psycopg2.Error as e:
            return normalizer.failure(normalizer.wrap_driver_error(e))
        return normalizer.success(operation, rows)
