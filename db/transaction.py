"""
db/transaction.py
-----------------
Per-call transaction scope on a leased connection.

A scope moves through three states: IDLE -> ACTIVE -> CLOSED.
Entering it opens a READ ONLY transaction when asked to; leaving it
always issues ROLLBACK, whatever happened inside. On an autocommit
connection that rollback is a no-op after a write, and it guarantees a
read-only transaction never survives onto the next lease.
"""

from enum import Enum
from typing import Optional, Sequence

import psycopg2
from psycopg2.extras import RealDictCursor

from utils.logger import get_logger

logger = get_logger(__name__)


class ScopeState(str, Enum):
    IDLE = "idle"
    ACTIVE = "active"
    CLOSED = "closed"


class TransactionScope:
    """
    Context manager wrapping one statement execution on a leased connection.

    Usage:
        with TransactionScope(conn, read_only=True) as scope:
            rows = scope.execute("SELECT 1")
    """

    BEGIN_READ_ONLY = "BEGIN TRANSACTION READ ONLY"
    ROLLBACK = "ROLLBACK"

    def __init__(self, conn, read_only: bool = False):
        self.conn = conn
        self.read_only = read_only
        self.state = ScopeState.IDLE

    def __enter__(self) -> "TransactionScope":
        if self.state is not ScopeState.IDLE:
            raise RuntimeError(f"Transaction scope cannot be entered from state {self.state.value}")
        self.state = ScopeState.ACTIVE
        if self.read_only:
            try:
                with self.conn.cursor() as cur:
                    cur.execute(self.BEGIN_READ_ONLY)
            except BaseException:
                self.__exit__(None, None, None)
                raise
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._rollback()
        self.state = ScopeState.CLOSED
        return False

    def execute(self, sql: str, params: Optional[Sequence] = None) -> list[dict]:
        """
        Run one statement and collect its rows.

        Args:
            sql: Statement text.
            params: Positional parameters, or None to send the text untouched.

        Returns:
            List of row dicts (empty when the statement returns no rows).
        """
        if self.state is not ScopeState.ACTIVE:
            raise RuntimeError("Statements can only run inside an active transaction scope")
        with self.conn.cursor(cursor_factory=RealDictCursor) as cur:
            cur.execute(sql, params)
            if cur.description is None:
                return []
            return [dict(row) for row in cur.fetchall()]

    def _rollback(self) -> None:
        """Issue ROLLBACK; a failure here is logged and never propagated."""
        try:
            with self.conn.cursor() as cur:
                cur.execute(self.ROLLBACK)
        except psycopg2.Error as e:
            logger.warning(f"Could not roll back transaction: {e}")
