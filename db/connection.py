"""
db/connection.py
----------------
Manages the PostgreSQL connection pool.
Uses psycopg2's ThreadedConnectionPool so that concurrent tool calls,
each running in its own worker thread, can lease connections safely.
"""

import threading

import psycopg2
from psycopg2 import pool

from utils.logger import get_logger

logger = get_logger(__name__)


class ConnectionPool:
    """
    Hands out exclusive connections and takes them back.

    When every connection is leased, `acquire` waits for a free slot
    instead of failing. Every connection is leased in autocommit mode:
    write statements commit on their own, and read-only work opens its
    transaction explicitly (see db/transaction.py).
    """

    def __init__(self, dsn: str, min_conn: int = 1, max_conn: int = 10):
        """
        Initialize the database connection pool.

        Args:
            dsn: PostgreSQL connection string.
            min_conn: Minimum number of connections to keep open.
            max_conn: Maximum number of connections allowed.

        Raises:
            psycopg2.OperationalError: If the database is unreachable.
        """
        # One slot per connection; getconn() itself never has to refuse.
        self._slots = threading.BoundedSemaphore(max_conn)
        try:
            self._pool = pool.ThreadedConnectionPool(min_conn, max_conn, dsn)
            logger.info(
                f"Database connection pool initialized (min={min_conn}, max={max_conn})."
            )
        except psycopg2.OperationalError as e:
            logger.error(f"Failed to initialize database pool: {e}")
            raise

    def acquire(self):
        """
        Lease a connection from the pool, waiting for a free slot if needed.

        Returns:
            A psycopg2 connection in autocommit mode.

        Raises:
            psycopg2.pool.PoolError: If the pool is closed.
            psycopg2.OperationalError: If a new connection cannot be opened.
        """
        self._slots.acquire()
        try:
            conn = self._pool.getconn()
            conn.autocommit = True
        except BaseException:
            self._slots.release()
            raise
        return conn

    def release(self, conn) -> None:
        """
        Return a leased connection to the pool and free its slot.
        Connections that were closed underneath us are discarded, not reused.

        Args:
            conn: The psycopg2 connection to release.
        """
        try:
            self._pool.putconn(conn, close=bool(conn.closed))
        finally:
            self._slots.release()

    def close(self) -> None:
        """Close all connections in the pool."""
        if not self._pool.closed:
            self._pool.closeall()
            logger.info("Database connection pool closed.")
