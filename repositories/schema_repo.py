"""
repositories/schema_repo.py
---------------------------
Data access layer for schema introspection.
Backs the resource listing: table names and per-table column types.
"""

from psycopg2.extras import RealDictCursor

from db.connection import ConnectionPool
from utils.logger import get_logger

logger = get_logger(__name__)


class SchemaRepository:
    """Read-only queries against information_schema."""

    def __init__(self, pool: ConnectionPool, schema: str = "public"):
        self.pool = pool
        self.schema = schema

    def list_tables(self) -> list[str]:
        """
        Fetch the names of all tables in the configured schema.

        Returns:
            Table names in the order the catalog returns them.
        """
        sql = "SELECT table_name FROM information_schema.tables WHERE table_schema = %s"
        conn = self.pool.acquire()
        try:
            with conn.cursor() as cur:
                cur.execute(sql, (self.schema,))
                return [row[0] for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Failed to list tables in schema '{self.schema}': {e}")
            raise
        finally:
            self.pool.release(conn)

    def get_columns(self, table_name: str) -> list[dict]:
        """
        Fetch column names and data types for a table.

        Args:
            table_name: Table to describe.

        Returns:
            List of dicts: [{'column_name': str, 'data_type': str}, ...]
        """
        sql = "SELECT column_name, data_type FROM information_schema.columns WHERE table_name = %s"
        conn = self.pool.acquire()
        try:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(sql, (table_name,))
                return [dict(row) for row in cur.fetchall()]
        except Exception as e:
            logger.error(f"Failed to read columns of '{table_name}': {e}")
            raise
        finally:
            self.pool.release(conn)
