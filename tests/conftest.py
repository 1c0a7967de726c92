import psycopg2
import pytest


class FakeCursor:
    """Records statements on its connection and serves canned rows."""

    def __init__(self, conn):
        self.conn = conn
        self.description = None
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql, params=None):
        self.conn.executed.append((sql, params))
        for prefix, error in self.conn.failures.items():
            if sql.startswith(prefix):
                raise error
        rows = self.conn.results.get(sql)
        if rows is None:
            self.description = None
            self._rows = []
        else:
            self.description = [("col",)]
            self._rows = list(rows)

    def fetchall(self):
        return self._rows


class FakeConnection:
    def __init__(self):
        self.autocommit = False
        self.closed = 0
        self.executed = []
        self.failures = {}
        self.results = {}
        self.cursor_factories = []

    def cursor(self, cursor_factory=None):
        if self.closed:
            raise psycopg2.InterfaceError("connection already closed")
        self.cursor_factories.append(cursor_factory)
        return FakeCursor(self)

    @property
    def statements(self):
        return [sql for sql, _ in self.executed]


class FakePool:
    """Same surface as db.connection.ConnectionPool, backed by one fake connection."""

    def __init__(self, conn=None, acquire_error=None):
        self.conn = conn or FakeConnection()
        self.acquire_error = acquire_error
        self.acquired = 0
        self.released = []

    def acquire(self):
        if self.acquire_error is not None:
            raise self.acquire_error
        self.acquired += 1
        self.conn.autocommit = True
        return self.conn

    def release(self, conn):
        self.released.append(conn)

    def close(self):
        pass


@pytest.fixture
def conn():
    return FakeConnection()


@pytest.fixture
def pool(conn):
    return FakePool(conn)
