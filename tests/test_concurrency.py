import threading
import time

import psycopg2

from db.connection import ConnectionPool
from models.statement import Success
from services.dispatcher import Dispatcher


class SlowCursor:
    def __init__(self, conn):
        self.conn = conn
        self.description = None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return False

    def execute(self, sql, params=None):
        if sql == "SELECT 1":
            time.sleep(0.1)

    def fetchall(self):
        return []


class SlowConnection:
    """Connection stand-in whose statements take long enough for calls to overlap."""

    lock = threading.Lock()
    open_now = 0
    peak = 0

    def __init__(self):
        self.autocommit = False
        self.closed = 0
        with SlowConnection.lock:
            SlowConnection.open_now += 1
            SlowConnection.peak = max(SlowConnection.peak, SlowConnection.open_now)

    def cursor(self, cursor_factory=None):
        return SlowCursor(self)

    def close(self):
        with SlowConnection.lock:
            SlowConnection.open_now -= 1
        self.closed = 1


def test_calls_beyond_pool_size_wait_instead_of_failing(monkeypatch):
    SlowConnection.open_now = SlowConnection.peak = 0
    monkeypatch.setattr(psycopg2, "connect", lambda *args, **kwargs: SlowConnection())
    pool = ConnectionPool("dbname=shop", 0, 2)
    dispatcher = Dispatcher(pool)
    outcomes = []

    def call():
        try:
            outcomes.append(dispatcher.dispatch("query", {"sql": "SELECT 1"}))
        except Exception as e:
            outcomes.append(e)

    threads = [threading.Thread(target=call) for _ in range(3)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=5)

    assert outcomes == [Success([]), Success([]), Success([])]
    assert SlowConnection.peak <= 2
    pool.close()
