import psycopg2
import pytest
from psycopg2.pool import PoolError

from models.errors import ErrorKind
from models.statement import Failure, Success
from services.dispatcher import Dispatcher

INSERT_SQL = 'INSERT INTO "users" ("name", "age") VALUES (%s, %s) RETURNING *'
UPDATE_SQL = 'UPDATE "users" SET "age" = %s WHERE id = 1 RETURNING *'
DELETE_SQL = 'DELETE FROM "users" WHERE id = 1 RETURNING *'


@pytest.fixture
def dispatcher(pool):
    return Dispatcher(pool)


def test_insert_returns_created_row(dispatcher, pool, conn):
    conn.results[INSERT_SQL] = [{"id": 1, "name": "Alice", "age": 30}]

    result = dispatcher.dispatch("insert", {"table": "users", "values": {"name": "Alice", "age": 30}})

    assert result == Success({"id": 1, "name": "Alice", "age": 30})
    assert conn.executed == [(INSERT_SQL, ("Alice", 30)), ("ROLLBACK", None)]
    assert pool.released == [conn]


def test_insert_with_no_returned_row_yields_none(dispatcher, conn):
    result = dispatcher.dispatch("insert", {"table": "users", "values": {"name": "Alice", "age": 30}})

    assert result == Success(None)


def test_update_returns_all_rows(dispatcher, conn):
    conn.results[UPDATE_SQL] = [{"id": 1, "age": 31}]

    result = dispatcher.dispatch("update", {"table": "users", "values": {"age": 31}, "where": "id = 1"})

    assert result == Success([{"id": 1, "age": 31}])
    assert conn.executed[0] == (UPDATE_SQL, (31,))


def test_delete_sends_no_params(dispatcher, conn):
    conn.results[DELETE_SQL] = [{"id": 1}]

    result = dispatcher.dispatch("delete", {"table": "users", "where": "id = 1"})

    assert result == Success([{"id": 1}])
    assert conn.executed[0] == (DELETE_SQL, None)


def test_query_runs_inside_read_only_transaction(dispatcher, conn):
    conn.results["SELECT * FROM users"] = [{"id": 1}, {"id": 2}]

    result = dispatcher.dispatch("query", {"sql": "SELECT * FROM users"})

    assert result == Success([{"id": 1}, {"id": 2}])
    assert conn.statements == ["BEGIN TRANSACTION READ ONLY", "SELECT * FROM users", "ROLLBACK"]


def test_write_inside_query_surfaces_as_error(dispatcher, pool, conn):
    conn.failures["DELETE FROM users"] = psycopg2.errors.ReadOnlySqlTransaction(
        "cannot execute DELETE in a read-only transaction"
    )

    result = dispatcher.dispatch("query", {"sql": "DELETE FROM users"})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.READ_ONLY_VIOLATION
    assert "read-only transaction" in result.message
    assert conn.statements[-1] == "ROLLBACK"
    assert pool.released == [conn]


def test_write_operations_do_not_begin_a_transaction(dispatcher, conn):
    dispatcher.dispatch("delete", {"table": "users", "where": "id = 1"})

    assert not any(sql.startswith("BEGIN") for sql in conn.statements)


def test_unknown_operation_touches_nothing(dispatcher, pool, conn):
    result = dispatcher.dispatch("unknown_op", {})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.UNKNOWN_OPERATION
    assert "unknown_op" in result.message
    assert pool.acquired == 0
    assert conn.executed == []


def test_validation_failure_releases_lease_and_sends_no_statement(dispatcher, pool, conn):
    result = dispatcher.dispatch("insert", {"table": "users"})

    assert isinstance(result, Failure)
    assert result.kind is ErrorKind.VALIDATION_ERROR
    assert conn.statements == ["ROLLBACK"]
    assert pool.acquired == 1
    assert pool.released == [conn]


@pytest.mark.parametrize(
    "error, kind",
    [
        (psycopg2.errors.UniqueViolation("duplicate key value"), ErrorKind.CONSTRAINT_VIOLATION),
        (psycopg2.errors.SyntaxError("syntax error at or near \"FORM\""), ErrorKind.SYNTAX_ERROR),
        (psycopg2.errors.UndefinedTable("relation \"nope\" does not exist"), ErrorKind.SYNTAX_ERROR),
        (psycopg2.errors.InvalidTextRepresentation("invalid input syntax"), ErrorKind.DATA_ERROR),
        (psycopg2.OperationalError("server closed the connection unexpectedly"), ErrorKind.CONNECTION_LOST),
        (psycopg2.InterfaceError("connection already closed"), ErrorKind.CONNECTION_LOST),
        (psycopg2.errors.DeadlockDetected("deadlock detected"), ErrorKind.DATABASE_ERROR),
        (psycopg2.errors.FeatureNotSupported("not supported"), ErrorKind.DATABASE_ERROR),
    ],
)
def test_driver_errors_are_normalized(dispatcher, pool, conn, error, kind):
    conn.failures["UPDATE"] = error

    result = dispatcher.dispatch("update", {"table": "users", "values": {"age": 31}, "where": "id = 1"})

    assert isinstance(result, Failure)
    assert result.kind is kind
    assert result.message == str(error)
    assert pool.released == [conn]


def test_trailing_rollback_failure_is_not_observable(dispatcher, conn):
    conn.results[DELETE_SQL] = [{"id": 1}]
    conn.failures["ROLLBACK"] = psycopg2.errors.NoActiveSqlTransaction("no transaction in progress")

    result = dispatcher.dispatch("delete", {"table": "users", "where": "id = 1"})

    assert result == Success([{"id": 1}])


def test_acquire_failure_propagates(dispatcher, pool):
    pool.acquire_error = PoolError("connection pool is closed")

    with pytest.raises(PoolError):
        dispatcher.dispatch("query", {"sql": "SELECT 1"})

    assert pool.released == []


def test_each_call_leases_and_releases_once(dispatcher, pool, conn):
    dispatcher.dispatch("query", {"sql": "SELECT 1"})
    dispatcher.dispatch("insert", {"table": "t", "values": {}})
    dispatcher.dispatch("delete", {"table": "t", "where": "id = 1"})

    assert pool.acquired == 3
    assert len(pool.released) == 3
