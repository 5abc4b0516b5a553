from __future__ import annotations

import mysql.connector
import pytest
from mysql.connector import errorcode

from src.mice_attendance.mice_attendance.core.exceptions import IntegrityViolation, PersistenceFailure
from src.mice_attendance.mice_attendance.database.bootstrap import _iter_sql_statements, _strip_create_db_and_use
from src.mice_attendance.mice_attendance.database.mysql_base import db_cursor, normalize_mysql_time


class FakeCursor:
    def __init__(self, error=None):
        self.error = error
        self.closed = False

    def execute(self, sql, params=None):
        if self.error:
            raise self.error

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, error=None):
        self.cursor_obj = FakeCursor(error)
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self.cursor_obj

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeFactory:
    def __init__(self, conn=None, connect_error=None):
        self.conn = conn
        self.connect_error = connect_error

    def connect(self):
        if self.connect_error:
            raise self.connect_error
        return self.conn


def test_commits_on_success():
    conn = FakeConnection()
    with db_cursor(FakeFactory(conn)) as (_, cur):
        cur.execute("SELECT 1")

    assert conn.committed and not conn.rolled_back and conn.closed


def test_driver_error_rolls_back_and_translates():
    conn = FakeConnection(mysql.connector.OperationalError(msg="Lost connection", errno=2013))

    with pytest.raises(PersistenceFailure) as info:
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")

    assert not isinstance(info.value, IntegrityViolation)
    assert conn.rolled_back and not conn.committed and conn.closed


def test_duplicate_key_is_integrity_violation():
    conn = FakeConnection(mysql.connector.IntegrityError(msg="Duplicate entry", errno=errorcode.ER_DUP_ENTRY))

    with pytest.raises(IntegrityViolation):
        with db_cursor(FakeFactory(conn)) as (_, cur):
            cur.execute("INSERT ...")


def test_connect_failure_is_persistence_failure():
    factory = FakeFactory(connect_error=mysql.connector.InterfaceError(msg="Can't connect", errno=2003))

    with pytest.raises(PersistenceFailure):
        with db_cursor(factory):
            pass


def test_non_driver_errors_still_roll_back():
    conn = FakeConnection()

    with pytest.raises(KeyError):
        with db_cursor(FakeFactory(conn)):
            raise KeyError("boom")

    assert conn.rolled_back and conn.closed


def test_sql_splitter_handles_quotes_and_comments():
    sql = """
    CREATE DATABASE IF NOT EXISTS x;
    USE x;
    -- a comment; with a semicolon
    INSERT INTO t VALUES ('a;b');
    SELECT 1
    """

    stmts = list(_iter_sql_statements(_strip_create_db_and_use(sql)))

    assert stmts == ["INSERT INTO t VALUES ('a;b')", "SELECT 1"]


def test_normalize_mysql_time():
    from datetime import time, timedelta

    assert normalize_mysql_time(timedelta(hours=8, minutes=30)) == time(8, 30)
    assert normalize_mysql_time("17:05") == time(17, 5)
    assert normalize_mysql_time(None) is None
