"""Tests for connection helpers."""

import sqlite3

import pytest

from sqlrunner import driver
from sqlrunner.config import Environment, from_database
from sqlrunner.runner import SQLRunner


def test_sqlite_connection_is_autocommit(tmp_path):
    env = from_database(tmp_path / "app.sqlite3")

    with pytest.raises(sqlite3.OperationalError):
        with driver.connection(env) as conn, driver.cursor(conn) as cur:
            SQLRunner(cur).execute(
                "CREATE TABLE t (x INTEGER); INSERT INTO t VALUES (1); SELECT * FROM missing;"
            )

    other = sqlite3.connect(tmp_path / "app.sqlite3")
    try:
        assert other.execute("SELECT x FROM t").fetchall() == [(1,)]
    finally:
        other.close()


def test_connection_is_closed_on_exit(tmp_path):
    with driver.connection(from_database(tmp_path / "a.sqlite3")) as conn:
        pass
    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


class _FakeMySQL:
    def __init__(self):
        self.closed = False

    def close(self):
        self.closed = True


def test_mysql_connection_uses_autocommit(monkeypatch):
    calls = {}
    fake = _FakeMySQL()

    def fake_connect(**kwargs):
        calls.update(kwargs)
        return fake

    monkeypatch.setattr(driver.mysql.connector, "connect", fake_connect)
    env = Environment(
        "prod", {"driver": "mysql", "host": "h", "database": "d", "user": "u", "password": "p"}
    )

    with driver.connection(env) as conn:
        assert conn is fake

    assert calls["autocommit"] is True
    assert calls["host"] == "h"
    assert fake.closed


def test_driver_errors_cover_sqlite():
    assert issubclass(sqlite3.IntegrityError, driver.DRIVER_ERRORS)
