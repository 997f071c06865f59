from __future__ import annotations
import sqlite3
from contextlib import closing, contextmanager

import mysql.connector

from sqlrunner.config import Environment

DRIVER_ERRORS: tuple[type[Exception], ...] = (sqlite3.Error, mysql.connector.Error)


@contextmanager
def connection(env: Environment):
    """
    Context‑manager that yields an **autocommit** connection to *env*.

    Every statement is durable as soon as it has executed, so a script that
    fails half way leaves its earlier statements applied.  The connection is
    always closed on exit.
    """
    if env.driver == "sqlite":
        conn = sqlite3.connect(env.database, isolation_level=None)
    else:
        conn = mysql.connector.connect(**env.dsn(), autocommit=True)

    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def cursor(conn):
    # buffered so a SELECT inside a script does not block the next statement
    raw = conn.cursor() if isinstance(conn, sqlite3.Connection) else conn.cursor(buffered=True)
    with closing(raw) as cur:
        yield cur
