"""
Run SQL scripts against an already open connection, one statement at a time.

The runner never opens, commits or closes anything: whatever the handle's
transaction mode is decides when the effects become durable.  A failing
statement stops the script, so everything before it stays applied.
"""
from __future__ import annotations

import pathlib
import re
import typing as t

import sqlparse

_STMT_RE = re.compile(r"[^;]*;")

SCHEMA_MIGRATION_FILE = pathlib.Path("db") / "schema_migration.sql"
INSERT_FILE = pathlib.Path("db") / "insert.sql"


class Executes(t.Protocol):
    def execute(self, operation: str, *args: t.Any, **kwargs: t.Any) -> t.Any: ...


def statements(script: str) -> list[str]:
    """
    Split *script* into ``;``-terminated statements, left to right.

    Whitespace around a statement is kept and a trailing fragment without a
    terminating ``;`` is dropped.  Semicolons inside literals are not special.
    """
    return _STMT_RE.findall(script)


def literal_aware_statements(script: str) -> list[str]:
    """
    Split *script* with :mod:`sqlparse`, which knows about quoted literals and
    comments.  Statements come back stripped; blank ones are discarded.
    """
    return [s.strip() for s in sqlparse.split(script) if s.strip()]


def sql_files(directory: pathlib.Path | str) -> list[pathlib.Path]:
    """Return the ``*.sql`` files directly inside *directory*, sorted by name."""
    directory = pathlib.Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file() and p.suffix.lower() == ".sql")


class SQLRunner:
    """
    Executes SQL text through *connection*, which may be any object with an
    ``execute(statement)`` method (a DB-API cursor, or a ``sqlite3`` connection).
    """

    def __init__(self, connection: Executes, *, literal_aware: bool = False) -> None:
        self.connection: Executes = connection
        self.literal_aware: bool = literal_aware

    def split(self, script: str) -> list[str]:
        if self.literal_aware:
            return literal_aware_statements(script)
        return statements(script)

    def execute(self, script: str) -> None:
        if not script:
            return
        for stmt in self.split(script):
            self.connection.execute(stmt)

    def execute_file(self, path: pathlib.Path | str) -> None:
        self.execute(pathlib.Path(path).read_text(encoding="utf-8"))

    def execute_directory(self, path: pathlib.Path | str) -> list[pathlib.Path]:
        """
        Execute every ``*.sql`` file directly inside *path*, ordered by name.

        A directory that does not exist yet counts as "no scripts".
        """
        files = sql_files(path)
        for f in files:
            self.execute_file(f)
        return files

    def execute_schema_migration_sql(self, base_dir: pathlib.Path | str = ".") -> None:
        self.execute_file(pathlib.Path(base_dir) / SCHEMA_MIGRATION_FILE)

    def execute_insert_sql(self, base_dir: pathlib.Path | str = ".") -> None:
        self.execute_file(pathlib.Path(base_dir) / INSERT_FILE)
