"""Shared fixtures for sqlrunner tests."""

import sqlite3
from pathlib import Path

import pytest


class RecordingConnection:
    """Stands in for a driver handle and remembers every submitted statement."""

    def __init__(self, fail_on: str | None = None):
        self.executed: list[str] = []
        self.fail_on = fail_on

    def execute(self, statement: str):
        if self.fail_on is not None and self.fail_on in statement:
            raise sqlite3.OperationalError(f"boom: {statement.strip()}")
        self.executed.append(statement)


@pytest.fixture()
def recorder() -> RecordingConnection:
    return RecordingConnection()


@pytest.fixture()
def memory_db():
    """An autocommit in-memory SQLite connection."""
    conn = sqlite3.connect(":memory:", isolation_level=None)
    yield conn
    conn.close()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """A project with db/schema_migration.sql and db/insert.sql."""
    db = tmp_path / "db"
    db.mkdir()
    (db / "schema_migration.sql").write_text(
        "CREATE TABLE cats (\n"
        "  id INTEGER PRIMARY KEY,\n"
        "  name TEXT,\n"
        "  breed TEXT,\n"
        "  age INTEGER\n"
        ");\n",
        encoding="utf-8",
    )
    (db / "insert.sql").write_text(
        "INSERT INTO cats (name, breed, age) VALUES ('Maru', 'scottish fold', 3);\n"
        "INSERT INTO cats (name, breed, age) VALUES ('Hana', 'tortoiseshell', 1);\n",
        encoding="utf-8",
    )
    return tmp_path
