#!/usr/bin/env python3
"""
sqlrunner – run SQL script files against a configured database.

• Ad‑hoc SQLite:   sqlrunner run -d app.sqlite3 db/schema.sql db/seed.sql
• Configured env:  sqlrunner -c sqlrunner.config.yml run -e prod db/patch.sql
• Project layout:  sqlrunner migrate   → db/schema_migration.sql
                   sqlrunner seed      → db/insert.sql

Statements run one by one without a surrounding transaction: when one fails
the tool stops, and everything before it stays applied.
"""
from __future__ import annotations

import contextlib
import pathlib
import sys
import typing as t

import click

from sqlrunner import __version__
from sqlrunner.config import ConfigError, Environment, from_database, load
from sqlrunner.driver import DRIVER_ERRORS, connection, cursor
from sqlrunner.runner import (
    INSERT_FILE,
    SCHEMA_MIGRATION_FILE,
    SQLRunner,
    literal_aware_statements,
    sql_files,
    statements,
)


Job = t.Tuple[pathlib.Path, t.Callable[[SQLRunner], None]]


def _resolve_env(ctx: click.Context, env_name: str | None, database: str | None) -> Environment:
    if database:
        return from_database(database)
    try:
        return load(ctx.obj["config_path"], env_name)
    except ConfigError as exc:
        click.echo(f"Config error: {exc}", err=True)
        sys.exit(1)


def _expand_scripts(scripts: t.Iterable[str]) -> list[pathlib.Path]:
    files: list[pathlib.Path] = []
    for raw in scripts:
        path = pathlib.Path(raw)
        if path.is_dir():
            files.extend(sql_files(path))
        elif path.is_file():
            files.append(path)
        else:
            click.echo(f"Script {path} not found", err=True)
            sys.exit(1)
    return files


def _read_failed(path: pathlib.Path, exc: UnicodeDecodeError) -> t.NoReturn:
    click.echo(f"Cannot read {path}: not valid UTF-8 ({exc.reason})", err=True)
    sys.exit(1)


def _apply(
    ctx: click.Context,
    jobs: list[Job],
    *,
    env_name: str | None,
    database: str | None,
    dry_run: bool,
    literal_aware: bool,
) -> None:
    if dry_run:
        split = literal_aware_statements if literal_aware else statements
        for path, _ in jobs:
            click.echo(f"(DRY) Applying {path}")
            try:
                script = path.read_text(encoding="utf-8")
            except UnicodeDecodeError as exc:
                _read_failed(path, exc)
            for stmt in split(script):
                click.echo(stmt.strip())
        click.echo("\n-- DRY‑RUN complete (no changes executed)")
        return

    env = _resolve_env(ctx, env_name, database)
    with contextlib.ExitStack() as stack:
        try:
            conn = stack.enter_context(connection(env))
            cur = stack.enter_context(cursor(conn))
        except DRIVER_ERRORS as exc:
            click.echo(f"Connection error: {exc}", err=True)
            sys.exit(1)

        runner = SQLRunner(cur, literal_aware=literal_aware)
        for path, action in jobs:
            click.echo(f"Applying {path}")
            try:
                action(runner)
            except DRIVER_ERRORS as exc:
                click.echo(f"SQL error in {path}: {exc}", err=True)
                sys.exit(1)
            except UnicodeDecodeError as exc:
                _read_failed(path, exc)
    click.echo(f"✅  Applied {len(jobs)} script(s) to {env.name!r}.")


def _env_opts(fn):
    opts = [
        click.option("-e", "--env", "env_name", help="environment name from the config file"),
        click.option(
            "-d", "--database", type=click.Path(dir_okay=False),
            help="SQLite database file (bypasses the config file)",
        ),
        click.option("--dry-run", is_flag=True, help="print statements, execute nothing"),
        click.option("--literal-aware", is_flag=True, help="split with sqlparse"),
    ]
    for opt in reversed(opts):
        fn = opt(fn)
    return fn


@click.group()
@click.option(
    "-c", "--config", "config_path", type=click.Path(), help="env config YAML/TOML"
)
@click.pass_context
def main(ctx, config_path):
    ctx.obj = {"config_path": pathlib.Path(config_path) if config_path else None}


@main.command()
def version():
    click.echo(__version__)


@main.command()
@click.argument("scripts", nargs=-1, required=True)
@_env_opts
@click.pass_context
def run(ctx, scripts, **opts):
    """Execute SCRIPTS (files or directories of *.sql) in order."""
    jobs = [(f, lambda r, f=f: r.execute_file(f)) for f in _expand_scripts(scripts)]
    _apply(ctx, jobs, **opts)


def _project_file(project_dir: str, rel: pathlib.Path) -> pathlib.Path:
    path = pathlib.Path(project_dir) / rel
    if not path.is_file():
        click.echo(f"{path} not found", err=True)
        sys.exit(1)
    return path


@main.command()
@click.option("-p", "--project-dir", default=".", type=click.Path(file_okay=False))
@_env_opts
@click.pass_context
def migrate(ctx, project_dir, **opts):
    """Execute db/schema_migration.sql."""
    path = _project_file(project_dir, SCHEMA_MIGRATION_FILE)
    _apply(ctx, [(path, lambda r: r.execute_schema_migration_sql(project_dir))], **opts)


@main.command()
@click.option("-p", "--project-dir", default=".", type=click.Path(file_okay=False))
@_env_opts
@click.pass_context
def seed(ctx, project_dir, **opts):
    """Execute db/insert.sql."""
    path = _project_file(project_dir, INSERT_FILE)
    _apply(ctx, [(path, lambda r: r.execute_insert_sql(project_dir))], **opts)


if __name__ == "__main__":
    main()
