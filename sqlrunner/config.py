from __future__ import annotations
import os
import pathlib
import typing as t
import yaml

try:
    import tomllib as _toml
except ModuleNotFoundError:
    import tomli as _toml

_DEFAULT_PATH = pathlib.Path("sqlrunner.config.yml")

DRIVERS = ("sqlite", "mysql")


class ConfigError(RuntimeError):
    """Raised for any user‑visible configuration problem."""


def _expand(raw: t.Any) -> str:
    # Allow `${ENV_VAR}` syntax for secrets
    value = str(raw)
    if value.startswith("${") and value.endswith("}"):
        return os.getenv(value[2:-1], "")
    return value


class Environment:
    """
    A thin value‑object holding the attributes required to open a connection.
    Nothing here talks to the database.
    """

    def __init__(self, name: str, d: dict[str, t.Any]) -> None:
        self.name: str = name
        self.driver: str = str(d.get("driver", "sqlite")).lower()
        if self.driver not in DRIVERS:
            raise ConfigError(
                f"Environment {name!r}: unknown driver {self.driver!r} "
                f"(expected one of {', '.join(DRIVERS)})"
            )

        try:
            self.database: str = str(d["database"])
        except KeyError as exc:
            raise ConfigError(f"Environment {name!r} has no `database`") from exc

        self.host: str | None = None
        self.port: int = 3306
        self.user: str | None = None
        self.password: str | None = None

        if self.driver == "mysql":
            try:
                self.host = d["host"]
                self.user = d["user"]
            except KeyError as exc:
                raise ConfigError(f"Environment {name!r} is missing {exc.args[0]!r}") from exc
            try:
                self.port = int(d.get("port", 3306))
            except (TypeError, ValueError) as exc:
                raise ConfigError(
                    f"Environment {name!r}: invalid port {d.get('port')!r}"
                ) from exc
            self.password = _expand(d.get("password", ""))

    def dsn(self) -> dict[str, t.Any]:
        """Return kwargs that the selected driver understands."""
        if self.driver == "sqlite":
            return {"database": self.database}
        return {
            "host": self.host,
            "port": self.port,
            "user": self.user,
            "password": self.password,
            "database": self.database,
        }


def from_database(path: pathlib.Path | str) -> Environment:
    """An ad‑hoc SQLite environment for a database file given on the command line."""
    return Environment("cli", {"driver": "sqlite", "database": str(path)})


def _read(cfg_file: pathlib.Path) -> dict[str, t.Any]:
    if cfg_file.suffix.lower() == ".toml":
        with cfg_file.open("rb") as fh:
            return _toml.load(fh)
    with cfg_file.open(encoding="utf-8") as fh:
        return yaml.safe_load(fh) or {}


def load(path: pathlib.Path | str | None = None, env: str | None = None) -> Environment:
    """
    Parse *path* (or the default YAML) and return an :class:`Environment`.
    """
    cfg_file = pathlib.Path(path) if path else _DEFAULT_PATH
    if not cfg_file.exists():
        raise ConfigError(f"Config file {cfg_file} not found.  Pass --database or --config.")

    raw = _read(cfg_file)

    env_name = env or raw.get("default_env")
    if not env_name:
        raise ConfigError("No environment specified and no default_env in config")

    try:
        return Environment(env_name, raw["environments"][env_name])
    except KeyError as exc:
        raise ConfigError(f"Environment {env_name!r} not found in config") from exc
