"""Layered configuration: default file, per-environment file, then EA_ environment variables."""

import json
import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, fields, is_dataclass
from enum import StrEnum
from pathlib import Path

from hazwatch.common import get_current_working_dir

_U16 = (0, 65535)
_I32 = (-(2**31), 2**31 - 1)


class Env(StrEnum):
    """The environment the program runs in."""

    DEVELOPMENT = "Development"
    PRODUCTION = "Production"

    @classmethod
    def parse(cls, value):
        """Lenient conversion: anything but 'Production' means development."""
        return cls.PRODUCTION if value == "Production" else cls.DEVELOPMENT


@dataclass(frozen=True)
class Location:
    longitude: float
    latitude: float
    radius: int = field(metadata={"range": _I32})
    file: str


@dataclass(frozen=True)
class Dbpg:
    dburl: str
    dbport: int = field(metadata={"range": _U16})
    dbname: str
    dbuser: str
    dbpassword: str


@dataclass(frozen=True)
class Db:
    dburl: str
    dbname: str
    dborg: str
    dbapi: str


@dataclass(frozen=True)
class Color:
    green: str
    yellow: str
    orange: str
    red: str


@dataclass(frozen=True)
class Nasa:
    mapkey: str
    coordbox: str


@dataclass(frozen=True)
class Alertzy:
    account: str
    url: str


def _merge(target, source):
    for key, value in source.items():
        key = str(key).lower()
        if isinstance(value, Mapping):
            existing = target.get(key)
            if not isinstance(existing, dict):
                existing = target[key] = {}
            _merge(existing, value)
        else:
            target[key] = value
    return target


def _locate(path):
    if path.is_file():
        return path
    for ext in ("toml", "json"):
        candidate = path.with_suffix("." + ext)
        if candidate.is_file():
            return candidate
    raise FileNotFoundError(f'configuration file "{path}" not found')


def _read(path):
    found = _locate(path)
    if found.suffix == ".json":
        with found.open(encoding="utf-8") as fh:
            return json.load(fh)
    with found.open("rb") as fh:
        return tomllib.load(fh)


def _env_overrides(environ):
    tree = {}
    for name, value in environ.items():
        key = name.lower()
        if not key.startswith("ea_"):
            continue
        parts = key[3:].split("__")
        if not all(parts):
            continue
        node = tree
        for part in parts[:-1]:
            node = node.setdefault(part, {})
            if not isinstance(node, dict):
                break
        else:
            node[parts[-1]] = value
    return tree


def load_config_tree(base_dir=None, environ=None):
    """Merge the configuration sources into one nested dictionary."""
    environ = os.environ if environ is None else environ
    base = Path(get_current_working_dir() if base_dir is None else base_dir)
    env = environ.get("RUN_ENV", "Development")
    tree = {"env": env}
    _merge(tree, _read(base / "config" / "Default.toml"))
    _merge(tree, _read(base / "config" / env))
    _merge(tree, _env_overrides(environ))
    return tree


def _coerce(value, tp, where, bounds=None):
    if is_dataclass(tp):
        return _build(tp, value, where)
    if tp is Env:
        try:
            return Env(value)
        except ValueError:
            raise ValueError(f"{where}: unknown environment {value!r}") from None
    if tp is int:
        if isinstance(value, bool):
            raise ValueError(f"{where}: expected an integer")
        try:
            number = int(value.strip()) if isinstance(value, str) else value
        except ValueError:
            raise ValueError(f"{where}: invalid integer {value!r}") from None
        if not isinstance(number, int):
            raise ValueError(f"{where}: expected an integer")
        if bounds and not bounds[0] <= number <= bounds[1]:
            raise ValueError(f"{where}: {number} out of range")
        return number
    if tp is float:
        if isinstance(value, bool):
            raise ValueError(f"{where}: expected a number")
        try:
            return float(value)
        except (TypeError, ValueError):
            raise ValueError(f"{where}: invalid number {value!r}") from None
    if isinstance(value, (Mapping, list)):
        raise ValueError(f"{where}: expected a string")
    return value if isinstance(value, str) else str(value)


def _build(cls, data, where):
    if not isinstance(data, Mapping):
        raise ValueError(f"{where or 'configuration'}: expected a table")
    kwargs = {}
    for f in fields(cls):
        path = f"{where}.{f.name}" if where else f.name
        if f.name not in data:
            raise ValueError(f"missing configuration field {path}")
        kwargs[f.name] = _coerce(data[f.name], f.type, path, f.metadata.get("range"))
    return cls(**kwargs)


@dataclass(frozen=True)
class HazeventsSettings:
    """Settings of the event collector."""

    env: Env
    dbpg: Dbpg
    location: Location
    alertzy: Alertzy

    @classmethod
    def load(cls, base_dir=None, environ=None):
        """Load and validate the settings from the layered sources."""
        return _build(cls, load_config_tree(base_dir, environ), "")


@dataclass(frozen=True)
class WobbleSettings:
    """Settings of the earthquake and fire watcher."""

    env: Env
    db: Db
    location: Location
    color: Color
    nasa: Nasa
    alertzy: Alertzy

    @classmethod
    def load(cls, base_dir=None, environ=None):
        """Load and validate the settings from the layered sources."""
        return _build(cls, load_config_tree(base_dir, environ), "")