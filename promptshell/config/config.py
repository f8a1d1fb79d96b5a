#!/usr/bin/env python3
# promptshell/config/config.py
from __future__ import annotations

"""
Settings for the bundled REPL host.

Sources, lowest precedence first:
  1) DEFAULTS below
  2) Files in the working directory, in this order:
     .env, config.json, config.toml, promptshell.toml
  3) Environment variables prefixed with PROMPTSHELL_

Keys are UPPER_SNAKE; nested JSON/TOML tables are joined with "_"
({"log": {"level": "debug"}} is LOG_LEVEL) and a PROMPTSHELL_ prefix is
optional inside files. Values are coerced and validated by `build_config`,
which raises ConfigError on anything it cannot use.
"""

import json
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator, Mapping

from promptshell.errors import ConfigError

ENV_PREFIX = "PROMPTSHELL_"

DEFAULTS: dict[str, Any] = {
    "COMMANDS_PACKAGE": None,
    "COMMANDS_PATH": None,
    "LOAD_DEFAULT_COMMANDS": True,
    "PASSIVE_DEPTH_LIMIT": 1,
    "LOG_LEVEL": "WARNING",
    "LOG_FILE_PATH": None,
    "PROMPT": "> ",
    "ENABLE_COMPLETION": True,
    "SHOW_BOOT": False,
}

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUTHY = frozenset({"1", "true", "yes", "y", "on"})
_FALSY = frozenset({"0", "false", "no", "n", "off"})
_NONE_WORDS = frozenset({"", "none", "null"})

_ENV_LINE_RE = re.compile(r"^(?:export\s+)?([A-Za-z_]\w*)\s*=\s*(.*)$")


@dataclass(frozen=True)
class ShellConfig:
    commands_package: str | None
    commands_path: Path | None
    load_default_commands: bool
    passive_depth_limit: int
    log_level: str
    log_file_path: Path | None
    prompt: str
    enable_completion: bool
    show_boot: bool
    # Keys this version does not know about, kept as given.
    extra: dict[str, Any] = field(default_factory=dict)


# ---------- sources ----------

def _read_dotenv(path: Path) -> dict[str, str]:
    """Parse KEY=VALUE lines; `#` comments, blank lines and an `export ` prefix are allowed."""
    if not path.is_file():
        return {}
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        match = _ENV_LINE_RE.match(line)
        if match is None:
            continue
        key, value = match.group(1), match.group(2).strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "'\"":
            value = value[1:-1]
        values[key] = value
    return values


def _read_json(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    return data if isinstance(data, Mapping) else {}


def _read_toml(path: Path) -> Mapping[str, Any]:
    if not path.is_file():
        return {}
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def _flatten(tree: Mapping[str, Any], parents: tuple[str, ...] = ()) -> Iterator[tuple[str, Any]]:
    """Yield (UPPER_SNAKE_KEY, value) for every leaf of a nested mapping."""
    for name, value in tree.items():
        path = parents + (str(name),)
        if isinstance(value, Mapping):
            yield from _flatten(value, path)
        else:
            yield "_".join(path).upper(), value


def _unprefixed(pairs: Mapping[str, Any] | Iterator[tuple[str, Any]]) -> dict[str, Any]:
    items = pairs.items() if isinstance(pairs, Mapping) else pairs
    out: dict[str, Any] = {}
    for key, value in items:
        key = str(key).upper()
        out[key.removeprefix(ENV_PREFIX)] = value
    return out


def _file_layers(cwd: Path) -> list[dict[str, Any]]:
    return [
        _unprefixed(_read_dotenv(cwd / ".env")),
        _unprefixed(_flatten(_read_json(cwd / "config.json"))),
        _unprefixed(_flatten(_read_toml(cwd / "config.toml"))),
        _unprefixed(_flatten(_read_toml(cwd / "promptshell.toml"))),
    ]


def _env_layer(environ: Mapping[str, str]) -> dict[str, Any]:
    return {key[len(ENV_PREFIX):]: value
            for key, value in environ.items() if key.startswith(ENV_PREFIX)}


# ---------- coercion ----------

def _to_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUTHY:
        return True
    if word in _FALSY:
        return False
    raise ConfigError(f"{key} expects a boolean, got: {value!r}")


def _to_int(key: str, value: Any) -> int:
    if isinstance(value, bool):
        raise ConfigError(f"{key} expects an integer, got: {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError as exc:
        raise ConfigError(f"{key} expects an integer, got: {value!r}") from exc


def _to_opt_str(value: Any) -> str | None:
    if value is None or str(value).strip().lower() in _NONE_WORDS:
        return None
    return str(value)


def _path_resolver(base: Path) -> Callable[[Any], Path | None]:
    def _resolve(value: Any) -> Path | None:
        text = _to_opt_str(value)
        if text is None:
            return None
        path = Path(os.path.expandvars(os.path.expanduser(text)))
        if not path.is_absolute():
            path = base / path
        return path.resolve()
    return _resolve


def _to_log_level(value: Any) -> str:
    level = (_to_opt_str(value) or DEFAULTS["LOG_LEVEL"]).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
    return level


# ---------- public API ----------

def build_config(raw: Mapping[str, Any], *, base: Path | None = None) -> ShellConfig:
    """
    Validate a flat UPPER_SNAKE mapping into a ShellConfig.

    Missing keys take their DEFAULTS value; relative paths resolve against
    `base` (the current directory when omitted).
    """
    values = dict(DEFAULTS)
    values.update((str(key).upper(), value) for key, value in raw.items())
    to_path = _path_resolver(base or Path.cwd())

    depth_limit = _to_int("PASSIVE_DEPTH_LIMIT", values["PASSIVE_DEPTH_LIMIT"])
    if depth_limit < 0:
        raise ConfigError(f"PASSIVE_DEPTH_LIMIT must be >= 0, got {depth_limit}")

    return ShellConfig(
        commands_package=_to_opt_str(values["COMMANDS_PACKAGE"]),
        commands_path=to_path(values["COMMANDS_PATH"]),
        load_default_commands=_to_bool("LOAD_DEFAULT_COMMANDS", values["LOAD_DEFAULT_COMMANDS"]),
        passive_depth_limit=depth_limit,
        log_level=_to_log_level(values["LOG_LEVEL"]),
        log_file_path=to_path(values["LOG_FILE_PATH"]),
        prompt=DEFAULTS["PROMPT"] if values["PROMPT"] is None else str(values["PROMPT"]),
        enable_completion=_to_bool("ENABLE_COMPLETION", values["ENABLE_COMPLETION"]),
        show_boot=_to_bool("SHOW_BOOT", values["SHOW_BOOT"]),
        extra={key: value for key, value in values.items() if key not in DEFAULTS},
    )


def load_config(cwd: str | Path | None = None, environ: Mapping[str, str] | None = None) -> ShellConfig:
    """Merge every source for `cwd` and return the validated settings. Reads only."""
    base = Path(cwd) if cwd is not None else Path.cwd()
    merged: dict[str, Any] = {}
    for layer in _file_layers(base):
        merged.update(layer)
    merged.update(_env_layer(os.environ if environ is None else environ))
    return build_config(merged, base=base)
