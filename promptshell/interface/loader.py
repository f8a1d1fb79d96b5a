#!/usr/bin/env python3
# promptshell/interface/loader.py
from __future__ import annotations

"""
Command module loader.

Features:
- Imports all non-private modules under a given package (or plain directory).
- A module exposing a callable `invoke` becomes one command named after the module.
- A module exporting COMMAND/COMMANDS registers those CommandDefinition objects.
- Incompatible modules and name collisions are logged as warnings and skipped.

Module-level command contract:
    invoke(res, options)             required; receives `done` too when ASYNC = True
    OPTIONS = {...}                  optional; key -> OptionSpec or plain dict
    access(context, name) -> bool    optional
    DESCRIPTION / CATEGORY           optional; DESCRIPTION falls back to the docstring
    ASYNC = True                     optional; marks `invoke(res, options, done)`
"""

import importlib
import importlib.util
import logging
import pkgutil
import sys
from pathlib import Path
from types import ModuleType
from typing import Iterable

from promptshell.commands import (
    AsyncInvocation,
    CommandDefinition,
    CommandRegistry,
    SyncInvocation,
    allow_all,
)
from promptshell.errors import CommandLoadError

logger = logging.getLogger(__name__)


def definitions_from_module(module: ModuleType, name: str | None = None) -> list[CommandDefinition]:
    """
    Return the command definitions a module provides.

    Raises CommandLoadError when the module provides none.
    """
    found: list[CommandDefinition] = []

    invoke = getattr(module, "invoke", None)
    if callable(invoke):
        command_name = (name or module.__name__.rsplit(".", 1)[-1]).lower()
        invocation = AsyncInvocation(invoke) if getattr(
            module, "ASYNC", False) else SyncInvocation(invoke)
        access = getattr(module, "access", None)
        description = getattr(module, "DESCRIPTION", None) or (module.__doc__ or "")
        found.append(CommandDefinition(
            name=command_name,
            invocation=invocation,
            options=dict(getattr(module, "OPTIONS", None) or {}),
            access=access if callable(access) else allow_all,
            description=description.strip(),
            category=getattr(module, "CATEGORY", None) or "general",
            module=module.__name__,
        ))

    if hasattr(module, "COMMAND"):
        obj = getattr(module, "COMMAND")
        if isinstance(obj, CommandDefinition):
            found.append(obj)
    if hasattr(module, "COMMANDS"):
        objs = getattr(module, "COMMANDS")
        if isinstance(objs, Iterable):
            found.extend(item for item in objs if isinstance(item, CommandDefinition))

    if not found:
        raise CommandLoadError(
            f'"{module.__name__}" is not compatible with promptshell and was not loaded.')
    return found


def _register(
    registry: CommandRegistry,
    definitions: Iterable[CommandDefinition],
    source: str,
    skip_existing: bool,
) -> int:
    if skip_existing:
        definitions = [d for d in definitions if not registry.has(d.name)]
    return registry.register_all(definitions, source=source)


def load_commands(
    commands_package: str,
    registry: CommandRegistry,
    *,
    skip_existing: bool = False,
) -> int:
    """
    Import all modules under `commands_package` and register their commands.

    Supported layouts:
      1) Plain modules: pkg/foo.py -> command 'foo' (via `invoke`) or COMMAND/COMMANDS
      2) Subpackages: pkg/bar/__init__.py handled like a plain module

    `skip_existing` silently skips names that are already registered
    (used for built-ins that hosts may override). Returns the number of
    commands registered.
    """
    package = importlib.import_module(commands_package)
    package_paths = [str(p) for p in getattr(package, "__path__", [])]

    if not package_paths:
        raise CommandLoadError(
            f"'{commands_package}' must be a package (folder) with modules.")

    loaded_count = 0
    for modinfo in pkgutil.iter_modules(package_paths):
        if modinfo.name.startswith("_"):
            # Ignore private modules
            continue
        module = importlib.import_module(f"{commands_package}.{modinfo.name}")
        try:
            definitions = definitions_from_module(module, modinfo.name)
        except CommandLoadError as exc:
            logger.warning("%s", exc)
            continue
        loaded_count += _register(registry, definitions, module.__name__, skip_existing)

    logger.debug("Loaded %d command(s) from '%s'", loaded_count, commands_package)
    return loaded_count


def load_commands_from_path(
    directory: str | Path,
    registry: CommandRegistry,
    *,
    skip_existing: bool = False,
) -> int:
    """
    Load every `*.py` file in a plain directory as a command module.

    The command name is the file name without extension, lowercased.
    """
    base = Path(directory)
    if not base.is_dir():
        raise CommandLoadError(f"Command directory not found: {base}")

    loaded_count = 0
    for file_path in sorted(base.glob("*.py")):
        if file_path.name.startswith("_"):
            continue
        module_name = f"promptshell_commands_{base.name}_{file_path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, file_path)
        if spec is None or spec.loader is None:
            logger.warning('"%s" could not be imported and was not loaded.', file_path)
            continue
        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        try:
            definitions = definitions_from_module(module, file_path.stem)
        except CommandLoadError:
            logger.warning(
                '"%s" is not compatible with promptshell and was not loaded.', file_path.name)
            continue
        loaded_count += _register(registry, definitions, str(file_path), skip_existing)

    return loaded_count
