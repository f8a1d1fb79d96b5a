#!/usr/bin/env python3
# promptshell/commands/commands.py
from __future__ import annotations

"""
Where commands live once defined.

A `CommandRegistry` maps lowercase names to `CommandDefinition`s; the first
definition under a name stays. Functions become commands through the
`command` decorator, ready-made definitions through `register_command`.
Both use the module-level `REGISTRY` unless given another registry.
"""

import logging
from typing import Any, Callable, Dict, Iterable, Mapping, Optional

from promptshell.commands.command_types import (
    AsyncInvocation,
    CommandDefinition,
    OptionSpec,
    SyncInvocation,
    allow_all,
)
from promptshell.errors import CommandRegistrationError

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Holds all command definitions keyed by lowercase name."""

    def __init__(self) -> None:
        self._commands_by_name: Dict[str, CommandDefinition] = {}

    def register(self, definition: CommandDefinition) -> None:
        """Register a command; a name that is already taken is rejected."""
        key = definition.name.lower()
        if key in self._commands_by_name:
            raise CommandRegistrationError(
                f"Command '{definition.name}' already registered.")
        self._commands_by_name[key] = definition

    def register_all(self, definitions: Iterable[CommandDefinition], *, source: str = "") -> int:
        """
        Register many commands, skipping collisions with a warning.

        Returns the number of commands actually registered.
        """
        registered_count = 0
        for definition in definitions:
            try:
                self.register(definition)
            except CommandRegistrationError:
                where = f" from {source}" if source else ""
                logger.warning(
                    '"%s"%s was not loaded because a command with the same name was already loaded.',
                    definition.name, where)
                continue
            registered_count += 1
        return registered_count

    def get(self, name: str) -> Optional[CommandDefinition]:
        """Return the command by name (any case), or None if not found."""
        return self._commands_by_name.get(name.lower())

    lookup = get

    def has(self, name: str) -> bool:
        return name.lower() in self._commands_by_name

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def __len__(self) -> int:
        return len(self._commands_by_name)

    def all(self) -> list[CommandDefinition]:
        """Return all commands in registration order."""
        return list(self._commands_by_name.values())

    def names(self) -> list[str]:
        """Return all command names for completion."""
        return list(self._commands_by_name.keys())

    def categories(self) -> dict[str, list[CommandDefinition]]:
        """Category name -> commands in that category, in registration order."""
        grouped: dict[str, list[CommandDefinition]] = {}
        for definition in self._commands_by_name.values():
            grouped.setdefault(definition.category, []).append(definition)
        return grouped


# Global registry used by the decorator when no registry is given
REGISTRY = CommandRegistry()


def command(
    *,
    name: str | None = None,
    description: str | None = None,
    options: Mapping[str, OptionSpec | Mapping[str, Any]] | None = None,
    access: Callable[..., bool] | None = None,
    asynchronous: bool = False,
    category: str | None = None,
    registry: CommandRegistry | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator to register a function as a shell command.

    Without `name` the function name is used with underscores turned into
    dashes, so `show_file` becomes `show-file`. The docstring is the
    description unless one is given. With `asynchronous=True` the function
    receives `done` as its third argument and must call it exactly once.
    """

    def wrapper(func: Callable[..., Any]) -> Callable[..., Any]:
        invocation = AsyncInvocation(func) if asynchronous else SyncInvocation(func)
        definition = CommandDefinition(
            name=name or func.__name__.replace("_", "-"),
            invocation=invocation,
            options=dict(options or {}),  # type: ignore[arg-type]
            access=access or allow_all,
            description=(description or (func.__doc__ or "")).strip(),
            category=category or "general",
            module=func.__module__,
        )
        (registry if registry is not None else REGISTRY).register(definition)
        func.__command__ = definition  # type: ignore[attr-defined]
        return func

    return wrapper


def register_command(definition: CommandDefinition, registry: CommandRegistry | None = None) -> None:
    """Explicit API for modules that construct CommandDefinition objects directly."""
    (registry if registry is not None else REGISTRY).register(definition)
