#!/usr/bin/env python3
# promptshell/commands/__init__.py
from __future__ import annotations

"""
Package for command definitions and registration.

Provides:
- Data structures (`OptionSpec`, `CommandDefinition`, `SyncInvocation`, `AsyncInvocation`).
- In-memory registry and decorators (`CommandRegistry`, `REGISTRY`, `command`, `register_command`).

This package re-exports public APIs from:
- command_types.py
- commands.py
"""


# Re-export from submodules
from .command_types import (
    AsyncInvocation,
    CommandDefinition,
    Invocation,
    OptionSpec,
    SyncInvocation,
    allow_all,
)
from .commands import REGISTRY, CommandRegistry, command, register_command

__all__ = [
    "AsyncInvocation",
    "CommandDefinition",
    "Invocation",
    "OptionSpec",
    "SyncInvocation",
    "allow_all",
    "REGISTRY",
    "CommandRegistry",
    "command",
    "register_command",
]
