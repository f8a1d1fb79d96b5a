#!/usr/bin/env python3
# promptshell/__init__.py
from __future__ import annotations
"""
Embeddable command shell.

Hosts register command definitions, call `Shell.execute(line, context)` and
render the returned `Response`; the shell negotiates missing options through
prompts stored in the session context.
"""


from promptshell.commands import (  # noqa: F401
    REGISTRY,
    AsyncInvocation,
    CommandDefinition,
    CommandRegistry,
    OptionSpec,
    SyncInvocation,
    command,
    register_command,
)
from promptshell.interface import (  # noqa: F401
    EVENT_COMMAND_COMPLETE,
    EVENT_DONE,
    LogType,
    Response,
    SessionContext,
    Shell,
)

__version__ = "0.1.0"

__all__ = [
    "REGISTRY",
    "AsyncInvocation",
    "CommandDefinition",
    "CommandRegistry",
    "OptionSpec",
    "SyncInvocation",
    "command",
    "register_command",
    "EVENT_COMMAND_COMPLETE",
    "EVENT_DONE",
    "LogType",
    "Response",
    "SessionContext",
    "Shell",
    "__version__",
]
