#!/usr/bin/env python3
# promptshell/interface/__init__.py
from __future__ import annotations

"""
Package for command resolution, execution and the interactive frontend.

Provides:
- Parser utilities (`tokenize`, `parse_command_string`, `parse_flags`).
- Session state and structured responses (`SessionContext`, `Response`).
- Option resolution (`OptionResolver`).
- The execution engine (`Shell`).
- Command module loader and completion helpers.
- CLI frontends (prompt_toolkit / readline / plain) and the REPL host.
"""


# Parser utilities
from .parser import (
    CommandInfo,
    is_invalid_input,
    parse_command_string,
    parse_flags,
    tokenize,
)

# Session state and responses
from .session import PassiveState, PromptState, SessionContext
from .response import LogEntry, LogType, Response

# Option resolution
from .resolver import (
    OptionResolver,
    Resolution,
    ResolutionOutcome,
    ValidationOutcome,
    run_validator,
)

# Engine
from .engine import EVENT_COMMAND_COMPLETE, EVENT_DONE, Shell

# Loader / completion
from .loader import definitions_from_module, load_commands, load_commands_from_path
from .completion import suggest

# CLI frontends (after completion is available)
from .cli import (
    BaseCLI,
    PromptToolkitCLI,
    ReadlineCLI,
    make_cli,
    render_response,
    run_repl,
)

__all__ = [
    # parser
    "CommandInfo",
    "is_invalid_input",
    "parse_command_string",
    "parse_flags",
    "tokenize",
    # session / response
    "PassiveState",
    "PromptState",
    "SessionContext",
    "LogEntry",
    "LogType",
    "Response",
    # resolver
    "OptionResolver",
    "Resolution",
    "ResolutionOutcome",
    "ValidationOutcome",
    "run_validator",
    # engine
    "EVENT_COMMAND_COMPLETE",
    "EVENT_DONE",
    "Shell",
    # loader / completion
    "definitions_from_module",
    "load_commands",
    "load_commands_from_path",
    "suggest",
    # cli
    "BaseCLI",
    "PromptToolkitCLI",
    "ReadlineCLI",
    "make_cli",
    "render_response",
    "run_repl",
]
