#!/usr/bin/env python3
# promptshell/errors.py
from __future__ import annotations

"""
Exception types raised inside the shell.

None of these escape `Shell.execute`; the engine turns them into
`error` entries on the Response. Registration and config errors are
raised to whoever registers commands or loads configuration.
"""


class ShellError(Exception):
    """Base class for all promptshell errors."""


class InvalidInputError(ShellError):
    """Raised when a command line cannot be tokenized or is pure noise."""

    def __init__(self, message: str = "Invalid input.") -> None:
        super().__init__(message)


class CommandRegistrationError(ShellError, ValueError):
    """Raised when a command name is already taken in a registry."""


class CommandLoadError(ShellError):
    """Raised when a command module is not compatible with the shell."""


class ConfigError(ShellError, ValueError):
    """Raised when configuration values fail validation."""
