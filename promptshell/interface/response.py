#!/usr/bin/env python3
# promptshell/interface/response.py
from __future__ import annotations

"""
Structured result of one `Shell.execute` call.

Commands write to the Response instead of stdout; the host renders the log
entries and stores `context` for the next call.
"""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from promptshell.interface.session import SessionContext

if TYPE_CHECKING:  # pragma: no cover
    from promptshell.interface.engine import Shell


class LogType(str, Enum):
    INFO = "info"
    WARN = "warn"
    ERROR = "error"
    DEBUG = "debug"


@dataclass(frozen=True, slots=True)
class LogEntry:
    message: str
    type: LogType = LogType.INFO

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "type": self.type.value}


class Response:
    """
    Accumulates log entries and the session context for one invocation.

    Attributes:
        shell: The Shell executing the command (commands may inspect its registry).
        context: Clone of the incoming SessionContext, mutated during execution.
        password: True when the pending prompt asks for a masked answer.
        args: Positional arguments no option claimed.
        cmd_name: Name of the resolved command, once known.
        options: Final options passed to the command, once known.
        completed: True once the completion signal fired.
    """

    def __init__(self, shell: "Shell | None" = None, context: SessionContext | None = None) -> None:
        self.shell = shell
        self.context = context.clone() if context is not None else SessionContext()
        self.entries: list[LogEntry] = []
        self.password = False
        self.args: list[str] = []
        self.cmd_name: str | None = None
        self.options: dict[str, Any] | None = None
        self.completed = False

    def __repr__(self) -> str:
        return f"Response(cmd_name={self.cmd_name!r}, entries={len(self.entries)}, password={self.password})"

    # ---------------- Writers ----------------

    def log(self, message: Any, type: LogType | str = LogType.INFO) -> "Response":
        self.entries.append(LogEntry(str(message), LogType(type)))
        return self

    def info(self, message: Any) -> "Response":
        return self.log(message, LogType.INFO)

    def warn(self, message: Any) -> "Response":
        return self.log(message, LogType.WARN)

    def error(self, message: Any) -> "Response":
        """Record an error; exceptions are rendered by their message."""
        if isinstance(message, BaseException):
            message = str(message) or type(message).__name__
        return self.log(message, LogType.ERROR)

    def debug(self, message: Any) -> "Response":
        return self.log(message, LogType.DEBUG)

    # ---------------- Readers ----------------

    @property
    def has_errors(self) -> bool:
        return any(entry.type is LogType.ERROR for entry in self.entries)

    @property
    def has_prompt(self) -> bool:
        return self.context.has_prompt

    def messages(self, type: LogType | str | None = None) -> list[str]:
        """Return log messages, optionally only those of one type."""
        if type is None:
            return [entry.message for entry in self.entries]
        wanted = LogType(type)
        return [entry.message for entry in self.entries if entry.type is wanted]

    def to_dict(self) -> dict[str, Any]:
        return {
            "log": [entry.to_dict() for entry in self.entries],
            "context": self.context.to_dict(),
            "password": self.password,
        }
