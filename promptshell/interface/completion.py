#!/usr/bin/env python3
# promptshell/interface/completion.py
from __future__ import annotations

"""
Tab completion for the REPL frontends.

Command names are completed for the first word (and after `help`), option
flags for later words starting with "-". Commands the session cannot see
are never offered.
"""

import shlex
from typing import TYPE_CHECKING

from promptshell.interface.session import SessionContext

if TYPE_CHECKING:  # pragma: no cover
    from promptshell.interface.engine import Shell


def split_current_token(raw_input: str) -> tuple[list[str], str]:
    """
    Split the buffer into words and the word under the cursor.

    A trailing space starts a new, empty word. An unterminated quote is not
    an error here; the buffer is split on whitespace instead.
    """
    if not raw_input:
        return [], ""
    try:
        words = shlex.split(raw_input)
    except ValueError:
        words = raw_input.split()
    if raw_input[-1].isspace():
        words.append("")
    return words, (words[-1] if words else "")


def _flag(name: str) -> str:
    return f"-{name}" if len(name) == 1 else f"--{name}"


def suggest(shell: "Shell", text_before_cursor: str, context: SessionContext | None = None) -> list[str]:
    """
    Completions for `text_before_cursor` in `context`.

    While a prompt is pending the line is an answer, so nothing is suggested.
    """
    context = context if context is not None else SessionContext()
    if context.has_prompt:
        return []

    parts, current_prefix = split_current_token(text_before_cursor.lstrip())
    visible = sorted(cmd.name for cmd in shell.commands(context))

    if len(parts) < 2:
        return [name for name in visible if name.startswith(current_prefix.lower())]

    command_name = parts[0].lower()
    if command_name == "help" and len(parts) == 2:
        return [name for name in visible if name.startswith(current_prefix.lower())]

    if command_name not in visible:
        return []
    cmd = shell.registry.get(command_name)
    if cmd is None or not current_prefix.startswith("-"):
        return []

    flags: list[str] = []
    for key, spec in cmd.options.items():
        flags.append(_flag(key))
        flags.extend(_flag(alias) for alias in spec.aliases)
    return sorted(f for f in flags if f.startswith(current_prefix))
