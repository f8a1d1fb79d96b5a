#!/usr/bin/env python3
# promptshell/interface/cli.py
from __future__ import annotations

"""
Line readers and the REPL loop used by `python -m promptshell`.

`make_cli` picks prompt_toolkit on a terminal, readline when prompt_toolkit
cannot drive the console, and bare `input` when stdin is not a terminal.
History lives in memory for the current process only. Answers to password
prompts are read masked by every reader.
"""

import getpass
import logging
import sys
from typing import TYPE_CHECKING, Optional

from promptshell.interface.completion import split_current_token, suggest
from promptshell.interface.response import LogType, Response
from promptshell.interface.session import SessionContext
from promptshell.ui import colorize, print_line, supports_color

if TYPE_CHECKING:  # pragma: no cover
    from promptshell.interface.engine import Shell

logger = logging.getLogger(__name__)

EXIT_WORDS = {"exit", "quit"}

_TYPE_STYLES = {
    LogType.INFO: (),
    LogType.WARN: ("yellow",),
    LogType.ERROR: ("red",),
    LogType.DEBUG: ("bright_black",),
}


class BaseCLI:
    """
    Plain `input`/`getpass` reader, and the interface the others follow.

    `context` holds the session context of the last response. Use as a
    context manager so `teardown` runs however the loop ends.
    """

    def __init__(self, shell: "Shell", prompt_text: str = "> ") -> None:
        self.shell = shell
        self.prompt_text = prompt_text
        self.context = SessionContext()

    def setup(self) -> None:
        ...

    def get_line(self, password: bool = False) -> str:
        if password:
            return getpass.getpass(self.prompt_text)
        return input(self.prompt_text)

    def teardown(self) -> None:
        ...

    def __enter__(self) -> "BaseCLI":
        self.setup()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.teardown()


class PromptToolkitCLI(BaseCLI):
    """Line editor with live completion; answers to password prompts are masked."""

    def __init__(self, shell: "Shell", prompt_text: str = "> ", *, enable_completion: bool = True) -> None:
        super().__init__(shell, prompt_text)
        from prompt_toolkit import PromptSession
        from prompt_toolkit.completion import Completer, Completion
        from prompt_toolkit.history import InMemoryHistory

        cli = self

        class _ShellCompleter(Completer):
            def get_completions(self, document, complete_event):
                before = document.text_before_cursor
                _, word = split_current_token(before)
                for candidate in suggest(cli.shell, before, cli.context):
                    yield Completion(candidate, start_position=-len(word))

        self._session = PromptSession(
            history=InMemoryHistory(),
            completer=_ShellCompleter() if enable_completion else None,
            complete_while_typing=enable_completion,
        )

    def get_line(self, password: bool = False) -> str:
        return self._session.prompt(self.prompt_text, is_password=password)


class ReadlineCLI(BaseCLI):
    """Fallback editor with basic completion."""

    def __init__(self, shell: "Shell", prompt_text: str = "> ") -> None:
        super().__init__(shell, prompt_text)
        import readline  # type: ignore[attr-defined]

        self.readline = readline

    def setup(self) -> None:
        self.readline.set_completer_delims(" \t\n")

        def _candidate(fragment: str, index: int) -> Optional[str]:
            line = self.readline.get_line_buffer()
            found = [word for word in suggest(self.shell, line, self.context)
                     if word.startswith(fragment)]
            return found[index] if index < len(found) else None

        self.readline.set_completer(_candidate)
        self.readline.parse_and_bind("tab: complete")

    def teardown(self) -> None:
        self.readline.set_completer(None)


def make_cli(shell: "Shell", prompt_text: str = "> ", *, enable_completion: bool = True) -> BaseCLI:
    """Return the richest reader this console supports."""
    if sys.stdin.isatty():
        try:
            return PromptToolkitCLI(shell, prompt_text, enable_completion=enable_completion)
        except Exception as exc:  # noqa: BLE001
            # prompt_toolkit refuses some consoles (e.g. no real terminal on Windows)
            logger.debug("prompt_toolkit unavailable: %s", exc)
        try:
            return ReadlineCLI(shell, prompt_text)
        except ImportError:
            logger.debug("readline unavailable, using plain input")
    return BaseCLI(shell, prompt_text)


def render_response(res: Response, *, file=None, color: bool | None = None) -> None:
    """Print the response log, one entry per line, colored by type."""
    file = file if file is not None else sys.stdout
    use_color = supports_color(file) if color is None else color
    for entry in res.entries:
        if entry.type is LogType.DEBUG:
            continue
        text = entry.message
        if use_color:
            text = colorize(text, *_TYPE_STYLES[entry.type])
        print_line(text, file=file)


def run_repl(shell: "Shell", cli: BaseCLI, *, file=None) -> SessionContext:
    """
    Read lines from `cli`, execute them and render each response.

    Stops on 'exit'/'quit' (unless a prompt is pending), EOF or Ctrl-C.
    Returns the final session context.
    """
    password = False
    with cli:
        while True:
            try:
                line = cli.get_line(password=password)
            except (EOFError, KeyboardInterrupt):
                break
            if not cli.context.has_prompt:
                line = line.strip()
                if not line:
                    continue
                if line.lower() in EXIT_WORDS:
                    break
            res = shell.execute(line, cli.context)
            render_response(res, file=file)
            cli.context = res.context
            password = res.password and res.context.has_prompt
    return cli.context
