#!/usr/bin/env python3
# promptshell/interface/parser.py
from __future__ import annotations

"""
Argument parsing helpers for the shell.

Responsibilities:
- Reject command lines that are only shell punctuation before lexing.
- Tokenize a command line into shell-like tokens.
- Split a raw line into a lowercase command name and its tokens.
- Parse flag tokens (`--key value`, `-k`, `--no-flag`) into an options mapping.
"""

import re
import shlex
from dataclasses import dataclass, field
from typing import Any, Iterable

from promptshell.errors import InvalidInputError

# Pure punctuation/whitespace, or parentheses anywhere.
_INVALID_INPUT_RE = re.compile(r"^[\s';\"\[\]|&<>]+$|[()]")
_NUMBER_RE = re.compile(r"^-?(\d+(\.\d*)?|\.\d+)([eE][-+]?\d+)?$")

_BOOL_TRUE = {"true"}
_BOOL_FALSE = {"false"}


@dataclass(slots=True)
class CommandInfo:
    """Parsed command line: lowercase name plus all tokens (name first)."""
    cmd_name: str
    args: list[str] = field(default_factory=list)


def is_invalid_input(command_line: str | None) -> bool:
    """Return True for empty lines and lines a lexer should never see."""
    if not command_line:
        return True
    return bool(_INVALID_INPUT_RE.search(command_line))


def tokenize(command_line: str) -> list[str]:
    """Split a raw command line into tokens using POSIX rules."""
    try:
        return shlex.split(command_line, posix=True)
    except ValueError as exc:
        # shlex reports unbalanced quotes / trailing escapes this way
        raise InvalidInputError() from exc


def parse_command_string(command_line: str) -> CommandInfo:
    """
    Parse a command string into `CommandInfo`.

    Empty input yields an empty name and no tokens.
    """
    if not command_line:
        return CommandInfo(cmd_name="", args=[])
    tokens = tokenize(command_line)
    if not tokens:
        return CommandInfo(cmd_name="", args=[])
    return CommandInfo(cmd_name=tokens[0].lower(), args=tokens)


def _is_number(text: str) -> bool:
    return bool(_NUMBER_RE.match(text))


def _coerce_number(text: str) -> Any:
    """Turn numeric-looking text into int/float, leave anything else alone."""
    if not _is_number(text):
        return text
    try:
        return int(text)
    except ValueError:
        return float(text)


class _FlagParser:
    """Stateful single-use walker behind `parse_flags`."""

    def __init__(self, strings: Iterable[str], booleans: Iterable[str]) -> None:
        self.strings = set(strings)
        self.booleans = set(booleans)
        self.options: dict[str, Any] = {}

    def coerce(self, key: str, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        if key in self.strings:
            return value
        lowered = value.lower()
        if key in self.booleans:
            if lowered in _BOOL_TRUE:
                return True
            if lowered in _BOOL_FALSE:
                return False
            return value
        return _coerce_number(value)

    def assign(self, key: str, value: Any) -> None:
        value = self.coerce(key, value)
        if key in self.options:
            existing = self.options[key]
            if isinstance(existing, list):
                existing.append(value)
            else:
                self.options[key] = [existing, value]
        else:
            self.options[key] = value

    def bare(self, key: str) -> Any:
        """Value of a flag given without an argument."""
        return "" if key in self.strings else True

    def takes_next(self, key: str, nxt: str | None) -> bool:
        if nxt is None:
            return False
        if key in self.booleans:
            return nxt.lower() in _BOOL_TRUE | _BOOL_FALSE
        if nxt.startswith("-") and not _is_number(nxt):
            return False
        return True


def parse_flags(
    tokens: Iterable[str],
    *,
    strings: Iterable[str] = (),
    booleans: Iterable[str] = (),
) -> tuple[dict[str, Any], list[str]]:
    """
    Parse flag tokens into (options, positionals).

    Supports:
        - `--key value`, `--key=value`, `-k value`, `-k=value`
        - `--flag` (True), `--no-flag` (False)
        - short clusters `-abc` (each True, the last may take a value)
        - `--` ends flag parsing; the rest are positionals
    Keys in `strings` keep raw text; keys in `booleans` only consume a following
    `true`/`false`. Other values that look numeric become int/float.
    """
    parser = _FlagParser(strings, booleans)
    items = list(tokens)
    positionals: list[str] = []
    index = 0

    while index < len(items):
        token = items[index]
        nxt = items[index + 1] if index + 1 < len(items) else None

        if token == "--":
            positionals.extend(items[index + 1:])
            break

        if token.startswith("--") and len(token) > 2:
            body = token[2:]
            if body.startswith("="):
                positionals.append(token)
            elif "=" in body:
                key, value = body.split("=", 1)
                parser.assign(key, value)
            elif body.startswith("no-") and len(body) > 3 and body not in parser.strings:
                parser.assign(body[3:], False)
            elif parser.takes_next(body, nxt):
                parser.assign(body, nxt)
                index += 1
            else:
                parser.assign(body, parser.bare(body))
            index += 1
            continue

        if token.startswith("-") and len(token) > 1 and not _is_number(token):
            body = token[1:]
            if body.startswith("="):
                positionals.append(token)
            elif "=" in body:
                letters, value = body.split("=", 1)
                for letter in letters[:-1]:
                    parser.assign(letter, parser.bare(letter))
                parser.assign(letters[-1], value)
            else:
                for letter in body[:-1]:
                    parser.assign(letter, parser.bare(letter))
                last = body[-1]
                if parser.takes_next(last, nxt):
                    parser.assign(last, nxt)
                    index += 1
                else:
                    parser.assign(last, parser.bare(last))
            index += 1
            continue

        positionals.append(token)
        index += 1

    return parser.options, positionals
