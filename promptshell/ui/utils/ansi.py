#!/usr/bin/env python3
# promptshell/ui/utils/ansi.py
from __future__ import annotations

import ctypes
import functools
import os
import re
import sys

# SGR codes for the styles the shell renders with.
_SGR_CODES = {
    "reset": 0,
    "bold": 1,
    "dim": 2,
    "underline": 4,
    "red": 31,
    "green": 32,
    "yellow": 33,
    "blue": 34,
    "magenta": 35,
    "cyan": 36,
    "bright_black": 90,
}

ANSI = {style: f"\x1b[{code}m" for style, code in _SGR_CODES.items()}

_ESCAPE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z]")

_ENABLE_VIRTUAL_TERMINAL_PROCESSING = 0x0004
_STD_OUTPUT_HANDLE = -11


def strip_ansi(text: str) -> str:
    """Drop escape sequences, e.g. before measuring or writing to a file."""
    return _ESCAPE_RE.sub("", text)


@functools.lru_cache(maxsize=None)
def enable_windows_vt() -> bool:
    """
    Make sure escape sequences render on this console.

    Only legacy Windows consoles need switching into VT mode; everywhere
    else (and in Windows Terminal / ANSICON) this is a no-op returning True.
    """
    if os.name != "nt" or "WT_SESSION" in os.environ or "ANSICON" in os.environ:
        return True
    try:
        kernel32 = ctypes.windll.kernel32  # type: ignore[attr-defined]
        handle = kernel32.GetStdHandle(_STD_OUTPUT_HANDLE)
        console_mode = ctypes.c_uint()
        if not kernel32.GetConsoleMode(handle, ctypes.byref(console_mode)):
            return False
        return bool(kernel32.SetConsoleMode(
            handle, console_mode.value | _ENABLE_VIRTUAL_TERMINAL_PROCESSING))
    except (AttributeError, OSError):
        return False


def supports_color(stream=None) -> bool:
    """True when `stream` is a terminal that can render ANSI colors."""
    stream = stream if stream is not None else sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty()) and enable_windows_vt()


def colorize(text: str, *styles: str) -> str:
    """Wrap `text` in the named styles; unknown names are ignored."""
    prefix = "".join(ANSI[style] for style in styles if style in ANSI)
    if not prefix:
        return text
    return f"{prefix}{text}{ANSI['reset']}"
