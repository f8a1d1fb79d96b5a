#!/usr/bin/env python3
# promptshell/__main__.py
from __future__ import annotations

import sys

from promptshell.boot import boot_sequence
from promptshell.interface import make_cli, run_repl


def main() -> int:
    state = boot_sequence()
    cli = make_cli(
        state.shell,
        state.config.prompt,
        enable_completion=state.config.enable_completion,
    )
    run_repl(state.shell, cli)
    return 0


if __name__ == "__main__":
    sys.exit(main())
