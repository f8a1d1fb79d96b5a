#!/usr/bin/env python3
# promptshell/boot/boot.py
from __future__ import annotations
"""
Startup pipeline for the bundled REPL.

Steps: load configuration -> initialize logger -> create the shell ->
load host commands (package and/or directory) -> load built-ins.
With `show_boot` each step prints an [  OK  ] / [FAILED] line.
"""

from dataclasses import dataclass
import logging
from typing import Any, Callable

from promptshell.config import ShellConfig, load_config
from promptshell.interface import Shell, load_commands_from_path
from promptshell.ui import colorize, init_logger, print_line


@dataclass(slots=True)
class BootState:
    config: ShellConfig
    logger: logging.Logger
    shell: Shell
    loaded_count: int


def _step(label: str, fn: Callable[[], Any], *, verbose: bool) -> Any:
    """Run a boot step with optional status output."""
    try:
        out = fn()
    except Exception as exc:
        if verbose:
            print_line(
                colorize(f"[FAILED] {label} ({type(exc).__name__}: {exc})", "red"))
        raise
    if verbose:
        print_line(colorize(f"[  OK  ] {label}", "green"))
    return out


def boot_sequence(config: ShellConfig | None = None) -> BootState:
    verbose = bool(config.show_boot) if config is not None else False
    if config is None:
        config = _step("Load configuration", load_config, verbose=verbose)
        verbose = config.show_boot

    logger = _step(
        "Initialize logger",
        lambda: init_logger(
            "promptshell",
            level=config.log_level,
            logfile=str(config.log_file_path) if config.log_file_path else None,
        ),
        verbose=verbose,
    )

    shell = _step(
        "Create shell",
        lambda: Shell(
            load_defaults=config.load_default_commands,
            passive_depth_limit=config.passive_depth_limit,
        ),
        verbose=verbose,
    )

    loaded_count = 0
    if config.commands_package:
        loaded_count += _step(
            f"Load commands package '{config.commands_package}'",
            lambda: shell.load(config.commands_package),  # type: ignore[arg-type]
            verbose=verbose,
        )
    if config.commands_path:
        loaded_count += _step(
            f"Load commands from {config.commands_path}",
            lambda: load_commands_from_path(config.commands_path, shell.registry),  # type: ignore[arg-type]
            verbose=verbose,
        )
    loaded_count += _step("Load built-in commands", shell.load_defaults, verbose=verbose)

    logger.debug("Boot complete: %d command(s) registered", len(shell.registry))
    return BootState(
        config=config,
        logger=logger,
        shell=shell,
        loaded_count=loaded_count,
    )
