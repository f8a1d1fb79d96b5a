#!/usr/bin/env python3
# promptshell/defaults/help.py
from __future__ import annotations

"""Built-in `help` command."""

from typing import Any

from promptshell.commands import CommandDefinition, OptionSpec
from promptshell.ui import format_table

DESCRIPTION = "List available commands, or show the options of one command."

OPTIONS = {
    "command": OptionSpec(
        type="string",
        no_name=True,
        description="Command to describe.",
    ),
}


def _option_rows(cmd: CommandDefinition) -> list[list[str]]:
    rows = []
    for key, spec in cmd.options.items():
        flags = [f"--{key}", *(f"--{alias}" if len(alias) > 1 else f"-{alias}" for alias in spec.aliases)]
        rows.append([
            ", ".join(flags),
            "yes" if spec.required else "no",
            "" if spec.default is None else str(spec.default),
            spec.description,
        ])
    return rows


def _format_command_help(cmd: CommandDefinition) -> str:
    lines = [f"{cmd.name}: {cmd.description or '(no description)'}"]
    if cmd.options:
        lines.append("")
        lines.append(format_table(
            _option_rows(cmd), headers=["Option", "Required", "Default", "Description"]))
    return "\n".join(lines)


def invoke(res, options: dict[str, Any]) -> None:
    shell = res.shell
    target = options.get("command")

    if target:
        cmd = shell.registry.get(str(target))
        if cmd is None or not cmd.is_visible(res.context):
            res.error(f'"{target}" is not a valid command')
            return
        res.log(_format_command_help(cmd))
        return

    rows = [
        [cmd.name, cmd.description.splitlines()[0] if cmd.description else ""]
        for cmd in sorted(shell.commands(res.context), key=lambda c: c.name)
    ]
    if not rows:
        res.warn("No commands loaded.")
        return
    res.log(format_table(rows, headers=["Command", "Description"]))
