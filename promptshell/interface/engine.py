#!/usr/bin/env python3
# promptshell/interface/engine.py
from __future__ import annotations

"""
Command execution engine.

`Shell.execute` runs one command line end to end:
  validate input -> handle 'cancel' -> parse -> apply a pending prompt or
  parse flags -> look up the command (passive fallback) -> help redirect ->
  resolve options -> invoke (sync or async) -> signal completion.

Completion is signaled exactly once per call through the 'done' event and,
when no new prompt is pending, the 'command_complete' event.
"""

import logging
from typing import Any, Callable, Mapping

from promptshell.commands import CommandDefinition, CommandRegistry
from promptshell.errors import InvalidInputError
from promptshell.interface.parser import (
    CommandInfo,
    is_invalid_input,
    parse_command_string,
    parse_flags,
)
from promptshell.interface.resolver import OptionResolver
from promptshell.interface.response import Response
from promptshell.interface.session import SessionContext

logger = logging.getLogger(__name__)

EVENT_DONE = "done"
EVENT_COMMAND_COMPLETE = "command_complete"

CANCEL_KEYWORD = "cancel"
HELP_COMMAND = "help"
HELP_FLAGS = ("?", "help")
DEFAULT_COMMANDS_PACKAGE = "promptshell.defaults"


class _Completion:
    """Fires the shell's completion signal once for one Response."""

    def __init__(self, shell: "Shell", res: Response, info: CommandInfo | None) -> None:
        self.shell = shell
        self.res = res
        self.info = info
        self.options: dict[str, Any] | None = None

    def __call__(self, err: Any = None) -> None:
        if self.res.completed:
            logger.debug("Ignoring repeated completion for '%s'",
                         self.info.cmd_name if self.info else "")
            return
        if err is not None:
            self.res.error(err)
        self.shell._complete(self.res, self.info, self.options)


class Shell:
    """
    Embeddable command shell.

    Args:
        registry: Commands available to this shell (a fresh registry if omitted).
        load_defaults: Register the built-in commands (e.g. `help`) after host commands.
        passive_depth_limit: How many passive fallback retries one call may make.
        resolver: OptionResolver to use.
    """

    def __init__(
        self,
        registry: CommandRegistry | None = None,
        *,
        load_defaults: bool = True,
        passive_depth_limit: int = 1,
        resolver: OptionResolver | None = None,
    ) -> None:
        self.registry = registry if registry is not None else CommandRegistry()
        self.passive_depth_limit = passive_depth_limit
        self.resolver = resolver or OptionResolver()
        self._listeners: dict[str, list[Callable[..., Any]]] = {}
        self._load_defaults = load_defaults
        self._defaults_loaded = False

    # ---------------- Registration ----------------

    def register(self, definition: CommandDefinition) -> None:
        self.registry.register(definition)

    def load(self, package: str) -> int:
        """Load command modules from an importable package into this shell."""
        from promptshell.interface.loader import load_commands

        return load_commands(package, self.registry)

    def load_defaults(self) -> int:
        """Register built-in commands once; names already taken by host commands win."""
        from promptshell.interface.loader import load_commands

        if not self._load_defaults or self._defaults_loaded:
            return 0
        self._defaults_loaded = True
        return load_commands(DEFAULT_COMMANDS_PACKAGE, self.registry, skip_existing=True)

    def commands(self, context: SessionContext | None = None) -> list[CommandDefinition]:
        """Return commands visible in `context`."""
        self.load_defaults()
        context = context if context is not None else SessionContext()
        return [cmd for cmd in self.registry.all() if cmd.is_visible(context)]

    # ---------------- Events ----------------

    def on(self, event: str, handler: Callable[..., Any]) -> Callable[..., Any]:
        self._listeners.setdefault(event, []).append(handler)
        return handler

    def off(self, event: str, handler: Callable[..., Any]) -> None:
        handlers = self._listeners.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(self, event: str, *args: Any) -> None:
        for handler in list(self._listeners.get(event, ())):
            try:
                handler(*args)
            except Exception:  # noqa: BLE001
                logger.exception("Listener for '%s' failed", event)

    # ---------------- Execution ----------------

    def execute(
        self,
        cmd_str: str | None,
        context: SessionContext | Mapping[str, Any] | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> Response:
        """
        Execute one command line and return its Response.

        `context` is the context of the previous Response (or a dict produced by
        `SessionContext.to_dict`). `options` override parsed arguments.
        """
        if context is not None and not isinstance(context, SessionContext):
            context = SessionContext.from_dict(context)
        self.load_defaults()
        res = Response(self, context)
        try:
            self._dispatch(res, cmd_str or "", dict(options or {}), depth=0)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected failure executing %r", cmd_str)
            res.error(exc)
            if not res.completed:
                self._complete(res, None, None)
        return res

    def _dispatch(self, res: Response, cmd_str: str, override: dict[str, Any], depth: int) -> None:
        prompt = res.context.prompt

        if prompt is None and is_invalid_input(cmd_str):
            res.error("Invalid input.")
            self._complete(res, None, None)
            return

        if cmd_str.lower() == CANCEL_KEYWORD:
            self._cancel(res)
            self._complete(res, None, None)
            return

        if prompt is not None:
            info = CommandInfo(cmd_name=prompt.cmd.lower(), args=[])
            raw_options = dict(prompt.options)
            raw_options[prompt.option] = cmd_str
            positionals = list(prompt.args)
            res.context.clear_prompt()
        else:
            try:
                info = parse_command_string(cmd_str)
            except InvalidInputError as exc:
                res.error(exc)
                self._complete(res, None, None)
                return
            raw_options, positionals = {}, []

        cmd = self.registry.get(info.cmd_name)
        if cmd is None or not cmd.is_visible(res.context, info.cmd_name):
            passive = res.context.passive
            if passive is not None and passive.cmd_str and depth < self.passive_depth_limit:
                logger.debug("Passive fallback: %r -> %r", cmd_str, passive.cmd_str)
                self._dispatch(res, f"{passive.cmd_str} {cmd_str}", override, depth + 1)
                return
            res.error(f'"{info.cmd_name}" is not a valid command')
            self._complete(res, info, None)
            return

        if prompt is None:
            raw_options, positionals = parse_flags(
                info.args[1:],
                strings=cmd.typed_keys("string"),
                booleans=cmd.typed_keys("boolean"),
            )
            raw_options.update(override)

        if any(flag in raw_options for flag in HELP_FLAGS) and cmd.name != HELP_COMMAND:
            self._dispatch(res, HELP_COMMAND, {"command": cmd.name}, depth)
            return

        res.cmd_name = cmd.name
        resolution = self.resolver.resolve(cmd, raw_options, positionals, res)
        if not resolution.ok:
            self._complete(res, info, resolution.options)
            return

        res.options = dict(resolution.options)
        res.args = list(resolution.positionals)
        self._invoke(res, cmd, info, resolution.options)

    def _cancel(self, res: Response) -> None:
        prompt = res.context.prompt
        if prompt is None:
            res.warn("there are no active prompts")
            return
        if prompt.previous_context is not None:
            # The previous context may itself be waiting on a prompt; keep it.
            res.context = prompt.previous_context.clone()
        else:
            res.context.clear_prompt()
        res.warn("prompt canceled")

    def _invoke(self, res: Response, cmd: CommandDefinition, info: CommandInfo, options: dict[str, Any]) -> None:
        completion = _Completion(self, res, info)
        completion.options = options
        try:
            if cmd.is_async:
                cmd.invoke(res, options, completion)
            else:
                cmd.invoke(res, options)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Command '%s' raised %s: %s",
                         cmd.name, type(exc).__name__, exc)
            res.error(exc)
            if not res.completed:
                self._complete(res, info, options)
            return

        if not cmd.is_async:
            self._complete(res, info, options)

    def _complete(self, res: Response, info: CommandInfo | None, options: dict[str, Any] | None) -> None:
        if res.completed:
            return
        res.completed = True
        has_prompt = res.context.has_prompt
        self.emit(EVENT_DONE, has_prompt)
        if not has_prompt:
            self.emit(EVENT_COMMAND_COMPLETE, info, res.context.data, options)
