#!/usr/bin/env python3
# promptshell/commands/command_types.py
from __future__ import annotations

"""
Command data structures.

This module defines:
- OptionSpec: declarative description of one command option.
- SyncInvocation / AsyncInvocation: the two ways a command can run.
- CommandDefinition: a registered command with its options and access predicate.
"""

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Mapping, Protocol, Union

if TYPE_CHECKING:  # pragma: no cover
    from promptshell.interface.response import Response
    from promptshell.interface.session import SessionContext


OPTION_TYPES = ("string", "boolean")

DoneCallback = Callable[..., None]
Validator = Union["re.Pattern[str]", Callable[[Any], Any]]


class SyncCallback(Protocol):
    """Protocol for a command that runs to completion before returning."""

    def __call__(self, res: "Response", options: dict[str, Any]) -> Any:  # pragma: no cover - signature only
        ...


class AsyncCallback(Protocol):
    """Protocol for a command that signals completion through `done`."""

    def __call__(self, res: "Response", options: dict[str, Any], done: DoneCallback) -> Any:  # pragma: no cover
        ...


def allow_all(context: "SessionContext", name: str) -> bool:
    """Default access predicate: every command is visible."""
    return True


@dataclass(slots=True)
class OptionSpec:
    """
    Shape, source and validation rules of one option.

    Attributes:
        type: "string", "boolean" or None; controls flag coercion.
        aliases: Alternate option names that may supply the value.
        default: Value used when the option is absent (None means no default).
        required: Absence after resolution is an error.
        no_name: The option may be filled from leftover positional arguments.
        prompt: False, True (generated message) or a custom prompt message.
        password: The prompt answer is sensitive and should be masked.
        validate: A compiled pattern, a pattern string or a predicate.
        description: Help text.
    """
    type: str | None = None
    aliases: list[str] = field(default_factory=list)
    default: Any = None
    required: bool = False
    no_name: bool = False
    prompt: bool | str = False
    password: bool = False
    validate: Validator | str | None = None
    description: str = ""

    def __post_init__(self) -> None:
        if self.type is not None:
            self.type = self.type.lower()
            if self.type not in OPTION_TYPES:
                raise ValueError(
                    f"Option type must be one of {OPTION_TYPES}, got {self.type!r}")
        if isinstance(self.aliases, str):
            self.aliases = [self.aliases]
        else:
            self.aliases = list(self.aliases)
        if isinstance(self.validate, str):
            self.validate = re.compile(self.validate)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, Any]) -> "OptionSpec":
        """Build a spec from a plain dict, accepting `noName` as well as `no_name`."""
        values = dict(raw)
        if "noName" in values:
            values["no_name"] = values.pop("noName")
        known = set(cls.__dataclass_fields__)  # type: ignore[attr-defined]
        unknown = sorted(set(values) - known)
        if unknown:
            raise ValueError(f"Unknown option settings: {', '.join(unknown)}")
        return cls(**values)

    def prompt_message(self, key: str) -> str:
        if isinstance(self.prompt, str):
            return self.prompt
        return f"Enter value for {key}."


@dataclass(frozen=True, slots=True)
class SyncInvocation:
    """Command body that finishes inside the `execute` call."""
    fn: SyncCallback


@dataclass(frozen=True, slots=True)
class AsyncInvocation:
    """Command body that is handed a `done(err=None)` callback."""
    fn: AsyncCallback


Invocation = Union[SyncInvocation, AsyncInvocation]


def _coerce_options(options: Mapping[str, Any] | None) -> dict[str, OptionSpec]:
    coerced: dict[str, OptionSpec] = {}
    for key, spec in (options or {}).items():
        coerced[key] = spec if isinstance(
            spec, OptionSpec) else OptionSpec.from_mapping(spec)
    return coerced


@dataclass(slots=True)
class CommandDefinition:
    """
    A registered command.

    Important fields:
        name: Unique command name (stored lowercase).
        invocation: SyncInvocation or AsyncInvocation.
        options: Option key -> OptionSpec; insertion order is validation order.
        access: Predicate (context, name) -> bool gating visibility and execution.
        description: Short, user-facing description.
        category: Logical group for help output.
        module: Python module path where the command is defined.
    """

    name: str
    invocation: Invocation
    options: dict[str, OptionSpec] = field(default_factory=dict)
    access: Callable[["SessionContext", str], bool] = allow_all
    description: str = ""
    category: str = "general"
    module: str = field(default="", repr=False)

    def __post_init__(self) -> None:
        self.name = self.name.lower()
        self.options = _coerce_options(self.options)
        if not isinstance(self.invocation, (SyncInvocation, AsyncInvocation)):
            raise TypeError(
                f"Command '{self.name}' needs a SyncInvocation or AsyncInvocation")

    @property
    def is_async(self) -> bool:
        return isinstance(self.invocation, AsyncInvocation)

    def is_visible(self, context: "SessionContext", name: str | None = None) -> bool:
        """Run the access predicate for this command."""
        return bool(self.access(context, name or self.name))

    def typed_keys(self, option_type: str) -> list[str]:
        """Return option keys (and their aliases) declared with `option_type`."""
        keys: list[str] = []
        for key, spec in self.options.items():
            if spec.type == option_type:
                keys.append(key)
                keys.extend(spec.aliases)
        return keys

    def invoke(self, res: "Response", options: dict[str, Any], done: DoneCallback | None = None) -> Any:
        """Execute the underlying callback; async commands also receive `done`."""
        if isinstance(self.invocation, AsyncInvocation):
            if done is None:
                raise TypeError(
                    f"Asynchronous command '{self.name}' needs a done callback")
            return self.invocation.fn(res, options, done)
        return self.invocation.fn(res, options)
