#!/usr/bin/env python3
# promptshell/interface/session.py
from __future__ import annotations

"""
Per-session state threaded through `Shell.execute`.

The shell keeps nothing between calls; the host stores the context returned
on each Response and passes it back with the next command line.
"""

import copy
from dataclasses import dataclass, field
from typing import Any, Mapping, Sequence


@dataclass(slots=True)
class PromptState:
    """
    A pending question: the next input line answers `option` of `cmd`.

    `options` and `args` (positionals no option claimed yet) are what the
    command line had resolved so far; both are restored with the answer.
    """
    option: str
    cmd: str
    options: dict[str, Any] = field(default_factory=dict)
    args: list[str] = field(default_factory=list)
    previous_context: "SessionContext | None" = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "option": self.option,
            "cmd": self.cmd,
            "options": copy.deepcopy(self.options),
            "args": list(self.args),
            "previous_context": (
                self.previous_context.to_dict() if self.previous_context is not None else None),
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "PromptState":
        previous = raw.get("previous_context")
        return cls(
            option=raw["option"],
            cmd=raw["cmd"],
            options=dict(raw.get("options") or {}),
            args=list(raw.get("args") or []),
            previous_context=SessionContext.from_dict(previous) if previous else None,
        )


@dataclass(slots=True)
class PassiveState:
    """Fallback command prefix applied to input that does not resolve."""
    cmd_str: str

    def to_dict(self) -> dict[str, Any]:
        return {"cmd_str": self.cmd_str}


@dataclass(slots=True)
class SessionContext:
    """
    Mutable session state.

    Attributes:
        prompt: Pending prompt, if any; at most one at a time.
        passive: Passive fallback, independent of the prompt.
        data: Opaque host payload, carried by reference.
    """
    prompt: PromptState | None = None
    passive: PassiveState | None = None
    data: Any = None

    @property
    def has_prompt(self) -> bool:
        return self.prompt is not None

    def set_prompt(
        self,
        option: str,
        cmd: str,
        options: Mapping[str, Any] | None = None,
        *,
        args: Sequence[str] = (),
        previous_context: "SessionContext | None" = None,
    ) -> PromptState:
        self.prompt = PromptState(
            option=option,
            cmd=cmd.lower(),
            options=dict(options or {}),
            args=list(args),
            previous_context=previous_context,
        )
        return self.prompt

    def clear_prompt(self) -> None:
        self.prompt = None

    def set_passive(self, cmd_str: str) -> None:
        self.passive = PassiveState(cmd_str)

    def clear_passive(self) -> None:
        self.passive = None

    def clone(self) -> "SessionContext":
        """Copy prompt and passive state; `data` stays the same object."""
        return SessionContext(
            prompt=copy.deepcopy(self.prompt),
            passive=copy.deepcopy(self.passive),
            data=self.data,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "prompt": self.prompt.to_dict() if self.prompt is not None else None,
            "passive": self.passive.to_dict() if self.passive is not None else None,
            "data": self.data,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any] | None) -> "SessionContext":
        if not raw:
            return cls()
        prompt = raw.get("prompt")
        passive = raw.get("passive")
        return cls(
            prompt=PromptState.from_dict(prompt) if prompt else None,
            passive=PassiveState(passive["cmd_str"]) if passive else None,
            data=raw.get("data"),
        )
