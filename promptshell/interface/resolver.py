#!/usr/bin/env python3
# promptshell/interface/resolver.py
from __future__ import annotations

"""
Option resolution: turn parsed arguments into validated command options.

Each declared option is processed in order:
  1) positional fill (no_name options claim the first leftover positional)
  2) alias merge (first alias present supplies the value)
  3) prompt (hard halt: the next input line answers this option)
  4) default fill
  5) validation (errors are collected, resolution continues)
  6) required check (errors are collected, resolution continues)
"""

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Sequence

from promptshell.commands import CommandDefinition
from promptshell.interface.response import Response

logger = logging.getLogger(__name__)


class ResolutionOutcome(Enum):
    OK = "ok"
    PROMPT = "prompt"
    INVALID = "invalid"


class ValidationOutcome(Enum):
    VALID = "valid"
    INVALID = "invalid"
    FAULTED = "faulted"


@dataclass(slots=True)
class Resolution:
    outcome: ResolutionOutcome
    options: dict[str, Any] = field(default_factory=dict)
    positionals: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome is ResolutionOutcome.OK


def run_validator(validator: Any, value: Any) -> ValidationOutcome:
    """
    Apply a pattern or predicate validator to `value`.

    Patterns are searched in the stringified value. A predicate that raises
    is reported as FAULTED; callers treat it like INVALID.
    """
    if isinstance(validator, str):
        validator = re.compile(validator)
    if isinstance(validator, re.Pattern):
        text = value if isinstance(value, str) else _stringify(value)
        return ValidationOutcome.VALID if validator.search(text) else ValidationOutcome.INVALID
    if callable(validator):
        try:
            passed = validator(value)
        except Exception as exc:  # noqa: BLE001
            logger.debug("Validator %r raised %s: %s",
                         validator, type(exc).__name__, exc)
            return ValidationOutcome.FAULTED
        return ValidationOutcome.VALID if passed else ValidationOutcome.INVALID
    raise TypeError(f"Unsupported validator: {validator!r}")


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return ",".join(_stringify(item) for item in value)
    return str(value)


class OptionResolver:
    """Merges and validates raw options against a command's option specs."""

    def resolve(
        self,
        cmd: CommandDefinition,
        raw_options: Mapping[str, Any],
        positionals: Sequence[str] = (),
        res: Response | None = None,
    ) -> Resolution:
        res = res if res is not None else Response()
        # Working copies; the caller's mapping is never aliased.
        options: dict[str, Any] = dict(raw_options)
        leftovers: list[str] = list(positionals)
        ok = True

        for key, spec in cmd.options.items():
            if key not in options and spec.no_name and leftovers:
                options[key] = leftovers.pop(0)

            if key not in options and not spec.no_name and spec.aliases:
                for alias in spec.aliases:
                    if alias in options:
                        options[key] = options.pop(alias)
                        break

            if key not in options and spec.prompt:
                res.context.set_prompt(key, cmd.name, options, args=leftovers)
                if spec.password:
                    res.password = True
                res.log(spec.prompt_message(key))
                return Resolution(ResolutionOutcome.PROMPT, options, leftovers)

            if key not in options and spec.default is not None:
                options[key] = spec.default

            if key in options and spec.validate is not None:
                outcome = run_validator(spec.validate, options[key])
                if outcome is not ValidationOutcome.VALID:
                    ok = False
                    res.error(f'invalid value for "{key}"')

            if spec.required and key not in options:
                ok = False
                res.error(f'missing parameter "{key}"')

        outcome = ResolutionOutcome.OK if ok else ResolutionOutcome.INVALID
        return Resolution(outcome, options, leftovers)
