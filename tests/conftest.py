import logging
from typing import Any

import pytest

from promptshell.commands import (
    AsyncInvocation,
    CommandDefinition,
    CommandRegistry,
    OptionSpec,
    SyncInvocation,
)
from promptshell.interface import Shell


class Recorder:
    """Collects the options each command invocation received."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []

    def sync(self, name: str):
        def _invoke(res, options):
            self.calls.append((name, dict(options)))
            res.log(f"{name} ran")
        return SyncInvocation(_invoke)

    def names(self) -> list[str]:
        return [name for name, _ in self.calls]

    def last(self) -> dict[str, Any]:
        return self.calls[-1][1]


@pytest.fixture(autouse=True)
def _reset_promptshell_logger():
    yield
    logger = logging.getLogger("promptshell")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def registry(recorder: Recorder) -> CommandRegistry:
    registry = CommandRegistry()
    registry.register(CommandDefinition(
        name="greet",
        invocation=recorder.sync("greet"),
        options={"name": OptionSpec(required=True, no_name=True, description="Who to greet.")},
        description="Say hello.",
    ))
    registry.register(CommandDefinition(
        name="secret",
        invocation=recorder.sync("secret"),
        options={"pass": OptionSpec(prompt="Enter password", password=True)},
    ))
    return registry


@pytest.fixture
def shell(registry: CommandRegistry) -> Shell:
    return Shell(registry)


@pytest.fixture
def events(shell: Shell) -> list[tuple]:
    seen: list[tuple] = []
    shell.on("done", lambda has_prompt: seen.append(("done", has_prompt)))
    shell.on("command_complete",
             lambda info, data, options: seen.append(("command_complete", info, data, options)))
    return seen


@pytest.fixture
def async_calls() -> list:
    return []


@pytest.fixture
def async_shell(shell: Shell, async_calls: list) -> Shell:
    def _invoke(res, options, done):
        async_calls.append(done)
        res.log("started")

    shell.register(CommandDefinition(name="fetch", invocation=AsyncInvocation(_invoke)))
    return shell
