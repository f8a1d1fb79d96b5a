import logging

from promptshell.commands import AsyncInvocation, CommandDefinition, OptionSpec, SyncInvocation
from promptshell.interface import LogType, SessionContext, Shell
from promptshell.interface.session import PassiveState


def test_greet_with_positional_name(shell: Shell, recorder) -> None:
    res = shell.execute("greet Alice")

    assert not res.has_errors
    assert recorder.calls == [("greet", {"name": "Alice"})]
    assert res.cmd_name == "greet"
    assert res.context.prompt is None


def test_missing_required_option_is_reported(shell: Shell, recorder) -> None:
    res = shell.execute("greet")

    assert res.messages(LogType.ERROR) == ['missing parameter "name"']
    assert recorder.calls == []


def test_command_lookup_is_case_insensitive(shell: Shell, recorder) -> None:
    shell.execute("GREET Bob")
    shell.execute("Greet Carol")

    assert [opts["name"] for _, opts in recorder.calls] == ["Bob", "Carol"]


def test_unknown_command(shell: Shell) -> None:
    res = shell.execute("nope")
    assert res.messages(LogType.ERROR) == ['"nope" is not a valid command']


def test_invalid_input_lines(shell: Shell, recorder) -> None:
    for line in ["", "|", "' \"", "greet (Alice)", 'greet "Alice']:
        res = shell.execute(line)
        assert res.messages(LogType.ERROR) == ["Invalid input."], line
    assert recorder.calls == []


def test_password_prompt_flow(shell: Shell, recorder) -> None:
    first = shell.execute("secret")

    assert first.password is True
    assert first.messages() == ["Enter password"]
    prompt = first.context.prompt
    assert (prompt.option, prompt.cmd, prompt.options) == ("pass", "secret", {})
    assert recorder.calls == []

    second = shell.execute("hunter2", first.context)

    assert recorder.calls == [("secret", {"pass": "hunter2"})]
    assert second.context.prompt is None
    assert second.password is False


def test_prompt_answer_is_taken_verbatim(shell: Shell, recorder) -> None:
    first = shell.execute("secret")
    shell.execute("a | b > (c) 'd", first.context)

    assert recorder.last() == {"pass": "a | b > (c) 'd"}


def test_prompt_answer_keeps_unclaimed_positionals(shell: Shell, recorder) -> None:
    shell.register(CommandDefinition(
        name="login",
        invocation=recorder.sync("login"),
        options={
            "password": OptionSpec(prompt=True, password=True),
            "user": OptionSpec(no_name=True, required=True),
        },
    ))

    first = shell.execute("login alice extra")
    assert first.context.prompt.args == ["alice", "extra"]

    restored = SessionContext.from_dict(first.to_dict()["context"])
    second = shell.execute("hunter2", restored)

    assert not second.has_errors
    assert recorder.calls == [("login", {"password": "hunter2", "user": "alice"})]
    assert second.args == ["extra"]


def test_prompt_survives_dict_round_trip(shell: Shell, recorder) -> None:
    first = shell.execute("secret")
    shell.execute("hunter2", first.to_dict()["context"])

    assert recorder.last() == {"pass": "hunter2"}


def test_execute_does_not_mutate_callers_context(shell: Shell) -> None:
    context = SessionContext()
    res = shell.execute("secret", context)

    assert res.context.prompt is not None
    assert context.prompt is None


def test_generated_prompt_message_and_halt(shell: Shell, recorder) -> None:
    shell.register(CommandDefinition(
        name="pair",
        invocation=recorder.sync("pair"),
        options={
            "first": OptionSpec(prompt=True),
            "second": OptionSpec(required=True),
        },
    ))

    res = shell.execute("pair")

    assert res.messages() == ["Enter value for first."]
    assert not res.has_errors
    assert res.password is False

    res = shell.execute("one", res.context)
    assert res.messages(LogType.ERROR) == ['missing parameter "second"']

    res = shell.execute("pair --second 2")
    assert res.context.prompt.options == {"second": 2}
    shell.execute("one", res.context)
    assert recorder.last() == {"second": 2, "first": "one"}


def test_cancel_pending_prompt(shell: Shell, recorder) -> None:
    first = shell.execute("secret")
    res = shell.execute("CANCEL", first.context)

    assert res.messages(LogType.WARN) == ["prompt canceled"]
    assert res.context.prompt is None
    assert recorder.calls == []


def test_cancel_restores_previous_context(shell: Shell) -> None:
    previous = SessionContext(passive=PassiveState("greet"), data={"user": "ada"})
    context = SessionContext()
    context.set_prompt("pass", "secret", {}, previous_context=previous)

    res = shell.execute("cancel", context)

    assert res.context.prompt is None
    assert res.context.passive == PassiveState("greet")
    assert res.context.data == {"user": "ada"}


def test_cancel_restores_pending_outer_prompt(shell: Shell, recorder) -> None:
    outer = SessionContext()
    outer.set_prompt("name", "greet")
    context = SessionContext(data={"user": "ada"})
    context.set_prompt("pass", "secret", {}, previous_context=outer)

    res = shell.execute("cancel", context)

    assert res.messages(LogType.WARN) == ["prompt canceled"]
    assert (res.context.prompt.option, res.context.prompt.cmd) == ("name", "greet")
    assert res.has_prompt

    shell.execute("Alice", res.context)
    assert recorder.last() == {"name": "Alice"}


def test_cancel_without_prompt_only_warns(shell: Shell, recorder) -> None:
    res = shell.execute("cancel")

    assert res.messages(LogType.WARN) == ["there are no active prompts"]
    assert not res.has_errors
    assert recorder.calls == []


def test_passive_fallback(shell: Shell, recorder) -> None:
    context = SessionContext()
    context.set_passive("greet")

    res = shell.execute("Carol", context)

    assert not res.has_errors
    assert recorder.last() == {"name": "Carol"}
    assert res.context.passive == PassiveState("greet")


def test_passive_fallback_recursion_is_bounded(shell: Shell, events) -> None:
    context = SessionContext()
    context.set_passive("nope")

    res = shell.execute("again", context)

    assert res.messages(LogType.ERROR) == ['"nope" is not a valid command']
    assert [event[0] for event in events] == ["done", "command_complete"]


def test_passive_depth_limit_zero_disables_fallback(registry, recorder) -> None:
    shell = Shell(registry, passive_depth_limit=0)
    context = SessionContext()
    context.set_passive("greet")

    res = shell.execute("Carol", context)

    assert res.messages(LogType.ERROR) == ['"carol" is not a valid command']
    assert recorder.calls == []


def test_help_flag_redirects_to_help(shell: Shell, recorder) -> None:
    for line in ["greet --help", "greet -?"]:
        res = shell.execute(line)
        assert res.cmd_name == "help"
        assert "Say hello." in "\n".join(res.messages())
    assert recorder.calls == []


def test_access_predicate_hides_command(shell: Shell, recorder) -> None:
    shell.register(CommandDefinition(
        name="admin",
        invocation=recorder.sync("admin"),
        access=lambda context, name: bool(context.data and context.data.get("admin")),
    ))

    denied = shell.execute("admin")
    allowed = shell.execute("admin", SessionContext(data={"admin": True}))

    assert denied.messages(LogType.ERROR) == ['"admin" is not a valid command']
    assert not allowed.has_errors
    assert recorder.names() == ["admin"]


def test_aliases_defaults_and_types(shell: Shell, recorder) -> None:
    shell.register(CommandDefinition(
        name="tag",
        invocation=recorder.sync("tag"),
        options={
            "label": OptionSpec(type="string", aliases=["l"]),
            "count": OptionSpec(default=3),
            "force": OptionSpec(type="boolean", default=False),
        },
    ))

    shell.execute("tag -l 007")
    assert recorder.last() == {"label": "007", "count": 3, "force": False}

    shell.execute("tag --label 7 --count 5 --force extra")
    assert recorder.last() == {"label": "7", "count": 5, "force": True}


def test_leftover_positionals_go_to_args(shell: Shell, recorder) -> None:
    res = shell.execute("greet Alice Bob")

    assert recorder.last() == {"name": "Alice"}
    assert res.args == ["Bob"]


def test_override_options_win_over_parsed_flags(shell: Shell, recorder) -> None:
    res = shell.execute("greet Alice", options={"name": "Zed"})

    assert recorder.last() == {"name": "Zed"}
    assert res.args == ["Alice"]


def test_validation_errors_are_collected(shell: Shell, recorder) -> None:
    def boom(value):
        raise RuntimeError("validator broke")

    shell.register(CommandDefinition(
        name="connect",
        invocation=recorder.sync("connect"),
        options={
            "port": OptionSpec(validate=r"^\d+$"),
            "host": OptionSpec(validate=boom),
            "user": OptionSpec(required=True),
        },
    ))

    res = shell.execute("connect --port abc --host h")

    assert res.messages(LogType.ERROR) == [
        'invalid value for "port"',
        'invalid value for "host"',
        'missing parameter "user"',
    ]
    assert recorder.calls == []

    res = shell.execute("connect --port 8080 --user root")
    assert not res.has_errors
    assert recorder.last() == {"port": 8080, "user": "root"}


def test_sync_fault_becomes_error_entry(shell: Shell, events) -> None:
    def _invoke(res, options):
        res.log("working")
        raise RuntimeError("kaboom")

    shell.register(CommandDefinition(name="crash", invocation=SyncInvocation(_invoke)))

    res = shell.execute("crash")

    assert res.messages() == ["working", "kaboom"]
    assert res.messages(LogType.ERROR) == ["kaboom"]
    assert [event[0] for event in events] == ["done", "command_complete"]


def test_async_completion_fires_once(async_shell: Shell, async_calls, events, caplog) -> None:
    res = async_shell.execute("fetch")

    assert events == []
    assert res.completed is False
    assert len(async_calls) == 1

    done = async_calls[0]
    done()
    with caplog.at_level(logging.DEBUG, logger="promptshell"):
        done("late")

    assert res.completed is True
    assert [event[0] for event in events] == ["done", "command_complete"]
    assert not res.has_errors
    assert "Ignoring repeated completion" in caplog.text


def test_async_done_with_error(async_shell: Shell, async_calls, events) -> None:
    res = async_shell.execute("fetch")
    async_calls[0]("network down")

    assert res.messages(LogType.ERROR) == ["network down"]
    assert events[0] == ("done", False)


def test_async_fault_before_done_completes_immediately(shell: Shell, events) -> None:
    captured = []

    def _invoke(res, options, done):
        captured.append(done)
        raise ValueError("bad start")

    shell.register(CommandDefinition(name="early", invocation=AsyncInvocation(_invoke)))
    res = shell.execute("early")
    captured[0]()

    assert res.messages(LogType.ERROR) == ["bad start"]
    assert [event[0] for event in events] == ["done", "command_complete"]


def test_completion_events_payload(shell: Shell, events) -> None:
    data = {"session": 1}
    shell.execute("greet Alice", SessionContext(data=data))

    assert events[0] == ("done", False)
    _, info, payload, options = events[1]
    assert info.cmd_name == "greet"
    assert payload is data
    assert options == {"name": "Alice"}


def test_prompt_suppresses_command_complete(shell: Shell, events) -> None:
    shell.execute("secret")
    assert events == [("done", True)]


def test_failing_listener_does_not_escape(shell: Shell, caplog) -> None:
    def bad_listener(has_prompt):
        raise RuntimeError("listener broke")

    shell.on("done", bad_listener)
    with caplog.at_level(logging.ERROR, logger="promptshell"):
        res = shell.execute("greet Alice")

    assert not res.has_errors
    assert "Listener for 'done' failed" in caplog.text


def test_off_removes_listener(shell: Shell) -> None:
    seen = []
    handler = shell.on("done", seen.append)
    shell.off("done", handler)
    shell.execute("greet Alice")
    assert seen == []


def test_repeated_execution_is_idempotent(shell: Shell, recorder) -> None:
    context = SessionContext(data={"n": 1})
    first = shell.execute("greet Alice", context)
    second = shell.execute("greet Alice", context)

    assert first.to_dict() == second.to_dict()
    assert recorder.calls[0] == recorder.calls[1]
