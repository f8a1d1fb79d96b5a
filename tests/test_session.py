from promptshell.interface import LogType, Response, SessionContext
from promptshell.interface.session import PassiveState, PromptState


def test_clone_copies_state_but_shares_data() -> None:
    data = {"user": "ada"}
    context = SessionContext(data=data)
    context.set_prompt("name", "GREET", {"loud": True})
    context.set_passive("greet")

    clone = context.clone()
    clone.prompt.options["loud"] = False
    clone.clear_passive()

    assert context.prompt.options == {"loud": True}
    assert context.prompt.cmd == "greet"
    assert context.passive == PassiveState("greet")
    assert clone.data is data


def test_context_dict_round_trip_with_previous_context() -> None:
    previous = SessionContext(passive=PassiveState("db"), data=[1, 2])
    context = SessionContext(data={"k": "v"})
    context.set_prompt("pass", "login", {"user": "root"}, previous_context=previous)

    restored = SessionContext.from_dict(context.to_dict())

    assert restored == context
    assert isinstance(restored.prompt, PromptState)
    assert restored.prompt.previous_context.passive.cmd_str == "db"


def test_from_dict_accepts_empty_values() -> None:
    assert SessionContext.from_dict(None) == SessionContext()
    assert SessionContext.from_dict({}) == SessionContext()


def test_response_collects_typed_entries() -> None:
    res = Response()
    res.log("hello").warn("careful").error(KeyError()).debug("trace")
    res.error(ValueError("broken"))

    assert res.messages() == ["hello", "careful", "KeyError", "trace", "broken"]
    assert res.messages("error") == ["KeyError", "broken"]
    assert res.has_errors
    assert res.to_dict()["log"][1] == {"message": "careful", "type": "warn"}
    assert res.to_dict()["password"] is False


def test_response_clones_incoming_context() -> None:
    context = SessionContext()
    res = Response(context=context)
    res.context.set_passive("x")

    assert context.passive is None
    assert res.messages(LogType.INFO) == []
