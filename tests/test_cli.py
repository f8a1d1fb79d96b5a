import io

from promptshell.interface import BaseCLI, LogType, Response, Shell, make_cli, render_response, run_repl


class ScriptedCLI(BaseCLI):
    """Feeds prepared lines and records whether each read was masked."""

    def __init__(self, shell: Shell, lines: list[str]) -> None:
        super().__init__(shell)
        self.lines = list(lines)
        self.reads: list[tuple[str, bool]] = []
        self.torn_down = False

    def get_line(self, password: bool = False) -> str:
        if not self.lines:
            raise EOFError
        line = self.lines.pop(0)
        self.reads.append((line, password))
        return line

    def teardown(self) -> None:
        self.torn_down = True


def test_render_response_plain_skips_debug() -> None:
    res = Response()
    res.log("hello").warn("careful").debug("hidden").error("bad")
    out = io.StringIO()

    render_response(res, file=out, color=False)

    assert out.getvalue() == "hello\ncareful\nbad\n"


def test_render_response_colors_by_type() -> None:
    res = Response()
    res.error("bad")
    out = io.StringIO()

    render_response(res, file=out, color=True)

    assert out.getvalue() == "\x1b[31mbad\x1b[0m\n"


def test_run_repl_threads_context_and_masks_password(shell: Shell, recorder) -> None:
    cli = ScriptedCLI(shell, ["greet Alice", "secret", " hunter2 ", "", "exit", "greet Never"])
    out = io.StringIO()

    context = run_repl(shell, cli, file=out)

    assert recorder.calls == [("greet", {"name": "Alice"}), ("secret", {"pass": " hunter2 "})]
    assert cli.reads[2] == (" hunter2 ", True)
    assert cli.reads[3][1] is False
    assert cli.lines == ["greet Never"]
    assert cli.torn_down
    assert context.prompt is None
    assert "Enter password" in out.getvalue()


def test_run_repl_exit_word_answers_pending_prompt(shell: Shell, recorder) -> None:
    cli = ScriptedCLI(shell, ["secret", "quit"])

    run_repl(shell, cli, file=io.StringIO())

    assert recorder.last() == {"pass": "quit"}


def test_run_repl_stops_on_eof(shell: Shell) -> None:
    cli = ScriptedCLI(shell, ["secret"])

    context = run_repl(shell, cli, file=io.StringIO())

    assert context.prompt.cmd == "secret"
    assert shell.execute("cancel", context).messages(LogType.WARN) == ["prompt canceled"]


def test_make_cli_without_terminal_uses_plain_input(shell: Shell, monkeypatch) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO())

    cli = make_cli(shell, "$ ")

    assert type(cli) is BaseCLI
    assert cli.prompt_text == "$ "
