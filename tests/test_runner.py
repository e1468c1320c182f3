from __future__ import annotations

import io
from pathlib import Path

import pytest

from tests.support.harness import Environment, FwInt, FwjsRuntimeError, ParseError
from fwjs_ref import runner
from fwjs_ref.utils import DEBUG_PY_TRACE_ENV, RECURSION_LIMIT_ENV, configured_recursion_limit, stringify


def test_main_runs_literal_source(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["print(1 + 2); print(true); print(null);"]) == 0

    out = capsys.readouterr().out
    assert out.splitlines() == ["3", "true", "null"]


def test_main_runs_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "prog.fwjs"
    path.write_text("var x = 20;\nprint(x + 1);\n", encoding="utf-8")

    assert runner.main([str(path)]) == 0
    assert capsys.readouterr().out == "21\n"


def test_main_reads_stdin(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("print(7);"))

    assert runner.main(["-"]) == 0
    assert capsys.readouterr().out == "7\n"


def test_main_print_result(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["--print-result", "function f(a) { a; } f;"]) == 0
    assert capsys.readouterr().out == "function(a) {...}\n"


def test_main_dump_ast(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["--dump-ast", "1 + x;"]) == 0
    assert capsys.readouterr().out.splitlines() == ["binop +", "  literal 1", "  var x"]


def test_main_runtime_error_exits_nonzero(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["print(1);\n1 / 0;"]) == 1

    captured = capsys.readouterr()
    assert captured.out == "1\n"
    assert captured.err.startswith("Error: Division by zero in '/' (line 2")


def test_main_parse_error_exits_nonzero(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["var = 1;"]) == 1
    assert "Error:" in capsys.readouterr().err


def test_main_runaway_recursion_is_reported(capsys: pytest.CaptureFixture[str]) -> None:
    assert runner.main(["function f(n) { f(n + 1); } f(0);"]) == 1
    assert "Maximum recursion depth exceeded" in capsys.readouterr().err


def test_main_rejects_unknown_flag() -> None:
    with pytest.raises(SystemExit):
        runner.main(["--nope", "1;"])


def test_load_source_prefers_existing_path(tmp_path: Path) -> None:
    path = tmp_path / "x.fwjs"
    path.write_text("2;", encoding="utf-8")

    assert runner._load_source(str(path)) == "2;"
    assert runner._load_source("3;") == "3;"


def test_report_error_includes_python_traceback_when_enabled(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    monkeypatch.setenv(DEBUG_PY_TRACE_ENV, "1")

    try:
        runner.run("true + 1;")
    except FwjsRuntimeError as exc:
        runner.report_error(exc)

    err = capsys.readouterr().err
    assert err.startswith("Error: ")
    assert "Python traceback:" in err


def test_run_reuses_given_environment() -> None:
    env = Environment()
    runner.run("var total = 1;", env=env)

    assert runner.run("total = total + 1; total;", env=env) == FwInt(2)


def test_repl_eval_keeps_bindings_and_tolerates_missing_semicolon() -> None:
    env = Environment()
    runner.repl_eval("var n = 4;", env)

    assert runner.repl_eval("n * 2", env) == FwInt(8)
    assert runner.repl_eval("function sq(x) { x * x; }", env) is not None
    assert runner.repl_eval("sq(n)", env) == FwInt(16)


def test_repl_eval_reraises_first_parse_error() -> None:
    with pytest.raises(ParseError):
        runner.repl_eval("var = ", Environment())


@pytest.mark.parametrize(
    "raw, expected",
    [
        pytest.param(None, None, id="unset"),
        pytest.param("5000", 5000, id="valid"),
        pytest.param("abc", None, id="not-a-number"),
        pytest.param("-3", None, id="negative"),
    ],
)
def test_configured_recursion_limit(monkeypatch: pytest.MonkeyPatch, raw: str | None, expected: int | None) -> None:
    if raw is None:
        monkeypatch.delenv(RECURSION_LIMIT_ENV, raising=False)
    else:
        monkeypatch.setenv(RECURSION_LIMIT_ENV, raw)

    assert configured_recursion_limit() == expected


def test_stringify_values() -> None:
    assert stringify(FwInt(-3)) == "-3"
    assert stringify(runner.run("null;")) == "null"
    assert stringify(runner.run("1 == 1;")) == "true"
    assert stringify(runner.run("function(a, b) {};")) == "function(a, b) {...}"


def test_main_treats_overlong_argument_as_source(capsys: pytest.CaptureFixture[str]) -> None:
    src = "print(1);" + " " * 300 + "print(2);"

    assert runner.main([src]) == 0
    assert capsys.readouterr().out == "1\n2\n"


def test_main_reports_undecodable_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "latin.fwjs"
    path.write_bytes(b"print(1); // \xff\xfe")

    assert runner.main([str(path)]) == 1

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err.startswith("Error: ")


def test_repl_eval_entry_ending_in_line_comment() -> None:
    assert runner.repl_eval("1 + 1 // two", Environment()) == FwInt(2)


def test_main_handles_moderately_deep_recursion(capsys: pytest.CaptureFixture[str]) -> None:
    src = "function sum(n) { if (n == 0) { 0; } else { n + sum(n - 1); } } sum(200);"

    assert runner.main(["--print-result", src]) == 0
    assert capsys.readouterr().out == "20100\n"
