import io
from pathlib import Path

import pytest

from nufmt import __version__
from nufmt.cli import CHECK_FAILED_EXIT, ERROR_EXIT, SUCCESS_EXIT, main

INVALID = "# beginning of script comment\n\nlet one = 1\n"
VALID = "# beginning of script comment\nlet one = 1\n"


@pytest.fixture(autouse=True)
def _isolated_cwd(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Keeps a nufmt.nuon in the real working directory from leaking in.
    monkeypatch.chdir(tmp_path)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


def _format_one(tmp_path: Path, source: str) -> str:
    path = _write(tmp_path / "test.nu", source)
    assert main([str(path)]) == SUCCESS_EXIT
    return path.read_text(encoding="utf-8")


def test_failure_with_invalid_config(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "nufmt.nuon", "{unknown: 1}")

    assert main(["--config", str(config), str(tmp_path)]) == ERROR_EXIT
    assert "error" in capsys.readouterr().err


def test_failure_with_missing_config_file(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--config", "path/that/does/not/exist/nufmt.nuon", "a.nu"]) == ERROR_EXIT
    assert "error" in capsys.readouterr().err


def test_failure_with_missing_file_to_format(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["path/that/does/not/exist/a.nu"]) == ERROR_EXIT
    assert "error" in capsys.readouterr().err


def test_failure_without_any_input(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == ERROR_EXIT
    assert "error" in capsys.readouterr().err


def test_warning_when_no_files_are_detected(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--dry-run", str(tmp_path)]) == SUCCESS_EXIT
    assert "warning" in capsys.readouterr().out


def test_warning_when_every_file_is_excluded(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "nufmt.nuon", '{exclude: ["a*"]}')
    _write(tmp_path / "a.nu", INVALID)

    assert main(["--config", str(config), "--dry-run", str(tmp_path)]) == SUCCESS_EXIT
    assert "warning" in capsys.readouterr().out


def test_files_are_reformatted(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "nufmt.nuon", '{exclude: ["a*"]}')
    file_a = _write(tmp_path / "a.nu", INVALID)
    file_b = _write(tmp_path / "b.nu", INVALID)

    assert main(["--config", str(config), str(tmp_path)]) == SUCCESS_EXIT
    assert file_a.read_text(encoding="utf-8") == INVALID
    assert file_b.read_text(encoding="utf-8") == VALID
    assert f"reformatted: {file_b}" in capsys.readouterr().out


def test_files_are_checked(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    config = _write(tmp_path / "nufmt.nuon", '{exclude: ["a*"]}')
    file_a = _write(tmp_path / "a.nu", INVALID)
    file_b = _write(tmp_path / "b.nu", INVALID)

    assert main(["--config", str(config), "--dry-run", str(tmp_path)]) == CHECK_FAILED_EXIT
    assert file_a.read_text(encoding="utf-8") == INVALID
    assert file_b.read_text(encoding="utf-8") == INVALID
    assert f"would reformat: {file_b}" in capsys.readouterr().out


def test_config_in_working_directory_is_picked_up(tmp_path: Path) -> None:
    _write(tmp_path / "nufmt.nuon", "{indent: 2}")

    assert _format_one(tmp_path, "loop { break }") == "loop {\n  break\n}\n"


def test_syntax_error_fails_and_leaves_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = _write(tmp_path / "broken.nu", "let x = (1 + \n")

    assert main([str(path)]) == ERROR_EXIT
    assert path.read_text(encoding="utf-8") == "let x = (1 + \n"
    assert f"error: {path}:" in capsys.readouterr().err


def test_deeply_nested_file_fails_and_others_are_checked(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    deep_source = "let x = " + "(" * 100 + "1" + ")" * 100 + "\n"
    deep = _write(tmp_path / "deep.nu", deep_source)
    ok = _write(tmp_path / "ok.nu", INVALID)

    assert main(["--dry-run", str(tmp_path)]) == ERROR_EXIT
    captured = capsys.readouterr()
    assert f"error: {deep}:" in captured.err
    assert f"would reformat: {ok}" in captured.out
    assert deep.read_text(encoding="utf-8") == deep_source


def test_format_let_statement(tmp_path: Path) -> None:
    assert _format_one(tmp_path, "let   x   =   1").strip() == "let x = 1"


def test_format_def_statement(tmp_path: Path) -> None:
    content = _format_one(tmp_path, "def foo [x: int] { $x + 1 }")

    assert "def foo" in content
    assert "$x + 1" in content


def test_format_if_else(tmp_path: Path) -> None:
    content = _format_one(tmp_path, "if true { echo yes } else { echo no }")

    assert "if true" in content
    assert "else" in content


def test_format_pipeline(tmp_path: Path) -> None:
    assert " | " in _format_one(tmp_path, "ls|get name")


def test_format_preserves_comments(tmp_path: Path) -> None:
    content = _format_one(tmp_path, "# comment\nlet x = 1")

    assert "# comment" in content
    assert "let x = 1" in content


def test_format_is_idempotent(tmp_path: Path) -> None:
    first = _format_one(tmp_path, "let x = 1\nlet y = 2")

    assert main([str(tmp_path / "test.nu")]) == SUCCESS_EXIT
    assert (tmp_path / "test.nu").read_text(encoding="utf-8") == first


def test_format_closure(tmp_path: Path) -> None:
    assert "{ |x|" in _format_one(tmp_path, "{|x| $x * 2 }")


def test_stdin_is_formatted_to_stdout(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("ls|get name"))

    assert main(["--stdin"]) == SUCCESS_EXIT
    assert capsys.readouterr().out == "ls | get name\n"


def test_stdin_syntax_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("let x = (1 + "))

    assert main(["--stdin"]) == ERROR_EXIT
    assert "error: <stdin>:" in capsys.readouterr().err


def test_stdin_deeply_nested_input(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    monkeypatch.setattr("sys.stdin", io.StringIO("[" * 150 + "]" * 150))

    assert main(["--stdin"]) == ERROR_EXIT
    assert "error: <stdin>:" in capsys.readouterr().err


def test_stdin_recursion_error(monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]) -> None:
    def _overflow(*_args: object, **_kwargs: object) -> str:
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr("sys.stdin", io.StringIO("ls"))
    monkeypatch.setattr("nufmt.cli.format_text", _overflow)

    assert main(["--stdin"]) == ERROR_EXIT
    assert "<stdin>: nested too deeply to format" in capsys.readouterr().err


def test_stdin_with_files_is_rejected(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["--stdin", "a.nu"]) == ERROR_EXIT
    assert "error" in capsys.readouterr().err


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as exc_info:
        main(["--version"])

    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out
