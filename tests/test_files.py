from pathlib import Path

import pytest

from nufmt.config import Config
from nufmt.files import BatchReport, FileResult, FileStatus, discover_files, format_file, format_files

INVALID = "# beginning of script comment\n\nlet one = 1\n"
VALID = "# beginning of script comment\nlet one = 1\n"
BROKEN = "let x = (1 + \n"
DEEP = "let x = " + "(" * 100 + "1" + ")" * 100 + "\n"


def _write(path: Path, text: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_discover_walks_directories_for_nu_files(tmp_path: Path) -> None:
    first = _write(tmp_path / "a.nu", VALID)
    nested = _write(tmp_path / "lib" / "b.nu", VALID)
    _write(tmp_path / "notes.txt", "not nushell")

    files, missing = discover_files([tmp_path], Config())

    assert sorted(files) == sorted([first, nested])
    assert missing == []


def test_discover_keeps_named_files_whatever_their_suffix(tmp_path: Path) -> None:
    script = _write(tmp_path / "script", VALID)

    files, _ = discover_files([script], Config())

    assert files == [script]


def test_discover_deduplicates_paths(tmp_path: Path) -> None:
    script = _write(tmp_path / "a.nu", VALID)

    files, _ = discover_files([script, tmp_path], Config())

    assert files == [script]


def test_discover_applies_exclude_to_names_and_relative_paths(tmp_path: Path) -> None:
    _write(tmp_path / "a.nu", VALID)
    kept = _write(tmp_path / "b.nu", VALID)
    _write(tmp_path / "vendor" / "c.nu", VALID)

    files, _ = discover_files([tmp_path], Config(exclude=("a*", "vendor/*")))

    assert files == [kept]


def test_discover_reports_missing_paths(tmp_path: Path) -> None:
    missing_path = tmp_path / "nope.nu"

    files, missing = discover_files([missing_path], Config())

    assert files == []
    assert missing == [
        FileResult(missing_path, FileStatus.FAILED, error=f"{missing_path}: No such file or directory")
    ]


def test_format_file_rewrites_only_when_changed(tmp_path: Path) -> None:
    changed = _write(tmp_path / "changed.nu", INVALID)
    clean = _write(tmp_path / "clean.nu", VALID)

    assert format_file(changed, Config()).status == FileStatus.REFORMATTED
    assert format_file(clean, Config()).status == FileStatus.UNCHANGED
    assert changed.read_text(encoding="utf-8") == VALID


def test_format_file_check_leaves_file_alone(tmp_path: Path) -> None:
    path = _write(tmp_path / "a.nu", INVALID)

    result = format_file(path, Config(), check=True)

    assert result.status == FileStatus.WOULD_REFORMAT
    assert path.read_text(encoding="utf-8") == INVALID


def test_format_file_with_syntax_error_is_failed_and_untouched(tmp_path: Path) -> None:
    path = _write(tmp_path / "broken.nu", BROKEN)

    result = format_file(path, Config())

    assert result.status == FileStatus.FAILED
    assert result.error is not None and result.error.startswith(f"{path}:")
    assert result.diagnostics
    assert path.read_text(encoding="utf-8") == BROKEN


def test_format_files_keeps_going_after_a_failure(tmp_path: Path) -> None:
    broken = _write(tmp_path / "a.nu", BROKEN)
    fixable = _write(tmp_path / "b.nu", INVALID)

    report = format_files([tmp_path], Config(), workers=2)

    assert [(result.path, result.status) for result in report.results] == [
        (broken, FileStatus.FAILED),
        (fixable, FileStatus.REFORMATTED),
    ]
    assert fixable.read_text(encoding="utf-8") == VALID
    assert report.exit_code() == 2


def test_format_files_keeps_going_after_deeply_nested_input(tmp_path: Path) -> None:
    deep = _write(tmp_path / "deep.nu", DEEP)
    lists = _write(tmp_path / "lists.nu", "let x = " + "[" * 150 + "1" + "]" * 150 + "\n")
    fixable = _write(tmp_path / "ok.nu", INVALID)

    report = format_files([tmp_path], Config())

    assert [(result.path, result.status) for result in report.results] == [
        (deep, FileStatus.FAILED),
        (lists, FileStatus.FAILED),
        (fixable, FileStatus.REFORMATTED),
    ]
    assert "Brackets are nested too deeply" in (report.results[0].error or "")
    assert deep.read_text(encoding="utf-8") == DEEP
    assert fixable.read_text(encoding="utf-8") == VALID
    assert report.exit_code() == 2


def test_format_file_recursion_error_is_failed(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = _write(tmp_path / "a.nu", INVALID)

    def _overflow(*_args: object, **_kwargs: object) -> None:
        raise RecursionError("maximum recursion depth exceeded")

    monkeypatch.setattr("nufmt.files.run_format", _overflow)
    result = format_file(path, Config())

    assert result.status == FileStatus.FAILED
    assert result.error == f"{path}: nested too deeply to format"
    assert path.read_text(encoding="utf-8") == INVALID


def test_format_files_dry_run_exit_code(tmp_path: Path) -> None:
    _write(tmp_path / "a.nu", INVALID)
    _write(tmp_path / "b.nu", VALID)

    report = format_files([tmp_path], Config(), check=True)

    assert [result.status for result in report.results] == [FileStatus.WOULD_REFORMAT, FileStatus.UNCHANGED]
    assert report.exit_code(check=True) == 1


def test_batch_report_exit_codes() -> None:
    clean = FileResult(Path("a.nu"), FileStatus.UNCHANGED)
    changed = FileResult(Path("b.nu"), FileStatus.REFORMATTED)
    failed = FileResult(Path("c.nu"), FileStatus.FAILED, error="boom")

    assert BatchReport((clean,)).exit_code(check=True) == 0
    assert BatchReport((clean, changed)).exit_code() == 0
    assert BatchReport((clean, changed)).exit_code(check=True) == 1
    assert BatchReport((changed, failed)).exit_code(check=True) == 2
