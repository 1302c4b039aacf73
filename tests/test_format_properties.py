import re

import pytest

from nufmt.ast import structure
from nufmt.config import Config
from nufmt.format.runner import format_text
from nufmt.parser import parse
from tests._shared_cases import FORMAT_CASE_IDS, FORMAT_CASES, NuCase, comment_texts

_BLANK_RUN = re.compile(r"\n(?:[ \t]*\n)+")


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
def test_formatting_is_idempotent(case: NuCase) -> None:
    once = format_text(case.source)

    assert format_text(once) == once


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
def test_formatting_preserves_program_structure(case: NuCase) -> None:
    formatted = format_text(case.source)
    reparsed = parse(formatted)

    assert reparsed.diagnostics == []
    assert structure(reparsed.program) == structure(parse(case.source).program)


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
def test_every_comment_is_kept_exactly_once(case: NuCase) -> None:
    formatted = format_text(case.source)

    assert sorted(comment_texts(formatted)) == sorted(comment_texts(case.source))


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
@pytest.mark.parametrize("line_length", [40, 80], ids=["width_40", "width_80"])
def test_lines_fit_the_configured_width(case: NuCase, line_length: int) -> None:
    formatted = format_text(case.source, Config(line_length=line_length))

    for line in formatted.splitlines():
        assert len(line) <= line_length, line


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
@pytest.mark.parametrize("margin", [0, 1, 2], ids=["margin_0", "margin_1", "margin_2"])
def test_blank_runs_never_exceed_margin(case: NuCase, margin: int) -> None:
    formatted = format_text(case.source, Config(margin=margin))

    for run in _BLANK_RUN.findall(formatted):
        assert run.count("\n") - 1 <= margin


@pytest.mark.parametrize("case", FORMAT_CASES, ids=FORMAT_CASE_IDS)
def test_output_has_single_trailing_newline_and_no_trailing_spaces(case: NuCase) -> None:
    formatted = format_text(case.source)

    assert formatted.endswith("\n")
    assert not formatted.endswith("\n\n")
    assert all(line == line.rstrip() for line in formatted.splitlines())


def test_nested_closure_comments_stay_with_their_statement() -> None:
    source = "ls | each { |f|\n    # name only\n    $f.name\n}\n"

    formatted = format_text(source)

    lines = formatted.splitlines()
    comment_index = lines.index("    # name only")
    assert lines[comment_index + 1].strip() == "$f.name"
    assert format_text(formatted) == formatted
