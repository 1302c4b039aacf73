import textwrap
from dataclasses import dataclass

import pytest

from nufmt.config import Config
from nufmt.errors import ParseError, UnsupportedConstruct
from nufmt.format import DocBuilder
from nufmt.format.runner import check_text, format_text
from nufmt.text import TextRange

INVALID = "# beginning of script comment\n\nlet one = 1\n"
VALID = "# beginning of script comment\nlet one = 1\n"


def _dedent(text: str) -> str:
    return textwrap.dedent(text).lstrip()


def test_let_spacing_is_normalized() -> None:
    assert format_text("let x  =  1") == "let x = 1\n"


def test_if_else_blocks_break_one_statement_per_line() -> None:
    assert format_text("if $x>0{1}else{2}") == _dedent(
        """
        if $x > 0 {
            1
        } else {
            2
        }
        """
    )


def test_three_stage_pipeline_is_pipe_leading() -> None:
    assert format_text("[1,2,3]|each {|x| $x*2}|where {|x|$x>2}") == _dedent(
        """
        [1, 2, 3]
        | each { |x| $x * 2 }
        | where { |x| $x > 2 }
        """
    )


def test_wide_record_breaks_one_entry_per_line() -> None:
    source = (
        "let r = {alpha: 1, bravo: 2, charlie: 3, delta: 4, echo: 5, "
        "foxtrot: 6, golf: 7, hotel: 8, india: 9, juliett: 10}"
    )

    assert format_text(source) == _dedent(
        """
        let r = {
            alpha: 1,
            bravo: 2,
            charlie: 3,
            delta: 4,
            echo: 5,
            foxtrot: 6,
            golf: 7,
            hotel: 8,
            india: 9,
            juliett: 10
        }
        """
    )


def test_match_has_one_arm_per_line() -> None:
    assert format_text('match $x {0=>"zero" 1=>"one"}') == _dedent(
        """
        match $x {
            0 => "zero"
            1 => "one"
        }
        """
    )


def test_trailing_comment_gets_two_spaces() -> None:
    assert format_text("let x = 1  # note") == "let x = 1  # note\n"
    assert format_text("let x = 1 # note") == "let x = 1  # note\n"


def test_blank_line_after_leading_comment_is_removed() -> None:
    assert format_text(INVALID) == VALID
    assert format_text(VALID) == VALID


def test_short_record_stays_flat() -> None:
    assert format_text('{name:"nu",version:1}') == '{name: "nu", version: 1}\n'


def test_def_body_is_indented() -> None:
    assert format_text("def foo [x: int] { $x + 1 }") == "def foo [x: int] {\n    $x + 1\n}\n"


def test_closure_statement() -> None:
    assert format_text("{|x| $x * 2 }") == "{ |x| $x * 2 }\n"


def test_for_loop() -> None:
    assert format_text("for x in [1, 2, 3] { print $x }") == "for x in [1, 2, 3] {\n    print $x\n}\n"


def test_two_stage_pipeline_stays_inline_when_it_fits() -> None:
    assert format_text("ls|get name") == "ls | get name\n"
    assert format_text("ls|get name", Config(line_length=10)) == "ls\n| get name\n"


def test_wide_signature_breaks_without_commas() -> None:
    assert format_text("def f [alpha: int, beta: string] { }", Config(line_length=30)) == _dedent(
        """
        def f [
            alpha: int
            beta: string
        ] {}
        """
    )


def test_multiline_subexpression_collapses_when_it_fits() -> None:
    assert format_text("let v = (\n    ls\n    | length\n)\n") == "let v = (ls | length)\n"


def test_interpolation_expressions_are_tidied() -> None:
    assert format_text('print $"hello (  $name  )!"') == 'print $"hello ($name)!"\n'


def test_interpolation_literal_text_is_untouched() -> None:
    assert format_text("print $'  spaced   out  '") == "print $'  spaced   out  '\n"


def test_empty_forms() -> None:
    assert format_text("let e = {  }\nlet l = [ ]\nlet c = {||}") == "let e = {}\nlet l = []\nlet c = {||}\n"


def test_statements_split_on_semicolons() -> None:
    assert format_text("let a = 1; let b = 2") == "let a = 1\nlet b = 2\n"


def test_indent_width_is_configurable() -> None:
    assert format_text("loop { break }", Config(indent_width=2)) == "loop {\n  break\n}\n"


@pytest.mark.parametrize(
    ("margin", "expected"),
    [
        (0, "let a = 1\nlet b = 2\n"),
        (1, "let a = 1\n\nlet b = 2\n"),
        (2, "let a = 1\n\n\nlet b = 2\n"),
    ],
    ids=["margin_0", "margin_1", "margin_2"],
)
def test_blank_runs_are_capped_at_margin(margin: int, expected: str) -> None:
    source = "let a = 1\n\n\n\nlet b = 2\n\n\n"

    assert format_text(source, Config(margin=margin)) == expected


def test_trailing_comment_inside_list_forces_break() -> None:
    assert format_text("let l = [1, # one\n2]") == "let l = [\n    1,  # one\n    2\n]\n"


def test_trailing_comment_inside_block() -> None:
    assert format_text("if true {\n  ls # list\n}") == "if true {\n    ls  # list\n}\n"


def test_comment_in_empty_block_is_kept_inside() -> None:
    assert format_text("def f [] {\n# todo\n}") == "def f [] {\n    # todo\n}\n"


def test_comment_only_program() -> None:
    assert format_text("# hi\n\n\n# there") == "# hi\n\n# there\n"


def test_empty_program_formats_to_empty_string() -> None:
    assert format_text("") == ""
    assert format_text("\n\n  \n") == ""


def test_output_ends_with_exactly_one_newline() -> None:
    assert format_text("ls\n\n\n") == "ls\n"


def test_hash_inside_string_is_not_a_comment() -> None:
    assert format_text('let s = "a # b"') == 'let s = "a # b"\n'


def test_parse_error_raises_with_position() -> None:
    with pytest.raises(ParseError) as exc_info:
        format_text("let x = (1 + ")

    assert exc_info.value.position >= 0
    assert exc_info.value.diagnostics


@dataclass(frozen=True, slots=True)
class AstMystery:
    span: TextRange


def test_node_without_a_formatting_rule_is_unsupported() -> None:
    with pytest.raises(UnsupportedConstruct) as exc_info:
        DocBuilder().node(AstMystery(TextRange(3, 7)))

    assert exc_info.value.span == TextRange(3, 7)
    assert exc_info.value.kind == "AstMystery"
    assert str(exc_info.value) == "No formatting rule for AstMystery at 3..7"


def test_check_text_reports_whether_formatting_changes_text() -> None:
    assert check_text(INVALID) is True
    assert check_text(VALID) is False


def test_trailing_comment_after_record_spread() -> None:
    source = "let r = {...$base, # base\nc: 3}"

    assert format_text(source) == "let r = {\n    ...$base,  # base\n    c: 3\n}\n"
