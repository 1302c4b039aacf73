from nufmt.format.doc import (
    EMPTY,
    Anchor,
    Concat,
    Container,
    Dangling,
    IfBreak,
    LineSuffix,
    Text,
    concat,
    forces_break,
    group,
    hardline,
    join,
    line,
    nest,
    softline,
    text,
)
from nufmt.format.resolver import resolve
from nufmt.text import TextRange


def _bracketed(*items: str):
    body = join(concat(text(","), line()), [text(item) for item in items])
    return group(concat(text("["), nest(concat(softline(), body)), softline(), text("]")))


def test_concat_flattens_and_drops_empty() -> None:
    doc = concat(text("a"), EMPTY, concat(text("b"), text("c")))

    assert isinstance(doc, Concat)
    assert doc.parts == (Text("a"), Text("b"), Text("c"))
    assert concat(text("only")) == Text("only")


def test_group_stays_flat_when_it_fits() -> None:
    assert resolve(_bracketed("1", "2", "3")) == "[1, 2, 3]"


def test_group_breaks_when_too_wide() -> None:
    doc = _bracketed("alpha", "beta", "gamma")

    assert resolve(doc, indent_width=2, line_length=10) == "[\n  alpha,\n  beta,\n  gamma\n]"


def test_fit_is_measured_from_current_column() -> None:
    doc = concat(text("let value = "), _bracketed("1", "2"))

    assert resolve(doc, line_length=18) == "let value = [1, 2]"
    assert resolve(doc, line_length=17) == "let value = [\n    1,\n    2\n]"


def test_rest_of_line_counts_towards_fit() -> None:
    doc = concat(_bracketed("1", "2"), text(" | something-long"))

    assert resolve(doc, line_length=20) == "[\n    1,\n    2\n] | something-long"


def test_hardline_forces_enclosing_group_to_break() -> None:
    doc = group(concat(text("{"), nest(concat(line(), text("a"), hardline(), text("b"))), line(), text("}")))

    assert forces_break(doc)
    assert resolve(doc) == "{\n    a\n    b\n}"


def test_ifbreak_chooses_by_group_mode() -> None:
    body = join(concat(IfBreak(EMPTY, text(",")), line()), [text("a: int"), text("b: int")])
    doc = group(concat(text("["), nest(concat(softline(), body)), softline(), text("]")))

    assert resolve(doc) == "[a: int, b: int]"
    assert resolve(doc, line_length=10) == "[\n    a: int\n    b: int\n]"


def test_line_suffix_is_flushed_before_newline() -> None:
    doc = concat(text("let x = 1"), LineSuffix("  # note"), hardline(), text("let y = 2"))

    assert resolve(doc) == "let x = 1  # note\nlet y = 2"


def test_line_suffix_at_end_of_document() -> None:
    assert resolve(concat(text("ls"), LineSuffix("  # trailing"))) == "ls  # trailing"


def test_empty_lines_carry_no_indentation() -> None:
    doc = nest(concat(hardline(), text("a"), hardline(), hardline(), text("b")))

    assert resolve(doc) == "\n    a\n\n    b"


def test_anchor_is_transparent_and_dangling_renders_nothing() -> None:
    container = Container(TextRange(0, 4), "block")
    doc = concat(text("{"), Dangling(container), text("}"), Anchor(TextRange(0, 1), container, text(" x")))

    assert resolve(doc) == "{} x"


def test_containers_compare_by_identity() -> None:
    first = Container(TextRange(0, 4), "block")
    second = Container(TextRange(0, 4), "block")

    assert first != second
    assert first == first
