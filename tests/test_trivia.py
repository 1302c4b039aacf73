import textwrap

import pytest

from nufmt.config import Config
from nufmt.errors import TriviaAttachmentError
from nufmt.format.doc import Container, Dangling, concat, text
from nufmt.format.resolver import resolve
from nufmt.parser import parse
from nufmt.text import TextRange
from nufmt.trivia import Attachment, TriviaItem, TriviaKind, extract_trivia, merge_trivia


def _trivia(source: str) -> tuple[TriviaItem, ...]:
    return extract_trivia(source, parse(source).program)


def _comments(source: str) -> list[tuple[str, Attachment]]:
    return [(item.text, item.attachment) for item in _trivia(source) if item.kind == TriviaKind.COMMENT]


def test_comment_classification() -> None:
    source = textwrap.dedent(
        """
        # leads
        let a = 1  # trails

        # stands alone

        let b = 2
        """
    ).lstrip()

    assert _comments(source) == [
        ("# leads", Attachment.LEADING),
        ("# trails", Attachment.TRAILING),
        ("# stands alone", Attachment.STANDALONE),
    ]


def test_comment_at_end_of_file_is_standalone() -> None:
    assert _comments("ls\n# bye\n") == [("# bye", Attachment.STANDALONE)]


def test_comment_text_is_right_stripped() -> None:
    assert _comments("ls  #   spaced   \t\n") == [("#   spaced", Attachment.TRAILING)]


def test_hash_inside_literals_is_not_a_comment() -> None:
    source = "let s = \"a # b\"\nlet r = r#'x # y'#\nprint $\"(1) # no\"\necho foo#bar\n"

    assert _comments(source) == []


def test_blank_runs_count_consecutive_empty_lines() -> None:
    source = "let a = 1\n\n  \n\nlet b = 2\n"

    runs = [item for item in _trivia(source) if item.kind == TriviaKind.BLANK_RUN]
    assert [(run.position, run.count) for run in runs] == [(10, 3)]


def test_blank_lines_inside_strings_are_not_blank_runs() -> None:
    source = 'let s = "first\n\n\nlast"\n'

    assert [item for item in _trivia(source) if item.kind == TriviaKind.BLANK_RUN] == []


def test_items_are_sorted_by_position() -> None:
    items = _trivia("# a\n\nls  # b\n\n# c\n")

    assert [item.position for item in items] == sorted(item.position for item in items)


def test_merge_without_trivia_returns_same_doc() -> None:
    doc = text("ls")

    assert merge_trivia(doc, (), "ls", Config()) is doc


def test_merge_raises_when_no_container_holds_the_item() -> None:
    container = Container(TextRange(0, 2), "block")
    doc = concat(text("{"), Dangling(container), text("}"))
    stray = TriviaItem(kind=TriviaKind.COMMENT, text="# far", position=50, attachment=Attachment.STANDALONE)

    with pytest.raises(TriviaAttachmentError):
        merge_trivia(doc, (stray,), "{}" + " " * 60, Config())


def test_dangling_program_receives_comments() -> None:
    program = Container(TextRange(0, 12), "program", nested=False)
    source = "# one\n# two"
    items = extract_trivia(source, parse(source).program)

    merged = merge_trivia(Dangling(program), items, source, Config())

    assert resolve(merged) == "# one\n# two"
