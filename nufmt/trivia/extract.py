"""Recover comments and blank lines that the AST does not represent."""

import re
from bisect import bisect_left, bisect_right
from typing import Final

from nufmt.ast import OPAQUE_NODES, AstCellPath, AstProgram, walk
from nufmt.text import TextRange
from nufmt.trivia.model import Attachment, TriviaItem, TriviaKind

_BLANK_LINE: Final = re.compile(r"\n[ \t]*\r?\n")


def extract_trivia(source: str, program: AstProgram) -> tuple[TriviaItem, ...]:
    """Comments and blank-line runs of `source`, in source order.

    Text inside literals, variables, flags and interpolations is never
    scanned, so a `#` in a string is not a comment.
    """
    claimed = _claimed_ranges(program)
    starts, ends = _node_bounds(program)

    items: list[TriviaItem] = []
    for position, text in _comments(source, claimed):
        items.append(
            TriviaItem(
                kind=TriviaKind.COMMENT,
                text=text,
                position=position,
                attachment=_classify(source, position, position + len(text), starts, ends),
            )
        )
    items.extend(_blank_runs(source, claimed))
    items.sort(key=lambda item: item.position)
    return tuple(items)


def _claimed_ranges(program: AstProgram) -> list[TextRange]:
    ranges: list[TextRange] = []
    for node in walk(program):
        if isinstance(node, OPAQUE_NODES):
            ranges.append(node.span)
        elif isinstance(node, AstCellPath):
            ranges.append(TextRange(node.target.span.end, node.span.end))

    merged: list[TextRange] = []
    for current in sorted(r for r in ranges if not r.is_empty()):
        if merged and current.start <= merged[-1].end:
            merged[-1] = merged[-1].cover(current)
        else:
            merged.append(current)
    return merged


def _node_bounds(program: AstProgram) -> tuple[list[int], list[int]]:
    starts: list[int] = []
    ends: list[int] = []
    for node in walk(program):
        if node is program or node.span.is_empty():
            continue
        starts.append(node.span.start)
        ends.append(node.span.end)
    starts.sort()
    ends.sort()
    return starts, ends


def _comments(source: str, claimed: list[TextRange]) -> list[tuple[int, str]]:
    comments: list[tuple[int, str]] = []
    claimed_index = 0
    position = source.find("#")
    while position >= 0:
        while claimed_index < len(claimed) and claimed[claimed_index].end <= position:
            claimed_index += 1
        if claimed_index < len(claimed) and claimed[claimed_index].contains(position):
            position = source.find("#", claimed[claimed_index].end)
            continue

        end = position
        while end < len(source) and source[end] not in "\r\n":
            end += 1
        comments.append((position, source[position:end].rstrip()))
        position = source.find("#", end)
    return comments


def _classify(source: str, start: int, end: int, starts: list[int], ends: list[int]) -> Attachment:
    # Latest node that ended at or before the comment.
    index = bisect_right(ends, start)
    if index > 0 and "\n" not in source[ends[index - 1] : start]:
        return Attachment.TRAILING

    # First node that starts after the comment.
    index = bisect_left(starts, end)
    if index < len(starts) and _BLANK_LINE.search(source, end, starts[index]) is None:
        return Attachment.LEADING
    return Attachment.STANDALONE


def _blank_runs(source: str, claimed: list[TextRange]) -> list[TriviaItem]:
    runs: list[TriviaItem] = []
    run_start: int | None = None
    run_count = 0
    claimed_index = 0
    offset = 0
    for line in source.splitlines(keepends=True):
        while claimed_index < len(claimed) and claimed[claimed_index].end <= offset:
            claimed_index += 1
        inside_claim = claimed_index < len(claimed) and claimed[claimed_index].contains(offset)

        if not line.strip() and not inside_claim:
            if run_start is None:
                run_start = offset
            run_count += 1
        elif run_start is not None:
            runs.append(_blank_run(run_start, run_count))
            run_start, run_count = None, 0
        offset += len(line)

    if run_start is not None:
        runs.append(_blank_run(run_start, run_count))
    return runs


def _blank_run(position: int, count: int) -> TriviaItem:
    return TriviaItem(
        kind=TriviaKind.BLANK_RUN,
        text="",
        position=position,
        attachment=Attachment.STANDALONE,
        count=count,
    )
