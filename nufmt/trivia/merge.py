"""Attach extracted trivia to the anchors and dangling hooks of a Doc."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from dataclasses import dataclass, field

from nufmt.config import Config
from nufmt.errors import TriviaAttachmentError
from nufmt.format.doc import (
    EMPTY,
    Anchor,
    Concat,
    Container,
    Dangling,
    Doc,
    Group,
    IfBreak,
    LineSuffix,
    Nest,
    children,
    concat,
    hardline,
    nest,
    text,
)
from nufmt.trivia.model import Attachment, TriviaItem, TriviaKind


@dataclass(slots=True)
class _ContainerEntry:
    container: Container
    depth: int
    anchors: list[Anchor] = field(default_factory=list)
    dangling: Dangling | None = None

    def anchor_starts(self) -> list[int]:
        return [anchor.span.start for anchor in self.anchors]

    def anchor_ends(self) -> list[int]:
        return [anchor.span.end for anchor in self.anchors]


class _DocIndex:
    """Every container of a Doc with its anchors in source order."""

    def __init__(self, doc: Doc) -> None:
        self._entries: dict[int, _ContainerEntry] = {}
        stack = [doc]
        while stack:
            current = stack.pop()
            match current:
                case Anchor(container=container):
                    self._entry(container).anchors.append(current)
                case Dangling(container=container):
                    self._entry(container).dangling = current
            stack.extend(reversed(children(current)))

    def _entry(self, container: Container) -> _ContainerEntry:
        entry = self._entries.get(id(container))
        if entry is None:
            entry = _ContainerEntry(container=container, depth=len(self._entries))
            self._entries[id(container)] = entry
        return entry

    def innermost(self, position: int) -> _ContainerEntry | None:
        best: _ContainerEntry | None = None
        for entry in self._entries.values():
            span = entry.container.span
            if not span.contains(position):
                continue
            if best is None or span.len() < best.container.span.len() or (
                span.len() == best.container.span.len() and entry.depth > best.depth
            ):
                best = entry
        return best


@dataclass(slots=True)
class _Placements:
    before: dict[int, list[TriviaItem]] = field(default_factory=dict)
    after: dict[int, list[TriviaItem]] = field(default_factory=dict)
    suffix: dict[int, list[TriviaItem]] = field(default_factory=dict)
    dangling: dict[int, list[TriviaItem]] = field(default_factory=dict)

    @staticmethod
    def add(slot: dict[int, list[TriviaItem]], key: object, item: TriviaItem) -> None:
        slot.setdefault(id(key), []).append(item)


def merge_trivia(doc: Doc, trivia: tuple[TriviaItem, ...], source: str, config: Config) -> Doc:
    """Place every comment exactly once and cap blank runs at `config.margin`.

    Raises:
        TriviaAttachmentError: an item has no container to go into.
    """
    if not trivia:
        return doc

    index = _DocIndex(doc)
    placements = _Placements()
    for item in trivia:
        entry = index.innermost(item.position)
        if entry is None:
            raise TriviaAttachmentError(item)
        _place(item, entry, source, placements)

    return _rebuild(doc, placements, config.margin)


def _place(item: TriviaItem, entry: _ContainerEntry, source: str, placements: _Placements) -> None:
    anchors = entry.anchors
    if not anchors:
        if entry.dangling is None:
            raise TriviaAttachmentError(item)
        placements.add(placements.dangling, entry.container, item)
        return

    starts = entry.anchor_starts()
    ends = entry.anchor_ends()

    # Inside an anchor but in none of its own containers.
    owner_index = bisect_right(starts, item.position) - 1
    if owner_index >= 0 and anchors[owner_index].span.contains(item.position):
        if item.is_comment():
            placements.add(placements.before, anchors[owner_index], item)
        return

    if item.attachment == Attachment.TRAILING:
        previous_index = bisect_right(ends, item.position) - 1
        if previous_index >= 0:
            previous = anchors[previous_index]
            if "\n" not in source[previous.span.end : item.position]:
                placements.add(placements.suffix, previous, item)
                return

    next_index = bisect_left(starts, item.position)
    if item.kind == TriviaKind.BLANK_RUN:
        if not entry.container.allow_blank:
            return
        if next_index >= len(anchors):
            placements.add(placements.after, anchors[-1], item)
        elif next_index > 0:
            placements.add(placements.before, anchors[next_index], item)
        return

    if next_index < len(anchors):
        placements.add(placements.before, anchors[next_index], item)
    else:
        placements.add(placements.after, anchors[-1], item)


def _rebuild(doc: Doc, placements: _Placements, margin: int) -> Doc:
    match doc:
        case Anchor(span=span, container=container, child=child):
            key = id(doc)
            parts = [*_leading_lines(placements.before.get(key, ()), margin), _rebuild(child, placements, margin)]
            parts.extend(LineSuffix("  " + item.text) for item in placements.suffix.get(key, ()))
            parts.extend(_following_lines(placements.after.get(key, ()), margin))
            return Anchor(span, container, concat(*parts))
        case Dangling(container=container):
            items = placements.dangling.get(id(container), [])
            if not any(item.is_comment() for item in items):
                return EMPTY
            body = _comment_lines(items, margin)
            if container.nested:
                return concat(nest(concat(hardline(), body)), hardline())
            return body
        case Concat(parts=parts):
            return Concat(tuple(_rebuild(part, placements, margin) for part in parts))
        case Nest(child=child, levels=levels):
            return Nest(_rebuild(child, placements, margin), levels)
        case Group(child=child):
            return Group(_rebuild(child, placements, margin))
        case IfBreak(broken=broken, flat=flat):
            return IfBreak(_rebuild(broken, placements, margin), _rebuild(flat, placements, margin))
        case _:
            return doc


def _leading_lines(items: list[TriviaItem] | tuple[()], margin: int) -> list[Doc]:
    lines: list[Doc] = []
    for item in items:
        if item.kind == TriviaKind.BLANK_RUN:
            lines.extend(hardline() for _ in range(min(item.count, margin)))
        else:
            lines.extend((text(item.text), hardline()))
    return lines


def _following_lines(items: list[TriviaItem] | tuple[()], margin: int) -> list[Doc]:
    lines: list[Doc] = []
    pending = 0
    for item in items:
        if item.kind == TriviaKind.BLANK_RUN:
            pending = min(item.count, margin)
            continue
        lines.extend(hardline() for _ in range(pending))
        lines.extend((hardline(), text(item.text)))
        pending = 0
    return lines


def _comment_lines(items: list[TriviaItem], margin: int) -> Doc:
    lines: list[Doc] = []
    pending = 0
    for item in items:
        if item.kind == TriviaKind.BLANK_RUN:
            if lines:
                pending = min(item.count, margin)
            continue
        if lines:
            lines.append(hardline())
            lines.extend(hardline() for _ in range(pending))
        lines.append(text(item.text))
        pending = 0
    return concat(*lines)
