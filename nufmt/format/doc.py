"""Doc tree: layout combinators plus the hooks comments are merged into."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeAlias

from nufmt.text import TextRange


@dataclass(frozen=True, slots=True)
class Text:
    s: str


@dataclass(frozen=True, slots=True)
class Concat:
    parts: tuple[Doc, ...]


@dataclass(frozen=True, slots=True)
class Nest:
    """Increase indentation for any line breaks within child."""

    child: Doc
    levels: int = 1


@dataclass(frozen=True, slots=True)
class Line:
    """A space in flat mode, a newline in break mode."""


@dataclass(frozen=True, slots=True)
class SoftLine:
    """Nothing in flat mode, a newline in break mode."""


@dataclass(frozen=True, slots=True)
class HardLine:
    """Always a newline; the enclosing groups can never be flat."""


@dataclass(frozen=True, slots=True)
class Group:
    """Render child flat if it fits on the current line, else break it."""

    child: Doc


@dataclass(frozen=True, slots=True)
class IfBreak:
    """`broken` when the enclosing group breaks, `flat` otherwise."""

    broken: Doc
    flat: Doc = Text("")


@dataclass(frozen=True, slots=True)
class LineSuffix:
    """Text deferred to the end of the current line."""

    s: str


@dataclass(frozen=True, slots=True, eq=False)
class Container:
    """A statement list or item list that comments can be attached inside.

    Identity matters, not value: two containers can share a span (a program
    holding a single pipeline).
    """

    span: TextRange
    kind: str
    allow_blank: bool = True
    nested: bool = True


@dataclass(frozen=True, slots=True, eq=False)
class Anchor:
    """One statement or item of `container`, covering `span` in the source."""

    span: TextRange
    container: Container
    child: Doc


@dataclass(frozen=True, slots=True, eq=False)
class Dangling:
    """Interior of an empty container; receives comments that have no item to attach to."""

    container: Container


Doc: TypeAlias = (
    Text | Concat | Nest | Line | SoftLine | HardLine | Group | IfBreak | LineSuffix | Anchor | Dangling
)

EMPTY: Doc = Text("")


def text(s: str) -> Doc:
    return Text(s)


def concat(*parts: Doc) -> Doc:
    flat: list[Doc] = []
    for p in parts:
        if isinstance(p, Concat):
            flat.extend(p.parts)
        elif p != EMPTY:
            flat.append(p)
    if len(flat) == 1:
        return flat[0]
    return Concat(tuple(flat))


def join(sep: Doc, parts: Iterable[Doc]) -> Doc:
    out: list[Doc] = []
    for p in parts:
        if out:
            out.append(sep)
        out.append(p)
    return concat(*out) if out else EMPTY


def group(d: Doc) -> Doc:
    return Group(d)


def nest(d: Doc, levels: int = 1) -> Doc:
    return Nest(d, levels)


def line() -> Doc:
    return Line()


def softline() -> Doc:
    return SoftLine()


def hardline() -> Doc:
    return HardLine()


def children(d: Doc) -> tuple[Doc, ...]:
    match d:
        case Concat(parts=parts):
            return parts
        case Nest(child=child) | Group(child=child) | Anchor(child=child):
            return (child,)
        case IfBreak(broken=broken, flat=flat):
            return (broken, flat)
        case _:
            return ()


def forces_break(d: Doc) -> bool:
    """Whether `d` holds a hard line or line suffix anywhere, so no enclosing group can be flat."""
    stack = [d]
    while stack:
        current = stack.pop()
        if isinstance(current, (HardLine, LineSuffix)):
            return True
        stack.extend(children(current))
    return False


__all__ = [
    "EMPTY",
    "Anchor",
    "Concat",
    "Container",
    "Dangling",
    "Doc",
    "Group",
    "HardLine",
    "IfBreak",
    "Line",
    "LineSuffix",
    "Nest",
    "SoftLine",
    "Text",
    "children",
    "concat",
    "forces_break",
    "group",
    "hardline",
    "join",
    "line",
    "nest",
    "softline",
    "text",
]
