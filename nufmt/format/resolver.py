"""Layout resolver: renders a Doc into text for a given width."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias

from nufmt.format.doc import (
    Anchor,
    Concat,
    Dangling,
    Doc,
    Group,
    HardLine,
    IfBreak,
    Line,
    LineSuffix,
    Nest,
    SoftLine,
    Text,
    children,
)

Mode: TypeAlias = Literal["flat", "break"]


@dataclass(frozen=True, slots=True)
class _Frame:
    indent: int
    mode: Mode
    doc: Doc


class _BreakCache:
    """Memoized "contains a hard line or line suffix" per doc node."""

    def __init__(self) -> None:
        self._cache: dict[int, bool] = {}

    def forces_break(self, doc: Doc) -> bool:
        key = id(doc)
        cached = self._cache.get(key)
        if cached is not None:
            return cached
        if isinstance(doc, (HardLine, LineSuffix)):
            result = True
        else:
            result = any(self.forces_break(child) for child in children(doc))
        self._cache[key] = result
        return result


def resolve(doc: Doc, indent_width: int = 4, line_length: int = 80) -> str:
    """Render `doc`, breaking groups that do not fit in `line_length` columns.

    Indentation is written lazily before the first text of a line, so empty
    lines carry no whitespace.
    """
    out: list[str] = []
    line: list[str] = []
    suffixes: list[str] = []
    col = 0
    pending_indent: int | None = None
    breaks = _BreakCache()

    def newline(indent: int) -> None:
        nonlocal col, pending_indent
        if suffixes:
            line.extend(suffixes)
            suffixes.clear()
        out.append("".join(line).rstrip(" "))
        out.append("\n")
        line.clear()
        col = 0
        pending_indent = indent

    stack: list[_Frame] = [_Frame(indent=0, mode="break", doc=doc)]

    while stack:
        frame = stack.pop()
        ind, mode, d = frame.indent, frame.mode, frame.doc

        match d:
            case Text(s=s):
                if not s:
                    continue
                if pending_indent is not None:
                    line.append(" " * pending_indent)
                    col = pending_indent
                    pending_indent = None
                line.append(s)
                if "\n" in s:
                    col = len(s) - s.rfind("\n") - 1
                else:
                    col += len(s)
            case Concat(parts=parts):
                # push in reverse so first part is processed first
                for p in reversed(parts):
                    stack.append(_Frame(ind, mode, p))
            case Nest(child=child, levels=levels):
                stack.append(_Frame(ind + levels * indent_width, mode, child))
            case HardLine():
                newline(ind)
            case Line():
                if mode == "flat":
                    stack.append(_Frame(ind, mode, Text(" ")))
                else:
                    newline(ind)
            case SoftLine():
                if mode == "break":
                    newline(ind)
            case Group(child=child):
                start = col if pending_indent is None else pending_indent
                flat = _Frame(ind, "flat", child)
                if not breaks.forces_break(child) and _fits(line_length - start, flat, stack, breaks):
                    stack.append(flat)
                else:
                    stack.append(_Frame(ind, "break", child))
            case IfBreak(broken=broken, flat=flat_doc):
                stack.append(_Frame(ind, mode, broken if mode == "break" else flat_doc))
            case LineSuffix(s=s):
                suffixes.append(s)
            case Anchor(child=child):
                stack.append(_Frame(ind, mode, child))
            case Dangling():
                continue

    if suffixes:
        line.extend(suffixes)
    out.append("".join(line).rstrip(" "))
    return "".join(out)


def _fits(remaining: int, first: _Frame, stack: list[_Frame], breaks: _BreakCache) -> bool:
    """
    Lookahead: measure `first` flat, then the rest of the current line until:
    - we exceed the remaining width => doesn't fit
    - we reach a line break in the rest => fits
    """
    if remaining < 0:
        return False

    probe: list[tuple[_Frame, bool]] = [(frame, True) for frame in stack]
    probe.append((first, False))
    used = 0

    while probe:
        fr, in_rest = probe.pop()
        d = fr.doc

        match d:
            case Text(s=s):
                if "\n" in s:
                    return used + s.find("\n") <= remaining
                used += len(s)
                if used > remaining:
                    return False
            case Concat(parts=parts):
                for p in reversed(parts):
                    probe.append((_Frame(fr.indent, fr.mode, p), in_rest))
            case Nest(child=child) | Anchor(child=child):
                probe.append((_Frame(fr.indent, fr.mode, child), in_rest))
            case HardLine():
                return True
            case Line() | SoftLine():
                if fr.mode == "break":
                    return True
                if isinstance(d, Line):
                    used += 1
                    if used > remaining:
                        return False
            case Group(child=child):
                mode: Mode = "break" if in_rest and breaks.forces_break(child) else "flat"
                probe.append((_Frame(fr.indent, mode, child), in_rest))
            case IfBreak(broken=broken, flat=flat_doc):
                probe.append((_Frame(fr.indent, fr.mode, broken if fr.mode == "break" else flat_doc), in_rest))
            case LineSuffix() | Dangling():
                continue

    return True
