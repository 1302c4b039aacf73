"""Exceptions raised by the formatter."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from nufmt.diagnostics import Diagnostic
    from nufmt.text import TextRange
    from nufmt.trivia.model import TriviaItem


class FormatError(Exception):
    """Base class for failures while formatting one program."""


class ParseError(FormatError):
    """Source text is not a valid Nushell program."""

    def __init__(self, position: int, message: str, diagnostics: list[Diagnostic] | None = None) -> None:
        super().__init__(message)
        self.position = position
        self.message = message
        self.diagnostics = diagnostics or []

    @classmethod
    def from_diagnostics(cls, diagnostics: list[Diagnostic]) -> ParseError:
        from nufmt.diagnostics import first_error

        error = first_error(diagnostics)
        if error is None:
            raise ValueError("No error diagnostic to report")
        return cls(error.range.start, error.message, diagnostics)


class UnsupportedConstruct(FormatError):
    """The parser produced a node kind the doc builder has no rule for."""

    def __init__(self, span: TextRange, kind: str) -> None:
        super().__init__(f"No formatting rule for {kind} at {span.start}..{span.end}")
        self.span = span
        self.kind = kind


class TriviaAttachmentError(FormatError):
    """A comment or blank run could not be attached to the layout."""

    def __init__(self, item: TriviaItem) -> None:
        super().__init__(f"Cannot place {item.kind} at offset {item.position}: {item.text!r}")
        self.item = item


class ConfigError(Exception):
    """Configuration file is unreadable, malformed or holds invalid options."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message if path is None else f"{path}: {message}")
        self.message = message
        self.path = path
