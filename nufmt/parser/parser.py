"""Recursive-descent parser core."""

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Final

from nufmt.diagnostics import PARSER_EXPECTED_TOKEN, Diagnostic, DiagnosticSpec
from nufmt.lexer import LexContext, Token, TokenKind
from nufmt.parser.token_source import TokenSource, TokenSourceCheckpoint
from nufmt.text import TextRange

# Brackets, blocks and closures deeper than this are not descended into.
MAX_NESTING_DEPTH: Final = 32


@dataclass(frozen=True, slots=True)
class ParserCheckpoint:
    source_checkpoint: TokenSourceCheckpoint
    diagnostics_len: int


@dataclass(slots=True)
class ParserProgress:
    """Detect parser stalls inside list-style loops."""

    _position: int | None = None

    def has_progressed(self, parser: "Parser") -> bool:
        has_progressed = self._position is None or self._position < parser.position
        self._position = parser.position
        return has_progressed

    def assert_progressing(self, parser: "Parser") -> None:
        if not self.has_progressed(parser):
            raise RuntimeError(f"Parser stopped making progress at {parser.current.name} {parser.current_range}")


class Parser:
    """Parser state shared by the grammar functions."""

    def __init__(self, source: TokenSource, depth: int = 0) -> None:
        self._source = source
        self._diagnostics: list[Diagnostic] = []
        self._depth = depth

    @property
    def source(self) -> TokenSource:
        return self._source

    @property
    def text(self) -> str:
        return self._source.text

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self._diagnostics

    @property
    def depth(self) -> int:
        return self._depth

    @property
    def too_deep(self) -> bool:
        return self._depth >= MAX_NESTING_DEPTH

    @property
    def current(self) -> TokenKind:
        return self._source.current

    @property
    def current_token(self) -> Token:
        return self._source.current_token

    @property
    def current_range(self) -> TextRange:
        return self._source.current_range

    @property
    def current_text(self) -> str:
        return self._source.current_text

    @property
    def position(self) -> int:
        return self._source.position

    @property
    def last_end(self) -> int:
        return self._source.last_end

    @property
    def has_preceding_line_break(self) -> bool:
        return self._source.has_preceding_line_break

    @property
    def has_preceding_trivia(self) -> bool:
        return self._source.has_preceding_trivia

    def at(self, kind: TokenKind) -> bool:
        return self.current == kind

    def at_set(self, kinds: frozenset[TokenKind] | set[TokenKind]) -> bool:
        return self.current in kinds

    def at_word(self, *words: str) -> bool:
        return self.current == TokenKind.WORD and self.current_text in words

    def nth(self, n: int) -> TokenKind:
        return self._source.nth(n).kind

    def nth_token(self, n: int) -> Token:
        return self._source.nth(n)

    def span_from(self, start: int) -> TextRange:
        """Range from `start` to the end of the last consumed token."""
        return TextRange(start, max(start, self.last_end))

    def slice(self, range: TextRange) -> str:
        return self.text[range.start : range.end]

    def checkpoint(self) -> ParserCheckpoint:
        return ParserCheckpoint(
            source_checkpoint=self._source.checkpoint,
            diagnostics_len=len(self._diagnostics),
        )

    def rewind(self, checkpoint: ParserCheckpoint) -> None:
        self._source.rewind(checkpoint.source_checkpoint)
        del self._diagnostics[checkpoint.diagnostics_len :]

    @contextmanager
    def lex_context(self, context: LexContext) -> Iterator[None]:
        """Lex the current and following tokens in `context` for the duration of the block."""
        previous = self._source.context
        self._source.relex(context)
        try:
            yield
        finally:
            self._source.relex(previous)

    @contextmanager
    def nested(self) -> Iterator[None]:
        """Count one more level of brackets for the duration of the block."""
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def bump(self) -> Token:
        return self._source.bump()

    def eat(self, kind: TokenKind) -> Token | None:
        if self.current == kind:
            return self.bump()
        return None

    def expect(self, kind: TokenKind, display: str) -> Token | None:
        if (token := self.eat(kind)) is not None:
            return token
        self.error(PARSER_EXPECTED_TOKEN, message=f"Expected `{display}`")
        return None

    def error(self, spec: DiagnosticSpec, range: TextRange | None = None, message: str | None = None) -> None:
        diagnostic = Diagnostic.from_spec(spec, range or self.current_range, message)
        if self._diagnostics:
            previous = self._diagnostics[-1]
            if previous.range.start == diagnostic.range.start:
                return
        self._diagnostics.append(diagnostic)

    def extend_diagnostics(self, diagnostics: list[Diagnostic]) -> None:
        self._diagnostics.extend(diagnostics)

    def finish(self) -> list[Diagnostic]:
        return self._diagnostics
