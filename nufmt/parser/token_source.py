"""Token source that hides trivia and relexes on context switches."""

from dataclasses import dataclass

from nufmt.diagnostics import Diagnostic
from nufmt.lexer import EOF_TOKEN, LexContext, Lexer, LexerCheckpoint, Token, TokenKind
from nufmt.text import TextRange, slice_text_range


@dataclass(frozen=True, slots=True)
class TokenSourceCheckpoint:
    before_current: LexerCheckpoint
    after_current: LexerCheckpoint
    current: Token
    context: LexContext
    last_end: int


class TokenSource:
    """Bridge between lexer and parser that strips trivia.

    The current token is always lexed in the active context. Switching context
    rewinds the lexer to just after the previous non-trivia token and lexes
    again, so the preceding-line-break flag survives the switch.
    """

    def __init__(self, lexer: Lexer, context: LexContext = LexContext.REGULAR) -> None:
        self._lexer = lexer
        self._context = context
        self._current = EOF_TOKEN
        self._before_current = lexer.checkpoint
        self._last_end = lexer.position
        self._next_non_trivia_token()

    @property
    def current(self) -> TokenKind:
        return self._current.kind

    @property
    def current_token(self) -> Token:
        return self._current

    @property
    def current_range(self) -> TextRange:
        return self._current.range

    @property
    def current_text(self) -> str:
        return slice_text_range(self._lexer.source, self._current.range)

    @property
    def text(self) -> str:
        return self._lexer.source

    @property
    def context(self) -> LexContext:
        return self._context

    @property
    def position(self) -> int:
        return self._current.range.start

    @property
    def last_end(self) -> int:
        """End offset of the most recently consumed non-trivia token."""
        return self._last_end

    @property
    def has_preceding_line_break(self) -> bool:
        return self._current.has_preceding_line_break()

    @property
    def has_preceding_trivia(self) -> bool:
        return self._current.has_preceding_trivia()

    @property
    def checkpoint(self) -> TokenSourceCheckpoint:
        return TokenSourceCheckpoint(
            before_current=self._before_current,
            after_current=self._lexer.checkpoint,
            current=self._current,
            context=self._context,
            last_end=self._last_end,
        )

    def bump(self) -> Token:
        token = self._current
        if token.kind != TokenKind.EOF:
            self._last_end = token.range.end
            self._next_non_trivia_token()
        return token

    def relex(self, context: LexContext) -> None:
        if context == self._context:
            return
        self._context = context
        self._lexer.rewind(self._before_current)
        self._next_non_trivia_token()

    def nth(self, n: int) -> Token:
        """Look ahead `n` non-trivia tokens in the active context without consuming."""
        if n == 0:
            return self._current
        checkpoint = self._lexer.checkpoint
        token = self._current
        for _ in range(n):
            if token.kind == TokenKind.EOF:
                break
            token = self._lex_non_trivia()
        self._lexer.rewind(checkpoint)
        return token

    def rewind(self, checkpoint: TokenSourceCheckpoint) -> None:
        self._lexer.rewind(checkpoint.after_current)
        self._before_current = checkpoint.before_current
        self._current = checkpoint.current
        self._context = checkpoint.context
        self._last_end = checkpoint.last_end

    def finish(self) -> list[Diagnostic]:
        return self._lexer.diagnostics

    def _next_non_trivia_token(self) -> None:
        self._before_current = self._lexer.checkpoint
        self._current = self._lex_non_trivia()

    def _lex_non_trivia(self) -> Token:
        while True:
            token = self._lexer.next_token(self._context)
            if not token.kind.is_trivia:
                return token
