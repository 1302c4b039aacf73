"""Lexer."""

import re
from dataclasses import dataclass
from typing import Final

from nufmt.diagnostics import (
    LEXER_UNTERMINATED_RAW_STRING,
    LEXER_UNTERMINATED_STRING,
    Diagnostic,
    DiagnosticSpec,
)
from nufmt.lexer.tokens import LexContext, Token, TokenFlags, TokenKind
from nufmt.text import TextRange, slice_text_range

_NUMBER: Final = re.compile(
    r"""
    0[xob]\[[^\]]*\]                                    # binary literal 0x[ff 00]
    | 0x[0-9a-fA-F_]+ | 0o[0-7_]+ | 0b[01_]+
    | \d{4}-\d{2}-\d{2}
      (?:T\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?(?:Z|[+-]\d{2}:?\d{2})?)?
    | \d[\d_]*(?:\.\d+)?(?:[eE][+-]?\d+)?[A-Za-z%]*     # int, float, 10kb, 3sec
    """,
    re.VERBOSE,
)

_MEMBER: Final = r"""\.(?:[\w-]+|"(?:[^"\\]|\\.)*"|'[^']*'|`[^`]*`)[?!]*"""
_VARIABLE: Final = re.compile(r"\$[\w-]+(?:" + _MEMBER + r")*")
_CELL_PATH: Final = re.compile(r"(?:" + _MEMBER + r")+")
_REDIRECT_PIPE: Final = re.compile(r"(?:o\+e|e\+o|out\+err|err\+out|e|err|o|out)>\|")
_IDENTIFIER: Final = re.compile(r"[A-Za-z_][\w-]*")

# Longest first so that `..<` wins over `..` and `..` over `.`.
_OPERATORS: Final[tuple[tuple[str, TokenKind], ...]] = (
    ("++=", TokenKind.CONCAT_EQUAL),
    ("...", TokenKind.DOT_DOT_DOT),
    ("..<", TokenKind.DOT_DOT_LESS),
    ("..=", TokenKind.DOT_DOT_EQUAL),
    ("==", TokenKind.EQUAL_EQUAL),
    ("!=", TokenKind.NOT_EQUAL),
    ("<=", TokenKind.LESS_THAN_OR_EQUAL),
    (">=", TokenKind.GREATER_THAN_OR_EQUAL),
    ("=~", TokenKind.REGEX_MATCH),
    ("!~", TokenKind.NOT_REGEX_MATCH),
    ("+=", TokenKind.PLUS_EQUAL),
    ("-=", TokenKind.MINUS_EQUAL),
    ("*=", TokenKind.STAR_EQUAL),
    ("/=", TokenKind.SLASH_EQUAL),
    ("=>", TokenKind.FAT_ARROW),
    ("->", TokenKind.THIN_ARROW),
    ("//", TokenKind.FLOOR_DIV),
    ("**", TokenKind.POW),
    ("++", TokenKind.CONCAT),
    ("..", TokenKind.DOT_DOT),
    ("=", TokenKind.EQUAL),
    ("<", TokenKind.LESS_THAN),
    (">", TokenKind.GREATER_THAN),
    ("+", TokenKind.PLUS),
    ("-", TokenKind.MINUS),
    ("*", TokenKind.STAR),
    ("/", TokenKind.SLASH),
    (":", TokenKind.COLON),
    (".", TokenKind.DOT),
    ("?", TokenKind.QUESTION),
    ("!", TokenKind.BANG),
    ("^", TokenKind.CARET),
    ("@", TokenKind.AT),
)

_PUNCTUATION: Final[dict[str, TokenKind]] = {
    "{": TokenKind.LBRACE,
    "}": TokenKind.RBRACE,
    "[": TokenKind.LBRACKET,
    "]": TokenKind.RBRACKET,
    "(": TokenKind.LPAREN,
    ")": TokenKind.RPAREN,
    "|": TokenKind.PIPE,
    ";": TokenKind.SEMICOLON,
    ",": TokenKind.COMMA,
}

# Characters that end a bare word in argument position.
_WORD_DELIMITERS: Final[frozenset[str]] = frozenset(" \t\r\n|;()[]{},")


@dataclass(frozen=True, slots=True)
class LexerCheckpoint:
    """Lexer checkpoint."""

    position: int
    current_start: int
    current_kind: TokenKind
    current_flags: TokenFlags
    after_newline: bool
    after_trivia: bool
    diagnostics_position: int


class Lexer:
    """Lossless, context-sensitive lexer that emits trivia and non-trivia tokens."""

    def __init__(self, source: str, start: int = 0, end: int | None = None) -> None:
        self._source = source
        self._position = start
        self._end = len(source) if end is None else end
        self._after_newline = False
        self._after_trivia = False
        self._current_start = start
        self._current_kind = TokenKind.EOF
        self._current_flags = TokenFlags.NONE
        self._diagnostics: list[Diagnostic] = []

    @property
    def source(self) -> str:
        """Original source text."""
        return self._source

    @property
    def diagnostics(self) -> list[Diagnostic]:
        """List of diagnostics emitted during lexing."""
        return self._diagnostics

    @property
    def current(self) -> TokenKind:
        return self._current_kind

    @property
    def current_range(self) -> TextRange:
        return TextRange(self._current_start, self._position)

    @property
    def current_flags(self) -> TokenFlags:
        return self._current_flags

    @property
    def position(self) -> int:
        return self._position

    @property
    def is_eof(self) -> bool:
        return self._position >= self._end

    def next_token(self, context: LexContext = LexContext.REGULAR) -> Token:
        self._current_start = self._position
        self._current_flags = TokenFlags.NONE

        if self.is_eof:
            kind = TokenKind.EOF
        else:
            kind = self._lex_token(context)

        if self._after_newline:
            self._current_flags |= TokenFlags.PRECEDING_LINE_BREAK
        if self._after_trivia:
            self._current_flags |= TokenFlags.PRECEDING_TRIVIA
        self._current_kind = kind

        if kind.is_trivia:
            self._after_trivia = True
        else:
            self._after_newline = False
            self._after_trivia = False

        return Token(kind, self.current_range, self._current_flags)

    @property
    def checkpoint(self) -> LexerCheckpoint:
        return LexerCheckpoint(
            position=self._position,
            current_start=self._current_start,
            current_kind=self._current_kind,
            current_flags=self._current_flags,
            after_newline=self._after_newline,
            after_trivia=self._after_trivia,
            diagnostics_position=len(self._diagnostics),
        )

    def rewind(self, checkpoint: LexerCheckpoint) -> None:
        self._position = checkpoint.position
        self._current_start = checkpoint.current_start
        self._current_kind = checkpoint.current_kind
        self._current_flags = checkpoint.current_flags
        self._after_newline = checkpoint.after_newline
        self._after_trivia = checkpoint.after_trivia
        if len(self._diagnostics) > checkpoint.diagnostics_position:
            del self._diagnostics[checkpoint.diagnostics_position :]

    def lex(self, context: LexContext = LexContext.REGULAR) -> list[Token]:
        tokens: list[Token] = []
        while True:
            token = self.next_token(context)
            tokens.append(token)
            if token.kind == TokenKind.EOF:
                break
        return tokens

    def _lex_token(self, context: LexContext) -> TokenKind:
        ch = self._current_char()

        if ch in "\r\n\t ":
            return self._consume_newline_or_whitespaces()

        if ch == "#":
            return self._lex_comment()

        if ch in "\"'`":
            return self._lex_string(ch)

        if ch == "r" and self._peek_char() in "#'":
            if (kind := self._lex_raw_string()) is not None:
                return kind

        if ch == "$":
            if self._peek_char() in "\"'":
                return self._lex_interpolation()
            if self._match(_VARIABLE):
                return TokenKind.VARIABLE

        if ch == "." and self._is_after_closing() and self._match(_CELL_PATH):
            return TokenKind.CELL_PATH

        if ch in "eo" and self._match(_REDIRECT_PIPE):
            return TokenKind.PIPE

        if (kind := _PUNCTUATION.get(ch)) is not None:
            self._advance(1)
            return kind

        match context:
            case LexContext.TYPE:
                if self._match(_IDENTIFIER):
                    self._consume_type_arguments()
                    return TokenKind.TYPE
            case LexContext.ARGUMENT | LexContext.RECORD_KEY:
                return self._lex_argument(context)
            case LexContext.REGULAR:
                pass

        if ch.isdigit() and self._match(_NUMBER):
            return TokenKind.NUMBER

        if self._match(_IDENTIFIER):
            return TokenKind.WORD

        for text, kind in _OPERATORS:
            if self._source.startswith(text, self._position, self._end):
                self._advance(len(text))
                return kind

        # Fallback: preserve bytes as SKIPPED for recovery.
        self._advance(1)
        return TokenKind.SKIPPED

    def _lex_argument(self, context: LexContext) -> TokenKind:
        ch = self._current_char()
        peek = self._peek_char()

        if context == LexContext.RECORD_KEY and ch == ":":
            self._advance(1)
            return TokenKind.COLON

        if ch == "-" and (peek.isalpha() or (peek == "-" and self._peek_char(2).isalpha())):
            self._consume_word(context)
            return TokenKind.FLAG

        if self._source.startswith("...", self._position, self._end) and self._peek_char(3) in "$[{(":
            self._advance(3)
            return TokenKind.DOT_DOT_DOT

        self._consume_word(context)
        return TokenKind.WORD

    def _consume_word(self, context: LexContext) -> None:
        while not self.is_eof:
            ch = self._current_char()
            if ch in _WORD_DELIMITERS:
                break
            if ch == ":" and context == LexContext.RECORD_KEY:
                break
            if ch in "\"'`":
                # A quote inside a bare word belongs to it: foo"bar baz".
                self._skip_quoted(ch)
                continue
            self._advance(1)

    def _consume_type_arguments(self) -> None:
        if self._current_char() != "<":
            return
        depth = 0
        while not self.is_eof:
            ch = self._current_char()
            self._advance(1)
            if ch == "<":
                depth += 1
            elif ch == ">":
                depth -= 1
                if depth == 0:
                    return

    def _lex_comment(self) -> TokenKind:
        # Consume until end of line, do not consume the newline itself.
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == "\n" or ch == "\r":
                break
            self._advance(1)
        return TokenKind.COMMENT

    def _lex_string(self, quote: str) -> TokenKind:
        if not self._skip_quoted(quote):
            self._report(LEXER_UNTERMINATED_STRING)
        return TokenKind.STRING

    def _skip_quoted(self, quote: str) -> bool:
        # Consume opening quote
        self._advance(1)
        while not self.is_eof:
            ch = self._current_char()
            if ch == quote:
                self._advance(1)
                return True
            if ch == "\\" and quote == '"':
                self._current_flags |= TokenFlags.HAS_ESCAPE
                self._advance(2)
                continue
            self._advance(1)
        self._position = min(self._position, self._end)
        return False

    def _lex_raw_string(self) -> TokenKind | None:
        hashes = 0
        while self._peek_char(1 + hashes) == "#":
            hashes += 1
        if hashes == 0 or self._peek_char(1 + hashes) != "'":
            return None

        closing = "'" + "#" * hashes
        self._advance(2 + hashes)
        end = self._source.find(closing, self._position, self._end)
        if end < 0:
            self._position = self._end
            self._report(LEXER_UNTERMINATED_RAW_STRING)
        else:
            self._position = end + len(closing)
        return TokenKind.RAW_STRING

    def _lex_interpolation(self) -> TokenKind:
        quote = self._peek_char()
        self._advance(2)
        depth = 0
        while not self.is_eof:
            ch = self._current_char()
            if depth == 0:
                if ch == "\\" and quote == '"':
                    self._advance(2)
                    continue
                if ch == quote:
                    self._advance(1)
                    return TokenKind.INTERPOLATION
                if ch == "(":
                    depth = 1
                self._advance(1)
                continue

            if ch in "\"'`":
                self._skip_quoted(ch)
                continue
            if ch == "(":
                depth += 1
            elif ch == ")":
                depth -= 1
            self._advance(1)

        self._position = min(self._position, self._end)
        self._report(LEXER_UNTERMINATED_STRING)
        return TokenKind.INTERPOLATION

    def _consume_newline_or_whitespaces(self) -> TokenKind:
        if self._consume_newline():
            self._after_newline = True
            return TokenKind.NEWLINE
        while not self.is_eof and self._current_char() in " \t":
            self._advance(1)
        return TokenKind.WHITESPACE

    def _consume_newline(self) -> bool:
        if self._current_char() == "\n":
            self._advance(1)
            return True
        if self._current_char() == "\r":
            if self._peek_char() == "\n":
                self._advance(2)
            else:
                self._advance(1)
            return True
        return False

    def _is_after_closing(self) -> bool:
        return self._position > 0 and self._source[self._position - 1] in ")]}"

    def _match(self, pattern: re.Pattern[str]) -> bool:
        match = pattern.match(self._source, self._position, self._end)
        if match is None or match.end() == self._position:
            return False
        self._position = match.end()
        return True

    def _report(self, spec: DiagnosticSpec) -> None:
        self._diagnostics.append(Diagnostic.from_spec(spec, TextRange(self._current_start, self._position)))

    def _current_char(self) -> str:
        if self.is_eof:
            return "\0"
        return self._source[self._position]

    def _peek_char(self, ahead: int = 1) -> str:
        index = self._position + ahead
        if index >= self._end:
            return "\0"
        return self._source[index]

    def _advance(self, steps: int) -> None:
        self._position += steps


def token_text(source: str, token: Token) -> str:
    """Get the text of a token from the source string based on its range."""
    if token.kind == TokenKind.EOF:
        return ""
    return slice_text_range(source, token.range)


def dump_tokens(tokens: list[Token], source: str, diagnostics: list[Diagnostic] | None = None) -> None:
    """Print token list with kind, range, flags, and text for debugging."""
    for i, tok in enumerate(tokens):
        text = token_text(source, tok)
        print(f"{i:03d} {tok.kind.name:<22} range={tok.range.as_tuple()} flags={tok.flags!s:<40} text={text!r}")

    if diagnostics is not None:
        print("\nDiagnostics:")
        for d in diagnostics:
            print(f"- {d.severity.upper()} {d.code} range={d.range.as_tuple()} message={d.message}")
