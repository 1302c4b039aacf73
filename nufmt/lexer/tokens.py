"""Lexer tokens."""

from dataclasses import dataclass
from enum import IntEnum, IntFlag, StrEnum
from typing import Final

from nufmt.text import TextRange


class TokenKind(IntEnum):
    # -------------------------
    # Special / sentinels
    # -------------------------
    EOF = 1

    # -------------------------
    # Trivia tokens (emitted by the lexer)
    # -------------------------
    WHITESPACE = 10
    NEWLINE = 11
    COMMENT = 12
    SKIPPED = 13  # unknown byte, kept so the parser can report it

    # -------------------------
    # Words / literals
    # -------------------------
    WORD = 20  # bare word: keywords, command names, unquoted strings
    VARIABLE = 21  # $name with its cell path, e.g. $env.PATH.0
    NUMBER = 22  # ints, floats, units, hex/binary, datetimes
    STRING = 23  # "..." '...' `...`
    RAW_STRING = 24  # r#'...'#
    INTERPOLATION = 25  # $"..." $'...'
    FLAG = 26  # --long, -s
    CELL_PATH = 27  # .a.b? directly after a closing bracket
    TYPE = 28  # signature type, e.g. list<string>

    # -------------------------
    # Operators (multi-char included)
    # -------------------------
    EQUAL = 30  # =
    EQUAL_EQUAL = 31  # ==
    NOT_EQUAL = 32  # !=
    LESS_THAN = 33  # <
    LESS_THAN_OR_EQUAL = 34  # <=
    GREATER_THAN = 35  # >
    GREATER_THAN_OR_EQUAL = 36  # >=
    REGEX_MATCH = 37  # =~
    NOT_REGEX_MATCH = 38  # !~
    PLUS_EQUAL = 39  # +=
    MINUS_EQUAL = 40  # -=
    STAR_EQUAL = 41  # *=
    SLASH_EQUAL = 42  # /=
    CONCAT_EQUAL = 43  # ++=
    PLUS = 44  # +
    MINUS = 45  # -
    STAR = 46  # *
    SLASH = 47  # /
    FLOOR_DIV = 48  # //
    POW = 49  # **
    CONCAT = 50  # ++
    DOT_DOT = 51  # ..
    DOT_DOT_LESS = 52  # ..<
    DOT_DOT_EQUAL = 53  # ..=
    DOT_DOT_DOT = 54  # ...
    FAT_ARROW = 55  # =>
    THIN_ARROW = 56  # ->

    # -------------------------
    # Punctuation / separators
    # -------------------------
    PIPE = 60  # |, also redirecting pipes like e>| and o+e>|
    SEMICOLON = 61  # ;
    COMMA = 62  # ,
    COLON = 63  # :
    DOT = 64  # .
    QUESTION = 65  # ?
    BANG = 66  # !
    CARET = 67  # ^
    AT = 68  # @

    LBRACE = 70  # {
    RBRACE = 71  # }
    LBRACKET = 72  # [
    RBRACKET = 73  # ]
    LPAREN = 74  # (
    RPAREN = 75  # )

    @property
    def is_trivia(self) -> bool:
        return self in (
            TokenKind.WHITESPACE,
            TokenKind.NEWLINE,
            TokenKind.COMMENT,
        )

    @property
    def is_closing(self) -> bool:
        return self in (TokenKind.RBRACE, TokenKind.RBRACKET, TokenKind.RPAREN)


class LexContext(StrEnum):
    """How the next token should be lexed.

    Nushell tokenizes differently depending on where a token sits: `a-b` is a
    single word as a command argument but `$a - b` in an expression.
    """

    REGULAR = "regular"  # expressions: operators are split from operands
    ARGUMENT = "argument"  # command arguments and list items: whitespace separated
    RECORD_KEY = "record_key"  # like ARGUMENT but `:` also ends a word
    TYPE = "type"  # signature types with balanced `<...>`


class TokenFlags(IntFlag):
    """Token metadata flags."""

    NONE = 0
    PRECEDING_LINE_BREAK = 1 << 0  # NEWLINE before
    PRECEDING_TRIVIA = 1 << 1  # whitespace, newline or comment before
    HAS_ESCAPE = 1 << 2


@dataclass(frozen=True, slots=True)
class Token:
    """A single lexed token (trivia or non-trivia)."""

    kind: TokenKind
    range: TextRange
    flags: TokenFlags = TokenFlags.NONE

    def has_preceding_line_break(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_LINE_BREAK)

    def has_preceding_trivia(self) -> bool:
        return bool(self.flags & TokenFlags.PRECEDING_TRIVIA)


# Words that open a statement or expression form rather than a command call.
STATEMENT_KEYWORDS: Final[frozenset[str]] = frozenset(
    {
        "let",
        "mut",
        "const",
        "def",
        "extern",
        "alias",
        "module",
        "use",
        "export",
        "export-env",
        "hide",
        "hide-env",
        "overlay",
        "source",
        "source-env",
        "for",
        "while",
        "loop",
        "return",
        "break",
        "continue",
    }
)

EXPRESSION_KEYWORDS: Final[frozenset[str]] = frozenset({"if", "match", "try"})

VALUE_KEYWORDS: Final[frozenset[str]] = frozenset({"true", "false", "null"})

EOF_TOKEN: Final[Token] = Token(TokenKind.EOF, TextRange.empty(0))
