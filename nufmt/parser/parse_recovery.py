"""Parser recovery primitives."""

from dataclasses import dataclass
from enum import StrEnum

from nufmt.ast import AstError
from nufmt.lexer import TokenKind
from nufmt.parser.parser import Parser


class RecoveryError(StrEnum):
    EOF = "eof"
    ALREADY_RECOVERED = "already_recovered"


@dataclass(frozen=True, slots=True)
class ParseRecoveryTokenSet:
    """Recover by consuming tokens into an error node until a safe token is reached."""

    recovery_set: frozenset[TokenKind]
    line_break: bool = False

    def enable_recovery_on_line_break(self) -> "ParseRecoveryTokenSet":
        return ParseRecoveryTokenSet(recovery_set=self.recovery_set, line_break=True)

    def recover(self, parser: Parser) -> tuple[AstError | None, RecoveryError | None]:
        if parser.at(TokenKind.EOF):
            return None, RecoveryError.EOF

        if self.is_at_recovered(parser):
            return None, RecoveryError.ALREADY_RECOVERED

        start = parser.position
        parser.bump()
        while not parser.at(TokenKind.EOF) and not self.is_at_recovered(parser):
            parser.bump()

        span = parser.span_from(start)
        return AstError(span, parser.slice(span)), None

    def is_at_recovered(self, parser: Parser) -> bool:
        return parser.at_set(self.recovery_set) or (self.line_break and parser.has_preceding_line_break)


STATEMENT_RECOVERY = ParseRecoveryTokenSet(
    recovery_set=frozenset(
        {
            TokenKind.SEMICOLON,
            TokenKind.RBRACE,
            TokenKind.RPAREN,
            TokenKind.RBRACKET,
        }
    ),
).enable_recovery_on_line_break()

ITEM_RECOVERY = ParseRecoveryTokenSet(
    recovery_set=frozenset(
        {
            TokenKind.COMMA,
            TokenKind.RBRACE,
            TokenKind.RPAREN,
            TokenKind.RBRACKET,
            TokenKind.PIPE,
        }
    ),
)
