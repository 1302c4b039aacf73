"""Lexer."""

from nufmt.lexer.lexer import Lexer, LexerCheckpoint, dump_tokens, token_text
from nufmt.lexer.tokens import (
    EOF_TOKEN,
    EXPRESSION_KEYWORDS,
    STATEMENT_KEYWORDS,
    VALUE_KEYWORDS,
    LexContext,
    Token,
    TokenFlags,
    TokenKind,
)

__all__ = [
    "EOF_TOKEN",
    "EXPRESSION_KEYWORDS",
    "STATEMENT_KEYWORDS",
    "VALUE_KEYWORDS",
    "LexContext",
    "Lexer",
    "LexerCheckpoint",
    "Token",
    "TokenFlags",
    "TokenKind",
    "dump_tokens",
    "token_text",
]
