"""Parser infrastructure (token source + recursive-descent grammar)."""

from nufmt.parser.grammar import parse_program, parse_statement_list
from nufmt.parser.nushell import ParsedProgram, parse, parse_result
from nufmt.parser.parse_recovery import ParseRecoveryTokenSet, RecoveryError
from nufmt.parser.parser import Parser, ParserCheckpoint, ParserProgress
from nufmt.parser.token_source import TokenSource, TokenSourceCheckpoint

__all__ = [
    "ParseRecoveryTokenSet",
    "ParsedProgram",
    "Parser",
    "ParserCheckpoint",
    "ParserProgress",
    "RecoveryError",
    "TokenSource",
    "TokenSourceCheckpoint",
    "parse",
    "parse_program",
    "parse_result",
    "parse_statement_list",
]
