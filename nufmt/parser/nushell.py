"""High-level parse entrypoint for Nushell source text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from nufmt.ast import AstProgram
from nufmt.diagnostics import Diagnostic, collect_diagnostics
from nufmt.lexer import Lexer
from nufmt.parser.grammar import parse_program
from nufmt.parser.parser import Parser
from nufmt.parser.token_source import TokenSource

if TYPE_CHECKING:
    from nufmt.pipeline import NuParseResult


@dataclass(frozen=True, slots=True)
class ParsedProgram:
    """Program tree plus every lexer and parser diagnostic, sorted by offset."""

    program: AstProgram
    diagnostics: list[Diagnostic]


def parse(text: str) -> ParsedProgram:
    lexer = Lexer(text)
    source = TokenSource(lexer)
    parser = Parser(source)

    program = parse_program(parser)
    parser_diagnostics = parser.finish()
    lexer_diagnostics = source.finish()
    diagnostics = collect_diagnostics(lexer_diagnostics, parser_diagnostics)

    return ParsedProgram(program=program, diagnostics=diagnostics)


def parse_result(text: str) -> NuParseResult:
    from nufmt.pipeline import NuParseResult

    return NuParseResult(source_text=text, parsed=parse(text))
