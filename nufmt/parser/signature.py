"""Signature grammar for `def`, `extern` and closure parameters."""

from typing import Final

from nufmt.ast import AstIoType, AstLiteral, AstParameter, AstSignature, LiteralKind, ParameterKind
from nufmt.diagnostics import PARSER_EXPECTED_TOKEN, PARSER_INVALID_PARAMETER
from nufmt.lexer import LexContext, TokenKind
from nufmt.parser.expressions import parse_value
from nufmt.parser.parser import Parser, ParserProgress

_PARAMETER_END: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.COMMA, TokenKind.PIPE, TokenKind.RBRACKET}
)

_TYPE_END: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.COMMA,
        TokenKind.PIPE,
        TokenKind.EQUAL,
        TokenKind.THIN_ARROW,
        TokenKind.LBRACE,
        TokenKind.RBRACE,
        TokenKind.RBRACKET,
        TokenKind.EOF,
    }
)


def parse_signature(p: Parser) -> AstSignature:
    start = p.position
    params: list[AstParameter] = []
    if p.expect(TokenKind.LBRACKET, "[") is not None:
        with p.lex_context(LexContext.RECORD_KEY):
            params = parse_parameters(p, TokenKind.RBRACKET)
        p.expect(TokenKind.RBRACKET, "]")
    params_span = p.span_from(start)

    io_types: tuple[AstIoType, ...] = ()
    bracketed = False
    if p.at(TokenKind.COLON) and not p.has_preceding_line_break:
        io_types, bracketed = _parse_io_types(p)
    return AstSignature(p.span_from(start), params_span, tuple(params), io_types, bracketed)


def parse_parameters(p: Parser, closing: TokenKind) -> list[AstParameter]:
    """Parameters up to, not including, `closing`. Expects record-key context."""
    params: list[AstParameter] = []
    progress = ParserProgress()
    while not p.at(closing) and not p.at(TokenKind.EOF):
        progress.assert_progressing(p)
        if p.eat(TokenKind.COMMA) is not None:
            continue
        param = _parse_parameter(p)
        if param is None:
            p.error(PARSER_INVALID_PARAMETER)
            p.bump()
            continue
        params.append(param)
    return params


def _parse_parameter(p: Parser) -> AstParameter | None:
    start = p.position
    short = None
    match p.current:
        case TokenKind.FLAG:
            kind = ParameterKind.FLAG
            name = p.current_text
            p.bump()
            if name.startswith("--") and p.at(TokenKind.LPAREN) and not p.has_preceding_trivia:
                p.bump()
                if p.at(TokenKind.FLAG):
                    short = p.current_text
                    p.bump()
                else:
                    p.error(PARSER_INVALID_PARAMETER)
                p.expect(TokenKind.RPAREN, ")")
        case TokenKind.WORD:
            text = p.current_text
            p.bump()
            if text.startswith("..."):
                kind, name = ParameterKind.REST, text[3:]
            elif text.endswith("?"):
                kind, name = ParameterKind.OPTIONAL, text[:-1]
            else:
                kind, name = ParameterKind.POSITIONAL, text
        case _:
            return None

    type_ = None
    default = None
    with p.lex_context(LexContext.TYPE):
        if p.at(TokenKind.COLON):
            p.bump()
            type_ = parse_type(p)
        if p.at(TokenKind.EQUAL):
            p.bump()
            with p.lex_context(LexContext.ARGUMENT):
                default = parse_value(p, _PARAMETER_END)
    return AstParameter(p.span_from(start), kind, name, short, type_, default)


def parse_type(p: Parser) -> AstLiteral | None:
    """A type annotation such as `list<string>` or `string@completer`. Expects type context."""
    if not p.at(TokenKind.TYPE):
        p.error(PARSER_EXPECTED_TOKEN, message="Expected a type")
        return None
    start = p.position
    p.bump()
    # Completers and other suffixes are written flush against the type.
    while not p.has_preceding_trivia and not p.at_set(_TYPE_END):
        p.bump()
    span = p.span_from(start)
    return AstLiteral(span, LiteralKind.TYPE, p.slice(span))


def _parse_io_types(p: Parser) -> tuple[tuple[AstIoType, ...], bool]:
    with p.lex_context(LexContext.TYPE):
        p.bump()  # :
        if not p.at(TokenKind.LBRACKET):
            io_type = _parse_io_type(p)
            return ((io_type,) if io_type is not None else ()), False

        p.bump()
        items: list[AstIoType] = []
        progress = ParserProgress()
        while not p.at(TokenKind.RBRACKET) and not p.at(TokenKind.EOF):
            progress.assert_progressing(p)
            if p.eat(TokenKind.COMMA) is not None:
                continue
            io_type = _parse_io_type(p)
            if io_type is None:
                p.bump()
                continue
            items.append(io_type)
        p.expect(TokenKind.RBRACKET, "]")
        return tuple(items), True


def _parse_io_type(p: Parser) -> AstIoType | None:
    start = p.position
    input_type = parse_type(p)
    if input_type is None:
        return None
    if p.expect(TokenKind.THIN_ARROW, "->") is None:
        return None
    output_type = parse_type(p)
    if output_type is None:
        return None
    return AstIoType(p.span_from(start), input_type, output_type)
