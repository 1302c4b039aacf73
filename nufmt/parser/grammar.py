"""Statement grammar."""

from typing import Final, TypeAlias

from nufmt.ast import (
    AstAlias,
    AstBreak,
    AstContinue,
    AstDef,
    AstError,
    AstExport,
    AstExtern,
    AstFlag,
    AstFor,
    AstHide,
    AstLet,
    AstLiteral,
    AstLoop,
    AstModule,
    AstOverlay,
    AstProgram,
    AstReturn,
    AstSource,
    AstStatement,
    AstUse,
    AstWhile,
    LiteralKind,
)
from nufmt.diagnostics import PARSER_EXPECTED_NAME, PARSER_EXPECTED_TOKEN, PARSER_UNEXPECTED_TOKEN
from nufmt.lexer import LexContext, TokenKind
from nufmt.parser.expressions import (
    CALL_END,
    parse_block,
    parse_call_arguments,
    parse_expression,
    parse_pipeline,
)
from nufmt.parser.parse_recovery import STATEMENT_RECOVERY
from nufmt.parser.parser import Parser, ParserProgress
from nufmt.parser.signature import parse_signature, parse_type
from nufmt.text import TextRange

_CommandStatement: TypeAlias = type[AstUse] | type[AstHide] | type[AstOverlay] | type[AstSource]

_COMMAND_STATEMENTS: Final[dict[str, _CommandStatement]] = {
    "use": AstUse,
    "hide": AstHide,
    "hide-env": AstHide,
    "overlay": AstOverlay,
    "source": AstSource,
    "source-env": AstSource,
}

_NAME_TOKENS: Final[frozenset[TokenKind]] = frozenset({TokenKind.WORD, TokenKind.STRING, TokenKind.RAW_STRING})


def parse_program(p: Parser) -> AstProgram:
    with p.lex_context(LexContext.REGULAR):
        statements = parse_statement_list(p, None)
    return AstProgram(TextRange(0, len(p.text)), statements)


def parse_statement_list(p: Parser, terminator: TokenKind | None) -> tuple[AstStatement, ...]:
    """Statements separated by newlines or `;`, up to `terminator` or EOF."""
    statements: list[AstStatement] = []
    progress = ParserProgress()
    while not p.at(TokenKind.EOF) and (terminator is None or not p.at(terminator)):
        progress.assert_progressing(p)
        if p.eat(TokenKind.SEMICOLON) is not None:
            continue

        start = p.position
        if not p.current.is_closing:
            statement = parse_statement(p)
            if p.position != start:
                statements.append(statement)
                if not _at_statement_end(p, terminator):
                    p.error(PARSER_UNEXPECTED_TOKEN, message=f"Unexpected `{p.current_text}` after statement")
                    error, _ = STATEMENT_RECOVERY.recover(p)
                    if error is not None:
                        statements.append(error)
                continue

        p.error(PARSER_UNEXPECTED_TOKEN, message=f"Unexpected `{p.current_text}`")
        token = p.bump()
        statements.append(AstError(token.range, p.slice(token.range)))
    return tuple(statements)


def _at_statement_end(p: Parser, terminator: TokenKind | None) -> bool:
    return (
        p.at(TokenKind.EOF)
        or p.at(TokenKind.SEMICOLON)
        or p.has_preceding_line_break
        or (terminator is not None and p.at(terminator))
    )


def parse_statement(p: Parser) -> AstStatement:
    if not p.at(TokenKind.WORD):
        return parse_pipeline(p)

    keyword = p.current_text
    match keyword:
        case "let" | "mut" | "const":
            return parse_let(p)
        case "def":
            return parse_def(p)
        case "extern":
            return parse_extern(p)
        case "alias":
            return parse_alias(p)
        case "module":
            return parse_module(p)
        case "export":
            return parse_export(p)
        case "export-env":
            return parse_export_env(p)
        case "for":
            return parse_for(p)
        case "while":
            return parse_while(p)
        case "loop":
            return parse_loop(p)
        case "return":
            return parse_return(p)
        case "break":
            token = p.bump()
            return AstBreak(token.range)
        case "continue":
            token = p.bump()
            return AstContinue(token.range)
        case _ if keyword in _COMMAND_STATEMENTS:
            return _parse_command_statement(p, _COMMAND_STATEMENTS[keyword])
        case _:
            return parse_pipeline(p)


def _parse_command_statement(p: Parser, node_type: _CommandStatement) -> AstUse | AstHide | AstOverlay | AstSource:
    start = p.position
    keyword = p.current_text
    with p.lex_context(LexContext.ARGUMENT):
        p.bump()
        args = parse_call_arguments(p, CALL_END)
    return node_type(p.span_from(start), keyword, args)


def _parse_name(p: Parser) -> AstLiteral:
    """Command or module name. Expects argument context."""
    if not p.at_set(_NAME_TOKENS):
        p.error(PARSER_EXPECTED_NAME)
        return AstLiteral(TextRange.empty(p.position), LiteralKind.BARE, "")
    kind = LiteralKind.BARE
    if p.at(TokenKind.STRING):
        kind = LiteralKind.STRING
    elif p.at(TokenKind.RAW_STRING):
        kind = LiteralKind.RAW_STRING
    token = p.bump()
    return AstLiteral(token.range, kind, p.slice(token.range))


def _parse_binding_name(p: Parser) -> str:
    if not p.at(TokenKind.WORD) and not p.at(TokenKind.VARIABLE):
        p.error(PARSER_EXPECTED_NAME)
        return ""
    token = p.bump()
    return p.slice(token.range)


# -------------------------
# Declarations
# -------------------------


def parse_let(p: Parser) -> AstLet:
    start = p.position
    keyword = p.current_text
    p.bump()
    name = _parse_binding_name(p)

    type_ = None
    if p.at(TokenKind.COLON):
        with p.lex_context(LexContext.TYPE):
            p.bump()
            type_ = parse_type(p)

    p.expect(TokenKind.EQUAL, "=")
    value = parse_pipeline(p)
    return AstLet(p.span_from(start), keyword, name, type_, value)


def parse_def(p: Parser) -> AstDef:
    start = p.position
    flags: list[AstFlag] = []
    with p.lex_context(LexContext.ARGUMENT):
        p.bump()  # def
        while p.at(TokenKind.FLAG):
            token = p.bump()
            flags.append(AstFlag(token.range, p.slice(token.range)))
        name = _parse_name(p)
    signature = parse_signature(p)
    body = parse_block(p)
    return AstDef(p.span_from(start), tuple(flags), name, signature, body)


def parse_extern(p: Parser) -> AstExtern:
    start = p.position
    with p.lex_context(LexContext.ARGUMENT):
        p.bump()  # extern
        name = _parse_name(p)
    signature = parse_signature(p)
    body = None
    if p.at(TokenKind.LBRACE) and not p.has_preceding_line_break:
        body = parse_block(p)
    return AstExtern(p.span_from(start), name, signature, body)


def parse_alias(p: Parser) -> AstAlias:
    start = p.position
    with p.lex_context(LexContext.ARGUMENT):
        p.bump()  # alias
        name = _parse_name(p)
    p.expect(TokenKind.EQUAL, "=")
    value = parse_pipeline(p)
    return AstAlias(p.span_from(start), name, value)


def parse_module(p: Parser) -> AstModule:
    start = p.position
    with p.lex_context(LexContext.ARGUMENT):
        p.bump()  # module
        name = _parse_name(p)
    body = None
    if p.at(TokenKind.LBRACE) and not p.has_preceding_line_break:
        body = parse_block(p)
    return AstModule(p.span_from(start), name, body)


def parse_export(p: Parser) -> AstExport:
    start = p.position
    p.bump()  # export
    if p.at(TokenKind.EOF) or p.has_preceding_line_break:
        p.error(PARSER_EXPECTED_TOKEN, message="Expected a declaration after `export`")
        return AstExport(p.span_from(start), "export", AstError(TextRange.empty(p.position), ""))
    item = parse_statement(p)
    return AstExport(p.span_from(start), "export", item)


def parse_export_env(p: Parser) -> AstExport:
    start = p.position
    p.bump()  # export-env
    body = parse_block(p)
    return AstExport(p.span_from(start), "export-env", body)


# -------------------------
# Control flow
# -------------------------


def parse_for(p: Parser) -> AstFor:
    start = p.position
    p.bump()  # for
    binding = _parse_binding_name(p)
    if p.at_word("in"):
        p.bump()
    else:
        p.error(PARSER_EXPECTED_TOKEN, message="Expected `in`")
    iterable = parse_expression(p)
    body = parse_block(p)
    return AstFor(p.span_from(start), binding, iterable, body)


def parse_while(p: Parser) -> AstWhile:
    start = p.position
    p.bump()  # while
    condition = parse_expression(p)
    body = parse_block(p)
    return AstWhile(p.span_from(start), condition, body)


def parse_loop(p: Parser) -> AstLoop:
    start = p.position
    p.bump()  # loop
    body = parse_block(p)
    return AstLoop(p.span_from(start), body)


def parse_return(p: Parser) -> AstReturn:
    start = p.position
    p.bump()  # return
    value = None
    if not (
        p.at(TokenKind.EOF)
        or p.at(TokenKind.SEMICOLON)
        or p.current.is_closing
        or p.has_preceding_line_break
    ):
        value = parse_pipeline(p)
    return AstReturn(p.span_from(start), value)
