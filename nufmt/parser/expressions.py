"""Expression grammar: pipelines, command calls, math and value literals."""

from typing import Final

from nufmt.ast import (
    AstAssignment,
    AstBinaryOp,
    AstBlock,
    AstCall,
    AstCellPath,
    AstClosure,
    AstError,
    AstExpr,
    AstFlag,
    AstIf,
    AstInterpolation,
    AstList,
    AstLiteral,
    AstMatch,
    AstMatchArm,
    AstPipeline,
    AstRange,
    AstRecord,
    AstRecordEntry,
    AstSpread,
    AstStatement,
    AstStringPart,
    AstSubexpression,
    AstTable,
    AstTry,
    AstUnaryOp,
    AstVariable,
    LiteralKind,
)
from nufmt.diagnostics import (
    PARSER_EXPECTED_BLOCK,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_NESTING_TOO_DEEP,
    PARSER_UNEXPECTED_TOKEN,
)
from nufmt.lexer import EXPRESSION_KEYWORDS, VALUE_KEYWORDS, LexContext, Lexer, TokenKind
from nufmt.parser.parse_recovery import ITEM_RECOVERY
from nufmt.parser.parser import Parser, ParserProgress
from nufmt.parser.token_source import TokenSource
from nufmt.text import TextRange

# Binding power of symbolic and word operators; higher binds tighter.
_SYMBOL_OPERATORS: Final[dict[TokenKind, int]] = {
    TokenKind.POW: 100,
    TokenKind.STAR: 95,
    TokenKind.SLASH: 95,
    TokenKind.FLOOR_DIV: 95,
    TokenKind.PLUS: 90,
    TokenKind.MINUS: 90,
    TokenKind.CONCAT: 80,
    TokenKind.EQUAL_EQUAL: 80,
    TokenKind.NOT_EQUAL: 80,
    TokenKind.LESS_THAN: 80,
    TokenKind.LESS_THAN_OR_EQUAL: 80,
    TokenKind.GREATER_THAN: 80,
    TokenKind.GREATER_THAN_OR_EQUAL: 80,
    TokenKind.REGEX_MATCH: 80,
    TokenKind.NOT_REGEX_MATCH: 80,
}

_WORD_OPERATORS: Final[dict[str, int]] = {
    "mod": 95,
    "bit-shl": 85,
    "bit-shr": 85,
    "in": 80,
    "not-in": 80,
    "has": 80,
    "not-has": 80,
    "starts-with": 80,
    "ends-with": 80,
    "like": 80,
    "not-like": 80,
    "bit-and": 75,
    "bit-xor": 70,
    "bit-or": 60,
    "and": 50,
    "xor": 45,
    "or": 40,
}

_NOT_PRECEDENCE: Final = 55

_ASSIGNMENT_OPERATORS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.EQUAL,
        TokenKind.PLUS_EQUAL,
        TokenKind.MINUS_EQUAL,
        TokenKind.STAR_EQUAL,
        TokenKind.SLASH_EQUAL,
        TokenKind.CONCAT_EQUAL,
    }
)

_RANGE_OPERATORS: Final[frozenset[TokenKind]] = frozenset(
    {TokenKind.DOT_DOT, TokenKind.DOT_DOT_LESS, TokenKind.DOT_DOT_EQUAL}
)

_RANGE_OPERAND_STARTS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.NUMBER,
        TokenKind.VARIABLE,
        TokenKind.STRING,
        TokenKind.LPAREN,
        TokenKind.MINUS,
    }
)

_EXPRESSION_STARTS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.VARIABLE,
        TokenKind.NUMBER,
        TokenKind.STRING,
        TokenKind.RAW_STRING,
        TokenKind.INTERPOLATION,
        TokenKind.LBRACKET,
        TokenKind.LBRACE,
        TokenKind.LPAREN,
        TokenKind.MINUS,
        TokenKind.DOT_DOT,
        TokenKind.DOT_DOT_LESS,
        TokenKind.DOT_DOT_EQUAL,
        TokenKind.DOT_DOT_DOT,
    }
)

CALL_END: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.PIPE,
        TokenKind.SEMICOLON,
        TokenKind.RBRACE,
        TokenKind.RBRACKET,
        TokenKind.RPAREN,
    }
)

_ARM_CALL_END: Final[frozenset[TokenKind]] = CALL_END | {TokenKind.COMMA}

ITEM_END: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.COMMA,
        TokenKind.SEMICOLON,
        TokenKind.PIPE,
        TokenKind.RBRACE,
        TokenKind.RBRACKET,
        TokenKind.RPAREN,
    }
)

_OPENING: Final[frozenset[TokenKind]] = frozenset({TokenKind.LBRACE, TokenKind.LBRACKET, TokenKind.LPAREN})

_RECORD_KEY_STARTS: Final[frozenset[TokenKind]] = frozenset(
    {
        TokenKind.WORD,
        TokenKind.STRING,
        TokenKind.RAW_STRING,
        TokenKind.VARIABLE,
        TokenKind.NUMBER,
        TokenKind.INTERPOLATION,
    }
)


# -------------------------
# Pipelines and calls
# -------------------------


def parse_pipeline(p: Parser) -> AstExpr:
    start = p.position
    elements = [parse_pipeline_element(p)]
    pipes: list[str] = []
    while p.at(TokenKind.PIPE):
        pipes.append(p.current_text)
        p.bump()
        elements.append(parse_pipeline_element(p))

    if not pipes:
        return elements[0]
    return AstPipeline(p.span_from(start), tuple(elements), tuple(pipes))


def parse_pipeline_element(p: Parser) -> AstExpr:
    kind = p.current
    if kind == TokenKind.WORD:
        text = p.current_text
        if text in EXPRESSION_KEYWORDS:
            return _parse_keyword_expression(p, text)
        if text in VALUE_KEYWORDS or text == "not":
            return _parse_expression_element(p)
        return parse_call(p)

    if kind in _EXPRESSION_STARTS:
        return _parse_expression_element(p)

    if kind == TokenKind.EOF or kind in CALL_END or kind == TokenKind.COMMA:
        p.error(PARSER_EXPECTED_EXPRESSION)
        return AstError(TextRange.empty(p.position), "")

    # `^ext`, `./script.nu`, `~/bin/tool` and friends are command heads.
    return parse_call(p)


def _parse_expression_element(p: Parser) -> AstExpr:
    start = p.position
    expr = parse_expression(p)
    if p.at_set(_ASSIGNMENT_OPERATORS) and not p.has_preceding_line_break:
        operator = p.current_text
        p.bump()
        value = parse_pipeline(p)
        return AstAssignment(p.span_from(start), expr, operator, value)
    return expr


def parse_call(p: Parser, terminators: frozenset[TokenKind] = CALL_END) -> AstCall:
    start = p.position
    with p.lex_context(LexContext.ARGUMENT):
        head_token = p.bump()
        head_text = p.slice(head_token.range)
        head = AstLiteral(head_token.range, LiteralKind.BARE, head_text)
        args = parse_call_arguments(p, terminators)
    return AstCall(p.span_from(start), head, args, external=head_text.startswith("^"))


def parse_call_arguments(p: Parser, terminators: frozenset[TokenKind] = CALL_END) -> tuple[AstExpr, ...]:
    """Arguments up to the end of the line or a pipeline/statement delimiter.

    Must be called in argument context.
    """
    args: list[AstExpr] = []
    progress = ParserProgress()
    while not _at_call_end(p, terminators):
        progress.assert_progressing(p)
        args.append(parse_value(p, terminators))
    return tuple(args)


def _at_call_end(p: Parser, terminators: frozenset[TokenKind]) -> bool:
    return p.at(TokenKind.EOF) or p.at_set(terminators) or p.has_preceding_line_break


def parse_value(p: Parser, terminators: frozenset[TokenKind] = ITEM_END) -> AstExpr:
    """One argument or list/record item.

    Pieces written without whitespace between them form a single value in
    Nushell (`foo(bar)`, `$"a"b`), so they are kept together as raw text.
    """
    start = p.position
    value = parse_argument_piece(p)
    glued = False
    while not p.has_preceding_trivia and not p.at(TokenKind.EOF) and not p.at_set(terminators):
        parse_argument_piece(p)
        glued = True

    if glued:
        span = p.span_from(start)
        return AstLiteral(span, LiteralKind.RAW, p.slice(span))
    return value


def parse_argument_piece(p: Parser) -> AstExpr:
    start = p.position
    if p.too_deep and p.at_set(_OPENING):
        return skip_nested(p)
    match p.current:
        case TokenKind.LBRACE:
            value = parse_brace(p)
        case TokenKind.LBRACKET:
            value = parse_list(p)
        case TokenKind.LPAREN:
            value = parse_subexpression(p)
        case TokenKind.DOT_DOT_DOT:
            p.bump()
            inner = parse_argument_piece(p)
            return AstSpread(p.span_from(start), inner)
        case TokenKind.VARIABLE:
            return _variable(p)
        case TokenKind.INTERPOLATION:
            return parse_interpolation(p)
        case TokenKind.FLAG:
            token = p.bump()
            return AstFlag(token.range, p.slice(token.range))
        case _:
            return _literal(p)
    return _parse_cell_path(p, value)


# -------------------------
# Math expressions
# -------------------------


def parse_expression(p: Parser, min_precedence: int = 0) -> AstExpr:
    with p.lex_context(LexContext.REGULAR):
        return _parse_binary(p, min_precedence)


def _binary_operator(p: Parser) -> tuple[str, int] | None:
    if p.has_preceding_line_break:
        return None
    if (precedence := _SYMBOL_OPERATORS.get(p.current)) is not None:
        return p.current_text, precedence
    if p.at(TokenKind.WORD) and (precedence := _WORD_OPERATORS.get(p.current_text)) is not None:
        return p.current_text, precedence
    return None


def _parse_binary(p: Parser, min_precedence: int) -> AstExpr:
    start = p.position
    left = _parse_unary(p)
    while (operator := _binary_operator(p)) is not None:
        text, precedence = operator
        if precedence < min_precedence:
            break
        p.bump()
        # `**` is right associative.
        right = _parse_binary(p, precedence if text == "**" else precedence + 1)
        left = AstBinaryOp(p.span_from(start), left, text, right)
    return left


def _parse_unary(p: Parser) -> AstExpr:
    start = p.position
    if p.at_word("not"):
        p.bump()
        operand = _parse_binary(p, _NOT_PRECEDENCE)
        return AstUnaryOp(p.span_from(start), "not", operand)

    if p.at(TokenKind.MINUS) and not p.nth_token(1).has_preceding_trivia():
        p.bump()
        operand = _parse_postfix(p)
        return AstUnaryOp(p.span_from(start), "-", operand)

    if p.at(TokenKind.DOT_DOT_DOT):
        p.bump()
        value = _parse_postfix(p)
        return AstSpread(p.span_from(start), value)

    return _parse_postfix(p)


def _parse_postfix(p: Parser) -> AstExpr:
    start = p.position
    if p.at_set(_RANGE_OPERATORS):
        return _parse_range(p, start, None)

    value = _parse_cell_path(p, _parse_primary(p))
    if p.at_set(_RANGE_OPERATORS) and not p.has_preceding_trivia:
        return _parse_range(p, start, value)
    return value


def _parse_range(p: Parser, start: int, first: AstExpr | None) -> AstRange:
    operator = p.current_text
    p.bump()
    second = _parse_range_operand(p)
    if (
        operator == ".."
        and second is not None
        and p.at_set(_RANGE_OPERATORS)
        and not p.has_preceding_trivia
    ):
        end_operator = p.current_text
        p.bump()
        end = _parse_range_operand(p)
        return AstRange(p.span_from(start), first, second, end_operator, end)
    return AstRange(p.span_from(start), first, None, operator, second)


def _parse_range_operand(p: Parser) -> AstExpr | None:
    if p.has_preceding_trivia or not p.at_set(_RANGE_OPERAND_STARTS):
        return None
    start = p.position
    if p.at(TokenKind.MINUS):
        p.bump()
        operand = _parse_cell_path(p, _parse_primary(p))
        return AstUnaryOp(p.span_from(start), "-", operand)
    return _parse_cell_path(p, _parse_primary(p))


def _parse_primary(p: Parser) -> AstExpr:
    if p.too_deep and p.at_set(_OPENING):
        return skip_nested(p)
    match p.current:
        case TokenKind.VARIABLE:
            return _variable(p)
        case TokenKind.NUMBER | TokenKind.STRING | TokenKind.RAW_STRING:
            return _literal(p)
        case TokenKind.INTERPOLATION:
            return parse_interpolation(p)
        case TokenKind.LBRACKET:
            return parse_list(p)
        case TokenKind.LBRACE:
            return parse_brace(p)
        case TokenKind.LPAREN:
            return parse_subexpression(p)
        case TokenKind.WORD:
            text = p.current_text
            if text in EXPRESSION_KEYWORDS:
                return _parse_keyword_expression(p, text)
            return _literal(p)
        case _:
            p.error(PARSER_EXPECTED_EXPRESSION)
            return AstError(TextRange.empty(p.position), "")


def _parse_keyword_expression(p: Parser, keyword: str) -> AstExpr:
    match keyword:
        case "if":
            return parse_if(p)
        case "match":
            return parse_match(p)
        case _:
            return parse_try(p)


def _parse_cell_path(p: Parser, target: AstExpr) -> AstExpr:
    if p.at(TokenKind.CELL_PATH) and not p.has_preceding_trivia:
        token = p.bump()
        return AstCellPath(p.span_from(target.span.start), target, p.slice(token.range))
    return target


def _variable(p: Parser) -> AstVariable:
    token = p.bump()
    return AstVariable(token.range, p.slice(token.range))


def _literal(p: Parser) -> AstLiteral:
    kind = p.current
    token = p.bump()
    text = p.slice(token.range)
    match kind:
        case TokenKind.NUMBER:
            literal_kind = LiteralKind.NUMBER
        case TokenKind.STRING:
            literal_kind = LiteralKind.STRING
        case TokenKind.RAW_STRING:
            literal_kind = LiteralKind.RAW_STRING
        case TokenKind.TYPE:
            literal_kind = LiteralKind.TYPE
        case TokenKind.WORD if text in ("true", "false"):
            literal_kind = LiteralKind.BOOL
        case TokenKind.WORD if text == "null":
            literal_kind = LiteralKind.NULL
        case TokenKind.WORD:
            literal_kind = LiteralKind.BARE
        case _:
            literal_kind = LiteralKind.RAW
    return AstLiteral(token.range, literal_kind, text)


# -------------------------
# Collections, closures and blocks
# -------------------------


def parse_list(p: Parser) -> AstList | AstTable:
    start = p.position
    p.bump()  # [
    items: list[AstExpr] = []
    header: AstList | None = None
    with p.nested(), p.lex_context(LexContext.ARGUMENT):
        progress = ParserProgress()
        while not p.at(TokenKind.RBRACKET) and not p.at(TokenKind.EOF):
            progress.assert_progressing(p)
            if p.eat(TokenKind.COMMA) is not None:
                continue
            if p.at(TokenKind.SEMICOLON) and header is None and len(items) == 1 and isinstance(items[0], AstList):
                header = items.pop()
                p.bump()
                continue
            if p.at_set(ITEM_END):
                p.error(PARSER_UNEXPECTED_TOKEN, message=f"Unexpected `{p.current_text}` in list")
                error, _ = ITEM_RECOVERY.recover(p)
                if error is None:
                    token = p.bump()
                    error = AstError(token.range, p.slice(token.range))
                items.append(error)
                continue
            items.append(parse_value(p))
    p.expect(TokenKind.RBRACKET, "]")

    if header is not None:
        return AstTable(p.span_from(start), header, tuple(items))
    return AstList(p.span_from(start), tuple(items))


def parse_brace(p: Parser) -> AstExpr:
    """`{` starts a record or a closure; decide from what follows it."""
    start = p.position
    following = p.nth_token(1)
    if following.kind == TokenKind.PIPE:
        return parse_closure(p)
    if following.kind == TokenKind.RBRACE:
        p.bump()
        p.bump()
        return AstRecord(p.span_from(start), ())
    if _looks_like_record(p):
        return parse_record(p)
    return parse_closure(p)


def _looks_like_record(p: Parser) -> bool:
    checkpoint = p.checkpoint()
    p.bump()
    with p.lex_context(LexContext.RECORD_KEY):
        first = p.current
        second = p.nth_token(1)
    p.rewind(checkpoint)

    if first == TokenKind.DOT_DOT_DOT:
        return True
    return first in _RECORD_KEY_STARTS and second.kind == TokenKind.COLON and not second.has_preceding_trivia()


def parse_record(p: Parser) -> AstRecord:
    start = p.position
    p.bump()  # {
    entries: list[AstRecordEntry | AstSpread] = []
    with p.nested(), p.lex_context(LexContext.RECORD_KEY):
        progress = ParserProgress()
        while not p.at(TokenKind.RBRACE) and not p.at(TokenKind.EOF):
            progress.assert_progressing(p)
            if p.eat(TokenKind.COMMA) is not None:
                continue
            if p.at_set(ITEM_END):
                p.error(PARSER_UNEXPECTED_TOKEN, message=f"Unexpected `{p.current_text}` in record")
                p.bump()
                continue
            entries.append(_parse_record_entry(p))
    p.expect(TokenKind.RBRACE, "}")
    return AstRecord(p.span_from(start), tuple(entries))


def _parse_record_entry(p: Parser) -> AstRecordEntry | AstSpread:
    start = p.position
    if p.at(TokenKind.DOT_DOT_DOT):
        p.bump()
        with p.lex_context(LexContext.ARGUMENT):
            value = parse_value(p)
        return AstSpread(p.span_from(start), value)

    key = parse_argument_piece(p)
    if p.expect(TokenKind.COLON, ":") is None:
        error, _ = ITEM_RECOVERY.recover(p)
        value: AstExpr = error or AstError(TextRange.empty(p.position), "")
        return AstRecordEntry(p.span_from(start), key, value)

    with p.lex_context(LexContext.ARGUMENT):
        value = parse_value(p)
    return AstRecordEntry(p.span_from(start), key, value)


def parse_closure(p: Parser) -> AstClosure:
    from nufmt.parser.signature import parse_parameters

    start = p.position
    p.bump()  # {
    params = None
    if p.at(TokenKind.PIPE):
        p.bump()
        with p.lex_context(LexContext.RECORD_KEY):
            params = tuple(parse_parameters(p, TokenKind.PIPE))
            p.expect(TokenKind.PIPE, "|")
    with p.nested():
        statements = parse_block_statements(p, TokenKind.RBRACE)
    p.expect(TokenKind.RBRACE, "}")
    return AstClosure(p.span_from(start), params, statements)


def parse_block(p: Parser) -> AstBlock:
    start = p.position
    if not p.at(TokenKind.LBRACE):
        p.error(PARSER_EXPECTED_BLOCK)
        return AstBlock(TextRange.empty(p.position), ())
    if p.too_deep:
        error = skip_nested(p)
        return AstBlock(error.span, (error,))
    p.bump()
    with p.nested():
        statements = parse_block_statements(p, TokenKind.RBRACE)
    p.expect(TokenKind.RBRACE, "}")
    return AstBlock(p.span_from(start), statements)


def parse_closure_or_block(p: Parser) -> AstClosure | AstBlock:
    if p.at(TokenKind.LBRACE) and p.nth(1) == TokenKind.PIPE and not p.too_deep:
        return parse_closure(p)
    return parse_block(p)


def parse_subexpression(p: Parser) -> AstExpr:
    return _parse_cell_path(p, _parse_parenthesized(p))


def _parse_parenthesized(p: Parser) -> AstSubexpression:
    start = p.position
    p.bump()  # (
    with p.nested():
        statements = parse_block_statements(p, TokenKind.RPAREN)
    p.expect(TokenKind.RPAREN, ")")
    return AstSubexpression(p.span_from(start), statements)


def skip_nested(p: Parser) -> AstError:
    """Consume a group too deeply nested to descend into, up to its matching closer."""
    start = p.position
    p.error(PARSER_NESTING_TOO_DEEP)
    depth = 0
    while not p.at(TokenKind.EOF):
        token = p.bump()
        if token.kind in _OPENING:
            depth += 1
        elif token.kind.is_closing:
            depth -= 1
            if depth == 0:
                break
    span = p.span_from(start)
    return AstError(span, p.slice(span))


def parse_block_statements(p: Parser, terminator: TokenKind) -> tuple[AstStatement, ...]:
    from nufmt.parser.grammar import parse_statement_list

    with p.lex_context(LexContext.REGULAR):
        return parse_statement_list(p, terminator)


# -------------------------
# Control flow expressions
# -------------------------


def parse_if(p: Parser) -> AstIf:
    start = p.position
    p.bump()  # if
    condition = parse_expression(p)
    then_block = parse_block(p)
    else_branch: AstIf | AstBlock | None = None
    if p.at_word("else"):
        p.bump()
        if p.at_word("if"):
            else_branch = parse_if(p)
        else:
            else_branch = parse_block(p)
    return AstIf(p.span_from(start), condition, then_block, else_branch)


def parse_match(p: Parser) -> AstMatch:
    start = p.position
    p.bump()  # match
    subject = parse_expression(p)
    arms_start = p.position
    arms: list[AstMatchArm] = []
    if p.expect(TokenKind.LBRACE, "{") is not None:
        with p.lex_context(LexContext.REGULAR):
            progress = ParserProgress()
            while not p.at(TokenKind.RBRACE) and not p.at(TokenKind.EOF):
                progress.assert_progressing(p)
                if p.eat(TokenKind.COMMA) is not None:
                    continue
                arm_start = p.position
                arm = _parse_match_arm(p)
                if p.position == arm_start:
                    p.error(PARSER_UNEXPECTED_TOKEN)
                    p.bump()
                    continue
                arms.append(arm)
        p.expect(TokenKind.RBRACE, "}")
    return AstMatch(p.span_from(start), subject, p.span_from(arms_start), tuple(arms))


def _parse_match_arm(p: Parser) -> AstMatchArm:
    start = p.position
    patterns = [_parse_postfix(p)]
    while p.at(TokenKind.PIPE):
        p.bump()
        patterns.append(_parse_postfix(p))

    guard = None
    if p.at_word("if"):
        p.bump()
        guard = parse_expression(p)

    if p.expect(TokenKind.FAT_ARROW, "=>") is None:
        body: AstExpr = AstError(TextRange.empty(p.position), "")
    elif p.at(TokenKind.LBRACE):
        body = parse_block(p)
    elif p.at(TokenKind.WORD) and p.current_text not in VALUE_KEYWORDS | EXPRESSION_KEYWORDS | {"not"}:
        body = parse_call(p, _ARM_CALL_END)
    else:
        body = parse_expression(p)
    return AstMatchArm(p.span_from(start), tuple(patterns), guard, body)


def parse_try(p: Parser) -> AstTry:
    start = p.position
    p.bump()  # try
    body = parse_block(p)
    catch = None
    if p.at_word("catch"):
        p.bump()
        catch = parse_closure_or_block(p)
    return AstTry(p.span_from(start), body, catch)


# -------------------------
# String interpolation
# -------------------------


def parse_interpolation(p: Parser) -> AstInterpolation:
    token = p.bump()
    text = p.slice(token.range)
    parts: list[AstStringPart | AstSubexpression] = []
    for is_expression, start, end in _interpolation_segments(text, token.range.start):
        if is_expression:
            parts.append(_parse_embedded(p, start, end))
        else:
            parts.append(AstStringPart(TextRange(start, end), p.text[start:end]))
    return AstInterpolation(token.range, text, tuple(parts))


def _interpolation_segments(text: str, base: int) -> list[tuple[bool, int, int]]:
    """Split `$"..."` into literal runs and `(...)` expressions, as absolute offsets."""
    quote = text[1]
    end = len(text) - 1 if len(text) >= 3 and text.endswith(quote) else len(text)
    segments: list[tuple[bool, int, int]] = []
    literal_start = index = 2
    while index < end:
        ch = text[index]
        if ch == "\\" and quote == '"':
            index = min(index + 2, end)
            continue
        if ch == "(":
            close = _matching_paren(text, index, end)
            if literal_start < index:
                segments.append((False, base + literal_start, base + index))
            segments.append((True, base + index, base + close))
            index = literal_start = close
            continue
        index += 1
    if literal_start < end:
        segments.append((False, base + literal_start, base + end))
    return segments


def _matching_paren(text: str, start: int, end: int) -> int:
    depth = 0
    index = start
    while index < end:
        ch = text[index]
        if ch in "\"'`":
            close = text.find(ch, index + 1, end)
            index = end if close < 0 else close + 1
            continue
        if ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return end


def _parse_embedded(p: Parser, start: int, end: int) -> AstSubexpression:
    source = TokenSource(Lexer(p.text, start, end))
    nested = Parser(source, depth=p.depth)
    value = _parse_parenthesized(nested)
    if not nested.at(TokenKind.EOF):
        nested.error(PARSER_UNEXPECTED_TOKEN)
    p.extend_diagnostics(source.finish())
    p.extend_diagnostics(nested.finish())
    return value
