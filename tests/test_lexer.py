from nufmt.lexer import LexContext, Lexer, Token, TokenFlags, TokenKind, token_text


def lex(text: str, context: LexContext = LexContext.REGULAR) -> list[Token]:
    return Lexer(text).lex(context)


def significant(text: str, context: LexContext = LexContext.REGULAR) -> list[tuple[TokenKind, str]]:
    return [(token.kind, token_text(text, token)) for token in lex(text, context) if not token.kind.is_trivia]


def test_let_statement_tokens() -> None:
    assert significant("let x = 1") == [
        (TokenKind.WORD, "let"),
        (TokenKind.WORD, "x"),
        (TokenKind.EQUAL, "="),
        (TokenKind.NUMBER, "1"),
        (TokenKind.EOF, ""),
    ]


def test_lexer_is_lossless_including_trivia() -> None:
    source = "let x = 1  # note\r\nls | get name\n"
    tokens = lex(source)

    assert "".join(token_text(source, token) for token in tokens) == source
    assert [token.kind for token in tokens if token.kind.is_trivia].count(TokenKind.NEWLINE) == 2
    assert (TokenKind.COMMENT, "# note") in [(t.kind, token_text(source, t)) for t in tokens]


def test_operators_use_longest_match() -> None:
    kinds = [kind for kind, _ in significant("1..<5 a ++= b c // d e ** f g != h")]

    assert TokenKind.DOT_DOT_LESS in kinds
    assert TokenKind.CONCAT_EQUAL in kinds
    assert TokenKind.FLOOR_DIV in kinds
    assert TokenKind.POW in kinds
    assert TokenKind.NOT_EQUAL in kinds
    assert TokenKind.DOT_DOT not in kinds


def test_variable_keeps_its_cell_path() -> None:
    assert significant("$env.PATH.0?")[0] == (TokenKind.VARIABLE, "$env.PATH.0?")


def test_numbers_with_units_hex_and_dates() -> None:
    tokens = significant("10kb 5sec 0xff 2024-01-02 1.5e3")

    assert [kind for kind, _ in tokens[:-1]] == [TokenKind.NUMBER] * 5
    assert [text for _, text in tokens[:-1]] == ["10kb", "5sec", "0xff", "2024-01-02", "1.5e3"]


def test_argument_context_lexes_words_and_flags() -> None:
    assert significant("ls -la --all 10kb foo.txt", LexContext.ARGUMENT) == [
        (TokenKind.WORD, "ls"),
        (TokenKind.FLAG, "-la"),
        (TokenKind.FLAG, "--all"),
        (TokenKind.WORD, "10kb"),
        (TokenKind.WORD, "foo.txt"),
        (TokenKind.EOF, ""),
    ]


def test_record_key_context_splits_on_colon() -> None:
    assert significant("name: nu", LexContext.RECORD_KEY) == [
        (TokenKind.WORD, "name"),
        (TokenKind.COLON, ":"),
        (TokenKind.WORD, "nu"),
        (TokenKind.EOF, ""),
    ]


def test_type_context_keeps_generic_arguments_together() -> None:
    assert significant("list<record<a: int>>", LexContext.TYPE)[0] == (TokenKind.TYPE, "list<record<a: int>>")


def test_strings_and_escape_flag() -> None:
    source = "\"a\\\"b\" 'single' `tick`"
    tokens = [token for token in lex(source) if not token.kind.is_trivia]

    assert [token.kind for token in tokens[:3]] == [TokenKind.STRING] * 3
    assert tokens[0].flags & TokenFlags.HAS_ESCAPE
    assert token_text(source, tokens[0]) == '"a\\"b"'


def test_raw_string_and_interpolation_are_single_tokens() -> None:
    assert significant("r#'it's'#")[0] == (TokenKind.RAW_STRING, "r#'it's'#")
    assert significant('$"sum: (1 + (2 * 3))"')[0] == (TokenKind.INTERPOLATION, '$"sum: (1 + (2 * 3))"')


def test_unterminated_string_reports_diagnostic() -> None:
    lexer = Lexer('"never closed')
    lexer.lex()

    assert [d.code for d in lexer.diagnostics] == ["LEXER_UNTERMINATED_STRING"]


def test_unterminated_raw_string_reports_diagnostic() -> None:
    lexer = Lexer("r#'never closed")
    lexer.lex()

    assert [d.code for d in lexer.diagnostics] == ["LEXER_UNTERMINATED_RAW_STRING"]


def test_redirection_pipes_are_pipes() -> None:
    assert significant("cmd e>| save err.txt")[1] == (TokenKind.PIPE, "e>|")
    assert significant("cmd o+e>| save all.txt")[1] == (TokenKind.PIPE, "o+e>|")


def test_cell_path_after_closing_delimiter() -> None:
    assert significant("(ls).name.0") == [
        (TokenKind.LPAREN, "("),
        (TokenKind.WORD, "ls"),
        (TokenKind.RPAREN, ")"),
        (TokenKind.CELL_PATH, ".name.0"),
        (TokenKind.EOF, ""),
    ]


def test_preceding_line_break_flag() -> None:
    tokens = [token for token in lex("a\n  b c") if not token.kind.is_trivia]

    assert not tokens[0].has_preceding_line_break()
    assert tokens[1].has_preceding_line_break()
    assert tokens[1].has_preceding_trivia()
    assert not tokens[2].has_preceding_line_break()


def test_checkpoint_and_rewind_restore_position() -> None:
    lexer = Lexer("a b c")
    lexer.next_token()
    checkpoint = lexer.checkpoint
    lexer.next_token()
    lexer.next_token()

    lexer.rewind(checkpoint)

    assert lexer.position == checkpoint.position
