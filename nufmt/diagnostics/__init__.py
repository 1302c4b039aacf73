"""Diagnostics."""

from nufmt.diagnostics.codes import (
    LEXER_UNTERMINATED_RAW_STRING,
    LEXER_UNTERMINATED_STRING,
    PARSER_EXPECTED_BLOCK,
    PARSER_EXPECTED_EXPRESSION,
    PARSER_EXPECTED_NAME,
    PARSER_EXPECTED_TOKEN,
    PARSER_INVALID_PARAMETER,
    PARSER_NESTING_TOO_DEEP,
    PARSER_UNCLOSED_DELIMITER,
    PARSER_UNEXPECTED_TOKEN,
    DiagnosticSpec,
    Severity,
)
from nufmt.diagnostics.diagnostic import Diagnostic
from nufmt.diagnostics.report import (
    collect_diagnostics,
    first_error,
    has_errors,
    render_diagnostic,
)

__all__ = [
    "LEXER_UNTERMINATED_RAW_STRING",
    "LEXER_UNTERMINATED_STRING",
    "PARSER_EXPECTED_BLOCK",
    "PARSER_EXPECTED_EXPRESSION",
    "PARSER_EXPECTED_NAME",
    "PARSER_EXPECTED_TOKEN",
    "PARSER_INVALID_PARAMETER",
    "PARSER_NESTING_TOO_DEEP",
    "PARSER_UNCLOSED_DELIMITER",
    "PARSER_UNEXPECTED_TOKEN",
    "Diagnostic",
    "DiagnosticSpec",
    "Severity",
    "collect_diagnostics",
    "first_error",
    "has_errors",
    "render_diagnostic",
]
