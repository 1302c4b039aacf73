"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None


LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="Unterminated string literal.",
    hint="Close the string with the same quote it was opened with.",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_RAW_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_RAW_STRING",
    message="Unterminated raw string literal.",
    hint="Close raw strings with `'` followed by as many `#` as opened them.",
    severity="error",
    category="lexer",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="Expected token",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_EXPRESSION",
    message="Expected an expression",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_NAME: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_NAME",
    message="Expected a name",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_BLOCK: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_BLOCK",
    message="Expected a block",
    hint="Blocks are written as `{ ... }`.",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="Unexpected token",
    severity="error",
    category="parser",
)

PARSER_UNCLOSED_DELIMITER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNCLOSED_DELIMITER",
    message="Unclosed delimiter",
    severity="error",
    category="parser",
)

PARSER_INVALID_PARAMETER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_INVALID_PARAMETER",
    message="Invalid parameter in signature",
    hint="Parameters look like `name: type`, `--flag(-f)` or `...rest`.",
    severity="error",
    category="parser",
)

PARSER_NESTING_TOO_DEEP: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NESTING_TOO_DEEP",
    message="Brackets are nested too deeply",
    hint="Split the expression into smaller `let` bindings.",
    severity="error",
    category="parser",
)
