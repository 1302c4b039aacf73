"""Format driver over a shared Nushell parse result."""

from __future__ import annotations

import logging

from nufmt.config import Config
from nufmt.errors import ParseError
from nufmt.format.builder import DocBuilder
from nufmt.format.resolver import resolve
from nufmt.parser import parse_result
from nufmt.pipeline.result import NuParseResult
from nufmt.pipeline.results import FormatRunResult
from nufmt.trivia.extract import extract_trivia
from nufmt.trivia.merge import merge_trivia

logger = logging.getLogger(__name__)


def format_program(parse: NuParseResult, config: Config) -> str:
    """Lay out an error-free parse; the result ends with exactly one newline unless empty."""
    program = parse.program
    doc = DocBuilder(config).build(program)
    trivia = extract_trivia(parse.source_text, program)
    logger.debug("extracted %d trivia items from %d statements", len(trivia), len(program.statements))
    doc = merge_trivia(doc, trivia, parse.source_text, config)
    output = resolve(doc, config.indent_width, config.line_length).rstrip("\n")
    return output + "\n" if output else ""


def format_text(source: str, config: Config | None = None) -> str:
    """Format one program.

    Raises:
        ParseError: the source has syntax errors.
        UnsupportedConstruct: a node kind has no layout rule.
        TriviaAttachmentError: a comment could not be placed.
    """
    parse = parse_result(source)
    if parse.has_errors:
        raise ParseError.from_diagnostics(parse.diagnostics)
    return format_program(parse, config or Config())


def check_text(source: str, config: Config | None = None) -> bool:
    """Whether formatting would change `source`. Nothing is written."""
    return format_text(source, config) != source


def run_format(
    text: str,
    config: Config | None = None,
    *,
    parse: NuParseResult | None = None,
) -> FormatRunResult:
    """Run formatting from a single parse lifecycle.

    Sources with syntax errors are returned unchanged with their diagnostics.
    """
    resolved_parse = _resolve_parse(text, parse=parse)
    diagnostics = list(resolved_parse.diagnostics)

    if resolved_parse.has_errors:
        formatted_text = resolved_parse.source_text
    else:
        formatted_text = format_program(resolved_parse, config or Config())
    changed = formatted_text != resolved_parse.source_text

    return FormatRunResult(
        parse=resolved_parse,
        formatted_text=formatted_text,
        diagnostics=diagnostics,
        changed=changed,
    )


def _resolve_parse(text: str, *, parse: NuParseResult | None) -> NuParseResult:
    if parse is not None:
        if parse.source_text != text:
            raise ValueError("Provided parse result must be for the same text")
        return parse
    return parse_result(text)
