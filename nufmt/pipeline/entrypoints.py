"""Unified entrypoints that orchestrate parse/format with one parse lifecycle."""

from __future__ import annotations

from nufmt.config import Config
from nufmt.format.runner import run_format as _run_format
from nufmt.pipeline.result import NuParseResult
from nufmt.pipeline.results import CheckRunResult, FormatRunResult


def run_format(
    text: str,
    config: Config | None = None,
    *,
    parse: NuParseResult | None = None,
) -> FormatRunResult:
    """Run formatting over one Nushell parse lifecycle."""
    return _run_format(text, config, parse=parse)


def run_check(
    text: str,
    config: Config | None = None,
    *,
    parse: NuParseResult | None = None,
) -> CheckRunResult:
    """Report whether formatting would change `text` without writing anything."""
    format_result = run_format(text, config, parse=parse)
    return CheckRunResult(
        parse=format_result.parse,
        diagnostics=format_result.diagnostics,
        has_errors=format_result.parse.has_errors,
        would_reformat=format_result.changed,
    )
