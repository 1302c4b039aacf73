"""Pipeline run result carriers for tool entrypoints."""

from __future__ import annotations

from dataclasses import dataclass

from nufmt.diagnostics import Diagnostic
from nufmt.pipeline.result import NuParseResult


@dataclass(frozen=True, slots=True)
class FormatRunResult:
    """Result of formatting from a shared parse result."""

    parse: NuParseResult
    formatted_text: str
    diagnostics: list[Diagnostic]
    changed: bool


@dataclass(frozen=True, slots=True)
class CheckRunResult:
    """Result of a dry run: diagnostics plus whether the file would be rewritten."""

    parse: NuParseResult
    diagnostics: list[Diagnostic]
    has_errors: bool
    would_reformat: bool
