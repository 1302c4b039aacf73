"""Diagnostics helpers."""

from __future__ import annotations

from collections.abc import Iterable

from nufmt.diagnostics.diagnostic import Diagnostic
from nufmt.text import LineIndex


def collect_diagnostics(*groups: Iterable[Diagnostic]) -> list[Diagnostic]:
    diagnostics: list[Diagnostic] = []
    for group in groups:
        diagnostics.extend(group)
    diagnostics.sort(key=lambda d: d.range.start)
    return diagnostics


def has_errors(diagnostics: Iterable[Diagnostic]) -> bool:
    return any(d.severity == "error" for d in diagnostics)


def first_error(diagnostics: Iterable[Diagnostic]) -> Diagnostic | None:
    for diagnostic in diagnostics:
        if diagnostic.severity == "error":
            return diagnostic
    return None


def render_diagnostic(
    diagnostic: Diagnostic,
    source: str,
    path: str = "<stdin>",
    *,
    line_index: LineIndex | None = None,
) -> str:
    """Render as `path:line:col: message` with one-based line and column.

    Pass `line_index` to reuse an index already built over `source`.
    """
    if line_index is None:
        line_index = LineIndex(source)
    line, col = line_index.line_col(diagnostic.range.start)
    text = f"{path}:{line + 1}:{col + 1}: {diagnostic.message}"
    if diagnostic.hint:
        text += f" ({diagnostic.hint})"
    return text
