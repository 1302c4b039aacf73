"""Shared parse carrier and lazy pipeline entrypoint exports."""

from __future__ import annotations

from typing import TYPE_CHECKING

from nufmt.pipeline.result import NuParseResult
from nufmt.pipeline.results import CheckRunResult, FormatRunResult

if TYPE_CHECKING:
    from nufmt.config import Config


def run_format(
    text: str,
    config: Config | None = None,
    *,
    parse: NuParseResult | None = None,
) -> FormatRunResult:
    from nufmt.pipeline.entrypoints import run_format as _run_format

    return _run_format(text, config, parse=parse)


def run_check(
    text: str,
    config: Config | None = None,
    *,
    parse: NuParseResult | None = None,
) -> CheckRunResult:
    from nufmt.pipeline.entrypoints import run_check as _run_check

    return _run_check(text, config, parse=parse)


__all__ = [
    "CheckRunResult",
    "FormatRunResult",
    "NuParseResult",
    "run_check",
    "run_format",
]
