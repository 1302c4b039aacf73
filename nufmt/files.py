"""Discover `.nu` files and format them on a worker pool."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from enum import StrEnum
from fnmatch import fnmatch
from pathlib import Path

from nufmt.config import Config
from nufmt.diagnostics import Diagnostic, first_error, render_diagnostic
from nufmt.errors import FormatError
from nufmt.pipeline import run_format

logger = logging.getLogger(__name__)

NU_SUFFIX = ".nu"


class FileStatus(StrEnum):
    UNCHANGED = "unchanged"
    REFORMATTED = "reformatted"
    WOULD_REFORMAT = "would reformat"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class FileResult:
    """Outcome for one path; `error` is already rendered for display."""

    path: Path
    status: FileStatus
    error: str | None = None
    diagnostics: tuple[Diagnostic, ...] = ()


@dataclass(frozen=True, slots=True)
class BatchReport:
    results: tuple[FileResult, ...]

    @property
    def failed(self) -> tuple[FileResult, ...]:
        return tuple(r for r in self.results if r.status == FileStatus.FAILED)

    @property
    def changed(self) -> tuple[FileResult, ...]:
        return tuple(
            r for r in self.results if r.status in (FileStatus.REFORMATTED, FileStatus.WOULD_REFORMAT)
        )

    def exit_code(self, check: bool = False) -> int:
        """`2` if anything failed, `1` if a dry run found changes, else `0`."""
        if self.failed:
            return 2
        if check and self.changed:
            return 1
        return 0


def discover_files(paths: Iterable[str | Path], config: Config) -> tuple[list[Path], list[FileResult]]:
    """Expand `paths` into the files to format plus failures for missing paths.

    Directories are walked recursively for `*.nu`. Named files are kept
    whatever their suffix. Any file whose name or path relative to the walked
    root matches an `exclude` pattern is dropped.
    """
    files: dict[Path, None] = {}
    missing: list[FileResult] = []
    for raw in paths:
        path = Path(raw)
        if path.is_dir():
            for candidate in sorted(path.rglob(f"*{NU_SUFFIX}")):
                if candidate.is_file() and not _is_excluded(candidate, path, config.exclude):
                    files.setdefault(candidate, None)
        elif path.is_file():
            if not _is_excluded(path, path.parent, config.exclude):
                files.setdefault(path, None)
        else:
            missing.append(FileResult(path, FileStatus.FAILED, error=f"{path}: No such file or directory"))
    logger.debug("discovered %d files, %d missing paths", len(files), len(missing))
    return list(files), missing


def _is_excluded(path: Path, root: Path, patterns: tuple[str, ...]) -> bool:
    if not patterns:
        return False
    try:
        relative = path.relative_to(root).as_posix()
    except ValueError:
        relative = path.as_posix()
    return any(fnmatch(path.name, pattern) or fnmatch(relative, pattern) for pattern in patterns)


def format_files(
    paths: Iterable[str | Path],
    config: Config,
    *,
    check: bool = False,
    workers: int | None = None,
) -> BatchReport:
    """Format (or with `check`, only inspect) every discovered file.

    Each task reads, parses and formats its own file; `config` is shared
    read-only. A failed file is never written and never stops the others.
    """
    files, results = discover_files(paths, config)

    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(format_file, path, config, check=check): path for path in files}
        for future in as_completed(futures):
            results.append(future.result())

    results.sort(key=lambda result: str(result.path))
    report = BatchReport(tuple(results))
    logger.info(
        "processed %d files: %d changed, %d failed",
        len(report.results),
        len(report.changed),
        len(report.failed),
    )
    return report


def format_file(path: Path, config: Config, *, check: bool = False) -> FileResult:
    try:
        source = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        return FileResult(path, FileStatus.FAILED, error=f"{path}: {exc}")

    try:
        result = run_format(source, config)
    except FormatError as exc:
        logger.debug("formatting %s failed", path, exc_info=True)
        return FileResult(path, FileStatus.FAILED, error=f"{path}: {exc}")
    except RecursionError:
        logger.debug("formatting %s exceeded the recursion limit", path)
        return FileResult(path, FileStatus.FAILED, error=f"{path}: nested too deeply to format")

    diagnostics = tuple(result.diagnostics)
    error = first_error(diagnostics)
    if error is not None:
        return FileResult(
            path,
            FileStatus.FAILED,
            error=render_diagnostic(error, source, str(path), line_index=result.parse.line_index()),
            diagnostics=diagnostics,
        )

    if not result.changed:
        return FileResult(path, FileStatus.UNCHANGED, diagnostics=diagnostics)
    if check:
        return FileResult(path, FileStatus.WOULD_REFORMAT, diagnostics=diagnostics)

    try:
        path.write_text(result.formatted_text, encoding="utf-8")
    except OSError as exc:
        return FileResult(path, FileStatus.FAILED, error=f"{path}: {exc}")
    logger.debug("reformatted %s", path)
    return FileResult(path, FileStatus.REFORMATTED, diagnostics=diagnostics)
