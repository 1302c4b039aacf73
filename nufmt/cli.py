"""Command line entrypoint: `nufmt [OPTIONS] [FILES...]`."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from collections.abc import Sequence

from nufmt import __version__
from nufmt.config import Config, find_config, load_config
from nufmt.diagnostics import first_error, render_diagnostic
from nufmt.errors import ConfigError, FormatError, ParseError
from nufmt.files import FileStatus, format_files
from nufmt.format.runner import format_text

logger = logging.getLogger(__name__)

SUCCESS_EXIT = 0
CHECK_FAILED_EXIT = 1
ERROR_EXIT = 2

LOG_LEVEL_ENV = "NUFMT_LOG"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="nufmt", description="Format Nushell source files.")
    parser.add_argument("files", nargs="*", metavar="FILES", help="files or directories to format")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="check only; exit 1 if any file would be reformatted",
    )
    parser.add_argument(
        "--stdin",
        action="store_true",
        help="read one program from stdin and write the formatted text to stdout",
    )
    parser.add_argument("-c", "--config", metavar="PATH", help="path to a nufmt.nuon configuration file")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    _configure_logging()
    args = build_parser().parse_args(argv)
    logger.debug("files=%s stdin=%s config=%s dry_run=%s", args.files, args.stdin, args.config, args.dry_run)

    try:
        config = _resolve_config(args.config)
    except ConfigError as exc:
        _error(str(exc))
        return ERROR_EXIT

    if args.stdin:
        if args.files:
            _error("--stdin cannot be combined with FILES")
            return ERROR_EXIT
        return _format_stdin(config)

    if not args.files:
        _error("no input; pass FILES or --stdin")
        return ERROR_EXIT

    report = format_files(args.files, config, check=args.dry_run)
    if not report.results:
        print("warning: no Nushell files were found to format")
        return SUCCESS_EXIT

    for result in report.results:
        match result.status:
            case FileStatus.FAILED:
                _error(result.error or str(result.path))
            case FileStatus.WOULD_REFORMAT:
                print(f"would reformat: {result.path}")
            case FileStatus.REFORMATTED:
                print(f"reformatted: {result.path}")

    exit_code = report.exit_code(check=args.dry_run)
    logger.debug("exit code: %d", exit_code)
    return exit_code


def _resolve_config(path: str | None) -> Config:
    if path is not None:
        return load_config(path)
    found = find_config()
    if found is None:
        return Config()
    return load_config(found)


def _format_stdin(config: Config) -> int:
    source = sys.stdin.read()
    try:
        formatted = format_text(source, config)
    except ParseError as exc:
        error = first_error(exc.diagnostics)
        _error(render_diagnostic(error, source) if error is not None else exc.message)
        return ERROR_EXIT
    except FormatError as exc:
        _error(f"<stdin>: {exc}")
        return ERROR_EXIT
    except RecursionError:
        _error("<stdin>: nested too deeply to format")
        return ERROR_EXIT
    sys.stdout.write(formatted)
    return SUCCESS_EXIT


def _error(message: str) -> None:
    print(f"error: {message}", file=sys.stderr)


def _configure_logging() -> None:
    level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
