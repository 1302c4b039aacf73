"""Load `nufmt.nuon` configuration records."""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import TypeAlias

from nufmt.ast import AstList, AstLiteral, AstRecord, AstRecordEntry, LiteralKind
from nufmt.config.model import CONFIG_FILE_NAME, Config
from nufmt.errors import ConfigError

logger = logging.getLogger(__name__)

_FLOAT = re.compile(r"[+-]?\d+(\.\d+)?([eE][+-]?\d+)?")

ConfigValue: TypeAlias = int | float | str | list["ConfigValue"]


def load_config(path: str | Path) -> Config:
    """Read a NUON record such as `{indent: 2, line_length: 100, exclude: ["a*"]}`.

    Raises:
        ConfigError: the file is unreadable, is not a record, or holds an
            unknown key or a value of the wrong type or range.
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed read the configuration file: {exc}", str(path)) from exc

    config = parse_config(text, source=str(path))
    logger.debug("loaded %s from %s", config, path)
    return config


def find_config(start: str | Path | None = None) -> Path | None:
    """`nufmt.nuon` in `start` (default: the working directory), if present."""
    directory = Path.cwd() if start is None else Path(start)
    candidate = directory / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None


def parse_config(text: str, source: str | None = None) -> Config:
    from nufmt.parser import parse

    parsed = parse(text)
    statements = parsed.program.statements
    if parsed.diagnostics or len(statements) != 1 or not isinstance(statements[0], AstRecord):
        raise ConfigError("The configuration is not a valid nuon record", source)

    options: dict[str, object] = {}
    for entry in statements[0].entries:
        if not isinstance(entry, AstRecordEntry) or not isinstance(entry.key, AstLiteral):
            raise ConfigError("The configuration is not a valid nuon record", source)
        key = _unquote(entry.key)
        value = _value(entry.value)
        if value is None:
            raise ConfigError("The configuration is not a valid nuon record", source)
        _apply_option(options, key, value, source)
    return Config(**options)  # type: ignore[arg-type]


def _apply_option(options: dict[str, object], key: str, value: ConfigValue, source: str | None) -> None:
    match key:
        case "indent":
            options["indent_width"] = _positive_int(key, value, source)
        case "line_length" | "limit":
            options["line_length"] = _positive_int(key, value, source)
        case "margin":
            margin = _int(key, value, source)
            if margin < 0:
                raise ConfigError(
                    f"Found invalid value for option '{key}': got {margin}, expected a non-negative integer",
                    source,
                )
            options["margin"] = margin
        case "exclude":
            options["exclude"] = _patterns(key, value, source)
        case _:
            raise ConfigError(f"Found unknown configuration option: {key}", source)


def _int(key: str, value: ConfigValue, source: str | None) -> int:
    if not isinstance(value, int):
        raise ConfigError(
            f"Found invalid type for option '{key}': got {_type_name(value)}, expected int",
            source,
        )
    return value


def _positive_int(key: str, value: ConfigValue, source: str | None) -> int:
    number = _int(key, value, source)
    if number <= 0:
        raise ConfigError(
            f"Found invalid value for option '{key}': got {number}, expected a positive integer",
            source,
        )
    return number


def _patterns(key: str, value: ConfigValue, source: str | None) -> tuple[str, ...]:
    if not isinstance(value, list):
        raise ConfigError(
            f"Found invalid type for option '{key}': got {_type_name(value)}, expected list<string>",
            source,
        )
    patterns: list[str] = []
    for item in value:
        if not isinstance(item, str):
            raise ConfigError(
                f"Found invalid type for option '{key}': got list<{_type_name(item)}>, expected list<string>",
                source,
            )
        if not item:
            raise ConfigError("Found an invalid exclude pattern", source)
        patterns.append(item)
    return tuple(patterns)


def _type_name(value: ConfigValue) -> str:
    match value:
        case int():
            return "int"
        case float():
            return "float"
        case str():
            return "string"
        case _:
            return "list"


def _value(node: object) -> ConfigValue | None:
    match node:
        case AstLiteral(kind=LiteralKind.STRING | LiteralKind.RAW_STRING):
            return _unquote(node)
        case AstLiteral(kind=LiteralKind.NUMBER | LiteralKind.BARE, text=text):
            number = text.replace("_", "")
            try:
                return int(number)
            except ValueError:
                pass
            if _FLOAT.fullmatch(number):
                return float(number)
            return text
        case AstList(items=items):
            values = [_value(item) for item in items]
            if any(v is None for v in values):
                return None
            return values  # type: ignore[return-value]
        case _:
            return None


def _unquote(literal: AstLiteral) -> str:
    text = literal.text
    match literal.kind:
        case LiteralKind.STRING if text.startswith('"'):
            try:
                return json.loads(text)
            except json.JSONDecodeError:
                return text[1:-1]
        case LiteralKind.STRING:
            return text[1:-1]
        case LiteralKind.RAW_STRING:
            hashes = len(text) - len(text[1:].lstrip("#")) - 1
            return text[2 + hashes : len(text) - 1 - hashes]
        case _:
            return text
