"""Formatter configuration."""

from nufmt.config.loader import find_config, load_config, parse_config
from nufmt.config.model import (
    CONFIG_FILE_NAME,
    DEFAULT_INDENT_WIDTH,
    DEFAULT_LINE_LENGTH,
    DEFAULT_MARGIN,
    Config,
)

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_INDENT_WIDTH",
    "DEFAULT_LINE_LENGTH",
    "DEFAULT_MARGIN",
    "Config",
    "find_config",
    "load_config",
    "parse_config",
]
