"""Formatter options."""

from dataclasses import dataclass
from typing import Final

DEFAULT_INDENT_WIDTH: Final = 4
DEFAULT_LINE_LENGTH: Final = 80
DEFAULT_MARGIN: Final = 1

CONFIG_FILE_NAME: Final = "nufmt.nuon"


@dataclass(frozen=True, slots=True)
class Config:
    """Immutable options shared read-only by every formatting run."""

    indent_width: int = DEFAULT_INDENT_WIDTH
    line_length: int = DEFAULT_LINE_LENGTH
    margin: int = DEFAULT_MARGIN
    exclude: tuple[str, ...] = ()
