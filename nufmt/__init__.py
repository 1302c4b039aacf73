"""nufmt: an opinionated formatter for Nushell scripts."""

__version__ = "0.1.0"

from nufmt.config import Config, load_config  # noqa: E402
from nufmt.errors import (  # noqa: E402
    ConfigError,
    FormatError,
    ParseError,
    TriviaAttachmentError,
    UnsupportedConstruct,
)
from nufmt.format.runner import check_text, format_text  # noqa: E402
from nufmt.pipeline import run_check, run_format  # noqa: E402

__all__ = [
    "Config",
    "ConfigError",
    "FormatError",
    "ParseError",
    "TriviaAttachmentError",
    "UnsupportedConstruct",
    "__version__",
    "check_text",
    "format_text",
    "load_config",
    "run_check",
    "run_format",
]
