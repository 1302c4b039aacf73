"""Layout documents, the doc builder and the resolver.

The format driver lives in `nufmt.format.runner`.
"""

from nufmt.format.builder import DocBuilder
from nufmt.format.resolver import resolve

__all__ = [
    "DocBuilder",
    "resolve",
]
