"""Comment and blank-line trivia: extraction from source and merging into docs."""

from nufmt.trivia.extract import extract_trivia
from nufmt.trivia.merge import merge_trivia
from nufmt.trivia.model import Attachment, TriviaItem, TriviaKind

__all__ = [
    "Attachment",
    "TriviaItem",
    "TriviaKind",
    "extract_trivia",
    "merge_trivia",
]
