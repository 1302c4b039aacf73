"""Trivia items recovered from source text around AST spans."""

from dataclasses import dataclass
from enum import StrEnum


class TriviaKind(StrEnum):
    COMMENT = "comment"
    BLANK_RUN = "blank_run"


class Attachment(StrEnum):
    LEADING = "leading"
    TRAILING = "trailing"
    STANDALONE = "standalone"


@dataclass(frozen=True, slots=True)
class TriviaItem:
    """A comment or a run of empty lines.

    `position` is the offset of the `#` for comments and the start of the
    first empty line for blank runs. `count` is the number of empty lines in
    a blank run and 1 for comments.
    """

    kind: TriviaKind
    text: str
    position: int
    attachment: Attachment
    count: int = 1

    @property
    def end(self) -> int:
        return self.position + len(self.text)

    def is_comment(self) -> bool:
        return self.kind == TriviaKind.COMMENT
