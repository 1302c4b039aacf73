"""Parse carrier shared by the format and check entrypoints."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from nufmt.diagnostics import has_errors
from nufmt.parser.nushell import ParsedProgram
from nufmt.text import LineIndex

if TYPE_CHECKING:
    from nufmt.ast import AstProgram
    from nufmt.diagnostics import Diagnostic


@dataclass(slots=True)
class NuParseResult:
    """Nushell parse result for parse-once/consume-many workflows."""

    source_text: str
    parsed: ParsedProgram
    _line_index: LineIndex | None = field(default=None, init=False, repr=False)

    @property
    def program(self) -> AstProgram:
        return self.parsed.program

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.parsed.diagnostics

    @property
    def has_errors(self) -> bool:
        return has_errors(self.parsed.diagnostics)

    def line_index(self) -> LineIndex:
        if self._line_index is None:
            self._line_index = LineIndex(self.source_text)
        return self._line_index
