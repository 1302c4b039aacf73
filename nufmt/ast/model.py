"""AST data model for Nushell source.

Every node owns the byte span it was parsed from. Children appear in source
order and sibling spans never overlap.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TypeAlias

from nufmt.text import TextRange


class LiteralKind(StrEnum):
    NUMBER = "number"
    STRING = "string"
    RAW_STRING = "raw_string"
    BARE = "bare"
    BOOL = "bool"
    NULL = "null"
    TYPE = "type"
    # Adjacent pieces glued together in argument position, e.g. `foo(bar)`.
    RAW = "raw"


class ParameterKind(StrEnum):
    POSITIONAL = "positional"
    OPTIONAL = "optional"
    REST = "rest"
    FLAG = "flag"


# -------------------------
# Leaves
# -------------------------


@dataclass(frozen=True, slots=True)
class AstLiteral:
    """Leaf value kept as source text: numbers, strings, bare words, types."""

    span: TextRange
    kind: LiteralKind
    text: str


@dataclass(frozen=True, slots=True)
class AstVariable:
    """`$name` including any cell path, e.g. `$env.PATH.0?`."""

    span: TextRange
    text: str


@dataclass(frozen=True, slots=True)
class AstFlag:
    span: TextRange
    text: str


@dataclass(frozen=True, slots=True)
class AstStringPart:
    span: TextRange
    text: str


@dataclass(frozen=True, slots=True)
class AstError:
    """Recoverable parse fragment retained as raw text."""

    span: TextRange
    text: str


# -------------------------
# Composite expressions
# -------------------------


@dataclass(frozen=True, slots=True)
class AstInterpolation:
    """`$"..."` string; `(...)` parts are parsed, the rest is literal text."""

    span: TextRange
    text: str
    parts: tuple[AstStringPart | AstSubexpression, ...]


@dataclass(frozen=True, slots=True)
class AstCellPath:
    """Cell path on a non-variable target, e.g. `(ls).name`."""

    span: TextRange
    target: AstExpr
    path: str


@dataclass(frozen=True, slots=True)
class AstList:
    span: TextRange
    items: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstRecordEntry:
    span: TextRange
    key: AstExpr
    value: AstExpr


@dataclass(frozen=True, slots=True)
class AstRecord:
    span: TextRange
    entries: tuple[AstRecordEntry | AstSpread, ...]


@dataclass(frozen=True, slots=True)
class AstTable:
    """`[[a, b]; [1, 2]]`: header columns followed by rows."""

    span: TextRange
    header: AstList
    rows: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstSubexpression:
    """Parenthesized statements; the parentheses are part of the span."""

    span: TextRange
    statements: tuple[AstStatement, ...]


@dataclass(frozen=True, slots=True)
class AstBlock:
    """Braced statement list; the braces are part of the span."""

    span: TextRange
    statements: tuple[AstStatement, ...]


@dataclass(frozen=True, slots=True)
class AstClosure:
    """`{|a, b| ...}`. `params` is None when the closure has no pipes."""

    span: TextRange
    params: tuple[AstParameter, ...] | None
    statements: tuple[AstStatement, ...]


@dataclass(frozen=True, slots=True)
class AstRange:
    """`start..end`, `start..<end`, `start..next..end`; any bound may be open."""

    span: TextRange
    start: AstExpr | None
    next: AstExpr | None
    operator: str
    end: AstExpr | None


@dataclass(frozen=True, slots=True)
class AstSpread:
    span: TextRange
    value: AstExpr


@dataclass(frozen=True, slots=True)
class AstBinaryOp:
    span: TextRange
    left: AstExpr
    operator: str
    right: AstExpr


@dataclass(frozen=True, slots=True)
class AstUnaryOp:
    span: TextRange
    operator: str
    operand: AstExpr


@dataclass(frozen=True, slots=True)
class AstAssignment:
    span: TextRange
    target: AstExpr
    operator: str
    value: AstExpr


@dataclass(frozen=True, slots=True)
class AstCall:
    """Command call; `external` marks `^cmd`."""

    span: TextRange
    head: AstLiteral
    args: tuple[AstExpr, ...]
    external: bool = False


@dataclass(frozen=True, slots=True)
class AstPipeline:
    """Two or more elements joined by pipes. `pipes[i]` precedes `elements[i + 1]`."""

    span: TextRange
    elements: tuple[AstExpr, ...]
    pipes: tuple[str, ...]


@dataclass(frozen=True, slots=True)
class AstIf:
    span: TextRange
    condition: AstExpr
    then_block: AstBlock
    else_branch: AstIf | AstBlock | None


@dataclass(frozen=True, slots=True)
class AstMatchArm:
    span: TextRange
    patterns: tuple[AstExpr, ...]
    guard: AstExpr | None
    body: AstExpr


@dataclass(frozen=True, slots=True)
class AstMatch:
    """`arms_span` covers the braces around the arms."""

    span: TextRange
    subject: AstExpr
    arms_span: TextRange
    arms: tuple[AstMatchArm, ...]


@dataclass(frozen=True, slots=True)
class AstTry:
    span: TextRange
    body: AstBlock
    catch: AstClosure | AstBlock | None


# -------------------------
# Declarations
# -------------------------


@dataclass(frozen=True, slots=True)
class AstLet:
    """`let`, `mut` and `const` bindings."""

    span: TextRange
    keyword: str
    name: str
    type: AstLiteral | None
    value: AstExpr


@dataclass(frozen=True, slots=True)
class AstParameter:
    span: TextRange
    kind: ParameterKind
    name: str
    short: str | None
    type: AstLiteral | None
    default: AstExpr | None


@dataclass(frozen=True, slots=True)
class AstIoType:
    span: TextRange
    input: AstLiteral
    output: AstLiteral


@dataclass(frozen=True, slots=True)
class AstSignature:
    """`[params]` with optional `: in -> out` or `: [in -> out, ...]` io types."""

    span: TextRange
    params_span: TextRange
    params: tuple[AstParameter, ...]
    io_types: tuple[AstIoType, ...]
    io_bracketed: bool = False


@dataclass(frozen=True, slots=True)
class AstDef:
    span: TextRange
    flags: tuple[AstFlag, ...]
    name: AstLiteral
    signature: AstSignature
    body: AstBlock


@dataclass(frozen=True, slots=True)
class AstExtern:
    span: TextRange
    name: AstLiteral
    signature: AstSignature
    body: AstBlock | None


@dataclass(frozen=True, slots=True)
class AstAlias:
    span: TextRange
    name: AstLiteral
    value: AstExpr


# -------------------------
# Control flow statements
# -------------------------


@dataclass(frozen=True, slots=True)
class AstFor:
    span: TextRange
    binding: str
    iterable: AstExpr
    body: AstBlock


@dataclass(frozen=True, slots=True)
class AstWhile:
    span: TextRange
    condition: AstExpr
    body: AstBlock


@dataclass(frozen=True, slots=True)
class AstLoop:
    span: TextRange
    body: AstBlock


@dataclass(frozen=True, slots=True)
class AstReturn:
    span: TextRange
    value: AstExpr | None


@dataclass(frozen=True, slots=True)
class AstBreak:
    span: TextRange


@dataclass(frozen=True, slots=True)
class AstContinue:
    span: TextRange


# -------------------------
# Module forms
# -------------------------


@dataclass(frozen=True, slots=True)
class AstModule:
    span: TextRange
    name: AstLiteral
    body: AstBlock | None


@dataclass(frozen=True, slots=True)
class AstExport:
    """`export <declaration>` or `export-env { ... }`."""

    span: TextRange
    keyword: str
    item: AstStatement


@dataclass(frozen=True, slots=True)
class AstUse:
    span: TextRange
    keyword: str
    args: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstHide:
    """`hide` and `hide-env`."""

    span: TextRange
    keyword: str
    args: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstOverlay:
    span: TextRange
    keyword: str
    args: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstSource:
    """`source` and `source-env`."""

    span: TextRange
    keyword: str
    args: tuple[AstExpr, ...]


@dataclass(frozen=True, slots=True)
class AstProgram:
    span: TextRange
    statements: tuple[AstStatement, ...]


AstExpr: TypeAlias = (
    AstLiteral
    | AstVariable
    | AstFlag
    | AstInterpolation
    | AstCellPath
    | AstList
    | AstRecord
    | AstTable
    | AstSubexpression
    | AstBlock
    | AstClosure
    | AstRange
    | AstSpread
    | AstBinaryOp
    | AstUnaryOp
    | AstAssignment
    | AstCall
    | AstPipeline
    | AstIf
    | AstMatch
    | AstTry
    | AstError
)
AstStatement: TypeAlias = (
    AstExpr
    | AstLet
    | AstDef
    | AstExtern
    | AstAlias
    | AstFor
    | AstWhile
    | AstLoop
    | AstReturn
    | AstBreak
    | AstContinue
    | AstModule
    | AstExport
    | AstUse
    | AstHide
    | AstOverlay
    | AstSource
)
AstNode: TypeAlias = AstStatement | AstProgram | AstRecordEntry | AstMatchArm | AstParameter | AstSignature | AstIoType | AstStringPart


# Nodes whose text is never looked into by trivia scanning.
OPAQUE_NODES: tuple[type, ...] = (
    AstLiteral,
    AstVariable,
    AstFlag,
    AstStringPart,
    AstInterpolation,
    AstError,
)


__all__ = [
    "OPAQUE_NODES",
    "AstAlias",
    "AstAssignment",
    "AstBinaryOp",
    "AstBlock",
    "AstBreak",
    "AstCall",
    "AstCellPath",
    "AstClosure",
    "AstContinue",
    "AstDef",
    "AstError",
    "AstExport",
    "AstExpr",
    "AstExtern",
    "AstFlag",
    "AstFor",
    "AstHide",
    "AstIf",
    "AstInterpolation",
    "AstIoType",
    "AstLet",
    "AstList",
    "AstLiteral",
    "AstLoop",
    "AstMatch",
    "AstMatchArm",
    "AstModule",
    "AstNode",
    "AstOverlay",
    "AstParameter",
    "AstPipeline",
    "AstProgram",
    "AstRange",
    "AstRecord",
    "AstRecordEntry",
    "AstReturn",
    "AstSignature",
    "AstSource",
    "AstSpread",
    "AstStatement",
    "AstStringPart",
    "AstSubexpression",
    "AstTable",
    "AstTry",
    "AstUnaryOp",
    "AstUse",
    "AstVariable",
    "AstWhile",
    "LiteralKind",
    "ParameterKind",
]
