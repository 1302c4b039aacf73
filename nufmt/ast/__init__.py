"""Typed AST for Nushell programs."""

from nufmt.ast.model import (
    OPAQUE_NODES,
    AstAlias,
    AstAssignment,
    AstBinaryOp,
    AstBlock,
    AstBreak,
    AstCall,
    AstCellPath,
    AstClosure,
    AstContinue,
    AstDef,
    AstError,
    AstExport,
    AstExpr,
    AstExtern,
    AstFlag,
    AstFor,
    AstHide,
    AstIf,
    AstInterpolation,
    AstIoType,
    AstLet,
    AstList,
    AstLiteral,
    AstLoop,
    AstMatch,
    AstMatchArm,
    AstModule,
    AstNode,
    AstOverlay,
    AstParameter,
    AstPipeline,
    AstProgram,
    AstRange,
    AstRecord,
    AstRecordEntry,
    AstReturn,
    AstSignature,
    AstSource,
    AstSpread,
    AstStatement,
    AstStringPart,
    AstSubexpression,
    AstTable,
    AstTry,
    AstUnaryOp,
    AstUse,
    AstVariable,
    AstWhile,
    LiteralKind,
    ParameterKind,
)
from nufmt.ast.walk import iter_children, structure, walk

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
    "iter_children",
    "structure",
    "walk",
]
