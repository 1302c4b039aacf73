"""Doc builder: one layout rule per syntax node."""

from __future__ import annotations

from collections.abc import Sequence

from nufmt.ast import (
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
    ParameterKind,
)
from nufmt.config import Config
from nufmt.errors import UnsupportedConstruct
from nufmt.format.doc import (
    EMPTY,
    Anchor,
    Container,
    Dangling,
    Doc,
    IfBreak,
    concat,
    forces_break,
    group,
    hardline,
    join,
    line,
    nest,
    softline,
    text,
)
from nufmt.format.resolver import resolve
from nufmt.text import TextRange

# Wide enough that nothing inside an interpolation ever breaks for width.
_UNLIMITED_WIDTH = 1 << 30


class DocBuilder:
    """Build the layout Doc of a program.

    Statement and item lists are wrapped in `Anchor`s and empty containers get a
    `Dangling` hook so comments can be merged in afterwards.
    """

    def __init__(self, config: Config | None = None) -> None:
        self.config = config or Config()

    def build(self, program: AstProgram) -> Doc:
        container = Container(program.span, "program", nested=False)
        if not program.statements:
            return Dangling(container)
        return self._statements(program.statements, container)

    def node(self, node: AstNode) -> Doc:
        match node:
            case AstLiteral() | AstVariable() | AstFlag() | AstStringPart() | AstError():
                return text(node.text)
            case AstInterpolation():
                return self._interpolation(node)
            case AstCellPath(target=target, path=path):
                return concat(self.node(target), text(path))
            case AstList(span=span, items=items):
                return self._bracketed("[", "]", [(item.span, self.node(item)) for item in items], span, "list")
            case AstTable():
                return self._table(node)
            case AstRecord(span=span, entries=entries):
                return self._bracketed("{", "}", [(entry.span, self.node(entry)) for entry in entries], span, "record")
            case AstRecordEntry(key=key, value=value):
                return concat(self.node(key), text(": "), self.node(value))
            case AstSubexpression():
                return self._subexpression(node)
            case AstBlock(span=span, statements=statements):
                return self._block(span, statements)
            case AstClosure():
                return self._closure(node)
            case AstRange():
                return self._range(node)
            case AstSpread(value=value):
                return concat(text("..."), self.node(value))
            case AstBinaryOp(left=left, operator=operator, right=right):
                return concat(self.node(left), text(f" {operator} "), self.node(right))
            case AstUnaryOp(operator="not", operand=operand):
                return concat(text("not "), self.node(operand))
            case AstUnaryOp(operator=operator, operand=operand):
                return concat(text(operator), self.node(operand))
            case AstAssignment(target=target, operator=operator, value=value):
                return concat(self.node(target), text(f" {operator} "), self.node(value))
            case AstCall(head=head, args=args):
                return join(text(" "), [self.node(head), *(self.node(arg) for arg in args)])
            case AstPipeline():
                return self._pipeline(node)
            case AstIf():
                return self._if(node)
            case AstMatch():
                return self._match(node)
            case AstMatchArm():
                return self._match_arm(node)
            case AstTry(body=body, catch=catch):
                parts = [text("try "), self.node(body)]
                if catch is not None:
                    parts.extend((text(" catch "), self.node(catch)))
                return concat(*parts)
            case AstLet(keyword=keyword, name=name, type=type_, value=value):
                parts = [text(f"{keyword} {name}")]
                if type_ is not None:
                    parts.extend((text(": "), self.node(type_)))
                parts.extend((text(" = "), self.node(value)))
                return concat(*parts)
            case AstParameter():
                return self._parameter(node)
            case AstSignature():
                return self._signature(node)
            case AstIoType(input=input_type, output=output_type):
                return concat(self.node(input_type), text(" -> "), self.node(output_type))
            case AstDef(flags=flags, name=name, signature=signature, body=body):
                head = join(text(" "), [text("def"), *(self.node(flag) for flag in flags), self.node(name)])
                return concat(head, text(" "), self.node(signature), text(" "), self.node(body))
            case AstExtern(name=name, signature=signature, body=body):
                parts = [text("extern "), self.node(name), text(" "), self.node(signature)]
                if body is not None:
                    parts.extend((text(" "), self.node(body)))
                return concat(*parts)
            case AstAlias(name=name, value=value):
                return concat(text("alias "), self.node(name), text(" = "), self.node(value))
            case AstFor(binding=binding, iterable=iterable, body=body):
                return concat(text(f"for {binding} in "), self.node(iterable), text(" "), self.node(body))
            case AstWhile(condition=condition, body=body):
                return concat(text("while "), self.node(condition), text(" "), self.node(body))
            case AstLoop(body=body):
                return concat(text("loop "), self.node(body))
            case AstReturn(value=None):
                return text("return")
            case AstReturn(value=value):
                return concat(text("return "), self.node(value))
            case AstBreak():
                return text("break")
            case AstContinue():
                return text("continue")
            case AstModule(name=name, body=body):
                parts = [text("module "), self.node(name)]
                if body is not None:
                    parts.extend((text(" "), self.node(body)))
                return concat(*parts)
            case AstExport(keyword=keyword, item=item):
                return concat(text(f"{keyword} "), self.node(item))
            case AstUse(keyword=keyword, args=args) | AstHide(keyword=keyword, args=args) | AstOverlay(
                keyword=keyword, args=args
            ) | AstSource(keyword=keyword, args=args):
                return join(text(" "), [text(keyword), *(self.node(arg) for arg in args)])
            case _:
                span = getattr(node, "span", TextRange.empty(0))
                raise UnsupportedConstruct(span, type(node).__name__)

    # -------------------------
    # Statement lists
    # -------------------------

    def _statements(self, statements: Sequence[AstStatement], container: Container) -> Doc:
        return join(hardline(), [Anchor(s.span, container, self.node(s)) for s in statements])

    def _block(self, span: TextRange, statements: Sequence[AstStatement]) -> Doc:
        """`{` on the header line, one statement per line, `}` on its own line."""
        container = Container(span, "block")
        if not statements:
            return concat(text("{"), Dangling(container), text("}"))
        body = self._statements(statements, container)
        return concat(text("{"), nest(concat(hardline(), body)), hardline(), text("}"))

    def _inline_block(self, block: AstBlock) -> Doc:
        """Block that stays on one line when short, as in match arms."""
        container = Container(block.span, "block")
        if not block.statements:
            return concat(text("{"), Dangling(container), text("}"))
        body = self._statements(block.statements, container)
        return group(concat(text("{"), nest(concat(line(), body)), line(), text("}")))

    def _subexpression(self, node: AstSubexpression) -> Doc:
        container = Container(node.span, "subexpression")
        if not node.statements:
            return concat(text("("), Dangling(container), text(")"))
        anchors = [Anchor(s.span, container, self.node(s)) for s in node.statements]
        body = join(concat(IfBreak(EMPTY, text(";")), line()), anchors)
        return group(concat(text("("), nest(concat(softline(), body)), softline(), text(")")))

    def _closure(self, node: AstClosure) -> Doc:
        container = Container(node.span, "closure")
        head = text("{")
        if node.params is not None:
            params = join(text(", "), [self.node(param) for param in node.params])
            head = concat(text("{"), text(" " if node.statements else ""), text("|"), params, text("|"))
        if not node.statements:
            return concat(head, Dangling(container), text("}"))
        body = self._statements(node.statements, container)
        return group(concat(head, nest(concat(line(), body)), line(), text("}")))

    # -------------------------
    # Collections
    # -------------------------

    def _bracketed(
        self,
        open_: str,
        close: str,
        items: list[tuple[TextRange, Doc]],
        span: TextRange,
        kind: str,
    ) -> Doc:
        """Comma-joined items: flat if they fit, else one per line, no trailing comma."""
        container = Container(span, kind)
        if not items:
            return concat(text(open_), Dangling(container), text(close))
        anchors = [Anchor(item_span, container, doc) for item_span, doc in items]
        body = join(concat(text(","), line()), anchors)
        return group(concat(text(open_), nest(concat(softline(), body)), softline(), text(close)))

    def _table(self, node: AstTable) -> Doc:
        container = Container(node.span, "table")
        header = Anchor(node.header.span, container, self.node(node.header))
        rows = [Anchor(row.span, container, self.node(row)) for row in node.rows]
        body = concat(header, text(";"))
        if rows:
            body = concat(body, line(), join(concat(text(","), line()), rows))
        return group(concat(text("["), nest(concat(softline(), body)), softline(), text("]")))

    # -------------------------
    # Expressions
    # -------------------------

    def _pipeline(self, node: AstPipeline) -> Doc:
        """Pipe-leading: two stages stay inline when they fit, more always break."""
        container = Container(node.span, "pipeline", allow_blank=False)
        anchors = [Anchor(node.elements[0].span, container, self.node(node.elements[0]))]
        for pipe, element in zip(node.pipes, node.elements[1:], strict=True):
            anchors.append(Anchor(element.span, container, concat(text(f"{pipe} "), self.node(element))))
        if len(anchors) == 2:
            return group(concat(anchors[0], line(), anchors[1]))
        return join(hardline(), anchors)

    def _range(self, node: AstRange) -> Doc:
        parts: list[Doc] = []
        if node.start is not None:
            parts.append(self.node(node.start))
        if node.next is not None:
            parts.extend((text(".."), self.node(node.next)))
        parts.append(text(node.operator))
        if node.end is not None:
            parts.append(self.node(node.end))
        return concat(*parts)

    def _interpolation(self, node: AstInterpolation) -> Doc:
        """Literal text is untouched; each `(...)` is reformatted flat when it can be."""
        if not any(isinstance(part, AstSubexpression) for part in node.parts):
            return text(node.text)

        base = node.span.start
        pieces = [node.text[:2]]
        for part in node.parts:
            raw = node.text[part.span.start - base : part.span.end - base]
            if isinstance(part, AstStringPart):
                pieces.append(raw)
                continue
            pieces.append(self._flat_or_raw(part, raw))
        last = node.parts[-1].span.end - base
        pieces.append(node.text[last:])
        return text("".join(pieces))

    def _flat_or_raw(self, node: AstSubexpression, raw: str) -> str:
        if "#" in raw or "\n" in raw:
            return raw
        doc = self.node(node)
        if forces_break(doc):
            return raw
        flat = resolve(doc, self.config.indent_width, _UNLIMITED_WIDTH)
        return raw if "\n" in flat else flat

    # -------------------------
    # Control flow
    # -------------------------

    def _if(self, node: AstIf) -> Doc:
        parts = [text("if "), self.node(node.condition), text(" "), self.node(node.then_block)]
        if node.else_branch is not None:
            parts.extend((text(" else "), self.node(node.else_branch)))
        return concat(*parts)

    def _match(self, node: AstMatch) -> Doc:
        """One arm per line regardless of width."""
        container = Container(node.arms_span, "match")
        head = concat(text("match "), self.node(node.subject), text(" "))
        if not node.arms:
            return concat(head, text("{"), Dangling(container), text("}"))
        arms = join(hardline(), [Anchor(arm.span, container, self.node(arm)) for arm in node.arms])
        return concat(head, text("{"), nest(concat(hardline(), arms)), hardline(), text("}"))

    def _match_arm(self, node: AstMatchArm) -> Doc:
        parts = [join(text(" | "), [self.node(pattern) for pattern in node.patterns])]
        if node.guard is not None:
            parts.extend((text(" if "), self.node(node.guard)))
        parts.append(text(" => "))
        if isinstance(node.body, AstBlock):
            parts.append(self._inline_block(node.body))
        else:
            parts.append(self.node(node.body))
        return concat(*parts)

    # -------------------------
    # Signatures
    # -------------------------

    def _signature(self, node: AstSignature) -> Doc:
        """`[a: int, b: string]` flat; broken one parameter per line without commas."""
        container = Container(node.params_span, "signature")
        if not node.params:
            params = concat(text("["), Dangling(container), text("]"))
        else:
            anchors = [Anchor(param.span, container, self.node(param)) for param in node.params]
            body = join(concat(IfBreak(EMPTY, text(",")), line()), anchors)
            params = group(concat(text("["), nest(concat(softline(), body)), softline(), text("]")))

        if not node.io_types:
            return params
        io_types = [self.node(io_type) for io_type in node.io_types]
        if node.io_bracketed:
            return concat(params, text(": ["), join(text(", "), io_types), text("]"))
        return concat(params, text(": "), io_types[0])

    def _parameter(self, node: AstParameter) -> Doc:
        match node.kind:
            case ParameterKind.OPTIONAL:
                name = f"{node.name}?"
            case ParameterKind.REST:
                name = f"...{node.name}"
            case ParameterKind.FLAG if node.short is not None:
                name = f"{node.name}({node.short})"
            case _:
                name = node.name
        parts = [text(name)]
        if node.type is not None:
            parts.extend((text(": "), self.node(node.type)))
        if node.default is not None:
            parts.extend((text(" = "), self.node(node.default)))
        return concat(*parts)
