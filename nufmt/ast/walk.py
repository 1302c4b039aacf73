"""Generic traversal over AST nodes."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import fields, is_dataclass
from typing import Any

from nufmt.ast.model import AstInterpolation, AstNode
from nufmt.text import TextRange


# Text that may legitimately change when its parts are reformatted.
_TEXT_INSENSITIVE: tuple[type, ...] = (AstInterpolation,)


def _is_node(value: object) -> bool:
    return is_dataclass(value) and not isinstance(value, (type, TextRange))


def iter_children(node: AstNode) -> Iterator[AstNode]:
    """Yield direct child nodes in source order."""
    for field in fields(node):
        value = getattr(node, field.name)
        if isinstance(value, tuple):
            for item in value:
                if _is_node(item):
                    yield item
        elif _is_node(value):
            yield value


def walk(node: AstNode) -> Iterator[AstNode]:
    """Pre-order traversal including `node` itself."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(iter_children(current))))


def structure(node: AstNode) -> Any:
    """Shape of a tree with spans and source text dropped.

    Two programs with equal structure differ only in whitespace and comments,
    which is what formatting is allowed to change.
    """
    items: list[Any] = [type(node).__name__]
    for field in fields(node):
        if field.name in ("span", "params_span", "arms_span"):
            continue
        value = getattr(node, field.name)
        if isinstance(value, tuple):
            items.append(tuple(structure(v) if _is_node(v) else v for v in value))
        elif _is_node(value):
            items.append(structure(value))
        elif field.name != "text" or not isinstance(node, _TEXT_INSENSITIVE):
            items.append(value)
    return tuple(items)
