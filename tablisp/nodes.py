"""AST node types produced by the parser."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Union


class NodeKind(Enum):
    BLOCK = "block"
    EXPRESSION = "expression"
    SYMBOL = "symbol"
    NUMBER = "number"
    STRING = "string"
    ARRAY = "array"


@dataclass(frozen=True)
class Node:
    """One AST node.

    value per kind:
        BLOCK       tuple of EXPRESSION nodes
        EXPRESSION  ExpressionValue
        SYMBOL      str
        NUMBER      int
        STRING      str (escapes resolved)
        ARRAY       tuple of nodes
    """

    kind: NodeKind
    value: Any
    line: int


@dataclass(frozen=True)
class ExpressionValue:
    head: Node
    tail: tuple[Node, ...] = ()
    is_line_form: bool = False


@dataclass(frozen=True)
class Diagnostic:
    message: str
    line: int


class _AbsentType:
    __slots__ = ()

    def __repr__(self) -> str:
        return "Absent"


# The rule did not match; nothing was consumed.
Absent = _AbsentType()


@dataclass(frozen=True)
class Fatal:
    diagnostic: Diagnostic


ParseResult = Union[Node, _AbsentType, Fatal]


def block(children, line: int) -> Node:
    return Node(NodeKind.BLOCK, tuple(children), line)


def expression(head: Node, tail, line: int, is_line_form: bool = False) -> Node:
    return Node(NodeKind.EXPRESSION, ExpressionValue(head, tuple(tail), is_line_form), line)


def symbol(name: str, line: int) -> Node:
    return Node(NodeKind.SYMBOL, name, line)


def number(n: int, line: int) -> Node:
    return Node(NodeKind.NUMBER, n, line)


def string(s: str, line: int) -> Node:
    return Node(NodeKind.STRING, s, line)


def array(items, line: int) -> Node:
    return Node(NodeKind.ARRAY, tuple(items), line)
