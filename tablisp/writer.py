"""Render an AST back to tablisp source text."""

import sys
from typing import Optional, TextIO

from .nodes import Node, NodeKind

_STRING_ESCAPES = (
    ("\\", "\\\\"),
    ("\r", "\\r"),
    ("\n", "\\n"),
    ("\t", "\\t"),
    ("'", "\\'"),
)


def format_ast(node: Node) -> str:
    """Source text for a node. Blocks nest one tab deeper per level."""
    out: list[str] = []
    _write(node, out, -1)
    return "".join(out)


def write_ast(node: Node, out: Optional[TextIO] = None) -> None:
    stream = out or sys.stdout
    stream.write(format_ast(node) + "\n")


def escape_string(s: str) -> str:
    for raw, escaped in _STRING_ESCAPES:
        s = s.replace(raw, escaped)
    return "'" + s + "'"


def _write(node: Node, out: list[str], depth: int) -> None:
    kind = node.kind

    if kind is NodeKind.BLOCK:
        depth += 1
        for i, child in enumerate(node.value):
            if i > 0:
                out.append("\n")
            _write(child, out, depth)
        return

    if kind is NodeKind.EXPRESSION:
        exp = node.value
        if exp.is_line_form:
            out.append("\t" * depth)
        else:
            out.append("(")
        _write(exp.head, out, depth)
        for item in exp.tail:
            if item.kind is NodeKind.BLOCK:
                # nested body goes on the following lines
                out.append("\n")
            else:
                out.append(" ")
            _write(item, out, depth)
        if not exp.is_line_form:
            out.append(")")
        return

    if kind is NodeKind.SYMBOL:
        out.append(node.value)
    elif kind is NodeKind.NUMBER:
        out.append(str(node.value))
    elif kind is NodeKind.STRING:
        out.append(escape_string(node.value))
    elif kind is NodeKind.ARRAY:
        out.append("[")
        for i, item in enumerate(node.value):
            if i > 0:
                out.append(" ")
            _write(item, out, depth)
        out.append("]")
    else:
        raise ValueError(f"Unknown node kind: {kind}")
