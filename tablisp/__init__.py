from .parser import parse, ParseError
from .evaluator import execute, EvalError
from .writer import format_ast, write_ast
from .nodes import Node, NodeKind, Diagnostic

__all__ = [
    "parse", "ParseError", "execute", "EvalError", "format_ast", "write_ast",
    "Node", "NodeKind", "Diagnostic",
]
