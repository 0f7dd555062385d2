"""Tree-walk evaluator for tablisp ASTs. Two constants, five builtins, opt-in gas/depth metering."""

import sys
from typing import Any, Optional

from .nodes import Node, NodeKind
from .types import Env


class GasExhausted(RuntimeError):
    pass


class DepthExceeded(RuntimeError):
    pass


class EvalError(RuntimeError):
    pass


class _EvalState:
    __slots__ = ("gas", "depth", "max_depth", "symbols")

    def __init__(self, max_gas: Optional[int], max_depth: Optional[int], symbols: dict):
        self.gas = max_gas
        self.depth = 0
        self.max_depth = max_depth
        self.symbols = symbols


def execute(ast: Node, env: Env | dict | None = None) -> Any:
    """Evaluate a node and return its value.

    env is an Env or a dict with keys: out, symbols, max_gas/maxGas, max_depth
    """
    if env is None:
        env = Env()
    if isinstance(env, dict):
        out = env.get("out")
        extra = env.get("symbols") or {}
        max_gas = env.get("max_gas", env.get("maxGas"))
        max_depth = env.get("max_depth")
    else:
        out = env.out
        extra = env.symbols
        max_gas = env.max_gas
        max_depth = env.max_depth

    symbols = builtin_symbols(out or sys.stdout)
    symbols.update(extra)
    st = _EvalState(max_gas, max_depth, symbols)
    try:
        return _eval(ast, st)
    except RecursionError:
        raise DepthExceeded("max nesting depth exceeded") from None


def _eval(node: Node, st: _EvalState) -> Any:
    if st.gas is not None:
        st.gas -= 1
        if st.gas < 0:
            raise GasExhausted("gas budget exceeded")
    st.depth += 1
    if st.max_depth is not None and st.depth > st.max_depth:
        st.depth -= 1
        raise DepthExceeded("max nesting depth exceeded")
    try:
        return _eval_inner(node, st)
    finally:
        st.depth -= 1


def _eval_inner(node: Node, st: _EvalState) -> Any:
    kind = node.kind

    if kind is NodeKind.BLOCK:
        val = None
        for child in node.value:
            val = _eval(child, st)
        return val

    if kind is NodeKind.EXPRESSION:
        fn = _eval(node.value.head, st)
        args = [_eval(a, st) for a in node.value.tail]
        return _apply(fn, args, node)

    if kind is NodeKind.SYMBOL:
        return st.symbols.get(node.value)

    if kind in (NodeKind.NUMBER, NodeKind.STRING):
        return node.value

    if kind is NodeKind.ARRAY:
        return [_eval(item, st) for item in node.value]

    raise EvalError(f"Unknown node kind: {kind}")


def _apply(fn: Any, args: list, node: Node) -> Any:
    if not callable(fn):
        head = node.value.head
        name = head.value if head.kind is NodeKind.SYMBOL else "expression"
        raise EvalError(f"line {node.line}: {name!s} is not callable")
    try:
        return fn(*args)
    except (TypeError, ZeroDivisionError) as e:
        raise EvalError(f"line {node.line}: {e}") from e


def to_text(v: Any) -> str:
    """Text of a value as печатать renders it."""
    if v is None:
        return ""
    if isinstance(v, bool):
        return "true" if v else "false"
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    if isinstance(v, list):
        return ",".join(to_text(item) for item in v)
    return str(v)


# --- Builtins ---

def builtin_symbols(out) -> dict[str, Any]:
    def func_print(*args):
        s = "".join(to_text(a) for a in args)
        out.write(s)
        return s

    return {
        "да": True,
        "нет": False,
        "печатать": func_print,
        "+": _plus,
        "-": _minus,
        "*": _mul,
        "/": _div,
    }


def _plus(*args):
    n = 0
    for a in args:
        n += a
    return n


def _minus(*args):
    if not args:
        raise TypeError("'-' expects at least 1 argument")
    n = args[0]
    for a in args[1:]:
        n -= a
    return n


def _mul(*args):
    n = 1
    for a in args:
        n *= a
    return n


def _div(*args):
    if len(args) != 2:
        raise TypeError(f"'/' expects 2 arguments, got {len(args)}")
    return args[0] / args[1]
