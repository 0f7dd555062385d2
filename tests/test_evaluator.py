import io
import sys

import pytest
from tablisp import nodes
from tablisp.evaluator import DepthExceeded, EvalError, GasExhausted, execute, to_text
from tablisp.parser import parse
from tablisp.types import Env


def run(src, **env):
    out = io.StringIO()
    value = execute(parse(src), Env(out=out, **env))
    return value, out.getvalue()


# --- Printing ---

def test_print_sum():
    assert run("печатать (+ 1 2)") == ("3", "3")


def test_print_concatenates():
    assert run("печатать 'a' 1 'b'") == ("a1b", "a1b")


def test_print_constants():
    assert run("печатать да нет") == ("truefalse", "truefalse")


def test_print_array():
    assert run("печатать [1 'x' [2 3]]") == ("1,x,2,3", "1,x,2,3")


def test_unknown_symbol_prints_nothing():
    assert run("печатать 'a' неизвестно") == ("a", "a")


# --- Arithmetic ---

@pytest.mark.parametrize("src, expected", [
    ("(+)", "0"),
    ("(+ 1 2 3)", "6"),
    ("(- 5)", "5"),
    ("(- 10 1 2)", "7"),
    ("(*)", "1"),
    ("(* 2 3 4)", "24"),
    ("(/ 7 2)", "3.5"),
    ("(+ (* 2 3) (- 10 4))", "12"),
])
def test_arithmetic(src, expected):
    assert run("печатать " + src)[1] == expected


def test_paren_result_is_applied():
    with pytest.raises(EvalError, match="expression is not callable"):
        run("(+ 1 2)")


def test_whole_quotient_prints_as_integer():
    assert run("печатать (/ 6 3)") == ("2", "2")


def test_division_by_zero():
    with pytest.raises(EvalError, match="line 1: division by zero"):
        run("/ 1 0")


def test_division_arity():
    with pytest.raises(EvalError, match="expects 2 arguments"):
        run("/ 1 2 3")


def test_minus_needs_an_argument():
    with pytest.raises(EvalError, match="at least 1 argument"):
        run("(-)")


def test_type_error_reports_line():
    with pytest.raises(EvalError, match="line 2"):
        run("печатать 1\n+ 1 'a'")


# --- Blocks and application ---

def test_block_yields_last_value():
    assert run("печатать 1\nпечатать 2") == ("2", "12")


def test_empty_program():
    assert run("") == (None, "")


def test_unknown_head_is_not_callable():
    with pytest.raises(EvalError, match="если is not callable"):
        run("если да\n\tпечатать 1")


def test_host_symbol_receives_block_value():
    symbols = {"если": lambda cond, body: body if cond else None}
    value, out = run("если да\n\tпечатать 'x'\n\tпечатать 'yes'", symbols=symbols)
    assert value == "yes"
    assert out == "xyes"


def test_expression_head():
    symbols = {"сумматор": lambda: lambda *a: sum(a)}
    assert run("печатать ((сумматор) 1 2)", symbols=symbols) == ("3", "3")


def test_dict_env():
    out = io.StringIO()
    value = execute(parse("печатать (+ 1 2)"), {"out": out, "maxGas": 100})
    assert value == "3"
    assert out.getvalue() == "3"


# --- Metering ---

def test_gas_budget_exceeded():
    with pytest.raises(GasExhausted, match="gas budget exceeded"):
        run("печатать 1 2 3 4", max_gas=3)


def test_gas_budget_sufficient():
    assert run("печатать 1 2", max_gas=100) == ("12", "12")


def test_depth_exceeded():
    src = "печатать " + "(+ " * 70 + ")" * 70
    with pytest.raises(DepthExceeded):
        run(src, max_depth=64)


def test_no_limits_by_default():
    env = Env()
    assert env.max_gas is None
    assert env.max_depth is None


def test_long_program_with_default_settings():
    value, out = run("печатать 1 2\n" * 3000)
    assert value == "12"
    assert out == "12" * 3000


def test_nested_parens_with_default_settings():
    src = "печатать " + "(+ 1 " * 100 + ")" * 100
    assert run(src) == ("100", "100")


def test_nested_blocks_with_default_settings():
    lines = ["\t" * i + "блок" for i in range(40)]
    lines.append("\t" * 40 + "печатать 'deep'")
    symbols = {"блок": lambda *args: args[-1]}
    assert run("\n".join(lines), symbols=symbols) == ("deep", "deep")


def test_recursion_limit_reported_as_depth_exceeded():
    plus = nodes.symbol("+", 1)
    node = nodes.expression(plus, [], 1)
    for _ in range(sys.getrecursionlimit()):
        node = nodes.expression(plus, [node], 1)
    with pytest.raises(DepthExceeded, match="max nesting depth exceeded"):
        execute(nodes.block([node], 1), Env(out=io.StringIO()))


def test_to_text():
    assert to_text(None) == ""
    assert to_text(True) == "true"
    assert to_text(2.5) == "2.5"
    assert to_text([1, [2, None]]) == "1,2,"


def test_dict_env_zero_gas_is_enforced():
    with pytest.raises(GasExhausted):
        execute(parse("печатать 1"), {"out": io.StringIO(), "max_gas": 0})
