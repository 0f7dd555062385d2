"""Indentation-aware recursive-descent parser for tablisp source.

Scanning and structural parsing happen in one pass. Every reader returns
Absent (no match, nothing consumed), Fatal (stop and report) or a Node.
"""

from typing import Any, Callable, Optional, Union

from . import nodes
from .nodes import Absent, Diagnostic, Fatal, Node, ParseResult
from .scanner import (
    DIGITS,
    NUMBER_TERMINATORS,
    SYMBOL_DELIMITERS,
    ParseState,
    process_dedent,
    process_indent,
    process_nodent,
    read_eol,
    skip_meaningless_lines,
    skip_whitespace,
)

FATAL_INTERNAL = "Internal error (bug in a parser)."
FATAL_TOO_DEEP = "Nesting is too deep."
FATAL_INDENT_EXCESS = "Incorrect indentation (excessive)."
FATAL_UNEXP_NUMBER = "Unexpected character '%s' in a NUMBER."
FATAL_STRING_NO_END = "STRING has no end."
FATAL_STRING_UNSUPP = "Unsupported escaping in STRING: '\\%s'"
FATAL_ARRAY_BAD = "Cannot read array items (after %d)."
FATAL_NO_EXP = "No expression after a character '('."
FATAL_EXP_BAD = "Cannot read expression arguments (after %d)."
FATAL_HEAD_NUMBER = "NUMBER cannot be a head of any expression."
FATAL_HEAD_STRING = "STRING cannot be a head of any expression."
FATAL_HEAD_ARRAY = "ARRAY cannot be a head of any expression."
FATAL_LINEEXP_BAD = (
    "Malformed line expression. "
    "Probably there are unnecessary ')' or ']' characters."
)

ESCAPES = {"r": "\r", "n": "\n", "t": "\t", "'": "'", "\\": "\\"}


class ParseError(SyntaxError):
    def __init__(self, diagnostic: Diagnostic):
        super().__init__(f"line {diagnostic.line}: {diagnostic.message}")
        self.diagnostic = diagnostic
        self.line = diagnostic.line


# --- Atoms ---

def _read_number(st: ParseState) -> ParseResult:
    start = st.cursor
    while st.peek() in DIGITS:
        st.cursor += 1
    if st.cursor == start:
        return Absent

    ch = st.peek()
    if ch and ch not in NUMBER_TERMINATORS:
        return st.fatal(FATAL_UNEXP_NUMBER % ch)

    return nodes.number(int(st.text[start:st.cursor]), st.line)


def _read_string(st: ParseState) -> ParseResult:
    if st.peek() != "'":
        return Absent
    line = st.line
    st.cursor += 1
    buf: list[str] = []

    while True:
        if st.at_end():
            return st.fatal(FATAL_STRING_NO_END)
        ch = st.peek()

        if ch == "\\":
            esc = st.peek(1)
            if esc not in ESCAPES:
                return st.fatal(FATAL_STRING_UNSUPP % esc)
            buf.append(ESCAPES[esc])
            st.cursor += 2
            continue

        # Raw line breaks belong to the string but still count as lines.
        if ch == "\r" and st.peek(1) == "\n":
            buf.append("\r\n")
            st.cursor += 2
            st.line += 1
            continue
        if ch in ("\n", "\r"):
            buf.append(ch)
            st.cursor += 1
            st.line += 1
            continue

        st.cursor += 1
        if ch == "'":
            return nodes.string("".join(buf), line)
        buf.append(ch)


def _read_array(st: ParseState) -> ParseResult:
    if st.peek() != "[":
        return Absent
    line = st.line
    st.cursor += 1
    items: list[Node] = []

    while True:
        skip_whitespace(st)
        item = _read_line_item(st)
        if isinstance(item, Fatal):
            return item

        if item is Absent:
            if st.peek() == "]":
                st.cursor += 1
                return nodes.array(items, line)
            if read_eol(st):
                skip_meaningless_lines(st)
                continue
            return st.fatal(FATAL_ARRAY_BAD % len(items))

        items.append(item)


def _read_symbol(st: ParseState) -> ParseResult:
    start = st.cursor
    while True:
        ch = st.peek()
        if not ch or ch in SYMBOL_DELIMITERS:
            break
        st.cursor += 1

    if st.cursor == start:
        return Absent
    return nodes.symbol(st.text[start:st.cursor], st.line)


# --- Expressions ---

def _read_paren_expression(st: ParseState) -> ParseResult:
    if st.peek() != "(":
        return Absent
    line = st.line
    st.cursor += 1

    # The head may sit on a later line.
    while True:
        skip_whitespace(st)
        head = _read_line_item(st, is_head=True)
        if isinstance(head, Fatal):
            return head
        if head is not Absent:
            break
        if not read_eol(st):
            return st.fatal(FATAL_NO_EXP)
        skip_meaningless_lines(st)

    tail: list[Node] = []
    while True:
        skip_whitespace(st)
        item = _read_line_item(st)
        if isinstance(item, Fatal):
            return item

        if item is Absent:
            if st.peek() == ")":
                st.cursor += 1
                return nodes.expression(head, tail, line)
            if read_eol(st):
                skip_meaningless_lines(st)
                continue
            return st.fatal(FATAL_EXP_BAD % len(tail))

        tail.append(item)


# Tried in order; the second field is the error for using the match as a head.
_ITEM_READERS: tuple[tuple[Callable[[ParseState], ParseResult], Optional[str]], ...] = (
    (_read_number, FATAL_HEAD_NUMBER),
    (_read_string, FATAL_HEAD_STRING),
    (_read_array, FATAL_HEAD_ARRAY),
    (_read_paren_expression, None),
    (_read_symbol, None),
)


def _read_line_item(st: ParseState, is_head: bool = False) -> ParseResult:
    for reader, head_error in _ITEM_READERS:
        item = reader(st)
        if item is Absent:
            continue
        if is_head and head_error and isinstance(item, Node):
            return st.fatal(head_error)
        return item
    return Absent


def _read_inner_expression(st: ParseState) -> ParseResult:
    line = st.line
    head = _read_line_item(st, is_head=True)
    if not isinstance(head, Node):
        return head

    tail: list[Node] = []
    while True:
        skip_whitespace(st)
        item = _read_line_item(st)
        if isinstance(item, Fatal):
            return item
        if item is Absent:
            break
        tail.append(item)

    return nodes.expression(head, tail, line, is_line_form=True)


def _read_line_expression(st: ParseState) -> ParseResult:
    skip_whitespace(st)
    exp = _read_inner_expression(st)
    if isinstance(exp, Fatal):
        return exp

    # A headless line means a stray ')' or ']' at the start of the line.
    if exp is Absent or not read_eol(st):
        return st.fatal(FATAL_LINEEXP_BAD)

    body = _read_block(st)
    if isinstance(body, Fatal):
        return body
    if not body.value:
        return exp

    v = exp.value
    return nodes.expression(v.head, v.tail + (body,), exp.line, is_line_form=True)


# --- Blocks ---

def _read_block(st: ParseState) -> Union[Node, Fatal]:
    skip_meaningless_lines(st)
    line = st.line
    if st.at_end():
        return nodes.block((), line)

    dent = process_indent(st)
    if isinstance(dent, Fatal):
        return dent
    if not dent:
        return nodes.block((), line)

    children: list[Node] = []
    while True:
        exp = _read_line_expression(st)
        if isinstance(exp, Fatal):
            return exp
        children.append(exp)

        skip_meaningless_lines(st)
        if st.at_end():
            break

        dent = process_dedent(st)
        if isinstance(dent, Fatal):
            return dent
        if dent:
            break  # the enclosing block continues

        dent = process_nodent(st)
        if isinstance(dent, Fatal):
            return dent
        if not dent:
            return st.fatal(FATAL_INDENT_EXCESS)

    return nodes.block(children, line)


def read_program(src: str) -> Union[Node, Fatal]:
    """Parse a whole buffer into its top-level Block, or a Fatal result."""
    st = ParseState(src)
    try:
        ast = _read_block(st)
    except RecursionError:
        return st.fatal(FATAL_TOO_DEEP)
    if isinstance(ast, Fatal):
        return ast

    # Only reachable when the first content line is indented.
    if not st.at_end():
        return st.fatal(FATAL_INTERNAL)
    return ast


ParseCallback = Callable[[Optional[Diagnostic], Optional[Node]], Any]


def parse(src: str, callback: Optional[ParseCallback] = None) -> Any:
    """Parse tablisp source into a top-level Block node.

    With a callback, calls ``callback(diagnostic, None)`` on failure or
    ``callback(None, block)`` on success and returns its result. Without
    one, returns the Block or raises ParseError.
    """
    result = read_program(src)
    if callback is not None:
        if isinstance(result, Fatal):
            return callback(result.diagnostic, None)
        return callback(None, result)

    if isinstance(result, Fatal):
        raise ParseError(result.diagnostic)
    return result
