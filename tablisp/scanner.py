"""Cursor primitives and the indentation tracker.

None of the indentation checks consume input; they inspect the tab run at
the cursor and answer. The tabs are skipped later as ordinary whitespace when
the line is read as content.
"""

from typing import Union

from .nodes import Diagnostic, Fatal

FATAL_INDENT_SPACES = "Malformed indentation (spaces)."

DIGITS = frozenset("0123456789")
NUMBER_TERMINATORS = frozenset(" ];)\t\r\n")
SYMBOL_DELIMITERS = frozenset("['( ];)\t\r\n")


class ParseState:
    __slots__ = ("text", "length", "cursor", "line", "level")

    def __init__(self, text: str):
        # Always end with a line terminator, whatever the platform convention.
        if not text.endswith("\n"):
            text += "\n"
        self.text = text
        self.length = len(text)
        self.cursor = 0
        self.line = 1
        self.level = -1  # below any real block

    def peek(self, offset: int = 0) -> str:
        """Character at cursor + offset, or "" past the end."""
        pos = self.cursor + offset
        if pos < self.length:
            return self.text[pos]
        return ""

    def at_end(self) -> bool:
        return self.cursor >= self.length

    def fatal(self, message: str) -> Fatal:
        return Fatal(Diagnostic(message, self.line))


def skip_whitespace(st: ParseState) -> None:
    while st.peek() in (" ", "\t"):
        st.cursor += 1


def skip_comment(st: ParseState) -> None:
    if st.peek() != ";":
        return
    # A newline is always present at the very end.
    nl = st.text.index("\n", st.cursor)
    cr = st.text.find("\r", st.cursor, nl)
    st.cursor = cr if cr != -1 else nl


def read_eol(st: ParseState) -> bool:
    """Consume one CRLF, LF or CR (after an optional comment)."""
    skip_comment(st)
    ch = st.peek()
    if ch == "\r" and st.peek(1) == "\n":
        st.cursor += 2
    elif ch in ("\n", "\r"):
        st.cursor += 1
    else:
        return False
    st.line += 1
    return True


def skip_meaningless_lines(st: ParseState) -> None:
    while True:
        backup = st.cursor
        skip_whitespace(st)
        if not read_eol(st):
            st.cursor = backup  # this line has content
            return


def count_tabs(st: ParseState) -> Union[int, Fatal]:
    n = 0
    while st.peek(n) == "\t":
        n += 1
    if st.peek(n) == " ":
        return st.fatal(FATAL_INDENT_SPACES)
    return n


def process_indent(st: ParseState) -> Union[bool, Fatal]:
    n = count_tabs(st)
    if isinstance(n, Fatal):
        return n
    if n == st.level + 1:
        st.level += 1
        return True
    return False


def process_dedent(st: ParseState) -> Union[bool, Fatal]:
    n = count_tabs(st)
    if isinstance(n, Fatal):
        return n
    if n < st.level:
        st.level -= 1
        return True
    return False


def process_nodent(st: ParseState) -> Union[bool, Fatal]:
    n = count_tabs(st)
    if isinstance(n, Fatal):
        return n
    return n == st.level
