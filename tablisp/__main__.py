"""CLI: python -m tablisp <program>"""

import sys
from pathlib import Path

from .evaluator import DepthExceeded, EvalError, GasExhausted, execute
from .parser import parse
from .writer import write_ast


def main(argv=None):
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 1:
        print("Usage: python -m tablisp <program>", file=sys.stderr)
        return 1

    src = Path(args[0]).read_text(encoding="utf-8")

    def on_parsed(diagnostic, ast):
        if diagnostic is not None:
            print(f"Parse error on line {diagnostic.line}: {diagnostic.message}", file=sys.stderr)
            return 1

        write_ast(ast)
        print("\nExecuting...\n")
        try:
            execute(ast)
        except (EvalError, GasExhausted, DepthExceeded) as e:
            print(f"\nRuntime error: {e}", file=sys.stderr)
            return 1
        print("\nFinished\n")
        return 0

    return parse(src, on_parsed)


if __name__ == "__main__":
    sys.exit(main())
