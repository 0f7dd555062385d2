"""
tablisp End-to-End Example

Demonstrates the full lifecycle:
1. Parse a tab-indented program
2. Print the AST back as source
3. Execute it with the builtin table
4. Extend the table with a host function that takes a block
5. Report a parse diagnostic

Run: pip install -e . && python examples/e2e/e2e.py
"""

from tablisp import execute, format_ast, parse
from tablisp.types import Env

print("=== tablisp E2E Demo ===\n")

# 1. Parse
program = "печатать 'sum: ' (+ 1 2 3)\nпечатать ' product: ' (* 2 3 4)\n"
ast = parse(program)
print(f"1. Parsed {len(ast.value)} top-level expressions\n")

# 2. Pretty-print
print("2. Source as printed from the AST:")
print(format_ast(ast) + "\n")

# 3. Execute
print("3. Output:")
result = execute(ast)
print(f"\n   Result: {result!r}\n")

# 4. Host function receiving an indented block as its last argument
conditional = """если да
	печатать 'then branch'
"""
symbols = {"если": lambda cond, body: body if cond else None}
print("4. Host conditional:")
result = execute(parse(conditional), Env(symbols=symbols))
print(f"\n   Result: {result!r}\n")

# 5. Diagnostics
bad = "a\n\t\tb\n"
print("5. Parsing an over-indented program")
message = parse(bad, lambda d, _ast: f"line {d.line}: {d.message}" if d else "ok")
print(f"   {message}")

print("\n=== Done ===")
