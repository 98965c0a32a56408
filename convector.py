# convector.py
"""Command-line interface for ConVector, an interactive matrix calculator."""

import argparse
import logging
import sys
import time
from pathlib import Path

from frontend.expr_parser import ExprParser
from frontend.lexer import lex
from frontend.parse_errors import ParseError
from ir.printer import format_statement, format_tokens
from runtime.display import format_value
from evaluation import EvalContext, Session

VERSION = "0.0"
PROMPT = "> "


def print_debug(src: str) -> None:
    """Print the token stream and the parsed postfix of each statement."""
    try:
        tokens = lex(src)
    except SyntaxError as e:
        print(f"[debug] lex error: {e.msg}")
        return
    print("[debug] tokens:")
    print(format_tokens(tokens))
    try:
        for stmt in ExprParser(tokens).parse_statements():
            print(f"[debug] {format_statement(stmt)}")
    except ParseError as e:
        print(f"[debug] parse error: {e.code}: {e.message}")


def print_errors(result) -> None:
    for d in result.diagnostics:
        print(f"Error: {d}", file=sys.stderr)


def run_eval(expr: str, ctx: EvalContext, debug: bool = False) -> int:
    """Evaluate one expression given on the command line.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    if debug:
        print_debug(expr)
    session = Session(ctx)
    result = session.run_source(expr)
    for text in session.printable(result):
        print(text)
    print_errors(result)
    return 0 if result.ok else 1


def run_file(file_path: str, ctx: EvalContext, debug: bool = False,
             benchmark: bool = False) -> int:
    """Run a ConVector script and print its results.

    Args:
        file_path: Path to a .cv script
        ctx: Evaluation settings
        debug: If True, dump tokens and postfix before evaluating
        benchmark: If True, print timing breakdown

    Returns:
        Exit code (0 for success, 1 for error)
    """
    path = Path(file_path)
    if not path.exists():
        print(f"ERROR: file not found: {file_path}")
        return 1

    t_start = time.perf_counter()
    src = path.read_text(errors='replace')
    t_read = time.perf_counter()

    if debug:
        print_debug(src)

    session = Session(ctx)
    result = session.run_source(src)
    t_eval = time.perf_counter()

    print(f"=== Results for {file_path} ===")
    for text in session.printable(result):
        print(text)

    if result.diagnostics:
        print("\nErrors:")
        for d in result.diagnostics:
            print("  -", d)

    print("\nFinal environment:")
    for name in session.env.names():
        print(f"{name} = {format_value(session.env.get(name))}")

    if benchmark:
        line_count = src.count('\n') + 1
        print(f"\n--- Benchmark ({line_count} lines, {len(result.outputs)} statements) ---")
        print(f"  Read:      {(t_read - t_start) * 1000:7.1f}ms")
        print(f"  Evaluate:  {(t_eval - t_read) * 1000:7.1f}ms")

    return 0 if result.ok else 1


def repl(ctx: EvalContext, debug: bool = False) -> int:
    """Interactive loop. 'exit' or end of input quits.

    Returns:
        Exit code (1 only when crash_on_error stops the loop)
    """
    session = Session(ctx)
    print(f"\nConVector v{VERSION}")

    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue

        if line.strip() == "exit":
            break
        if not line.strip():
            continue

        if debug:
            print_debug(line)
        result = session.run_source(line)
        for text in session.printable(result):
            print(text)
        print_errors(result)

        if ctx.crash_on_error and not result.ok:
            return 1

    print("Goodbye!")
    return 0


def run_tests(benchmark: bool = False) -> int:
    """Run the full test suite.

    Returns:
        Exit code (0 for all tests passed, 1 otherwise)
    """
    import run_all_tests

    if not benchmark:
        return run_all_tests.main(return_code=True)

    t_start = time.perf_counter()
    result = run_all_tests.main(return_code=True)
    total_ms = (time.perf_counter() - t_start) * 1000

    print(f"\n--- Benchmark ---")
    print(f"  Total:     {total_ms:.0f}ms")
    return result


def main() -> int:
    """Main entry point for the convector CLI tool.

    Returns:
        Exit code (0 for success, 1 for error)
    """
    parser = argparse.ArgumentParser(
        prog="convector",
        description="ConVector: interactive arithmetic and matrix expression evaluator"
    )
    parser.add_argument("file", nargs="?", help="ConVector .cv script to run")
    parser.add_argument(
        "-e", "--eval",
        metavar="EXPR",
        help="Evaluate EXPR and exit"
    )
    parser.add_argument(
        "--tests",
        action="store_true",
        help="Run test suite"
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=0.0,
        metavar="X",
        help="Treat |x| <= X as zero when inverting matrices (default: exact)"
    )
    parser.add_argument(
        "--crash-on-error",
        action="store_true",
        help="Stop at the first failing statement"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print tokens and parsed postfix for each input"
    )
    parser.add_argument(
        "--benchmark",
        action="store_true",
        help="Print timing breakdown"
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    if args.tolerance < 0:
        parser.error(f"--tolerance must be non-negative (got {args.tolerance})")
    ctx = EvalContext(zero_tolerance=args.tolerance, crash_on_error=args.crash_on_error)

    if args.tests:
        return run_tests(benchmark=args.benchmark)

    if args.eval is not None:
        return run_eval(args.eval, ctx, debug=args.debug)

    if args.file:
        return run_file(args.file, ctx, debug=args.debug, benchmark=args.benchmark)

    return repl(ctx, debug=args.debug)


if __name__ == "__main__":
    raise SystemExit(main())
