from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import Optional

from .evaluator import eval_expr
from .parser import ParseError, parse_source
from .runtime import Environment, FwjsRuntimeError, FwValue, Sink
from .tree import pretty
from .utils import apply_recursion_limit, debug_py_trace_enabled, stringify

def run(src: str, env: Optional[Environment]=None, sink: Optional[Sink]=None) -> FwValue:
    """Parse and evaluate a whole program against a fresh (or given) global environment."""
    apply_recursion_limit()
    ast = parse_source(src)
    return eval_expr(ast, env, sink=sink, source=src)

def repl_eval(src: str, env: Environment) -> FwValue:
    """Evaluate one REPL entry; declarations persist in *env* between entries."""
    try:
        ast = parse_source(src)
    except ParseError as exc:
        # a trailing expression may omit its ';' at the prompt
        try:
            ast = parse_source(src.rstrip() + "\n;")
        except ParseError:
            raise exc from None

    return eval_expr(ast, env, source=src)

def report_error(exc: BaseException) -> None:
    print(f"Error: {exc}", file=sys.stderr)

    context = getattr(exc, "context", None)
    if context:
        print(context, file=sys.stderr, end="" if context.endswith("\n") else "\n")

    if debug_py_trace_enabled() and exc.__traceback__ is not None:
        print("\nPython traceback:", file=sys.stderr)
        print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Existing path => read file contents.
    - Otherwise treat the argument as literal source.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    try:
        is_file = candidate.exists()
    except OSError:
        # e.g. a long literal program is not a valid path name
        is_file = False

    if is_file:
        return candidate.read_text(encoding="utf-8")

    return arg

def main(argv: Optional[list[str]]=None) -> int:
    print_result = False
    dump_ast = False
    arg = None

    for token in (sys.argv[1:] if argv is None else argv):
        if token == "--print-result":
            print_result = True
            continue

        if token == "--dump-ast":
            dump_ast = True
            continue

        if token in ("-h", "--help"):
            print("usage: fwjs [--print-result] [--dump-ast] [PATH | - | SOURCE]")
            return 0

        if token.startswith("--"):
            raise SystemExit(f"Unknown flag: {token}")

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    try:
        source = _load_source(arg or "-")
    except (OSError, UnicodeDecodeError) as exc:
        report_error(exc)
        return 1

    apply_recursion_limit()

    try:
        if dump_ast:
            print(pretty(parse_source(source)))
            return 0

        result = run(source)
    except (ParseError, FwjsRuntimeError) as exc:
        report_error(exc)
        return 1
    except RecursionError as exc:
        report_error(FwjsRuntimeError(f"Maximum recursion depth exceeded ({exc})"))
        return 1

    if print_result:
        print(stringify(result))

    return 0

if __name__ == "__main__":
    sys.exit(main())
