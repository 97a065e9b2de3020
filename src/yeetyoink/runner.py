from __future__ import annotations

import sys
import traceback
from pathlib import Path
from typing import List, Optional

from .evaluator import define_macros, evaluate, expand_macros
from .parser import ParseError, parse_source
from .runtime import Environment, MacroError, YError, YNull, YValue, init_stdlib
from .tree import render
from .utils import debug_enabled, debug_py_trace_enabled, pretty_error, stringify

def run(src: str, env: Optional[Environment] = None, debug: Optional[bool] = None) -> YValue:
    """Parse, expand macros and evaluate `src`.

    Raises the first ParseError, or MacroError when expansion fails.
    Runtime errors come back as a YError value.
    """
    init_stdlib()

    if env is None:
        env = Environment()

    program, errors = parse_source(src)
    if errors:
        raise errors[0]

    define_macros(program, env)
    expand_macros(program, env)

    if debug if debug is not None else debug_enabled():
        print(render(program), file=sys.stderr)

    return evaluate(program, env)

def _load_source(arg: Optional[str]) -> str:
    """
    Resolve CLI input into source text.
    - None or "-" => read stdin.
    - Otherwise the argument is a path.
    """

    if arg is None or arg == "-":
        data = sys.stdin.read()
        if not data:
            raise SystemExit("No input provided on stdin")
        return data

    candidate = Path(arg)
    if not candidate.exists():
        raise SystemExit(f"No such file: {arg}")

    return candidate.read_text(encoding="utf-8")

def report(src: str, result: YValue) -> int:
    """Print a run's outcome the CLI way; returns the exit status."""
    if isinstance(result, YError):
        print(pretty_error(src, result.offset, result.message), file=sys.stderr)
        if debug_py_trace_enabled() and result.py_trace is not None:
            print("".join(traceback.format_tb(result.py_trace)), file=sys.stderr, end="")
        return 1

    if not isinstance(result, YNull):
        print(stringify(result))
    return 0

def run_and_report(src: str, env: Optional[Environment] = None, debug: Optional[bool] = None) -> int:
    try:
        result = run(src, env, debug=debug)
    except (ParseError, MacroError) as exc:
        print(pretty_error(src, exc.offset, exc.message), file=sys.stderr)
        if debug_py_trace_enabled():
            print("".join(traceback.format_tb(exc.__traceback__)), file=sys.stderr, end="")
        return 1

    return report(src, result)

def main(argv: Optional[List[str]] = None) -> None:
    debug: Optional[bool] = None
    code: Optional[str] = None
    arg = None
    it = iter(sys.argv[1:] if argv is None else argv)

    for token in it:
        if token == "--debug":
            debug = True
            continue

        if token == "-c":
            try:
                code = next(it)
            except StopIteration:
                raise SystemExit("-c flag requires source text") from None
            continue

        if arg is None:
            arg = token
        else:
            raise SystemExit(f"Unexpected argument: {token}")

    if code is None and arg is None and sys.stdin.isatty():
        from .repl import repl
        repl(debug=bool(debug))
        return

    source = code if code is not None else _load_source(arg)
    sys.exit(run_and_report(source, debug=debug))

if __name__ == "__main__":
    main()
