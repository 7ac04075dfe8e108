"""
pcalc - Command Line Interface

Usage:
    pcalc "1 << 40" [--fields dec32,hex32,big] [--debug] [--emit-ast]
    echo "0xff ^ 0x0f" | pcalc
    python -m pcalc "sqrt(2)"
"""

import sys
import argparse
from typing import List, Sequence, Tuple

from .result import Result, format_big


def _fmt_real(fmt: str):
    return lambda r: None if r.real is None else fmt % r.real


# Representation label -> renderer; a renderer returns None for an absent field.
FORMATTERS = {
    "dec32":   lambda r: None if r.u32 is None else str(r.u32),
    "i32":     lambda r: None if r.i32 is None else str(r.i32),
    "u64":     lambda r: None if r.u64 is None else str(r.u64),
    "hex32":   lambda r: None if r.u32 is None else "%08X" % r.u32,
    "hex64":   lambda r: None if r.u64 is None else "%016X" % r.u64,
    "real":    _fmt_real("%f"),
    "realexp": _fmt_real("%e"),
    "big":     lambda r: None if r.big is None else format_big(r.big),
}

DEFAULT_FIELDS = ("dec32", "hex32", "real", "realexp", "big")


def format_result(result: Result, fields: Sequence[str] = DEFAULT_FIELDS) -> List[Tuple[str, str]]:
    """Render the requested representations; absent ones render as ''."""
    rows = []
    for name in fields:
        text = FORMATTERS[name](result)
        rows.append((name, "" if text is None else text))
    return rows


def _parse_fields(value: str) -> Tuple[str, ...]:
    names = tuple(name.strip() for name in value.split(",") if name.strip())
    unknown = [name for name in names if name not in FORMATTERS]
    if unknown or not names:
        raise argparse.ArgumentTypeError(
            f"unknown field(s) {', '.join(unknown) or '(none)'}; "
            f"choose from {', '.join(FORMATTERS)}"
        )
    return names


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="pcalc",
        description="pcalc — programmer's calculator for C-style integer and floating-point expressions",
    )
    parser.add_argument(
        "expression",
        nargs="?",
        help="Expression to evaluate (default: read one expression per line from stdin)",
    )
    parser.add_argument(
        "--fields",
        type=_parse_fields,
        default=DEFAULT_FIELDS,
        help=f"Comma-separated representations to show (default: {','.join(DEFAULT_FIELDS)})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Print evaluation phase info to stderr",
    )
    parser.add_argument(
        "--emit-ast",
        action="store_true",
        dest="emit_ast",
        help="Print the parsed AST as JSON instead of evaluating",
    )

    args = parser.parse_args(argv)

    if args.expression is not None:
        sources = [args.expression]
    else:
        sources = [line for line in sys.stdin.read().splitlines() if line.strip()]

    from .calculator import compute, dump_ast
    from .errors import CalcError

    failed = False
    for source in sources:
        try:
            if args.emit_ast:
                print(dump_ast(source))
                continue
            result = compute(source, debug=args.debug)
        except CalcError as e:
            print(str(e), file=sys.stderr)
            failed = True
            continue

        if len(sources) > 1:
            print(source)
        for label, text in format_result(result, args.fields):
            print(f"{label:<8}{text}".rstrip())

    if failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
