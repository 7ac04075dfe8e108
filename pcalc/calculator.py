"""
pcalc - Calculator Orchestrator
Runs scan -> parse -> evaluate for a single expression and returns a Result.
"""

import json
import sys
from enum import Enum

from .scanner import Scanner
from .parser import Parser, parse
from .evaluator import Evaluator
from .ast_nodes import depth
from .result import Result


def compute(source: str, debug: bool = False) -> Result:
    """
    Evaluate one expression.

    Parameters
    ----------
    source : the expression text (ASCII; newlines count as whitespace)
    debug  : print each phase summary to stderr

    Returns
    -------
    Result with every representation that stays meaningful for the expression

    Raises
    ------
    CalcError subclass (ScanError, ParseError, ArityError, DomainError,
    UnsupportedOperationError) on any failure; nothing is partially returned
    """

    def log(msg):
        if debug:
            print(f"[pcalc] {msg}", file=sys.stderr)

    # ── Phases 1+2: scanning is driven by the parser ─────────────────────────
    log(f"Parsing {source!r}")
    scanner = Scanner(source)
    tree = Parser(scanner).parse()
    log(f"  {scanner.consumed} tokens, tree depth {depth(tree)}")

    # ── Phase 3: evaluation ─────────────────────────────────────────────────
    log("Evaluating")
    result = Evaluator().evaluate(tree)
    log(f"  present: {', '.join(result.present())}")
    return result


def dump_ast(source: str) -> str:
    """Parse source and return its tree as indented JSON."""
    return json.dumps(_node_to_dict(parse(source)), indent=2)


def _node_to_dict(node):
    if node is None:
        return None
    if isinstance(node, (list, tuple)):
        return [_node_to_dict(n) for n in node]
    if isinstance(node, Enum):
        return node.name
    if not hasattr(node, '__dataclass_fields__'):
        return node  # primitive
    d = {"_type": type(node).__name__}
    for field_name in node.__dataclass_fields__:
        val = getattr(node, field_name)
        d[field_name] = _node_to_dict(val)
    return d
