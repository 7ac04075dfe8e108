"""
pcalc - Error taxonomy
Every failure raised while scanning, parsing or evaluating an expression.
"""

from typing import Optional


class CalcError(Exception):
    """Base class; the message carries the error kind and source column."""

    kind = "CalcError"

    def __init__(self, message: str, pos: Optional[int] = None):
        if pos is None:
            super().__init__(f"[{self.kind}] {message}")
        else:
            super().__init__(f"[{self.kind}] Col {pos}: {message}")
        self.message = message
        self.pos = pos


class ScanError(CalcError):
    kind = "ScanError"


class ParseError(CalcError):
    kind = "ParseError"


class ArityError(CalcError):
    kind = "ArityError"


class DomainError(CalcError):
    kind = "DomainError"


class UnsupportedOperationError(CalcError):
    kind = "UnsupportedOperationError"
