"""
pcalc - evaluate C-style expressions in five numeric representations at once.
"""

from .calculator import compute, dump_ast
from .result import Result
from .errors import (
    CalcError, ScanError, ParseError, ArityError, DomainError,
    UnsupportedOperationError,
)

__all__ = [
    "compute", "dump_ast", "Result",
    "CalcError", "ScanError", "ParseError", "ArityError", "DomainError",
    "UnsupportedOperationError",
]
