"""
pcalc - AST Node Definitions
Immutable expression tree produced by the parser and consumed by the evaluator.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from .scanner import Token


class Assoc(Enum):
    LEFT  = "left"
    RIGHT = "right"


class Operator(Enum):
    OR     = "|"
    XOR    = "^"
    AND    = "&"
    LSHIFT = "<<"
    RSHIFT = ">>"
    MINUS  = "-"
    PLUS   = "+"
    MULT   = "*"
    DIV    = "/"
    REM    = "%"
    POW    = "**"
    NEG    = "neg"   # unary minus
    NOT    = "~"

    @property
    def tier(self) -> int:
        return PRECEDENCE[self][0]

    @property
    def assoc(self) -> Assoc:
        return PRECEDENCE[self][1]


# Operator -> (precedence tier, associativity); higher tiers bind tighter.
PRECEDENCE = {
    Operator.OR:     (1, Assoc.LEFT),
    Operator.XOR:    (2, Assoc.LEFT),
    Operator.AND:    (3, Assoc.LEFT),
    Operator.LSHIFT: (4, Assoc.LEFT),
    Operator.RSHIFT: (4, Assoc.LEFT),
    Operator.MINUS:  (5, Assoc.LEFT),
    Operator.PLUS:   (5, Assoc.LEFT),
    Operator.MULT:   (6, Assoc.LEFT),
    Operator.DIV:    (6, Assoc.LEFT),
    Operator.REM:    (6, Assoc.LEFT),
    Operator.POW:    (7, Assoc.RIGHT),
    Operator.NEG:    (8, Assoc.RIGHT),
    Operator.NOT:    (8, Assoc.RIGHT),
}

LOWEST_TIER = min(tier for tier, _ in PRECEDENCE.values())


@dataclass(frozen=True)
class ASTNode:
    """Base class for all AST nodes."""
    pos: int = 0


@dataclass(frozen=True)
class Terminal(ASTNode):
    """A number literal or a constant such as pi."""
    token: Token = None


@dataclass(frozen=True)
class UnaryOp(ASTNode):
    """-operand or ~operand"""
    op: Operator = None
    operand: ASTNode = None


@dataclass(frozen=True)
class BinaryOp(ASTNode):
    """left op right"""
    op: Operator = None
    left: ASTNode = None
    right: ASTNode = None


@dataclass(frozen=True)
class FunctionCall(ASTNode):
    """name(arg, ...); arity is checked by the evaluator."""
    name: str = ""
    args: Tuple[ASTNode, ...] = ()


def depth(node: ASTNode) -> int:
    """Height of the tree rooted at node (a lone terminal has depth 1)."""
    if isinstance(node, UnaryOp):
        return 1 + depth(node.operand)
    if isinstance(node, BinaryOp):
        return 1 + max(depth(node.left), depth(node.right))
    if isinstance(node, FunctionCall):
        return 1 + max((depth(arg) for arg in node.args), default=0)
    return 1
