"""
pcalc - Evaluator
Walks the AST bottom-up and computes a Result for every node:
  - literals and constants become fresh Results
  - operators and functions update the left/only operand in place
  - function arity is checked here, not in the grammar
A node left with no representation at all aborts the evaluation.
"""

from .ast_nodes import ASTNode, Terminal, UnaryOp, BinaryOp, FunctionCall, Operator
from .errors import ArityError, DomainError, UnsupportedOperationError
from .result import Result

# Operator -> name of the in-place Result method implementing it.
BINARY_METHODS = {
    Operator.OR:     "bit_or",
    Operator.XOR:    "bit_xor",
    Operator.AND:    "bit_and",
    Operator.LSHIFT: "shift_left",
    Operator.RSHIFT: "shift_right",
    Operator.MINUS:  "subtract",
    Operator.PLUS:   "add",
    Operator.MULT:   "multiply",
    Operator.DIV:    "divide",
    Operator.REM:    "remainder",
    Operator.POW:    "power",
}

UNARY_METHODS = {
    Operator.NEG: "negate",
    Operator.NOT: "bit_not",
}

UNARY_FUNCTIONS = {"abs", "sin", "cos", "tan", "rad", "deg", "sqrt", "log2"}
BINARY_FUNCTIONS = {"pow": "power"}


class Evaluator:

    def evaluate(self, node: ASTNode) -> Result:
        return self._visit(node)

    # ------------------------------------------------------------------ visitor

    def _visit(self, node: ASTNode) -> Result:
        method = f"_visit_{type(node).__name__}"
        visitor = getattr(self, method, self._visit_generic)
        result = visitor(node)
        self._check_valid(result, node)
        return result

    def _visit_generic(self, node: ASTNode) -> Result:
        raise UnsupportedOperationError(
            f"Cannot evaluate node {type(node).__name__}", node.pos
        )

    def _visit_Terminal(self, node: Terminal) -> Result:
        return Result.from_token(node.token)

    def _visit_UnaryOp(self, node: UnaryOp) -> Result:
        method = UNARY_METHODS.get(node.op)
        if method is None:
            raise UnsupportedOperationError(f"Not a unary operator: {node.op.value}", node.pos)
        operand = self._visit(node.operand)
        return getattr(operand, method)()

    def _visit_BinaryOp(self, node: BinaryOp) -> Result:
        method = BINARY_METHODS.get(node.op)
        if method is None:
            raise UnsupportedOperationError(f"Not a binary operator: {node.op.value}", node.pos)
        left = self._visit(node.left)
        right = self._visit(node.right)
        return self._apply(getattr(left, method), right, node)

    def _visit_FunctionCall(self, node: FunctionCall) -> Result:
        if node.name in UNARY_FUNCTIONS:
            self._check_arity(node, 1)
            return self._visit(node.args[0]).apply_function(node.name)

        if node.name in BINARY_FUNCTIONS:
            self._check_arity(node, 2)
            left = self._visit(node.args[0])
            right = self._visit(node.args[1])
            return self._apply(getattr(left, BINARY_FUNCTIONS[node.name]), right, node)

        raise UnsupportedOperationError(f"Unknown function {node.name!r}", node.pos)

    # ------------------------------------------------------------------ helpers

    @staticmethod
    def _apply(method, right: Result, node: ASTNode) -> Result:
        try:
            return method(right)
        except DomainError as e:
            if e.pos is not None:
                raise
            raise DomainError(e.message, node.pos) from e

    @staticmethod
    def _check_arity(node: FunctionCall, expected: int) -> None:
        if len(node.args) != expected:
            raise ArityError(
                f"{node.name}() expects {expected} argument(s), got {len(node.args)}",
                node.pos
            )

    @staticmethod
    def _check_valid(result: Result, node: ASTNode) -> None:
        if not result.is_valid():
            raise DomainError("No representation can hold the result", node.pos)
