"""
pcalc - Precedence-Climbing Parser
Pulls tokens from a Scanner on demand and builds an immutable AST.

Grammar:
    input      := expression EOF
    expression := term { binop term }
    term       := NUMBER | PI | unop term | '(' expression ')'
                | FUNCTION '(' expression { ',' expression } ')'

Nesting depth (parentheses, chained unary operators) is bounded by the
interpreter's recursion limit; deeper input surfaces as RecursionError.
"""

from typing import List, Optional

from .scanner import Scanner, Token, TokenType
from .errors import ParseError
from .ast_nodes import (
    ASTNode, Terminal, UnaryOp, BinaryOp, FunctionCall,
    Operator, Assoc, LOWEST_TIER,
)


_BINARY_OPS = {
    TokenType.OR:     Operator.OR,
    TokenType.XOR:    Operator.XOR,
    TokenType.AND:    Operator.AND,
    TokenType.LSHIFT: Operator.LSHIFT,
    TokenType.RSHIFT: Operator.RSHIFT,
    TokenType.MINUS:  Operator.MINUS,
    TokenType.PLUS:   Operator.PLUS,
    TokenType.MULT:   Operator.MULT,
    TokenType.DIV:    Operator.DIV,
    TokenType.REM:    Operator.REM,
    TokenType.POW:    Operator.POW,
}

_UNARY_OPS = {
    TokenType.MINUS: Operator.NEG,
    TokenType.NOT:   Operator.NOT,
}


def _describe(tok: Token) -> str:
    if tok.type is TokenType.EOF:
        return "end of input"
    return f"{tok.type.name} ({tok.value!r})"


class Parser:
    def __init__(self, scanner: Scanner):
        self._scanner = scanner

    # ------------------------------------------------------------------ helpers

    def _peek(self) -> Token:
        return self._scanner.peek()

    def _advance(self) -> Token:
        return self._scanner.pop()

    def _expect(self, ttype: TokenType, what: str) -> Token:
        tok = self._peek()
        if tok.type is not ttype:
            raise ParseError(f"Expected {what} but got {_describe(tok)}", tok.pos)
        return self._advance()

    def _binary_op(self) -> Optional[Operator]:
        return _BINARY_OPS.get(self._peek().type)

    # ------------------------------------------------------------------ public

    def parse(self) -> ASTNode:
        expr = self._parse_expression(self._parse_term(), LOWEST_TIER)
        self._expect(TokenType.EOF, "an operator or end of input")
        return expr

    # ------------------------------------------------------------------ expressions

    def _parse_expression(self, left: ASTNode, min_tier: int) -> ASTNode:
        op = self._binary_op()
        while op is not None and op.tier >= min_tier:
            op_tok = self._advance()
            right = self._parse_term()

            # Fold tighter-binding operators into the right operand first.
            nxt = self._binary_op()
            while nxt is not None and (
                nxt.tier > op.tier
                or (nxt.tier == op.tier and nxt.assoc is Assoc.RIGHT)
            ):
                right = self._parse_expression(
                    right, op.tier + (1 if nxt.tier > op.tier else 0)
                )
                nxt = self._binary_op()

            left = BinaryOp(pos=op_tok.pos, op=op, left=left, right=right)
            op = nxt

        return left

    def _parse_term(self) -> ASTNode:
        tok = self._peek()

        if tok.type in (TokenType.NUMBER, TokenType.PI):
            self._advance()
            return Terminal(pos=tok.pos, token=tok)

        if tok.type in _UNARY_OPS:
            self._advance()
            operand = self._parse_term()
            return UnaryOp(pos=tok.pos, op=_UNARY_OPS[tok.type], operand=operand)

        # Parenthesised expression; the threshold restarts at the lowest tier.
        if tok.type is TokenType.LPAREN:
            self._advance()
            expr = self._parse_expression(self._parse_term(), LOWEST_TIER)
            self._expect(TokenType.RPAREN, "')'")
            return expr

        if tok.type is TokenType.FUNCTION:
            return self._parse_call()

        raise ParseError(
            f"Expected a number, constant, unary operator, '(' or function "
            f"but got {_describe(tok)}",
            tok.pos
        )

    def _parse_call(self) -> FunctionCall:
        name_tok = self._advance()
        self._expect(TokenType.LPAREN, f"'(' after {name_tok.value!r}")
        args: List[ASTNode] = [self._parse_expression(self._parse_term(), LOWEST_TIER)]
        while self._peek().type is TokenType.COMMA:
            self._advance()
            args.append(self._parse_expression(self._parse_term(), LOWEST_TIER))
        self._expect(TokenType.RPAREN, "',' or ')'")
        return FunctionCall(pos=name_tok.pos, name=name_tok.value, args=tuple(args))


def parse(source: str) -> ASTNode:
    """Scan and parse source in one go. Raises ScanError or ParseError."""
    return Parser(Scanner(source)).parse()
