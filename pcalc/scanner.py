"""
pcalc - Scanner
Lazily turns an expression string into tokens, one token per request.

The scanner is a three-state machine:
  NONE       nothing buffered; whitespace is skipped here
  TWO_CHAR   saw '<', '>' or '*'; the next char decides the operator
  VAR_SIZED  accumulating a number literal or a function/constant name
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, List, Optional

from .errors import ScanError


class TokenType(Enum):
    # Literals
    NUMBER   = auto()
    PI       = auto()   # pi
    FUNCTION = auto()   # abs sin cos tan rad deg sqrt log2 pow
    # Punctuation
    LPAREN   = auto()   # (
    RPAREN   = auto()   # )
    COMMA    = auto()   # ,
    # Arithmetic
    MINUS    = auto()   # -
    PLUS     = auto()   # +
    MULT     = auto()   # *
    DIV      = auto()   # /
    REM      = auto()   # %
    POW      = auto()   # **
    # Bitwise
    NOT      = auto()   # ~
    OR       = auto()   # |
    AND      = auto()   # &
    XOR      = auto()   # ^
    LSHIFT   = auto()   # <<
    RSHIFT   = auto()   # >>
    # Sentinel
    EOF      = auto()


FUNCTIONS = frozenset({"abs", "sin", "cos", "tan", "rad", "deg", "sqrt", "log2", "pow"})
CONSTANTS = {"pi": TokenType.PI}

# Names longer than this can never match a function or constant.
_MAX_NAME = max(len(name) for name in FUNCTIONS | set(CONSTANTS))


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str = ""
    pos: int = 0
    base: int = 10
    is_int: bool = False
    is_float: bool = False

    def __repr__(self):
        return f"Token({self.type.name}, {self.value!r}, pos={self.pos})"


class State(Enum):
    NONE      = auto()
    TWO_CHAR  = auto()
    VAR_SIZED = auto()


_SINGLE_CHAR = {
    '+': TokenType.PLUS,
    '-': TokenType.MINUS,
    '/': TokenType.DIV,
    '%': TokenType.REM,
    '(': TokenType.LPAREN,
    ')': TokenType.RPAREN,
    ',': TokenType.COMMA,
    '~': TokenType.NOT,
    '|': TokenType.OR,
    '&': TokenType.AND,
    '^': TokenType.XOR,
}

_TWO_CHAR = {
    '<<': TokenType.LSHIFT,
    '>>': TokenType.RSHIFT,
    '**': TokenType.POW,
}
_TWO_CHAR_STARTS = frozenset(pair[0] for pair in _TWO_CHAR)

_WHITESPACE = frozenset(' \t\r\n')
_HEX_DIGITS = frozenset('0123456789abcdefABCDEF')

_DECIMAL_RE = re.compile(r'(?:\d+\.?\d*|\.\d+)(?:[eE]-?\d+)?', re.ASCII)
_HEX_RE     = re.compile(r'0x[0-9a-fA-F]+', re.ASCII)


class Scanner:
    """
    On-demand scanner over a string.

    peek() returns the next token without consuming it, pop() consumes it.
    End of input is reported as an explicit EOF token, which is sticky.
    """

    def __init__(self, source: str):
        self._source = source
        self._pos = 0
        self._state = State.NONE
        self._buf: List[str] = []
        self._start = 0
        self._lookahead: Optional[Token] = None
        self.consumed = 0

    # ------------------------------------------------------------------ public

    def peek(self) -> Token:
        if self._lookahead is None:
            self._lookahead = self._fetch()
        return self._lookahead

    def pop(self) -> Token:
        tok = self.peek()
        if tok.type is not TokenType.EOF:
            self._lookahead = None
            self.consumed += 1
        return tok

    def __iter__(self) -> Iterator[Token]:
        while True:
            tok = self.pop()
            yield tok
            if tok.type is TokenType.EOF:
                return

    # ------------------------------------------------------------------ input

    def _getc(self) -> str:
        """Next input char, or '' at end of input."""
        if self._pos >= len(self._source):
            return ''
        c = self._source[self._pos]
        if ord(c) > 0x7F:
            raise ScanError(f"Invalid non-ASCII character {c!r}", self._pos)
        self._pos += 1
        return c

    def _unread(self) -> None:
        self._pos -= 1

    def _emit(self, ttype: TokenType, value: str, **flags) -> Token:
        tok = Token(ttype, value, self._start, **flags)
        self._buf = []
        self._state = State.NONE
        return tok

    # ------------------------------------------------------------------ states

    def _fetch(self) -> Token:
        while True:
            c = self._getc()
            if self._state is State.NONE:
                tok = self._scan_start(c)
            elif self._state is State.TWO_CHAR:
                tok = self._scan_two_char(c)
            elif self._buf[0].isalpha():
                tok = self._scan_name(c)
            else:
                tok = self._scan_number(c)
            if tok is not None:
                return tok

    def _scan_start(self, c: str) -> Optional[Token]:
        if c == '':
            return Token(TokenType.EOF, '', self._pos)
        if c in _WHITESPACE:
            return None

        start = self._pos - 1
        if c in _SINGLE_CHAR:
            return Token(_SINGLE_CHAR[c], c, start)

        self._start = start
        self._buf = [c]
        if c in _TWO_CHAR_STARTS:
            self._state = State.TWO_CHAR
            return None
        if c.isalnum() or c == '.':
            self._state = State.VAR_SIZED
            return None
        raise ScanError(f"Unexpected character {c!r}", start)

    def _scan_two_char(self, c: str) -> Optional[Token]:
        first = self._buf[0]
        pair = first + c
        if pair in _TWO_CHAR:
            return self._emit(_TWO_CHAR[pair], pair)
        if first == '*':
            # Plain multiplication; the char after it starts the next token.
            if c:
                self._unread()
            return self._emit(TokenType.MULT, first)
        raise ScanError(f"Unterminated operator {first!r}", self._start)

    def _scan_name(self, c: str) -> Optional[Token]:
        name = ''.join(self._buf)
        if not c or not c.isalnum():
            raise ScanError(f"Unrecognized identifier {name!r}", self._start)

        self._buf.append(c)
        name += c
        if name in FUNCTIONS:
            return self._emit(TokenType.FUNCTION, name)
        if name in CONSTANTS:
            return self._emit(CONSTANTS[name], name)
        if len(name) >= _MAX_NAME:
            raise ScanError(f"Unrecognized identifier starting with {name!r}", self._start)
        return None

    def _scan_number(self, c: str) -> Optional[Token]:
        if c and self._extends_number(c):
            self._buf.append(c)
            return None
        if c:
            if c.isalnum() or c == '.':
                text = ''.join(self._buf) + c
                raise ScanError(f"Malformed number {text!r}", self._start)
            self._unread()
        return self._finish_number()

    # ------------------------------------------------------------------ literals

    def _extends_number(self, c: str) -> bool:
        text = ''.join(self._buf)
        if text.startswith('0x'):
            return c in _HEX_DIGITS
        if text == '0' and c == 'x':
            return True
        if c.isdigit():
            return True

        has_exponent = 'e' in text or 'E' in text
        if c == '.':
            return '.' not in text and not has_exponent
        if c in 'eE':
            return not has_exponent
        if c == '-':
            return text[-1] in 'eE'
        return False

    def _finish_number(self) -> Token:
        text = ''.join(self._buf)

        if text.startswith('0x'):
            if not _HEX_RE.fullmatch(text):
                raise ScanError(f"Hex literal without digits {text!r}", self._start)
            return self._emit(TokenType.NUMBER, text, base=16, is_int=True)

        if not _DECIMAL_RE.fullmatch(text):
            if text[-1] in 'eE-':
                raise ScanError(f"Incomplete exponent in {text!r}", self._start)
            raise ScanError(f"Malformed number {text!r}", self._start)
        return self._emit(
            TokenType.NUMBER, text,
            base=10, is_int=text.isdigit(), is_float=True,
        )


def tokenize(source: str) -> List[Token]:
    """
    Scan the whole source eagerly. The list always ends with an EOF token.
    Raises ScanError on malformed input.
    """
    return list(Scanner(source))
