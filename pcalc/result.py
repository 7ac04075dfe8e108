"""
pcalc - Result value model
One abstract number tracked in five parallel representations.

Each field is independently optional:
  u32   unsigned 32-bit, wraps modulo 2**32
  i32   signed 32-bit two's complement
  u64   unsigned 64-bit, wraps modulo 2**64
  real  IEEE-754 double
  big   arbitrary-precision integer (Python int)

An operation keeps a field only when it stays meaningful for that
representation; the rest become None. All present fields denote the same
value, up to each representation's range and rounding.
"""

import math
from dataclasses import dataclass
from typing import Callable, Optional

from .errors import DomainError, UnsupportedOperationError
from .scanner import Token, TokenType


MASK32 = (1 << 32) - 1
MASK64 = (1 << 64) - 1

INT_FIELDS = ("u32", "i32", "u64", "big")
ALL_FIELDS = ("u32", "i32", "u64", "real", "big")

# Allowed shift amounts per fixed-width field.
_SHIFT_LIMIT = {"u32": 31, "i32": 31, "u64": 63}

# Moduli used for modular exponentiation of the fixed-width fields.
_MODULUS = {"u32": 1 << 32, "i32": 1 << 32, "u64": 1 << 64}

# Shifts and powers whose big result would exceed this many bits drop `big`.
BIG_BITS_LIMIT = 1 << 22


def wrap_u32(x: int) -> int:
    return x & MASK32


def wrap_i32(x: int) -> int:
    return ((x + (1 << 31)) & MASK32) - (1 << 31)


def wrap_u64(x: int) -> int:
    return x & MASK64


_WRAP = {"u32": wrap_u32, "i32": wrap_i32, "u64": wrap_u64, "big": lambda x: x}


def trunc_div(a: int, b: int) -> int:
    """Integer division rounding toward zero, as C does."""
    q = abs(a) // abs(b)
    return q if (a < 0) == (b < 0) else -q


def trunc_rem(a: int, b: int) -> int:
    """Remainder carrying the sign of the dividend, as C does."""
    return a - b * trunc_div(a, b)


def _same(a, b) -> bool:
    if isinstance(a, float) and isinstance(b, float) and math.isnan(a) and math.isnan(b):
        return True
    return a == b


@dataclass(eq=False)
class Result:
    u32: Optional[int] = None
    i32: Optional[int] = None
    u64: Optional[int] = None
    real: Optional[float] = None
    big: Optional[int] = None

    # ------------------------------------------------------------------ construction

    @classmethod
    def from_int(cls, value: int) -> "Result":
        """Every field from an exact integer, wrapping the fixed-width ones."""
        return cls(
            u32=wrap_u32(value),
            i32=wrap_i32(value),
            u64=wrap_u64(value),
            real=_to_real(value),
            big=value,
        )

    @classmethod
    def from_token(cls, tok: Token) -> "Result":
        if tok.type is TokenType.PI:
            return cls(real=math.pi)
        if tok.type is not TokenType.NUMBER:
            raise UnsupportedOperationError(
                f"Cannot build a value from {tok.type.name}", tok.pos
            )

        if tok.base == 16:
            value = int(tok.value, 16)
            return cls(
                u32=value if value <= MASK32 else None,
                u64=value if value <= MASK64 else None,
                big=value,
            )

        if not tok.is_int:
            return cls(real=float(tok.value))

        try:
            value = int(tok.value)
        except ValueError as e:
            # Interpreter cap on decimal string conversion.
            raise DomainError(f"Literal is too long: {e}", tok.pos) from e
        return cls(
            u32=value if value <= MASK32 else None,
            i32=value if value < (1 << 31) else None,
            u64=value if value <= MASK64 else None,
            real=float(tok.value),
            big=value,
        )

    # ------------------------------------------------------------------ queries

    def is_valid(self) -> bool:
        return any(getattr(self, name) is not None for name in ALL_FIELDS)

    def present(self):
        return [name for name in ALL_FIELDS if getattr(self, name) is not None]

    def exact(self) -> Optional[int]:
        """Best exact integer view: big, else the fixed-width fields."""
        for name in ("big", "i32", "u64", "u32"):
            value = getattr(self, name)
            if value is not None:
                return value
        return None

    def is_negative(self) -> bool:
        if self.big is not None:
            return self.big < 0
        if self.real is not None:
            return self.real < 0.0
        if self.i32 is not None:
            return self.i32 < 0
        return False

    def is_zero(self) -> bool:
        """Zero-ness read from the authoritative fields (big and real)."""
        checks = [v == 0 for v in (self.big, self.real) if v is not None]
        if checks:
            return all(checks)
        return all(getattr(self, name) == 0 for name in self.present())

    def __eq__(self, other):
        if not isinstance(other, Result):
            return NotImplemented
        return all(_same(getattr(self, name), getattr(other, name)) for name in ALL_FIELDS)

    def __str__(self):
        parts = []
        for name in ALL_FIELDS:
            value = getattr(self, name)
            if value is None:
                continue
            if name == "big":
                parts.append(f"big={format_big(value)}")
            else:
                parts.append(f"{name}={value!r}")
        return "Result(" + ", ".join(parts) + ")" if parts else "Result(<invalid>)"

    # ------------------------------------------------------------------ arithmetic

    def _combine(self, other: "Result", names, op: Callable) -> None:
        for name in names:
            a, b = getattr(self, name), getattr(other, name)
            setattr(self, name, None if a is None or b is None else op(name, a, b))

    def add(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a + b))
        self._combine(other, ("real",), lambda n, a, b: a + b)
        return self

    def subtract(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a - b))
        self._combine(other, ("real",), lambda n, a, b: a - b)
        return self

    def multiply(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a * b))
        self._combine(other, ("real",), lambda n, a, b: a * b)
        return self

    def negate(self) -> "Result":
        return self.multiply(Result.from_int(-1))

    def divide(self, other: "Result") -> "Result":
        self._check_divisor(other)
        self._combine(other, INT_FIELDS,
                      lambda n, a, b: None if b == 0 else _WRAP[n](trunc_div(a, b)))
        self._combine(other, ("real",), lambda n, a, b: None if b == 0.0 else a / b)
        return self

    def remainder(self, other: "Result") -> "Result":
        self._check_divisor(other)
        self._combine(other, INT_FIELDS,
                      lambda n, a, b: None if b == 0 else _WRAP[n](trunc_rem(a, b)))
        self._combine(other, ("real",), lambda n, a, b: None if b == 0.0 else _fmod(a, b))
        return self

    def _check_divisor(self, other: "Result") -> None:
        if other.is_zero():
            raise DomainError("Division by zero")

    # ------------------------------------------------------------------ bitwise

    def shift_left(self, other: "Result") -> "Result":
        return self._shift(other, lambda a, b: a << b, grows=True)

    def shift_right(self, other: "Result") -> "Result":
        return self._shift(other, lambda a, b: a >> b, grows=False)

    def _shift(self, other: "Result", op: Callable[[int, int], int], grows: bool) -> "Result":
        def apply(name, a, b):
            if b < 0 or b > _SHIFT_LIMIT.get(name, b):
                return None
            if name == "big" and grows and a and a.bit_length() + b > BIG_BITS_LIMIT:
                return None
            return _WRAP[name](op(a, b))

        self._combine(other, INT_FIELDS, apply)
        self.real = None
        return self

    def bit_and(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a & b))
        self.real = None
        return self

    def bit_or(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a | b))
        self.real = None
        return self

    def bit_xor(self, other: "Result") -> "Result":
        self._combine(other, INT_FIELDS, lambda n, a, b: _WRAP[n](a ^ b))
        self.real = None
        return self

    def bit_not(self) -> "Result":
        # The signed complement depends on a width the abstract value lacks.
        self.i32 = None
        self.real = None
        for name in ("u32", "u64", "big"):
            value = getattr(self, name)
            if value is not None:
                setattr(self, name, _WRAP[name](~value))
        return self

    # ------------------------------------------------------------------ powers

    def power(self, other: "Result") -> "Result":
        if self.is_zero() and other.is_negative():
            raise DomainError("Zero raised to a negative power")

        if other.is_negative():
            # Negative exponents yield fractions.
            for name in INT_FIELDS:
                setattr(self, name, None)
        else:
            # The wrapped exponent of a fixed-width field is not the true
            # exponent, so every field uses the exact one.
            exponent = other.exact()
            self._combine(other, tuple(_MODULUS),
                          lambda n, a, b: _WRAP[n](pow(a, exponent, _MODULUS[n])))
            self._combine(other, ("big",), lambda n, a, b: _big_pow(a, b))
        self._combine(other, ("real",), lambda n, a, b: _real_pow(a, b))
        return self

    # ------------------------------------------------------------------ functions

    def apply_function(self, name: str) -> "Result":
        if name == "abs":
            if self.is_negative():
                self.negate()
            return self

        if name not in _REAL_FUNCTIONS:
            raise UnsupportedOperationError(f"Unsupported unary function: {name}")

        if self.real is None and self.exact() is not None:
            self.real = _to_real(self.exact())

        big = self.big
        self.u32 = self.i32 = self.u64 = self.big = None
        if self.real is not None:
            self.real = _REAL_FUNCTIONS[name](self.real)

        if big is not None and name == "sqrt" and big >= 0:
            self.big = math.isqrt(big)
        elif big is not None and name == "log2" and big > 0 and big & (big - 1) == 0:
            # Exact only for powers of two.
            self.big = big.bit_length() - 1
        return self


def _to_real(value: int) -> float:
    try:
        return float(value)
    except OverflowError:
        return math.copysign(math.inf, value)


def _big_pow(a: int, b: int) -> Optional[int]:
    if abs(a) > 1 and a.bit_length() * b > BIG_BITS_LIMIT:
        return None
    return a ** b


def _fmod(a: float, b: float) -> float:
    try:
        return math.fmod(a, b)
    except ValueError:
        return math.nan


def _real_pow(a: float, b: float) -> float:
    try:
        return math.pow(a, b)
    except OverflowError:
        return math.copysign(math.inf, a) if b % 2 == 1 else math.inf
    except ValueError:
        return math.nan


def _nan_on_domain(fn: Callable[[float], float]) -> Callable[[float], float]:
    def wrapped(x: float) -> float:
        try:
            return fn(x)
        except ValueError:
            return math.nan
    return wrapped


def _log2(x: float) -> float:
    if x == 0.0:
        return -math.inf
    if x < 0.0 or math.isnan(x):
        return math.nan
    return math.log2(x)


_REAL_FUNCTIONS = {
    "sin":  _nan_on_domain(math.sin),
    "cos":  _nan_on_domain(math.cos),
    "tan":  _nan_on_domain(math.tan),
    "rad":  lambda x: x / 180.0 * math.pi,
    "deg":  lambda x: x / math.pi * 180.0,
    "sqrt": lambda x: math.sqrt(x) if x >= 0.0 else math.nan,
    "log2": _log2,
}


def format_big(value: int) -> str:
    """Decimal text for a big integer; falls back to hex past the interpreter's digit cap."""
    try:
        return str(value)
    except ValueError:
        return hex(value)
