"""Checked unsigned integer wrapper for token amounts and reserves.

This module provides SafeInt, a lightweight wrapper that makes arithmetic
on ledger quantities fail loudly instead of producing invalid results:
- Division or modulo by zero raises DivisionByZero
- Subtraction below zero raises ArithmeticUnderflow
- Addition or multiplication past 2^256-1 raises ArithmeticOverflow

Usage pattern:
    from lunarswap.safe_int import S

    def proportional(amount: int, reserve: int, supply: int) -> int:
        # Wrap at entry
        sa, sr, ss = S(amount), S(reserve), S(supply)

        # Natural arithmetic - automatically checked
        result = (sa * sr) // ss  # Raises if ss == 0

        # Unwrap at exit
        return result.value
"""

from __future__ import annotations

from math import isqrt as _isqrt

UINT128_MAX = 2**128 - 1
UINT256_MAX = 2**256 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class ArithmeticUnderflow(SafeIntError):
    """Result would be negative."""

    pass


class ArithmeticOverflow(SafeIntError):
    """Result exceeds the uint256 (or requested narrower) bound."""

    pass


class SafeInt:
    """Non-negative integer with checked arithmetic operations.

    Every SafeInt holds a value in [0, 2^256-1]. Operators that would leave
    that range raise instead of wrapping, so a computation either produces
    an in-range result or fails as a whole.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Args:
            value: Integer value to wrap, or SafeInt to copy

        Raises:
            TypeError: If value is not an int or SafeInt
            ArithmeticUnderflow: If value is negative
            ArithmeticOverflow: If value exceeds 2^256-1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
            return
        if isinstance(value, bool) or not isinstance(value, int):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _checked(value, f"SafeInt({value})")

    @property
    def value(self) -> int:
        """The underlying integer value."""
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def __hash__(self) -> int:
        return hash(self._value)

    # --- Arithmetic operations ---

    def __add__(self, other: SafeInt | int) -> SafeInt:
        """Add two values.

        Raises:
            ArithmeticOverflow: If the sum exceeds 2^256-1
        """
        other_val = _extract_value(other)
        return _wrap(self._value + other_val, f"{self._value} + {other_val}")

    def __radd__(self, other: int) -> SafeInt:
        return _wrap(other + self._value, f"{other} + {self._value}")

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            ArithmeticUnderflow: If result would be negative
        """
        other_val = _extract_value(other)
        return _wrap(self._value - other_val, f"{self._value} - {other_val}")

    def __rsub__(self, other: int) -> SafeInt:
        return _wrap(other - self._value, f"{other} - {self._value}")

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            ArithmeticOverflow: If the product exceeds 2^256-1
        """
        other_val = _extract_value(other)
        return _wrap(self._value * other_val, f"{self._value} * {other_val}")

    def __rmul__(self, other: int) -> SafeInt:
        return _wrap(other * self._value, f"{other} * {self._value}")

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division (rounds down).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // other_val)

    def __rfloordiv__(self, other: int) -> SafeInt:
        if self._value == 0:
            raise DivisionByZero(f"Division by zero: {other} // 0")
        return SafeInt(other // self._value)

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        """Modulo operation.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Modulo by zero: {self._value} % 0")
        return SafeInt(self._value % other_val)

    def __truediv__(self, other: object) -> SafeInt:
        raise TypeError("SafeInt does not support true division; use //")

    # --- Comparison operations ---

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __ne__(self, other: object) -> bool:
        result = self.__eq__(other)
        if result is NotImplemented:
            return NotImplemented
        return not result

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _extract_value(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _extract_value(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _extract_value(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _extract_value(other)

    # --- Conversion ---

    def __int__(self) -> int:
        return self._value

    def __bool__(self) -> bool:
        """True if non-zero."""
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Ceiling division (rounds up).

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Ceiling division by zero: {self._value}")
        return SafeInt(-(-self._value // other_val))

    def divmod(self, other: SafeInt | int) -> tuple[SafeInt, SafeInt]:
        """Quotient and remainder.

        The pair satisfies ``quotient * other + remainder == self`` and
        ``remainder < other``.

        Raises:
            DivisionByZero: If other is zero
        """
        other_val = _extract_value(other)
        if other_val == 0:
            raise DivisionByZero(f"Division by zero: divmod({self._value}, 0)")
        quotient, remainder = divmod(self._value, other_val)
        return SafeInt(quotient), SafeInt(remainder)

    def isqrt(self) -> SafeInt:
        """Floor square root: ``root**2 <= self < (root + 1)**2``."""
        return SafeInt(_isqrt(self._value))

    def min(self, other: SafeInt | int) -> SafeInt:
        """Return minimum of self and other."""
        return SafeInt(min(self._value, _extract_value(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        """Return maximum of self and other."""
        return SafeInt(max(self._value, _extract_value(other)))

    def to_uint128(self) -> int:
        """Convert to int, validating the 128-bit reserve bound.

        Raises:
            ArithmeticOverflow: If value exceeds 2^128-1
        """
        if self._value > UINT128_MAX:
            raise ArithmeticOverflow(f"Value exceeds uint128 max: {self._value}")
        return self._value

    def to_uint256(self) -> int:
        """Convert to int. Always in range by construction."""
        return self._value

    def fits(self, bound: int) -> bool:
        """Check if value is at most ``bound`` without raising."""
        return self._value <= bound

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)

    @classmethod
    def from_str(cls, s: str) -> SafeInt:
        """Parse SafeInt from a decimal string.

        Raises:
            ValueError: If string is not a valid integer
        """
        return cls(int(s))


def _checked(value: int, expr: str) -> int:
    if value < 0:
        raise ArithmeticUnderflow(f"Underflow: {expr} = {value}")
    if value > UINT256_MAX:
        raise ArithmeticOverflow(f"Overflow: {expr} exceeds uint256 max")
    return value


def _wrap(value: int, expr: str) -> SafeInt:
    result = SafeInt.__new__(SafeInt)
    result._value = _checked(value, expr)
    return result


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
