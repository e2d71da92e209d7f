"""Checked wide integer for reserve and invariant arithmetic.

SafeInt models the 256-bit unsigned intermediate the curve math runs in.
Every operation is checked:
- Division by zero raises DivisionByZero
- Subtraction below zero raises Underflow
- Results above 2**256 - 1 raise Uint256Overflow
- Narrowing to u64 via to_u64() raises U64Overflow

Usage pattern:
    from stableswap.safe_int import S

    def compute(a: int, b: int, c: int) -> int:
        # Wrap at entry
        sa, sb, sc = S(a), S(b), S(c)

        # Natural arithmetic, checked at every step
        result = (sa * sb) // sc  # Raises if sc == 0
        remainder = sa - sb       # Raises if sb > sa

        # Narrow at exit
        return result.to_u64()
"""

from __future__ import annotations

UINT256_MAX = 2**256 - 1
U64_MAX = 2**64 - 1


class SafeIntError(ArithmeticError):
    """Base class for SafeInt arithmetic errors."""

    pass


class DivisionByZero(SafeIntError):
    """Division or modulo by zero."""

    pass


class Underflow(SafeIntError):
    """Subtraction would produce negative result."""

    pass


class Uint256Overflow(SafeIntError):
    """Value exceeds uint256 maximum."""

    pass


class U64Overflow(SafeIntError):
    """Value does not fit in an unsigned 64-bit integer."""

    pass


def _check(value: int) -> int:
    if value > UINT256_MAX:
        raise Uint256Overflow(f"Value exceeds uint256 max: {value}")
    return value


class SafeInt:
    """Unsigned 256-bit integer with checked arithmetic.

    Values are always in [0, 2**256 - 1]. Arithmetic that would leave that
    range raises instead of wrapping, so a failed computation can never
    yield a plausible looking amount.

    Attributes:
        value: The underlying integer value (read-only)
    """

    __slots__ = ("_value",)
    _value: int

    def __init__(self, value: int | SafeInt) -> None:
        """Create a SafeInt from an integer or another SafeInt.

        Raises:
            TypeError: If value is not an int or SafeInt
            Underflow: If value is negative
            Uint256Overflow: If value exceeds 2**256 - 1
        """
        if isinstance(value, SafeInt):
            self._value = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            if value < 0:
                raise Underflow(f"SafeInt cannot hold negative value: {value}")
            self._value = _check(value)
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

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
            Uint256Overflow: If the sum exceeds uint256
        """
        return SafeInt(_check(self._value + _extract_value(other)))

    def __radd__(self, other: int) -> SafeInt:
        return self.__add__(other)

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        """Subtract other from self.

        Raises:
            Underflow: If result would be negative
        """
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            raise Underflow(f"Underflow: {self._value} - {other_val} = {result}")
        return SafeInt(result)

    def __rsub__(self, other: int) -> SafeInt:
        result = other - self._value
        if result < 0:
            raise Underflow(f"Underflow: {other} - {self._value} = {result}")
        return SafeInt(result)

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        """Multiply two values.

        Raises:
            Uint256Overflow: If the product exceeds uint256
        """
        return SafeInt(_check(self._value * _extract_value(other)))

    def __rmul__(self, other: int) -> SafeInt:
        return self.__mul__(other)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        """Integer division, truncating toward zero.

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

    def __pow__(self, exponent: int) -> SafeInt:
        """Raise to a small non-negative power, checking each step."""
        result = SafeInt(1)
        for _ in range(exponent):
            result = result * self
        return result

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
        return self._value != 0

    def __index__(self) -> int:
        return self._value

    # --- Named operations ---

    def abs_diff(self, other: SafeInt | int) -> SafeInt:
        """Absolute difference |self - other|, never underflows."""
        other_val = _extract_value(other)
        if self._value >= other_val:
            return SafeInt(self._value - other_val)
        return SafeInt(other_val - self._value)

    def checked_sub(self, other: SafeInt | int) -> SafeInt | None:
        """Subtract, returning None on underflow instead of raising."""
        other_val = _extract_value(other)
        result = self._value - other_val
        if result < 0:
            return None
        return SafeInt(result)

    def checked_div(self, other: SafeInt | int) -> SafeInt | None:
        """Divide, returning None on zero instead of raising."""
        other_val = _extract_value(other)
        if other_val == 0:
            return None
        return SafeInt(self._value // other_val)

    def to_u64(self) -> int:
        """Narrow to an unsigned 64-bit integer.

        Raises:
            U64Overflow: If value exceeds 2**64 - 1
        """
        if self._value > U64_MAX:
            raise U64Overflow(f"Value exceeds u64 max: {self._value}")
        return self._value

    def is_u64(self) -> bool:
        """Check if value fits in u64 without raising."""
        return self._value <= U64_MAX

    @classmethod
    def zero(cls) -> SafeInt:
        """Create a SafeInt with value 0."""
        return cls(0)

    @classmethod
    def from_u64(cls, value: int) -> SafeInt:
        """Create a SafeInt from a value that must already fit in u64.

        Raises:
            U64Overflow: If value exceeds 2**64 - 1
        """
        result = cls(value)
        result.to_u64()
        return result


def _extract_value(x: SafeInt | int) -> int:
    """Extract integer value from SafeInt or int."""
    if isinstance(x, SafeInt):
        return x._value
    return x


# Convenience alias for concise code
S = SafeInt
