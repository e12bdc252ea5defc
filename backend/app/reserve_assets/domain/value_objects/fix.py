"""Fixed-point value object for prices and exchange-rate ratios.

All prices and ratios are non-negative rationals with 18 fractional
digits. The value is stored as a raw integer scaled by 10**18 so that
repeated computation never drifts the way floating point does.
"""

from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Self

FIX_DECIMALS = 18
FIX_SCALE = 10**FIX_DECIMALS


class RoundingMode(Enum):
    """How the last fractional digit is resolved after mul/div."""

    FLOOR = "floor"
    ROUND = "round"
    CEIL = "ceil"


def _div_rounded(numerator: int, denominator: int, rounding: RoundingMode) -> int:
    if denominator == 0:
        raise ZeroDivisionError("Fix division by zero")
    quotient, remainder = divmod(numerator, denominator)
    if rounding is RoundingMode.FLOOR or remainder == 0:
        return quotient
    if rounding is RoundingMode.CEIL:
        return quotient + 1
    # Half-up on the absolute remainder
    return quotient + 1 if remainder * 2 >= denominator else quotient


@dataclass(frozen=True, order=True)
class Fix:
    """Immutable non-negative fixed-point number with 18 decimals.

    Attributes:
        raw: The value scaled by 10**18.
    """

    raw: int

    def __post_init__(self) -> None:
        """Validate the raw integer."""
        if not isinstance(self.raw, int) or isinstance(self.raw, bool):
            raise TypeError("Fix raw value must be an int")
        if self.raw < 0:
            raise ValueError("Fix value cannot be negative")

    @classmethod
    def zero(cls) -> Self:
        return cls(0)

    @classmethod
    def one(cls) -> Self:
        return cls(FIX_SCALE)

    @classmethod
    def from_int(cls, value: int) -> Self:
        """Create a Fix from a whole number."""
        return cls(value * FIX_SCALE)

    @classmethod
    def from_decimal(
        cls, value: Decimal | str | int, rounding: RoundingMode = RoundingMode.ROUND
    ) -> Self:
        """Create a Fix from a Decimal (or its string form).

        Digits beyond the 18th fractional place are resolved with the
        given rounding mode.

        Args:
            value: Decimal, numeric string or int.
            rounding: Rounding applied to excess precision.

        Returns:
            A new Fix instance.

        Raises:
            ValueError: If the value is negative or not a finite number.
        """
        dec = Decimal(value)
        if not dec.is_finite():
            raise ValueError(f"Cannot convert {value!r} to Fix")
        numerator, denominator = dec.as_integer_ratio()
        return cls(_div_rounded(numerator * FIX_SCALE, denominator, rounding))

    @classmethod
    def shift(
        cls, value: int, places: int, rounding: RoundingMode = RoundingMode.FLOOR
    ) -> Self:
        """Interpret ``value * 10**places`` as a Fix.

        Used to turn raw token amounts and feed answers into Fix, e.g.
        ``Fix.shift(balance, -decimals)``.
        """
        exponent = places + FIX_DECIMALS
        if exponent >= 0:
            return cls(value * 10**exponent)
        return cls(_div_rounded(value, 10 ** (-exponent), rounding))

    def to_decimal(self) -> Decimal:
        """Return the exact Decimal representation."""
        return Decimal(self.raw).scaleb(-FIX_DECIMALS)

    def shift_to_int(self, places: int, rounding: RoundingMode = RoundingMode.FLOOR) -> int:
        """Inverse of :meth:`shift`: return ``self * 10**places`` as an int."""
        exponent = places - FIX_DECIMALS
        if exponent >= 0:
            return self.raw * 10**exponent
        return _div_rounded(self.raw, 10 ** (-exponent), rounding)

    def mul(self, other: "Fix", rounding: RoundingMode = RoundingMode.ROUND) -> "Fix":
        return Fix(_div_rounded(self.raw * other.raw, FIX_SCALE, rounding))

    def div(self, other: "Fix", rounding: RoundingMode = RoundingMode.ROUND) -> "Fix":
        if other.raw == 0:
            raise ZeroDivisionError("Fix division by zero")
        return Fix(_div_rounded(self.raw * FIX_SCALE, other.raw, rounding))

    def __add__(self, other: "Fix") -> "Fix":
        if not isinstance(other, Fix):
            return NotImplemented
        return Fix(self.raw + other.raw)

    def __sub__(self, other: "Fix") -> "Fix":
        if not isinstance(other, Fix):
            return NotImplemented
        if other.raw > self.raw:
            raise ValueError("Fix subtraction underflow")
        return Fix(self.raw - other.raw)

    def __mul__(self, other: "Fix") -> "Fix":
        if not isinstance(other, Fix):
            return NotImplemented
        return self.mul(other)

    def __truediv__(self, other: "Fix") -> "Fix":
        if not isinstance(other, Fix):
            return NotImplemented
        return self.div(other)

    def __bool__(self) -> bool:
        return self.raw != 0

    def __str__(self) -> str:
        return format(self.to_decimal().normalize(), "f")


FIX_ZERO = Fix(0)
FIX_ONE = Fix(FIX_SCALE)
