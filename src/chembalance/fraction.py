"""Exact rational arithmetic used by the stoichiometric solver.

Python integers are arbitrary precision, so numerators and denominators
never overflow no matter how many denominators the solver multiplies
together.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

Number = Union["Fraction", int]


@dataclass(frozen=True)
class Fraction:
    """Reduced fraction with a strictly positive denominator.

    Attributes:
        numerator: Signed integer numerator.
        denominator: Positive integer denominator, always coprime with the numerator.
    """

    numerator: int
    denominator: int = 1

    def __post_init__(self) -> None:
        numerator = int(self.numerator)
        denominator = int(self.denominator)
        if denominator == 0:
            raise ZeroDivisionError("Denominator zero in fraction")
        if denominator < 0:
            numerator, denominator = -numerator, -denominator
        divisor = math.gcd(numerator, denominator)
        if divisor:
            numerator //= divisor
            denominator //= divisor
        object.__setattr__(self, "numerator", numerator)
        object.__setattr__(self, "denominator", denominator)

    @classmethod
    def coerce(cls, value: Number) -> Fraction:
        if isinstance(value, Fraction):
            return value
        if isinstance(value, int):
            return cls(value)
        raise TypeError(f"Cannot convert {type(value).__name__} to Fraction")

    @property
    def is_zero(self) -> bool:
        return self.numerator == 0

    @property
    def is_integer(self) -> bool:
        return self.denominator == 1

    def add(self, other: Number) -> Fraction:
        other = Fraction.coerce(other)
        return Fraction(
            self.numerator * other.denominator + other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def subtract(self, other: Number) -> Fraction:
        other = Fraction.coerce(other)
        return Fraction(
            self.numerator * other.denominator - other.numerator * self.denominator,
            self.denominator * other.denominator,
        )

    def multiply(self, other: Number) -> Fraction:
        other = Fraction.coerce(other)
        return Fraction(self.numerator * other.numerator, self.denominator * other.denominator)

    def divide(self, other: Number) -> Fraction:
        other = Fraction.coerce(other)
        if other.is_zero:
            raise ZeroDivisionError("Division by a zero fraction")
        return Fraction(self.numerator * other.denominator, self.denominator * other.numerator)

    # Operator forms let numpy object arrays of fractions do row arithmetic.
    def __add__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return self.add(other)

    __radd__ = __add__

    def __sub__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return self.subtract(other)

    def __rsub__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return Fraction.coerce(other).subtract(self)

    def __mul__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return self.multiply(other)

    __rmul__ = __mul__

    def __truediv__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return self.divide(other)

    def __rtruediv__(self, other: object) -> Fraction:
        if not isinstance(other, (Fraction, int)):
            return NotImplemented
        return Fraction.coerce(other).divide(self)

    def __neg__(self) -> Fraction:
        return Fraction(-self.numerator, self.denominator)

    def __bool__(self) -> bool:
        return self.numerator != 0

    def __str__(self) -> str:
        return f"{self.numerator}/{self.denominator}"


ZERO = Fraction(0)
ONE = Fraction(1)
