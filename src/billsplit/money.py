from __future__ import annotations

from decimal import Decimal, InvalidOperation
from fractions import Fraction
from numbers import Rational
from typing import Union

CENT = Decimal("0.01")

Amount = Union[Decimal, Fraction, int, float, str]


class MoneyError(ValueError):
    """Raised when an amount or weight cannot be read as a finite number."""


def to_fraction(value: object) -> Fraction:
    """
    Convert a numeric input to an exact Fraction.

    Floats go through their shortest repr, so 0.1 means one tenth and not the
    nearest binary double. Booleans and non-finite values are rejected.
    """
    if isinstance(value, bool):
        raise MoneyError("boolean is not a number")
    if isinstance(value, Fraction):
        return value
    if isinstance(value, Rational):
        return Fraction(value.numerator, value.denominator)
    if isinstance(value, float):
        value = repr(value)
    if isinstance(value, str):
        try:
            value = Decimal(value.strip())
        except InvalidOperation as exc:
            raise MoneyError(f"invalid number: {value!r}") from exc
    if isinstance(value, Decimal):
        if not value.is_finite():
            raise MoneyError("number must be finite")
        return Fraction(value)
    raise MoneyError(f"unsupported numeric type: {type(value).__name__}")


def to_cents(value: object) -> int:
    """Round half-up (away from zero) to whole cents."""
    scaled = to_fraction(value) * 100
    sign = -1 if scaled < 0 else 1
    return sign * int(abs(scaled) + Fraction(1, 2))


def cents_to_decimal(cents: int) -> Decimal:
    return Decimal(cents).scaleb(-2)


def round_money(value: object) -> Decimal:
    return cents_to_decimal(to_cents(value))


def is_whole_cents(value: Decimal) -> bool:
    return value.is_finite() and value == value.quantize(CENT)
