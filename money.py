"""
Decimal helpers for cost arithmetic.

Every amount and percentage in the engine goes through these helpers so that
chained surcharges (cost x (1 + spice) x (1 + Q)) never pick up binary float
drift. Values are kept at full precision; quantize only for display/export.
"""

from decimal import Decimal, ROUND_HALF_EVEN, getcontext
from typing import Union

from errors import DivisionByZero

getcontext().prec = 28

Number = Union[Decimal, int, float, str]

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value: Number) -> Decimal:
    """
    Convert a number to Decimal.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.1")``
    and not its binary expansion.

    Examples:
        >>> to_decimal(0.1)
        Decimal('0.1')
        >>> to_decimal("2.50")
        Decimal('2.50')
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def add(a: Number, b: Number) -> Decimal:
    return to_decimal(a) + to_decimal(b)


def subtract(a: Number, b: Number) -> Decimal:
    return to_decimal(a) - to_decimal(b)


def multiply(a: Number, b: Number) -> Decimal:
    return to_decimal(a) * to_decimal(b)


def divide(a: Number, b: Number) -> Decimal:
    """Divide ``a`` by ``b``; raises DivisionByZero instead of returning inf/NaN."""
    divisor = to_decimal(b)
    if divisor == ZERO:
        raise DivisionByZero(a)
    return to_decimal(a) / divisor


def power(a: Number, exponent: Number) -> Decimal:
    base = to_decimal(a)
    exp = to_decimal(exponent)
    if base == ZERO and exp < ZERO:
        raise DivisionByZero(ONE)
    return base ** exp


def percent_of(part: Number, whole: Number) -> Decimal:
    """Return ``part / whole * 100``."""
    return multiply(divide(part, whole), HUNDRED)


def quantize(value: Number, places: int = 2) -> Decimal:
    """
    Round to a fixed number of decimal places with banker's rounding.

    Examples:
        >>> quantize("1.005")
        Decimal('1.00')
        >>> quantize("6.56625", 4)
        Decimal('6.5662')
    """
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(value).quantize(exponent, rounding=ROUND_HALF_EVEN)
