from decimal import Decimal

import pytest

from errors import CostingError, DivisionByZero
from money import add, divide, multiply, percent_of, power, quantize, subtract, to_decimal


def test_to_decimal_float_goes_through_str():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(3) == Decimal("3")


def test_to_decimal_rejects_bool():
    with pytest.raises(TypeError):
        to_decimal(True)


def test_no_float_drift():
    assert add(0.1, 0.2) == Decimal("0.3")
    assert multiply(1.1, 1.1) == Decimal("1.21")
    assert subtract("1.00", "0.99") == Decimal("0.01")


def test_divide_by_zero_raises():
    with pytest.raises(DivisionByZero) as exc:
        divide(5, 0)
    assert isinstance(exc.value, ZeroDivisionError)
    assert isinstance(exc.value, CostingError)


def test_power():
    assert power("1.1", 2) == Decimal("1.21")
    with pytest.raises(DivisionByZero):
        power(0, -1)


def test_percent_of():
    assert percent_of(1, 4) == Decimal("25")


def test_quantize_bankers_rounding():
    assert quantize("2.345") == Decimal("2.34")
    assert quantize("2.355") == Decimal("2.36")
    assert quantize("6.56625", 4) == Decimal("6.5662")
