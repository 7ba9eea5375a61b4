from decimal import Decimal

import pytest

from calc import (
    ap_cost,
    break_even_units,
    cooking_loss,
    cost_factor,
    ep_cost,
    food_cost_percentage,
    markup_factor,
    menu_price,
    moisture_loss,
    waste_cost,
    yield_percentage,
)
from errors import InvalidPrice, InvalidTarget, InvalidWeight, InvalidYield


def test_ap_cost():
    assert ap_cost(500, "0.01") == Decimal("5.00")


def test_ep_cost():
    assert ep_cost("5.00", 80) == Decimal("6.25")


def test_full_yield_has_no_waste():
    ap = ap_cost("0.8", "32.00")
    ep = ep_cost(ap, 100)
    assert ep == ap
    assert waste_cost(ep, ap) == 0


def test_waste_cost_positive_below_full_yield():
    assert waste_cost(ep_cost(10, 50), 10) == Decimal("10")


@pytest.mark.parametrize("bad", [0, -5, "0.0"])
def test_ep_cost_rejects_non_positive_yield(bad):
    with pytest.raises(InvalidYield):
        ep_cost(10, bad)


def test_cost_factor():
    assert cost_factor(80) == Decimal("1.25")
    assert cost_factor(100) == 1
    with pytest.raises(InvalidYield):
        cost_factor(0)


def test_cost_factor_matches_ep_cost():
    assert ep_cost("7.40", 80) == Decimal("7.40") * cost_factor(80)


def test_yield_percentage():
    assert yield_percentage(700, 1000) == Decimal("70")
    with pytest.raises(InvalidWeight):
        yield_percentage(700, 0)


def test_food_cost_percentage():
    assert food_cost_percentage(3, 10) == Decimal("30")
    with pytest.raises(InvalidPrice):
        food_cost_percentage(3, 0)


def test_menu_price():
    assert menu_price(3, 30) == Decimal("10")
    with pytest.raises(InvalidTarget):
        menu_price(3, 0)


def test_markup_factor():
    assert markup_factor(25) == Decimal("4")
    assert menu_price(3, 25) == 3 * markup_factor(25)


@pytest.mark.parametrize("bad", [0, -10])
def test_markup_factor_rejects_non_positive_percentage(bad):
    with pytest.raises(InvalidTarget):
        markup_factor(bad)


def test_break_even_rounds_up():
    assert break_even_units(1000, "7.50") == 134
    assert break_even_units(1000, 10) == 100


@pytest.mark.parametrize("margin", [0, "-1.5"])
def test_no_break_even_without_margin(margin):
    assert break_even_units(1000, margin) is None


def test_cooking_loss():
    loss, pct = cooking_loss(1000, 720)
    assert loss == Decimal("280")
    assert pct == Decimal("28")


def test_moisture_loss():
    assert moisture_loss("2.0", "1.7") == Decimal("15")


@pytest.mark.parametrize("raw", [0, -1])
def test_losses_reject_non_positive_start_weight(raw):
    with pytest.raises(InvalidWeight):
        cooking_loss(raw, 0)
    with pytest.raises(InvalidWeight):
        moisture_loss(raw, 0)
