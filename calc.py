"""Pure calculation utilities for food cost logic (AP/EP yield conversions)."""

from decimal import Decimal, ROUND_CEILING
from typing import Optional, Tuple

from errors import InvalidPrice, InvalidTarget, InvalidWeight, InvalidYield
from money import HUNDRED, ZERO, Number, divide, multiply, percent_of, subtract, to_decimal


def ap_cost(quantity: Number, unit_price: Number) -> Decimal:
    """As-purchased cost of a quantity."""
    return multiply(quantity, unit_price)


def ep_cost(ap: Number, yield_percentage: Number) -> Decimal:
    """Edible-portion cost: what the usable part of the purchase really costs."""
    y = to_decimal(yield_percentage)
    if y <= ZERO:
        raise InvalidYield(y)
    return divide(multiply(ap, HUNDRED), y)


def waste_cost(ep: Number, ap: Number) -> Decimal:
    """Money lost to trim; zero at 100% yield."""
    return subtract(ep, ap)


def cost_factor(yield_percentage: Number) -> Decimal:
    """Multiplier turning any AP cost into its EP equivalent."""
    y = to_decimal(yield_percentage)
    if y <= ZERO:
        raise InvalidYield(y)
    return divide(HUNDRED, y)


def yield_percentage(ep_weight: Number, ap_weight: Number) -> Decimal:
    """Share of the purchased weight that is usable, in %."""
    ap = to_decimal(ap_weight)
    if ap <= ZERO:
        raise InvalidWeight(ap)
    return percent_of(ep_weight, ap)


def food_cost_percentage(cost: Number, price: Number) -> Decimal:
    p = to_decimal(price)
    if p <= ZERO:
        raise InvalidPrice(p)
    return percent_of(cost, p)


def menu_price(cost: Number, target_percentage: Number) -> Decimal:
    """Selling price that puts ``cost`` at ``target_percentage`` food cost."""
    target = to_decimal(target_percentage)
    if target <= ZERO:
        raise InvalidTarget(target)
    return divide(cost, divide(target, HUNDRED))


def markup_factor(food_cost_percentage: Number) -> Decimal:
    """Multiplier from cost to selling price; 25% food cost gives 4."""
    pct = to_decimal(food_cost_percentage)
    if pct <= ZERO:
        raise InvalidTarget(pct)
    return divide(HUNDRED, pct)


def break_even_units(fixed_costs: Number, contribution_margin: Number) -> Optional[int]:
    """
    Portions to sell before ``fixed_costs`` are covered, rounded up.

    Returns None when each portion earns nothing, since no volume breaks even.
    """
    margin = to_decimal(contribution_margin)
    if margin <= ZERO:
        return None
    return int(divide(fixed_costs, margin).to_integral_value(rounding=ROUND_CEILING))


def cooking_loss(raw_weight: Number, cooked_weight: Number) -> Tuple[Decimal, Decimal]:
    """Weight lost in cooking and the same loss as % of the raw weight."""
    raw = to_decimal(raw_weight)
    if raw <= ZERO:
        raise InvalidWeight(raw)
    loss = subtract(raw, cooked_weight)
    return loss, percent_of(loss, raw)


def moisture_loss(initial_weight: Number, final_weight: Number) -> Decimal:
    initial = to_decimal(initial_weight)
    if initial <= ZERO:
        raise InvalidWeight(initial)
    return percent_of(subtract(initial, final_weight), initial)
