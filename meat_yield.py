"""Butcher's yield test: what a bulk cut really costs once trim is removed."""

import logging

from errors import DivisionByZero, InvalidWeight, InvalidYield
from models import MeatYieldResult, MeatYieldTest, YieldPart
from money import ZERO, add, divide, multiply, percent_of, to_decimal

logger = logging.getLogger(__name__)


def process_yield_test(test: MeatYieldTest) -> MeatYieldResult:
    """
    Break a purchased cut into its fabricated parts.

    Part weights are not required to add up to ``ap_weight``; any gap shows
    in ``MeatYieldResult.unaccounted_weight``.

    Raises:
        InvalidWeight: ap_weight <= 0.
        InvalidYield: no part is usable.
    """
    ap_weight = to_decimal(test.ap_weight)
    ap_cost = to_decimal(test.ap_cost)
    if ap_weight <= ZERO:
        raise InvalidWeight(ap_weight)

    price_per_unit = divide(ap_cost, ap_weight)

    parts = []
    usable = waste = ZERO
    for part in test.parts:
        weight = to_decimal(part.weight)
        parts.append(
            YieldPart(
                name=part.name,
                weight=weight,
                percentage=percent_of(weight, ap_weight),
                value=multiply(weight, price_per_unit),
                usable=part.usable,
            )
        )
        if part.usable:
            usable = add(usable, weight)
        else:
            waste = add(waste, weight)

    try:
        ep_cost_per_unit = divide(ap_cost, usable)
    except DivisionByZero as exc:
        raise InvalidYield(usable, "Yield test has no usable weight") from exc

    if price_per_unit == ZERO:
        # ep/price reduces to ap_weight/usable, which stays defined at zero cost
        factor = divide(ap_weight, usable)
    else:
        factor = divide(ep_cost_per_unit, price_per_unit)

    result = MeatYieldResult(
        product=test.product,
        ap_weight=ap_weight,
        ap_cost=ap_cost,
        price_per_unit=price_per_unit,
        parts=parts,
        total_usable_weight=usable,
        total_waste_weight=waste,
        yield_percentage=percent_of(usable, ap_weight),
        waste_percentage=percent_of(waste, ap_weight),
        ep_cost_per_unit=ep_cost_per_unit,
        cost_increase_factor=factor,
    )
    if result.unaccounted_weight != ZERO:
        logger.warning(
            "Yield test %r: parts add up to %s, purchased weight is %s",
            test.product, add(usable, waste), ap_weight,
        )
    return result
