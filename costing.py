"""
Recipe cost aggregation (escandallo).

``cost_recipe`` works in two passes: the first prices every ingredient and
builds the surcharge-inclusive total, the second expresses each line as a
share of that total. Shares can only be computed once the final total is
known, so the passes stay separate.
"""

import logging
from dataclasses import replace
from decimal import Decimal
from typing import List

from calc import ap_cost, ep_cost, menu_price, waste_cost
from errors import InvalidCost, InvalidPortions, InvalidPrice
from models import CostedIngredient, CostVariance, Profitability, Recipe, RecipeCostResult, ValidationReport
from money import HUNDRED, ZERO, Number, add, divide, multiply, percent_of, subtract, to_decimal

logger = logging.getLogger(__name__)

MAX_FACTOR = Decimal("0.1")
LOW_TARGET = Decimal("20")
HIGH_TARGET = Decimal("40")
# variance % thresholds
VARIANCE_HIGH = Decimal("5")
VARIANCE_MODERATE = Decimal("2")


def apply_surcharges(direct_total: Number, spice_factor: Number, q_factor: Number):
    """
    Layer the spice and Q surcharges on a direct ingredient total.

    Q is charged on the spice-adjusted subtotal, not on the direct total.

    Returns:
        (spice_cost, q_cost, total)
    """
    spice_cost = multiply(direct_total, spice_factor)
    after_spice = add(direct_total, spice_cost)
    q_cost = multiply(after_spice, q_factor)
    return spice_cost, q_cost, add(after_spice, q_cost)


def cost_recipe(recipe: Recipe) -> RecipeCostResult:
    """
    Produce the full cost breakdown of a recipe.

    Raises:
        InvalidYield: an ingredient has a yield <= 0.
        InvalidPortions: recipe.portions <= 0.
        InvalidTarget: target food cost % <= 0.
    """
    if recipe.portions <= 0:
        raise InvalidPortions(recipe.portions)

    # Pass 1: line costs and direct total
    lines = []
    direct_total = total_ap = total_waste = ZERO
    for ing in recipe.ingredients:
        ap = ap_cost(ing.quantity, ing.unit_price)
        ep = ep_cost(ap, ing.yield_percentage)
        waste = waste_cost(ep, ap)
        lines.append((ing, ap, ep, waste))
        direct_total = add(direct_total, ep)
        total_ap = add(total_ap, ap)
        total_waste = add(total_waste, waste)

    spice_cost, q_cost, total = apply_surcharges(direct_total, recipe.spice_factor, recipe.q_factor)

    # Pass 2: share of the surcharge-inclusive total
    breakdown = []
    for ing, ap, ep, waste in lines:
        share = percent_of(ep, total) if total != ZERO else ZERO
        breakdown.append(
            CostedIngredient(
                name=ing.name,
                quantity=to_decimal(ing.quantity),
                unit=ing.unit,
                unit_price=to_decimal(ing.unit_price),
                ap_cost=ap,
                yield_percentage=to_decimal(ing.yield_percentage),
                ep_cost=ep,
                waste_cost=waste,
                percentage_of_total=share,
            )
        )

    per_portion = divide(total, recipe.portions)
    suggested = menu_price(per_portion, recipe.target_food_cost_percentage)

    logger.debug(
        "Costed %s: %d ingredients, total=%s, per portion=%s",
        recipe.name, len(breakdown), total, per_portion,
    )
    return RecipeCostResult(
        recipe_name=recipe.name,
        portions=recipe.portions,
        breakdown=breakdown,
        direct_total=direct_total,
        total_ap_cost=total_ap,
        total_waste_cost=total_waste,
        spice_factor=to_decimal(recipe.spice_factor),
        spice_cost=spice_cost,
        q_factor=to_decimal(recipe.q_factor),
        q_cost=q_cost,
        total_cost=total,
        cost_per_portion=per_portion,
        target_food_cost_percentage=to_decimal(recipe.target_food_cost_percentage),
        suggested_price=suggested,
    )


def scale_recipe(recipe: Recipe, target_portions: int) -> Recipe:
    """Return a copy of ``recipe`` with quantities scaled to ``target_portions``."""
    if recipe.portions <= 0:
        raise InvalidPortions(recipe.portions)
    if target_portions <= 0:
        raise InvalidPortions(target_portions)
    factor = divide(target_portions, recipe.portions)
    ingredients = tuple(
        replace(ing, quantity=multiply(ing.quantity, factor)) for ing in recipe.ingredients
    )
    return replace(recipe, portions=target_portions, ingredients=ingredients)


def recipe_profitability(cost_per_portion: Number, selling_price: Number, units_sold: int) -> Profitability:
    price = to_decimal(selling_price)
    if price <= ZERO:
        raise InvalidPrice(price)
    cost = to_decimal(cost_per_portion)
    margin = subtract(price, cost)
    return Profitability(
        cost_per_portion=cost,
        selling_price=price,
        contribution_margin=margin,
        profit_margin=percent_of(margin, price),
        units_sold=units_sold,
        total_revenue=multiply(price, units_sold),
        total_cost=multiply(cost, units_sold),
        total_profit=multiply(margin, units_sold),
    )


def cost_variance(actual_cost: Number, theoretical_cost: Number) -> CostVariance:
    """
    Compare what was actually spent with what the recipes say it should cost.

    A positive variance means overspending. Above 5% it points at waste or
    theft, above 2% at portioning.
    """
    theoretical = to_decimal(theoretical_cost)
    if theoretical <= ZERO:
        raise InvalidCost(theoretical)
    actual = to_decimal(actual_cost)
    variance = subtract(actual, theoretical)
    pct = percent_of(variance, theoretical)
    if pct > VARIANCE_HIGH:
        status, analysis = "high", "High variance - investigate waste/theft"
    elif pct > VARIANCE_MODERATE:
        status, analysis = "moderate", "Moderate variance - review portions"
    else:
        status, analysis = "acceptable", "Variance within acceptable range"
    if status != "acceptable":
        logger.info("Cost variance %s%% (%s)", pct, status)
    return CostVariance(
        actual_cost=actual,
        theoretical_cost=theoretical,
        variance=variance,
        variance_percentage=pct,
        status=status,
        analysis=analysis,
    )


def validate_recipe(recipe: Recipe) -> ValidationReport:
    """Check a recipe before costing; ``errors`` block costing, ``warnings`` don't."""
    report = ValidationReport()
    errors: List[str] = report.errors

    if not (recipe.name or "").strip():
        errors.append("Recipe name is required")
    if recipe.portions <= 0:
        errors.append("Valid portion count is required")
    if not recipe.ingredients:
        errors.append("At least one ingredient is required")

    for index, ing in enumerate(recipe.ingredients, start=1):
        label = ing.name or index
        if not ing.name:
            errors.append(f"Ingredient {index}: Name is required")
        if to_decimal(ing.quantity) <= ZERO:
            errors.append(f"Ingredient {label}: Valid quantity is required")
        if to_decimal(ing.unit_price) < ZERO:
            errors.append(f"Ingredient {label}: Valid unit price is required")
        y = to_decimal(ing.yield_percentage)
        if y <= ZERO or y > HUNDRED:
            errors.append(f"Ingredient {label}: Yield must be between 0 and 100")

    for label, factor in (("Spice factor", recipe.spice_factor), ("Q factor", recipe.q_factor)):
        f = to_decimal(factor)
        if f < ZERO or f > MAX_FACTOR:
            errors.append(f"{label} must be between 0 and {MAX_FACTOR}")

    target = to_decimal(recipe.target_food_cost_percentage)
    if target <= ZERO or target >= HUNDRED:
        errors.append("Target food cost % must be between 0 and 100")
    elif target < LOW_TARGET:
        report.warnings.append("Very low target food cost - may be difficult to achieve")
    elif target > HIGH_TARGET:
        report.warnings.append("High target food cost - consider reducing for better profitability")

    return report
