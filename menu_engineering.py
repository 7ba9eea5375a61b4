"""
Menu engineering: classify sold items by contribution margin and popularity.

An item is "high margin" when its contribution margin is at least the menu
average, and "popular" when it sold at least 70% of the average units.
"""

import logging
from functools import reduce
from decimal import Decimal
from typing import Iterable, List, Optional

from errors import EmptyItemSet
from models import (
    BusinessType,
    Classification,
    ClassifiedMenuItem,
    FoodCostAssessment,
    MenuItem,
    MenuSummary,
)
from money import ZERO, Number, add, divide, multiply, percent_of, subtract, to_decimal
from settings import POPULARITY_THRESHOLD

logger = logging.getLogger(__name__)

# Food cost % ranges (min, max) considered healthy per type of business
FOOD_COST_TARGETS = {
    BusinessType.FINE_DINING: (Decimal("30"), Decimal("40")),
    BusinessType.CASUAL_DINING: (Decimal("28"), Decimal("35")),
    BusinessType.QUICK_SERVICE: (Decimal("20"), Decimal("30")),
    BusinessType.BAKERY: (Decimal("25"), Decimal("35")),
    BusinessType.CATERING: (Decimal("35"), Decimal("45")),
}

RECOMMENDATIONS = {
    "below_target": [
        "Consider improving ingredient quality",
        "Review portion sizes for adequacy",
        "Ensure pricing reflects value",
    ],
    "above_target": [
        "Review supplier contracts",
        "Implement portion control",
        "Consider menu price adjustments",
        "Focus on high-margin items",
        "Reduce waste",
    ],
    "on_target": ["Maintain current standards"],
}


def classify(high_margin: bool, high_popularity: bool) -> Classification:
    if high_margin:
        return Classification.STAR if high_popularity else Classification.PUZZLE
    return Classification.PLOW_HORSE if high_popularity else Classification.DOG


def _ratio(value: Number, average: Decimal) -> Optional[Decimal]:
    if average == ZERO:
        return None
    return divide(value, average)


def classify_menu(items: Iterable[MenuItem]) -> List[ClassifiedMenuItem]:
    """
    Classify every item into a quadrant.

    Raises:
        EmptyItemSet: no items were given.
    """
    items = list(items)
    if not items:
        raise EmptyItemSet()

    margins = [subtract(item.selling_price, item.cost) for item in items]
    count = len(items)
    avg_margin = divide(reduce(add, margins, ZERO), count)
    avg_popularity = divide(sum(item.units_sold for item in items), count)
    popularity_bar = multiply(avg_popularity, POPULARITY_THRESHOLD)
    logger.debug(
        "Menu engineering over %d items: avg margin=%s, avg popularity=%s",
        count, avg_margin, avg_popularity,
    )

    classified = []
    for item, margin in zip(items, margins):
        price = to_decimal(item.selling_price)
        classified.append(
            ClassifiedMenuItem(
                name=item.name,
                selling_price=price,
                cost=to_decimal(item.cost),
                units_sold=item.units_sold,
                contribution_margin=margin,
                total_contribution=multiply(margin, item.units_sold),
                food_cost_percentage=percent_of(item.cost, price) if price != ZERO else None,
                contribution_margin_ratio=_ratio(margin, avg_margin),
                popularity_ratio=_ratio(item.units_sold, avg_popularity),
                classification=classify(
                    margin >= avg_margin,
                    to_decimal(item.units_sold) >= popularity_bar,
                ),
            )
        )
    return classified


def summarize_menu(classified: List[ClassifiedMenuItem]) -> MenuSummary:
    counts = {c: 0 for c in Classification}
    units = 0
    revenue = cost = contribution = ZERO
    for item in classified:
        counts[item.classification] += 1
        units += item.units_sold
        revenue = add(revenue, multiply(item.selling_price, item.units_sold))
        cost = add(cost, multiply(item.cost, item.units_sold))
        contribution = add(contribution, item.total_contribution)
    return MenuSummary(
        counts=counts,
        total_units_sold=units,
        total_revenue=revenue,
        total_cost=cost,
        total_contribution=contribution,
        food_cost_percentage=percent_of(cost, revenue) if revenue != ZERO else None,
    )


def assess_food_cost(percentage: Number, business_type: BusinessType = BusinessType.CASUAL_DINING) -> FoodCostAssessment:
    """Compare a food cost % with the healthy range for a type of business."""
    pct = to_decimal(percentage)
    low, high = FOOD_COST_TARGETS[business_type]
    if pct < low:
        status = "below_target"
    elif pct > high:
        status = "above_target"
    else:
        status = "on_target"
    return FoodCostAssessment(
        percentage=pct,
        business_type=business_type,
        target_min=low,
        target_max=high,
        status=status,
        recommendations=list(RECOMMENDATIONS[status]),
    )
