from decimal import Decimal

import pytest

from errors import EmptyItemSet
from menu_engineering import assess_food_cost, classify, classify_menu, summarize_menu
from models import BusinessType, Classification, MenuItem


def item(name, price, cost, sold):
    return MenuItem(name, Decimal(price), Decimal(cost), sold)


def test_two_item_menu():
    star, dog = classify_menu([item("Item1", "20", "5", 100), item("Item2", "10", "8", 10)])
    assert star.contribution_margin == 15
    assert star.classification is Classification.STAR
    assert dog.contribution_margin == 2
    assert dog.classification is Classification.DOG
    assert star.contribution_margin_ratio == Decimal("15") / Decimal("8.5")
    assert star.popularity_ratio == Decimal("100") / Decimal("55")


def test_all_quadrants():
    items = [
        item("Steak", "30", "10", 100),    # margin 20, popular
        item("Lobster", "40", "15", 10),   # margin 25, unpopular
        item("Burger", "12", "6", 120),    # margin 6, popular
        item("Soup", "6", "3", 10),        # margin 3, unpopular
    ]
    labels = {c.name: c.classification for c in classify_menu(items)}
    assert labels == {
        "Steak": Classification.STAR,
        "Lobster": Classification.PUZZLE,
        "Burger": Classification.PLOW_HORSE,
        "Soup": Classification.DOG,
    }


def test_margin_equal_to_average_counts_as_high():
    items = [item("A", "18", "8", 10), item("B", "16", "10", 10), item("C", "12", "4", 10)]
    labels = [c.classification for c in classify_menu(items)]
    assert labels == [Classification.STAR, Classification.PLOW_HORSE, Classification.STAR]


def test_popularity_threshold_is_seventy_percent_of_average():
    # average 10 units, bar 7
    items = [item("A", "10", "5", 7), item("B", "10", "5", 13)]
    labels = [c.classification for c in classify_menu(items)]
    assert labels == [Classification.STAR, Classification.STAR]

    items = [item("A", "10", "5", 6), item("B", "10", "5", 14)]
    labels = [c.classification for c in classify_menu(items)]
    assert labels == [Classification.PUZZLE, Classification.STAR]


@pytest.mark.parametrize("high_margin,popular,expected", [
    (True, True, Classification.STAR),
    (True, False, Classification.PUZZLE),
    (False, True, Classification.PLOW_HORSE),
    (False, False, Classification.DOG),
])
def test_classify(high_margin, popular, expected):
    assert classify(high_margin, popular) is expected


def test_empty_menu_rejected():
    with pytest.raises(EmptyItemSet):
        classify_menu([])


def test_ratios_undefined_when_average_is_zero():
    (only,) = classify_menu([item("Water", "1", "1", 0)])
    assert only.contribution_margin_ratio is None
    assert only.popularity_ratio is None
    assert only.classification is Classification.STAR


def test_item_metrics():
    (c,) = classify_menu([item("Pasta", "12", "3", 40)])
    assert c.total_contribution == Decimal("360")
    assert c.food_cost_percentage == Decimal("25")
    assert c.as_record()["classification"] == "star"


def test_summarize_menu():
    classified = classify_menu([item("Item1", "20", "5", 100), item("Item2", "10", "8", 10)])
    summary = summarize_menu(classified)
    assert summary.counts[Classification.STAR] == 1
    assert summary.counts[Classification.DOG] == 1
    assert summary.counts[Classification.PUZZLE] == 0
    assert summary.total_units_sold == 110
    assert summary.total_revenue == Decimal("2100")
    assert summary.total_cost == Decimal("580")
    assert summary.total_contribution == Decimal("1520")
    assert float(summary.food_cost_percentage) == pytest.approx(580 / 2100 * 100)
    assert summary.as_record()["counts"]["plow_horse"] == 0


@pytest.mark.parametrize("pct,business,status", [
    ("25", BusinessType.CASUAL_DINING, "below_target"),
    ("32", BusinessType.CASUAL_DINING, "on_target"),
    ("36", BusinessType.CASUAL_DINING, "above_target"),
    ("35", BusinessType.FINE_DINING, "on_target"),
    ("40", BusinessType.CATERING, "on_target"),
    ("31", BusinessType.QUICK_SERVICE, "above_target"),
])
def test_assess_food_cost(pct, business, status):
    assessment = assess_food_cost(Decimal(pct), business)
    assert assessment.status == status
    assert assessment.recommendations
