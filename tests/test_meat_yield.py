import logging
from decimal import Decimal

import pytest

from errors import DivisionByZero, InvalidWeight, InvalidYield
from meat_yield import process_yield_test
from models import MeatPart, MeatYieldTest
from money import quantize


def tenderloin_test():
    return MeatYieldTest(
        product="Tenderloin",
        ap_weight=Decimal("1000"),
        ap_cost=Decimal("20.00"),
        parts=(
            MeatPart("Centre cut", Decimal("700"), True),
            MeatPart("Silverskin & fat", Decimal("300"), False),
        ),
    )


def test_yield_test():
    res = process_yield_test(tenderloin_test())
    assert res.price_per_unit == Decimal("0.02")
    assert res.yield_percentage == 70
    assert res.waste_percentage == 30
    assert quantize(res.ep_cost_per_unit, 5) == Decimal("0.02857")
    assert quantize(res.cost_increase_factor, 4) == Decimal("1.4286")


def test_part_values():
    res = process_yield_test(tenderloin_test())
    centre, trim = res.parts
    assert centre.percentage == 70
    assert centre.value == Decimal("14.00")
    assert trim.value == Decimal("6.00")
    assert not trim.usable


def test_partition():
    res = process_yield_test(tenderloin_test())
    assert res.total_usable_weight + res.total_waste_weight == Decimal("1000")
    assert res.yield_percentage + res.waste_percentage == 100
    assert res.unaccounted_weight == 0


def test_cost_increase_factor_is_at_least_one():
    test = MeatYieldTest(
        ap_weight=Decimal("2500"),
        ap_cost=Decimal("37.50"),
        parts=(
            MeatPart("Steaks", Decimal("1600"), True),
            MeatPart("Stew meat", Decimal("400"), True),
            MeatPart("Bones", Decimal("500"), False),
        ),
    )
    res = process_yield_test(test)
    assert res.yield_percentage == 80
    assert res.cost_increase_factor == Decimal("1.25")


def test_all_waste_rejected():
    test = MeatYieldTest(
        ap_weight=Decimal("1000"),
        ap_cost=Decimal("20"),
        parts=(MeatPart("Spoiled", Decimal("1000"), False),),
    )
    with pytest.raises(InvalidYield) as exc:
        process_yield_test(test)
    assert isinstance(exc.value.__cause__, DivisionByZero)


@pytest.mark.parametrize("weight", [Decimal("0"), Decimal("-10")])
def test_bad_ap_weight_rejected(weight):
    test = MeatYieldTest(ap_weight=weight, ap_cost=Decimal("20"), parts=())
    with pytest.raises(InvalidWeight):
        process_yield_test(test)


def test_under_accounted_parts_are_reported(caplog):
    test = MeatYieldTest(
        product="Brisket",
        ap_weight=Decimal("1000"),
        ap_cost=Decimal("10"),
        parts=(MeatPart("Flat", Decimal("600"), True), MeatPart("Fat", Decimal("200"), False)),
    )
    with caplog.at_level(logging.WARNING, logger="meat_yield"):
        res = process_yield_test(test)
    assert res.unaccounted_weight == Decimal("200")
    assert res.yield_percentage + res.waste_percentage == 80
    assert "Brisket" in caplog.text


def test_over_accounted_parts_yield_above_100():
    test = MeatYieldTest(
        ap_weight=Decimal("1000"),
        ap_cost=Decimal("10"),
        parts=(MeatPart("Whole", Decimal("1100"), True),),
    )
    res = process_yield_test(test)
    assert res.yield_percentage == 110
    assert res.cost_increase_factor < 1
    assert res.unaccounted_weight == Decimal("-100")


def test_free_product():
    test = MeatYieldTest(
        ap_weight=Decimal("1000"),
        ap_cost=Decimal("0"),
        parts=(MeatPart("Meat", Decimal("500"), True), MeatPart("Bone", Decimal("500"), False)),
    )
    res = process_yield_test(test)
    assert res.ep_cost_per_unit == 0
    assert res.cost_increase_factor == 2


def test_record():
    record = process_yield_test(tenderloin_test()).as_record()
    assert record["product"] == "Tenderloin"
    assert record["parts"][0]["name"] == "Centre cut"
    assert record["unaccounted_weight"] == 0
