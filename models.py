"""Input entities and derived result records for the costing engine."""

from dataclasses import asdict, dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from settings import DEFAULT_Q_FACTOR, DEFAULT_SPICE_FACTOR, DEFAULT_TARGET_FOOD_COST


class Classification(str, Enum):
    """Menu engineering quadrant."""
    STAR = "star"              # high margin, popular
    PUZZLE = "puzzle"          # high margin, unpopular
    PLOW_HORSE = "plow_horse"  # low margin, popular
    DOG = "dog"                # low margin, unpopular


class BusinessType(str, Enum):
    FINE_DINING = "fine_dining"
    CASUAL_DINING = "casual_dining"
    QUICK_SERVICE = "quick_service"
    BAKERY = "bakery"
    CATERING = "catering"


def _record(obj) -> Dict[str, Any]:
    data = asdict(obj)
    for key, value in data.items():
        if isinstance(value, Enum):
            data[key] = value.value
    return data


# -----------------------------------------------------------------------------
# Recipes
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class IngredientUsage:
    name: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    yield_percentage: Decimal = Decimal("100")  # 100 = no trim loss


@dataclass(frozen=True)
class Recipe:
    name: str
    portions: int
    ingredients: Tuple[IngredientUsage, ...] = ()
    spice_factor: Decimal = DEFAULT_SPICE_FACTOR
    q_factor: Decimal = DEFAULT_Q_FACTOR
    target_food_cost_percentage: Decimal = DEFAULT_TARGET_FOOD_COST
    category: str = "Other"


@dataclass(frozen=True)
class CostedIngredient:
    name: str
    quantity: Decimal
    unit: str
    unit_price: Decimal
    ap_cost: Decimal
    yield_percentage: Decimal
    ep_cost: Decimal
    waste_cost: Decimal
    percentage_of_total: Decimal

    def as_record(self) -> Dict[str, Any]:
        return _record(self)


@dataclass(frozen=True)
class RecipeCostResult:
    """
    Full escandallo for one recipe.

    ``total_cost`` includes the spice and Q surcharges, so the
    ``percentage_of_total`` of the breakdown lines sums to less than 100.
    """
    recipe_name: str
    portions: int
    breakdown: List[CostedIngredient]
    direct_total: Decimal
    total_ap_cost: Decimal
    total_waste_cost: Decimal
    spice_factor: Decimal
    spice_cost: Decimal
    q_factor: Decimal
    q_cost: Decimal
    total_cost: Decimal
    cost_per_portion: Decimal
    target_food_cost_percentage: Decimal
    suggested_price: Decimal

    def as_record(self) -> Dict[str, Any]:
        data = _record(self)
        data["breakdown"] = [line.as_record() for line in self.breakdown]
        return data


@dataclass(frozen=True)
class Profitability:
    cost_per_portion: Decimal
    selling_price: Decimal
    contribution_margin: Decimal
    profit_margin: Decimal
    units_sold: int
    total_revenue: Decimal
    total_cost: Decimal
    total_profit: Decimal

    def as_record(self) -> Dict[str, Any]:
        return _record(self)


@dataclass(frozen=True)
class CostVariance:
    """Actual against theoretical food cost for the same period or dish."""
    actual_cost: Decimal
    theoretical_cost: Decimal
    variance: Decimal
    variance_percentage: Decimal
    status: str  # acceptable | moderate | high
    analysis: str

    def as_record(self) -> Dict[str, Any]:
        return _record(self)


@dataclass
class ValidationReport:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors


# -----------------------------------------------------------------------------
# Meat yield tests
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class MeatPart:
    name: str
    weight: Decimal
    usable: bool


@dataclass(frozen=True)
class MeatYieldTest:
    ap_weight: Decimal  # grams
    ap_cost: Decimal
    parts: Tuple[MeatPart, ...] = ()
    product: str = ""


@dataclass(frozen=True)
class YieldPart:
    name: str
    weight: Decimal
    percentage: Decimal
    value: Decimal
    usable: bool


@dataclass(frozen=True)
class MeatYieldResult:
    product: str
    ap_weight: Decimal
    ap_cost: Decimal
    price_per_unit: Decimal
    parts: List[YieldPart]
    total_usable_weight: Decimal
    total_waste_weight: Decimal
    yield_percentage: Decimal
    waste_percentage: Decimal
    ep_cost_per_unit: Decimal
    cost_increase_factor: Decimal

    @property
    def unaccounted_weight(self) -> Decimal:
        """AP weight not covered by any part (negative when parts overshoot)."""
        return self.ap_weight - self.total_usable_weight - self.total_waste_weight

    def as_record(self) -> Dict[str, Any]:
        data = _record(self)
        data["unaccounted_weight"] = self.unaccounted_weight
        return data


# -----------------------------------------------------------------------------
# Menu engineering
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class MenuItem:
    name: str
    selling_price: Decimal
    cost: Decimal
    units_sold: int


@dataclass(frozen=True)
class ClassifiedMenuItem:
    name: str
    selling_price: Decimal
    cost: Decimal
    units_sold: int
    contribution_margin: Decimal
    total_contribution: Decimal
    food_cost_percentage: Optional[Decimal]
    contribution_margin_ratio: Optional[Decimal]
    popularity_ratio: Optional[Decimal]
    classification: Classification

    def as_record(self) -> Dict[str, Any]:
        return _record(self)


@dataclass(frozen=True)
class MenuSummary:
    counts: Dict[Classification, int]
    total_units_sold: int
    total_revenue: Decimal
    total_cost: Decimal
    total_contribution: Decimal
    food_cost_percentage: Optional[Decimal]

    def as_record(self) -> Dict[str, Any]:
        data = _record(self)
        data["counts"] = {c.value: n for c, n in self.counts.items()}
        return data


@dataclass(frozen=True)
class FoodCostAssessment:
    percentage: Decimal
    business_type: BusinessType
    target_min: Decimal
    target_max: Decimal
    status: str  # below_target | on_target | above_target
    recommendations: List[str]

    def as_record(self) -> Dict[str, Any]:
        return _record(self)
