"""JSON persistence for recipes, menu items and yield tests, plus record conversion."""

import json
import logging
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any, Dict, List

from errors import RecipeNotFound, RecordError
from models import IngredientUsage, MeatPart, MeatYieldTest, MenuItem, Recipe
from money import to_decimal
from settings import DEFAULT_Q_FACTOR, DEFAULT_SPICE_FACTOR, DEFAULT_TARGET_FOOD_COST

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Records <-> models
# -----------------------------------------------------------------------------
def _dec(record: Dict[str, Any], key: str, kind: str, default=None) -> Decimal:
    value = record.get(key)
    if value is None:
        if default is None:
            raise RecordError(kind, f"missing '{key}'")
        return default
    try:
        return to_decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise RecordError(kind, f"'{key}' is not a number: {value!r}") from exc


def _int(record: Dict[str, Any], key: str, kind: str) -> int:
    value = record.get(key)
    if value is None:
        raise RecordError(kind, f"missing '{key}'")
    try:
        number = to_decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise RecordError(kind, f"'{key}' is not an integer: {value!r}") from exc
    if not number.is_finite() or number != number.to_integral_value():
        raise RecordError(kind, f"'{key}' is not an integer: {value!r}")
    return int(number)


def ingredient_from_record(record: Dict[str, Any]) -> IngredientUsage:
    return IngredientUsage(
        name=str(record.get("name", "")),
        quantity=_dec(record, "quantity", "ingredient"),
        unit=str(record.get("unit", "")),
        unit_price=_dec(record, "unitPrice", "ingredient"),
        yield_percentage=_dec(record, "yieldPercentage", "ingredient", Decimal("100")),
    )


def recipe_from_record(record: Dict[str, Any]) -> Recipe:
    """Build a Recipe from its stored form; absent factors take their defaults."""
    if not record.get("name"):
        raise RecordError("recipe", "missing 'name'")
    return Recipe(
        name=record["name"],
        portions=_int(record, "portions", "recipe"),
        ingredients=tuple(ingredient_from_record(r) for r in record.get("ingredients", [])),
        spice_factor=_dec(record, "spiceFactor", "recipe", DEFAULT_SPICE_FACTOR),
        q_factor=_dec(record, "qFactor", "recipe", DEFAULT_Q_FACTOR),
        target_food_cost_percentage=_dec(record, "targetFoodCost", "recipe", DEFAULT_TARGET_FOOD_COST),
        category=record.get("category") or "Other",
    )


def recipe_to_record(recipe: Recipe) -> Dict[str, Any]:
    return {
        "name": recipe.name,
        "category": recipe.category,
        "portions": recipe.portions,
        "ingredients": [
            {
                "name": ing.name,
                "quantity": str(ing.quantity),
                "unit": ing.unit,
                "unitPrice": str(ing.unit_price),
                "yieldPercentage": str(ing.yield_percentage),
            }
            for ing in recipe.ingredients
        ],
        "spiceFactor": str(recipe.spice_factor),
        "qFactor": str(recipe.q_factor),
        "targetFoodCost": str(recipe.target_food_cost_percentage),
    }


def yield_test_from_record(record: Dict[str, Any]) -> MeatYieldTest:
    parts = []
    for r in record.get("parts", []):
        usable = r.get("usable", False)
        if not isinstance(usable, bool):
            raise RecordError("yield test part", f"'usable' must be true or false: {usable!r}")
        parts.append(
            MeatPart(
                name=str(r.get("name", "")),
                weight=_dec(r, "weight", "yield test part"),
                usable=usable,
            )
        )
    return MeatYieldTest(
        product=record.get("product", ""),
        ap_weight=_dec(record, "apWeight", "yield test"),
        ap_cost=_dec(record, "apCost", "yield test"),
        parts=tuple(parts),
    )


def yield_test_to_record(test: MeatYieldTest) -> Dict[str, Any]:
    return {
        "product": test.product,
        "apWeight": str(test.ap_weight),
        "apCost": str(test.ap_cost),
        "parts": [
            {"name": p.name, "weight": str(p.weight), "usable": p.usable} for p in test.parts
        ],
    }


def menu_item_from_record(record: Dict[str, Any]) -> MenuItem:
    return MenuItem(
        name=str(record.get("name", "")),
        selling_price=_dec(record, "sellingPrice", "menu item"),
        cost=_dec(record, "cost", "menu item"),
        units_sold=_int(record, "unitsSold", "menu item"),
    )


def menu_item_to_record(item: MenuItem) -> Dict[str, Any]:
    return {
        "name": item.name,
        "sellingPrice": str(item.selling_price),
        "cost": str(item.cost),
        "unitsSold": item.units_sold,
    }


def _json_default(value):
    if isinstance(value, Decimal):
        return str(value)
    raise TypeError(f"{type(value).__name__} is not JSON serializable")


def dumps_record(record: Any) -> str:
    """Serialize a result record; Decimals are written as strings."""
    return json.dumps(record, default=_json_default, ensure_ascii=False, indent=2)


# -----------------------------------------------------------------------------
# Repository
# -----------------------------------------------------------------------------
class JsonRepository:
    """
    One JSON file per collection under ``data_dir``.

    Recipes are stored as a name -> record mapping in ``recipes.json``.
    """

    def __init__(self, data_dir: Path):
        self.data_dir = Path(data_dir)

    def _path(self, name: str) -> Path:
        return self.data_dir / f"{name}.json"

    def load(self, name: str, default):
        path = self._path(name)
        if path.exists():
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
            if isinstance(data, dict) and isinstance(default, dict):
                merged = default.copy()
                merged.update(data)
                return merged
            return data
        self.save(name, default)
        return default

    def seed(self, name: str, data) -> bool:
        """Write ``data`` only when the collection has never been saved."""
        if self._path(name).exists():
            return False
        self.save(name, data)
        return True

    def save(self, name: str, data) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)
        with open(self._path(name), "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=2, default=_json_default)
        logger.debug("Saved %s to %s", name, self.data_dir)

    # Recipes ------------------------------------------------------------------
    def list_recipes(self) -> List[str]:
        return list(self.load("recipes", {}).keys())

    def get_recipe(self, name: str) -> Recipe:
        records = self.load("recipes", {})
        if name not in records:
            raise RecipeNotFound(name)
        return recipe_from_record(records[name])

    def save_recipe(self, recipe: Recipe) -> None:
        records = self.load("recipes", {})
        records[recipe.name] = recipe_to_record(recipe)
        self.save("recipes", records)

    def delete_recipe(self, name: str) -> None:
        records = self.load("recipes", {})
        if records.pop(name, None) is None:
            raise RecipeNotFound(name)
        self.save("recipes", records)

    # Menu items ---------------------------------------------------------------
    def get_menu_items(self) -> List[MenuItem]:
        return [menu_item_from_record(r) for r in self.load("menu_items", [])]

    def save_menu_items(self, items: List[MenuItem]) -> None:
        self.save("menu_items", [menu_item_to_record(i) for i in items])

    # Yield tests --------------------------------------------------------------
    def get_yield_tests(self) -> List[MeatYieldTest]:
        return [yield_test_from_record(r) for r in self.load("yield_tests", [])]

    def save_yield_test(self, test: MeatYieldTest) -> None:
        records = [r for r in self.load("yield_tests", []) if r.get("product") != test.product]
        records.append(yield_test_to_record(test))
        self.save("yield_tests", records)
