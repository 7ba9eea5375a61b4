"""Runtime configuration, read from the environment (and an optional .env file)."""

import hashlib
import logging
import os
import re
from decimal import Decimal
from pathlib import Path
from typing import Set

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SPICE_FACTOR = Decimal("0.02")
DEFAULT_Q_FACTOR = Decimal("0.03")
DEFAULT_TARGET_FOOD_COST = Decimal("30")

# Popularity bar for menu engineering: 70% of the average units sold
POPULARITY_THRESHOLD = Decimal("0.7")

# Reference yield percentages (EP / AP x 100) used to prefill ingredient forms
STANDARD_YIELDS = {
    # Proteins
    "Beef tenderloin": 70,
    "Beef ribeye": 75,
    "Beef strip": 78,
    "Chicken whole": 65,
    "Chicken breast": 85,
    "Fish whole": 45,
    "Fish fillet": 95,
    "Pork loin": 75,
    "Lamb rack": 70,
    # Vegetables
    "Asparagus": 55,
    "Broccoli": 47,
    "Carrot": 82,
    "Celery": 75,
    "Lettuce iceberg": 76,
    "Lettuce romaine": 64,
    "Onion": 89,
    "Potato": 81,
    "Tomato": 91,
    # Fruits
    "Apple": 76,
    "Avocado": 67,
    "Lemon": 40,
    "Orange": 67,
    "Strawberry": 92,
}

RECIPE_CATEGORIES = [
    "Appetizer",
    "Soup",
    "Salad",
    "Main Course",
    "Side Dish",
    "Dessert",
    "Beverage",
    "Sauce",
    "Bread",
    "Pastry",
    "Other",
]

CURRENCIES = ["EUR", "USD", "GBP", "JPY"]
LOCALES = ["en_US", "es_ES", "it_IT"]


def data_dir() -> Path:
    return Path(os.environ.get("FOODCOST_DATA_DIR") or Path(__file__).parent / "data")


def default_locale() -> str:
    return os.environ.get("FOODCOST_LOCALE", "en_US")


def default_currency() -> str:
    return os.environ.get("FOODCOST_CURRENCY", "EUR")


def configure_logging() -> None:
    level = os.environ.get("FOODCOST_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# -----------------------------------------------------------------------------
# LICENSE (demo)
# -----------------------------------------------------------------------------
def _hash_key(key: str) -> str:
    """Return SHA-256 hex digest of the given key."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def valid_keys() -> Set[str]:
    """Hashes of the keys in APP_PASS (separated by commas or spaces)."""
    return {
        _hash_key(k.strip().upper())
        for k in re.split(r"[\s,]+", os.environ.get("APP_PASS", ""))
        if k.strip()
    }


def check_key(k: str) -> bool:
    k = (k or "").strip()
    if not k:
        return False
    return _hash_key(k.upper()) in valid_keys()
