from decimal import Decimal
from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

import settings
from models import MeatPart, MeatYieldTest
from store import JsonRepository

APP = str(Path(__file__).resolve().parents[1] / "app.py")


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    monkeypatch.setenv("FOODCOST_DATA_DIR", str(tmp_path))
    monkeypatch.delenv("APP_PASS", raising=False)
    return tmp_path


def test_empty_key_rejected(monkeypatch):
    monkeypatch.setenv("APP_PASS", "foo")
    assert settings.check_key("") is False
    assert settings.check_key("   ") is False


def test_keys_are_case_insensitive(monkeypatch):
    monkeypatch.setenv("APP_PASS", "alpha, beta gamma")
    assert len(settings.valid_keys()) == 3
    assert settings.check_key("BETA")
    assert settings.check_key(" gamma ")
    assert not settings.check_key("delta")


def test_demo_mode_without_keys(monkeypatch):
    monkeypatch.delenv("APP_PASS", raising=False)
    assert settings.valid_keys() == set()


def test_data_dir_from_env(data_dir):
    assert settings.data_dir() == data_dir


def test_home_page_costs_default_recipe(data_dir):
    at = AppTest.from_file(APP, default_timeout=30).run()
    assert not at.exception
    assert at.header[0].value.startswith("Escandallo")
    labels = [m.label for m in at.metric]
    assert "Total cost" in labels
    assert (data_dir / "recipes.json").exists()


@pytest.mark.parametrize("page", ["Recipes", "Meat Yield Test", "Menu Engineering", "Settings"])
def test_pages_render(data_dir, page):
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.selectbox(key="nav").select(page).run()
    assert not at.exception
    assert not at.error


def test_license_gate(data_dir, monkeypatch):
    monkeypatch.setenv("APP_PASS", "foo")
    at = AppTest.from_file(APP, default_timeout=30).run()
    assert at.title[0].value == "Enter License Key"
    assert not at.header

    at.text_input(key="license_input").input("wrong")
    at.button(key="license_btn").click().run()
    assert at.error[0].value == "Invalid key"


def test_deleted_default_recipe_stays_deleted(data_dir):
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.selectbox(key="nav").select("Recipes").run()
    delete = next(b for b in at.button if b.label == "Delete recipe")
    delete.click().run()
    assert not at.exception
    assert JsonRepository(data_dir).list_recipes() == []

    fresh = AppTest.from_file(APP, default_timeout=30).run()
    assert not fresh.exception
    assert fresh.info[-1].value.startswith("No recipes yet")


def test_broken_recipe_record_is_reported(data_dir):
    JsonRepository(data_dir).save("recipes", {"Broken": {"name": "Broken", "portions": "four"}})
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.selectbox(key="nav").select("Recipes").run()
    assert not at.exception
    assert "not an integer" in at.error[0].value


def test_saved_yield_test_can_be_reloaded(data_dir):
    test = MeatYieldTest(Decimal("2000"), Decimal("9.80"), (MeatPart("Breast", Decimal("800"), True),), "Chicken")
    JsonRepository(data_dir).save_yield_test(test)
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.selectbox(key="nav").select("Meat Yield Test").run()
    at.button(key="yt_load").click().run()
    assert not at.exception
    assert at.text_input(key="yt_product").value == "Chicken"
    assert at.number_input(key="yt_apweight").value == 2000.0
    assert len(at.dataframe) == 1


def test_broken_menu_file_is_reported(data_dir):
    JsonRepository(data_dir).save("menu_items", [{"name": "Soup", "sellingPrice": "6", "cost": "2"}])
    at = AppTest.from_file(APP, default_timeout=30).run()
    at.selectbox(key="nav").select("Menu Engineering").run()
    assert not at.exception
    assert "unitsSold" in at.error[0].value
