# app.py
# =============================================================================
# Food Cost Calculator: escandallo, meat yield tests, menu engineering
# =============================================================================

from dataclasses import replace

import streamlit as st
import matplotlib.pyplot as plt  # per il grafico a torta

import settings
from calc import break_even_units, cooking_loss, markup_factor, moisture_loss
from costing import cost_recipe, cost_variance, recipe_profitability, scale_recipe, validate_recipe
from errors import CostingError, StoreError
from formatting import format_money, format_number, format_percent
from meat_yield import process_yield_test
from menu_engineering import assess_food_cost, classify_menu, summarize_menu
from models import BusinessType, Classification, IngredientUsage, MeatPart, MeatYieldTest, MenuItem, Recipe
from money import to_decimal
from store import JsonRepository, dumps_record

# -----------------------------------------------------------------------------
# CONFIG
# -----------------------------------------------------------------------------
st.set_page_config(page_title="Food Cost Calculator", layout="wide")
settings.configure_logging()

repo = JsonRepository(settings.data_dir())

DEFAULT_RECIPES = {
    "Beef Tenderloin Steak": {
        "name": "Beef Tenderloin Steak",
        "category": "Main Course",
        "portions": 4,
        "ingredients": [
            {"name": "Beef tenderloin", "quantity": "0.8", "unit": "kg", "unitPrice": "32.00", "yieldPercentage": "70"},
            {"name": "Potato", "quantity": "0.6", "unit": "kg", "unitPrice": "1.20", "yieldPercentage": "81"},
            {"name": "Butter", "quantity": "0.05", "unit": "kg", "unitPrice": "9.50"},
        ],
        "spiceFactor": "0.02",
        "qFactor": "0.03",
        "targetFoodCost": "30",
    }
}

DEFAULT_MENU = [
    {"name": "Beef Tenderloin Steak", "sellingPrice": "28.00", "cost": "8.90", "unitsSold": 120},
    {"name": "Caesar Salad", "sellingPrice": "11.00", "cost": "2.40", "unitsSold": 210},
    {"name": "Seafood Risotto", "sellingPrice": "22.00", "cost": "7.80", "unitsSold": 45},
    {"name": "Club Sandwich", "sellingPrice": "9.50", "cost": "4.10", "unitsSold": 30},
]

QUADRANT_LABELS = {
    Classification.STAR: "⭐ Star",
    Classification.PUZZLE: "🧩 Puzzle",
    Classification.PLOW_HORSE: "🐴 Plow horse",
    Classification.DOG: "🐶 Dog",
}


def reset_session_state():
    """Drop session values and return to the configured defaults."""
    for k in ("yield_parts", "locale", "currency"):
        if k in st.session_state:
            del st.session_state[k]
    init_session_state()


def init_session_state():
    repo.seed("recipes", DEFAULT_RECIPES)
    repo.seed("menu_items", DEFAULT_MENU)
    if "yield_parts" not in st.session_state:
        st.session_state.yield_parts = []
    if "locale" not in st.session_state:
        st.session_state["locale"] = settings.default_locale()
    if "currency" not in st.session_state:
        st.session_state["currency"] = settings.default_currency()


# -----------------------------------------------------------------------------
# LICENSE (demo)
# -----------------------------------------------------------------------------
if "unlocked" not in st.session_state:
    st.session_state.unlocked = False

if not settings.valid_keys():
    st.info("Running in demo mode — no license required.")
    st.session_state.unlocked = True
elif not st.session_state.unlocked:
    st.title("Enter License Key")
    key = st.text_input("License key", type="password", key="license_input")
    if st.button("Unlock", key="license_btn"):
        if settings.check_key(key):
            st.session_state.unlocked = True
            st.success("Unlocked")
            st.rerun()
        else:
            st.error("Invalid key")
    st.stop()

init_session_state()


# -----------------------------------------------------------------------------
# FUNZIONI DI SUPPORTO
# -----------------------------------------------------------------------------
def money(x):
    return format_money(x, st.session_state["currency"], st.session_state["locale"])


def number(x, decimals: int = 2):
    return format_number(x, decimals, st.session_state["locale"])


def percent(x, decimals: int = 1):
    return format_percent(x, decimals, st.session_state["locale"])


def breakdown_rows(result):
    rows = []
    for line in result.breakdown:
        rows.append({
            "Ingredient": line.name,
            "Qty": f"{number(line.quantity, 3)} {line.unit}",
            "Unit price": money(line.unit_price),
            "AP cost": money(line.ap_cost),
            "Yield": percent(line.yield_percentage),
            "EP cost": money(line.ep_cost),
            "Waste": money(line.waste_cost),
            "% of total": percent(line.percentage_of_total),
        })
    return rows


def cost_pie(labels, values, caption):
    if sum(values) > 0:
        fig, ax = plt.subplots()
        ax.pie(values, labels=labels, autopct='%1.1f%%', startangle=90)
        ax.axis('equal')
        st.pyplot(fig)
        plt.close(fig)
        st.caption(caption)
    else:
        st.info("Add priced ingredients to see the cost breakdown pie chart.")


# -----------------------------------------------------------------------------
# UI: sidebar navigation
# -----------------------------------------------------------------------------
sections = ["Escandallo (Home)", "Recipes", "Meat Yield Test", "Menu Engineering", "Settings"]
page = st.sidebar.selectbox("Navigate", sections, key="nav")

# -----------------------------------------------------------------------------
# HOME: escandallo
# -----------------------------------------------------------------------------
if page == "Escandallo (Home)":
    st.header("Escandallo — recipe cost breakdown")
    names = repo.list_recipes()
    if not names:
        st.info("No recipes yet. Create one in the 'Recipes' tab.")
    else:
        rsel = st.selectbox("Recipe", names, key="home_recipe")
        try:
            recipe = repo.get_recipe(rsel)
            report = validate_recipe(recipe)
            for w in report.warnings:
                st.warning(w)
            result = cost_recipe(recipe)
        except (CostingError, StoreError) as e:
            st.error(str(e))
        else:
            m1, m2, m3 = st.columns(3)
            m1.metric("Direct cost (EP)", money(result.direct_total))
            m2.metric(f"Spice ({percent(result.spice_factor * 100)})", money(result.spice_cost))
            m3.metric(f"Q factor ({percent(result.q_factor * 100)})", money(result.q_cost))
            m1, m2, m3 = st.columns(3)
            m1.metric("Total cost", money(result.total_cost))
            m2.metric(f"Cost / portion ({result.portions})", money(result.cost_per_portion))
            m3.metric(f"Suggested price @ {percent(result.target_food_cost_percentage)}",
                      money(result.suggested_price))

            st.dataframe(breakdown_rows(result))
            st.caption(f"Waste cost (trim loss): {money(result.total_waste_cost)}")

            cost_pie(
                [line.name for line in result.breakdown],
                [float(line.ep_cost) for line in result.breakdown],
                "Pie chart of EP cost distribution per ingredient",
            )

            st.subheader("Profitability at a real selling price")
            c1, c2 = st.columns(2)
            sell = c1.number_input("Selling price (net)", 0.01, value=float(round(result.suggested_price, 2)) or 1.0,
                                   step=0.10, key="home_sell")
            sold = c2.number_input("Portions sold per period", 0, value=100, step=10, key="home_sold")
            prof = recipe_profitability(result.cost_per_portion, to_decimal(sell), int(sold))
            p1, p2, p3 = st.columns(3)
            p1.metric("Margin / portion", money(prof.contribution_margin))
            p2.metric("Profit margin", percent(prof.profit_margin))
            p3.metric("Period profit", money(prof.total_profit))

            c1, c2 = st.columns(2)
            fixed = c1.number_input("Fixed costs per period", 0.0, value=1000.0, step=50.0, key="home_fixed")
            units = break_even_units(to_decimal(fixed), prof.contribution_margin)
            b1, b2 = st.columns(2)
            b1.metric("Markup factor", number(markup_factor(result.target_food_cost_percentage), 2))
            b2.metric("Break-even portions", "—" if units is None else units)

            if result.cost_per_portion > 0:
                actual = c2.number_input("Actual cost / portion", 0.0, value=float(round(result.cost_per_portion, 2)),
                                         step=0.05, key="home_actual")
                var = cost_variance(to_decimal(actual), result.cost_per_portion)
                msg = f"Variance {money(var.variance)} ({percent(var.variance_percentage)}): {var.analysis}"
                if var.status == "acceptable":
                    st.success(msg)
                else:
                    st.warning(msg)

            st.download_button(
                "Download escandallo (JSON)",
                data=dumps_record(result.as_record()),
                file_name=f"{rsel}_escandallo.json",
                mime="application/json",
                key="home_download",
            )

# -----------------------------------------------------------------------------
# RECIPES
# -----------------------------------------------------------------------------
if page == "Recipes":
    st.header("Recipes")
    tab_new, tab_manage = st.tabs(["Create new", "Manage"])

    with tab_new:
        with st.form("create_recipe_form"):
            new_name = st.text_input("Recipe name", key="recipes_new_name")
            new_cat = st.selectbox("Category", settings.RECIPE_CATEGORIES, index=len(settings.RECIPE_CATEGORIES) - 1,
                                   key="recipes_new_cat")
            new_portions = st.number_input("Portions", 1, value=4, step=1, key="recipes_new_portions")
            c1, c2, c3 = st.columns(3)
            new_spice = c1.number_input("Spice factor", 0.0, 0.1, float(settings.DEFAULT_SPICE_FACTOR), 0.005,
                                        format="%.3f", key="recipes_new_spice")
            new_q = c2.number_input("Q factor", 0.0, 0.1, float(settings.DEFAULT_Q_FACTOR), 0.005,
                                    format="%.3f", key="recipes_new_q")
            new_target = c3.slider("Target Food-Cost %", 1, 99, int(settings.DEFAULT_TARGET_FOOD_COST),
                                   key="recipes_new_target")
            submitted = st.form_submit_button("Create recipe")
            if submitted:
                if not new_name:
                    st.error("Please enter a recipe name")
                elif new_name in repo.list_recipes():
                    st.error("A recipe with this name already exists.")
                else:
                    repo.save_recipe(Recipe(
                        name=new_name,
                        category=new_cat,
                        portions=int(new_portions),
                        spice_factor=to_decimal(new_spice),
                        q_factor=to_decimal(new_q),
                        target_food_cost_percentage=to_decimal(new_target),
                    ))
                    st.success("Recipe created")
                    st.rerun()

    with tab_manage:
        names = repo.list_recipes()
        if not names:
            st.info("No recipes yet. Create one in the 'Create new' tab.")
        else:
            rsel = st.selectbox("Select recipe", names, key="recipes_view_recipe")
            try:
                r = repo.get_recipe(rsel)
            except StoreError as e:
                st.error(str(e))
                if st.button("Delete broken recipe", key="recipes_delete_broken"):
                    repo.delete_recipe(rsel)
                    st.rerun()
                st.stop()

            colA, colB = st.columns([1, 1])
            with colA:
                st.subheader(f"Ingredients ({r.portions} portions) 🧾")
                if r.ingredients:
                    for ing in r.ingredients:
                        st.write(f"- {ing.name}: {number(ing.quantity, 3)} {ing.unit} × {money(ing.unit_price)}"
                                 f" (yield {percent(ing.yield_percentage)})")
                else:
                    st.info("No ingredients yet.")

                report = validate_recipe(r)
                for e in report.errors:
                    st.error(e)
                for w in report.warnings:
                    st.warning(w)

                st.subheader("Scale recipe 📐")
                target = st.number_input("Target portions", 1, value=max(r.portions * 2, 1), step=1,
                                         key="recipes_scale_target")
                try:
                    scaled = scale_recipe(r, int(target))
                except CostingError as e:
                    st.error(str(e))
                else:
                    for ing in scaled.ingredients:
                        st.text(f"{ing.name}: {number(ing.quantity, 3)} {ing.unit}")
                    if st.button("Save scaled copy", key="recipes_scale_save"):
                        name = f"{r.name} ×{int(target)}"
                        repo.save_recipe(replace(scaled, name=name))
                        st.success(f"Saved '{name}'")
                        st.rerun()

            with colB:
                st.subheader("Add ingredient ➕")
                std = st.selectbox("Standard yield (optional)", ["—"] + list(settings.STANDARD_YIELDS.keys()),
                                   key="recipes_std_yield")
                default_yield = float(settings.STANDARD_YIELDS.get(std, 100))
                with st.form("add_ing_form"):
                    ing_name = st.text_input("Ingredient name", value="" if std == "—" else std,
                                             key="recipes_ing_name")
                    qty = st.number_input("Qty", 0.0, value=0.10, step=0.01, format="%.3f", key="recipes_qty")
                    unit = st.selectbox("Unit", ["kg", "g", "L", "ml", "unit"], key="recipes_unit")
                    price = st.number_input("Unit price (per unit above)", 0.0, value=1.0, step=0.10,
                                            key="recipes_price")
                    yld = st.number_input("Yield %", 0.1, 100.0, default_yield, 1.0, key="recipes_yield")
                    c1, c2, c3 = st.columns([1, 1, 1])
                    add_btn = c1.form_submit_button("Add item")
                    rem_btn = c2.form_submit_button("Remove last item")
                    del_btn = c3.form_submit_button("Delete recipe")
                    if add_btn:
                        if not ing_name.strip() or qty <= 0:
                            st.error("Please enter a name and a quantity")
                        else:
                            ing = IngredientUsage(
                                name=ing_name.strip(),
                                quantity=to_decimal(qty),
                                unit=unit,
                                unit_price=to_decimal(price),
                                yield_percentage=to_decimal(yld),
                            )
                            repo.save_recipe(replace(r, ingredients=r.ingredients + (ing,)))
                            st.success("Ingredient added")
                            st.rerun()
                    if rem_btn and r.ingredients:
                        repo.save_recipe(replace(r, ingredients=r.ingredients[:-1]))
                        st.warning("Removed last")
                        st.rerun()
                    if del_btn:
                        try:
                            repo.delete_recipe(rsel)
                        except StoreError as e:
                            st.error(str(e))
                        else:
                            st.warning("Recipe deleted")
                            st.rerun()

# -----------------------------------------------------------------------------
# MEAT YIELD TEST
# -----------------------------------------------------------------------------
if page == "Meat Yield Test":
    st.header("Meat / protein yield test 🥩")
    for k, v in (("yt_product", "Beef tenderloin"), ("yt_apweight", 1000.0), ("yt_apcost", 20.0)):
        if k not in st.session_state:
            st.session_state[k] = v

    try:
        saved = repo.get_yield_tests()
    except StoreError as e:
        st.error(str(e))
        saved = []
    if saved:
        s1, s2 = st.columns([3, 1])
        pick = s1.selectbox("Saved test", [t.product for t in saved], key="yt_saved")
        if s2.button("Load", key="yt_load"):
            chosen = next(t for t in saved if t.product == pick)
            st.session_state.yt_product = chosen.product
            st.session_state.yt_apweight = float(chosen.ap_weight)
            st.session_state.yt_apcost = float(chosen.ap_cost)
            st.session_state.yield_parts = [
                {"name": p.name, "weight": str(p.weight), "usable": p.usable} for p in chosen.parts
            ]
            st.rerun()

    c1, c2, c3 = st.columns(3)
    product = c1.text_input("Product", key="yt_product")
    ap_weight = c2.number_input("Purchased weight (g)", 0.0, step=50.0, key="yt_apweight")
    ap_cost = c3.number_input("Purchase cost", 0.0, step=0.5, key="yt_apcost")

    with st.form("yt_part_form"):
        p1, p2, p3 = st.columns([2, 1, 1])
        part_name = p1.text_input("Part name", key="yt_part_name")
        part_weight = p2.number_input("Weight (g)", 0.0, value=100.0, step=10.0, key="yt_part_weight")
        part_usable = p3.checkbox("Usable", value=True, key="yt_part_usable")
        ac1, ac2 = st.columns(2)
        add_btn = ac1.form_submit_button("Add part")
        rem_btn = ac2.form_submit_button("Remove last part")
        if add_btn:
            if not part_name.strip() or part_weight <= 0:
                st.error("Please enter a part name and weight")
            else:
                st.session_state.yield_parts.append(
                    {"name": part_name.strip(), "weight": str(part_weight), "usable": part_usable}
                )
                st.rerun()
        if rem_btn and st.session_state.yield_parts:
            st.session_state.yield_parts.pop()
            st.rerun()

    if not st.session_state.yield_parts:
        st.info("Add the parts obtained from the cut (usable cuts and trim).")
    else:
        test = MeatYieldTest(
            product=product,
            ap_weight=to_decimal(ap_weight),
            ap_cost=to_decimal(ap_cost),
            parts=tuple(MeatPart(p["name"], to_decimal(p["weight"]), p["usable"])
                        for p in st.session_state.yield_parts),
        )
        try:
            res = process_yield_test(test)
        except CostingError as e:
            st.error(str(e))
        else:
            st.dataframe([
                {
                    "Part": p.name,
                    "Weight (g)": number(p.weight, 0),
                    "% of AP": percent(p.percentage),
                    "Value": money(p.value),
                    "Usable": "✅" if p.usable else "🗑️",
                }
                for p in res.parts
            ])
            m1, m2, m3 = st.columns(3)
            m1.metric("Yield", percent(res.yield_percentage))
            m2.metric("Waste", percent(res.waste_percentage))
            m3.metric("Cost factor", number(res.cost_increase_factor, 4))
            m1, m2 = st.columns(2)
            m1.metric("AP cost / kg", money(res.price_per_unit * 1000))
            m2.metric("EP cost / kg", money(res.ep_cost_per_unit * 1000))
            if res.unaccounted_weight != 0:
                st.warning(f"Parts do not add up to the purchased weight "
                           f"({number(res.unaccounted_weight, 0)} g unaccounted).")
            if st.button("Save yield test", key="yt_save"):
                repo.save_yield_test(test)
                st.success("Yield test saved")
            st.download_button(
                "Download yield test (JSON)",
                data=dumps_record(res.as_record()),
                file_name="yield_test.json",
                mime="application/json",
                key="yt_download",
            )

    with st.expander("Cooking & moisture loss"):
        l1, l2, l3 = st.columns(3)
        raw = l1.number_input("Raw weight (g)", 0.0, value=1000.0, step=50.0, key="yt_raw")
        cooked = l2.number_input("Cooked weight (g)", 0.0, value=750.0, step=50.0, key="yt_cooked")
        held = l3.number_input("Weight after holding (g)", 0.0, value=720.0, step=10.0, key="yt_held")
        try:
            lost, lost_pct = cooking_loss(to_decimal(raw), to_decimal(cooked))
            moisture = moisture_loss(to_decimal(cooked), to_decimal(held))
        except CostingError as e:
            st.error(str(e))
        else:
            r1, r2 = st.columns(2)
            r1.metric("Cooking loss", f"{number(lost, 0)} g", percent(lost_pct), delta_color="inverse")
            r2.metric("Moisture loss while holding", percent(moisture))

# -----------------------------------------------------------------------------
# MENU ENGINEERING
# -----------------------------------------------------------------------------
if page == "Menu Engineering":
    st.header("Menu engineering")
    business = st.selectbox("Business type", list(BusinessType), format_func=lambda b: b.value.replace("_", " "),
                            index=1, key="me_business")

    try:
        items = repo.get_menu_items()
    except StoreError as e:
        st.error(str(e))
        st.stop()

    try:
        classified = classify_menu(items)
    except CostingError as e:
        st.info(str(e))
    else:
        st.dataframe([
            {
                "Item": c.name,
                "Price": money(c.selling_price),
                "Cost": money(c.cost),
                "Sold": c.units_sold,
                "Margin": money(c.contribution_margin),
                "Food cost": percent(c.food_cost_percentage),
                "Margin ratio": number(c.contribution_margin_ratio),
                "Popularity ratio": number(c.popularity_ratio),
                "Class": QUADRANT_LABELS[c.classification],
            }
            for c in classified
        ])

        summary = summarize_menu(classified)
        cols = st.columns(4)
        for col, quadrant in zip(cols, Classification):
            col.metric(QUADRANT_LABELS[quadrant], summary.counts[quadrant])
        m1, m2, m3 = st.columns(3)
        m1.metric("Revenue", money(summary.total_revenue))
        m2.metric("Contribution", money(summary.total_contribution))
        m3.metric("Menu food cost", percent(summary.food_cost_percentage))
        if summary.food_cost_percentage is not None:
            assessment = assess_food_cost(summary.food_cost_percentage, business)
            msg = (f"Target range {percent(assessment.target_min, 0)}–{percent(assessment.target_max, 0)}: "
                   + "; ".join(assessment.recommendations))
            if assessment.status == "on_target":
                st.success(msg)
            else:
                st.warning(msg)

    st.divider()
    with st.form("me_add_form"):
        c1, c2, c3, c4 = st.columns(4)
        name = c1.text_input("Menu item", key="me_name")
        price = c2.number_input("Selling price", 0.01, value=10.0, step=0.5, key="me_price")
        cost = c3.number_input("Cost", 0.0, value=3.0, step=0.1, key="me_cost")
        sold = c4.number_input("Units sold", 0, value=50, step=5, key="me_sold")
        ac1, ac2 = st.columns(2)
        add_btn = ac1.form_submit_button("Add item")
        rem_btn = ac2.form_submit_button("Remove last item")
        if add_btn:
            if not name.strip():
                st.error("Please enter an item name")
            else:
                item = MenuItem(name.strip(), to_decimal(price), to_decimal(cost), int(sold))
                repo.save_menu_items(items + [item])
                st.rerun()
        if rem_btn and items:
            repo.save_menu_items(items[:-1])
            st.rerun()

# -----------------------------------------------------------------------------
# SETTINGS
# -----------------------------------------------------------------------------
if page == "Settings":
    st.header("Settings")

    st.subheader("Locale & currency")
    loc = st.selectbox("Interface locale", settings.LOCALES,
                       index=settings.LOCALES.index(st.session_state["locale"])
                       if st.session_state["locale"] in settings.LOCALES else 0,
                       key="settings_locale")
    st.session_state["locale"] = loc
    cur = st.selectbox("Currency", settings.CURRENCIES,
                       index=settings.CURRENCIES.index(st.session_state["currency"])
                       if st.session_state["currency"] in settings.CURRENCIES else 0,
                       key="settings_currency")
    st.session_state["currency"] = cur

    st.subheader("Standard yields (reference)")
    st.dataframe([{"Product": k, "Yield %": v} for k, v in settings.STANDARD_YIELDS.items()])

    st.markdown("---")
    if st.button("Reset session", key="settings_reset"):
        reset_session_state()
        st.rerun()
