from __future__ import annotations

import random

from core.db import delete_all, ensure_schema
from core.model import BakeryState
from core.services.catalog import add_bread, add_material
from core.services.costing import compute_cost_view, set_units_produced
from core.services.recipes import add_recipe
from core.services.sales import add_line, set_count, set_markup


DEMO_BREADS = ["Baguette", "Barbari", "Sangak", "Taftoon"]
DEMO_MATERIALS = [
    ("Flour", 20000),
    ("Salt", 8000),
    ("Sugar", 35000),
    ("Yeast", 150000),
    ("Sesame", 240000),
    ("Oil", 90000),
]
DEMO_RECIPES = {
    "Baguette": [("Flour", 500), ("Yeast", 10), ("Salt", 8)],
    "Barbari": [("Flour", 600), ("Yeast", 8), ("Salt", 10), ("Sesame", 15), ("Oil", 20)],
    "Sangak": [("Flour", 700), ("Salt", 12), ("Sesame", 5)],
    "Taftoon": [("Flour", 400), ("Yeast", 6), ("Salt", 6), ("Sugar", 10)],
}
DEMO_UNITS = {"Baguette": 2, "Barbari": 3, "Sangak": 4, "Taftoon": 5}


def wipe_all(state: BakeryState) -> None:
    delete_all(state.conn)
    state.breads.clear()
    state.materials.clear()
    state.recipes.clear()
    state.sales.clear()
    state.bread_costs.clear()
    state.bread_units.clear()


def load_demo_data(state: BakeryState, *, seed: int = 7) -> None:
    """Replace everything with a small demo bakery, costed, with a few sales."""
    rnd = random.Random(seed)
    ensure_schema(state.conn)
    wipe_all(state)

    for name in DEMO_BREADS:
        add_bread(state, name)
    for name, price in DEMO_MATERIALS:
        add_material(state, name, price)
    for bread, lines in DEMO_RECIPES.items():
        for material, qty in lines:
            add_recipe(state, bread, material, qty)

    compute_cost_view(state)
    for bread, units in DEMO_UNITS.items():
        set_units_produced(state, bread, units)

    for bread in rnd.sample(DEMO_BREADS, 3):
        add_line(state, bread)
        i = len(state.sales) - 1
        set_markup(state, i, rnd.choice([50, 80, 100]))
        set_count(state, i, rnd.randint(2, 12))
