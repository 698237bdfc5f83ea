from __future__ import annotations

from typing import Optional

from core.errors import ValidationError
from core.logger import get_logger
from core.model import ALL, BakeryState, Confirm, RecipeLine
from core.utils import parse_number

log = get_logger("recipes")


def _check_index(state: BakeryState, index: int) -> int:
    i = int(index)
    if i < 0 or i >= len(state.recipes):
        raise ValidationError("Recipe line not found.")
    return i


def list_for_bread(state: BakeryState, bread: Optional[str]) -> list[tuple[int, RecipeLine]]:
    """
    Recipe lines for one bread (or every line for "All"), paired with their
    position in the full recipe collection so edits target the right line.
    """
    return [
        (i, r)
        for i, r in enumerate(state.recipes)
        if bread == ALL or r.bread == bread
    ]


def add_recipe(state: BakeryState, bread: Optional[str], material: Optional[str], qty) -> str:
    """Returns the bread so the caller can keep it selected in the filter."""
    bread = (bread or "").strip()
    material = (material or "").strip()
    if not bread or bread == ALL:
        raise ValidationError("Select a bread")

    q = parse_number(qty)
    if not material or q is None or q <= 0:
        raise ValidationError("Fill all fields")

    if any(r.bread == bread and r.material == material for r in state.recipes):
        raise ValidationError("Material already exists for this bread")

    state.recipes.append(RecipeLine(bread=bread, material=material, qty=q))
    state.persist("recipes")
    log.info("Recipe line added: %s / %s = %s", bread, material, q)
    return bread


def edit_recipe(state: BakeryState, index: int, new_qty) -> bool:
    # No positivity check on edit: zero and negative quantities pass through.
    i = _check_index(state, index)
    if new_qty is None or str(new_qty).strip() == "":
        return False
    q = parse_number(new_qty)
    if q is None:
        raise ValidationError("Invalid quantity")

    state.recipes[i].qty = q
    state.persist("recipes")
    return True


def remove_recipe(state: BakeryState, index: int, confirm: Confirm) -> bool:
    i = _check_index(state, index)
    if not confirm("Are you sure?"):
        return False
    removed = state.recipes.pop(i)
    state.persist("recipes")
    log.info("Recipe line removed: %s / %s", removed.bread, removed.material)
    return True
