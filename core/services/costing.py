from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from core.errors import ValidationError
from core.logger import get_logger
from core.model import ALL, BakeryState, Confirm
from core.utils import parse_number, round_half_up

log = get_logger("costing")

DEFAULT_UNITS = 1.0


@dataclass
class CostRow:
    bread: str
    total_cost: float
    units: float
    unit_cost: int


def _units_or_default(units) -> float:
    # Blank, non-numeric and non-positive divisors fall back to a single unit.
    u = parse_number(units)
    if u is None or u <= 0:
        return DEFAULT_UNITS
    return u


def total_recipe_cost(state: BakeryState, bread: str) -> float:
    """
    Sum of (qty / 1000) * price over the bread's recipe lines.
    Lines pointing at a deleted material contribute nothing.
    """
    total = 0.0
    for r in state.recipes:
        if r.bread != bread:
            continue
        price = state.material_price(r.material)
        if price is not None:
            total += (float(r.qty) / 1000.0) * float(price)
    return total


def unit_cost(state: BakeryState, bread: str, units_produced=DEFAULT_UNITS) -> int:
    return round_half_up(total_recipe_cost(state, bread) / _units_or_default(units_produced))


def units_for(state: BakeryState, bread: str) -> float:
    return _units_or_default(state.bread_units.get(bread))


def set_units_produced(state: BakeryState, bread: str, units) -> int:
    """
    Store the production divisor for one bread and refresh only that bread's
    cached unit cost.
    """
    if bread not in state.breads:
        raise ValidationError("Bread not found.")
    u = _units_or_default(units)
    cost_one = unit_cost(state, bread, u)

    state.bread_units[bread] = u
    state.bread_costs[bread] = cost_one
    state.persist("breadUnits", "breadCosts")
    return cost_one


def breads_in_view(state: BakeryState, selected: Optional[str]) -> list[str]:
    if not selected or selected == ALL:
        return sorted(state.breads, key=str.lower)
    return [selected]


def compute_cost_view(state: BakeryState, selected: Optional[str] = ALL) -> list[CostRow]:
    """
    Recompute unit cost for every bread in the view with its stored divisor,
    then rewrite the whole cost cache.
    """
    rows: list[CostRow] = []
    for b in breads_in_view(state, selected):
        total = total_recipe_cost(state, b)
        units = units_for(state, b)
        cost_one = round_half_up(total / units)
        state.bread_costs[b] = cost_one
        rows.append(CostRow(bread=b, total_cost=total, units=units, unit_cost=cost_one))

    state.persist("breadCosts")
    return rows


def remove_from_cost_view(state: BakeryState, bread: str, confirm: Confirm) -> bool:
    """Drops the cached cost and removes the bread itself from the bread list."""
    if not confirm(f'Delete "{bread}" from cost list?'):
        return False

    state.bread_costs.pop(bread, None)
    state.bread_units.pop(bread, None)
    state.breads[:] = [b for b in state.breads if b != bread]
    state.persist("breadCosts", "breadUnits", "breads")
    log.info("Bread removed from cost list: %s", bread)
    return True
