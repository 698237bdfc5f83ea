from __future__ import annotations

from typing import Optional

from core.errors import ValidationError
from core.logger import get_logger
from core.model import BakeryState, Confirm, Material
from core.utils import parse_number

log = get_logger("catalog")


def _norm(name: str) -> str:
    return str(name).strip()


def _key(name: str) -> str:
    return str(name).lower()


def _name_taken(names: list[str], name: str, *, skip_index: Optional[int] = None) -> bool:
    return any(_key(n) == _key(name) for i, n in enumerate(names) if i != skip_index)


def _positive_price(price) -> Optional[float]:
    p = parse_number(price)
    if p is None or p <= 0:
        return None
    return p


def _check_index(items: list, index: int) -> int:
    i = int(index)
    if i < 0 or i >= len(items):
        raise ValidationError("Entry not found.")
    return i


# -------------------------
# Breads
# -------------------------

def list_breads(state: BakeryState) -> list[str]:
    state.breads.sort(key=_key)
    return list(state.breads)


def add_bread(state: BakeryState, name: str) -> str:
    name = _norm(name or "")
    if not name:
        raise ValidationError("Enter a name")
    if _name_taken(state.breads, name):
        raise ValidationError("Already exists")

    state.breads.append(name)
    state.persist("breads")
    log.info("Bread added: %s", name)
    return name


def edit_bread(state: BakeryState, index: int, new_name: Optional[str]) -> bool:
    """Rename a bread. Empty input aborts without error (returns False)."""
    i = _check_index(state.breads, index)
    new_name = _norm(new_name or "")
    if not new_name:
        return False
    if _name_taken(state.breads, new_name, skip_index=i):
        raise ValidationError("Already exists!")

    state.breads[i] = new_name
    state.persist("breads")
    return True


def remove_bread(state: BakeryState, index: int, confirm: Confirm) -> bool:
    i = _check_index(state.breads, index)
    if not confirm(f'Delete "{state.breads[i]}"?'):
        return False
    removed = state.breads.pop(i)
    state.persist("breads")
    log.info("Bread removed: %s", removed)
    return True


# -------------------------
# Materials
# -------------------------

def list_materials(state: BakeryState) -> list[Material]:
    state.materials.sort(key=lambda m: _key(m.name))
    return list(state.materials)


def search_materials(state: BakeryState, text: str) -> list[tuple[int, Material]]:
    needle = _key(text or "")
    return [(i, m) for i, m in enumerate(state.materials) if needle in _key(m.name)]


def add_material(state: BakeryState, name: str, price) -> Material:
    name = _norm(name or "")
    p = _positive_price(price)
    if not name or p is None:
        raise ValidationError("Enter name & price")
    if _name_taken([m.name for m in state.materials], name):
        raise ValidationError("Already exists")

    material = Material(name=name, price=p)
    state.materials.append(material)
    state.persist("materials")
    log.info("Material added: %s @ %s", name, p)
    return material


def edit_material(state: BakeryState, index: int, new_price) -> bool:
    """
    Replace a material's price; the name is fixed so recipe lines keep resolving.
    Blank price input aborts (returns False); a non-positive price is rejected.
    """
    i = _check_index(state.materials, index)
    if new_price is None or str(new_price).strip() == "":
        return False
    p = _positive_price(new_price)
    if p is None:
        raise ValidationError("Invalid")

    state.materials[i].price = p
    state.persist("materials")
    return True


def remove_material(state: BakeryState, index: int, confirm: Confirm) -> bool:
    i = _check_index(state.materials, index)
    if not confirm(f"Delete {state.materials[i].name}?"):
        return False
    removed = state.materials.pop(i)
    state.persist("materials")
    log.info("Material removed: %s", removed.name)
    return True
