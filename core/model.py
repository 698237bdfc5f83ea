from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Any, Callable

from core.db import load, save
from core.logger import get_logger
from core.utils import parse_int, parse_number

ALL = "All"

# Presentation layer answers "are you sure?" prompts through this.
Confirm = Callable[[str], bool]

log = get_logger("model")


def _clean_number(v: float) -> float | int:
    # Whole numbers persist as ints: "20000", not "20000.0".
    f = float(v)
    return int(f) if f.is_integer() else f


@dataclass
class Material:
    name: str
    price: float  # per 1000 mass units

    def to_dict(self) -> dict:
        return {"name": self.name, "price": _clean_number(self.price)}

    @classmethod
    def from_dict(cls, d: dict) -> "Material":
        return cls(name=str(d["name"]), price=parse_number(d.get("price")) or 0.0)


@dataclass
class RecipeLine:
    bread: str
    material: str
    qty: float

    def to_dict(self) -> dict:
        return {"bread": self.bread, "material": self.material, "qty": _clean_number(self.qty)}

    @classmethod
    def from_dict(cls, d: dict) -> "RecipeLine":
        return cls(
            bread=str(d.get("bread", "")),
            material=str(d.get("material", "")),
            qty=parse_number(d.get("qty")) or 0.0,
        )


@dataclass
class SaleLine:
    bread: str
    benefit: float = 100  # markup percent
    num: int = 1

    def to_dict(self) -> dict:
        return {"bread": self.bread, "benefit": _clean_number(self.benefit), "num": self.num}

    @classmethod
    def from_dict(cls, d: dict) -> "SaleLine":
        return cls(
            bread=str(d.get("bread", "")),
            benefit=parse_number(d.get("benefit")) or 0,
            num=parse_int(d.get("num")) or 0,
        )


def breads_from_json(raw: Any) -> list[str]:
    return [str(b) for b in raw if b] if isinstance(raw, list) else []


def materials_from_json(raw: Any) -> list[Material]:
    if not isinstance(raw, list):
        return []
    # Entries without a name or a positive finite price are dropped.
    return [
        Material.from_dict(m)
        for m in raw
        if isinstance(m, dict) and m.get("name") and (parse_number(m.get("price")) or 0) > 0
    ]


def recipes_from_json(raw: Any) -> list[RecipeLine]:
    if not isinstance(raw, list):
        return []
    return [RecipeLine.from_dict(r) for r in raw if isinstance(r, dict) and parse_number(r.get("qty")) is not None]


def sales_from_json(raw: Any) -> list[SaleLine]:
    if not isinstance(raw, list):
        return []
    return [SaleLine.from_dict(s) for s in raw if isinstance(s, dict)]


def _number_map(raw: Any) -> dict[str, float]:
    if not isinstance(raw, dict):
        return {}
    out: dict[str, float] = {}
    for k, v in raw.items():
        n = parse_number(v)
        if n is not None:
            out[str(k)] = n
    return out


@dataclass
class BakeryState:
    """
    The whole domain model: the four collections, the derived per-unit cost
    cache and the per-bread production divisor.

    Owns the store connection; every manager mutates a BakeryState and calls
    `persist()` for the documents it touched.
    """

    conn: sqlite3.Connection
    breads: list[str] = field(default_factory=list)
    materials: list[Material] = field(default_factory=list)
    recipes: list[RecipeLine] = field(default_factory=list)
    sales: list[SaleLine] = field(default_factory=list)
    bread_costs: dict[str, int] = field(default_factory=dict)
    bread_units: dict[str, float] = field(default_factory=dict)

    @classmethod
    def load(cls, conn: sqlite3.Connection) -> "BakeryState":
        def doc(key: str, fallback: Any) -> Any:
            res = load(conn, key)
            if not res.ok:
                log.warning("%s; falling back to empty", res.error)
            return res.or_default(fallback)

        return cls(
            conn=conn,
            breads=breads_from_json(doc("breads", [])),
            materials=materials_from_json(doc("materials", [])),
            recipes=recipes_from_json(doc("recipes", [])),
            sales=sales_from_json(doc("sales", [])),
            bread_costs={k: int(v) for k, v in _number_map(doc("breadCosts", {})).items()},
            bread_units=_number_map(doc("breadUnits", {})),
        )

    def document(self, key: str) -> Any:
        if key == "breads":
            return list(self.breads)
        if key == "materials":
            return [m.to_dict() for m in self.materials]
        if key == "recipes":
            return [r.to_dict() for r in self.recipes]
        if key == "sales":
            return [s.to_dict() for s in self.sales]
        if key == "breadCosts":
            return dict(self.bread_costs)
        if key == "breadUnits":
            return {k: _clean_number(v) for k, v in self.bread_units.items()}
        raise KeyError(key)

    def persist(self, *keys: str) -> None:
        for key in keys:
            save(self.conn, key, self.document(key))

    def material_price(self, name: str) -> float | None:
        for m in self.materials:
            if m.name == name:
                return m.price
        return None
