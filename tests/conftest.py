import pytest

from core.db import _connect, ensure_schema
from core.model import BakeryState, Material, RecipeLine


@pytest.fixture
def conn():
    c = _connect(":memory:")
    ensure_schema(c)
    yield c
    c.close()


@pytest.fixture
def state(conn):
    return BakeryState.load(conn)


@pytest.fixture
def baguette_state(state):
    """Flour at 20000 per 1000 units, baguette uses 500 of it."""
    state.breads.append("baguette")
    state.materials.append(Material(name="flour", price=20000))
    state.recipes.append(RecipeLine(bread="baguette", material="flour", qty=500))
    state.persist("breads", "materials", "recipes")
    return state
