from __future__ import annotations

import streamlit as st

from core.config import get_settings
from core.db import get_conn, ensure_schema
from core.model import BakeryState
from core.services.sales import total

st.set_page_config(page_title="Bakery Costing", page_icon="🍞", layout="wide")

settings = get_settings()
conn = get_conn(settings.db_path)
ensure_schema(conn)
state = BakeryState.load(conn)

st.title(f"🍞 {settings.shop_name}: Costing & Sales")
st.caption("Breads, raw materials, recipes, per-unit production cost and a running sales ledger.")

with st.sidebar:
    st.subheader("Environment")
    st.write(f"**Data directory:** `{settings.data_dir}`")
    st.write(f"**Database:** `{settings.db_path.name}`")
    st.write(f"**Remote sync:** {'configured' if settings.remote_configured else 'not configured'}")

c1, c2, c3, c4 = st.columns(4)
c1.metric("Breads", len(state.breads))
c2.metric("Materials", len(state.materials))
c3.metric("Recipe lines", len(state.recipes))
c4.metric(f"Sales total ({settings.currency})", f"{total(state):,.0f}")

st.info(
    "Use the left sidebar navigation. Add **Breads** and **Materials**, build **Recipes**, "
    "open **Costs** to refresh unit costs, then record **Sales** and print an invoice. "
    "**🧪 Data Management** loads demo data and handles import/export and remote sync.",
    icon="ℹ️",
)
