from __future__ import annotations

import streamlit as st

st.set_page_config(page_title="Bakery Costing", page_icon="🍞", layout="wide")

pages = [
    st.Page("home.py", title="Home", icon="🏠"),
    st.Page("pages/1_🍞_Breads.py", title="Breads", icon="🍞"),
    st.Page("pages/2_🧂_Materials.py", title="Materials", icon="🧂"),
    st.Page("pages/3_📋_Recipes.py", title="Recipes", icon="📋"),
    st.Page("pages/4_💰_Costs.py", title="Costs", icon="💰"),
    st.Page("pages/5_🛒_Sales.py", title="Sales", icon="🛒"),
    st.Page("pages/6_🧪_Data_Management.py", title="Data Management", icon="🧪"),
]

st.navigation(pages).run()
