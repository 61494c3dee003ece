"""
Inventory View

Warehouse stock list, shown as delivered.
"""

import streamlit as st
import pandas as pd


def render_inventory(df: pd.DataFrame):
    """Render the warehouse stock table."""
    st.subheader("Warehouse Inventory")

    if df is None or df.empty:
        st.warning("No inventory data available.")
        return

    st.caption(f"{len(df):,} items")
    st.dataframe(df, use_container_width=True, hide_index=True)
