"""
Contract Map Dashboard

Map + table of equipment rental contracts from a daily CSV snapshot.
Filter by delay days, toner/viko check flags or manual selection.

Read-only view - the snapshots are produced by an external batch job.
"""

import os
import logging
from datetime import date, datetime
from typing import Optional

import streamlit as st

from loaders.contracts import (
    contract_source,
    fetch_contracts,
    fetch_date_marker,
    fetch_inventory,
    load_contracts,
    load_date_marker,
    load_inventory,
    resolve_source,
)
from loaders.github import fetch_commit_date, fetch_last_updated
from src.core import state as ds
from src.core.config import get_config_value, load_client_config, load_config
from src.core.errors import FilterValidationError
from src.core.filters import Criterion
from src.core.render import render_state
from views.contracts import render_map_tab, render_summary, render_table_tab
from views.inventory import render_inventory


# =============================================================================
# Config
# =============================================================================
CONFIG_PATH = os.getenv("RENTALMAP_CONFIG")
CLIENT_CONFIG_PATH = os.getenv("RENTALMAP_CLIENT_CONFIG")
DATA_OWNER = os.getenv("DATA_OWNER", "")
DATA_REPO = os.getenv("DATA_REPO", "")

CFG = load_config(CONFIG_PATH)
CLIENT = load_client_config(CLIENT_CONFIG_PATH)

logging.basicConfig(
    level=getattr(logging, str(get_config_value(CFG, "runtime", "log_level", default="INFO")).upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

SCHEMA_NAME = get_config_value(CFG, "data", "schema", default="v3")
DATA_BASE = get_config_value(CFG, "data", "base", default=".")
TIMEOUT = get_config_value(CFG, "runtime", "fetch_timeout", default=20)
CACHE_TTL = get_config_value(CFG, "runtime", "cache_ttl", default=300)

# Fetchers raise on failure, so only successful reads are cached
cached_contracts = st.cache_data(ttl=CACHE_TTL, show_spinner=False)(fetch_contracts)
cached_inventory = st.cache_data(ttl=CACHE_TTL, show_spinner=False)(fetch_inventory)
cached_date_marker = st.cache_data(ttl=CACHE_TTL, show_spinner=False)(fetch_date_marker)
cached_commit_date = st.cache_data(ttl=CACHE_TTL, show_spinner=False)(fetch_commit_date)


# =============================================================================
# Session State
# =============================================================================
def _default_date() -> date:
    raw = get_config_value(CFG, "data", "default_date", default="")
    if raw:
        try:
            return datetime.strptime(str(raw), "%Y-%m-%d").date()
        except ValueError:
            logger.warning("Invalid data.default_date %r, using today", raw)
    return date.today()


def get_state() -> ds.DashboardState:
    if "dashboard" not in st.session_state:
        st.session_state["dashboard"] = ds.new_state(
            SCHEMA_NAME,
            default_delay_days=get_config_value(CFG, "filters", "default_delay_days"),
        )
    return st.session_state["dashboard"]


def commit(state: ds.DashboardState, rerun: bool = False):
    changed = state is not st.session_state.get("dashboard")
    st.session_state["dashboard"] = state
    if changed and rerun:
        st.rerun()


def refresh(source: str):
    """Fetch `source` and swap it in, unless a newer refresh was issued meanwhile."""
    state, token = ds.begin_refresh(get_state())
    st.session_state["dashboard"] = state
    with st.spinner("Loading contracts..."):
        records, error = load_contracts(source, SCHEMA_NAME, TIMEOUT, fetch=cached_contracts)
    state = ds.complete_refresh(st.session_state["dashboard"], token, records, source=source, error=error)
    st.session_state["dashboard"] = state
    st.session_state["loaded_source"] = source
    st.session_state.pop("active_marker", None)


def set_filter(state: ds.DashboardState, criterion: Criterion) -> ds.DashboardState:
    st.session_state.pop("active_marker", None)
    return ds.apply_filter(state, criterion)


# =============================================================================
# Main App
# =============================================================================
st.set_page_config(page_title="Contract Map", page_icon="🗺️", layout="wide")

st.title("🗺️ Rental Contract Map")

state = get_state()
schema = state.schema

# Sidebar
with st.sidebar:
    st.header("Data")

    snapshot_date = st.date_input("Snapshot Date", value=_default_date())
    source = contract_source(DATA_BASE, get_config_value(CFG, "data", "contract_template", default="data_{date}.csv"), snapshot_date)

    if st.button("🔄 Refresh", use_container_width=True):
        cached_contracts.clear()
        cached_inventory.clear()
        cached_date_marker.clear()
        refresh(source)
    elif st.session_state.get("loaded_source") != source:
        refresh(source)

    state = get_state()

    marker_path = get_config_value(CFG, "data", "date_marker_path")
    if marker_path:
        updated = load_date_marker(resolve_source(DATA_BASE, marker_path), TIMEOUT, fetch=cached_date_marker)
        if updated:
            st.caption(f"Data updated: {updated}")

    last_commit: Optional[str] = fetch_last_updated(
        DATA_OWNER,
        DATA_REPO,
        get_config_value(CFG, "data", "github_path", default=""),
        CLIENT.get("access_token", ""),
        TIMEOUT,
        fetch=cached_commit_date,
    )
    if last_commit:
        st.caption(f"Last commit: {last_commit[:16].replace('T', ' ')}")

    st.divider()
    st.header("Filters")

    threshold = st.text_input("Delay days ≥", value=str(get_config_value(CFG, "filters", "default_delay_days", default=90)))
    if st.button("Apply Delay Filter", use_container_width=True):
        try:
            state = ds.apply_threshold(state, threshold)
            st.session_state.pop("active_marker", None)
        except FilterValidationError as e:
            st.warning(e.message)

    if state.default_delay_days is not None:
        if st.button(f"Delay ≥ {state.default_delay_days}", use_container_width=True):
            state = set_filter(state, ds.default_criterion(state))

    if "toner_check" in schema.flags and st.button("Toner Check", use_container_width=True):
        state = set_filter(state, Criterion.flag_set("toner_check"))

    if "viko_check" in schema.flags and st.button("Viko Check", use_container_width=True):
        state = set_filter(state, Criterion.flag_set("viko_check"))

    col1, col2 = st.columns(2)
    if col1.button("Show Selected", use_container_width=True):
        state = set_filter(state, Criterion.selected_only())
    if col2.button("Show All", use_container_width=True):
        state = set_filter(state, Criterion.all())

    if st.button("Clear Selection", use_container_width=True):
        state = ds.clear_selection(state)

commit(state)

if state.last_error:
    st.error(f"Error loading data: {state.last_error}")
    st.info("""
    **Troubleshooting:**
    - Check that the snapshot for the selected date exists
    - Check `data.base` / `data.contract_template` in the config
    """)

plan = render_state(state)
render_summary(state, plan)

tabs = st.tabs(["🗺️ Map", "📋 Contracts", "📦 Inventory"])

with tabs[0]:
    state = render_map_tab(state, plan, CFG, CLIENT.get("map_client_id", ""))

with tabs[1]:
    state = render_table_tab(state, plan, CFG)

with tabs[2]:
    inventory_path = get_config_value(CFG, "data", "inventory_path")
    if inventory_path:
        render_inventory(load_inventory(resolve_source(DATA_BASE, inventory_path), TIMEOUT, fetch=cached_inventory))
    else:
        st.info("No inventory source configured.")

commit(state, rerun=True)
