"""
Contracts View

Map and table of the visible contracts. Both surfaces are rebuilt from the
same render plan on every rerun; interactions return an updated state.
"""

import streamlit as st
from typing import Any, Dict, Optional, Sequence

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from charts.contract_map import plot_contract_map
from models.contracts import (
    SELECTED_COL,
    LOOKUP_COL,
    NAVIGATE_COL,
    MAP_COL,
    build_table_frame,
    export_csv,
    summary_stats,
)
from src.core import links
from src.core import state as ds
from src.core.grouping import LocationGroup
from src.core.render import MarkerSpec, RenderPlan, info_panel_lines


def render_summary(state: ds.DashboardState, plan: RenderPlan):
    """Metrics row above the tabs."""
    stats = summary_stats(state, plan)
    c1, c2, c3, c4, c5 = st.columns(5)
    c1.metric("Contracts", f"{stats['total']:,}")
    c2.metric("Visible", f"{stats['visible']:,}")
    c3.metric("Locations", f"{stats['markers']:,}")
    c4.metric("Selected", f"{stats['selected']:,}")
    c5.metric("No Coordinates", f"{stats['unmapped']:,}")
    st.caption(f"Filter: {state.criterion.describe()}")


def render_info_panel(group: LocationGroup, link_cfg: Dict[str, Any]):
    """Info panel for a clicked marker: each member's contract number and links."""
    with st.container(border=True):
        lines = info_panel_lines(group)
        for record, line in zip(group.records, lines):
            parts = [f"**{line}** · {record.company_name}"]
            lookup = links.contract_lookup_url(record.contract_no, link_cfg.get("contract_lookup"))
            if lookup:
                parts.append(f"[Lookup]({lookup})")
            st.markdown(" ".join(parts))
        st.caption(lines[-1])

        first = group.records[0]
        nav = links.navigation_url(
            first.latitude,
            first.longitude,
            name=first.company_name,
            app_name=link_cfg.get("app_name", ""),
            template=link_cfg.get("navigation"),
        )
        search = links.map_search_url(first.address, link_cfg.get("map_search"))
        col1, col2 = st.columns(2)
        if nav:
            col1.link_button("Navigate", nav, use_container_width=True)
        if search:
            col2.link_button("Open in Map", search, use_container_width=True)


def _clicked_marker_index(event) -> Optional[int]:
    try:
        points = event.selection.points
    except AttributeError:
        return None
    if not points:
        return None
    return points[0].get("point_index")


def resolve_marker_click(idx: Optional[int], markers: Sequence[MarkerSpec], active_key: Optional[str]):
    """
    Map selection -> (active marker key, newly clicked marker or None).

    An empty selection closes the info panel. The chart keeps its selection
    across reruns, so the already-active marker is not a new click.
    """
    if idx is None or not 0 <= idx < len(markers):
        return None, None
    marker = markers[idx]
    if marker.key == active_key:
        return active_key, None
    return marker.key, marker


def render_map_tab(state: ds.DashboardState, plan: RenderPlan, cfg: Dict[str, Any], access_token: str = "") -> ds.DashboardState:
    """
    Render the map. A marker click selects every contract at that location
    and opens its info panel.
    """
    map_cfg = cfg.get("map", {})
    active_key = st.session_state.get("active_marker")

    if not plan.markers:
        st.info("No mappable contracts in the current view.")

    fig = plot_contract_map(
        plan.markers,
        center_lat=map_cfg.get("center_lat", 37.5665),
        center_lon=map_cfg.get("center_lon", 126.9780),
        zoom=map_cfg.get("zoom", 11),
        style=map_cfg.get("style", "carto-positron"),
        height=map_cfg.get("height", 600),
        selection=state.selection,
        active_key=active_key,
        access_token=access_token or None,
    )
    event = st.plotly_chart(
        fig,
        use_container_width=True,
        on_select="rerun",
        selection_mode="points",
        key=f"contract_map_{state.applied_token}_{hash((state.criterion, tuple(m.key for m in plan.markers)))}",
    )

    active_key, clicked = resolve_marker_click(_clicked_marker_index(event), plan.markers, active_key)
    if active_key is None:
        st.session_state.pop("active_marker", None)
    else:
        st.session_state["active_marker"] = active_key
    if clicked is not None:
        state = ds.select_group(state, clicked.group)

    active = next((m for m in plan.markers if m.key == active_key), None)
    if active is not None:
        render_info_panel(active.group, cfg.get("links", {}))

    return state


def render_table_tab(state: ds.DashboardState, plan: RenderPlan, cfg: Dict[str, Any]) -> ds.DashboardState:
    """
    Render the table with selected rows first. Checkbox edits toggle the
    selection; the table is rebuilt from scratch afterwards.
    """
    df = build_table_frame(plan, cfg.get("links", {}))
    if df.empty:
        st.warning("No contracts match the current filter.")
        return state

    editor_key = f"contract_table_{state.applied_token}_{hash(state.selection)}_{hash(state.criterion)}"
    edited = st.data_editor(
        df,
        key=editor_key,
        hide_index=True,
        use_container_width=True,
        height=500,
        disabled=[c for c in df.columns if c != SELECTED_COL],
        column_config={
            SELECTED_COL: st.column_config.CheckboxColumn(SELECTED_COL, width="small"),
            LOOKUP_COL: st.column_config.LinkColumn(LOOKUP_COL, display_text="Open"),
            NAVIGATE_COL: st.column_config.LinkColumn(NAVIGATE_COL, display_text="Go"),
            MAP_COL: st.column_config.LinkColumn(MAP_COL, display_text="Map"),
        },
    )

    for row, checked in zip(plan.rows, edited[SELECTED_COL].tolist()):
        if bool(checked) != row.selected:
            state = ds.set_selected(state, row.record.contract_no, bool(checked))

    st.download_button(
        "Download CSV",
        export_csv(state),
        f"contracts_{state.criterion.kind}.csv",
        "text/csv",
    )
    return state
