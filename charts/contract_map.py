"""
Contract map chart - one marker per location group.
"""

import numpy as np
import plotly.graph_objects as go
from typing import FrozenSet, Optional, Sequence

from src.core.render import MarkerSpec

COLOR_DEFAULT = "#1f77b4"
COLOR_SELECTED = "#FF4444"
COLOR_ACTIVE = "#00CC44"


def _marker_color(m: MarkerSpec, selection: FrozenSet[str], active_key: Optional[str]) -> str:
    if active_key is not None and m.key == active_key:
        return COLOR_ACTIVE
    if any(no in selection for no in m.contract_nos):
        return COLOR_SELECTED
    return COLOR_DEFAULT


def plot_contract_map(
    markers: Sequence[MarkerSpec],
    center_lat: float = 37.5665,
    center_lon: float = 126.9780,
    zoom: float = 11,
    style: str = "carto-positron",
    height: int = 600,
    selection: FrozenSet[str] = frozenset(),
    active_key: Optional[str] = None,
    access_token: Optional[str] = None,
):
    """
    Build the contract map.
    
    Args:
        markers: Marker specs in group order; point index == marker index
        center_lat, center_lon, zoom: Initial view
        style: Mapbox style name (token-free styles work without access_token)
        selection: Selected contract numbers, drawn in red
        active_key: Key of the clicked marker, drawn in green
    
    Returns:
        Plotly figure
    """
    fig = go.Figure()

    counts = np.array([m.count for m in markers], dtype=float)
    sizes = (10 + 4 * np.sqrt(counts - 1)).tolist() if len(counts) else []

    fig.add_trace(go.Scattermapbox(
        lat=[m.latitude for m in markers],
        lon=[m.longitude for m in markers],
        mode="markers",
        marker={
            "size": sizes,
            "color": [_marker_color(m, selection, active_key) for m in markers],
            "opacity": 0.85,
        },
        text=[m.title for m in markers],
        customdata=[m.key for m in markers],
        hovertemplate="%{text}<extra></extra>",
        name="Contracts",
    ))

    mapbox = {
        "style": style,
        "center": {"lat": center_lat, "lon": center_lon},
        "zoom": zoom,
    }
    if access_token:
        mapbox["accesstoken"] = access_token

    fig.update_layout(
        mapbox=mapbox,
        height=height,
        margin=dict(l=0, r=0, t=0, b=0),
        showlegend=False,
        clickmode="event+select",
    )
    return fig
