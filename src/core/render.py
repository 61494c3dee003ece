"""
Render instructions for the map and table surfaces.

Pure functions from DashboardState to plain data; the Streamlit views and
plotly charts consume these and never touch the dataset directly.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from src.core.grouping import LocationGroup
from src.core.schema import ContractRecord, CsvSchema
from src.core.selection import order_selected_first
from src.core.state import DashboardState


@dataclass(frozen=True)
class MarkerSpec:
    key: str
    latitude: float
    longitude: float
    title: str
    contract_nos: Tuple[str, ...]
    group: LocationGroup

    @property
    def count(self) -> int:
        return len(self.contract_nos)


@dataclass(frozen=True)
class TableRow:
    record: ContractRecord
    selected: bool
    cells: Tuple[str, ...]


@dataclass(frozen=True)
class RenderPlan:
    markers: Tuple[MarkerSpec, ...]
    rows: Tuple[TableRow, ...]
    headers: Tuple[str, ...]
    unmapped: int


def marker_title(group: LocationGroup) -> str:
    return f"Contract No: {', '.join(group.contract_nos)} (contracts: {len(group)})"


def info_panel_lines(group: LocationGroup) -> List[str]:
    lines = [f"Contract No: {no}" for no in group.contract_nos]
    lines.append(f"Contracts: {len(group)}")
    return lines


def build_markers(groups: Sequence[LocationGroup]) -> List[MarkerSpec]:
    """One marker per mappable group. Groups with NaN coordinates are left off the map."""
    return [
        MarkerSpec(
            key=g.key,
            latitude=g.latitude,
            longitude=g.longitude,
            title=marker_title(g),
            contract_nos=tuple(g.contract_nos),
            group=g,
        )
        for g in groups
        if g.is_mappable
    ]


def _format_coord(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    return f"{value:.6f}"


def _format_flag(value: Optional[int]) -> str:
    return "" if value is None else str(value)


def format_cells(record: ContractRecord, schema: CsvSchema) -> Tuple[str, ...]:
    cells = []
    for col in schema.columns:
        value = getattr(record, col.name)
        if col.name in ("latitude", "longitude"):
            cells.append(_format_coord(value))
        elif col.kind == "flag":
            cells.append(_format_flag(value))
        else:
            cells.append(value)
    return tuple(cells)


def build_table_rows(
    records: Sequence[ContractRecord],
    selection: frozenset,
    schema: CsvSchema,
) -> List[TableRow]:
    """Rows for a full table rebuild, selected contracts first."""
    return [
        TableRow(record=r, selected=r.contract_no in selection, cells=format_cells(r, schema))
        for r in order_selected_first(records, selection)
    ]


def render_state(state: DashboardState) -> RenderPlan:
    schema = state.schema
    return RenderPlan(
        markers=tuple(build_markers(state.markers)),
        rows=tuple(build_table_rows(state.visible, state.selection, schema)),
        headers=tuple(schema.label(n) for n in schema.names),
        unmapped=sum(len(g) for g in state.markers if not g.is_mappable),
    )
