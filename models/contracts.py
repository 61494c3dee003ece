"""
Contract table models - DataFrames built from dashboard state for display
and download.
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Sequence

import pandas as pd

from src.core import links
from src.core.render import RenderPlan
from src.core.schema import ContractRecord, CsvSchema
from src.core.state import DashboardState

SELECTED_COL = "Selected"
LOOKUP_COL = "Lookup"
NAVIGATE_COL = "Navigate"
MAP_COL = "Map"


def records_to_frame(records: Sequence[ContractRecord], schema: CsvSchema) -> pd.DataFrame:
    """
    Typed DataFrame of records, one column per schema column.

    Coordinates are float (NaN when missing), flags nullable Int64.
    """
    rows = [{name: getattr(r, name) for name in schema.names} for r in records]
    df = pd.DataFrame(rows, columns=schema.names)
    if df.empty:
        return df

    for col in schema.columns:
        if col.kind == "float":
            df[col.name] = pd.to_numeric(df[col.name], errors="coerce").astype(float)
        elif col.kind == "flag":
            df[col.name] = pd.array(
                [pd.NA if v is None else v for v in df[col.name]], dtype="Int64"
            )
    return df


def _row_links(record: ContractRecord, link_cfg: Dict[str, Any]) -> Dict[str, Optional[str]]:
    return {
        LOOKUP_COL: links.contract_lookup_url(record.contract_no, link_cfg.get("contract_lookup")),
        NAVIGATE_COL: links.navigation_url(
            record.latitude,
            record.longitude,
            name=record.company_name,
            app_name=link_cfg.get("app_name", ""),
            template=link_cfg.get("navigation"),
        ),
        MAP_COL: links.map_search_url(record.address, link_cfg.get("map_search")),
    }


def build_table_frame(plan: RenderPlan, link_cfg: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    """
    Table view DataFrame: a Selected checkbox column, the formatted cells,
    then deep-link columns. Row order is the plan's (selected first).
    """
    link_cfg = link_cfg or {}
    rows = []
    for row in plan.rows:
        out = {SELECTED_COL: row.selected}
        out.update(dict(zip(plan.headers, row.cells)))
        out.update(_row_links(row.record, link_cfg))
        rows.append(out)

    columns = [SELECTED_COL, *plan.headers, LOOKUP_COL, NAVIGATE_COL, MAP_COL]
    return pd.DataFrame(rows, columns=columns)


def summary_stats(state: DashboardState, plan: RenderPlan) -> Dict[str, int]:
    return {
        "total": len(state.full_dataset),
        "visible": len(state.visible),
        "markers": len(plan.markers),
        "selected": len(state.selection),
        "unmapped": plan.unmapped,
    }


def export_csv(state: DashboardState) -> str:
    """Visible subset as CSV text, in dataset order."""
    return records_to_frame(state.visible, state.schema).to_csv(index=False)
