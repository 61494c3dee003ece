"""
Tests for contract DataFrame models.
"""

import math

import pandas as pd

from models.contracts import (
    LOOKUP_COL,
    MAP_COL,
    NAVIGATE_COL,
    SELECTED_COL,
    build_table_frame,
    export_csv,
    records_to_frame,
    summary_stats,
)
from src.core import state as ds
from src.core.render import render_state
from src.core.schema import SCHEMAS


class TestRecordsToFrame:
    def test_types(self, make_record):
        df = records_to_frame(
            [make_record("A", 37.0, 127.0, toner=1, viko=None), make_record("B", math.nan, math.nan, toner=0)],
            SCHEMAS["v3"],
        )
        assert list(df.columns) == SCHEMAS["v3"].names
        assert df["latitude"].dtype == float
        assert str(df["toner_check"].dtype) == "Int64"
        assert df["viko_check"].isna().all()
        assert math.isnan(df.loc[1, "latitude"])

    def test_empty(self):
        df = records_to_frame([], SCHEMAS["v1"])
        assert df.empty
        assert list(df.columns) == SCHEMAS["v1"].names


class TestTableFrame:
    def test_columns_and_order(self, three_records):
        st = ds.load_dataset(ds.new_state("v1"), three_records)
        st = ds.toggle_selection(st, "B")
        df = build_table_frame(render_state(st), {"contract_lookup": "https://erp/c/{contract_no}"})
        assert df.columns[0] == SELECTED_COL
        assert list(df.columns[-3:]) == [LOOKUP_COL, NAVIGATE_COL, MAP_COL]
        assert df["Contract No"].tolist() == ["B", "A", "C"]
        assert df[SELECTED_COL].tolist() == [True, False, False]
        assert df.loc[0, LOOKUP_COL] == "https://erp/c/B"

    def test_no_lookup_template(self, three_records):
        st = ds.load_dataset(ds.new_state("v1"), three_records)
        df = build_table_frame(render_state(st))
        assert df[LOOKUP_COL].isna().all()

    def test_empty_plan(self):
        df = build_table_frame(render_state(ds.new_state()))
        assert df.empty
        assert SELECTED_COL in df.columns


class TestSummaryAndExport:
    def test_summary(self, three_records):
        st = ds.load_dataset(ds.new_state("v3"), three_records)
        st = ds.toggle_selection(st, "A")
        stats = summary_stats(st, render_state(st))
        assert stats == {"total": 3, "visible": 1, "markers": 1, "selected": 1, "unmapped": 0}

    def test_export_visible_only(self, three_records):
        st = ds.load_dataset(ds.new_state("v3"), three_records)
        text = export_csv(st)
        lines = text.strip().splitlines()
        assert lines[0].startswith("contract_no,")
        assert len(lines) == 2
        assert lines[1].startswith("C,")
