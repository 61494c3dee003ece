"""
Tests for location grouping.
"""

import math
from collections import Counter

from src.core.grouping import UNMAPPED_KEY, group_by_location, location_key


class TestGroupByLocation:
    def test_two_groups_in_order(self, three_records):
        groups = group_by_location(three_records)
        assert [g.contract_nos for g in groups] == [["A", "B"], ["C"]]

    def test_partition(self, make_record):
        records = [
            make_record("1", 37.0, 127.0),
            make_record("2", 36.0, 128.0),
            make_record("3", 37.0, 127.0),
            make_record("4", math.nan, math.nan),
            make_record("5", 36.0, 128.0),
        ]
        groups = group_by_location(records)
        flattened = [r for g in groups for r in g.records]
        assert Counter(flattened) == Counter(records)
        assert sum(len(g) for g in groups) == len(records)

    def test_first_seen_order_not_sorted(self, make_record):
        records = [make_record("1", 38.0, 128.0), make_record("2", 35.0, 126.0)]
        assert [g.contract_nos for g in group_by_location(records)] == [["1"], ["2"]]

    def test_no_epsilon_tolerance(self, make_record):
        records = [make_record("1", 0.1 + 0.2, 127.0), make_record("2", 0.3, 127.0)]
        assert len(group_by_location(records)) == 2

    def test_nan_coordinates_grouped_together(self, make_record):
        records = [
            make_record("1", math.nan, math.nan),
            make_record("2", 37.0, 127.0),
            make_record("3", math.nan, math.nan),
        ]
        groups = group_by_location(records)
        assert groups[0].key == UNMAPPED_KEY
        assert groups[0].contract_nos == ["1", "3"]
        assert not groups[0].is_mappable
        assert groups[1].is_mappable

    def test_empty(self):
        assert group_by_location([]) == []


class TestLocationKey:
    def test_format(self, make_record):
        assert location_key(make_record("1", 37.1, 127.1)) == "37.1,127.1"

    def test_nan(self, make_record):
        assert location_key(make_record("1", math.nan, math.nan)) == "NaN,NaN"

    def test_signed_zero_same_key(self, make_record):
        assert location_key(make_record("1", -0.0, 127.0)) == location_key(make_record("2", 0.0, 127.0))
        assert location_key(make_record("1", 0.0, -0.0)) == "0.0,0.0"

    def test_signed_zero_one_group(self, make_record):
        groups = group_by_location([make_record("1", -0.0, 127.0), make_record("2", 0.0, 127.0)])
        assert [g.contract_nos for g in groups] == [["1", "2"]]
