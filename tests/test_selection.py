"""
Tests for selection helpers.
"""

from src.core.selection import is_selected, order_selected_first, select_many, toggle


class TestToggle:
    def test_toggle_twice_restores(self):
        start = frozenset({"A"})
        assert toggle(toggle(start, "B"), "B") == start
        assert toggle(toggle(start, "A"), "A") == start

    def test_toggle_adds_and_removes(self):
        assert toggle(frozenset(), "A") == {"A"}
        assert toggle(frozenset({"A"}), "A") == frozenset()


class TestSelectMany:
    def test_adds_without_deselecting(self):
        assert select_many(frozenset({"A"}), ["A", "B"]) == {"A", "B"}


class TestOrderSelectedFirst:
    def test_stable_partition(self, make_record):
        records = [make_record(n) for n in ["1", "2", "3", "4", "5"]]
        out = order_selected_first(records, frozenset({"4", "2"}))
        assert [r.contract_no for r in out] == ["2", "4", "1", "3", "5"]

    def test_nothing_selected_keeps_order(self, three_records):
        assert order_selected_first(three_records, frozenset()) == three_records

    def test_is_selected(self, three_records):
        assert is_selected(frozenset({"A"}), three_records[0])
        assert not is_selected(frozenset({"A"}), three_records[1])
