"""
Tests for the CSV line tokenizer.
"""

from src.core.tokenizer import parse_csv_row, split_rows


class TestParseCsvRow:
    def test_quoted_comma_kept(self):
        assert parse_csv_row('a,"b,c",d') == ["a", "b,c", "d"]

    def test_fields_trimmed(self):
        assert parse_csv_row("  a , b ,c  ") == ["a", "b", "c"]

    def test_unmatched_quote_runs_to_end(self):
        assert parse_csv_row('a,"b,c,d') == ["a", "b,c,d"]

    def test_blank_line_single_empty_field(self):
        assert parse_csv_row("") == [""]

    def test_empty_fields_preserved(self):
        assert parse_csv_row("a,,c,") == ["a", "", "c", ""]

    def test_quotes_stripped_mid_field(self):
        # no doubled-quote escaping: both quotes just toggle
        assert parse_csv_row('say ""hi"",x') == ["say hi", "x"]

    def test_carriage_return_trimmed(self):
        assert parse_csv_row("a,b\r") == ["a", "b"]


class TestSplitRows:
    def test_header_skipped(self):
        rows = split_rows("h1,h2\n1,2\n3,4")
        assert rows == [["1", "2"], ["3", "4"]]

    def test_trailing_newline_gives_blank_row(self):
        rows = split_rows("h\n1,2\n")
        assert rows[-1] == [""]

    def test_keep_header(self):
        assert split_rows("h1,h2", skip_header=False) == [["h1", "h2"]]
