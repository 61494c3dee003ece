"""
CSV line tokenizer.

Minimal quoted-field splitter for the contract snapshots. A double quote
toggles quoted mode and is dropped from the output; commas inside quotes are
kept as content. Doubled quotes ("") are not an escape, so a literal quote
cannot appear inside a field.
"""

from typing import List


def parse_csv_row(row: str) -> List[str]:
    """
    Split one line into trimmed fields.

    An unmatched quote simply runs to the end of the line.
    A blank line yields a single empty field.
    """
    columns = []
    current = []
    inside_quotes = False

    for char in row:
        if char == "," and not inside_quotes:
            columns.append("".join(current).strip())
            current = []
        elif char == '"':
            inside_quotes = not inside_quotes
        else:
            current.append(char)

    columns.append("".join(current).strip())
    return columns


def split_rows(text: str, skip_header: bool = True) -> List[List[str]]:
    """Tokenize every line of `text`, dropping the header line."""
    lines = text.split("\n")
    if skip_header:
        lines = lines[1:]
    return [parse_csv_row(line) for line in lines]
