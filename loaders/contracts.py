"""
Contract snapshot loading for the dashboard.

Sources are either local paths or http(s) URLs. Fetch failures are logged
and surface as an empty dataset plus an error message; they never raise
into the page.
"""

from __future__ import annotations
import logging
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional, Tuple

import pandas as pd
import requests

from src.core.errors import FetchError
from src.core.schema import ContractRecord, decode_csv, get_schema
from src.core.tokenizer import split_rows

logger = logging.getLogger(__name__)

INVENTORY_COLUMNS = ["Category", "Product", "Model", "Color", "Stock"]


def _is_url(source: str) -> bool:
    return source.startswith("http://") or source.startswith("https://")


def contract_source(base: str, template: str, day: Optional[date] = None) -> str:
    """
    Resolve the contract CSV location for a snapshot date.

    Args:
        base: Local directory or base URL
        template: File name, may contain {date} (YYYYMMDD)
        day: Snapshot date; defaults to today
    """
    day = day or date.today()
    name = template.format(date=day.strftime("%Y%m%d"))
    return resolve_source(base, name)


def resolve_source(base: str, name: str) -> str:
    if _is_url(name) or not base:
        return name
    if _is_url(base):
        return base.rstrip("/") + "/" + name.lstrip("/")
    return str(Path(base) / name)


def fetch_text(source: str, timeout: float = 20) -> str:
    """
    Read a text source (URL or path).

    Raises:
        FetchError: on HTTP errors, network errors or unreadable files
    """
    if _is_url(source):
        try:
            resp = requests.get(source, timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise FetchError(source, str(e)) from e
        return resp.content.decode("utf-8-sig", errors="replace")

    try:
        return Path(source).read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        raise FetchError(source, str(e)) from e


def fetch_contracts(source: str, schema_name: str, timeout: float = 20) -> List[ContractRecord]:
    """
    Fetch and decode a contract CSV.

    Raises:
        FetchError: if the source cannot be read
    """
    schema = get_schema(schema_name)
    records = decode_csv(fetch_text(source, timeout=timeout), schema)
    logger.info("Loaded %d contracts from %s", len(records), source)
    return records


def fetch_inventory(source: str, timeout: float = 20) -> pd.DataFrame:
    """
    Fetch the warehouse stock list.

    Rows are kept verbatim; short rows are padded with empty cells.
    """
    text = fetch_text(source, timeout=timeout)

    width = len(INVENTORY_COLUMNS)
    rows = []
    for fields in split_rows(text, skip_header=True):
        if len(fields) == 1 and not fields[0]:
            continue
        rows.append((fields + [""] * width)[:width])

    return pd.DataFrame(rows, columns=INVENTORY_COLUMNS)


def fetch_date_marker(source: str, timeout: float = 20) -> str:
    return fetch_text(source, timeout=timeout).strip()


# The load_* wrappers never raise. `fetch` lets the dashboard pass a
# st.cache_data-wrapped fetcher: failures raise inside it, so they are not cached.

def load_contracts(
    source: str,
    schema_name: str,
    timeout: float = 20,
    fetch: Optional[Callable] = None,
) -> Tuple[List[ContractRecord], Optional[str]]:
    """
    Returns:
        (records, error) - records is empty and error set when the fetch failed
    """
    try:
        return (fetch or fetch_contracts)(source, schema_name, timeout), None
    except FetchError as e:
        logger.error("Error fetching contract data: %s", e)
        return [], str(e)


def load_inventory(source: str, timeout: float = 20, fetch: Optional[Callable] = None) -> pd.DataFrame:
    """Warehouse stock list, or an empty DataFrame with the inventory columns on failure."""
    try:
        return (fetch or fetch_inventory)(source, timeout)
    except FetchError as e:
        logger.error("Error fetching inventory data: %s", e)
        return pd.DataFrame(columns=INVENTORY_COLUMNS)


def load_date_marker(source: str, timeout: float = 20, fetch: Optional[Callable] = None) -> str:
    """Text of the update-date marker file, or '' if unavailable."""
    try:
        return (fetch or fetch_date_marker)(source, timeout)
    except FetchError as e:
        logger.error("Error fetching update date: %s", e)
        return ""
