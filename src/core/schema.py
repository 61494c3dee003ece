"""
Contract Record Schema

Declared column layouts for each contract CSV shape and a generic decoder
that maps tokenized fields onto ContractRecord by column name.

Shapes:
- v1: contract_no, company_name, address, rental_machine, delay_days, latitude, longitude
- v2: v1 + toner_check
- v3: v2 + viko_check

Decoding never raises: missing text -> "", bad float -> NaN, bad flag -> None.
"""

from __future__ import annotations
import logging
import math
import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from src.core.errors import ConfigError
from src.core.tokenizer import split_rows

logger = logging.getLogger(__name__)

_FLOAT_PREFIX = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")

TEXT = "text"
FLOAT = "float"
FLAG = "flag"


@dataclass(frozen=True)
class ContractRecord:
    contract_no: str = ""
    company_name: str = ""
    address: str = ""
    rental_machine: str = ""
    delay_days: str = ""
    latitude: float = math.nan
    longitude: float = math.nan
    toner_check: Optional[int] = None
    viko_check: Optional[int] = None

    @property
    def has_location(self) -> bool:
        return not (math.isnan(self.latitude) or math.isnan(self.longitude))


@dataclass(frozen=True)
class Column:
    name: str
    kind: str = TEXT
    label: str = ""


@dataclass(frozen=True)
class CsvSchema:
    """
    Ordered column layout of one contract data source.

    `default_delay_days` is the delay threshold applied right after load;
    None means the default view is every record.
    """
    name: str
    columns: Tuple[Column, ...]
    default_delay_days: Optional[int] = None
    flags: Tuple[str, ...] = field(default=())

    @property
    def names(self) -> List[str]:
        return [c.name for c in self.columns]

    def label(self, name: str) -> str:
        for c in self.columns:
            if c.name == name:
                return c.label or name
        return name


_BASE_COLUMNS = (
    Column("contract_no", TEXT, "Contract No"),
    Column("company_name", TEXT, "Company"),
    Column("address", TEXT, "Address"),
    Column("rental_machine", TEXT, "Rental Machine"),
    Column("delay_days", TEXT, "Delay Days"),
    Column("latitude", FLOAT, "Latitude"),
    Column("longitude", FLOAT, "Longitude"),
)

SCHEMAS: Dict[str, CsvSchema] = {
    "v1": CsvSchema("v1", _BASE_COLUMNS),
    "v2": CsvSchema(
        "v2",
        _BASE_COLUMNS + (Column("toner_check", FLAG, "Toner Check"),),
        default_delay_days=90,
        flags=("toner_check",),
    ),
    "v3": CsvSchema(
        "v3",
        _BASE_COLUMNS + (
            Column("toner_check", FLAG, "Toner Check"),
            Column("viko_check", FLAG, "Viko Check"),
        ),
        default_delay_days=90,
        flags=("toner_check", "viko_check"),
    ),
}


def get_schema(name: str) -> CsvSchema:
    try:
        return SCHEMAS[name]
    except KeyError:
        raise ConfigError(f"Unknown contract schema '{name}' (known: {sorted(SCHEMAS)})") from None


def parse_float(value: Optional[str]) -> float:
    """Parse the leading number of `value`; NaN when there is none."""
    if value is None:
        return math.nan
    m = _FLOAT_PREFIX.match(value.strip())
    if not m:
        return math.nan
    return float(m.group(0))


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of `value` ("120 days" -> 120, "12.5" -> 12)."""
    if value is None:
        return None
    m = _INT_PREFIX.match(value.strip())
    if not m:
        return None
    return int(m.group(0))


def _coerce(raw: Optional[str], kind: str):
    if kind == FLOAT:
        return parse_float(raw)
    if kind == FLAG:
        return parse_int(raw)
    return raw if raw is not None else ""


def decode_row(fields: Sequence[str], schema: CsvSchema) -> ContractRecord:
    """Map positional fields onto a record. Short rows leave trailing columns empty."""
    values = {}
    for i, col in enumerate(schema.columns):
        raw = fields[i] if i < len(fields) else None
        values[col.name] = _coerce(raw, col.kind)
    return ContractRecord(**values)


def decode_csv(text: str, schema: CsvSchema) -> List[ContractRecord]:
    """
    Decode a whole contract CSV (header line included) in file order.

    Blank lines are skipped; every other line becomes a record, however
    malformed.
    """
    records = []
    skipped = 0
    for fields in split_rows(text, skip_header=True):
        if len(fields) == 1 and not fields[0]:
            skipped += 1
            continue
        records.append(decode_row(fields, schema))

    unmapped = sum(1 for r in records if not r.has_location)
    logger.debug(
        "Decoded %d records with schema %s (%d blank lines, %d without coordinates)",
        len(records), schema.name, skipped, unmapped,
    )
    return records
