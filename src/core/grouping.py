"""
Location grouping for map markers.

Records are grouped by the exact text of their coordinates, so two points
that differ only by float rounding stay separate markers.
"""

from __future__ import annotations
import math
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from src.core.schema import ContractRecord

UNMAPPED_KEY = "NaN,NaN"


def _coord_text(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if value == 0:
        # -0.0 and 0.0 are the same location
        return "0.0"
    return repr(float(value))


def location_key(record: ContractRecord) -> str:
    """'<lat>,<lon>' key; NaN coordinates render as 'NaN'."""
    return f"{_coord_text(record.latitude)},{_coord_text(record.longitude)}"


@dataclass(frozen=True)
class LocationGroup:
    key: str
    records: Tuple[ContractRecord, ...]

    @property
    def latitude(self) -> float:
        return self.records[0].latitude

    @property
    def longitude(self) -> float:
        return self.records[0].longitude

    @property
    def contract_nos(self) -> List[str]:
        return [r.contract_no for r in self.records]

    @property
    def is_mappable(self) -> bool:
        return self.records[0].has_location

    def __len__(self) -> int:
        return len(self.records)


def group_by_location(records: Sequence[ContractRecord]) -> List[LocationGroup]:
    """
    Partition records by location key, in order of first appearance.

    Every input record lands in exactly one group. Records with any NaN
    coordinate share groups like any other key (e.g. 'NaN,NaN').
    """
    grouped: Dict[str, List[ContractRecord]] = {}
    for record in records:
        grouped.setdefault(location_key(record), []).append(record)
    return [LocationGroup(key, tuple(members)) for key, members in grouped.items()]
