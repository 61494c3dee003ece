"""
Filter Engine

One active criterion at a time derives the visible subset from the full
dataset. A new criterion replaces the previous one; there is no composition.
"""

from __future__ import annotations
import re
from dataclasses import dataclass
from typing import FrozenSet, List, Optional, Sequence

from src.core.errors import FilterValidationError
from src.core.schema import ContractRecord, parse_int

ALL = "all"
DELAY = "delay"
FLAG = "flag"
SELECTED = "selected"

FLAG_FIELDS = ("toner_check", "viko_check")

_THRESHOLD = re.compile(r"^[+-]?\d+$")


@dataclass(frozen=True)
class Criterion:
    kind: str = ALL
    threshold: Optional[int] = None
    flag: Optional[str] = None

    @classmethod
    def all(cls) -> "Criterion":
        return cls(ALL)

    @classmethod
    def delay_at_least(cls, days: int) -> "Criterion":
        return cls(DELAY, threshold=int(days))

    @classmethod
    def flag_set(cls, name: str) -> "Criterion":
        if name not in FLAG_FIELDS:
            raise ValueError(f"Unknown flag field: {name}")
        return cls(FLAG, flag=name)

    @classmethod
    def selected_only(cls) -> "Criterion":
        return cls(SELECTED)

    def describe(self) -> str:
        if self.kind == DELAY:
            return f"Delay >= {self.threshold} days"
        if self.kind == FLAG:
            return f"{self.flag.replace('_', ' ').title()} = 1"
        if self.kind == SELECTED:
            return "Selected only"
        return "All contracts"


def parse_threshold(raw) -> int:
    """
    Validate a user-entered delay threshold.

    Raises:
        FilterValidationError: if `raw` is not a whole number
    """
    if isinstance(raw, bool):
        raise FilterValidationError("Please enter a number of days.", raw)
    if isinstance(raw, int):
        return raw
    text = str(raw if raw is not None else "").strip()
    if not _THRESHOLD.match(text):
        raise FilterValidationError("Please enter a whole number of days.", raw)
    return int(text)


def _matches(record: ContractRecord, criterion: Criterion, selection: FrozenSet[str]) -> bool:
    if criterion.kind == DELAY:
        days = parse_int(record.delay_days)
        return days is not None and days >= criterion.threshold
    if criterion.kind == FLAG:
        return getattr(record, criterion.flag, None) == 1
    if criterion.kind == SELECTED:
        return record.contract_no in selection
    return True


def apply_criterion(
    records: Sequence[ContractRecord],
    criterion: Criterion,
    selection: FrozenSet[str] = frozenset(),
) -> List[ContractRecord]:
    """Return the records matching `criterion`, in dataset order."""
    if criterion.kind == ALL:
        return list(records)
    return [r for r in records if _matches(r, criterion, selection)]
